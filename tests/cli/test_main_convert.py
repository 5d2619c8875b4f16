"""
Tests for the command line interface.

Verifies argument handling and a full conversion through `main`.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from cjsify.cli.__main__ import main
from tests.conftest import compact


@pytest.fixture
def corpus(tmp_path):
  """Small corpus plus a template directory holding the manifest files."""
  src = tmp_path / "src"
  (src / "math").mkdir(parents=True)
  (src / "Three.js").write_text("var THREE = { REVISION: '73' };", encoding="utf-8")
  (src / "math" / "Foo.js").write_text("THREE.Foo = function () {};", encoding="utf-8")
  (src / "Bar.js").write_text("THREE.Bar = function () { return new THREE.Foo(); };", encoding="utf-8")
  (src / "Bad.js").write_text("var x = THREE[key];", encoding="utf-8")

  templates = tmp_path / "dist"
  templates.mkdir()
  (templates / "package.json").write_text('{"name": "three"}', encoding="utf-8")
  (templates / "README.md").write_text("# three", encoding="utf-8")
  return tmp_path


def test_missing_output_exits_with_usage_error():
  with pytest.raises(SystemExit) as exc:
    main(["--input", "src"])
  assert exc.value.code == 2


def test_missing_input_exits_with_usage_error():
  with pytest.raises(SystemExit) as exc:
    main(["--output", "build"])
  assert exc.value.code == 2


def test_dispatch_to_handler():
  with patch("cjsify.cli.handlers.handle_convert", return_value=0) as handler:
    assert main(["--input", "in", "--output", "out", "--config", "namespace=LIB"]) == 0

  handler.assert_called_once_with(Path("in"), Path("out"), None, {"namespace": "LIB"}, None)


def test_input_directory_not_found(tmp_path):
  assert main(["--input", str(tmp_path / "nope"), "--output", str(tmp_path / "out")]) == 1


def test_invalid_config_override(corpus):
  args = ["--input", str(corpus / "src"), "--output", str(corpus / "out"), "--config", "namespace=not valid"]
  assert main(args) == 1


def test_parse_error_fails(corpus):
  (corpus / "src" / "Broken.js").write_text("THREE.Broken = ;", encoding="utf-8")
  assert main(["--input", str(corpus / "src"), "--output", str(corpus / "out")]) == 1


def test_full_conversion(corpus):
  """
  Scenario: Convert the corpus with graph and trace output.
  Expectation: Units, index, manifests, graph and trace are written; the bad file is skipped.
  """
  out = corpus / "out"
  graph = corpus / "graph.json"
  trace = corpus / "trace.json"

  exit_code = main(
    [
      "--input",
      str(corpus / "src"),
      "--output",
      str(out),
      "--graph",
      str(graph),
      "--json-trace",
      str(trace),
      "--config",
      f"template_dir={corpus / 'dist'}",
    ]
  )
  assert exit_code == 0

  assert (out / "math" / "Foo.js").is_file()
  assert not (out / "Bad.js").exists()
  assert "varFooModule=require('./math/Foo');" in compact((out / "Bar.js").read_text(encoding="utf-8"))
  assert "exports.Foo=require('./math/Foo').Foo;" in compact((out / "index.js").read_text(encoding="utf-8"))
  assert (out / "package.json").read_text(encoding="utf-8") == '{"name": "three"}'
  assert (out / "README.md").is_file()

  graph_data = json.loads(graph.read_text(encoding="utf-8"))
  assert sorted(node["label"] for node in graph_data["nodes"]) == ["Bar", "Foo", "Three"]
  assert len(graph_data["edges"]) == 1

  trace_data = json.loads(trace.read_text(encoding="utf-8"))
  assert any(event["type"] == "file_excluded" for event in trace_data)


def test_missing_templates_are_skipped(corpus):
  out = corpus / "out"
  args = ["--input", str(corpus / "src"), "--output", str(out), "--config", f"template_dir={corpus / 'none'}"]
  assert main(args) == 0
  assert not (out / "package.json").exists()
  assert (out / "index.js").is_file()
