"""
Tests for corpus reading and ingestion.
"""

import pytest

from cjsify.config import RuntimeConfig
from cjsify.core.ingestion import ingest, read_sources
from cjsify.utils.js_ast import SourceParseError


def test_read_sources(tmp_path):
  (tmp_path / "math").mkdir()
  (tmp_path / "math" / "Vector3.js").write_text("THREE.Vector3 = function () {};", encoding="utf-8")
  (tmp_path / "Three.js").write_text("var THREE = {};", encoding="utf-8")
  (tmp_path / "chunk.glsl").write_text("void main() {}", encoding="utf-8")
  (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

  sources = read_sources(tmp_path, RuntimeConfig())
  assert list(sources) == ["./Three.js", "./chunk.glsl", "./math/Vector3.js"]
  assert sources["./chunk.glsl"] == "void main() {}"


def test_ingest_orders_and_annotates():
  """
  Scenario: Unsorted input with a root module and a shader chunk.
  Expectation: Ids follow sorted path order; chunks keyed by stem.
  """
  ingestion = ingest(
    {
      "math/Vector3.js": "THREE.Vector3 = function (x) { this.x = x; };",
      "Three.js": "var THREE = {};",
      "shaders/fog_vertex.glsl": "fogDepth = 1.0;",
    },
    RuntimeConfig(),
  )

  files = ingestion.files
  assert list(files) == ["./Three.js", "./math/Vector3.js"]
  assert [f.id for f in files.values()] == [0, 1]
  assert files["./Three.js"].is_root
  assert not files["./math/Vector3.js"].is_root
  assert files["./math/Vector3.js"].basename == "Vector3"
  assert {"THREE", "x"} <= files["./math/Vector3.js"].names
  assert ingestion.shader_chunks == {"fog_vertex": "fogDepth = 1.0;"}


def test_ingest_parse_failure_is_fatal():
  with pytest.raises(SourceParseError, match="Broken.js"):
    ingest({"./Ok.js": "THREE.Ok = 1;", "./Broken.js": "THREE.Broken = ;"}, RuntimeConfig())
