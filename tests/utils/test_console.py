"""
Tests for the console proxy and log helpers.
"""

import io

import pytest
from rich.console import Console
from rich.theme import Theme

from cjsify.cli.handlers import _print_exclusion_summary
from cjsify.core.conversion_result import ConversionResult
from cjsify.utils.console import log_success, log_warning, reset_console, set_console


@pytest.fixture
def buffer():
  stream = io.StringIO()
  theme = Theme({"path": "bold blue", "code": "bold magenta"})
  set_console(Console(file=stream, force_terminal=False, width=200, theme=theme))
  yield stream
  reset_console()


def test_log_helpers_follow_console(buffer):
  log_warning("IGNORED [path]./Bad.js[/path] (computed expression)")
  log_success("written out/index.js")

  output = buffer.getvalue()
  assert "IGNORED ./Bad.js (computed expression)" in output
  assert "written out/index.js" in output


def test_exclusion_summary_table(buffer):
  result = ConversionResult(outputs={"./Foo.js": ""}, excluded={"./Bad.js": "computed expression"})
  _print_exclusion_summary(result)

  output = buffer.getvalue()
  assert "Excluded Files" in output
  assert "./Bad.js" in output
  assert "1 converted, 1 excluded" in output


def test_summary_without_exclusions(buffer):
  _print_exclusion_summary(ConversionResult(outputs={"./Foo.js": ""}))
  assert "1/1 files converted" in buffer.getvalue()
