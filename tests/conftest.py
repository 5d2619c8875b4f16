"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Helpers to run the engine on in-memory corpora.
"""

import re
import sys
from pathlib import Path
from typing import Dict, Optional

import pytest

# Add src to path so we can import 'cjsify' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from cjsify.config import RuntimeConfig  # noqa: E402
from cjsify.core.conversion_result import ConversionResult  # noqa: E402
from cjsify.core.engine import ModularizeEngine  # noqa: E402


def compact(code: str) -> str:
  """Strips all whitespace so assertions do not depend on pretty-printer layout."""
  return re.sub(r"\s+", "", code)


def references(code: str, name: str) -> int:
  """Counts whole-word occurrences of ``name``."""
  return len(re.findall(rf"(?<![\w$]){re.escape(name)}(?![\w$])", code))


@pytest.fixture
def run_corpus():
  """
  Returns a callable converting ``{path: source}`` with an optional config.
  """

  def _run(sources: Dict[str, str], config: Optional[RuntimeConfig] = None, graph: bool = False) -> ConversionResult:
    return ModularizeEngine(config or RuntimeConfig()).run(sources, build_graph=graph)

  return _run
