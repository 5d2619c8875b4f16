"""
Ingestion of a legacy corpus.

Two steps:

1.  ``read_sources`` walks an input directory and returns the raw text of every
    code file and shader chunk file, keyed by corpus-relative path.
2.  ``ingest`` parses code files into ``FileUnit`` objects (ids follow sorted
    path order) and collects shader chunks into an ordered table keyed by
    file stem.

A parse failure in any file is fatal and propagates as ``SourceParseError``.
"""

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping

from cjsify.config import RuntimeConfig, normalize_unit_path
from cjsify.core.units import FileUnit
from cjsify.utils.js_ast import collect_names, parse_source


@dataclass
class Ingestion:
  """
  Result of the ingestion phase.
  """

  files: Dict[str, FileUnit] = field(default_factory=dict)
  """Code files by path, in id order."""

  shader_chunks: Dict[str, str] = field(default_factory=dict)
  """Shader chunk name -> raw text, in collection order."""


def read_sources(input_dir: Path, config: RuntimeConfig) -> Dict[str, str]:
  """
  Reads every code and shader chunk file below ``input_dir``.

  Args:
      input_dir: Root of the legacy corpus.
      config: Supplies the extensions of both file categories.

  Returns:
      Mapping of ``./relative/path`` to file contents, sorted by path.
  """
  wanted = {config.code_extension, config.shader_extension}
  sources: Dict[str, str] = {}

  for file_path in sorted(input_dir.rglob("*")):
    if not file_path.is_file() or file_path.suffix not in wanted:
      continue
    rel_path = normalize_unit_path(file_path.relative_to(input_dir).as_posix())
    sources[rel_path] = file_path.read_text(encoding="utf-8")

  return sources


def ingest(sources: Mapping[str, str], config: RuntimeConfig) -> Ingestion:
  """
  Parses code files and collects shader chunks.

  Args:
      sources: Raw file contents keyed by corpus-relative path.
      config: Runtime configuration.

  Returns:
      Ingestion: The file units and shader chunk table.

  Raises:
      SourceParseError: If a code file is not valid ES5.
  """
  result = Ingestion()

  normalized = {normalize_unit_path(path): text for path, text in sources.items()}

  for path in sorted(normalized):
    contents = normalized[path]
    name = posixpath.basename(path)

    if path.endswith(config.shader_extension):
      result.shader_chunks[name[: -len(config.shader_extension)]] = contents

    elif path.endswith(config.code_extension):
      program = parse_source(contents, path)
      result.files[path] = FileUnit(
        path=path,
        id=len(result.files),
        program=program,
        basename=name[: -len(config.code_extension)],
        names=collect_names(program),
        is_root=path == config.root_module_path,
      )

  return result
