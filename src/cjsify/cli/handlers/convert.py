"""
Convert Command Handler.

This module implements the `cjsify --input ... --output ...` command.
It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides).
2. Reading the corpus and running the Engine.
3. Writing every rewritten unit and the aggregate entry point.
4. Copying the passthrough manifest files.
5. Writing the optional dependency graph and trace.
"""

import json
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError
from rich.table import Table

from cjsify.config import RuntimeConfig
from cjsify.core.conversion_result import ConversionResult
from cjsify.core.engine import ModularizeEngine
from cjsify.utils.console import console, log_error, log_info, log_success, log_warning
from cjsify.utils.js_ast import SourceGenerationError, SourceParseError


def handle_convert(
  input_path: Path,
  output_path: Path,
  graph_path: Optional[Path],
  settings: Dict[str, Any],
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the conversion of one corpus directory.

  Args:
      input_path: Root directory of the legacy corpus.
      output_path: Directory receiving the CommonJS units.
      graph_path: Optional destination of the dependency graph JSON.
      settings: Configuration overrides from ``--config``.
      json_trace_path: Optional destination of the execution trace JSON.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.is_dir():
    log_error(f"Input directory not found: [path]{input_path}[/path]")
    return 1

  try:
    config = RuntimeConfig.load(search_path=input_path, overrides=settings)
  except (ValidationError, ValueError) as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  engine = ModularizeEngine(config)

  try:
    result = engine.run_directory(input_path, build_graph=graph_path is not None)
  except (SourceParseError, SourceGenerationError) as e:
    log_error(f"Conversion aborted: {e}")
    return 1

  log_info(f"Writing {len(result.outputs)} units to [path]{output_path}[/path]")
  for rel_path, code in result.outputs.items():
    _write(output_path / rel_path, code)

  _write(output_path / config.index_path, result.index_code)

  _copy_passthrough(config, output_path)

  if graph_path is not None and result.graph is not None:
    _write(graph_path, json.dumps(result.graph, indent=2))

  if json_trace_path is not None:
    _write(json_trace_path, json.dumps(result.trace_events, indent=2))

  _print_exclusion_summary(result)
  return 0


def _write(path: Path, contents: str) -> None:
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(contents, encoding="utf-8")
  log_success(f"written [path]{path}[/path]")


def _copy_passthrough(config: RuntimeConfig, output_path: Path) -> None:
  """
  Copies the manifest files verbatim from the template directory.

  Args:
      config: Supplies the template directory and file names.
      output_path: Output root.
  """
  for name in config.passthrough_files:
    source = config.template_dir / name
    if not source.is_file():
      log_warning(f"Template not found, skipped: [path]{source}[/path]")
      continue
    destination = output_path / name
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)
    log_success(f"written [path]{destination}[/path]")


def _print_exclusion_summary(result: ConversionResult) -> None:
  """
  Renders the excluded files as a table.

  Args:
      result: The engine result.
  """
  total = len(result.outputs) + len(result.excluded)

  if not result.has_exclusions:
    log_success(f"Conversion complete: {len(result.outputs)}/{total} files converted.")
    return

  table = Table(title="Excluded Files")
  table.add_column("File", style="cyan")
  table.add_column("Reason", style="red")

  for path, reason in result.excluded.items():
    table.add_row(path, reason)

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {len(result.outputs)} converted, {len(result.excluded)} excluded.")
