"""
Main Entry Point for the cjsify CLI.

Parses arguments and dispatches to the convert handler in
`cjsify.cli.handlers.convert`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from cjsify import __version__
from cjsify.cli import handlers
from cjsify.config import parse_cli_key_values


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Missing ``--input`` or ``--output`` is reported by argparse, which exits
  with status 2.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="cjsify: shared-namespace JavaScript to CommonJS converter")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("--input", type=Path, required=True, help="Input directory of the legacy corpus")
  parser.add_argument("--output", type=Path, required=True, help="Output directory for the CommonJS units")
  parser.add_argument("--graph", type=Path, default=None, help="Write the dependency graph JSON to this file")
  parser.add_argument(
    "--json-trace",
    type=Path,
    default=None,
    help="Dump the execution trace (phases, exclusions, imports) to a JSON file.",
  )
  parser.add_argument(
    "--config",
    nargs="*",
    help="Configuration overrides in key=value format (e.g. namespace=LIB root_module_path=./Lib.js)",
  )

  args = parser.parse_args(argv)

  settings = parse_cli_key_values(args.config)
  return handlers.handle_convert(args.input, args.output, args.graph, settings, args.json_trace)


if __name__ == "__main__":
  sys.exit(main())
