"""
Entry point for module execution (``python -m cjsify``).

This module delegates execution to the CLI handler in ``cjsify.cli.__main__``.
"""

import sys
from cjsify.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
