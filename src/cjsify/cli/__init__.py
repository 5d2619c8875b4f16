"""
CLI Subpackage.

Contains the application entry-point and command handlers.

Modules:
    - ``__main__``: The argparse definition and dispatcher.
    - ``handlers/*``: Implementation modules for the CLI actions.
"""
