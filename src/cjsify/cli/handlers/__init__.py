from .convert import handle_convert, _print_exclusion_summary

__all__ = [
  "_print_exclusion_summary",
  "handle_convert",
]
