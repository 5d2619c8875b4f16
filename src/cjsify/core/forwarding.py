"""
Aggregate Entry Point.

Collects, in file processing order, the statements re-exporting every provide
of every rewritten unit, and renders them as one ``index.js``:

* a unit with one provide: ``exports.Foo = require('./Foo').Foo;``
* a unit with several: ``var Foo = require('./Foo');`` followed by
  ``exports.A = Foo.A;`` for each name.
"""

import posixpath
from typing import List, Sequence, Set

from calmjs.parse import asttypes

from cjsify.utils.js_ast import RESERVED_WORDS, express, generate_source, js_string, new_program, to_identifier


def relative_module_path(from_path: str, to_path: str, extension: str) -> str:
  """
  Computes the ``require`` specifier of ``to_path`` as seen from ``from_path``.

  Example:
    >>> relative_module_path("./math/Box3.js", "./Three.js", ".js")
    '../Three'
  """
  rel = posixpath.relpath(to_path, posixpath.dirname(from_path) or ".")
  if extension and rel.endswith(extension):
    rel = rel[: -len(extension)]
  if not rel.startswith("../"):
    rel = f"./{rel}"
  return rel


class ForwardingIndex:
  """
  Append-only list of export-forwarding statements.
  """

  def __init__(self, index_path: str, extension: str) -> None:
    """
    Args:
        index_path: Corpus path of the generated entry point.
        extension: Code extension stripped from require specifiers.
    """
    self.index_path = index_path
    self.extension = extension
    self.statements: List[asttypes.Node] = []
    self._names: Set[str] = set(RESERVED_WORDS)

  def add(self, path: str, basename: str, provide_names: Sequence[str]) -> None:
    """
    Appends the forwarding statements for one unit.

    Args:
        path: Corpus path of the unit.
        basename: Unit file name without extension (alias for multi-export units).
        provide_names: Provided names in declaration order.
    """
    if not provide_names:
      return

    specifier = js_string(relative_module_path(self.index_path, path, self.extension))

    if len(provide_names) == 1:
      name = provide_names[0]
      self.statements.append(express(f"exports.{name} = require({specifier}).{name};"))
      return

    alias = self._unique_alias(to_identifier(basename))
    self.statements.append(express(f"var {alias} = require({specifier});"))
    for name in provide_names:
      self.statements.append(express(f"exports.{name} = {alias}.{name};"))

  def generate(self, indent: str = "\t") -> str:
    """Renders the entry point source."""
    return generate_source(new_program(self.statements), self.index_path, indent)

  def _unique_alias(self, alias: str) -> str:
    while alias in self._names:
      alias = f"_{alias}"
    self._names.add(alias)
    return alias
