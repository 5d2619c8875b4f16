"""
Per-file Data Model.

A ``FileUnit`` is created for every code file at ingestion, annotated with its
provides and requires during analysis, and consumed by the Module Rewriter.
Occurrence sites are stored as ``Site`` objects holding the node and its
parent, so later passes rewrite exactly the accesses the analyzer classified.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set

from calmjs.parse import asttypes

from cjsify.enums import ProvideKind
from cjsify.utils.js_ast import RESERVED_WORDS


@dataclass
class Site:
  """
  One property access on the namespace root (``NS.name``).
  """

  parent: asttypes.Node
  """Node holding the access; used to swap the whole access for a local."""

  node: asttypes.Node
  """The dot-accessor itself; its base is the placeholder after marking."""


@dataclass
class ProvideRecord:
  """
  A property the file defines on the namespace root.
  """

  kind: ProvideKind
  sites: List[Site] = field(default_factory=list)


@dataclass
class RequireRecord:
  """
  A property the file uses but does not define.
  """

  sites: List[Site] = field(default_factory=list)


@dataclass(eq=False)
class FileUnit:
  """
  One input module.
  """

  path: str
  """Corpus-relative path in ``./dir/file.js`` form."""

  id: int
  """Ingestion order."""

  program: asttypes.Node
  """The owned syntax tree."""

  basename: str
  """File name without the code extension."""

  names: Set[str] = field(default_factory=set)
  """Identifier names already taken in this file."""

  provides: Dict[str, ProvideRecord] = field(default_factory=dict)
  requires: Dict[str, RequireRecord] = field(default_factory=dict)

  is_root: bool = False
  """True for the module that creates the namespace object."""

  head: List[asttypes.Node] = field(default_factory=list)
  """Declarations emitted above the original body (helpers from the type-check pass)."""

  def unique_name(self, name: str) -> str:
    """
    Reserves a local name that collides with nothing in the file.

    Prefixes underscores until the name is free and not a reserved word.

    Example:
      >>> unit.names = {"instance", "_instance"}
      >>> unit.unique_name("instance")
      '__instance'
    """
    while name in self.names or name in RESERVED_WORDS:
      name = f"_{name}"
    self.names.add(name)
    return name
