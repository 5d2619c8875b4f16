"""
Global Definition Index.

Maps every provided property name to the file that currently owns it. The
index is filled for the whole corpus before any file is rewritten.

Ownership is last-write-wins: when a second file provides an already owned
name, it takes over and a ``Redefinition`` is recorded and logged.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from cjsify.core.units import FileUnit
from cjsify.utils.console import log_warning


@dataclass(frozen=True)
class Redefinition:
  """A name provided by more than one file."""

  name: str
  path: str
  previous_path: str


class DefinitionIndex:
  """
  Name -> owning ``FileUnit`` lookup.

  Attributes:
      redefinitions (List[Redefinition]): Every ownership takeover, in order.
  """

  def __init__(self) -> None:
    self._owners: Dict[str, FileUnit] = {}
    self.redefinitions: List[Redefinition] = []

  def register(self, name: str, file: FileUnit) -> Optional[Redefinition]:
    """
    Makes ``file`` the owner of ``name``.

    Args:
        name: Provided property name.
        file: The providing file.

    Returns:
        The recorded Redefinition if another file owned the name, else None.
    """
    previous = self._owners.get(name)
    self._owners[name] = file
    if previous is None or previous is file:
      return None

    redefinition = Redefinition(name=name, path=file.path, previous_path=previous.path)
    self.redefinitions.append(redefinition)
    log_warning(
      f"REDEFINITION of [code]{name}[/code] in [path]{file.path}[/path], "
      f"previously defined in [path]{previous.path}[/path]"
    )
    return redefinition

  def owner(self, name: str) -> Optional[FileUnit]:
    """Returns the file owning ``name``, or None."""
    return self._owners.get(name)

  def discard(self, file: FileUnit) -> List[str]:
    """
    Removes every name currently owned by ``file``.

    Returns:
        The names that lost their owner.
    """
    lost = [name for name, owner in self._owners.items() if owner is file]
    for name in lost:
      del self._owners[name]
    return lost

  def __len__(self) -> int:
    return len(self._owners)
