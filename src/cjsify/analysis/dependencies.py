"""
Dependency Resolution.

Turns the per-file ``requires`` of analyzed units into file-level edges by
looking every name up in the Definition Index, tests edges for cycles, and
validates referential integrity before any file is rewritten.
"""

from typing import Dict, List, Mapping, MutableMapping

from cjsify.core.registry import DefinitionIndex
from cjsify.core.units import FileUnit


class DependencyResolver:
  """
  Resolves required names to owning files.
  """

  def __init__(self, index: DefinitionIndex) -> None:
    self.index = index

  def required_files(self, file: FileUnit) -> Dict[str, List[str]]:
    """
    Groups the names required by ``file`` by owning file.

    Args:
        file: An analyzed unit whose requires all resolve.

    Returns:
        Ordered mapping of owning file path -> required names.

    Raises:
        LookupError: If a required name has no owner.
    """
    required: Dict[str, List[str]] = {}
    for name in file.requires:
      owner = self.index.owner(name)
      if owner is None:
        raise LookupError(f"{file.path} requires '{name}' which no file provides")
      required.setdefault(owner.path, []).append(name)
    return required

  def has_deep_dependency(self, file: FileUnit, required_file: FileUnit) -> bool:
    """
    Checks whether ``required_file`` reaches ``file`` through its own requires.

    Depth-first over required names, with a visited set keyed by path so
    cycles not involving ``file`` terminate.

    Args:
        file: The dependent file.
        required_file: A file ``file`` requires.

    Returns:
        True if importing ``required_file`` eagerly would close a cycle.
    """
    checked = set()
    stack = [required_file]

    while stack:
      current = stack.pop()
      if current.path in checked:
        continue
      checked.add(current.path)

      for name in current.requires:
        inner = self.index.owner(name)
        if inner is None:
          continue
        if inner is file:
          return True
        stack.append(inner)

    return False

  def check_integrity(self, files: MutableMapping[str, FileUnit]) -> Dict[str, str]:
    """
    Drops files whose requires do not resolve to a surviving file.

    Dropping a file can orphan its dependents, so the check repeats until
    nothing changes. Names owned by dropped files are discarded from the index.

    Args:
        files: Working set of analyzed files; modified in place.

    Returns:
        Mapping of dropped path -> first unresolved name, in drop order.
    """
    dropped: Dict[str, str] = {}
    changed = True

    while changed:
      changed = False
      for path, file in list(files.items()):
        missing = next((name for name in file.requires if not self._resolves(name, files)), None)
        if missing is None:
          continue
        del files[path]
        self.index.discard(file)
        dropped[path] = missing
        changed = True

    return dropped

  def _resolves(self, name: str, files: Mapping[str, FileUnit]) -> bool:
    owner = self.index.owner(name)
    return owner is not None and files.get(owner.path) is owner
