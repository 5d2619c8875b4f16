"""
Provide/Require Analyzer.

Classifies every property access on the namespace root of one file:

* ``NS.name = value`` (any assignment operator) is a **provide**. The syntactic
  kind of ``value`` decides later how the property is exported.
* Any other ``NS.name`` is a **require**, unless the file provides ``name``
  itself, in which case it is recorded as another occurrence of the provide.

Each classified access has its base replaced by the ``$`` placeholder, so the
rewriter finds exactly these sites without re-deriving them.

A file is rejected (never partially classified) when it uses a computed
access such as ``NS[key]``, or when ``NS`` is still referenced after every
access has been marked, e.g. when the whole namespace is passed around.
The root module (the file creating the namespace) is only scanned for
provides and is otherwise left alone.
"""

from typing import Optional

from calmjs.parse import asttypes

from cjsify.analysis.instanceof import TypeIdentityRewriter
from cjsify.config import RuntimeConfig
from cjsify.core.registry import DefinitionIndex
from cjsify.core.tracer import TraceLogger
from cjsify.core.units import FileUnit, ProvideRecord, RequireRecord, Site
from cjsify.enums import ExclusionReason, ProvideKind
from cjsify.utils.js_ast import LITERAL_TYPES, is_identifier, is_property_key, make_identifier, replace_child, walk

PLACEHOLDER = "$"


def classify_kind(node: asttypes.Node) -> ProvideKind:
  """
  Returns the ProvideKind of an assigned expression.

  Example:
    ``function () {}`` -> FUNCTION, ``{}`` -> OBJECT, ``'73'`` -> LITERAL,
    ``a || b`` -> OTHER.
  """
  if isinstance(node, asttypes.FuncExpr):
    return ProvideKind.FUNCTION
  if isinstance(node, asttypes.Object):
    return ProvideKind.OBJECT
  if isinstance(node, asttypes.Array):
    return ProvideKind.ARRAY
  if isinstance(node, LITERAL_TYPES):
    return ProvideKind.LITERAL
  return ProvideKind.OTHER


class ProvideRequireAnalyzer:
  """
  Fills ``provides`` / ``requires`` of file units and registers provides in
  the Definition Index.
  """

  def __init__(self, config: RuntimeConfig, index: DefinitionIndex, tracer: Optional[TraceLogger] = None) -> None:
    self.namespace = config.namespace
    self.root_extra_provides = list(config.root_extra_provides)
    self.index = index
    self.tracer = tracer
    self.type_rewriter = TypeIdentityRewriter(config.namespace, config.native_instanceof_types, tracer)

  def analyze(self, file: FileUnit) -> Optional[ExclusionReason]:
    """
    Classifies every namespace access in ``file``.

    Args:
        file: The unit to analyze; annotated in place.

    Returns:
        None on success, otherwise the reason the file must be excluded.
        An excluded file registers nothing in the index.
    """
    self.type_rewriter.rewrite(file)

    if file.is_root:
      for name in self.root_extra_provides:
        file.provides[name] = ProvideRecord(kind=ProvideKind.LITERAL)

    reason = self._collect_provides(file)
    if reason is None and not file.is_root:
      reason = self._mark_accesses(file)
    if reason is None and not file.is_root:
      reason = self._check_residual(file)

    if reason is not None:
      file.provides.clear()
      file.requires.clear()
      return reason

    for name in file.provides:
      redefinition = self.index.register(name, file)
      if redefinition and self.tracer:
        self.tracer.log_redefinition(redefinition.name, redefinition.path, redefinition.previous_path)

    return None

  def _is_namespace_access(self, node: asttypes.Node) -> bool:
    return isinstance(node, (asttypes.DotAccessor, asttypes.BracketAccessor)) and is_identifier(
      node.node, self.namespace
    )

  def _collect_provides(self, file: FileUnit) -> Optional[ExclusionReason]:
    for _, node in walk(file.program):
      if not isinstance(node, asttypes.Assign) or node.op == ":":
        continue
      if not self._is_namespace_access(node.left):
        continue
      if isinstance(node.left, asttypes.BracketAccessor):
        return ExclusionReason.COMPUTED_ASSIGNMENT

      # a later assignment to the same name replaces the earlier kind
      file.provides[node.left.identifier.value] = ProvideRecord(kind=classify_kind(node.right))
    return None

  def _mark_accesses(self, file: FileUnit) -> Optional[ExclusionReason]:
    accesses = [(parent, node) for parent, node in walk(file.program) if self._is_namespace_access(node)]

    if any(isinstance(node, asttypes.BracketAccessor) for _, node in accesses):
      return ExclusionReason.COMPUTED_EXPRESSION

    for parent, node in accesses:
      name = node.identifier.value
      site = Site(parent=parent, node=node)
      if name in file.provides:
        file.provides[name].sites.append(site)
      else:
        file.requires.setdefault(name, RequireRecord()).sites.append(site)
      replace_child(node, node.node, make_identifier(PLACEHOLDER))

    return None

  def _check_residual(self, file: FileUnit) -> Optional[ExclusionReason]:
    for parent, node in walk(file.program):
      if is_identifier(node, self.namespace) and not is_property_key(parent, node):
        return ExclusionReason.NAMESPACE_REFERENCED
    return None
