"""
Type-Identity Rewriter.

Replaces ``instanceof`` checks that would otherwise need the shared namespace
(or a specific realm's built-ins) with structural checks:

* ``value instanceof NS.Foo`` becomes
  ``(!!(instance = value) && !!instance.isFoo)``. The ``isFoo`` marker is set
  on ``Foo.prototype`` by the Module Rewriter, so the checking file no longer
  needs to import Foo's module. ``value`` is evaluated once and ``null`` or
  ``undefined`` yield ``false`` instead of throwing.
* ``value instanceof Array`` (and the other configured built-ins) becomes
  ``(toString.call(value).slice(8, -1) === 'Array')``, a realm independent
  tag comparison.

``instance`` and ``toString`` are per-file locals, declared once and only when
used, under names that collide with nothing in the file.
"""

from typing import Iterable, Optional

from calmjs.parse import asttypes

from cjsify.core.tracer import TraceLogger
from cjsify.core.units import FileUnit
from cjsify.utils.js_ast import express, express_expr, is_identifier, js_string, replace_child, walk


class TypeIdentityRewriter:
  """
  Rewrites ``instanceof`` expressions of a single file in place.
  """

  def __init__(self, namespace: str, native_types: Iterable[str], tracer: Optional[TraceLogger] = None) -> None:
    """
    Args:
        namespace: Identifier of the namespace root (e.g. ``THREE``).
        native_types: Built-in constructor names checked by tag.
        tracer: Optional trace logger receiving one event per rewrite.
    """
    self.namespace = namespace
    self.native_types = frozenset(native_types)
    self.tracer = tracer

  def rewrite(self, file: FileUnit) -> int:
    """
    Rewrites every qualifying check in ``file`` and queues the helper
    declarations on ``file.head``.

    Returns:
        Number of rewritten checks.
    """
    checks = [
      (parent, node)
      for parent, node in walk(file.program)
      if isinstance(node, asttypes.BinOp) and node.op == "instanceof"
    ]

    instance_name = None
    to_string_name = None
    rewritten = 0

    # Innermost first, so nested checks are moved only after being rewritten.
    for parent, node in reversed(checks):
      right = node.right

      if self._is_namespace_type(right):
        if instance_name is None:
          instance_name = file.unique_name("instance")
        type_name = right.identifier.value
        replacement = express_expr(f"(!!({instance_name} = $) && !!{instance_name}.is{type_name})", node.left)
        native = False

      elif is_identifier(right) and right.value in self.native_types:
        if to_string_name is None:
          to_string_name = file.unique_name("toString")
        type_name = right.value
        replacement = express_expr(f"({to_string_name}.call($).slice(8, -1) === {js_string(type_name)})", node.left)
        native = True

      else:
        continue

      replace_child(parent, node, replacement)
      rewritten += 1
      if self.tracer:
        self.tracer.log_type_check(file.path, type_name, native)

    if to_string_name is not None:
      file.head.append(express(f"var {to_string_name} = Object.prototype.toString;"))
    if instance_name is not None:
      file.head.append(express(f"var {instance_name};"))

    return rewritten

  def _is_namespace_type(self, node: asttypes.Node) -> bool:
    return isinstance(node, asttypes.DotAccessor) and is_identifier(node.node, self.namespace)
