"""
Module Rewriter.

Turns one analyzed file into a CommonJS unit, using only the frozen
Definition Index:

1.  **Provides** (declaration order):
    - function / object / array values are bound to a fresh local
      (``var Foo;``), every occurrence is redirected to that local and
      ``exports.Foo = Foo;`` is appended.
    - any other value is written straight to the export surface
      (``exports.Foo``) at every occurrence.
    - functions get ``Foo.prototype.isFoo = true;``; values of unknown kind
      get the same marker guarded by ``typeof exports.Foo === 'function'``.
      The Type-Identity Rewriter relies on these markers.
2.  **Requires**: one declaration per required file.
    - acyclic edge: ``var FooModule = require('./Foo');``
    - edge closing a cycle: ``var FooModule, getFooModule = function () {...};``
      with every use written as ``(FooModule || getFooModule())``, so the
      require only happens at first use, after both modules finished loading.
3.  **Forwarding**: the unit's provides are appended to the aggregate entry
    point.

The root module keeps its body untouched; it only contributes forwarding.
"""

from typing import List, Mapping, Optional

from calmjs.parse import asttypes

from cjsify.analysis.dependencies import DependencyResolver
from cjsify.config import RuntimeConfig
from cjsify.core.forwarding import ForwardingIndex, relative_module_path
from cjsify.core.tracer import TraceLogger
from cjsify.core.units import FileUnit, Site
from cjsify.enums import ProvideKind
from cjsify.utils.js_ast import (
  express,
  express_expr,
  js_string,
  make_identifier,
  new_program,
  replace_child,
  statements_of,
  to_identifier,
)

EXPORTS = "exports"


class ModuleRewriter:
  """
  Rewrites analyzed file units into CommonJS programs.
  """

  def __init__(
    self,
    config: RuntimeConfig,
    files: Mapping[str, FileUnit],
    resolver: DependencyResolver,
    forwarding: ForwardingIndex,
    tracer: Optional[TraceLogger] = None,
  ) -> None:
    """
    Args:
        config: Runtime configuration.
        files: Surviving file units by path (read only).
        resolver: Resolver bound to the frozen Definition Index.
        forwarding: Aggregate entry point receiving forwarding statements.
        tracer: Optional trace logger receiving import decisions.
    """
    self.config = config
    self.files = files
    self.resolver = resolver
    self.forwarding = forwarding
    self.tracer = tracer

  def rewrite(self, file: FileUnit) -> asttypes.Node:
    """
    Produces the CommonJS program for ``file``.

    Args:
        file: A unit that passed analysis and integrity validation.

    Returns:
        The new program node. The original tree's statements are reused.
    """
    imports = self._rewrite_requires(file)

    locals_: List[asttypes.Node] = []
    tail: List[asttypes.Node] = []
    if not file.is_root:
      for name, provide in file.provides.items():
        self._rewrite_provide(file, name, provide.kind, provide.sites, locals_, tail)

    self.forwarding.add(file.path, file.basename, list(file.provides))

    return new_program(imports + file.head + locals_ + statements_of(file.program) + tail)

  def _rewrite_provide(
    self,
    file: FileUnit,
    name: str,
    kind: ProvideKind,
    sites: List[Site],
    locals_: List[asttypes.Node],
    tail: List[asttypes.Node],
  ) -> None:
    if kind.is_hoistable:
      local = file.unique_name(name)
      locals_.append(express(f"var {local};"))
      for site in sites:
        replace_child(site.parent, site.node, make_identifier(local))
    else:
      local = None
      for site in sites:
        replace_child(site.node, site.node.node, make_identifier(EXPORTS))

    if kind is ProvideKind.FUNCTION:
      tail.append(express(f"{local}.prototype.is{name} = true;"))
    elif kind is ProvideKind.OTHER:
      tail.append(
        express(f"if (typeof {EXPORTS}.{name} === 'function') {EXPORTS}.{name}.prototype.is{name} = true;")
      )

    if local is not None:
      tail.append(express(f"{EXPORTS}.{name} = {local};"))

  def _rewrite_requires(self, file: FileUnit) -> List[asttypes.Node]:
    declarations = []

    for required_path, names in self.resolver.required_files(file).items():
      required_file = self.files[required_path]
      specifier = js_string(relative_module_path(file.path, required_path, self.config.code_extension))

      if required_file.is_root:
        module_name = file.unique_name(self.config.root_module_alias)
      else:
        module_name = file.unique_name(f"{to_identifier(required_file.basename)}Module")

      deferred = self.resolver.has_deep_dependency(file, required_file)

      if deferred:
        getter_name = file.unique_name(f"get{to_identifier(required_file.basename)}Module")
        declarations.append(
          express(
            f"var {module_name}, {getter_name} = function () {{ return {module_name} = require({specifier}); }};"
          )
        )
      else:
        getter_name = None
        declarations.append(express(f"var {module_name} = require({specifier});"))

      for name in names:
        for site in file.requires[name].sites:
          if getter_name:
            base = express_expr(f"({module_name} || {getter_name}())")
          else:
            base = make_identifier(module_name)
          replace_child(site.node, site.node.node, base)

      if self.tracer:
        self.tracer.log_import(file.path, required_path, names, deferred)

    return declarations
