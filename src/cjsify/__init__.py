"""
cjsify Package.

Converts a JavaScript library written against one shared global namespace
object (e.g. ``THREE.Vector3 = function () {...}``) into self-contained
CommonJS modules with explicit ``require`` imports and ``exports``.

Usage
-----

Directory Conversion
^^^^^^^^^^^^^^^^^^^^

.. code-block:: console

    cjsify --input src/ --output build/ --graph graph.json

In-Memory Conversion
^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import cjsify

    outputs = cjsify.convert({
      "./Foo.js": "THREE.Foo = function () {};",
      "./Bar.js": "THREE.Bar = function () { return new THREE.Foo(); };",
    })
    print(outputs["./Bar.js"])
    # var FooModule = require('./Foo');
    # ...
"""

from typing import Any, Dict, Mapping, Optional

from cjsify.config import RuntimeConfig
from cjsify.core.conversion_result import ConversionResult
from cjsify.core.engine import ModularizeEngine

__version__ = "0.1.0"


def convert(
  sources: Mapping[str, str],
  namespace: str = "THREE",
  settings: Optional[Dict[str, Any]] = None,
) -> Dict[str, str]:
  """
  Converts in-memory sources and returns the generated files.

  Args:
      sources (Mapping[str, str]): Source text keyed by corpus-relative path.
      namespace (str): Identifier of the shared namespace object.
      settings (dict, optional): Further ``RuntimeConfig`` fields.

  Returns:
      Dict[str, str]: Generated source keyed by path, including the entry point.
  """
  config = RuntimeConfig(namespace=namespace, **(settings or {}))
  result = ModularizeEngine(config).run(sources)
  return {**result.outputs, result.index_path: result.index_code}


__all__ = [
  "ConversionResult",
  "ModularizeEngine",
  "RuntimeConfig",
  "convert",
  "__version__",
]
