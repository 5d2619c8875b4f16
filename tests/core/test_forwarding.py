"""
Tests for the aggregate entry point.
"""

from cjsify.core.forwarding import ForwardingIndex, relative_module_path
from tests.conftest import compact


def test_relative_module_path():
  assert relative_module_path("./math/Box3.js", "./Three.js", ".js") == "../Three"
  assert relative_module_path("./math/Box3.js", "./math/Vector3.js", ".js") == "./Vector3"
  assert relative_module_path("./index.js", "./core/Object3D.js", ".js") == "./core/Object3D"
  assert relative_module_path("./a/b/C.js", "./a/D.js", ".js") == "../D"


def test_single_provide():
  index = ForwardingIndex("./index.js", ".js")
  index.add("./math/Vector3.js", "Vector3", ["Vector3"])
  assert compact(index.generate()) == "exports.Vector3=require('./math/Vector3').Vector3;"


def test_multiple_provides():
  index = ForwardingIndex("./index.js", ".js")
  index.add("./constants.js", "constants", ["A", "B"])
  assert compact(index.generate()) == "varconstants=require('./constants');exports.A=constants.A;exports.B=constants.B;"


def test_aliases_unique_and_sanitized():
  """
  Scenario: Two multi-export files share a basename; one is not an identifier.
  Expectation: Aliases are made valid and distinct.
  """
  index = ForwardingIndex("./index.js", ".js")
  index.add("./a/Utils.js", "Utils", ["A", "B"])
  index.add("./b/Utils.js", "Utils", ["C", "D"])
  index.add("./three-extras.js", "three-extras", ["E", "F"])

  code = compact(index.generate())
  assert "varUtils=require('./a/Utils');" in code
  assert "var_Utils=require('./b/Utils');exports.C=_Utils.C;" in code
  assert "varthree_extras=require('./three-extras');" in code


def test_empty_provides_skipped():
  index = ForwardingIndex("./index.js", ".js")
  index.add("./side-effect.js", "side-effect", [])
  assert index.statements == []


def test_aliases_avoid_module_scope_names():
  index = ForwardingIndex("./index.js", ".js")
  index.add("./exports.js", "exports", ["A", "B"])
  assert compact(index.generate()).startswith("var_exports=require('./exports');exports.A=_exports.A;")
