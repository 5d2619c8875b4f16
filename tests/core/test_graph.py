"""
Tests for the dependency graph export.
"""

import json

from cjsify.core.graph import DependencyGraph, GraphEdge, GraphNode, directory_group


def test_directory_group():
  assert directory_group("./math/Vector3.js") == "math"
  assert directory_group("./renderers/shaders/ShaderChunk.js") == "renderers/shaders"
  assert directory_group("./Three.js") == ""


def test_to_dict_shape():
  graph = DependencyGraph(
    nodes=[GraphNode(id=0, label="Foo", group="", value=1)], edges=[GraphEdge(source=1, target=0)]
  )
  data = json.loads(json.dumps(graph.to_dict()))
  assert data == {"nodes": [{"id": 0, "label": "Foo", "group": "", "value": 1}], "edges": [{"from": 1, "to": 0}]}


def test_graph_from_engine(run_corpus):
  """
  Scenario: Bar and Baz both require Foo.
  Expectation: Foo's value counts its dependents; edges point dependent -> dependency.
  """
  result = run_corpus(
    {
      "./math/Foo.js": "THREE.Foo = function () {};",
      "./Bar.js": "THREE.Bar = function () { return new THREE.Foo(); };",
      "./Baz.js": "THREE.Baz = function () { return new THREE.Foo(); };",
    },
    graph=True,
  )
  nodes = {node["label"]: node for node in result.graph["nodes"]}
  assert nodes["Foo"]["value"] == 2
  assert nodes["Foo"]["group"] == "math"
  assert nodes["Bar"]["value"] == 0

  edges = {(edge["from"], edge["to"]) for edge in result.graph["edges"]}
  assert edges == {(nodes["Bar"]["id"], nodes["Foo"]["id"]), (nodes["Baz"]["id"], nodes["Foo"]["id"])}


def test_graph_not_built_by_default(run_corpus):
  assert run_corpus({"./Foo.js": "THREE.Foo = 1;"}).graph is None
