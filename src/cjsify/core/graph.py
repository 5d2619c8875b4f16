"""
Dependency Graph Exporter.

Derives a node/edge view of the validated file set for visualization
(e.g. with vis.js):

    { "nodes": [{"id", "label", "group", "value"}], "edges": [{"from", "to"}] }

``group`` is the containing directory and ``value`` the number of surviving
files requiring the node. The export is purely observational.
"""

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from cjsify.analysis.dependencies import DependencyResolver
from cjsify.core.units import FileUnit


@dataclass
class GraphNode:
  id: int
  label: str
  group: str
  value: int = 0


@dataclass
class GraphEdge:
  source: int
  """Id of the dependent file."""

  target: int
  """Id of the dependency."""


@dataclass
class DependencyGraph:
  nodes: List[GraphNode] = field(default_factory=list)
  edges: List[GraphEdge] = field(default_factory=list)

  def to_dict(self) -> Dict[str, Any]:
    return {
      "nodes": [
        {"id": node.id, "label": node.label, "group": node.group, "value": node.value} for node in self.nodes
      ],
      "edges": [{"from": edge.source, "to": edge.target} for edge in self.edges],
    }


def directory_group(path: str) -> str:
  """
  Directory of a corpus path without the leading ``./``.

  Example:
    >>> directory_group("./math/Vector3.js")
    'math'
  """
  group = posixpath.dirname(path)
  if group in ("", "."):
    return ""
  if group.startswith("./"):
    group = group[2:]
  return group.rstrip("/")


class DependencyGraphExporter:
  """
  Builds ``DependencyGraph`` views over validated files.
  """

  def __init__(self, resolver: DependencyResolver) -> None:
    self.resolver = resolver

  def build(self, files: Mapping[str, FileUnit]) -> DependencyGraph:
    """
    Args:
        files: Surviving files by path, in processing order.

    Returns:
        One node per file and one edge per (dependent, dependency) pair.
    """
    graph = DependencyGraph()
    nodes_by_path: Dict[str, GraphNode] = {}

    for path, file in files.items():
      node = GraphNode(id=file.id, label=file.basename, group=directory_group(path))
      nodes_by_path[path] = node
      graph.nodes.append(node)

    for path, file in files.items():
      for required_path in self.resolver.required_files(file):
        dependency = nodes_by_path[required_path]
        graph.edges.append(GraphEdge(source=file.id, target=dependency.id))
        dependency.value += 1

    return graph
