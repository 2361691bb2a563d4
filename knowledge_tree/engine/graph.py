"""
Graph primitives for the knowledge tree.

Builds adjacency maps once per computation so every engine
operation can run without shared mutable state.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from ..models import KnowledgeEdge, KnowledgeNode, KnowledgeTree


@dataclass
class GraphModel:
    """Adjacency view over a tree's nodes and edges."""
    nodes: dict[str, KnowledgeNode] = field(default_factory=dict)
    children: dict[str, list[KnowledgeEdge]] = field(default_factory=dict)  # by source
    parents: dict[str, list[KnowledgeEdge]] = field(default_factory=dict)   # by target
    positions: dict[str, int] = field(default_factory=dict)  # first index in node list

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.nodes

    def prerequisite_parents(self, node_id: str) -> list[KnowledgeEdge]:
        """Incoming prerequisite edges (edge.from_id must be learned first)."""
        return [e for e in self.parents.get(node_id, []) if e.is_prerequisite]

    def prerequisite_children(self, node_id: str) -> list[KnowledgeEdge]:
        """Outgoing prerequisite edges (nodes this one unblocks)."""
        return [e for e in self.children.get(node_id, []) if e.is_prerequisite]


def build_graph(tree: KnowledgeTree) -> GraphModel:
    """
    Build adjacency maps from a tree in O(V + E).

    Edges with an unknown endpoint are left out of the maps;
    validate_tree reports them.
    """
    graph = GraphModel()

    for index, node in enumerate(tree.nodes):
        graph.nodes[node.id] = node
        graph.children.setdefault(node.id, [])
        graph.parents.setdefault(node.id, [])
        graph.positions.setdefault(node.id, index)

    for edge in tree.edges:
        if edge.from_id in graph.nodes and edge.to_id in graph.nodes:
            graph.children[edge.from_id].append(edge)
            graph.parents[edge.to_id].append(edge)

    return graph


def progress_of(progress: Mapping[str, float], node_id: str) -> float:
    """Progress percent for a node; missing entries read as 0."""
    return progress.get(node_id, 0) or 0
