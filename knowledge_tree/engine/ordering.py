"""
Topological ordering of knowledge nodes.

Kahn's algorithm over prerequisite edges only. Ties are broken by
ascending difficulty, then by the node's position in the tree's
node list.
"""

import heapq
import logging

from ..models import KnowledgeTree
from .graph import GraphModel, build_graph


logger = logging.getLogger(__name__)


def topological_sort(tree: KnowledgeTree, graph: GraphModel | None = None) -> list[str]:
    """
    Return node IDs in learning order (prerequisites first).

    Best effort: nodes on a prerequisite cycle never reach zero
    in-degree and are omitted without error. Use validate_tree when
    acyclicity must be guaranteed.
    """
    graph = graph or build_graph(tree)

    in_degree = {node_id: len(graph.prerequisite_parents(node_id)) for node_id in graph.nodes}

    def ready_key(node_id: str) -> tuple[int, int, str]:
        return (graph.nodes[node_id].difficulty, graph.positions[node_id], node_id)

    ready = [ready_key(node_id) for node_id, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)

    ordered: list[str] = []
    while ready:
        _, _, current = heapq.heappop(ready)
        ordered.append(current)

        for edge in graph.prerequisite_children(current):
            in_degree[edge.to_id] -= 1
            if in_degree[edge.to_id] == 0:
                heapq.heappush(ready, ready_key(edge.to_id))

    if len(ordered) < len(graph.nodes):
        logger.debug(
            f"Topological sort of '{tree.subject}' omitted "
            f"{len(graph.nodes) - len(ordered)} node(s) on prerequisite cycles"
        )
    return ordered
