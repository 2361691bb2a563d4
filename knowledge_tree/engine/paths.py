"""
Learning path generation.

Implements:
- Minimal dependency chain to a target node (backward BFS)
- Full remaining-work path through a tree

Both are ordered by the tree's topological order.
"""

import logging
from collections import deque
from collections.abc import Mapping

from ..models import KnowledgeTree, LearningPath
from .graph import GraphModel, build_graph, progress_of
from .ordering import topological_sort
from .rounding import round_half_up


logger = logging.getLogger(__name__)


def _aggregate(graph: GraphModel, node_ids: list[str], label: str) -> LearningPath:
    total_minutes = sum(graph.nodes[nid].estimated_minutes for nid in node_ids)
    difficulty_sum = sum(graph.nodes[nid].difficulty for nid in node_ids)
    average = difficulty_sum / max(len(node_ids), 1)
    return LearningPath(
        node_ids=node_ids,
        total_minutes=total_minutes,
        average_difficulty=round_half_up(average, 1),
        label=label,
    )


def path_to_node(
    tree: KnowledgeTree,
    target_id: str,
    progress: Mapping[str, float],
) -> LearningPath | None:
    """
    Find the shortest dependency chain to a target node.

    The target is always included. Mastered prerequisites are pruned,
    which also stops the backward expansion through them.

    Returns:
        LearningPath ordered prerequisites-first, or None if the
        target is not in the tree
    """
    graph = build_graph(tree)
    if target_id not in graph:
        return None

    required: set[str] = set()
    visited: set[str] = set()
    queue = deque([target_id])

    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        required.add(current)

        for edge in graph.prerequisite_parents(current):
            if progress_of(progress, edge.from_id) < 100:
                queue.append(edge.from_id)

    ordered = [nid for nid in topological_sort(tree, graph) if nid in required]
    if len(ordered) < len(required):
        dropped = sorted(required.difference(ordered))
        logger.warning(
            f"Path to '{target_id}' dropped node(s) on a prerequisite cycle: {', '.join(dropped)}"
        )

    return _aggregate(graph, ordered, f"Path to {graph.nodes[target_id].title}")


def generate_full_path(tree: KnowledgeTree, progress: Mapping[str, float]) -> LearningPath:
    """Full learning path through every unmastered node in the tree."""
    graph = build_graph(tree)
    remaining = [
        nid for nid in topological_sort(tree, graph)
        if progress_of(progress, nid) < 100
    ]
    return _aggregate(graph, remaining, f"Full {tree.subject} path ({len(remaining)} remaining)")
