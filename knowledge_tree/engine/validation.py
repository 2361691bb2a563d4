"""
Structural validation of knowledge trees.

Checks:
- Duplicate node IDs
- Edges pointing at unknown nodes
- Cycles among prerequisite edges
- Orphan nodes and malformed versions (warnings only)

Validation never raises; problems are reported in the result.
"""

import logging
import re
from collections import Counter
from enum import Enum

from ..models import KnowledgeTree, TreeValidationResult
from .graph import GraphModel, build_graph


logger = logging.getLogger(__name__)

_VERSION_PATTERN = re.compile(r"^\d+\.\d+")


class _Mark(Enum):
    UNVISITED = 0
    VISITING = 1
    DONE = 2


def validate_tree(tree: KnowledgeTree) -> TreeValidationResult:
    """Validate a knowledge tree for structural integrity."""
    errors: list[str] = []
    warnings: list[str] = []

    node_ids = [node.id for node in tree.nodes]
    known = set(node_ids)

    if len(known) != len(node_ids):
        duplicates = [nid for nid, count in Counter(node_ids).items() if count > 1]
        errors.append(f"Duplicate node IDs detected: {', '.join(duplicates)}")

    for edge in tree.edges:
        if edge.from_id not in known:
            errors.append(f"Edge references unknown source node: {edge.from_id}")
        if edge.to_id not in known:
            errors.append(f"Edge references unknown target node: {edge.to_id}")

    cycle = find_prerequisite_cycle(build_graph(tree), node_ids)
    if cycle:
        logger.warning(f"Prerequisite cycle in tree '{tree.subject}': {' -> '.join(cycle)}")
        errors.append(
            f"Cycle detected in prerequisite graph involving: {cycle[0]} "
            f"({' -> '.join(cycle)})"
        )

    connected: set[str] = set()
    for edge in tree.edges:
        connected.add(edge.from_id)
        connected.add(edge.to_id)
    for node in tree.nodes:
        if node.id not in connected:
            warnings.append(f'Node "{node.id}" has no edges; consider connecting it.')

    if not _VERSION_PATTERN.match(tree.version):
        warnings.append(f'Version "{tree.version}" doesn\'t follow semver pattern.')

    return TreeValidationResult(valid=not errors, errors=errors, warnings=warnings)


def find_prerequisite_cycle(graph: GraphModel, order: list[str]) -> list[str] | None:
    """
    Find the first prerequisite cycle reachable in node order.

    Iterative DFS with an explicit stack and a three-state marker,
    so deep chains cannot exhaust the interpreter stack. Returns the
    cycle as a closed path starting at the node found on the back edge,
    or None for a DAG.
    """
    marks = {node_id: _Mark.UNVISITED for node_id in graph.nodes}

    for root in order:
        if marks.get(root) is not _Mark.UNVISITED:
            continue

        marks[root] = _Mark.VISITING
        path = [root]
        stack = [iter(graph.prerequisite_children(root))]

        while stack:
            edge = next(stack[-1], None)
            if edge is None:
                marks[path.pop()] = _Mark.DONE
                stack.pop()
                continue

            target = edge.to_id
            if marks[target] is _Mark.VISITING:
                start = path.index(target)
                return path[start:] + [target]
            if marks[target] is _Mark.UNVISITED:
                marks[target] = _Mark.VISITING
                path.append(target)
                stack.append(iter(graph.prerequisite_children(target)))

    return None
