"""
Next-step recommendations.

Ranks unmastered nodes by:
1. Readiness (all prerequisites at least strong)
2. Learning gain (how much unstarted work the node unblocks)
3. Accessibility (lower difficulty first)
4. Momentum (nodes already in progress)
5. Group preference
"""

import logging
from collections.abc import Iterable, Mapping

from ..models import KnowledgeNode, KnowledgeTree, RecommendedNode
from .graph import GraphModel, build_graph, progress_of


logger = logging.getLogger(__name__)

READY_THRESHOLD = 75      # prerequisite counts as met at "strong"
UNSTARTED_THRESHOLD = 25  # downstream node still counts as blocked below this

READY_BONUS = 0.5
GAIN_WEIGHT = 0.1
GAIN_CAP = 0.3
DIFFICULTY_WEIGHT = 0.02
MOMENTUM_BONUS = 0.1
GROUP_BONUS = 0.05
UNMET_PENALTY = 0.15


def unmet_prerequisites(
    graph: GraphModel,
    node_id: str,
    progress: Mapping[str, float],
) -> list[str]:
    """Prerequisite sources of a node still below the ready threshold."""
    return [
        edge.from_id
        for edge in graph.prerequisite_parents(node_id)
        if progress_of(progress, edge.from_id) < READY_THRESHOLD
    ]


def learning_gain(
    graph: GraphModel,
    node_id: str,
    progress: Mapping[str, float],
) -> float:
    """Summed strength of prerequisite edges into still-unstarted nodes."""
    return sum(
        edge.strength
        for edge in graph.prerequisite_children(node_id)
        if progress_of(progress, edge.to_id) < UNSTARTED_THRESHOLD
    )


def _reason(node: KnowledgeNode, current: float, gain: float, unmet: list[str]) -> str:
    if unmet:
        return f"{node.title} has {len(unmet)} prerequisite(s) remaining."
    if current > 0:
        return f"Continue {node.title}: you're {current:g}% through."
    if gain > 0:
        return f"Start {node.title}: unlocks {gain:.0f} downstream concepts."
    return f"Begin {node.title}: all prerequisites met."


def recommend_next(
    tree: KnowledgeTree,
    progress: Mapping[str, float],
    count: int = 3,
    max_difficulty: int = 5,
    preferred_groups: Iterable[str] | None = None,
    skip_ids: Iterable[str] | None = None,
    graph: GraphModel | None = None,
) -> list[RecommendedNode]:
    """
    Recommend the next nodes to study.

    Args:
        tree: Tree to recommend from
        progress: Node ID -> percent (0-100); missing IDs read as 0
        count: Maximum number of recommendations
        max_difficulty: Skip nodes harder than this tier
        preferred_groups: Groups that earn a small bonus
        skip_ids: Nodes the learner chose to skip

    Returns:
        Recommendations sorted by descending score
    """
    graph = graph or build_graph(tree)
    preferred = set(preferred_groups or ())
    skipped = set(skip_ids or ())

    candidates: list[tuple[float, int, RecommendedNode]] = []

    for index, node in enumerate(tree.nodes):
        current = progress_of(progress, node.id)
        if current >= 100:
            continue
        if node.id in skipped:
            continue
        if node.difficulty > max_difficulty:
            continue

        unmet = unmet_prerequisites(graph, node.id, progress)
        gain = learning_gain(graph, node.id, progress)

        score = 0.0
        if not unmet:
            score += READY_BONUS
        score += min(gain * GAIN_WEIGHT, GAIN_CAP)
        score += (5 - node.difficulty) * DIFFICULTY_WEIGHT
        if 0 < current < 100:
            score += MOMENTUM_BONUS
        if node.group in preferred:
            score += GROUP_BONUS
        score -= len(unmet) * UNMET_PENALTY

        recommendation = RecommendedNode(
            node_id=node.id,
            reason=_reason(node, current, gain, unmet),
            score=score,
            learning_gain=gain,
            unmet_prereqs=unmet,
        )
        candidates.append((score, index, recommendation))

    candidates.sort(key=lambda c: (-c[0], c[1]))
    logger.debug(f"Ranked {len(candidates)} candidate(s) for '{tree.subject}'")
    return [rec for _, _, rec in candidates[:max(count, 0)]]
