"""
Progress analytics for a knowledge tree.

Rolls a progress snapshot up into coverage and mastery percentages,
per-group stats and skill-tag coverage.
"""

from collections.abc import Mapping

from ..models import (
    GroupProgress,
    KnowledgeTree,
    MasteryState,
    TreeAnalytics,
    progress_to_mastery,
)
from .graph import build_graph, progress_of
from .recommendation import recommend_next
from .rounding import round_half_up


SKILL_ACQUIRED_THRESHOLD = 50


def _percent(count: int, total: int) -> int:
    if total == 0:
        return 0
    return int(round_half_up(count / total * 100))


def compute_analytics(
    tree: KnowledgeTree,
    progress: Mapping[str, float],
    recommendation_count: int = 5,
) -> TreeAnalytics:
    """Compute analytics for a learner's progress on a tree."""
    graph = build_graph(tree)
    total = len(tree.nodes)
    started = 0
    mastered = 0
    all_skills: dict[str, None] = {}  # insertion-ordered sets
    acquired: dict[str, None] = {}
    groups: dict[str, GroupProgress] = {}

    for node in tree.nodes:
        current = progress_of(progress, node.id)
        is_mastered = progress_to_mastery(current) is MasteryState.MASTERED

        stats = groups.setdefault(node.group, GroupProgress())
        stats.total += 1
        if current > 0:
            started += 1
            stats.started += 1
        if is_mastered:
            mastered += 1
            stats.mastered += 1

        for skill in node.skill_tags:
            all_skills[skill] = None
            if current >= SKILL_ACQUIRED_THRESHOLD:
                acquired[skill] = None

    return TreeAnalytics(
        coverage_percent=_percent(started, total),
        mastery_percent=_percent(mastered, total),
        top_recommendations=recommend_next(tree, progress, count=recommendation_count, graph=graph),
        group_progress=groups,
        acquired_skills=list(acquired),
        remaining_skills=[skill for skill in all_skills if skill not in acquired],
    )
