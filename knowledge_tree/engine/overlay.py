"""
Learner overlays built from a progress snapshot.

An overlay annotates each node with the learner's state without
touching the shared tree.
"""

from collections.abc import Mapping
from datetime import datetime, timezone

from ..models import (
    KnowledgeTree,
    LearningStyle,
    PersonalizedOverlay,
    UserNodeOverlay,
    progress_to_mastery,
)
from .graph import progress_of
from .rounding import round_half_up


def build_overlay_from_progress(
    tree: KnowledgeTree,
    progress: Mapping[str, float],
) -> dict[str, UserNodeOverlay]:
    """One overlay per node, with checkpoints scaled from progress."""
    overlays: dict[str, UserNodeOverlay] = {}

    for node in tree.nodes:
        current = progress_of(progress, node.id)
        overlays[node.id] = UserNodeOverlay(
            node_id=node.id,
            progress=int(current),
            mastery_state=progress_to_mastery(current),
            completed_checkpoints=int(
                round_half_up(current / 100 * node.evidence_checkpoints)
            ),
            skipped=False,
        )

    return overlays


def build_personalized_overlay(
    tree: KnowledgeTree,
    progress: Mapping[str, float],
    user_id: str | None = None,
    learning_style: LearningStyle | None = None,
) -> PersonalizedOverlay:
    """Wrap node overlays with the tree version they were computed against."""
    return PersonalizedOverlay(
        user_id=user_id,
        tree_subject=tree.subject,
        tree_version=tree.version,
        node_overlays=build_overlay_from_progress(tree, progress),
        learning_style=learning_style,
        last_updated=datetime.now(timezone.utc),
    )
