"""
Unified repository interface for knowledge trees.

Provides a single facade for:
- Loading (or generating) the tree for a subject pack
- Recommendations, learning paths and analytics over that tree
- A combined per-learner state snapshot

This is the main entry point for service and UI layers.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..config import EngineSettings
from ..engine import (
    build_personalized_overlay,
    compute_analytics,
    generate_full_path,
    path_to_node,
    recommend_next,
    validate_tree,
)
from ..models import (
    KnowledgeTree,
    LearningPath,
    LearningStyle,
    PersonalizedOverlay,
    RecommendedNode,
    SourceItem,
    TreeAnalytics,
    TreeLoadResult,
    TreeLoadSource,
    TreeValidationResult,
)
from .tree_store import EmbeddedTree, TreeStore


logger = logging.getLogger(__name__)


class KnowledgeTreeError(Exception):
    """Base exception for repository operations."""
    pass


class TreeNotLoadedError(KnowledgeTreeError):
    """Raised when a subject has no loaded tree."""
    pass


@dataclass
class KnowledgeTreeState:
    """Everything a presentation layer needs for one learner and subject."""
    tree: KnowledgeTree | None = None
    tree_source: TreeLoadSource | None = None
    validation: TreeValidationResult | None = None
    recommendations: list[RecommendedNode] = field(default_factory=list)
    full_path: LearningPath | None = None
    analytics: TreeAnalytics | None = None

    @property
    def top_recommendation(self) -> RecommendedNode | None:
        return self.recommendations[0] if self.recommendations else None


class KnowledgeTreeRepository:
    """
    Knowledge tree repository.

    Coordinates the tree store with the engine so callers can work
    by subject ID. Settings come from KNOWLEDGE_TREE_* environment
    variables unless passed explicitly.
    """

    def __init__(
        self,
        store: TreeStore | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self._store = store or TreeStore()
        self._settings = settings or EngineSettings.from_env()
        logger.info(
            f"KnowledgeTreeRepository initialized "
            f"(recommendations={self._settings.recommendation_count})"
        )

    @property
    def store(self) -> TreeStore:
        return self._store

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    # ─────────────────────────────────────────────────────────────────────────
    # Trees
    # ─────────────────────────────────────────────────────────────────────────

    def load(
        self,
        subject_id: str,
        source_items: Iterable[SourceItem | Mapping[str, Any]],
        embedded_tree: EmbeddedTree | None = None,
    ) -> TreeLoadResult:
        """Load or generate the tree for a subject pack."""
        return self._store.load_tree_for_pack(subject_id, source_items, embedded_tree)

    def get_tree(self, subject_id: str) -> KnowledgeTree:
        """Get the loaded tree for a subject; raises if none is cached."""
        tree = self._store.get_cached_tree(subject_id)
        if tree is None:
            raise TreeNotLoadedError(f"No knowledge tree loaded for subject: {subject_id}")
        return tree

    def validate(self, subject_id: str) -> TreeValidationResult:
        return validate_tree(self.get_tree(subject_id))

    # ─────────────────────────────────────────────────────────────────────────
    # Learner-facing computations
    # ─────────────────────────────────────────────────────────────────────────

    def recommend_next(
        self,
        subject_id: str,
        progress: Mapping[str, float],
        count: int | None = None,
        preferred_groups: Iterable[str] | None = None,
        skip_ids: Iterable[str] | None = None,
    ) -> list[RecommendedNode]:
        """Recommend next nodes using the configured count and difficulty ceiling."""
        return recommend_next(
            self.get_tree(subject_id),
            progress,
            count=self._settings.recommendation_count if count is None else count,
            max_difficulty=self._settings.max_difficulty,
            preferred_groups=preferred_groups,
            skip_ids=skip_ids,
        )

    def path_to_node(
        self,
        subject_id: str,
        target_id: str,
        progress: Mapping[str, float],
    ) -> LearningPath | None:
        return path_to_node(self.get_tree(subject_id), target_id, progress)

    def generate_full_path(self, subject_id: str, progress: Mapping[str, float]) -> LearningPath:
        return generate_full_path(self.get_tree(subject_id), progress)

    def compute_analytics(self, subject_id: str, progress: Mapping[str, float]) -> TreeAnalytics:
        return compute_analytics(
            self.get_tree(subject_id),
            progress,
            recommendation_count=self._settings.analytics_recommendation_count,
        )

    def overlay(
        self,
        subject_id: str,
        progress: Mapping[str, float],
        user_id: str | None = None,
        learning_style: LearningStyle | None = None,
    ) -> PersonalizedOverlay:
        """Build a learner overlay against the subject's current tree version."""
        return build_personalized_overlay(
            self.get_tree(subject_id),
            progress,
            user_id=user_id,
            learning_style=learning_style,
        )

    def build_state(
        self,
        subject_id: str,
        source_items: Sequence[SourceItem | Mapping[str, Any]],
        progress: Mapping[str, float],
        embedded_tree: EmbeddedTree | None = None,
        preferred_groups: Iterable[str] | None = None,
    ) -> KnowledgeTreeState:
        """
        Load the subject's tree and compute a full state snapshot.

        Returns an empty state when there is nothing to build a tree
        from: no source items, no embedded tree and nothing cached.
        """
        if (
            not source_items
            and embedded_tree is None
            and self._store.get_cached_tree(subject_id) is None
        ):
            return KnowledgeTreeState()

        loaded = self.load(subject_id, source_items, embedded_tree)
        tree = loaded.tree

        return KnowledgeTreeState(
            tree=tree,
            tree_source=loaded.source,
            validation=loaded.validation,
            recommendations=recommend_next(
                tree,
                progress,
                count=self._settings.recommendation_count,
                max_difficulty=self._settings.max_difficulty,
                preferred_groups=preferred_groups,
            ),
            full_path=generate_full_path(tree, progress),
            analytics=compute_analytics(
                tree,
                progress,
                recommendation_count=self._settings.analytics_recommendation_count,
            ),
        )
