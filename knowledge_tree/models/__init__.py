"""
Knowledge Tree Domain Models.

Pydantic models for trees, source content, learner overlays
and engine results.
"""

from .base import (
    TreeModel,
    EdgeKind,
    TreeSource,
    KnowledgeNode,
    KnowledgeEdge,
    TreeMetadata,
    KnowledgeTree,
    DEFAULT_DIFFICULTY,
    DEFAULT_EVIDENCE_CHECKPOINTS,
    DEFAULT_ESTIMATED_MINUTES,
)

from .source import (
    DifficultyLevel,
    SourceConnection,
    SourceItem,
)

from .overlay import (
    MasteryState,
    LearningStyle,
    UserNodeOverlay,
    PersonalizedOverlay,
    progress_to_mastery,
    mastery_to_progress,
)

from .results import (
    RecommendedNode,
    LearningPath,
    GroupProgress,
    TreeAnalytics,
    TreeValidationResult,
    TreeLoadSource,
    TreeLoadResult,
)

__all__ = [
    # Tree models
    "TreeModel",
    "KnowledgeNode",
    "KnowledgeEdge",
    "TreeMetadata",
    "KnowledgeTree",
    # Enums
    "EdgeKind",
    "TreeSource",
    "MasteryState",
    "LearningStyle",
    "TreeLoadSource",
    # Defaults
    "DEFAULT_DIFFICULTY",
    "DEFAULT_EVIDENCE_CHECKPOINTS",
    "DEFAULT_ESTIMATED_MINUTES",
    # Source content
    "DifficultyLevel",
    "SourceConnection",
    "SourceItem",
    # Overlays
    "UserNodeOverlay",
    "PersonalizedOverlay",
    "progress_to_mastery",
    "mastery_to_progress",
    # Results
    "RecommendedNode",
    "LearningPath",
    "GroupProgress",
    "TreeAnalytics",
    "TreeValidationResult",
    "TreeLoadResult",
]
