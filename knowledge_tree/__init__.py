"""
Knowledge Tree Engine.

Shared, versioned concept graphs per subject, combined with
per-learner progress to produce orderings, recommendations,
learning paths and analytics.

Quick Start:
    from knowledge_tree import KnowledgeTreeRepository, SourceItem

    repo = KnowledgeTreeRepository()
    repo.load("algebra", [
        SourceItem(id="numbers", title="Numbers", group="core", start=2, end=1),
        SourceItem(id="equations", title="Equations", group="core", start=1, end=0),
    ])

    repo.recommend_next("algebra", {"numbers": 100})

Configuration via environment variables:
    KNOWLEDGE_TREE_RECOMMENDATION_COUNT=3
    KNOWLEDGE_TREE_ANALYTICS_RECOMMENDATIONS=5
    KNOWLEDGE_TREE_MAX_DIFFICULTY=5
"""

from .config import EngineSettings

from .models import (
    EdgeKind,
    TreeSource,
    MasteryState,
    LearningStyle,
    KnowledgeNode,
    KnowledgeEdge,
    TreeMetadata,
    KnowledgeTree,
    SourceItem,
    SourceConnection,
    UserNodeOverlay,
    PersonalizedOverlay,
    RecommendedNode,
    LearningPath,
    GroupProgress,
    TreeAnalytics,
    TreeValidationResult,
    TreeLoadSource,
    TreeLoadResult,
    progress_to_mastery,
    mastery_to_progress,
)

from .engine import (
    GraphModel,
    build_graph,
    validate_tree,
    topological_sort,
    recommend_next,
    path_to_node,
    generate_full_path,
    compute_analytics,
    build_overlay_from_progress,
    build_personalized_overlay,
)

from .storage import (
    TreeCache,
    InMemoryTreeCache,
)

from .services import (
    TreeStore,
    build_tree_from_source_items,
    KnowledgeTreeRepository,
    KnowledgeTreeState,
    KnowledgeTreeError,
    TreeNotLoadedError,
)

__all__ = [
    # Config
    "EngineSettings",
    # Models
    "EdgeKind",
    "TreeSource",
    "MasteryState",
    "LearningStyle",
    "KnowledgeNode",
    "KnowledgeEdge",
    "TreeMetadata",
    "KnowledgeTree",
    "SourceItem",
    "SourceConnection",
    "UserNodeOverlay",
    "PersonalizedOverlay",
    "RecommendedNode",
    "LearningPath",
    "GroupProgress",
    "TreeAnalytics",
    "TreeValidationResult",
    "TreeLoadSource",
    "TreeLoadResult",
    "progress_to_mastery",
    "mastery_to_progress",
    # Engine
    "GraphModel",
    "build_graph",
    "validate_tree",
    "topological_sort",
    "recommend_next",
    "path_to_node",
    "generate_full_path",
    "compute_analytics",
    "build_overlay_from_progress",
    "build_personalized_overlay",
    # Storage
    "TreeCache",
    "InMemoryTreeCache",
    # Services
    "TreeStore",
    "build_tree_from_source_items",
    "KnowledgeTreeRepository",
    "KnowledgeTreeState",
    "KnowledgeTreeError",
    "TreeNotLoadedError",
]
