"""
Knowledge Tree Engine.

Pure functions over a KnowledgeTree plus a progress snapshot:
- Graph construction and validation
- Topological ordering
- Recommendations, learning paths and analytics
- Learner overlays
"""

from .graph import GraphModel, build_graph
from .validation import validate_tree, find_prerequisite_cycle
from .ordering import topological_sort
from .recommendation import recommend_next, unmet_prerequisites, learning_gain
from .paths import path_to_node, generate_full_path
from .analytics import compute_analytics
from .overlay import build_overlay_from_progress, build_personalized_overlay

__all__ = [
    "GraphModel",
    "build_graph",
    "validate_tree",
    "find_prerequisite_cycle",
    "topological_sort",
    "recommend_next",
    "unmet_prerequisites",
    "learning_gain",
    "path_to_node",
    "generate_full_path",
    "compute_analytics",
    "build_overlay_from_progress",
    "build_personalized_overlay",
]
