"""
Services layer for knowledge trees.

Provides tree loading/caching and the repository facade that
coordinates it with the engine.
"""

from .tree_store import TreeStore, build_tree_from_source_items, map_difficulty
from .repository import (
    KnowledgeTreeRepository,
    KnowledgeTreeState,
    KnowledgeTreeError,
    TreeNotLoadedError,
)

__all__ = [
    "TreeStore",
    "build_tree_from_source_items",
    "map_difficulty",
    "KnowledgeTreeRepository",
    "KnowledgeTreeState",
    "KnowledgeTreeError",
    "TreeNotLoadedError",
]
