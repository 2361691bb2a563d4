"""
Cache backends for knowledge trees.

Provides the abstract cache interface and the in-process
implementation used by TreeStore.
"""

from .base import TreeCache
from .memory import InMemoryTreeCache

__all__ = [
    "TreeCache",
    "InMemoryTreeCache",
]
