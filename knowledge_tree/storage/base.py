"""
Base cache interface for knowledge trees.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import KnowledgeTree


class TreeCache(ABC):
    """
    Abstract subject-keyed cache of knowledge trees.

    Lifecycle: starts empty, is populated lazily as trees are loaded,
    and is cleared only on demand. There is no eviction policy.
    """

    @abstractmethod
    def get(self, subject: str) -> Optional[KnowledgeTree]:
        """Get the cached tree for a subject, if any."""
        pass

    @abstractmethod
    def set(self, subject: str, tree: KnowledgeTree) -> None:
        """Cache a tree, replacing any previous entry for the subject."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every cached tree."""
        pass

    @abstractmethod
    def subjects(self) -> list[str]:
        """Subjects currently cached."""
        pass

    def __contains__(self, subject: str) -> bool:
        return self.get(subject) is not None
