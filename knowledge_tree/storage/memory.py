"""
In-process tree cache.
"""

import logging
import threading
from typing import Optional

from ..models import KnowledgeTree
from .base import TreeCache


logger = logging.getLogger(__name__)


class InMemoryTreeCache(TreeCache):
    """
    Dictionary-backed tree cache guarded by a lock.

    Safe to share across threads within one process. Not shared
    across processes.
    """

    def __init__(self) -> None:
        self._trees: dict[str, KnowledgeTree] = {}
        self._lock = threading.RLock()

    def get(self, subject: str) -> Optional[KnowledgeTree]:
        with self._lock:
            return self._trees.get(subject)

    def set(self, subject: str, tree: KnowledgeTree) -> None:
        with self._lock:
            self._trees[subject] = tree
        logger.info(f"Cached tree: {subject} (v{tree.version}, {len(tree.nodes)} nodes)")

    def clear(self) -> None:
        with self._lock:
            count = len(self._trees)
            self._trees.clear()
        logger.info(f"Cleared tree cache ({count} subject(s))")

    def subjects(self) -> list[str]:
        with self._lock:
            return list(self._trees)

    def __len__(self) -> int:
        with self._lock:
            return len(self._trees)
