"""
Tree Store - load, cache and generate knowledge trees.

Trees come from one of three places, in order:
1. The cache, if the subject was loaded before
2. A tree embedded in the subject pack, if it validates
3. Synthesis from the pack's source content items

Loading never fails because of bad embedded data; the validation
outcome is returned alongside the tree instead.
"""

import logging
import threading
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..engine import validate_tree
from ..models import (
    DEFAULT_DIFFICULTY,
    DEFAULT_ESTIMATED_MINUTES,
    DEFAULT_EVIDENCE_CHECKPOINTS,
    DifficultyLevel,
    EdgeKind,
    KnowledgeEdge,
    KnowledgeNode,
    KnowledgeTree,
    SourceItem,
    TreeLoadResult,
    TreeLoadSource,
    TreeMetadata,
    TreeSource,
)
from ..storage import InMemoryTreeCache, TreeCache


logger = logging.getLogger(__name__)

GENERATED_VERSION = "0.1.0"
CHAIN_STRENGTH = 0.8
EXPLICIT_PREREQ_STRENGTH = 1.0
OVERLAP_INFLUENCE_STRENGTH = 0.3
DEFAULT_CONNECTION_STRENGTH = 0.5

_DIFFICULTY_TIERS = {
    DifficultyLevel.INTRO: 1,
    DifficultyLevel.INTERMEDIATE: 3,
    DifficultyLevel.ADVANCED: 5,
}

# TODO: confirm with content owners whether "analogy" should keep mapping
# to CONTRAST or get an edge kind of its own.
_CONNECTION_KINDS = {
    "analogy": EdgeKind.CONTRAST,
    "influence": EdgeKind.INFLUENCE,
    "contrast": EdgeKind.CONTRAST,
    "application": EdgeKind.APPLICATION,
}

EmbeddedTree = Union[KnowledgeTree, Mapping[str, Any]]


def map_difficulty(level: Optional[str]) -> int:
    """Map a three-level source difficulty onto the 1-5 tier scale."""
    return _DIFFICULTY_TIERS.get(level, DEFAULT_DIFFICULTY)


class TreeStore:
    """
    Loads knowledge trees for subject packs and caches them.

    The cache is injected so hosts decide its scope; by default each
    store owns a fresh in-memory cache. Loads through one store are
    serialized, so concurrent callers for a subject share a single
    generated tree. Separate stores sharing a cache are not serialized
    with each other.
    """

    def __init__(self, cache: TreeCache | None = None) -> None:
        self._cache = cache if cache is not None else InMemoryTreeCache()
        self._load_lock = threading.RLock()

    @property
    def cache(self) -> TreeCache:
        return self._cache

    # ─────────────────────────────────────────────────────────────────────────
    # Cache controls
    # ─────────────────────────────────────────────────────────────────────────

    def get_cached_tree(self, subject: str) -> KnowledgeTree | None:
        return self._cache.get(subject)

    def set_cached_tree(self, subject: str, tree: KnowledgeTree) -> None:
        self._cache.set(subject, tree)

    def clear_tree_cache(self) -> None:
        self._cache.clear()

    # ─────────────────────────────────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────────────────────────────────

    def load_tree_for_pack(
        self,
        subject_id: str,
        source_items: Iterable[SourceItem | Mapping[str, Any]],
        embedded_tree: EmbeddedTree | None = None,
    ) -> TreeLoadResult:
        """
        Load the tree for a subject pack.

        Cache hits are returned as-is without revalidation. An embedded
        tree is adopted only if it validates; otherwise a tree is
        generated from the source items and cached regardless of its
        own validation outcome.
        """
        with self._load_lock:
            return self._load(subject_id, source_items, embedded_tree)

    def _load(
        self,
        subject_id: str,
        source_items: Iterable[SourceItem | Mapping[str, Any]],
        embedded_tree: EmbeddedTree | None,
    ) -> TreeLoadResult:
        cached = self._cache.get(subject_id)
        if cached is not None:
            logger.debug(f"Tree cache hit: {subject_id}")
            return TreeLoadResult(tree=cached, validation=None, source=TreeLoadSource.CACHED)

        if embedded_tree is not None:
            tree = self._parse_embedded(subject_id, embedded_tree)
            if tree is not None:
                validation = validate_tree(tree)
                if validation.valid:
                    self._cache.set(subject_id, tree)
                    logger.info(f"Adopted embedded tree for {subject_id} (v{tree.version})")
                    return TreeLoadResult(
                        tree=tree, validation=validation, source=TreeLoadSource.PACK_EMBEDDED
                    )
                logger.warning(
                    f"Embedded tree for {subject_id} failed validation with "
                    f"{len(validation.errors)} error(s); generating from source items"
                )

        generated = build_tree_from_source_items(subject_id, source_items)
        validation = validate_tree(generated)
        self._cache.set(subject_id, generated)
        logger.info(
            f"Generated tree for {subject_id}: {len(generated.nodes)} nodes, "
            f"{len(generated.edges)} edges, valid={validation.valid}"
        )
        return TreeLoadResult(
            tree=generated, validation=validation, source=TreeLoadSource.AUTO_GENERATED
        )

    def _parse_embedded(self, subject_id: str, payload: EmbeddedTree) -> KnowledgeTree | None:
        if isinstance(payload, KnowledgeTree):
            return payload
        try:
            return KnowledgeTree.model_validate(payload)
        except ValidationError as e:
            logger.warning(
                f"Embedded tree for {subject_id} could not be parsed "
                f"({e.error_count()} error(s)); generating from source items"
            )
            return None


def build_tree_from_source_items(
    subject: str,
    source_items: Iterable[SourceItem | Mapping[str, Any]],
    now: datetime | None = None,
) -> KnowledgeTree:
    """
    Build a starting-point knowledge tree from source content.

    Creates a prerequisite chain within each group (by descending
    ``start``), explicit prerequisite edges, influence edges between
    groups whose ranges overlap, and edges for declared connections.
    """
    items = [
        item if isinstance(item, SourceItem) else SourceItem.model_validate(item)
        for item in source_items
    ]

    nodes = [
        KnowledgeNode(
            id=item.id,
            title=item.title,
            group=item.group,
            difficulty=map_difficulty(item.difficulty),
            evidence_checkpoints=DEFAULT_EVIDENCE_CHECKPOINTS,
            estimated_minutes=(
                item.estimated_minutes
                if item.estimated_minutes is not None
                else DEFAULT_ESTIMATED_MINUTES
            ),
            skill_tags=item.skill_tags,
            why_it_matters=item.description,
            learning_objectives=item.learning_objectives,
            prereqs=item.prerequisite_ids,
        )
        for item in items
    ]

    edges: list[KnowledgeEdge] = []
    prerequisite_pairs: set[tuple[str, str]] = set()

    def add_prerequisite(from_id: str, to_id: str, strength: float, rationale: str) -> None:
        edges.append(KnowledgeEdge(
            from_id=from_id,
            to_id=to_id,
            kind=EdgeKind.PREREQUISITE,
            strength=strength,
            rationale=rationale,
        ))
        prerequisite_pairs.add((from_id, to_id))

    groups: dict[str, list[SourceItem]] = {}
    for item in items:
        groups.setdefault(item.group, []).append(item)

    for group_items in groups.values():
        chain = sorted(group_items, key=lambda i: i.start, reverse=True)
        for earlier, later in zip(chain, chain[1:]):
            add_prerequisite(
                earlier.id,
                later.id,
                CHAIN_STRENGTH,
                f"{earlier.title} provides chronological context for {later.title}.",
            )

    for item in items:
        for prereq_id in item.prerequisite_ids:
            if (prereq_id, item.id) not in prerequisite_pairs:
                add_prerequisite(
                    prereq_id,
                    item.id,
                    EXPLICIT_PREREQ_STRENGTH,
                    "Explicit prerequisite from source data.",
                )

    by_start = sorted(items, key=lambda i: i.start, reverse=True)
    for i, a in enumerate(by_start):
        for b in by_start[i + 1:]:
            if a.group == b.group:
                continue
            overlap = min(a.start, b.start) - max(a.end, b.end)
            if overlap > 0:
                edges.append(KnowledgeEdge(
                    from_id=a.id,
                    to_id=b.id,
                    kind=EdgeKind.INFLUENCE,
                    strength=OVERLAP_INFLUENCE_STRENGTH,
                    rationale=f"Overlapping ranges across {a.group} and {b.group}.",
                ))

    for item in items:
        for connection in item.connections:
            edges.append(KnowledgeEdge(
                from_id=item.id,
                to_id=connection.target_id,
                kind=_CONNECTION_KINDS.get(connection.kind, EdgeKind.INFLUENCE),
                strength=(
                    connection.strength
                    if connection.strength is not None
                    else DEFAULT_CONNECTION_STRENGTH
                ),
            ))

    return KnowledgeTree(
        subject=subject,
        version=GENERATED_VERSION,
        last_updated=now or datetime.now(timezone.utc),
        source=TreeSource.AI_GENERATED,
        nodes=nodes,
        edges=edges,
        metadata=TreeMetadata(
            description=f"Auto-generated knowledge tree from {len(items)} source items."
        ),
    )
