"""
Pytest configuration for Knowledge Tree tests.

Provides shared fixtures for unit tests and BDD step definitions.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))

from knowledge_tree import (
    EdgeKind,
    KnowledgeEdge,
    KnowledgeNode,
    KnowledgeTree,
    SourceItem,
    TreeStore,
    InMemoryTreeCache,
)


def _node(entry) -> KnowledgeNode:
    if isinstance(entry, KnowledgeNode):
        return entry
    if isinstance(entry, str):
        entry = {"id": entry}
    elif isinstance(entry, tuple):
        entry = dict(zip(("id", "difficulty", "group"), entry))
    fields = {"title": entry["id"].upper(), "group": "core", **entry}
    return KnowledgeNode(**fields)


def _edge(entry) -> KnowledgeEdge:
    if isinstance(entry, KnowledgeEdge):
        return entry
    from_id, to_id, *rest = entry
    kind = rest[0] if len(rest) > 0 else EdgeKind.PREREQUISITE
    strength = rest[1] if len(rest) > 1 else 1.0
    return KnowledgeEdge(from_id=from_id, to_id=to_id, kind=kind, strength=strength)


@pytest.fixture
def make_tree():
    """
    Factory for small trees.

    Nodes: "id", ("id", difficulty[, group]) or a dict of node fields.
    Edges: (from, to[, kind[, strength]]); kind defaults to prerequisite.
    """
    def factory(nodes, edges=(), subject="test", version="1.0.0", **kwargs) -> KnowledgeTree:
        return KnowledgeTree(
            subject=subject,
            version=version,
            nodes=[_node(n) for n in nodes],
            edges=[_edge(e) for e in edges],
            **kwargs,
        )
    return factory


@pytest.fixture
def chain_tree(make_tree):
    """A(1) -> B(2) -> C(3) via prerequisite edges."""
    return make_tree(
        [("A", 1), ("B", 2), ("C", 3)],
        [("A", "B"), ("B", "C")],
    )


@pytest.fixture
def tree_store():
    """Tree store with its own fresh cache for each test."""
    return TreeStore(InMemoryTreeCache())


@pytest.fixture
def source_items():
    """Source content spanning two groups with overlapping ranges."""
    return [
        SourceItem(
            id="i1", title="Big Bang", group="Cosmology", start=100, end=80,
            difficulty="intro", skill_tags=["expansion"],
            connections=[{"targetId": "i3", "kind": "analogy"}],
        ),
        SourceItem(
            id="i2", title="First Stars", group="Cosmology", start=60, end=40,
            difficulty="advanced", estimated_minutes=30,
            prerequisite_ids=["i1"],
            connections=[{"targetId": "i1", "kind": "mystery", "strength": 0.9}],
        ),
        SourceItem(
            id="i3", title="Solar System", group="Geology", start=90, end=50,
            difficulty="intermediate", prerequisite_ids=["i1"],
        ),
    ]
