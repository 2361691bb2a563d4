"""
Unit tests for tree loading, caching and synthesis.
"""

import threading
from datetime import datetime, timezone

import knowledge_tree.services.tree_store as tree_store_module
from knowledge_tree.models import DifficultyLevel
from knowledge_tree.services import map_difficulty
from knowledge_tree import (
    EdgeKind,
    InMemoryTreeCache,
    TreeLoadSource,
    TreeSource,
    TreeStore,
    build_tree_from_source_items,
)


def _edge_set(tree):
    return {(e.from_id, e.to_id, e.kind, e.strength) for e in tree.edges}


class TestTreeSynthesis:
    """Building a starting-point tree from source content."""

    def test_nodes(self, source_items):
        tree = build_tree_from_source_items("cosmos", source_items)

        assert [n.id for n in tree.nodes] == ["i1", "i2", "i3"]
        assert [n.difficulty for n in tree.nodes] == [1, 5, 3]
        assert [n.estimated_minutes for n in tree.nodes] == [15, 30, 15]
        assert all(n.evidence_checkpoints == 4 for n in tree.nodes)
        assert tree.nodes[0].skill_tags == ["expansion"]
        assert tree.nodes[2].prereqs == ["i1"]

    def test_tree_header(self, source_items):
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        tree = build_tree_from_source_items("cosmos", source_items, now=now)

        assert tree.subject == "cosmos"
        assert tree.version == "0.1.0"
        assert tree.source is TreeSource.AI_GENERATED
        assert tree.last_updated == now
        assert tree.metadata.description == "Auto-generated knowledge tree from 3 source items."

    def test_edges(self, source_items):
        tree = build_tree_from_source_items("cosmos", source_items)

        assert _edge_set(tree) == {
            ("i1", "i2", EdgeKind.PREREQUISITE, 0.8),
            ("i1", "i3", EdgeKind.PREREQUISITE, 1.0),
            ("i1", "i3", EdgeKind.INFLUENCE, 0.3),
            ("i3", "i2", EdgeKind.INFLUENCE, 0.3),
            ("i1", "i3", EdgeKind.CONTRAST, 0.5),
            ("i2", "i1", EdgeKind.INFLUENCE, 0.9),
        }
        assert len(tree.edges) == 6

    def test_explicit_prerequisite_not_duplicated(self, source_items):
        tree = build_tree_from_source_items("cosmos", source_items)
        pairs = [(e.from_id, e.to_id) for e in tree.edges if e.is_prerequisite]
        assert pairs.count(("i1", "i2")) == 1

    def test_rationales(self, source_items):
        tree = build_tree_from_source_items("cosmos", source_items)
        rationales = {e.rationale for e in tree.edges}

        assert "Big Bang provides chronological context for First Stars." in rationales
        assert "Explicit prerequisite from source data." in rationales
        assert "Overlapping ranges across Cosmology and Geology." in rationales

    def test_zero_minutes_kept(self):
        tree = build_tree_from_source_items("s", [
            {"id": "quiz", "title": "Quiz", "group": "g", "estimatedMinutes": 0},
            {"id": "unset", "title": "Unset", "group": "g", "estimatedMinutes": None},
        ])

        assert [n.estimated_minutes for n in tree.nodes] == [0, 15]

    def test_difficulty_levels(self):
        assert DifficultyLevel("advanced") is DifficultyLevel.ADVANCED
        assert map_difficulty("intro") == 1
        assert map_difficulty(DifficultyLevel.INTERMEDIATE) == 3
        assert map_difficulty("expert") == 2
        assert map_difficulty(None) == 2

    def test_accepts_raw_mappings(self):
        tree = build_tree_from_source_items("bio", [
            {"id": "cells", "content": "Cells", "group": "Life", "start": 3, "end": 2},
            {"id": "organs", "content": "Organs", "group": "Life", "start": 2, "end": 1},
        ])
        assert [(e.from_id, e.to_id) for e in tree.edges] == [("cells", "organs")]
        assert tree.nodes[0].difficulty == 2

    def test_generated_tree_validates(self, source_items):
        tree = build_tree_from_source_items("cosmos", source_items)
        assert tree_store_module.validate_tree(tree).valid is True


class TestLoadPolicy:
    """Cache first, then embedded tree, then synthesis."""

    def test_generates_then_caches(self, tree_store, source_items):
        first = tree_store.load_tree_for_pack("cosmos", source_items)
        second = tree_store.load_tree_for_pack("cosmos", source_items)

        assert first.source is TreeLoadSource.AUTO_GENERATED
        assert first.validation.valid is True
        assert second.source is TreeLoadSource.CACHED
        assert second.validation is None
        assert second.tree is first.tree

    def test_cache_hit_skips_validation(self, tree_store, source_items, monkeypatch):
        calls = []
        real_validate = tree_store_module.validate_tree

        def counting_validate(tree):
            calls.append(tree.subject)
            return real_validate(tree)

        monkeypatch.setattr(tree_store_module, "validate_tree", counting_validate)

        tree_store.load_tree_for_pack("cosmos", source_items)
        tree_store.load_tree_for_pack("cosmos", source_items)
        tree_store.load_tree_for_pack("cosmos", [])

        assert calls == ["cosmos"]

    def test_valid_embedded_tree_adopted(self, tree_store, chain_tree, source_items):
        result = tree_store.load_tree_for_pack("test", source_items, embedded_tree=chain_tree)

        assert result.source is TreeLoadSource.PACK_EMBEDDED
        assert result.tree is chain_tree
        assert tree_store.get_cached_tree("test") is chain_tree

    def test_embedded_mapping_payload(self, tree_store):
        payload = {
            "subject": "physics",
            "version": "1.0.0",
            "nodes": [
                {"id": "a", "title": "A", "group": "core"},
                {"id": "b", "title": "B", "group": "core"},
            ],
            "edges": [{"from": "a", "to": "b", "kind": "prerequisite"}],
        }
        result = tree_store.load_tree_for_pack("physics", [], embedded_tree=payload)

        assert result.source is TreeLoadSource.PACK_EMBEDDED
        assert [n.id for n in result.tree.nodes] == ["a", "b"]

    def test_invalid_embedded_tree_falls_back(self, tree_store, make_tree, source_items):
        cyclic = make_tree(["A", "B"], [("A", "B"), ("B", "A")])
        result = tree_store.load_tree_for_pack("cosmos", source_items, embedded_tree=cyclic)

        assert result.source is TreeLoadSource.AUTO_GENERATED
        assert [n.id for n in result.tree.nodes] == ["i1", "i2", "i3"]
        assert tree_store.get_cached_tree("cosmos") is result.tree

    def test_unparseable_embedded_payload_falls_back(self, tree_store, source_items):
        payload = {"subject": "cosmos", "nodes": "not-a-list"}
        result = tree_store.load_tree_for_pack("cosmos", source_items, embedded_tree=payload)

        assert result.source is TreeLoadSource.AUTO_GENERATED

    def test_invalid_generated_tree_still_cached(self, tree_store):
        items = [
            {"id": "x", "title": "X", "group": "g", "prerequisiteIds": ["y"]},
            {"id": "y", "title": "Y", "group": "g", "prerequisiteIds": ["x"]},
        ]
        result = tree_store.load_tree_for_pack("loop", items)

        assert result.validation.valid is False
        assert tree_store.get_cached_tree("loop") is result.tree

    def test_empty_source_items(self, tree_store):
        result = tree_store.load_tree_for_pack("empty", [])

        assert result.tree.nodes == []
        assert result.validation.valid is True


class TestCacheControls:
    def test_clear_forces_regeneration(self, tree_store, source_items):
        tree_store.load_tree_for_pack("cosmos", source_items)
        tree_store.clear_tree_cache()

        assert tree_store.get_cached_tree("cosmos") is None
        result = tree_store.load_tree_for_pack("cosmos", source_items)
        assert result.source is TreeLoadSource.AUTO_GENERATED

    def test_set_cached_tree(self, tree_store, chain_tree):
        tree_store.set_cached_tree("manual", chain_tree)
        result = tree_store.load_tree_for_pack("manual", [])

        assert result.source is TreeLoadSource.CACHED
        assert result.tree is chain_tree

    def test_empty_subject_is_a_valid_key(self, tree_store):
        result = tree_store.load_tree_for_pack("", [{"id": "a", "title": "A", "group": "g"}])

        assert result.source is TreeLoadSource.AUTO_GENERATED
        assert [n.id for n in result.tree.nodes] == ["a"]
        assert tree_store.get_cached_tree("") is result.tree
        assert tree_store.load_tree_for_pack("", []).source is TreeLoadSource.CACHED

    def test_stores_do_not_share_caches(self, source_items):
        first, second = TreeStore(), TreeStore()
        first.load_tree_for_pack("cosmos", source_items)

        assert "cosmos" in first.cache
        assert "cosmos" not in second.cache

    def test_injected_cache_is_used(self, source_items):
        cache = InMemoryTreeCache()
        TreeStore(cache).load_tree_for_pack("cosmos", source_items)

        assert cache.subjects() == ["cosmos"]
        assert len(cache) == 1

    def test_concurrent_loads(self, source_items):
        store = TreeStore()
        results = []
        start = threading.Barrier(8)

        def load():
            start.wait()
            results.append(store.load_tree_for_pack("cosmos", source_items))

        threads = [threading.Thread(target=load) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert store.cache.subjects() == ["cosmos"]
        sources = [r.source for r in results]
        assert sources.count(TreeLoadSource.AUTO_GENERATED) == 1
        assert sources.count(TreeLoadSource.CACHED) == 7
        assert all(r.tree is results[0].tree for r in results)
