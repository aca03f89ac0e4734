"""Tests for collapse/load state transitions."""

import pytest

from equitree import StateStore, TreeState


class TestTreeState:
    def test_snapshots_are_immutable_values(self):
        before = TreeState()
        after = before.toggled("a")
        assert before.collapsed == frozenset()
        assert after.collapsed == {"a"}

    def test_loading_and_loaded_must_be_disjoint(self):
        with pytest.raises(ValueError, match="both loading and loaded"):
            TreeState(loading=frozenset({"a"}), loaded=frozenset({"a"}))


class TestCollapse:
    def test_toggle_twice_restores(self):
        store = StateStore()
        assert store.toggle_collapse("a") is True
        assert store.is_collapsed("a")
        assert store.toggle_collapse("a") is False
        assert not store.is_collapsed("a")

    def test_toggle_does_not_start_a_load(self):
        store = StateStore()
        store.toggle_collapse("a")
        assert not store.is_loading("a")
        assert not store.is_loaded("a")

    def test_expand_is_idempotent(self):
        store = StateStore(TreeState(collapsed=frozenset({"a"})))
        store.expand("a")
        store.expand("a")
        assert not store.is_collapsed("a")

    def test_old_snapshot_unchanged_after_toggle(self):
        store = StateStore()
        snapshot = store.snapshot
        store.toggle_collapse("a")
        assert snapshot.collapsed == frozenset()
        assert store.snapshot is not snapshot


class TestLoadLifecycle:
    def test_begin_load_guards_duplicates(self):
        store = StateStore()
        assert store.begin_load("a") is True
        assert store.begin_load("a") is False
        assert store.is_loading("a")

    def test_successful_load_blocks_refetch(self):
        store = StateStore()
        store.begin_load("a")
        store.complete_load("a", True)
        assert not store.is_loading("a")
        assert store.is_loaded("a")
        assert store.begin_load("a") is False

    def test_failed_load_permits_retry(self):
        store = StateStore()
        store.begin_load("a")
        store.complete_load("a", False)
        assert not store.is_loading("a")
        assert not store.is_loaded("a")
        assert store.begin_load("a") is True

    def test_loading_and_loaded_never_overlap(self):
        store = StateStore()
        for node_id in ("a", "b", "c"):
            store.begin_load(node_id)
        store.complete_load("a", True)
        store.complete_load("b", False)
        snapshot = store.snapshot
        assert snapshot.loading == {"c"}
        assert snapshot.loaded == {"a"}
        assert not snapshot.loading & snapshot.loaded

    def test_reset(self):
        store = StateStore()
        store.begin_load("a")
        store.toggle_collapse("b")
        store.reset(frozenset({"z"}))
        assert store.snapshot == TreeState(collapsed=frozenset({"z"}))
