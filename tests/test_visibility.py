"""Tests for visible node/edge resolution."""

from equitree import normalize_tree, visible_nodes
from equitree.visibility import is_node_visible


class TestVisibleNodes:
    def test_everything_visible_without_collapse(self, tree):
        visibility = visible_nodes(tree, set())
        assert visibility.ids == list(tree.iter_preorder())

    def test_depths(self, tree):
        depths = {v.id: v.depth for v in visible_nodes(tree, set())}
        assert depths == {
            "company-main": 0,
            "company-1": 1,
            "company-2": 1,
            "company-4": 1,
            "company-4-1": 2,
            "company-4-2": 2,
        }

    def test_collapsed_node_stays_visible(self, tree):
        ids = visible_nodes(tree, {"company-4"}).ids
        assert "company-4" in ids
        assert "company-4-1" not in ids
        assert "company-4-2" not in ids

    def test_collapsed_root_shows_only_root(self, tree):
        visibility = visible_nodes(tree, {"company-main"})
        assert visibility.ids == ["company-main"]
        assert visibility.edges == ()

    def test_edges_have_visible_endpoints(self, tree):
        visibility = visible_nodes(tree, {"company-4"})
        ids = set(visibility.ids)
        pairs = [(e.source_id, e.target_id) for e in visibility.edges]
        assert pairs == [
            ("company-main", "company-1"),
            ("company-main", "company-2"),
            ("company-main", "company-4"),
        ]
        assert all(s in ids and t in ids for s, t in pairs)

    def test_collapse_of_unknown_or_leaf_ids_is_harmless(self, tree):
        assert visible_nodes(tree, {"ghost", "company-2"}).ids == list(tree.iter_preorder())

    def test_preorder_child_order(self):
        tree = normalize_tree(
            {"id": "r", "children": [{"id": "b", "children": [{"id": "b1"}]}, {"id": "a"}]}
        )
        assert visible_nodes(tree, ()).ids == ["r", "b", "b1", "a"]


class TestIsNodeVisible:
    def test_hidden_under_collapsed_ancestor(self, tree):
        assert is_node_visible("company-4", tree, {"company-4"})
        assert not is_node_visible("company-4-1", tree, {"company-4"})

    def test_root_always_visible(self, tree):
        assert is_node_visible("company-main", tree, {"company-main"})
