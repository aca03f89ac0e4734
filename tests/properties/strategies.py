"""Hypothesis strategies for ownership trees.

Payloads use ids n0..nK assigned breadth-first, so shrinking keeps trees
readable in failure reports.
"""

from __future__ import annotations

from typing import Any

from hypothesis import strategies as st
from hypothesis.strategies import composite

from equitree import OwnershipTree, normalize_tree


@composite
def ownership_payloads(draw, max_nodes: int = 40, max_children: int = 4) -> dict[str, Any]:
    """Nested tree payloads of up to *max_nodes* nodes."""
    root: dict[str, Any] = {"id": "n0", "name": "n0", "children": []}
    frontier = [root]
    count = 1
    while frontier and count < max_nodes:
        parent = frontier.pop(0)
        fan_out = draw(st.integers(min_value=0, max_value=min(max_children, max_nodes - count)))
        for _ in range(fan_out):
            child: dict[str, Any] = {"id": f"n{count}", "name": f"n{count}", "children": []}
            percentage = draw(st.none() | st.integers(min_value=0, max_value=100))
            if percentage is not None:
                child["percentage"] = percentage
            parent["children"].append(child)
            frontier.append(child)
            count += 1
    return root


@composite
def trees_with_collapse(draw, max_nodes: int = 40) -> tuple[OwnershipTree, frozenset[str]]:
    """A normalized tree plus a random subset of its ids to collapse."""
    tree = normalize_tree(draw(ownership_payloads(max_nodes=max_nodes)))
    ids = list(tree.iter_preorder())
    collapsed = draw(st.sets(st.sampled_from(ids)))
    return tree, frozenset(collapsed)


@composite
def trees_with_target(draw, max_nodes: int = 40) -> tuple[OwnershipTree, frozenset[str], str]:
    """Like ``trees_with_collapse`` plus one node id to act on."""
    tree, collapsed = draw(trees_with_collapse(max_nodes=max_nodes))
    target = draw(st.sampled_from(list(tree.iter_preorder())))
    return tree, collapsed, target
