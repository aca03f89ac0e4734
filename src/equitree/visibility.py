"""Visible node and edge resolution.

The root is always visible. Any other node is visible iff no ancestor is
collapsed. One pre-order traversal yields both the visible nodes and the
visible edges; the order drives drawing z-order and leaf slot order in the
layout.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from equitree.model import OwnershipTree, TreeNode


@dataclass(frozen=True)
class VisibleNode:
    """A visible node with its depth below the root."""

    node: TreeNode
    depth: int

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def parent_id(self) -> str | None:
        return self.node.parent_id


@dataclass(frozen=True)
class VisibleEdge:
    """Parent -> child edge with both endpoints visible."""

    source_id: str
    target_id: str


@dataclass(frozen=True)
class Visibility:
    """Result of a visibility pass."""

    nodes: tuple[VisibleNode, ...]
    edges: tuple[VisibleEdge, ...]

    @property
    def ids(self) -> list[str]:
        return [v.id for v in self.nodes]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)


def visible_nodes(tree: OwnershipTree, collapsed: Iterable[str]) -> Visibility:
    """Resolve the visible nodes and edges for a collapse set.

    Args:
        tree: The materialized ownership tree
        collapsed: Ids whose descendants are hidden

    Returns:
        Visibility with nodes in depth-first pre-order and edges in the
        order their targets are visited
    """
    collapsed = frozenset(collapsed)
    nodes: list[VisibleNode] = []
    edges: list[VisibleEdge] = []

    stack: list[tuple[str, int]] = [(tree.root_id, 0)]
    while stack:
        node_id, depth = stack.pop()
        node = tree.node(node_id)
        nodes.append(VisibleNode(node, depth))
        if node.parent_id is not None and depth > 0:
            edges.append(VisibleEdge(node.parent_id, node_id))

        if node_id in collapsed:
            continue
        stack.extend((child, depth + 1) for child in reversed(node.children))

    return Visibility(tuple(nodes), tuple(edges))


def is_node_visible(node_id: str, tree: OwnershipTree, collapsed: Iterable[str]) -> bool:
    """Check a single node by walking up its parent chain."""
    collapsed = frozenset(collapsed)
    return not any(ancestor in collapsed for ancestor in tree.ancestors(node_id))
