"""Ownership tree model and payload normalizer.

The tree is stored arena-style in a NetworkX DiGraph: nodes are keyed by
id, each node carries a ``parent`` attribute, and edges run parent -> child
in display order (DiGraph preserves successor insertion order). A graft is
a local update at one node instead of a rebuild of the whole tree.

Usage:
    tree = normalize_tree(payload)
    tree.children("company-main")
    tree.graft("company-1", fetched_children)
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from equitree.exceptions import MalformedTreeError, UnknownNodeError

# Payload keys understood by the normalizer; everything else is kept as metadata
_PERCENTAGE_KEYS = ("percentage", "ownershipPercentage")
_HAS_MORE_KEYS = ("hasChildren", "hasMoreChildren")
_RESERVED_KEYS = frozenset({"id", "name", "children", *_PERCENTAGE_KEYS, *_HAS_MORE_KEYS})


@dataclass(frozen=True)
class TreeNode:
    """Read-only view of one entity in the ownership tree.

    Attributes:
        id: Unique id, stable across reloads
        name: Display label
        ownership_percentage: Share held by the parent (None on the root)
        has_more_children: True while a non-empty child set is not yet materialized
        children: Child ids in display order
        parent_id: Id of the parent (None on the root)
        meta: Extra payload fields (e.g. ``value``)
    """

    id: str
    name: str
    ownership_percentage: float | None = None
    has_more_children: bool = False
    children: tuple[str, ...] = ()
    parent_id: str | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_expandable(self) -> bool:
        """Whether the node gets a toggle affordance."""
        return bool(self.children) or self.has_more_children


class OwnershipTree:
    """Canonical, growable ownership tree.

    Nodes are only ever added (by grafts); existing ids are never removed
    or renumbered.
    """

    def __init__(self, graph: nx.DiGraph, root_id: str) -> None:
        self._graph = graph
        self.root_id = root_id

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __repr__(self) -> str:
        return f"OwnershipTree(root={self.root_id!r}, nodes={len(self)})"

    @property
    def graph(self) -> nx.DiGraph:
        """Read-only view of the underlying graph."""
        return self._graph.copy(as_view=True)

    def _attrs(self, node_id: str) -> dict[str, Any]:
        try:
            return self._graph.nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def node(self, node_id: str) -> TreeNode:
        attrs = self._attrs(node_id)
        return TreeNode(
            id=node_id,
            name=attrs["name"],
            ownership_percentage=attrs.get("percentage"),
            has_more_children=attrs["has_more_children"],
            children=tuple(self._graph.successors(node_id)),
            parent_id=attrs.get("parent"),
            meta=attrs.get("meta", {}),
        )

    def children(self, node_id: str) -> list[str]:
        self._attrs(node_id)
        return list(self._graph.successors(node_id))

    def parent(self, node_id: str) -> str | None:
        return self._attrs(node_id).get("parent")

    def ancestors(self, node_id: str) -> list[str]:
        """Ancestor ids from the immediate parent up to the root."""
        chain = []
        current = self.parent(node_id)
        while current is not None:
            chain.append(current)
            current = self._graph.nodes[current].get("parent")
        return chain

    def depth(self, node_id: str) -> int:
        return len(self.ancestors(node_id))

    def iter_preorder(self) -> Iterator[str]:
        """Yield all node ids depth-first, parents before children, in child order."""
        stack = [self.root_id]
        while stack:
            node_id = stack.pop()
            yield node_id
            stack.extend(reversed(list(self._graph.successors(node_id))))

    def graft(self, node_id: str, children: Sequence[Any]) -> list[str]:
        """Attach fetched child payloads under *node_id*.

        The payloads are normalized first; ids must be unique across the
        whole tree. On error the tree is left unchanged.

        Returns:
            Ids of the newly attached direct children, in order
        """
        self._attrs(node_id)
        subtree, top_ids = _build_graph(children, parent_id=node_id, taken=self._graph)
        self._graph.update(subtree)
        for child_id in top_ids:
            self._graph.add_edge(node_id, child_id)
        # The true child set is now materialized locally
        self._graph.nodes[node_id]["has_more_children"] = False
        return top_ids

    def to_payload(self, node_id: str | None = None) -> dict[str, Any]:
        """Serialize a subtree back to the input payload shape."""
        node = self.node(node_id or self.root_id)
        payload: dict[str, Any] = {"id": node.id, "name": node.name}
        if node.ownership_percentage is not None:
            payload["percentage"] = node.ownership_percentage
        payload.update(copy.deepcopy(dict(node.meta)))
        payload["hasChildren"] = node.has_more_children
        payload["children"] = [self.to_payload(child) for child in node.children]
        return payload


# =============================================================================
# Normalization
# =============================================================================


def normalize_tree(payload: Mapping[str, Any]) -> OwnershipTree:
    """Build a canonical OwnershipTree from a nested payload.

    Every node gets a concrete (possibly empty) child list and an explicit
    ``has_more_children`` flag; when the flag is absent it is derived as
    ``len(children) > 0``. Field values are copied so later grafts never
    touch caller-owned data.

    Raises:
        MalformedTreeError: Missing or duplicate id, or badly shaped fields
    """
    graph, top_ids = _build_graph([payload], parent_id=None, taken=None)
    return OwnershipTree(graph, top_ids[0])


def normalize_children(
    children: Sequence[Any],
    *,
    parent_id: str | None = None,
) -> list[TreeNode]:
    """Normalize a list of child payloads without attaching them anywhere."""
    graph, top_ids = _build_graph(children, parent_id=parent_id, taken=None)
    return [OwnershipTree(graph, top).node(top) for top in top_ids]


def _build_graph(
    payloads: Sequence[Any],
    *,
    parent_id: str | None,
    taken: nx.DiGraph | None,
) -> tuple[nx.DiGraph, list[str]]:
    """Normalize sibling payloads into a fresh graph (pre-order insertion)."""
    if isinstance(payloads, (str, bytes)) or not isinstance(payloads, Sequence):
        raise MalformedTreeError("children must be a list", node_id=parent_id)

    graph = nx.DiGraph()
    top_ids: list[str] = []
    # (payload, parent id, child-index path)
    stack: list[tuple[Any, str | None, tuple[int, ...]]] = [
        (raw, parent_id, (i,)) for i, raw in reversed(list(enumerate(payloads)))
    ]
    while stack:
        raw, parent, path = stack.pop()
        node_id, attrs, raw_children = _normalize_node(raw, path)
        if node_id in graph or (taken is not None and node_id in taken):
            raise MalformedTreeError("duplicate id", node_id=node_id, path=path)

        graph.add_node(node_id, parent=parent, **attrs)
        if len(path) == 1:
            top_ids.append(node_id)
        else:
            graph.add_edge(parent, node_id)

        stack.extend((child, node_id, (*path, i)) for i, child in reversed(list(enumerate(raw_children))))

    return graph, top_ids


def _normalize_node(raw: Any, path: tuple[int, ...]) -> tuple[str, dict[str, Any], list[Any]]:
    """Validate one payload node and extract (id, attributes, raw children)."""
    if not isinstance(raw, Mapping):
        raise MalformedTreeError(f"node must be a mapping, got {type(raw).__name__}", path=path)

    node_id = _coerce_id(raw.get("id"), path)

    raw_children = raw.get("children")
    if raw_children is None:
        raw_children = []
    if isinstance(raw_children, (str, bytes)) or not isinstance(raw_children, Sequence):
        raise MalformedTreeError("children must be a list", node_id=node_id, path=path)

    has_more = _first_present(raw, _HAS_MORE_KEYS)
    if has_more is None:
        has_more = len(raw_children) > 0
    elif not isinstance(has_more, bool):
        raise MalformedTreeError("hasChildren must be a boolean", node_id=node_id, path=path)

    attrs: dict[str, Any] = {
        "name": str(raw.get("name", node_id)),
        "has_more_children": has_more,
        "meta": copy.deepcopy({k: v for k, v in raw.items() if k not in _RESERVED_KEYS}),
    }
    percentage = _first_present(raw, _PERCENTAGE_KEYS)
    if percentage is not None:
        attrs["percentage"] = _coerce_percentage(percentage, node_id, path)

    return node_id, attrs, list(raw_children)


def _coerce_id(raw_id: Any, path: tuple[int, ...]) -> str:
    if isinstance(raw_id, bool) or raw_id is None:
        raise MalformedTreeError("missing id", path=path)
    if isinstance(raw_id, int):
        return str(raw_id)
    if not isinstance(raw_id, str) or not raw_id:
        raise MalformedTreeError("missing id", path=path)
    return raw_id


def _coerce_percentage(value: Any, node_id: str, path: tuple[int, ...]) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedTreeError("percentage must be a number", node_id=node_id, path=path)
    if not 0 <= value <= 100:
        raise MalformedTreeError(f"percentage {value} outside [0, 100]", node_id=node_id, path=path)
    return value


def _first_present(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None
