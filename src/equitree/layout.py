"""Tiered tree layout for visible nodes.

Nodes sit on a fixed grid along the vertical axis (``y = depth *
vertical_spacing``). Along the horizontal axis every visible leaf gets its
own slot, assigned in pre-order, and each internal node is centered over
the span of its visible children. Collapsed nodes count as leaves.

The layout is a pure function of the visible sequence and the config: no
randomness and no memory of earlier passes, so re-centering after a
structural change is reproducible.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from equitree.config import DEFAULT_CONFIG, EngineConfig
from equitree.exceptions import LayoutInvariantViolation
from equitree.model import TreeNode
from equitree.visibility import Visibility, VisibleEdge, VisibleNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionedNode:
    """Visible node with its center in layout space."""

    node: TreeNode
    depth: int
    x: float
    y: float

    @property
    def id(self) -> str:
        return self.node.id


@dataclass(frozen=True)
class BoundingBox:
    """Extent of all node boxes in layout space."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)


@dataclass(frozen=True)
class LayoutResult:
    """Positions for one render pass. Never persisted."""

    nodes: tuple[PositionedNode, ...]
    edges: tuple[VisibleEdge, ...]
    bounds: BoundingBox
    horizontal_spacing: float
    vertical_spacing: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {p.id: p for p in self.nodes})

    def position(self, node_id: str) -> PositionedNode:
        try:
            return self._by_id[node_id]
        except KeyError:
            raise LayoutInvariantViolation([node_id]) from None

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def positions(self) -> dict[str, tuple[float, float]]:
        return {p.id: (p.x, p.y) for p in self.nodes}


def layout(
    visible: Visibility | Iterable[VisibleNode],
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    container_width: float | None = None,
) -> LayoutResult:
    """Assign layout-space coordinates to the visible nodes.

    Args:
        visible: Visible nodes in pre-order (a ``Visibility`` also supplies edges)
        config: Spacing and box geometry
        container_width: Used only when ``config.adaptive_spacing`` is on

    Returns:
        LayoutResult with one position per visible node and the bounding box

    Raises:
        LayoutInvariantViolation: The sequence is not in pre-order (a node comes
            before its parent), or a visible node was left without a position
    """
    if isinstance(visible, Visibility):
        nodes, edges = list(visible.nodes), visible.edges
    else:
        nodes = list(visible)
        ids = {v.id for v in nodes}
        edges = tuple(VisibleEdge(v.parent_id, v.id) for v in nodes if v.parent_id in ids)
    if not nodes:
        raise ValueError("Nothing to lay out: the visible node set is empty")

    h_spacing = _horizontal_spacing(nodes, config, container_width)
    v_spacing = config.vertical_spacing

    index = {v.id: i for i, v in enumerate(nodes)}
    out_of_order = [v.id for v in nodes if v.parent_id in index and index[v.parent_id] > index[v.id]]
    if out_of_order:
        raise LayoutInvariantViolation(out_of_order, reason="listed before their parent")

    visible_children: dict[str, list[str]] = {v.id: [] for v in nodes}
    for v in nodes:
        if v.parent_id in index:
            visible_children[v.parent_id].append(v.id)

    xs: dict[str, float] = {}
    slot = 0
    for v in nodes:
        if not visible_children[v.id]:
            xs[v.id] = slot * h_spacing
            slot += 1

    # Pre-order puts children after parents, so a reverse sweep sees children first
    for v in reversed(nodes):
        kids = visible_children[v.id]
        if kids:
            xs[v.id] = (xs[kids[0]] + xs[kids[-1]]) / 2

    missing = [v.id for v in nodes if v.id not in xs]
    if missing:
        raise LayoutInvariantViolation(missing)

    origin = xs[nodes[0].id]
    positioned = tuple(
        PositionedNode(v.node, v.depth, xs[v.id] - origin, v.depth * v_spacing) for v in nodes
    )
    bounds = BoundingBox(
        min_x=min(p.x for p in positioned) - config.half_width,
        max_x=max(p.x for p in positioned) + config.half_width,
        min_y=min(p.y for p in positioned) - config.half_height,
        max_y=max(p.y for p in positioned) + config.half_height,
    )
    logger.debug("Laid out %d nodes in %d leaf slots", len(positioned), slot)
    return LayoutResult(positioned, tuple(edges), bounds, h_spacing, v_spacing)


def _horizontal_spacing(
    nodes: list[VisibleNode],
    config: EngineConfig,
    container_width: float | None,
) -> float:
    if not config.adaptive_spacing or not container_width:
        return config.horizontal_spacing
    widest = max(Counter(v.depth for v in nodes).values())
    return max(config.horizontal_spacing, container_width / (widest + 1))
