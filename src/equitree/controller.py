"""Interactive controller: owns all mutable state and runs the pipeline.

Every discrete event (click, fetch resolved, resize, gesture, reload) ends
by producing a new ``Frame``:

    tree + collapse state -> visible nodes -> layout -> viewport -> scene

Gestures only touch the viewport, so they reuse the last layout.

Example:
    >>> controller = TreeController(payload, fetch_children, width=960, height=640)
    >>> outcome = await controller.click("company-1")
    >>> controller.frame.to_svg().save("tree.svg")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from equitree.config import DEFAULT_CONFIG, EngineConfig
from equitree.events import EventDispatcher, EventProcessor, LoadStartEvent, TypedEventProcessor
from equitree.layout import LayoutResult, layout
from equitree.loader import ExpandOutcome, FetchChildren, LazyLoadCoordinator
from equitree.model import OwnershipTree, normalize_tree
from equitree.render import Scene, SvgDiagram, render, to_svg
from equitree.state import StateStore, TreeState
from equitree.viewport import ContainerSize, ViewportManager, ViewportTransform
from equitree.visibility import Visibility, visible_nodes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """Everything needed to draw one state of the widget."""

    state: TreeState
    visibility: Visibility
    layout: LayoutResult
    transform: ViewportTransform
    scene: Scene
    container: ContainerSize

    def to_svg(self) -> SvgDiagram:
        return to_svg(self.scene, self.container.width, self.container.height)


class _RefreshOnLoadStart(TypedEventProcessor):
    """Redraws when a fetch starts so the loading affordance shows during the wait."""

    def __init__(self, controller: TreeController) -> None:
        self._controller = controller

    def on_load_start(self, event: LoadStartEvent) -> None:
        self._controller.refresh()


class TreeController:
    """Single owner of tree, collapse/load state and viewport.

    Raises:
        MalformedTreeError: The initial payload is invalid; nothing is rendered
    """

    def __init__(
        self,
        payload: Mapping[str, Any],
        fetch_children: FetchChildren | None = None,
        *,
        width: float,
        height: float,
        config: EngineConfig = DEFAULT_CONFIG,
        collapsed: Iterable[str] = (),
        processors: list[EventProcessor] | None = None,
        strict_events: bool = False,
    ) -> None:
        tree = normalize_tree(payload)
        self.config = config
        self._dispatcher = EventDispatcher(processors, strict=strict_events)
        self._store = StateStore()
        self._store.reset(frozenset(collapsed))
        self._viewport = ViewportManager(config, dispatcher=self._dispatcher)
        self._viewport.resize(width, height)
        self._coordinator = LazyLoadCoordinator(tree, self._store, fetch_children, dispatcher=self._dispatcher)
        self._dispatcher.add(_RefreshOnLoadStart(self))
        self._frame = self.refresh()

    @property
    def tree(self) -> OwnershipTree:
        return self._coordinator.tree

    @property
    def state(self) -> TreeState:
        return self._store.snapshot

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def viewport(self) -> ViewportManager:
        return self._viewport

    @property
    def frame(self) -> Frame:
        return self._frame

    def refresh(self) -> Frame:
        """Run the full pipeline against the current state."""
        container = self._viewport.container
        visibility = visible_nodes(self.tree, self._store.snapshot.collapsed)
        result = layout(visibility, self.config, container_width=container.width)
        transform = self._viewport.on_layout(result)
        scene = render(result, transform, self._store.snapshot, self.config)
        self._frame = Frame(self._store.snapshot, visibility, result, transform, scene, container)
        return self._frame

    async def click(self, node_id: str) -> ExpandOutcome:
        """Handle a click on a node's toggle affordance."""
        outcome = await self._coordinator.expand(node_id)
        if outcome is not ExpandOutcome.IN_FLIGHT:
            self.refresh()
        return outcome

    def resize(self, width: float, height: float) -> Frame | None:
        """Container resized. Returns None when the dimensions did not change."""
        if not self._viewport.resize(width, height):
            return None
        logger.debug("Container resized to %sx%s", width, height)
        return self.refresh()

    def pan(self, dx: float, dy: float) -> Frame:
        return self._redraw(self._viewport.pan(dx, dy))

    def zoom(self, factor: float, anchor: tuple[float, float] | None = None) -> Frame:
        return self._redraw(self._viewport.zoom(factor, anchor))

    def set_transform(self, transform: ViewportTransform) -> Frame:
        return self._redraw(self._viewport.set_transform(transform))

    def reload(self, payload: Mapping[str, Any], *, collapsed: Iterable[str] = ()) -> Frame:
        """Replace the data. Collapse/load state and the viewport start over.

        The payload is validated before anything is reset, so a malformed
        reload leaves the current tree on screen.
        """
        tree = normalize_tree(payload)
        self._store.reset(frozenset(collapsed))
        self._coordinator.reset(tree)
        self._viewport.reset()
        return self.refresh()

    def close(self) -> None:
        self._dispatcher.shutdown()

    def _redraw(self, transform: ViewportTransform) -> Frame:
        self._frame = replace(self._frame, transform=transform, scene=replace(self._frame.scene, transform=transform))
        return self._frame
