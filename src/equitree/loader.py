"""Lazy loading of subtrees.

Each node moves through ``Unloaded -> Loading -> {Loaded, Unloaded}``; a
failure returns it to ``Unloaded`` so the next expand retries. At most one
fetch per node id is in flight. Fetches for different ids may overlap and
resolve in any order, so grafts locate their target by id, never by
position.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union

from equitree.events import EventDispatcher, LoadEndEvent, LoadErrorEvent, LoadStartEvent, ToggleEvent
from equitree.exceptions import FetchError, MalformedTreeError
from equitree.model import OwnershipTree
from equitree.state import StateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one ``fetch_children`` call."""

    success: bool
    data: Sequence[Any] = ()
    error: str | None = None

    @classmethod
    def ok(cls, children: Sequence[Any]) -> FetchResult:
        return cls(success=True, data=tuple(children))

    @classmethod
    def failed(cls, error: str) -> FetchResult:
        return cls(success=False, error=error)


FetchChildren = Callable[[str], Awaitable[Union[FetchResult, Mapping[str, Any]]]]


def coerce_fetch_result(node_id: str, raw: FetchResult | Mapping[str, Any]) -> list[Any]:
    """Extract child payloads from a fetch response.

    Accepts a ``FetchResult`` or the literal ``{"success": ..., "data" | "error": ...}``
    mapping.

    Raises:
        FetchError: The response reports failure or is badly shaped
    """
    if isinstance(raw, FetchResult):
        success, data, error = raw.success, raw.data, raw.error
    elif isinstance(raw, Mapping):
        success, data, error = raw.get("success"), raw.get("data"), raw.get("error")
    else:
        raise FetchError(node_id, f"unexpected response type {type(raw).__name__}")

    if success is not True:
        raise FetchError(node_id, str(error or "fetch reported failure"))
    if data is None:
        return []
    if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
        raise FetchError(node_id, "response data is not a list")
    return list(data)


class ExpandOutcome(Enum):
    """What an expand action did.

    Values:
        TOGGLED: Children were present; collapse state flipped.
        LOADED: Children were fetched, grafted and shown.
        FAILED: The fetch failed; the node can be retried.
        IN_FLIGHT: A fetch for this node is already running.
        NOOP: Nothing to expand (leaf, or loaded with no children).
    """

    TOGGLED = "toggled"
    LOADED = "loaded"
    FAILED = "failed"
    IN_FLIGHT = "in_flight"
    NOOP = "noop"


class LazyLoadCoordinator:
    """Decides whether an expand is a toggle or a fetch, and merges fetched data."""

    def __init__(
        self,
        tree: OwnershipTree,
        store: StateStore,
        fetch_children: FetchChildren | None = None,
        *,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self.tree = tree
        self.store = store
        self._fetch_children = fetch_children
        self._dispatcher = dispatcher or EventDispatcher()
        # Bumped on reload so responses for a discarded tree are dropped
        self._generation = 0

    def reset(self, tree: OwnershipTree) -> None:
        self.tree = tree
        self._generation += 1

    async def expand(self, node_id: str) -> ExpandOutcome:
        """Handle a user click on a node's expand affordance."""
        node = self.tree.node(node_id)

        if node.children:
            collapsed = self.store.toggle_collapse(node_id)
            self._dispatcher.emit(ToggleEvent(node_id=node_id, collapsed=collapsed))
            return ExpandOutcome.TOGGLED

        if not node.has_more_children:
            return ExpandOutcome.NOOP
        if self.store.is_loading(node_id):
            return ExpandOutcome.IN_FLIGHT
        if self._fetch_children is None:
            logger.warning("No fetcher configured; cannot load children of %s", node_id)
            return ExpandOutcome.NOOP
        if not self.store.begin_load(node_id):
            return ExpandOutcome.NOOP

        return await self._load(node_id)

    async def _load(self, node_id: str) -> ExpandOutcome:
        generation = self._generation
        # Undo begin_load if a strict processor fails so the node can be retried
        self._dispatcher.emit(
            LoadStartEvent(node_id=node_id),
            rollback=lambda: self.store.complete_load(node_id, False),
        )
        logger.debug("Loading children of %s", node_id)
        start = time.perf_counter()

        try:
            raw = await self._fetch_children(node_id)
        except asyncio.CancelledError:
            if generation == self._generation:
                self.store.complete_load(node_id, False)
            raise
        except Exception as exc:
            if generation != self._generation:
                logger.debug("Ignoring failed fetch of %s from before a reload: %s", node_id, exc)
                return ExpandOutcome.NOOP
            return self._fail(node_id, FetchError(node_id, f"{type(exc).__name__}: {exc}"), start)

        if generation != self._generation:
            logger.debug("Dropping children of %s fetched before a reload", node_id)
            return ExpandOutcome.NOOP

        try:
            children = coerce_fetch_result(node_id, raw)
            attached = self.tree.graft(node_id, children)
        except MalformedTreeError as exc:
            return self._fail(node_id, FetchError(node_id, str(exc)), start)
        except FetchError as exc:
            return self._fail(node_id, exc, start)

        self.store.complete_load(node_id, True)
        # Show the fresh subtree without a second click
        self.store.expand(node_id)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.debug("Loaded %d children of %s in %.0fms", len(attached), node_id, duration_ms)
        self._dispatcher.emit(
            LoadEndEvent(node_id=node_id, child_count=len(attached), duration_ms=duration_ms)
        )
        return ExpandOutcome.LOADED

    def _fail(self, node_id: str, error: FetchError, start: float) -> ExpandOutcome:
        self.store.complete_load(node_id, False)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.warning("%s", error)
        self._dispatcher.emit(LoadErrorEvent(node_id=node_id, error=error.reason, duration_ms=duration_ms))
        return ExpandOutcome.FAILED


@dataclass
class StaticChildrenSource:
    """In-memory ``fetch_children`` backed by a dict of id -> child payloads.

    Simulates network latency with ``delay`` seconds. Ids missing from
    ``children`` succeed with an empty list; ids in ``failures`` fail with
    the mapped message.
    """

    children: Mapping[str, Sequence[Any]] = field(default_factory=dict)
    delay: float = 0.0
    failures: Mapping[str, str] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    @classmethod
    def from_file(cls, path: str | Path, *, delay: float = 0.0) -> StaticChildrenSource:
        """Load an ``{id: [child payloads]}`` JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object mapping node ids to child lists")
        return cls(children=data, delay=delay)

    async def __call__(self, node_id: str) -> dict[str, Any]:
        self.calls.append(node_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if node_id in self.failures:
            return {"success": False, "error": self.failures[node_id]}
        return {"success": True, "data": copy.deepcopy(list(self.children.get(node_id, [])))}
