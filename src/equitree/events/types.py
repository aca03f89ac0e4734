"""Events emitted while the tree is explored."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field


def _generate_event_id() -> str:
    """Generate a unique event ID."""
    return uuid.uuid4().hex[:16]


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all tree events.

    Attributes:
        event_id: Unique identifier for this event.
        timestamp: Unix timestamp when the event was created.
    """

    event_id: str = field(default_factory=_generate_event_id)
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class ToggleEvent(BaseEvent):
    """Emitted when a node's subtree is collapsed or expanded by the user.

    Attributes:
        node_id: The toggled node.
        collapsed: Collapse state after the toggle.
    """

    node_id: str = ""
    collapsed: bool = False


@dataclass(frozen=True)
class LoadStartEvent(BaseEvent):
    """Emitted when a lazy fetch for a node's children begins."""

    node_id: str = ""


@dataclass(frozen=True)
class LoadEndEvent(BaseEvent):
    """Emitted when fetched children have been grafted into the tree.

    Attributes:
        node_id: Node whose children were loaded.
        child_count: Number of direct children attached.
        duration_ms: Wall-clock duration of the fetch in milliseconds.
    """

    node_id: str = ""
    child_count: int = 0
    duration_ms: float = 0.0


@dataclass(frozen=True)
class LoadErrorEvent(BaseEvent):
    """Emitted when a lazy fetch fails. The node can be retried.

    Attributes:
        node_id: Node whose children were requested.
        error: Error message.
        duration_ms: Wall-clock duration of the failed fetch in milliseconds.
    """

    node_id: str = ""
    error: str = ""
    duration_ms: float = 0.0


@dataclass(frozen=True)
class ViewportFitEvent(BaseEvent):
    """Emitted when the viewport transform is recomputed to fit the tree."""

    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    width: float = 0.0
    height: float = 0.0


Event = ToggleEvent | LoadStartEvent | LoadEndEvent | LoadErrorEvent | ViewportFitEvent
