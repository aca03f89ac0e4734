"""Event processor base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from equitree.events.types import (
        Event,
        LoadEndEvent,
        LoadErrorEvent,
        LoadStartEvent,
        ToggleEvent,
        ViewportFitEvent,
    )


# Mapping from event class name to handler method name.
_EVENT_METHOD_MAP: dict[str, str] = {
    "ToggleEvent": "on_toggle",
    "LoadStartEvent": "on_load_start",
    "LoadEndEvent": "on_load_end",
    "LoadErrorEvent": "on_load_error",
    "ViewportFitEvent": "on_viewport_fit",
}


class EventProcessor:
    """Base class for event consumers.

    Subclass and override ``on_event`` to receive all events,
    or use ``TypedEventProcessor`` for per-type dispatch.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the controller is closed. Override to flush buffers."""


class TypedEventProcessor(EventProcessor):
    """Dispatches ``on_event`` to typed handler methods automatically.

    Override any of the ``on_*`` methods below to handle specific event types.
    Unhandled event types are silently ignored.
    """

    def on_event(self, event: Event) -> None:
        method_name = _EVENT_METHOD_MAP.get(type(event).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(event)

    def on_toggle(self, event: ToggleEvent) -> None: ...
    def on_load_start(self, event: LoadStartEvent) -> None: ...
    def on_load_end(self, event: LoadEndEvent) -> None: ...
    def on_load_error(self, event: LoadErrorEvent) -> None: ...
    def on_viewport_fit(self, event: ViewportFitEvent) -> None: ...
