"""Event system for observing tree interaction."""

from equitree.events.dispatcher import EventDispatcher
from equitree.events.processor import EventProcessor, TypedEventProcessor
from equitree.events.types import (
    BaseEvent,
    Event,
    LoadEndEvent,
    LoadErrorEvent,
    LoadStartEvent,
    ToggleEvent,
    ViewportFitEvent,
)

__all__ = [
    # Event types
    "BaseEvent",
    "Event",
    "LoadEndEvent",
    "LoadErrorEvent",
    "LoadStartEvent",
    "ToggleEvent",
    "ViewportFitEvent",
    # Processor interfaces
    "EventProcessor",
    "TypedEventProcessor",
    # Dispatcher
    "EventDispatcher",
]
