"""Event dispatcher that fans engine events out to processors."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from equitree.events.processor import EventProcessor
    from equitree.events.types import Event

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Delivers toggle, load and viewport events to registered processors.

    Delivery is best-effort by default: a processor that raises is logged
    and skipped, and the click or load that emitted the event carries on.
    With ``strict=True`` the first failure propagates to the emitter. An
    emitter that has already changed state can pass ``rollback`` to
    ``emit`` so the change is undone before the error escapes.
    """

    def __init__(
        self,
        processors: list[EventProcessor] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._processors: list[EventProcessor] = list(processors) if processors else []
        self._strict = strict

    @property
    def active(self) -> bool:
        """True if there is at least one registered processor."""
        return len(self._processors) > 0

    @property
    def strict(self) -> bool:
        return self._strict

    def add(self, processor: EventProcessor) -> None:
        self._processors.append(processor)

    def emit(self, event: Event, *, rollback: Callable[[], None] | None = None) -> None:
        """Send *event* to every processor in registration order.

        Args:
            event: The event to deliver
            rollback: Run before re-raising when a processor fails in strict mode
        """
        for processor in self._processors:
            try:
                processor.on_event(event)
            except Exception:
                if self._strict:
                    if rollback is not None:
                        rollback()
                    raise
                logger.warning(
                    "EventProcessor %s failed on %s%s",
                    processor,
                    type(event).__name__,
                    _subject(event),
                    exc_info=True,
                )

    def shutdown(self) -> None:
        """Shut down and detach all processors.

        Every processor gets its ``shutdown`` call even when an earlier one
        fails. In strict mode the first failure is raised afterwards.
        """
        processors, self._processors = self._processors, []
        errors: list[Exception] = []
        for processor in processors:
            try:
                processor.shutdown()
            except Exception as exc:
                errors.append(exc)
                if not self._strict:
                    logger.warning("EventProcessor %s failed during shutdown", processor, exc_info=True)
        if errors and self._strict:
            raise errors[0]


def _subject(event: Event) -> str:
    node_id = getattr(event, "node_id", None)
    return f" for node {node_id!r}" if node_id is not None else ""
