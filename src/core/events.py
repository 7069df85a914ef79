"""Fire-and-forget event sink for task board changes.

The task store hands every committed mutation to the configured sink. A push
transport (websocket, SSE, ...) subscribes to the broadcaster; the store never
waits on delivery and never sees a subscriber failure.
"""

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TaskEvent(StrEnum):
    """Event names emitted after successful mutations."""

    TASK_CREATED = "taskCreated"
    TASK_UPDATED = "taskUpdated"
    TASK_CLAIMED = "taskClaimed"
    TASK_DELETED = "taskDeleted"
    NOTIFICATION = "notification"


class EventSink(Protocol):
    """Anything that accepts events."""

    def emit(self, event: str, payload: dict[str, Any]) -> None: ...


Subscriber = Callable[[str, dict[str, Any]], None]


class EventBroadcaster:
    """In-process sink that fans events out to subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber and return a callable that removes it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(event, payload)
            except Exception:
                logger.exception("Event subscriber failed", extra={"event": event})


class _SinkHolder:
    sink: EventSink = EventBroadcaster()


def get_event_sink() -> EventSink:
    """Return the process-wide sink."""
    return _SinkHolder.sink


def set_event_sink(sink: EventSink) -> None:
    """Replace the process-wide sink (used by transports and tests)."""
    _SinkHolder.sink = sink


def publish_event(event: TaskEvent, payload: dict[str, Any]) -> None:
    """Emit an event, logging and dropping any sink failure.

    Called only after the store mutation has committed.
    """
    try:
        get_event_sink().emit(event.value, payload)
        logger.debug("Published event", extra={"event": event.value, "payload": payload})
    except Exception:
        # Don't raise - a notification failure must not fail the mutation
        logger.exception("Failed to publish event", extra={"event": event.value})
