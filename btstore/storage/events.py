"""Event system for observing sync mode and quota changes.

Settings screens subscribe here instead of polling the facade. Handlers
run synchronously inside :meth:`EventBus.publish`; a handler that raises
is logged and skipped.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[["Event"], None]


class EventType(Enum):
    """Types of events that can occur."""

    # Sync mode events
    SYNC_ENABLED = auto()
    SYNC_DISABLED = auto()
    MIGRATION_FAILED = auto()

    # Quota events
    QUOTA_REFRESHED = auto()
    QUOTA_CLEARED = auto()

    # Maintenance events
    PAST_LEAGUES_PURGED = auto()


@dataclass(frozen=True)
class Event:
    """An event that occurred in the storage layer."""

    type: EventType
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def error(self) -> str | None:
        """Get the error message if this is a failure event."""
        return self.data.get("error")


class EventBus:
    """Dispatches storage events to handlers and keeps a bounded history.

    Handlers subscribed with ``event_type=None`` receive every event.
    """

    def __init__(
        self,
        history_limit: int = 1000,
        clock: Callable[[], datetime] | None = None,
    ):
        self._handlers: dict[EventType | None, list[Handler]] = {}
        self._history: deque[Event] = deque(maxlen=history_limit)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def subscribe(
        self, event_type: EventType | None, handler: Handler
    ) -> Callable[[], None]:
        """Register ``handler``; returns a callable that unregisters it."""
        self._handlers.setdefault(event_type, []).append(handler)
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: EventType | None, handler: Handler) -> None:
        """Unregister ``handler``; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Event) -> None:
        """Record ``event`` and deliver it to matching handlers in order."""
        self._history.append(event)

        targets = self._handlers.get(event.type, []) + self._handlers.get(None, [])
        for handler in targets:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Subscriber failed handling {event.type.name}")

    def emit(self, event_type: EventType, **data: Any) -> Event:
        """Build an event stamped by the bus clock and publish it."""
        event = Event(type=event_type, timestamp=self._clock(), data=data)
        self.publish(event)
        return event

    def get_history(
        self, event_type: EventType | None = None, limit: int = 100
    ) -> list[Event]:
        """Most recent events, oldest first, optionally of one type."""
        history = [
            e for e in self._history if event_type is None or e.type is event_type
        ]
        return history[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
