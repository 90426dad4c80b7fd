"""In-process publish/subscribe.

Delivery is synchronous: ``emit`` returns only after every matching
handler has run. Handlers for the event type run first, then wildcard
handlers, each group in registration order. A failing handler is logged
and skipped; it never stops delivery to the others or touches history.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Optional

from .config import EventBusConfig, EventType
from .schema import PAYLOAD_TYPES, Event, EventData

logger = logging.getLogger(__name__)

EventHandler = Callable[[Event], None]


class EventBus:
    """Central event bus with typed events and bounded history.

    Instances are constructed explicitly and handed to every component
    that publishes or subscribes; there is no module-level singleton.

    Example:
        bus = EventBus()
        bus.on(EventType.TOKEN_FAILED, lambda e: print(e.data.error))
        bus.emit(EventType.TOKEN_FAILED, token_event_data("PEPE2", "Pepe", error="rpc down"))
    """

    def __init__(self, config: Optional[EventBusConfig] = None) -> None:
        self.config = config or EventBusConfig()
        self._handlers: dict[EventType, list[EventHandler]] = {}
        self._wildcard_handlers: list[EventHandler] = []
        self._history: deque[Event] = deque(maxlen=self.config.max_history)
        self._emitted_count: int = 0
        self._handler_failures: int = 0

    def emit(self, event_type: EventType, data: EventData) -> Event:
        """Publish an event and deliver it to all subscribers.

        Args:
            event_type: The kind of event.
            data: Payload; must be the class registered for ``event_type``.

        Returns:
            The stored Event.

        Raises:
            TypeError: If ``data`` is not the payload class for the event type.
        """
        expected = PAYLOAD_TYPES[event_type]
        if not isinstance(data, expected):
            raise TypeError(
                f"{event_type.value} expects {expected.__name__}, "
                f"got {type(data).__name__}"
            )

        event = Event(type=event_type, data=data)
        self._history.append(event)
        self._emitted_count += 1

        for handler in list(self._handlers.get(event_type, ())):
            self._deliver(handler, event)
        for handler in list(self._wildcard_handlers):
            self._deliver(handler, event)

        return event

    def _deliver(self, handler: EventHandler, event: Event) -> None:
        try:
            handler(event)
        except Exception:
            self._handler_failures += 1
            logger.exception(
                "Event handler %s failed for %s",
                getattr(handler, "__qualname__", repr(handler)),
                event.type.value,
                extra={"event_type": event.type.value},
            )

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe a handler to a single event type."""
        self._handlers.setdefault(event_type, []).append(handler)

    def on_all(self, handler: EventHandler) -> None:
        """Subscribe a handler to every event type."""
        self._wildcard_handlers.append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> bool:
        """Remove a handler for an event type. Returns True if it was registered."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def off_all(self, handler: EventHandler) -> bool:
        """Remove a wildcard handler. Returns True if it was registered."""
        if handler in self._wildcard_handlers:
            self._wildcard_handlers.remove(handler)
            return True
        return False

    def get_history(self, limit: Optional[int] = None) -> list[Event]:
        """Get recent events, newest last."""
        events = list(self._history)
        if limit:
            return events[-limit:]
        return events

    def get_events_by_type(
        self, event_type: EventType, limit: Optional[int] = None,
    ) -> list[Event]:
        """Get recent events of one type, newest last."""
        events = [e for e in self._history if e.type == event_type]
        if limit:
            return events[-limit:]
        return events

    def clear_history(self) -> None:
        """Drop all stored events."""
        self._history.clear()

    def subscriber_count(self, event_type: Optional[EventType] = None) -> int:
        """Count handlers for one type, or all handlers when no type is given."""
        if event_type is not None:
            return len(self._handlers.get(event_type, ()))
        typed = sum(len(h) for h in self._handlers.values())
        return typed + len(self._wildcard_handlers)

    def get_statistics(self) -> dict[str, Any]:
        """Get event bus statistics."""
        return {
            "total_emitted": self._emitted_count,
            "handler_failures": self._handler_failures,
            "subscribers": self.subscriber_count(),
            "wildcard_subscribers": len(self._wildcard_handlers),
            "history_size": len(self._history),
            "max_history": self.config.max_history,
        }
