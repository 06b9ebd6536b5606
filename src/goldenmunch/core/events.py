"""
Event bus system for Golden Munch.

Provides pub/sub messaging between the attract loop and the host window.
Host-originated events (touches, resizes) are queued and drained once per
window loop iteration, so they are applied between ticks.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
from collections import defaultdict, deque
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Host input
    ACTIVATE = auto()
    RESIZE = auto()

    # Attract loop output
    COLLECTIBLE_SPAWNED = auto()
    COLLECTIBLE_CONSUMED = auto()
    MILESTONE_REACHED = auto()
    STATE_SYNCED = auto()
    NAVIGATE_AWAY = auto()

    # System events
    TICK = auto()  # Frame tick
    SHUTDOWN = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type (EventType enum or custom string)
        data: Event payload
        source: Component that emitted the event
        timestamp: When event was created (monotonic seconds)
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.monotonic)


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for component communication.

    Events can be emitted immediately or queued for batch processing.
    A failing handler is logged and skipped; the remaining handlers
    still run.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType | str, list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []
        self._queue: deque[Event] = deque()
        self._event_history: deque[Event] = deque(maxlen=history_limit)

    def subscribe(
        self,
        event_type: EventType | str,
        handler: Handler
    ) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to listen for
            handler: Callback function

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Subscribe to all events. Returns an unsubscribe function."""
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Emit an event immediately."""
        self._event_history.append(event)
        self._dispatch(event)

    def queue_event(self, event: Event) -> None:
        """Queue an event for later processing."""
        self._queue.append(event)

    def process_queue(self) -> int:
        """Dispatch all queued events.

        Returns:
            Number of events processed
        """
        count = 0
        while self._queue:
            self.emit(self._queue.popleft())
            count += 1
        return count

    @property
    def pending(self) -> int:
        """Number of queued events not yet processed."""
        return len(self._queue)

    def _dispatch(self, event: Event) -> None:
        handlers = self._handlers.get(event.type, []) + self._global_handlers

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type}: {e}")

    def get_history(
        self,
        event_type: EventType | str | None = None,
        limit: int = 10
    ) -> list[Event]:
        """Get recent events from history."""
        history = list(self._event_history)
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        """Clear event history."""
        self._event_history.clear()


# Convenience functions for creating common events
def activate_event(source: str = "touch") -> Event:
    """Create an activation (touch/click) event."""
    return Event(EventType.ACTIVATE, source=source)


def resize_event(width: float, height: float, source: str = "window") -> Event:
    """Create a resize notification event."""
    return Event(EventType.RESIZE, data={"width": width, "height": height}, source=source)


def tick_event(timestamp: float, frame: int) -> Event:
    """Create a frame tick event."""
    return Event(EventType.TICK, data={"timestamp": timestamp, "frame": frame})
