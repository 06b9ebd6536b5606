"""Core framework components for Golden Munch."""

from .events import EventBus, Event, EventType
from .timers import TimerQueue

__all__ = ["EventBus", "Event", "EventType", "TimerQueue"]
