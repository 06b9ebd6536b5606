"""Timestamp-driven one-shot timers.

The attract loop never sleeps or uses wall-clock callbacks; delayed work
(staggered opening spawns, clearing the spawn animation flag) is queued
here and fired from inside a tick once its due time has passed.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


@dataclass(order=True)
class _Timer:
    due: float
    timer_id: int
    callback: Callable[[float], None] = field(compare=False)
    name: str = field(default="timer", compare=False)


class TimerQueue:
    """Min-heap of pending timers keyed by due timestamp (ms)."""

    def __init__(self) -> None:
        self._heap: List[_Timer] = []
        self._live: Dict[int, _Timer] = {}
        self._ids = itertools.count(1)

    def schedule(
        self,
        due: float,
        callback: Callable[[float], None],
        name: str = "timer",
    ) -> int:
        """Schedule a callback to fire on the first tick at or after `due`.

        The callback receives the tick timestamp.

        Returns:
            Timer id usable with cancel()
        """
        timer = _Timer(due=due, timer_id=next(self._ids), callback=callback, name=name)
        heapq.heappush(self._heap, timer)
        self._live[timer.timer_id] = timer
        return timer.timer_id

    def cancel(self, timer_id: int) -> bool:
        """Cancel a timer. Cancelling a fired or unknown timer is a no-op.

        Returns:
            True if a pending timer was cancelled
        """
        return self._live.pop(timer_id, None) is not None

    def run_due(self, timestamp: float) -> int:
        """Fire every live timer due at or before `timestamp`.

        Returns:
            Number of callbacks fired
        """
        fired = 0
        while self._heap and self._heap[0].due <= timestamp:
            timer = heapq.heappop(self._heap)
            if self._live.pop(timer.timer_id, None) is None:
                continue  # cancelled
            timer.callback(timestamp)
            fired += 1
        return fired

    def clear(self) -> None:
        """Drop all pending timers."""
        if self._live:
            logger.debug(f"Clearing {len(self._live)} pending timers")
        self._heap.clear()
        self._live.clear()

    def __len__(self) -> int:
        return len(self._live)
