"""Throttled, read-only mirror of the attract loop for the surrounding UI.

The simulation mutates its state every tick. UI chrome only ever sees an
immutable ObservableState copied out at the sync cadence, so a score it
shows is always a value the simulation actually held at some past tick.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List
import logging
import math

if TYPE_CHECKING:
    from goldenmunch.animation.state import SimulationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObservableState:
    """Snapshot exposed to UI chrome."""
    score: int = 0
    collectible_count: int = 0
    active: bool = False
    synced_at: float = -math.inf


Listener = Callable[[ObservableState], None]


class StateBridge:
    """Copies score/count/active out of SimulationState at most once per interval."""

    def __init__(self, interval_ms: float = 1000.0):
        self.interval_ms = interval_ms
        self._snapshot = ObservableState()
        self._listeners: List[Listener] = []

    @property
    def snapshot(self) -> ObservableState:
        return self._snapshot

    @property
    def score(self) -> int:
        return self._snapshot.score

    @property
    def collectible_count(self) -> int:
        return self._snapshot.collectible_count

    @property
    def active(self) -> bool:
        return self._snapshot.active

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a sync listener. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def due(self, state: "SimulationState", timestamp: float) -> bool:
        return timestamp - state.last_sync > self.interval_ms

    def sync(self, state: "SimulationState", timestamp: float, force: bool = False) -> bool:
        """Copy the current values out if the throttle allows.

        Returns:
            True if a new snapshot was published
        """
        if not force and not self.due(state, timestamp):
            return False

        state.last_sync = timestamp
        self._snapshot = ObservableState(
            score=state.score,
            collectible_count=len(state.collectibles),
            active=state.running,
            synced_at=timestamp,
        )
        for listener in list(self._listeners):
            listener(self._snapshot)
        return True

    def force_sync(self, state: "SimulationState", timestamp: float) -> None:
        """Publish immediately, ignoring the throttle (used on teardown)."""
        self.sync(state, timestamp, force=True)

    def reset(self) -> None:
        self._snapshot = ObservableState()
