"""Windowless runner: drives the attract loop on a deterministic clock."""

import logging
import random
from typing import Optional

from goldenmunch.animation.attract_loop import AttractLoop
from goldenmunch.animation.bridge import ObservableState
from goldenmunch.animation.scheduler import ManualFrameHost
from goldenmunch.config.settings import AttractTuning, Settings
from goldenmunch.core.events import Event, EventBus, EventType
from goldenmunch.graphics.surface import BufferSurface

logger = logging.getLogger(__name__)


class HeadlessRunner:
    """Runs a fixed number of frames with no display attached."""

    def __init__(
        self,
        tuning: AttractTuning,
        width: int = 900,
        height: int = 500,
        seed: Optional[int] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.host = ManualFrameHost()
        self.surface = BufferSurface(width, height)
        self.loop = AttractLoop(
            tuning,
            width,
            height,
            event_bus=self.event_bus,
            rng=random.Random(seed),
            surface=self.surface,
            host=self.host,
        )
        self.syncs = 0
        self.event_bus.subscribe(EventType.STATE_SYNCED, self._on_sync)
        self.event_bus.subscribe(EventType.MILESTONE_REACHED, self._on_milestone)

    def _on_sync(self, event: Event) -> None:
        self.syncs += 1
        logger.info(
            f"Sync #{self.syncs}: score={event.data['score']} "
            f"pastries={event.data['collectible_count']} active={event.data['active']}"
        )

    def _on_milestone(self, event: Event) -> None:
        logger.info(f"Milestone overlay: {event.data['points']}")

    def run(self, frames: int, frame_ms: float = 1000.0 / 60.0) -> ObservableState:
        """Run `frames` frames and tear down.

        Returns:
            The final observable snapshot (active=False after teardown)
        """
        logger.info(f"Headless run: {frames} frames at {frame_ms:.2f} ms")
        self.loop.start()
        try:
            self.host.run_frames(frames, frame_ms)
        finally:
            self.loop.close()
        snapshot = self.loop.observable
        logger.info(
            f"Headless run finished: score={snapshot.score} "
            f"ticks={self.loop.state.ticks} syncs={self.syncs}"
        )
        return snapshot


def run_headless(settings: Settings) -> ObservableState:
    """Run the configured variant headless."""
    runner = HeadlessRunner(
        settings.tuning,
        settings.display.width,
        settings.display.height,
        seed=settings.seed,
    )
    return runner.run(settings.headless.frames, settings.headless.frame_ms)
