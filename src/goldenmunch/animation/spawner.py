"""Pastry spawner for the attract loop.

Pastries appear at random spots away from the muncher, up to a fixed cap,
at a randomized cadence redrawn after every spawn.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Tuple
import itertools
import logging
import math
import random

from goldenmunch.config.settings import AttractTuning

if TYPE_CHECKING:
    from goldenmunch.animation.state import SimulationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PastryStyle:
    """Visual variant of a pastry."""
    name: str
    body: Tuple[int, int, int]
    topping: Tuple[int, int, int]


# Fixed palette; collectibles store an index into it
PASTRY_PALETTE: Tuple[PastryStyle, ...] = (
    PastryStyle("cake", (250, 225, 190), (245, 130, 160)),
    PastryStyle("cupcake", (190, 120, 70), (255, 180, 210)),
    PastryStyle("birthday_cake", (255, 240, 220), (120, 200, 255)),
    PastryStyle("cookie", (205, 150, 80), (90, 55, 30)),
    PastryStyle("pie", (215, 160, 90), (170, 40, 60)),
    PastryStyle("donut", (225, 165, 95), (240, 110, 180)),
    PastryStyle("bun", (230, 190, 120), (250, 240, 230)),
    PastryStyle("flan", (250, 205, 90), (140, 80, 30)),
)


@dataclass
class Collectible:
    """A pastry waiting to be eaten."""
    id: int
    x: float
    y: float
    size: float
    variant: int = 0
    spawning: bool = True
    spawned_at: float = 0.0

    @property
    def style(self) -> PastryStyle:
        return PASTRY_PALETTE[self.variant % len(PASTRY_PALETTE)]


class CollectibleSpawner:
    """Places pastries inside the arena, never past the cap."""

    def __init__(self, tuning: AttractTuning, rng: random.Random | None = None):
        self.tuning = tuning
        self.rng = rng or random.Random()
        self._ids = itertools.count(1)
        self.on_spawn: Optional[Callable[[Collectible], None]] = None

    def next_interval(self) -> float:
        """Draw the wait before the next spawn."""
        return self.rng.uniform(self.tuning.spawn_interval_min_ms, self.tuning.spawn_interval_max_ms)

    def at_capacity(self, state: "SimulationState") -> bool:
        return len(state.collectibles) >= self.tuning.max_collectibles

    def update(self, state: "SimulationState", timestamp: float) -> Optional[Collectible]:
        """Spawn one pastry if the interval has elapsed and there is room.

        While at capacity the spawn clock is left untouched, so a pastry
        appears as soon as one is eaten.
        """
        if timestamp - state.last_spawn <= state.next_spawn_interval:
            return None
        if self.at_capacity(state):
            return None

        collectible = self.spawn(state, timestamp)
        state.last_spawn = timestamp
        state.next_spawn_interval = self.next_interval()
        return collectible

    def spawn(self, state: "SimulationState", timestamp: float) -> Optional[Collectible]:
        """Place a pastry now, ignoring the cadence but never the cap."""
        if self.at_capacity(state) or not state.arena.ready:
            return None

        cfg = self.tuning
        x, y = self.pick_position(state)
        collectible = Collectible(
            id=next(self._ids),
            x=x,
            y=y,
            size=self.rng.uniform(cfg.size_min, cfg.size_max),
            variant=self.rng.randrange(len(PASTRY_PALETTE)),
            spawning=True,
            spawned_at=timestamp,
        )
        state.collectibles[collectible.id] = collectible

        state.timers.schedule(
            timestamp + cfg.spawn_animation_ms,
            lambda ts, c=collectible: setattr(c, "spawning", False),
            name=f"settle_{collectible.id}",
        )

        logger.debug(
            f"Spawned {collectible.style.name} #{collectible.id} at "
            f"({x:.0f}, {y:.0f}) size={collectible.size:.1f}"
        )
        if self.on_spawn:
            self.on_spawn(collectible)
        return collectible

    def pick_position(self, state: "SimulationState") -> Tuple[float, float]:
        """Reject-sample a point away from the pursuer.

        Gives up after a bounded number of attempts and keeps the last
        candidate, so placement never fails.
        """
        cfg = self.tuning
        arena = state.arena
        pursuer = state.pursuer

        x, y = arena.center
        for _ in range(cfg.spawn_attempts):
            x = self._sample_axis(arena.width, cfg.spawn_margin)
            y = self._sample_axis(arena.height, cfg.spawn_margin)
            if math.hypot(x - pursuer.x, y - pursuer.y) >= cfg.min_spawn_distance:
                break
        return x, y

    def _sample_axis(self, dim: float, margin: float) -> float:
        if dim <= 2 * margin:
            return dim / 2
        return self.rng.uniform(margin, dim - margin)

    def schedule_opening(self, state: "SimulationState", timestamp: float) -> None:
        """Queue the staggered opening pastries through the timer queue."""
        cfg = self.tuning
        for i in range(cfg.initial_spawn_count):
            state.timers.schedule(
                timestamp + i * cfg.initial_spawn_stagger_ms,
                lambda ts: self.spawn(state, ts),
                name=f"opening_spawn_{i}",
            )
