"""Single owned aggregate of everything the attract loop mutates per tick."""

from dataclasses import dataclass, field
from typing import Dict, Optional
import math
import random

from goldenmunch.animation.arena import Arena
from goldenmunch.animation.milestone import MilestoneEffect
from goldenmunch.animation.particles import ParticleSystem
from goldenmunch.animation.pursuer import Pursuer
from goldenmunch.animation.spawner import Collectible
from goldenmunch.config.settings import AttractTuning
from goldenmunch.core.timers import TimerQueue


@dataclass
class SimulationState:
    """Mutable simulation state, owned by exactly one AttractLoop.

    Throttle timestamps start at -inf so every throttled action is due on
    the first tick that has usable bounds.
    """

    arena: Arena
    pursuer: Pursuer
    particles: ParticleSystem
    collectibles: Dict[int, Collectible] = field(default_factory=dict)
    milestone: MilestoneEffect = field(default_factory=MilestoneEffect)
    timers: TimerQueue = field(default_factory=TimerQueue)
    score: int = 0
    running: bool = False

    # Throttle timestamps (ms)
    last_mouth_toggle: float = -math.inf
    last_spawn: float = -math.inf
    last_milestone_check: float = -math.inf
    last_sync: float = -math.inf
    next_spawn_interval: float = 0.0

    # Clock
    started_at: Optional[float] = None
    last_tick: Optional[float] = None
    ticks: int = 0

    @classmethod
    def create(
        cls,
        tuning: AttractTuning,
        width: float = 0.0,
        height: float = 0.0,
        rng: random.Random | None = None,
    ) -> "SimulationState":
        """Fresh state with the pursuer at its default placement."""
        return cls(
            arena=Arena(width, height),
            pursuer=Pursuer.from_tuning(tuning),
            particles=ParticleSystem(tuning, rng),
        )

    @property
    def elapsed_ms(self) -> float:
        if self.started_at is None or self.last_tick is None:
            return 0.0
        return self.last_tick - self.started_at

    def add_score(self, points: int) -> int:
        if points < 0:
            raise ValueError(f"Score can only grow, got {points}")
        self.score += points
        return self.score

    def remove_collectible(self, collectible_id: int) -> Optional[Collectible]:
        return self.collectibles.pop(collectible_id, None)
