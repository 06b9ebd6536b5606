"""The muncher: pursuit/wander state machine and motion integrator.

Each tick the muncher re-picks the nearest pastry from scratch. With a
target it turns toward it with exponential smoothing (always the short
way round) and slides along walls; without one it drifts at reduced
speed, occasionally picks a new random heading, and bounces off walls.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional, Tuple
import math
import random

from goldenmunch.animation.arena import Arena
from goldenmunch.animation.spawner import Collectible
from goldenmunch.config.settings import AttractTuning

TWO_PI = 2 * math.pi


class PursuerMode(Enum):
    """Behavior modes."""
    SEEKING = auto()
    WANDERING = auto()


def normalize_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    wrapped = math.fmod(angle + math.pi, TWO_PI)
    if wrapped <= 0:
        wrapped += TWO_PI
    return wrapped - math.pi


def find_nearest(
    x: float,
    y: float,
    collectibles: Iterable[Collectible],
) -> Optional[Tuple[Collectible, float]]:
    """Linear scan for the collectible closest to (x, y).

    Returns:
        (collectible, distance), or None when there are none
    """
    nearest = None
    best = math.inf
    for collectible in collectibles:
        dist = math.hypot(collectible.x - x, collectible.y - y)
        if dist < best:
            best = dist
            nearest = collectible
    if nearest is None:
        return None
    return nearest, best


@dataclass
class Pursuer:
    """Autonomous pastry muncher."""

    x: float = 100.0
    y: float = 100.0
    heading: float = 0.0  # radians
    speed: float = 3.0
    radius: float = 35.0
    mouth_open: bool = True
    mode: PursuerMode = PursuerMode.WANDERING
    at_default: bool = True  # still at the start placement, never re-centered
    last_consumed_at: float = -math.inf

    @classmethod
    def from_tuning(cls, tuning: AttractTuning) -> "Pursuer":
        return cls(speed=tuning.pursuer_speed, radius=tuning.pursuer_radius)

    def distance_to(self, collectible: Collectible) -> float:
        return math.hypot(collectible.x - self.x, collectible.y - self.y)

    def collision_threshold(self, collectible: Collectible, divisor: float) -> float:
        return (self.radius + collectible.size) / divisor

    def touches(self, collectible: Collectible, divisor: float) -> bool:
        """Contact test against the combined-radius threshold."""
        return self.distance_to(collectible) < self.collision_threshold(collectible, divisor)

    def is_chomping(self, timestamp: float, window_ms: float) -> bool:
        """True shortly after eating, when the mouth snaps faster."""
        return timestamp - self.last_consumed_at < window_ms

    def steer_toward(self, tx: float, ty: float, turn_rate: float) -> float:
        """Turn a fraction of the way toward a point.

        Returns:
            The normalized angular difference that was applied
        """
        bearing = math.atan2(ty - self.y, tx - self.x)
        diff = normalize_angle(bearing - self.heading)
        self.heading = normalize_angle(self.heading + diff * turn_rate)
        return diff

    def advance(self, distance: float) -> None:
        self.x += math.cos(self.heading) * distance
        self.y += math.sin(self.heading) * distance

    def clamp_to(self, arena: Arena) -> None:
        self.x, self.y = arena.clamp(self.x, self.y, self.radius)

    def bounce_within(self, arena: Arena) -> None:
        """Mirror the heading off any wall it is running into, then clamp."""
        r = self.radius
        dx, dy = math.cos(self.heading), math.sin(self.heading)
        if (self.x <= r and dx < 0) or (self.x >= arena.width - r and dx > 0):
            self.heading = normalize_angle(math.pi - self.heading)
        if (self.y <= r and dy < 0) or (self.y >= arena.height - r and dy > 0):
            self.heading = normalize_angle(-self.heading)
        self.clamp_to(arena)

    def update(
        self,
        arena: Arena,
        collectibles: Iterable[Collectible],
        tuning: AttractTuning,
        rng: random.Random,
        frame_scale: float = 1.0,
    ) -> Optional[Collectible]:
        """Pick a target, then move one tick.

        Returns:
            The nearest collectible this tick, or None while wandering
        """
        nearest = find_nearest(self.x, self.y, collectibles)

        if nearest is None:
            self.mode = PursuerMode.WANDERING
            self._wander(arena, tuning, rng, frame_scale)
            return None

        self.mode = PursuerMode.SEEKING
        target, dist = nearest
        if tuning.nudge_chance is not None and rng.random() >= tuning.nudge_chance:
            # Blend: keep gliding on the current heading this tick
            self.advance(self.speed * frame_scale)
            self.bounce_within(arena)
        else:
            if dist > 0:
                self.steer_toward(target.x, target.y, tuning.turn_rate)
                self.advance(self.speed * frame_scale)
            self.clamp_to(arena)
        return target

    def _wander(
        self,
        arena: Arena,
        tuning: AttractTuning,
        rng: random.Random,
        frame_scale: float,
    ) -> None:
        if rng.random() < tuning.wander_turn_chance:
            self.heading = normalize_angle(rng.uniform(0.0, TWO_PI))
            self.clamp_to(arena)
            return
        self.advance(self.speed * tuning.wander_speed_factor * frame_scale)
        self.bounce_within(arena)
