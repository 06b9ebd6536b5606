"""Particle bursts shown when the muncher eats a pastry."""

from typing import List, Tuple
from dataclasses import dataclass
import colorsys
import math
import random

from goldenmunch.config.settings import AttractTuning


@dataclass
class Particle:
    """A single crumb with per-tick physics."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    life: int = 30  # ticks remaining
    max_life: int = 30
    color: Tuple[int, int, int] = (255, 200, 80)

    @property
    def alpha(self) -> float:
        """Linear fade from 1.0 at birth to 0.0 at death."""
        if self.max_life <= 0:
            return 0.0
        return max(0.0, self.life / self.max_life)

    @property
    def radius(self) -> float:
        """Render radius, shrinking with alpha."""
        return 3.0 * self.alpha

    @property
    def is_dead(self) -> bool:
        return self.life <= 0

    def update(self, decay: float) -> None:
        """Advance one tick: move, slow down, age."""
        self.x += self.vx
        self.y += self.vy
        self.vx *= decay
        self.vy *= decay
        self.life -= 1


def golden_color(rng: random.Random) -> Tuple[int, int, int]:
    """Random golden hue (30-90 degrees) at 70% saturation, 60% lightness."""
    hue = rng.uniform(30.0, 90.0) / 360.0
    r, g, b = colorsys.hls_to_rgb(hue, 0.6, 0.7)
    return int(r * 255), int(g * 255), int(b * 255)


class ParticleSystem:
    """Unordered collection of live particles."""

    def __init__(self, tuning: AttractTuning, rng: random.Random | None = None):
        self.tuning = tuning
        self.rng = rng or random.Random()
        self.particles: List[Particle] = []

    def burst(self, x: float, y: float, count: int | None = None) -> List[Particle]:
        """Emit a radial burst at a contact point.

        Returns:
            The newly created particles
        """
        cfg = self.tuning
        count = cfg.burst_count if count is None else count
        created = []
        for _ in range(count):
            angle = self.rng.uniform(0.0, 2 * math.pi)
            speed = self.rng.uniform(cfg.burst_speed_min, cfg.burst_speed_max)
            created.append(Particle(
                x=x,
                y=y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed,
                life=cfg.particle_life,
                max_life=cfg.particle_life,
                color=golden_color(self.rng),
            ))
        self.particles.extend(created)
        return created

    def update(self) -> None:
        """Advance all particles one tick and drop the dead ones."""
        decay = self.tuning.particle_decay
        for particle in self.particles:
            particle.update(decay)
        self.particles = [p for p in self.particles if not p.is_dead]

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self):
        return iter(self.particles)
