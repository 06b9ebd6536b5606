"""Render stage: paints one SimulationState onto a DrawingSurface.

Rendering is read-only with respect to the simulation. Draw order is
background, pastries, particles, muncher trail, muncher, milestone
overlay, score readout.
"""

from typing import TYPE_CHECKING
import math

from goldenmunch.animation.easing import ease_out_back
from goldenmunch.animation.spawner import Collectible
from goldenmunch.config.settings import AttractTuning
from goldenmunch.graphics.surface import DrawingSurface

if TYPE_CHECKING:
    from goldenmunch.animation.pursuer import Pursuer
    from goldenmunch.animation.state import SimulationState


# Palette
BG_TOP_LEFT = (11, 20, 38)          # #0B1426
BG_BOTTOM_RIGHT = (30, 58, 95)      # #1E3A5F
GOLDEN_ORANGE = (249, 160, 63)      # #F9A03F
PACMAN_YELLOW = (255, 221, 68)      # #FFDD44
PACMAN_SHADE = (230, 194, 0)        # #E6C200
PACMAN_OUTLINE = (204, 153, 0)      # #CC9900
CREAM_WHITE = (255, 248, 231)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)

GRID_SPACING = 40
GRID_OFFSET = 20
BORDER_WIDTH = 4

MOUTH_START = 0.2 * math.pi
MOUTH_END = 1.8 * math.pi

SCORE_SCALE = 2
SCORE_TOP = 14

TRAIL_STEPS = 3
TRAIL_SPACING = 8.0
TRAIL_ALPHA = 0.3


class AttractRenderer:
    """Draws the attract loop scene."""

    def __init__(self, tuning: AttractTuning):
        self.tuning = tuning

    def render(self, surface: DrawingSurface, state: "SimulationState") -> None:
        now = state.last_tick if state.last_tick is not None else 0.0

        self.draw_background(surface)
        for collectible in state.collectibles.values():
            self.draw_collectible(surface, collectible, now)
        for particle in state.particles:
            surface.fill_circle(particle.x, particle.y, particle.radius, particle.color, alpha=particle.alpha)
        self.draw_trail(surface, state.pursuer)
        self.draw_pursuer(surface, state.pursuer)
        if state.milestone.active:
            self.draw_milestone(surface, state)
        self.draw_score(surface, state.score)

    def draw_background(self, surface: DrawingSurface) -> None:
        surface.fill_gradient(BG_TOP_LEFT, BG_BOTTOM_RIGHT)
        surface.dot_grid(GRID_SPACING, GRID_OFFSET, 1.0, GOLDEN_ORANGE, alpha=0.1)
        # stroke_rect grows inward from the given edge
        surface.stroke_rect(0, 0, surface.width, surface.height, GOLDEN_ORANGE, thickness=BORDER_WIDTH)

    def pop_in_scale(self, collectible: Collectible, now: float) -> float:
        """Entry animation scale; 1.0 once the pastry has settled."""
        if not collectible.spawning:
            return 1.0
        duration = self.tuning.spawn_animation_ms
        if duration <= 0:
            return 1.0
        t = min(1.0, max(0.0, (now - collectible.spawned_at) / duration))
        return max(0.0, ease_out_back(t))

    def draw_collectible(self, surface: DrawingSurface, collectible: Collectible, now: float) -> None:
        scale = self.pop_in_scale(collectible, now)
        r = collectible.size / 2 * scale
        if r <= 0:
            return

        x, y = collectible.x, collectible.y
        style = collectible.style
        surface.glow(x, y, r + 15, GOLDEN_ORANGE, strength=0.45)

        if style.name == "donut":
            surface.stroke_circle(x, y, r * 0.7, style.body, thickness=r * 0.6)
            surface.fill_arc(x, y, r, math.pi, 2 * math.pi, style.topping, alpha=0.85)
            surface.fill_circle(x, y, r * 0.35, BG_TOP_LEFT)
        elif style.name == "cookie":
            surface.fill_circle(x, y, r, style.body)
            for dx, dy in ((-0.35, -0.3), (0.3, -0.1), (-0.1, 0.35), (0.4, 0.4)):
                surface.fill_circle(x + dx * r, y + dy * r, max(1.0, r * 0.12), style.topping)
        else:
            surface.fill_circle(x, y, r, style.body)
            # Frosting over the top half
            surface.fill_arc(x, y, r, math.pi, 2 * math.pi, style.topping)
            if style.name in ("cake", "birthday_cake", "cupcake"):
                surface.fill_circle(x, y - r * 0.75, max(1.5, r * 0.18), (220, 30, 50))
        surface.stroke_circle(x, y, r, CREAM_WHITE, thickness=1.0, alpha=0.35)

    def draw_trail(self, surface: DrawingSurface, pursuer: "Pursuer") -> None:
        body = pursuer.radius / 2
        cos_h, sin_h = math.cos(pursuer.heading), math.sin(pursuer.heading)
        for i in range(1, TRAIL_STEPS + 1):
            surface.fill_circle(
                pursuer.x - cos_h * i * TRAIL_SPACING,
                pursuer.y - sin_h * i * TRAIL_SPACING,
                body * (1 - i * 0.2),
                PACMAN_YELLOW,
                alpha=TRAIL_ALPHA,
            )

    def draw_pursuer(self, surface: DrawingSurface, pursuer: "Pursuer") -> None:
        # The collision extent is twice the drawn body radius
        body = pursuer.radius / 2
        with surface.transformed():
            surface.translate(pursuer.x, pursuer.y)
            surface.rotate(pursuer.heading)

            surface.fill_circle(2, 2, body, PACMAN_SHADE, alpha=0.6)
            if pursuer.mouth_open:
                surface.fill_arc(0, 0, body + 2, MOUTH_START, MOUTH_END, PACMAN_OUTLINE)
                surface.fill_arc(0, 0, body, MOUTH_START, MOUTH_END, PACMAN_YELLOW)
            else:
                surface.fill_circle(0, 0, body + 2, PACMAN_OUTLINE)
                surface.fill_circle(0, 0, body, PACMAN_YELLOW)

            # Eye
            surface.fill_circle(-body * 0.28, -body * 0.46, max(1.5, body * 0.17), BLACK)
            surface.fill_circle(-body * 0.22, -body * 0.52, max(1.0, body * 0.06), WHITE)

    def draw_milestone(self, surface: DrawingSurface, state: "SimulationState") -> None:
        milestone = state.milestone
        cx, cy = surface.width / 2, surface.height / 2
        text_scale = max(1, int(round(8 * milestone.scale)))

        surface.glow(cx, cy, 60 + 80 * milestone.scale, GOLDEN_ORANGE, strength=0.5 * milestone.alpha)
        _, h = surface.draw_text(
            milestone.label, cx, cy - 5 * text_scale / 2, PACMAN_YELLOW,
            scale=text_scale, align="center", alpha=milestone.alpha,
        )
        surface.draw_text(
            "POINTS", cx, cy + h / 2 + 8, CREAM_WHITE,
            scale=max(1, text_scale // 3), align="center", alpha=milestone.alpha,
        )

    def draw_score(self, surface: DrawingSurface, score: int) -> None:
        """Minimal score readout, top center, clear of the window chrome."""
        surface.draw_text(
            f"SCORE {score:,}", surface.width / 2, SCORE_TOP, CREAM_WHITE,
            scale=SCORE_SCALE, align="center", alpha=0.9,
        )
