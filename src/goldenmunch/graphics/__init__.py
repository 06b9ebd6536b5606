"""Graphics module for the Golden Munch render stage."""

from goldenmunch.graphics.surface import BufferSurface, DrawingSurface
from goldenmunch.graphics.renderer import AttractRenderer
from goldenmunch.graphics.primitives import (
    clear,
    draw_circle,
    draw_glow,
    draw_rect,
    draw_text,
    draw_wedge,
    fill_gradient,
    measure_text,
)

__all__ = [
    # Surfaces
    "DrawingSurface",
    "BufferSurface",
    "AttractRenderer",
    # Primitives
    "clear",
    "draw_circle",
    "draw_glow",
    "draw_rect",
    "draw_text",
    "draw_wedge",
    "fill_gradient",
    "measure_text",
]
