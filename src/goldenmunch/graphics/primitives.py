"""Raster drawing primitives over numpy RGB buffers.

Every shape is evaluated only inside its clipped bounding box and blended
with an optional alpha, so off-screen or partially visible shapes are
safe to draw.
"""

from typing import Dict, Optional, Tuple
import math
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]

TWO_PI = 2 * math.pi


def clear(buffer: Buffer, color: Color = (0, 0, 0)) -> None:
    """Clear buffer to a solid color."""
    buffer[:, :] = color


def _blend(region: Buffer, mask: NDArray[np.bool_], color: Color, alpha: float) -> None:
    """Paint `color` into the masked pixels of `region`."""
    if alpha <= 0.0:
        return
    if alpha >= 1.0:
        region[mask] = color
        return
    src = np.asarray(color, dtype=np.float32)
    dst = region[mask].astype(np.float32)
    region[mask] = (dst * (1.0 - alpha) + src * alpha).astype(np.uint8)


def _window(
    buffer: Buffer, cx: float, cy: float, radius: float
) -> Optional[Tuple[Tuple[slice, slice], NDArray[np.float64], NDArray[np.float64]]]:
    """Clipped bounding box of a circle with pixel-center offsets from (cx, cy)."""
    h, w = buffer.shape[:2]
    x0 = max(0, int(math.floor(cx - radius)))
    x1 = min(w, int(math.ceil(cx + radius)) + 1)
    y0 = max(0, int(math.floor(cy - radius)))
    y1 = min(h, int(math.ceil(cy + radius)) + 1)
    if x1 <= x0 or y1 <= y0:
        return None
    yy, xx = np.ogrid[y0:y1, x0:x1]
    return (slice(y0, y1), slice(x0, x1)), xx - cx, yy - cy


def fill_gradient(
    buffer: Buffer,
    start: Color,
    end: Color,
    vertical: bool = False,
) -> None:
    """Linear gradient, top-left to bottom-right (or top to bottom)."""
    h, w = buffer.shape[:2]
    if h == 0 or w == 0:
        return
    yy, xx = np.ogrid[:h, :w]
    if vertical:
        t = yy / max(1, h - 1) + xx * 0.0
    else:
        # Projection of each pixel onto the (w, h) diagonal
        t = (xx * w + yy * h) / float(w * w + h * h)
    t = np.clip(t, 0.0, 1.0)[..., None]
    s = np.asarray(start, dtype=np.float32)
    e = np.asarray(end, dtype=np.float32)
    buffer[:, :] = (s * (1.0 - t) + e * t).astype(np.uint8)


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    filled: bool = True,
    alpha: float = 1.0,
    thickness: float = 1.0,
) -> None:
    """Draw a filled disc or a ring of the given thickness."""
    if radius <= 0:
        return
    win = _window(buffer, cx, cy, radius + thickness)
    if win is None:
        return
    region_slice, dx, dy = win
    dist = np.sqrt(dx * dx + dy * dy)
    if filled:
        mask = dist <= radius
    else:
        mask = np.abs(dist - radius) <= thickness / 2
    _blend(buffer[region_slice], mask, color, alpha)


def draw_wedge(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    start_angle: float,
    end_angle: float,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Draw a pie slice from start_angle to end_angle (radians, y axis down)."""
    if radius <= 0:
        return
    span = end_angle - start_angle
    if span >= TWO_PI:
        draw_circle(buffer, cx, cy, radius, color, alpha=alpha)
        return
    span %= TWO_PI
    win = _window(buffer, cx, cy, radius)
    if win is None:
        return
    region_slice, dx, dy = win
    dist_sq = dx * dx + dy * dy
    rel = np.mod(np.arctan2(dy, dx) - start_angle, TWO_PI)
    # The apex pixel belongs to the wedge whatever its angle
    mask = (dist_sq <= radius * radius) & ((rel <= span) | (dist_sq < 1.0))
    _blend(buffer[region_slice], mask, color, alpha)


def draw_glow(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    strength: float = 0.5,
) -> None:
    """Additive radial glow with quadratic falloff."""
    if radius <= 0 or strength <= 0:
        return
    win = _window(buffer, cx, cy, radius)
    if win is None:
        return
    region_slice, dx, dy = win
    falloff = np.clip(1.0 - np.sqrt(dx * dx + dy * dy) / radius, 0.0, 1.0) ** 2 * strength
    region = buffer[region_slice]
    glow = falloff[..., None] * np.asarray(color, dtype=np.float32)
    region[:, :] = np.clip(region.astype(np.float32) + glow, 0, 255).astype(np.uint8)


def draw_rect(
    buffer: Buffer,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
    alpha: float = 1.0,
) -> None:
    """Draw a filled or outlined axis-aligned rectangle."""
    h, w = buffer.shape[:2]
    x1, y1 = max(0, x), max(0, y)
    x2, y2 = min(w, x + width), min(h, y + height)
    if x2 <= x1 or y2 <= y1:
        return

    mask = np.ones((y2 - y1, x2 - x1), dtype=bool)
    if not filled:
        t = max(1, thickness)
        # Interior of the outline, relative to the clipped window
        ix1 = max(0, x + t - x1)
        iy1 = max(0, y + t - y1)
        ix2 = min(x2, x + width - t) - x1
        iy2 = min(y2, y + height - t) - y1
        if ix2 > ix1 and iy2 > iy1:
            mask[iy1:iy2, ix1:ix2] = False
    _blend(buffer[y1:y2, x1:x2], mask, color, alpha)


def draw_dot_grid(
    buffer: Buffer,
    spacing: int,
    offset: int,
    radius: float,
    color: Color,
    alpha: float = 1.0,
) -> None:
    """Regular grid of small dots, computed in one vectorized pass."""
    h, w = buffer.shape[:2]
    if spacing <= 0 or h == 0 or w == 0:
        return
    yy, xx = np.ogrid[:h, :w]
    half = spacing / 2
    dx = np.mod(xx - offset + half, spacing) - half
    dy = np.mod(yy - offset + half, spacing) - half
    mask = (dx * dx + dy * dy) <= radius * radius
    # No partial dots before the first grid line
    mask &= (xx >= offset - radius) & (yy >= offset - radius)
    _blend(buffer, mask, color, alpha)


# 3x5 bitmap font, rows top to bottom
_FONT_ROWS: Dict[str, Tuple[str, ...]] = {
    "A": ("010", "101", "111", "101", "101"),
    "B": ("110", "101", "110", "101", "110"),
    "C": ("011", "100", "100", "100", "011"),
    "D": ("110", "101", "101", "101", "110"),
    "E": ("111", "100", "110", "100", "111"),
    "F": ("111", "100", "110", "100", "100"),
    "G": ("011", "100", "101", "101", "011"),
    "H": ("101", "101", "111", "101", "101"),
    "I": ("111", "010", "010", "010", "111"),
    "J": ("001", "001", "001", "101", "010"),
    "K": ("101", "101", "110", "101", "101"),
    "L": ("100", "100", "100", "100", "111"),
    "M": ("101", "111", "101", "101", "101"),
    "N": ("101", "111", "111", "101", "101"),
    "O": ("010", "101", "101", "101", "010"),
    "P": ("110", "101", "110", "100", "100"),
    "Q": ("010", "101", "101", "111", "011"),
    "R": ("110", "101", "110", "101", "101"),
    "S": ("011", "100", "010", "001", "110"),
    "T": ("111", "010", "010", "010", "010"),
    "U": ("101", "101", "101", "101", "010"),
    "V": ("101", "101", "101", "010", "010"),
    "W": ("101", "101", "101", "111", "101"),
    "X": ("101", "101", "010", "101", "101"),
    "Y": ("101", "101", "010", "010", "010"),
    "Z": ("111", "001", "010", "100", "111"),
    "0": ("010", "101", "101", "101", "010"),
    "1": ("010", "110", "010", "010", "111"),
    "2": ("010", "101", "001", "010", "111"),
    "3": ("110", "001", "010", "001", "110"),
    "4": ("101", "101", "111", "001", "001"),
    "5": ("111", "100", "110", "001", "110"),
    "6": ("011", "100", "110", "101", "010"),
    "7": ("111", "001", "010", "010", "010"),
    "8": ("010", "101", "010", "101", "010"),
    "9": ("010", "101", "011", "001", "110"),
    "?": ("010", "101", "001", "000", "010"),
    "!": ("010", "010", "010", "000", "010"),
    ".": ("000", "000", "000", "000", "010"),
    ",": ("000", "000", "000", "010", "100"),
    ":": ("000", "010", "000", "010", "000"),
    "-": ("000", "000", "111", "000", "000"),
    "+": ("000", "010", "111", "010", "000"),
}

GLYPH_WIDTH = 3
GLYPH_HEIGHT = 5


def _glyph(char: str) -> Optional[NDArray[np.bool_]]:
    rows = _FONT_ROWS.get(char.upper())
    if rows is None:
        return None
    return np.array([[c == "1" for c in row] for row in rows], dtype=bool)


_GLYPHS: Dict[str, NDArray[np.bool_]] = {c: _glyph(c) for c in _FONT_ROWS}


def measure_text(text: str, scale: int = 1) -> Tuple[int, int]:
    """Pixel size of `text` rendered with draw_text."""
    if not text:
        return 0, 0
    return len(text) * (GLYPH_WIDTH + 1) * scale - scale, GLYPH_HEIGHT * scale


def draw_text(
    buffer: Buffer,
    text: str,
    x: int,
    y: int,
    color: Color,
    scale: int = 1,
    alpha: float = 1.0,
) -> Tuple[int, int]:
    """Draw text with the built-in bitmap font.

    Unknown characters render as blanks.

    Returns:
        Tuple of (width, height) of the text in pixels
    """
    h, w = buffer.shape[:2]
    scale = max(1, int(scale))
    advance = (GLYPH_WIDTH + 1) * scale
    cursor_x = x

    for char in text:
        glyph = _GLYPHS.get(char.upper())
        if glyph is not None:
            mask = np.kron(glyph, np.ones((scale, scale), dtype=bool))
            gh, gw = mask.shape
            x1, y1 = max(0, cursor_x), max(0, y)
            x2, y2 = min(w, cursor_x + gw), min(h, y + gh)
            if x2 > x1 and y2 > y1:
                sub = mask[y1 - y:y2 - y, x1 - cursor_x:x2 - cursor_x]
                _blend(buffer[y1:y2, x1:x2], sub, color, alpha)
        cursor_x += advance

    return measure_text(text, scale)
