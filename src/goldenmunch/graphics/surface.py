"""
Drawing surface contract for the render stage.

The attract loop only ever draws through DrawingSurface, so the desktop
window, the headless runner and the tests can all supply their own
backing store. BufferSurface is the numpy implementation used by all of
them.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Literal, Tuple
import logging
import math
import numpy as np
from numpy.typing import NDArray

from goldenmunch.graphics import primitives
from goldenmunch.graphics.primitives import Color

logger = logging.getLogger(__name__)

Align = Literal["left", "center", "right"]


class DrawingSurface(ABC):
    """Abstract 2D surface with an affine transform stack."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Surface width in pixels."""
        ...

    @property
    @abstractmethod
    def height(self) -> int:
        """Surface height in pixels."""
        ...

    @abstractmethod
    def resize(self, width: int, height: int) -> None:
        """Change the backing size. Contents are discarded."""
        ...

    @abstractmethod
    def clear(self, color: Color = (0, 0, 0)) -> None:
        ...

    @abstractmethod
    def fill_gradient(self, start: Color, end: Color, vertical: bool = False) -> None:
        """Fill the whole surface, ignoring the transform."""
        ...

    @abstractmethod
    def fill_circle(self, x: float, y: float, radius: float, color: Color, alpha: float = 1.0) -> None:
        ...

    @abstractmethod
    def stroke_circle(
        self, x: float, y: float, radius: float, color: Color,
        thickness: float = 1.0, alpha: float = 1.0
    ) -> None:
        ...

    @abstractmethod
    def fill_arc(
        self, x: float, y: float, radius: float,
        start_angle: float, end_angle: float,
        color: Color, alpha: float = 1.0
    ) -> None:
        """Fill a pie wedge; angles are relative to the current rotation."""
        ...

    @abstractmethod
    def stroke_rect(
        self, x: float, y: float, width: float, height: float,
        color: Color, thickness: int = 1
    ) -> None:
        """Outline an axis-aligned rectangle (translation only)."""
        ...

    @abstractmethod
    def dot_grid(self, spacing: int, offset: int, radius: float, color: Color, alpha: float = 1.0) -> None:
        """Fill the whole surface with a regular dot pattern."""
        ...

    @abstractmethod
    def glow(self, x: float, y: float, radius: float, color: Color, strength: float = 0.5) -> None:
        """Soft additive halo, the surface's shadow-blur equivalent."""
        ...

    @abstractmethod
    def draw_text(
        self, text: str, x: float, y: float, color: Color,
        scale: int = 1, align: Align = "left", alpha: float = 1.0
    ) -> Tuple[int, int]:
        """Draw text anchored at (x, y) with its top edge at y.

        Returns:
            Tuple of (width, height) of the text in pixels
        """
        ...

    @abstractmethod
    def save(self) -> None:
        """Push the current transform."""
        ...

    @abstractmethod
    def restore(self) -> None:
        """Pop the last saved transform."""
        ...

    @abstractmethod
    def translate(self, dx: float, dy: float) -> None:
        ...

    @abstractmethod
    def rotate(self, angle: float) -> None:
        ...

    @contextmanager
    def transformed(self) -> Iterator["DrawingSurface"]:
        """save() / restore() as a context manager."""
        self.save()
        try:
            yield self
        finally:
            self.restore()


@dataclass(frozen=True)
class Transform:
    """Translation followed by rotation."""
    tx: float = 0.0
    ty: float = 0.0
    angle: float = 0.0

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        cos_a, sin_a = math.cos(self.angle), math.sin(self.angle)
        return self.tx + x * cos_a - y * sin_a, self.ty + x * sin_a + y * cos_a


IDENTITY = Transform()


class BufferSurface(DrawingSurface):
    """DrawingSurface over a numpy (height, width, 3) uint8 buffer."""

    def __init__(self, width: int, height: int):
        self._buffer = np.zeros((max(0, height), max(0, width), 3), dtype=np.uint8)
        self._transform = IDENTITY
        self._stack: List[Transform] = []

    @property
    def width(self) -> int:
        return self._buffer.shape[1]

    @property
    def height(self) -> int:
        return self._buffer.shape[0]

    @property
    def buffer(self) -> NDArray[np.uint8]:
        """Live backing buffer (not a copy)."""
        return self._buffer

    def get_buffer(self) -> NDArray[np.uint8]:
        """Copy of the current contents."""
        return self._buffer.copy()

    def resize(self, width: int, height: int) -> None:
        width, height = max(0, int(width)), max(0, int(height))
        if (width, height) == (self.width, self.height):
            return
        self._buffer = np.zeros((height, width, 3), dtype=np.uint8)
        logger.debug(f"Surface resized to {width}x{height}")

    def clear(self, color: Color = (0, 0, 0)) -> None:
        primitives.clear(self._buffer, color)

    def fill_gradient(self, start: Color, end: Color, vertical: bool = False) -> None:
        primitives.fill_gradient(self._buffer, start, end, vertical=vertical)

    def fill_circle(self, x: float, y: float, radius: float, color: Color, alpha: float = 1.0) -> None:
        cx, cy = self._transform.apply(x, y)
        primitives.draw_circle(self._buffer, cx, cy, radius, color, alpha=alpha)

    def stroke_circle(
        self, x: float, y: float, radius: float, color: Color,
        thickness: float = 1.0, alpha: float = 1.0
    ) -> None:
        cx, cy = self._transform.apply(x, y)
        primitives.draw_circle(
            self._buffer, cx, cy, radius, color,
            filled=False, alpha=alpha, thickness=thickness,
        )

    def fill_arc(
        self, x: float, y: float, radius: float,
        start_angle: float, end_angle: float,
        color: Color, alpha: float = 1.0
    ) -> None:
        cx, cy = self._transform.apply(x, y)
        rotation = self._transform.angle
        primitives.draw_wedge(
            self._buffer, cx, cy, radius,
            start_angle + rotation, end_angle + rotation,
            color, alpha=alpha,
        )

    def stroke_rect(
        self, x: float, y: float, width: float, height: float,
        color: Color, thickness: int = 1
    ) -> None:
        px, py = self._transform.apply(x, y)
        primitives.draw_rect(
            self._buffer, int(round(px)), int(round(py)), int(width), int(height),
            color, filled=False, thickness=thickness,
        )

    def dot_grid(self, spacing: int, offset: int, radius: float, color: Color, alpha: float = 1.0) -> None:
        primitives.draw_dot_grid(self._buffer, spacing, offset, radius, color, alpha=alpha)

    def glow(self, x: float, y: float, radius: float, color: Color, strength: float = 0.5) -> None:
        cx, cy = self._transform.apply(x, y)
        primitives.draw_glow(self._buffer, cx, cy, radius, color, strength=strength)

    def draw_text(
        self, text: str, x: float, y: float, color: Color,
        scale: int = 1, align: Align = "left", alpha: float = 1.0
    ) -> Tuple[int, int]:
        px, py = self._transform.apply(x, y)
        text_w, _ = primitives.measure_text(text, scale)
        if align == "center":
            px -= text_w / 2
        elif align == "right":
            px -= text_w
        return primitives.draw_text(
            self._buffer, text, int(round(px)), int(round(py)), color, scale=scale, alpha=alpha
        )

    def save(self) -> None:
        self._stack.append(self._transform)

    def restore(self) -> None:
        if not self._stack:
            logger.warning("restore() without matching save()")
            return
        self._transform = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        tx, ty = self._transform.apply(dx, dy)
        self._transform = Transform(tx, ty, self._transform.angle)

    def rotate(self, angle: float) -> None:
        t = self._transform
        self._transform = Transform(t.tx, t.ty, t.angle + angle)
