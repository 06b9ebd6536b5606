"""Bounded play area for the attract loop."""

from dataclasses import dataclass
from typing import Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass
class Arena:
    """Current canvas bounds, updated by host resize notifications."""

    width: float = 0.0
    height: float = 0.0

    @property
    def ready(self) -> bool:
        """True once the host has reported usable bounds."""
        return self.width > 0 and self.height > 0

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2, self.height / 2

    def resize(self, width: float, height: float) -> None:
        """Apply a resize notification. Negative sizes are clamped to 0."""
        if width < 0 or height < 0:
            logger.warning(f"Ignoring negative arena size {width}x{height}, clamping to 0")
        self.width = max(0.0, float(width))
        self.height = max(0.0, float(height))

    def clamp_axis(self, value: float, dim: float, radius: float) -> float:
        """Clamp one coordinate into [radius, dim - radius]."""
        if dim < 2 * radius:
            return dim / 2
        return max(radius, min(dim - radius, value))

    def clamp(self, x: float, y: float, radius: float) -> Tuple[float, float]:
        """Clamp a point so a circle of `radius` stays inside the arena."""
        return (
            self.clamp_axis(x, self.width, radius),
            self.clamp_axis(y, self.height, radius),
        )

    def contains(self, x: float, y: float, radius: float = 0.0) -> bool:
        """Check whether a circle lies inside the clamped region."""
        return (x, y) == self.clamp(x, y, radius)
