"""One-shot celebration overlay for every new thousand points."""

from dataclasses import dataclass
import logging

from goldenmunch.config.settings import AttractTuning

logger = logging.getLogger(__name__)


@dataclass
class MilestoneEffect:
    """Celebration overlay state machine: inactive -> active -> inactive.

    `last_observed` is the highest thousands count seen so far; only a
    genuine increase over it can trigger the overlay, and never while one
    is already playing.
    """

    active: bool = False
    alpha: float = 0.0
    scale: float = 0.0
    remaining: int = 0  # frames
    points: int = 0  # the milestone being celebrated
    last_observed: int = 0

    def observe(self, score: int, tuning: AttractTuning) -> bool:
        """Feed a (throttled) score reading.

        Returns:
            True if the overlay was activated by this reading
        """
        thousands = score // tuning.milestone_step
        if thousands <= self.last_observed:
            return False
        # Recorded even while active, so a crossing during the overlay is skipped
        self.last_observed = thousands

        if self.active or thousands <= 0:
            return False
        self.activate(thousands, tuning)
        return True

    def activate(self, thousands: int, tuning: AttractTuning) -> None:
        self.active = True
        self.alpha = 1.0
        self.scale = tuning.milestone_scale_start
        self.remaining = tuning.milestone_duration_frames
        self.points = thousands * tuning.milestone_step
        logger.info(f"Milestone reached: {self.points} points")

    def update(self, tuning: AttractTuning) -> None:
        """Advance one frame: grow, fade in the tail window, expire."""
        if not self.active:
            return

        self.scale = min(tuning.milestone_scale_max, self.scale + tuning.milestone_scale_step)
        self.remaining -= 1

        fade = tuning.milestone_fade_frames
        if self.remaining < fade:
            self.alpha = max(0.0, self.remaining / fade)

        if self.remaining <= 0:
            self.deactivate()

    def deactivate(self) -> None:
        self.active = False
        self.alpha = 0.0
        self.remaining = 0

    @property
    def label(self) -> str:
        return f"{self.points}!"
