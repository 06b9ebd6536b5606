"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Attract-loop tunables live in AttractTuning; the named presets below are
the screen variants the kiosk can run.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DisplaySettings(BaseSettings):
    """Kiosk canvas settings."""

    width: int = Field(default=900, ge=0)
    height: int = Field(default=500, ge=0)

    # Rendering
    fps: int = Field(default=60, gt=0)
    fullscreen: bool = False


class HeadlessSettings(BaseSettings):
    """Settings for running the loop without a window."""

    frames: int = Field(default=3600, ge=0)
    frame_ms: float = Field(default=1000.0 / 60.0, gt=0.0)


class AttractTuning(BaseModel):
    """Every tunable of the attract loop.

    Distances are in surface pixels, durations in milliseconds unless the
    name says frames. Speeds are pixels per reference frame.
    """

    # Pursuer
    pursuer_radius: float = Field(default=35.0, gt=0.0)
    pursuer_speed: float = Field(default=3.0, ge=0.0)
    turn_rate: float = Field(default=0.15, gt=0.0, le=1.0)
    wander_speed_factor: float = Field(default=0.5, ge=0.0, le=1.0)
    wander_turn_chance: float = Field(default=0.02, ge=0.0, le=1.0)
    nudge_chance: Optional[float] = Field(default=None, gt=0.0, le=1.0)
    mouth_interval_ms: float = Field(default=150.0, gt=0.0)
    chomp_interval_ms: float = Field(default=110.0, gt=0.0)
    chomp_window_ms: float = Field(default=300.0, ge=0.0)
    reference_frame_ms: float = Field(default=1000.0 / 60.0, gt=0.0)
    max_frame_scale: float = Field(default=3.0, gt=0.0)

    # Collision and scoring
    collision_divisor: float = Field(default=2.0, gt=0.0)
    score_divisor: float = Field(default=3.0, gt=0.0)
    score_bonus: int = Field(default=10, ge=0)

    # Spawner
    max_collectibles: int = Field(default=8, ge=0)
    spawn_interval_min_ms: float = Field(default=1500.0, ge=0.0)
    spawn_interval_max_ms: float = Field(default=3000.0, ge=0.0)
    spawn_margin: float = Field(default=40.0, ge=0.0)
    spawn_attempts: int = Field(default=20, ge=1)
    min_spawn_distance: float = Field(default=100.0, ge=0.0)
    size_min: float = Field(default=30.0, gt=0.0)
    size_max: float = Field(default=45.0, gt=0.0)
    spawn_animation_ms: float = Field(default=400.0, ge=0.0)
    initial_spawn_count: int = Field(default=4, ge=0)
    initial_spawn_stagger_ms: float = Field(default=800.0, ge=0.0)

    # Particles
    burst_count: int = Field(default=8, ge=0)
    burst_speed_min: float = Field(default=0.5, ge=0.0)
    burst_speed_max: float = Field(default=3.0, ge=0.0)
    particle_life: int = Field(default=30, gt=0)
    particle_decay: float = Field(default=0.98, gt=0.0, le=1.0)

    # Milestone
    milestone_step: int = Field(default=1000, gt=0)
    milestone_check_ms: float = Field(default=2000.0, ge=0.0)
    milestone_duration_frames: int = Field(default=240, gt=0)
    milestone_fade_frames: int = Field(default=80, gt=0)
    milestone_scale_start: float = Field(default=0.2, ge=0.0)
    milestone_scale_step: float = Field(default=0.03, ge=0.0)
    milestone_scale_max: float = Field(default=1.3, ge=0.0)

    # Observable bridge
    sync_interval_ms: float = Field(default=1000.0, ge=0.0)

    @model_validator(mode="after")
    def _check_ranges(self) -> "AttractTuning":
        if self.spawn_interval_min_ms > self.spawn_interval_max_ms:
            raise ValueError("spawn_interval_min_ms must not exceed spawn_interval_max_ms")
        if self.size_min > self.size_max:
            raise ValueError("size_min must not exceed size_max")
        if self.burst_speed_min > self.burst_speed_max:
            raise ValueError("burst_speed_min must not exceed burst_speed_max")
        if self.milestone_fade_frames > self.milestone_duration_frames:
            raise ValueError("milestone_fade_frames must fit inside milestone_duration_frames")
        return self


# Screen variants are configuration, not separate code paths
TUNING_PRESETS: dict[str, AttractTuning] = {
    # First kiosk build: slow chomper, no bonus points
    "classic": AttractTuning(
        score_bonus=0,
        max_collectibles=8,
        spawn_interval_min_ms=2000.0,
        spawn_interval_max_ms=4000.0,
    ),
    "optimized": AttractTuning(),
    # Busy screen for the storefront window
    "frenzy": AttractTuning(
        pursuer_speed=4.0,
        turn_rate=0.12,
        wander_speed_factor=0.8,
        collision_divisor=2.5,
        max_collectibles=15,
        spawn_interval_min_ms=800.0,
        spawn_interval_max_ms=1600.0,
        spawn_attempts=15,
        burst_count=10,
        particle_life=60,
        particle_decay=0.95,
        nudge_chance=0.6,
    ),
}


def get_tuning(name: str = "optimized") -> AttractTuning:
    """Get a private copy of a tuning preset.

    Raises:
        KeyError: If the preset name is not known
    """
    try:
        preset = TUNING_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown tuning preset '{name}' (available: {', '.join(sorted(TUNING_PRESETS))})"
        ) from None
    return preset.model_copy(deep=True)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="GOLDENMUNCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Environment
    env: Literal["simulator", "headless"] = "simulator"
    debug: bool = False

    # Attract loop
    variant: str = "optimized"
    seed: Optional[int] = None

    # Nested settings
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    headless: HeadlessSettings = Field(default_factory=HeadlessSettings)

    @property
    def is_simulator(self) -> bool:
        """Check if running with a desktop window."""
        return self.env == "simulator"

    @property
    def tuning(self) -> AttractTuning:
        """Tuning preset selected by `variant`."""
        return get_tuning(self.variant)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
