"""Configuration for Golden Munch."""

from .settings import (
    AttractTuning,
    DisplaySettings,
    HeadlessSettings,
    Settings,
    TUNING_PRESETS,
    get_settings,
    get_tuning,
)

__all__ = [
    "AttractTuning",
    "DisplaySettings",
    "HeadlessSettings",
    "Settings",
    "TUNING_PRESETS",
    "get_settings",
    "get_tuning",
]
