"""Tests for settings and tuning presets."""

import pytest
from pydantic import ValidationError

from goldenmunch.config.settings import (
    AttractTuning,
    Settings,
    TUNING_PRESETS,
    get_tuning,
)


def test_default_tuning_values():
    tuning = AttractTuning()
    assert tuning.pursuer_speed == 3.0
    assert tuning.turn_rate == 0.15
    assert tuning.max_collectibles == 8
    assert tuning.collision_divisor == 2.0
    assert tuning.sync_interval_ms == 1000.0
    assert tuning.nudge_chance is None


def test_presets_are_variants_of_one_model():
    assert set(TUNING_PRESETS) == {"classic", "optimized", "frenzy"}
    assert TUNING_PRESETS["classic"].score_bonus == 0
    assert TUNING_PRESETS["frenzy"].max_collectibles == 15
    assert TUNING_PRESETS["frenzy"].nudge_chance is not None


def test_get_tuning_returns_private_copy():
    tuning = get_tuning("optimized")
    tuning.max_collectibles = 99
    assert TUNING_PRESETS["optimized"].max_collectibles == 8


def test_unknown_preset_lists_available():
    with pytest.raises(KeyError) as exc:
        get_tuning("turbo")
    assert "frenzy" in str(exc.value)


@pytest.mark.parametrize("overrides", [
    {"spawn_interval_min_ms": 5000.0, "spawn_interval_max_ms": 1000.0},
    {"size_min": 50.0, "size_max": 40.0},
    {"milestone_fade_frames": 300, "milestone_duration_frames": 240},
    {"max_collectibles": -1},
    {"turn_rate": 0.0},
])
def test_invalid_tuning_rejected(overrides):
    with pytest.raises(ValidationError):
        AttractTuning(**overrides)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("GOLDENMUNCH_ENV", "headless")
    monkeypatch.setenv("GOLDENMUNCH_VARIANT", "frenzy")
    monkeypatch.setenv("GOLDENMUNCH_SEED", "7")
    monkeypatch.setenv("GOLDENMUNCH_DISPLAY__WIDTH", "1280")

    settings = Settings(_env_file=None)

    assert not settings.is_simulator
    assert settings.seed == 7
    assert settings.display.width == 1280
    assert settings.tuning.max_collectibles == 15


def test_settings_reject_unknown_env(monkeypatch):
    monkeypatch.setenv("GOLDENMUNCH_ENV", "hardware")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
