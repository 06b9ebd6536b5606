"""Tests for arena bounds and particle physics."""

import logging
import math
import random

import pytest

from goldenmunch.animation.arena import Arena
from goldenmunch.animation.particles import Particle, ParticleSystem, golden_color
from goldenmunch.config.settings import AttractTuning


def test_arena_ready_only_with_positive_bounds():
    assert not Arena().ready
    assert not Arena(800, 0).ready
    assert Arena(800, 600).ready
    assert Arena(800, 600).center == (400, 300)


def test_clamp_keeps_radius_inside():
    arena = Arena(800, 600)
    assert arena.clamp(-50, 700, 40) == (40, 560)
    assert arena.clamp(400, 300, 40) == (400, 300)
    assert arena.contains(400, 300, 40)
    assert not arena.contains(10, 300, 40)


def test_clamp_in_arena_smaller_than_body():
    arena = Arena(50, 600)
    x, y = arena.clamp(5, 5, 40)
    assert x == 25
    assert y == 40


def test_negative_resize_clamped_with_warning(caplog):
    arena = Arena(800, 600)
    with caplog.at_level(logging.WARNING):
        arena.resize(-10, 300)
    assert (arena.width, arena.height) == (0, 300)
    assert not arena.ready
    assert "negative" in caplog.text


def test_particle_decay_over_sixty_updates():
    particle = Particle(x=0.0, y=0.0, vx=2.0, vy=-1.0, life=60, max_life=60)
    decay = 0.98

    x = y = 0.0
    vx, vy = 2.0, -1.0
    last_speed = math.hypot(vx, vy)
    for step in range(60):
        assert not particle.is_dead
        particle.update(decay)
        x += vx
        y += vy
        vx *= decay
        vy *= decay

        speed = math.hypot(particle.vx, particle.vy)
        assert speed < last_speed
        last_speed = speed
        assert particle.life == 60 - step - 1

    assert particle.is_dead
    assert particle.life == 0
    assert particle.x == pytest.approx(x)
    assert particle.y == pytest.approx(y)


def test_particle_alpha_and_radius_fade():
    particle = Particle(x=0, y=0, life=15, max_life=30)
    assert particle.alpha == pytest.approx(0.5)
    assert particle.radius == pytest.approx(1.5)


def test_burst_respects_tuning(seeded_rng):
    tuning = AttractTuning(burst_count=10, particle_life=45)
    system = ParticleSystem(tuning, seeded_rng)

    created = system.burst(120.0, 80.0)

    assert len(created) == 10
    assert len(system) == 10
    for particle in created:
        assert (particle.x, particle.y) == (120.0, 80.0)
        speed = math.hypot(particle.vx, particle.vy)
        assert tuning.burst_speed_min - 1e-9 <= speed <= tuning.burst_speed_max + 1e-9
        assert particle.life == particle.max_life == 45


def test_system_drops_dead_particles(seeded_rng):
    tuning = AttractTuning(particle_life=3)
    system = ParticleSystem(tuning, seeded_rng)
    system.burst(0, 0)

    for _ in range(2):
        system.update()
    assert len(system) == tuning.burst_count
    system.update()
    assert len(system) == 0


def test_golden_color_is_warm():
    rng = random.Random(3)
    for _ in range(50):
        r, g, b = golden_color(rng)
        # Hue between orange and yellow-green: red and green dominate blue
        assert r > b and g > b
