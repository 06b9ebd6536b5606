"""Tests for the drawing surface, primitives and render stage."""

import logging
import math

import numpy as np
import pytest

from goldenmunch.animation.spawner import Collectible
from goldenmunch.graphics import primitives
from goldenmunch.graphics.renderer import (
    GOLDEN_ORANGE,
    PACMAN_YELLOW,
    AttractRenderer,
)
from goldenmunch.graphics.surface import BufferSurface, Transform


def blank(width=40, height=30):
    return np.zeros((height, width, 3), dtype=np.uint8)


def test_circle_clipped_at_edges():
    buffer = blank()
    primitives.draw_circle(buffer, -5, -5, 8, (255, 0, 0))
    primitives.draw_circle(buffer, 500, 500, 8, (255, 0, 0))
    assert tuple(buffer[0, 0]) == (255, 0, 0)
    assert tuple(buffer[29, 39]) == (0, 0, 0)


def test_alpha_blend():
    buffer = blank()
    buffer[:, :] = (100, 100, 100)
    primitives.draw_circle(buffer, 20, 15, 3, (200, 0, 0), alpha=0.5)
    assert tuple(buffer[15, 20]) == (150, 50, 50)


def test_wedge_leaves_mouth_open():
    buffer = blank(60, 60)
    primitives.draw_wedge(buffer, 30, 30, 20, 0.2 * math.pi, 1.8 * math.pi, (255, 255, 0))
    assert tuple(buffer[30, 45]) == (0, 0, 0)        # straight ahead: the mouth
    assert tuple(buffer[30, 15]) == (255, 255, 0)    # behind
    assert tuple(buffer[45, 30]) == (255, 255, 0)    # below
    assert tuple(buffer[30, 30]) == (255, 255, 0)    # apex


def test_rect_outline_is_hollow():
    buffer = blank()
    primitives.draw_rect(buffer, 0, 0, 40, 30, (9, 9, 9), filled=False, thickness=4)
    assert tuple(buffer[0, 0]) == (9, 9, 9)
    assert tuple(buffer[3, 20]) == (9, 9, 9)
    assert tuple(buffer[29, 39]) == (9, 9, 9)
    assert tuple(buffer[15, 20]) == (0, 0, 0)


def test_gradient_runs_corner_to_corner():
    buffer = blank()
    primitives.fill_gradient(buffer, (0, 0, 0), (200, 100, 50))
    assert tuple(buffer[0, 0]) == (0, 0, 0)
    assert buffer[29, 39, 0] > 190
    assert buffer[15, 20, 0] < buffer[29, 39, 0]


def test_text_measure_and_unknown_chars():
    buffer = blank(80, 20)
    w, h = primitives.draw_text(buffer, "12~A", 0, 0, (255, 255, 255), scale=2)
    assert (w, h) == primitives.measure_text("12~A", 2) == (30, 10)
    assert buffer.any()


def test_transform_rotation_then_translation():
    t = Transform(10.0, 20.0, math.pi / 2)
    x, y = t.apply(5.0, 0.0)
    assert x == pytest.approx(10.0)
    assert y == pytest.approx(25.0)


def test_surface_transform_stack(caplog):
    surface = BufferSurface(100, 100)
    with surface.transformed():
        surface.translate(50, 50)
        surface.rotate(math.pi / 2)
        surface.fill_circle(20, 0, 2, (255, 0, 0))
    surface.fill_circle(5, 5, 2, (0, 255, 0))

    assert tuple(surface.buffer[70, 50]) == (255, 0, 0)
    assert tuple(surface.buffer[5, 5]) == (0, 255, 0)

    with caplog.at_level(logging.WARNING):
        surface.restore()
    assert "restore" in caplog.text


def test_surface_text_alignment():
    surface = BufferSurface(100, 20)
    w, _ = surface.draw_text("88", 50, 0, (255, 255, 255), align="center")
    cols = np.nonzero(surface.buffer.any(axis=(0, 2)))[0]
    assert w == 7
    assert abs((cols.min() + cols.max()) / 2 - 50) <= 1


def test_surface_resize():
    surface = BufferSurface(10, 10)
    surface.resize(0, 5)
    assert (surface.width, surface.height) == (0, 5)
    surface.clear((1, 2, 3))
    surface.fill_gradient((0, 0, 0), (255, 255, 255))


def test_render_scene(make_state, tuning):
    state = make_state(tuning, 400, 300)
    state.last_tick = 5000.0
    # Away from the centered milestone overlay
    state.pursuer.x, state.pursuer.y = 100.0, 220.0
    state.pursuer.heading = 0.0
    state.pursuer.mouth_open = True
    state.collectibles[1] = Collectible(id=1, x=320, y=80, size=40, spawning=False)
    state.particles.burst(100, 100)
    state.milestone.observe(1000, tuning)

    surface = BufferSurface(400, 300)
    AttractRenderer(tuning).render(surface, state)

    assert tuple(surface.buffer[0, 0]) == GOLDEN_ORANGE
    assert tuple(surface.buffer[299, 200]) == GOLDEN_ORANGE
    assert tuple(surface.buffer[230, 100]) == PACMAN_YELLOW


def test_pop_in_scale(tuning):
    renderer = AttractRenderer(tuning)
    c = Collectible(id=1, x=0, y=0, size=30, spawning=True, spawned_at=1000.0)
    assert renderer.pop_in_scale(c, 1000.0) == pytest.approx(0.0)
    assert renderer.pop_in_scale(c, 1200.0) > 1.0    # overshoot
    assert renderer.pop_in_scale(c, 1400.0) == pytest.approx(1.0)
    c.spawning = False
    assert renderer.pop_in_scale(c, 1000.0) == 1.0


def test_render_paints_score(make_state, tuning):
    state = make_state(tuning, 800, 600)
    renderer = AttractRenderer(tuning)
    surface = BufferSurface(800, 600)

    renderer.render(surface, state)
    before = surface.get_buffer()
    state.score = 98765
    renderer.render(surface, state)

    assert not np.array_equal(before, surface.buffer)
    # Readout stays in the top band
    changed_rows = np.nonzero((before != surface.buffer).any(axis=(1, 2)))[0]
    assert changed_rows.max() < 40
