"""End-to-end tests for the attract loop lifecycle and per-tick invariants."""

import math

import pytest

from goldenmunch.animation.pursuer import PursuerMode
from goldenmunch.animation.spawner import Collectible
from goldenmunch.config.settings import AttractTuning, get_tuning
from goldenmunch.core.events import EventType, activate_event, resize_event

FRAME_MS = 1000.0 / 60.0


def collect(event_bus, event_type):
    events = []
    event_bus.subscribe(event_type, events.append)
    return events


def test_pursuit_scenario_800x600(make_loop, quiet_tuning):
    """Distance to the only pastry shrinks every tick until it is eaten."""
    tuning = quiet_tuning.model_copy(update={"pursuer_radius": 40.0, "pursuer_speed": 3.0})
    loop = make_loop(tuning, 800, 600)
    pursuer = loop.state.pursuer
    assert (pursuer.x, pursuer.y, pursuer.heading) == (100.0, 100.0, 0.0)

    cake = Collectible(id=1, x=700.0, y=500.0, size=20.0, spawning=False)
    loop.state.collectibles[cake.id] = cake
    threshold = pursuer.collision_threshold(cake, tuning.collision_divisor)
    assert threshold == 30.0

    loop.start()
    last = pursuer.distance_to(cake)
    ts = 0.0
    for _ in range(1000):
        ts += FRAME_MS
        loop.update(ts)
        if cake.id not in loop.state.collectibles:
            break
        dist = pursuer.distance_to(cake)
        assert dist < last
        last = dist
    else:
        pytest.fail("pastry was never eaten")

    assert pursuer.distance_to(cake) < threshold
    assert loop.state.score == math.floor(20 / 3) + 10
    assert len(loop.state.particles) == tuning.burst_count
    assert pursuer.mode is PursuerMode.SEEKING


def test_invariants_over_long_run(make_loop, host, event_bus):
    tuning = get_tuning("frenzy")
    loop = make_loop(tuning, 900, 500)
    consumed = collect(event_bus, EventType.COLLECTIBLE_CONSUMED)
    arena = loop.state.arena

    loop.start()
    last_score = 0
    for _ in range(3000):
        before = len(consumed)
        host.advance(FRAME_MS)
        state = loop.state
        pursuer = state.pursuer

        assert len(state.collectibles) <= tuning.max_collectibles
        assert pursuer.radius <= pursuer.x <= arena.width - pursuer.radius
        assert pursuer.radius <= pursuer.y <= arena.height - pursuer.radius
        assert state.score >= last_score

        new = consumed[before:]
        assert len(new) <= 1
        if new:
            assert state.score - last_score == new[0].data["points"]
        last_score = state.score

    assert consumed, "nothing was eaten in 50 seconds"


def test_observable_score_is_a_past_value(make_loop, host, event_bus, tuning):
    loop = make_loop(tuning)
    seen_scores = {0}
    event_bus.subscribe(EventType.TICK, lambda e: seen_scores.add(loop.state.score))

    loop.start()
    for _ in range(1200):
        host.advance(FRAME_MS)
        assert loop.observable.score in seen_scores
        assert loop.observable.score <= loop.state.score


def test_opening_spawns(make_loop, host, event_bus, tuning):
    spawned = collect(event_bus, EventType.COLLECTIBLE_SPAWNED)
    loop = make_loop(tuning)

    loop.start()
    host.advance(FRAME_MS)
    assert len(spawned) == 1

    host.run_frames(int(2500 / FRAME_MS))
    assert len(spawned) >= tuning.initial_spawn_count


def test_skips_tick_without_bounds(make_loop, tuning):
    loop = make_loop(tuning, 0, 0)
    loop.start()
    loop.update(100.0)

    state = loop.state
    assert state.ticks == 0
    assert state.last_tick is None
    assert state.last_mouth_toggle == -math.inf
    assert state.last_sync == -math.inf
    assert not state.collectibles

    loop.resize(640, 480)
    loop.update(200.0)
    assert state.ticks == 1
    assert state.last_sync == 200.0


def test_skips_tick_without_surface(make_loop, tuning):
    loop = make_loop(tuning, surface=False)
    loop.start()
    loop.update(100.0)
    loop.render()
    assert loop.state.ticks == 0
    assert loop.state.last_tick is None


def test_first_resize_centers_pursuer(make_loop, tuning):
    loop = make_loop(tuning, 0, 0)
    pursuer = loop.state.pursuer

    loop.resize(1000, 600)
    assert (pursuer.x, pursuer.y) == (500.0, 300.0)
    assert not pursuer.at_default

    loop.resize(1200, 800)
    assert (pursuer.x, pursuer.y) == (500.0, 300.0)
    assert loop.surface.width == 1200


def test_resize_after_motion_keeps_position(make_loop, quiet_tuning):
    loop = make_loop(quiet_tuning, 900, 500)
    loop.start()
    loop.update(FRAME_MS)
    x, y = loop.state.pursuer.x, loop.state.pursuer.y

    loop.resize(1280, 720)
    assert (loop.state.pursuer.x, loop.state.pursuer.y) == (x, y)


def test_resize_via_event_bus(make_loop, event_bus, tuning):
    loop = make_loop(tuning, 0, 0)
    event_bus.queue_event(resize_event(320, 240))
    assert not loop.state.arena.ready

    event_bus.process_queue()
    assert (loop.state.arena.width, loop.state.arena.height) == (320, 240)


def test_stop_leaves_nothing_scheduled(make_loop, host, tuning):
    loop = make_loop(tuning)
    loop.start()
    host.advance(FRAME_MS)
    assert len(loop.state.timers) > 0

    loop.stop()
    loop.stop()

    assert host.pending == 0
    assert len(loop.state.timers) == 0
    assert not loop.running
    assert loop.observable.active is False
    assert host.run_frames(10) == 0


def test_activation_navigates_away(make_loop, host, event_bus, tuning):
    navigations = collect(event_bus, EventType.NAVIGATE_AWAY)
    loop = make_loop(tuning)
    loop.start()
    host.advance(FRAME_MS)

    event_bus.queue_event(activate_event())
    event_bus.process_queue()

    assert not loop.running
    assert [e.data["target"] for e in navigations] == ["/menu"]

    # A second tap after the hand-off does nothing
    loop.activate()
    assert len(navigations) == 1


def test_milestone_event_fires_once(make_loop, event_bus, quiet_tuning):
    milestones = collect(event_bus, EventType.MILESTONE_REACHED)
    loop = make_loop(quiet_tuning)
    loop.start()

    loop.update(0.0)
    loop.state.score = 950
    loop.update(1001.0)    # sync publishes 950
    loop.state.score = 1050
    loop.update(2002.0)    # check sees 950, sync publishes 1050
    loop.update(4003.0)    # check sees 1050
    loop.update(6004.0)
    loop.update(8005.0)

    assert [e.data["points"] for e in milestones] == [1000]


def test_mouth_toggles_and_chomps_faster(make_loop, quiet_tuning):
    loop = make_loop(quiet_tuning)
    loop.start()
    pursuer = loop.state.pursuer

    loop.update(0.0)
    opened = pursuer.mouth_open
    loop.update(120.0)
    assert pursuer.mouth_open == opened
    loop.update(151.0)
    assert pursuer.mouth_open != opened

    pursuer.last_consumed_at = 151.0
    toggled = pursuer.mouth_open
    loop.update(262.0)
    assert pursuer.mouth_open != toggled


def test_reset_restarts_clean(make_loop, host, tuning):
    loop = make_loop(tuning)
    loop.start()
    host.run_frames(300)
    old_state = loop.state

    loop.reset()

    assert loop.state is not old_state
    assert loop.running
    assert loop.state.score == 0
    assert not loop.state.collectibles
    assert loop.observable.score == 0
    assert host.pending == 1


def test_close_detaches_from_bus(make_loop, event_bus, tuning):
    loop = make_loop(tuning, 0, 0)
    loop.close()
    event_bus.emit(resize_event(500, 400))
    assert not loop.state.arena.ready


def test_render_after_update(make_loop, host, tuning):
    loop = make_loop(tuning)
    loop.start()
    host.run_frames(120)
    assert loop.surface.buffer.any()


def test_classic_preset_scores_without_bonus(make_loop):
    tuning = AttractTuning(score_bonus=0, initial_spawn_count=0, max_collectibles=0)
    loop = make_loop(tuning)
    pursuer = loop.state.pursuer
    cake = Collectible(id=9, x=pursuer.x + 1, y=pursuer.y, size=44.0, spawning=False)
    loop.state.collectibles[cake.id] = cake
    loop.start()

    loop.update(0.0)

    assert loop.state.score == 14
    assert not loop.state.collectibles


def test_shrinking_resize_keeps_pastries_reachable(make_loop, host, quiet_tuning):
    loop = make_loop(quiet_tuning, 900, 500)
    for i in range(8):
        loop.state.collectibles[i + 1] = Collectible(
            id=i + 1, x=800.0, y=60.0 + 50 * i, size=36.0, spawning=False
        )
    loop.start()
    host.advance(FRAME_MS)

    loop.resize(400, 300)

    margin = quiet_tuning.spawn_margin
    for cake in loop.state.collectibles.values():
        assert margin <= cake.x <= 400 - margin
        assert margin <= cake.y <= 300 - margin

    host.run_frames(3000)
    assert loop.state.score > 0
    assert len(loop.state.collectibles) < 8


def test_restart_after_stop_skips_opening(make_loop, host, event_bus):
    tuning = AttractTuning(spawn_interval_min_ms=60000.0, spawn_interval_max_ms=60000.0)
    spawned = collect(event_bus, EventType.COLLECTIBLE_SPAWNED)
    loop = make_loop(tuning)

    loop.start()
    host.run_frames(300)
    assert len(spawned) == tuning.initial_spawn_count

    loop.stop()
    loop.start()
    host.run_frames(300)
    assert len(spawned) == tuning.initial_spawn_count


def test_reset_drops_live_particles(make_loop, tuning):
    loop = make_loop(tuning)
    loop.state.particles.burst(100.0, 100.0)
    assert len(loop.state.particles) == tuning.burst_count

    loop.reset()
    assert len(loop.state.particles) == 0
