"""
The attract loop: the idle-screen simulation and its lifecycle.

AttractLoop owns exactly one SimulationState and mutates it in place on
every frame. The host only sees the throttled ObservableState through the
bridge and the events published on the bus.
"""

from typing import Callable, List, Optional
import logging
import math
import random

from goldenmunch.animation.bridge import ObservableState, StateBridge
from goldenmunch.animation.scheduler import FrameHost, FrameScheduler, ManualFrameHost
from goldenmunch.animation.spawner import Collectible, CollectibleSpawner
from goldenmunch.animation.state import SimulationState
from goldenmunch.config.settings import AttractTuning
from goldenmunch.core.events import Event, EventBus, EventType, tick_event
from goldenmunch.graphics.renderer import AttractRenderer
from goldenmunch.graphics.surface import DrawingSurface

logger = logging.getLogger(__name__)

NAVIGATE_TARGET = "/menu"


class AttractLoop:
    """Pursuer-chases-pastries simulation driven by a frame host.

    Usage:
        loop = AttractLoop(tuning, 900, 500, event_bus=bus, surface=surface, host=host)
        loop.start()
        ...
        loop.activate()  # visitor touched the screen
    """

    def __init__(
        self,
        tuning: AttractTuning,
        width: float = 0.0,
        height: float = 0.0,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
        surface: Optional[DrawingSurface] = None,
        host: Optional[FrameHost] = None,
    ):
        self.tuning = tuning
        self.event_bus = event_bus
        self.rng = rng or random.Random()
        self.surface = surface

        if surface is not None and not (width or height):
            width, height = surface.width, surface.height

        # Initial bounds are the default canvas; they never re-center the pursuer
        self.state = SimulationState.create(tuning, width, height, self.rng)
        if surface is not None:
            surface.resize(int(self.state.arena.width), int(self.state.arena.height))

        self.spawner = CollectibleSpawner(tuning, self.rng)
        self.spawner.on_spawn = self._on_spawn
        self.bridge = StateBridge(tuning.sync_interval_ms)
        self.renderer = AttractRenderer(tuning)
        self.scheduler = FrameScheduler(host or ManualFrameHost(), self.update, self.render)

        self._opening_pending = False
        self._unsubscribers: List[Callable[[], None]] = []
        if event_bus is not None:
            self._unsubscribers.append(event_bus.subscribe(EventType.ACTIVATE, self._on_activate))
            self._unsubscribers.append(event_bus.subscribe(EventType.RESIZE, self._on_resize))

    # Properties

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def ready(self) -> bool:
        """True when a tick would do work: a surface and usable bounds."""
        return self.surface is not None and self.state.arena.ready

    @property
    def observable(self) -> ObservableState:
        return self.bridge.snapshot

    # Lifecycle

    def start(self) -> None:
        """Start the loop. Calling it again while running is a no-op.

        The opening pastries are only scheduled for a state that has never
        ticked; restarting after stop() resumes with the surviving ones.
        """
        if self.state.running:
            return
        self.state.running = True
        self._opening_pending = self.state.ticks == 0
        self.scheduler.start()
        logger.info("Attract loop started")

    def stop(self) -> None:
        """Tear down: stop frames, drop timers, publish active=False.

        Safe to call repeatedly and before start().
        """
        self.scheduler.stop()
        self.state.timers.clear()
        self._opening_pending = False

        if not self.state.running:
            return
        self.state.running = False
        now = self.state.last_tick if self.state.last_tick is not None else 0.0
        self.bridge.force_sync(self.state, now)
        self._publish_sync()
        logger.info(f"Attract loop stopped (score {self.state.score}, {self.state.ticks} ticks)")

    def activate(self) -> None:
        """Visitor touch: stop the loop and ask the host to leave the idle screen."""
        if not self.state.running:
            logger.debug("Activation ignored, loop not running")
            return
        logger.info("Attract loop activated, navigating away")
        self.stop()
        self._emit(EventType.NAVIGATE_AWAY, {"target": NAVIGATE_TARGET})

    def reset(self) -> None:
        """Fresh simulation on the current bounds; restarts if it was running."""
        was_running = self.state.running
        self.stop()
        arena = self.state.arena
        self.state = SimulationState.create(self.tuning, arena.width, arena.height, self.rng)
        self.bridge.reset()
        logger.info("Attract loop reset")
        if was_running:
            self.start()

    def close(self) -> None:
        """Stop and detach from the event bus."""
        self.stop()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def resize(self, width: float, height: float) -> None:
        """Apply a host resize notification between ticks."""
        arena = self.state.arena
        arena.resize(width, height)
        if self.surface is not None:
            self.surface.resize(int(arena.width), int(arena.height))

        pursuer = self.state.pursuer
        if arena.ready:
            if pursuer.at_default:
                pursuer.x, pursuer.y = arena.center
                pursuer.at_default = False
                logger.debug(f"Pursuer centered at ({pursuer.x:.0f}, {pursuer.y:.0f})")
            else:
                pursuer.clamp_to(arena)
            self._clamp_collectibles()
        logger.debug(f"Arena resized to {arena.width:.0f}x{arena.height:.0f}")

    def _clamp_collectibles(self) -> None:
        """Pull pastries back inside the spawn inset after the arena shrinks."""
        arena = self.state.arena
        margin = self.tuning.spawn_margin
        moved = 0
        for collectible in self.state.collectibles.values():
            x, y = arena.clamp(collectible.x, collectible.y, margin)
            if (x, y) != (collectible.x, collectible.y):
                collectible.x, collectible.y = x, y
                moved += 1
        if moved:
            logger.debug(f"Moved {moved} pastries inside the resized arena")

    # Per-frame work

    def update(self, timestamp: float) -> None:
        """Advance the simulation one tick."""
        if not self.ready:
            return

        state = self.state
        tuning = self.tuning
        pursuer = state.pursuer

        frame_scale = self._frame_scale(timestamp)
        if state.started_at is None:
            state.started_at = timestamp
        state.last_tick = timestamp
        state.ticks += 1

        if self._opening_pending:
            self._opening_pending = False
            self.spawner.schedule_opening(state, timestamp)
            if tuning.initial_spawn_count > 0:
                state.last_spawn = timestamp
                state.next_spawn_interval = self.spawner.next_interval()
        state.timers.run_due(timestamp)

        # Mouth snaps faster right after a bite
        interval = tuning.mouth_interval_ms
        if pursuer.is_chomping(timestamp, tuning.chomp_window_ms):
            interval = tuning.chomp_interval_ms
        if timestamp - state.last_mouth_toggle > interval:
            pursuer.mouth_open = not pursuer.mouth_open
            state.last_mouth_toggle = timestamp

        self.spawner.update(state, timestamp)

        target = pursuer.update(
            state.arena, state.collectibles.values(), tuning, self.rng, frame_scale
        )
        # The first tick that moves the pursuer ends its default placement
        pursuer.at_default = False
        if target is not None and pursuer.touches(target, tuning.collision_divisor):
            self._consume(target, timestamp)

        state.particles.update()
        state.milestone.update(tuning)

        if timestamp - state.last_milestone_check > tuning.milestone_check_ms:
            state.last_milestone_check = timestamp
            if state.milestone.observe(self.bridge.score, tuning):
                self._emit(EventType.MILESTONE_REACHED, {"points": state.milestone.points})

        if self.bridge.sync(state, timestamp):
            self._publish_sync()

        if self.event_bus is not None:
            self.event_bus.emit(tick_event(timestamp, state.ticks))

    def render(self) -> None:
        if not self.ready:
            return
        self.renderer.render(self.surface, self.state)

    def _frame_scale(self, timestamp: float) -> float:
        last = self.state.last_tick
        if last is None:
            return 1.0
        scale = (timestamp - last) / self.tuning.reference_frame_ms
        return max(0.0, min(self.tuning.max_frame_scale, scale))

    def _consume(self, collectible: Collectible, timestamp: float) -> None:
        state = self.state
        state.remove_collectible(collectible.id)
        points = math.floor(collectible.size / self.tuning.score_divisor) + self.tuning.score_bonus
        state.add_score(points)
        state.particles.burst(collectible.x, collectible.y)
        state.pursuer.last_consumed_at = timestamp

        logger.debug(
            f"Ate {collectible.style.name} #{collectible.id} for {points} points "
            f"(score {state.score})"
        )
        self._emit(EventType.COLLECTIBLE_CONSUMED, {
            "id": collectible.id,
            "points": points,
            "score": state.score,
            "x": collectible.x,
            "y": collectible.y,
        })

    # Event plumbing

    def _emit(self, event_type: EventType, data: dict) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(Event(event_type, data=data, source="attract_loop"))

    def _publish_sync(self) -> None:
        snapshot = self.bridge.snapshot
        self._emit(EventType.STATE_SYNCED, {
            "score": snapshot.score,
            "collectible_count": snapshot.collectible_count,
            "active": snapshot.active,
        })

    def _on_spawn(self, collectible: Collectible) -> None:
        self._emit(EventType.COLLECTIBLE_SPAWNED, {
            "id": collectible.id,
            "variant": collectible.style.name,
            "x": collectible.x,
            "y": collectible.y,
        })

    def _on_activate(self, event: Event) -> None:
        self.activate()

    def _on_resize(self, event: Event) -> None:
        self.resize(event.data.get("width", 0), event.data.get("height", 0))
