"""
Kiosk window using pygame.

Hosts the attract loop on the desktop: pygame supplies the frame clock,
touch/click input and resize notifications, and the loop's numpy surface
is blitted into the window every frame with the score chrome on top.
"""

import pygame
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from goldenmunch.animation.attract_loop import AttractLoop
from goldenmunch.animation.scheduler import CallbackFrameHost
from goldenmunch.core.events import (
    Event,
    EventBus,
    EventType,
    activate_event,
    resize_event,
)
from goldenmunch.graphics.surface import BufferSurface

logger = logging.getLogger(__name__)


class PygameFrameHost(CallbackFrameHost):
    """Frame host fired once per window loop iteration with pygame's clock."""

    def pump(self) -> int:
        return self.fire(float(pygame.time.get_ticks()))


@dataclass
class WindowConfig:
    """Kiosk window configuration."""
    width: int = 900
    height: int = 500
    title: str = "Golden Munch"
    fullscreen: bool = False
    fps: int = 60

    # Colors
    panel_color: tuple[int, int, int] = (0, 0, 0)
    text_color: tuple[int, int, int] = (255, 248, 231)
    accent_color: tuple[int, int, int] = (249, 160, 63)


class KioskWindow:
    """
    Desktop window running the idle screen.

    Input Mapping:
        CLICK / TOUCH / SPACE / RETURN: Start order (activate)
        R: Restart the attract loop
        D: Toggle debug overlay
        L: Toggle log viewer
        S: Capture screenshot
        F: Toggle fullscreen
        Q / ESC: Exit
    """

    def __init__(
        self,
        loop: AttractLoop,
        host: PygameFrameHost,
        event_bus: EventBus,
        config: WindowConfig | None = None,
    ) -> None:
        if not isinstance(loop.surface, BufferSurface):
            raise TypeError("KioskWindow needs a loop drawing to a BufferSurface")

        self.config = config or WindowConfig()
        self.loop = loop
        self.host = host
        self.event_bus = event_bus
        self.surface: BufferSurface = loop.surface

        # Pygame setup
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._frame_count = 0
        self._show_debug = False

        # Set once the loop hands off to the menu
        self._navigated_to: Optional[str] = None

        # Fonts
        self._font: pygame.font.Font | None = None
        self._small_font: pygame.font.Font | None = None

        # Log viewer
        self._show_log = False
        self._log_buffer: list[str] = []
        self._max_log_lines = 20
        self._log_handler: logging.Handler | None = None

        self._setup_log_capture()
        self.event_bus.subscribe(EventType.NAVIGATE_AWAY, self._on_navigate_away)

        logger.info("KioskWindow created")

    def _setup_log_capture(self) -> None:
        """Setup log capturing for the log viewer."""
        class KioskLogHandler(logging.Handler):
            def __init__(self, window: 'KioskWindow'):
                super().__init__()
                self.window = window

            def emit(self, record):
                buffer = self.window._log_buffer
                buffer.append(self.format(record))
                if len(buffer) > self.window._max_log_lines * 2:
                    del buffer[:-self.window._max_log_lines]

        handler = KioskLogHandler(self)
        handler.setFormatter(logging.Formatter('%(levelname).1s %(name)s: %(message)s'))
        logging.getLogger().addHandler(handler)
        self._log_handler = handler

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)
        self._set_mode()
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 30)
        self._small_font = pygame.font.SysFont(None, 20)

        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _set_mode(self) -> None:
        if self.config.fullscreen:
            info = pygame.display.Info()
            size = (info.current_w, info.current_h)
            flags = pygame.FULLSCREEN | pygame.DOUBLEBUF
        else:
            size = (self.config.width, self.config.height)
            flags = pygame.RESIZABLE | pygame.DOUBLEBUF
        self._screen = pygame.display.set_mode(size, flags)

        # Bounds changes go through the bus so they land between ticks
        width, height = self._screen.get_size()
        if (width, height) != (self.surface.width, self.surface.height):
            self.event_bus.queue_event(resize_event(width, height))

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self.event_bus.queue_event(resize_event(event.w, event.h))

            elif event.type == pygame.MOUSEBUTTONDOWN:
                self.event_bus.queue_event(activate_event("mouse"))

            elif event.type == pygame.FINGERDOWN:
                self.event_bus.queue_event(activate_event("touch"))

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        if key == pygame.K_ESCAPE or key == pygame.K_q:
            self._running = False
        elif key == pygame.K_d:
            self._show_debug = not self._show_debug
        elif key == pygame.K_l:
            self._show_log = not self._show_log
        elif key == pygame.K_s:
            self._capture_screenshot()
        elif key == pygame.K_f:
            self._toggle_fullscreen()
        elif key == pygame.K_r:
            self._restart()
        elif key in (pygame.K_SPACE, pygame.K_RETURN):
            self.event_bus.queue_event(activate_event("keyboard"))

    def _on_navigate_away(self, event: Event) -> None:
        self._navigated_to = event.data.get("target")
        logger.info(f"Handing off to {self._navigated_to}")

    def _restart(self) -> None:
        self._navigated_to = None
        self.loop.reset()
        self.loop.start()

    # Rendering

    def _render(self) -> None:
        """Blit the loop surface and draw the chrome."""
        if not self._screen:
            return

        self._screen.fill((0, 0, 0))
        if self.surface.width and self.surface.height:
            frame = pygame.surfarray.make_surface(self.surface.buffer.swapaxes(0, 1))
            self._screen.blit(frame, (0, 0))

        self._render_chrome()
        if self._navigated_to:
            self._render_handoff()
        if self._show_debug:
            self._render_debug_panel()
        if self._show_log:
            self._render_log_panel()

        pygame.display.flip()

    def _render_badge(self, text: str, pos: tuple[int, int], color: tuple[int, int, int], anchor: str) -> None:
        """Text on a translucent black badge with a golden border."""
        text_surface = self._font.render(text, True, color)
        rect = text_surface.get_rect(**{anchor: pos}).inflate(24, 12)
        badge = pygame.Surface(rect.size, pygame.SRCALPHA)
        badge.fill((0, 0, 0, 205))
        self._screen.blit(badge, rect.topleft)
        pygame.draw.rect(self._screen, self.config.accent_color, rect, 2, border_radius=6)
        self._screen.blit(text_surface, text_surface.get_rect(center=rect.center))

    def _render_chrome(self) -> None:
        if not self._font:
            return
        w, h = self._screen.get_size()
        snapshot = self.loop.observable

        self._render_badge(f"Score: {snapshot.score:,}", (28, 28), self.config.accent_color, "topleft")
        self._render_badge(f"Cakes: {snapshot.collectible_count}", (w - 28, 28), self.config.text_color, "topright")
        self._render_badge(
            "Touch anywhere to start your order", (28, h - 28), self.config.text_color, "bottomleft"
        )
        seconds = int(self.loop.state.elapsed_ms // 1000)
        self._render_badge(f"{seconds}s", (w - 28, h - 28), self.config.accent_color, "bottomright")

    def _render_handoff(self) -> None:
        w, h = self._screen.get_size()
        veil = pygame.Surface((w, h), pygame.SRCALPHA)
        veil.fill((0, 0, 0, 170))
        self._screen.blit(veil, (0, 0))
        self._render_badge(
            f"Opening {self._navigated_to} ... (R to return)", (w // 2, h // 2),
            self.config.accent_color, "center",
        )

    def _render_debug_panel(self) -> None:
        """Render the debug information panel."""
        if not self._small_font:
            return

        state = self.loop.state
        lines = [
            f"FPS: {self._clock.get_fps():.1f}" if self._clock else "FPS: --",
            f"Frame: {self._frame_count}",
            f"Ticks: {state.ticks}",
            f"Mode: {state.pursuer.mode.name}",
            f"Pursuer: ({state.pursuer.x:.0f}, {state.pursuer.y:.0f})",
            f"Pastries: {len(state.collectibles)}",
            f"Particles: {len(state.particles)}",
            f"Timers: {len(state.timers)}",
            f"Score (live): {state.score}",
            f"Milestone: {state.milestone.points if state.milestone.active else '-'}",
            "",
            "R Restart  D Debug  L Log",
            "S Screenshot  F Fullscreen  Q Quit",
        ]

        rect = pygame.Rect(self._screen.get_width() - 290, 80, 270, 18 * len(lines) + 16)
        panel = pygame.Surface(rect.size, pygame.SRCALPHA)
        panel.fill((20, 25, 35, 220))
        self._screen.blit(panel, rect.topleft)

        y = rect.y + 8
        for line in lines:
            text_surface = self._small_font.render(line, True, self.config.text_color)
            self._screen.blit(text_surface, (rect.x + 10, y))
            y += 18

    def _render_log_panel(self) -> None:
        """Render the log viewer panel."""
        if not self._small_font:
            return

        rect = pygame.Rect(10, 80, 420, self._screen.get_height() - 160)
        surf = pygame.Surface(rect.size, pygame.SRCALPHA)
        surf.fill((20, 25, 35, 230))
        self._screen.blit(surf, rect.topleft)
        pygame.draw.rect(self._screen, (60, 80, 100), rect, 1, border_radius=5)

        y = rect.y + 8
        for line in self._log_buffer[-self._max_log_lines:]:
            # Color code by level
            if line.startswith('E'):
                color = (255, 100, 100)
            elif line.startswith('W'):
                color = (255, 200, 100)
            elif line.startswith('I'):
                color = (150, 200, 150)
            else:
                color = (150, 150, 170)

            display_line = line[:57] + "..." if len(line) > 60 else line
            self._screen.blit(self._small_font.render(display_line, True, color), (rect.x + 8, y))
            y += 16
            if y > rect.bottom - 16:
                break

    def _capture_screenshot(self) -> None:
        """Capture and save a screenshot."""
        if self._screen:
            filename = f"screenshot_{self._frame_count}.png"
            pygame.image.save(self._screen, filename)
            logger.info(f"Screenshot saved: {filename}")

    def _toggle_fullscreen(self) -> None:
        self.config.fullscreen = not self.config.fullscreen
        self._set_mode()
        logger.info(f"Fullscreen: {self.config.fullscreen}")

    async def run(self) -> None:
        """Main window loop."""
        self._init_pygame()
        self._running = True
        self.loop.start()

        logger.info("Kiosk window started")

        try:
            while self._running:
                self._handle_events()

                # Host input lands before the next tick
                self.event_bus.process_queue()
                self.host.pump()

                self._render()

                if self._clock:
                    self._clock.tick(self.config.fps)
                self._frame_count += 1

                await asyncio.sleep(0)
        finally:
            self._cleanup()

    def _cleanup(self) -> None:
        """Stop the loop and release pygame."""
        self.loop.close()
        self.event_bus.emit(Event(EventType.SHUTDOWN, source="window"))
        if self._log_handler:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None
        pygame.quit()
        logger.info("Kiosk window stopped")

    def stop(self) -> None:
        """Stop the window loop."""
        self._running = False
