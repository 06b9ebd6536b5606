"""
Main entry point for the Golden Munch idle screen.

Runs the attract loop in a desktop pygame window (simulator) or without a
display (headless), depending on GOLDENMUNCH_ENV.
"""

import asyncio
import logging
import random
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from goldenmunch.config.settings import Settings, get_settings

LOG_FILE = "goldenmunch.log"


def setup_logging(debug: bool = False, log_file: str | Path | None = LOG_FILE) -> None:
    """Configure console logging and a log file truncated on each run."""
    level = logging.DEBUG if debug else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.info(f"Logging to file: {log_file}")


async def run_simulator(settings: Settings) -> None:
    """Run the idle screen in a pygame window."""
    from goldenmunch.animation.attract_loop import AttractLoop
    from goldenmunch.core.events import EventBus
    from goldenmunch.graphics.surface import BufferSurface
    from goldenmunch.simulator.window import KioskWindow, PygameFrameHost, WindowConfig

    display = settings.display
    event_bus = EventBus()
    host = PygameFrameHost()
    surface = BufferSurface(display.width, display.height)
    loop = AttractLoop(
        settings.tuning,
        display.width,
        display.height,
        event_bus=event_bus,
        rng=random.Random(settings.seed),
        surface=surface,
        host=host,
    )

    config = WindowConfig(
        width=display.width,
        height=display.height,
        fullscreen=display.fullscreen,
        fps=display.fps,
    )
    window = KioskWindow(loop, host, event_bus, config)
    await window.run()


def main() -> None:
    """Main entry point."""
    load_dotenv()

    try:
        settings = get_settings()
        tuning = settings.tuning
    except (ValidationError, KeyError) as e:
        setup_logging(log_file=None)
        logging.getLogger(__name__).error(f"Invalid configuration: {e}")
        sys.exit(2)

    setup_logging(settings.debug)
    logger = logging.getLogger(__name__)
    logger.info(
        f"Golden Munch starting: env={settings.env} variant={settings.variant} "
        f"cap={tuning.max_collectibles}"
    )

    try:
        if settings.is_simulator:
            asyncio.run(run_simulator(settings))
        else:
            from goldenmunch.simulator.headless import run_headless
            snapshot = run_headless(settings)
            logger.info(f"Final score: {snapshot.score}")

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Golden Munch stopped")


if __name__ == "__main__":
    main()
