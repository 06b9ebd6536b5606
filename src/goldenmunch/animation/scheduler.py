"""Frame scheduling for the attract loop.

The scheduler never owns a clock. A FrameHost hands it one callback per
displayed frame together with a monotonically increasing timestamp in
milliseconds, in the manner of a browser's requestAnimationFrame. The next
frame is only requested after the current callback has returned, so ticks
never overlap.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional
import itertools
import logging

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameHost(ABC):
    """Source of per-frame callbacks and timestamps."""

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> int:
        """Register a one-shot callback for the next frame.

        Returns:
            Handle usable with cancel_frame()
        """
        ...

    @abstractmethod
    def cancel_frame(self, handle: int) -> None:
        """Cancel a pending callback. Unknown or fired handles are ignored."""
        ...


class CallbackFrameHost(FrameHost):
    """Host that keeps pending callbacks until its owner fires a frame."""

    def __init__(self) -> None:
        self._pending: Dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def fire(self, timestamp: float) -> int:
        """Run every callback registered before this call.

        Callbacks requested while firing wait for the next frame.

        Returns:
            Number of callbacks run
        """
        batch = self._pending
        self._pending = {}
        for callback in batch.values():
            callback(timestamp)
        return len(batch)


class ManualFrameHost(CallbackFrameHost):
    """Deterministic host with its own clock, for headless runs and tests."""

    def __init__(self, start_ms: float = 0.0) -> None:
        super().__init__()
        self.now = start_ms

    def advance(self, ms: float) -> int:
        """Move the clock forward and fire one frame."""
        self.now += ms
        return self.fire(self.now)

    def run_frames(self, count: int, frame_ms: float = 1000.0 / 60.0) -> int:
        """Fire `count` frames spaced `frame_ms` apart.

        Returns:
            Number of frames that actually ran a callback
        """
        ran = 0
        for _ in range(count):
            if self.advance(frame_ms):
                ran += 1
        return ran


class FrameScheduler:
    """Drives update(timestamp) then render() once per host frame."""

    def __init__(
        self,
        host: FrameHost,
        update: Callable[[float], None],
        render: Callable[[], None],
    ) -> None:
        self.host = host
        self._update = update
        self._render = render
        self._running = False
        self._handle: Optional[int] = None
        self._in_frame = False
        self.frame_count = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Begin requesting frames. Calling it again while running is a no-op."""
        if self._running:
            return
        self._running = True
        if not self._in_frame:
            self._request()
        logger.debug("FrameScheduler started")

    def stop(self) -> None:
        """Stop and cancel any pending frame. Safe to call at any time."""
        was_running = self._running
        self._running = False
        if self._handle is not None:
            self.host.cancel_frame(self._handle)
            self._handle = None
        if was_running:
            logger.debug(f"FrameScheduler stopped after {self.frame_count} frames")

    def _request(self) -> None:
        self._handle = self.host.request_frame(self._on_frame)

    def _on_frame(self, timestamp: float) -> None:
        self._handle = None
        if not self._running:
            return

        self._in_frame = True
        try:
            self._update(timestamp)
            self._render()
            self.frame_count += 1
        finally:
            self._in_frame = False

        # stop() may have been called from inside update/render
        if self._running and self._handle is None:
            self._request()
