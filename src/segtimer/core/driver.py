"""Frame driver: re-schedules a tick callback once per frame on an event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from segtimer.core.engine import monotonic_ms

logger = logging.getLogger(__name__)


class FrameDriver:
    """Call *on_frame* once per frame while *condition* holds.

    Frames are scheduled with ``loop.call_later`` so the callback runs on
    the loop thread, serialized with every other event.  Stopping the
    driver cancels the pending frame so nothing fires after a stop.
    """

    def __init__(
        self,
        on_frame: Callable[[float], Any],
        condition: Callable[[], bool],
        loop: Optional[asyncio.AbstractEventLoop] = None,
        interval: float = 1.0 / 60,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._on_frame = on_frame
        self._condition = condition
        self._loop = loop
        self._interval = interval
        self._clock = clock if clock is not None else monotonic_ms
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def active(self) -> bool:
        """True while a frame is scheduled."""
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None or not self._condition():
            return
        logger.debug("frame driver started")
        self._schedule()

    def stop(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.debug("frame driver stopped")

    def sync(self, *_: Any) -> None:
        """Start or stop according to the current condition.

        Accepts and ignores arguments so it can be used directly as an
        engine phase listener.
        """
        if self._condition():
            self.start()
        else:
            self.stop()

    # -- private helpers -----------------------------------------------------

    def _schedule(self) -> None:
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        self._handle = loop.call_later(self._interval, self._frame)

    def _frame(self) -> None:
        self._handle = None
        self._on_frame(self._clock())
        # on_frame may have stopped and restarted the driver already.
        if self._handle is None and self._condition():
            self._schedule()
