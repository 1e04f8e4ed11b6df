"""Alert trigger: a detached, best-effort sequence of audible pulses."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Any, Protocol, Union

logger = logging.getLogger(__name__)


class Beeper(Protocol):
    """Something that can make one short sound."""

    def pulse(self) -> None: ...


class TerminalBell:
    """Rings the bell of *app*, anything with a ``bell()`` method such as a Textual app."""

    def __init__(self, app: Any) -> None:
        self._app = app

    def pulse(self) -> None:
        self._app.bell()


class SilentBeeper:
    """A beeper that makes no sound, used with ``--no-bell``."""

    def pulse(self) -> None:
        pass


class AlertTrigger:
    """Play *pulses* beeps spaced *interval* seconds apart, fire-and-forget.

    Each :meth:`fire` starts an independent sequence.  On an asyncio loop
    the sequence is a task; otherwise it runs in a daemon thread.  A beeper
    failure ends that sequence quietly.
    """

    def __init__(self, beeper: Beeper, pulses: int = 5, interval: float = 0.25) -> None:
        self._beeper = beeper
        self._pulses = max(0, pulses)
        self._interval = max(0.0, interval)
        self._tasks: set[asyncio.Task] = set()
        self._threads: set[threading.Thread] = set()

    @property
    def pending(self) -> int:
        """Number of sequences still playing."""
        return len(self._tasks) + sum(1 for t in self._threads if t.is_alive())

    def fire(self) -> Union[asyncio.Task, threading.Thread]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return self._fire_in_thread()
        task = loop.create_task(self._play())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # -- private helpers -----------------------------------------------------

    def _fire_in_thread(self) -> threading.Thread:
        self._threads = {t for t in self._threads if t.is_alive()}
        thread = threading.Thread(target=self._play_blocking, name="segtimer-alert", daemon=True)
        self._threads.add(thread)
        thread.start()
        return thread

    async def _play(self) -> None:
        try:
            for i in range(self._pulses):
                self._beeper.pulse()
                if i < self._pulses - 1:
                    await asyncio.sleep(self._interval)
        except Exception:
            logger.debug("alert sequence aborted", exc_info=True)

    def _play_blocking(self) -> None:
        try:
            for i in range(self._pulses):
                self._beeper.pulse()
                if i < self._pulses - 1:
                    time.sleep(self._interval)
        except Exception:
            logger.debug("alert sequence aborted", exc_info=True)
