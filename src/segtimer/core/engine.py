"""Countdown engine: a deadline-based state machine for the countdown."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

MAX_MINUTES = 99
MAX_SECONDS = 59


class Phase(Enum):
    """Possible positions of the countdown state machine."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ALERTING = "alerting"


def monotonic_ms() -> float:
    """Return the monotonic clock reading in milliseconds."""
    return time.monotonic() * 1000.0


def _coerce(value: Any, upper: int) -> int:
    """Coerce a raw input-field value into an integer in ``[0, upper]``.

    Anything that does not parse as a number counts as 0.
    """
    if isinstance(value, str):
        value = value.strip() or "0"
    try:
        number = float(value)
    except OverflowError:
        # Integers too large for a float.
        return upper if value > 0 else 0
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    return int(max(0.0, min(float(upper), number)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class TimerConfiguration:
    """A clamped minutes/seconds pair taken from the input fields."""

    minutes: int = 0
    seconds: int = 0

    @classmethod
    def from_raw(cls, minutes: Any, seconds: Any) -> TimerConfiguration:
        return cls(_coerce(minutes, MAX_MINUTES), _coerce(seconds, MAX_SECONDS))

    @property
    def duration_ms(self) -> int:
        return (self.minutes * 60 + self.seconds) * 1000


PhaseListener = Callable[[Phase], None]


class CountdownEngine:
    """A countdown that measures remaining time against an absolute deadline.

    The deadline is fixed when the countdown starts and every ``tick``
    recomputes ``deadline - now``, so frame jitter never accumulates as
    drift.  No operation raises for bad input: values are clamped and
    illegal requests (such as starting a zero-length countdown) are no-ops.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        on_complete: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._clock: Callable[[], float] = clock if clock is not None else monotonic_ms
        self._on_complete = on_complete
        self._phase: Phase = Phase.IDLE
        self._initial_duration_ms: int = 0
        self._remaining_ms: int = 0
        self._deadline: Optional[float] = None
        self._alert_fired: bool = False
        self._listeners: list[PhaseListener] = []

    # -- public interface ----------------------------------------------------

    def configure(self, minutes: Any, seconds: Any) -> TimerConfiguration:
        """Apply a new duration from raw *minutes* and *seconds* values.

        Cancels any run in progress and returns to IDLE.
        """
        config = TimerConfiguration.from_raw(minutes, seconds)
        self._initial_duration_ms = config.duration_ms
        self._remaining_ms = config.duration_ms
        self._deadline = None
        logger.debug("configured %02d:%02d", config.minutes, config.seconds)
        self._set_phase(Phase.IDLE)
        return config

    def start(self) -> None:
        """Start or resume the countdown.

        Resumes from the paused remainder when there is one, otherwise
        starts over from the configured duration.
        """
        if self._phase == Phase.RUNNING:
            return
        base = self._remaining_ms if self._remaining_ms > 0 else self._initial_duration_ms
        if base <= 0:
            return
        self._remaining_ms = base
        self._deadline = self._clock() + base
        self._alert_fired = False
        self._set_phase(Phase.RUNNING)

    def pause(self) -> None:
        """Freeze the countdown at the remaining time of this instant."""
        if self._phase != Phase.RUNNING:
            return
        self.tick()
        # The tick above may have completed the countdown.
        if self._phase != Phase.RUNNING:
            return
        self._deadline = None
        self._set_phase(Phase.PAUSED)

    def reset(self) -> None:
        """Return to IDLE with the full configured duration."""
        self._remaining_ms = self._initial_duration_ms
        self._deadline = None
        self._set_phase(Phase.IDLE)

    def toggle(self) -> None:
        """Pause when running, otherwise start."""
        if self._phase == Phase.RUNNING:
            self.pause()
        else:
            self.start()

    def tick(self, now: Optional[float] = None) -> int:
        """Recompute the remaining time from the deadline.

        Only has an effect while RUNNING.  When the remaining time reaches
        zero the engine moves to ALERTING and fires the completion callback
        once.  Returns the remaining milliseconds.
        """
        if self._phase != Phase.RUNNING or self._deadline is None:
            return self._remaining_ms
        if now is None:
            now = self._clock()
        left = max(0, _round_half_up(self._deadline - now))
        # Clamp keeps remaining <= initial even if the clock stepped backwards.
        self._remaining_ms = min(left, self._initial_duration_ms)
        if left == 0:
            self._deadline = None
            self._set_phase(Phase.ALERTING)
            self._fire_alert()
        return self._remaining_ms

    def subscribe(self, listener: PhaseListener) -> None:
        """Call *listener* with the new phase after every phase change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: PhaseListener) -> None:
        """Stop notifying *listener*; unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -- read-only state -----------------------------------------------------

    @property
    def phase(self) -> Phase:
        """Return the current phase."""
        return self._phase

    @property
    def remaining_ms(self) -> int:
        """Return the remaining time in milliseconds."""
        return self._remaining_ms

    @property
    def initial_duration_ms(self) -> int:
        """Return the duration set by the last configure, in milliseconds."""
        return self._initial_duration_ms

    @property
    def deadline(self) -> Optional[float]:
        """Return the clock time the countdown ends at, or None unless running."""
        return self._deadline

    @property
    def is_running(self) -> bool:
        """True while counting down."""
        return self._phase == Phase.RUNNING

    @property
    def is_alerting(self) -> bool:
        """True from completion until the next start, reset or configure."""
        return self._phase == Phase.ALERTING

    @property
    def can_start(self) -> bool:
        """False when there is nothing to count down."""
        return self._remaining_ms > 0 or self._initial_duration_ms > 0

    @property
    def clock(self) -> Callable[[], float]:
        """Return the millisecond clock the engine reads."""
        return self._clock

    # -- private helpers -----------------------------------------------------

    def _set_phase(self, phase: Phase) -> None:
        previous = self._phase
        self._phase = phase
        if previous == phase:
            return
        logger.debug("phase %s -> %s (%d ms left)", previous.value, phase.value, self._remaining_ms)
        for listener in list(self._listeners):
            listener(phase)

    def _fire_alert(self) -> None:
        if self._alert_fired:
            return
        self._alert_fired = True
        if self._on_complete is not None:
            self._on_complete()
