"""Display formatter: pure functions from timer state to renderable values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from segtimer.core.engine import Phase
from segtimer.core.settings import Settings

if TYPE_CHECKING:
    from segtimer.core.engine import CountdownEngine

COLON_BLINK_MS = 500
# 99:59.9, the longest time two minute digits can show.
MAX_DISPLAY_MS = 5_999_999


@dataclass(frozen=True)
class DigitReadout:
    """The ``MM:SS.d`` digits of a remaining time, one character each."""

    minutes_tens: str
    minutes_ones: str
    seconds_tens: str
    seconds_ones: str
    deciseconds: str

    @property
    def minutes(self) -> str:
        return self.minutes_tens + self.minutes_ones

    @property
    def seconds(self) -> str:
        return self.seconds_tens + self.seconds_ones

    def __str__(self) -> str:
        return f"{self.minutes}:{self.seconds}.{self.deciseconds}"


@dataclass(frozen=True)
class Frame:
    """Everything the screen needs to draw one frame."""

    readout: DigitReadout
    colon_visible: bool
    alert_blink: bool
    progress: float
    phase: Phase


def format_remaining(remaining_ms: int) -> DigitReadout:
    """Split *remaining_ms* into zero-padded minute, second and decisecond digits."""
    remaining_ms = max(0, int(remaining_ms))
    deciseconds = (remaining_ms // 100) % 10
    total_seconds = remaining_ms // 1000
    minutes = f"{total_seconds // 60:02d}"
    seconds = f"{total_seconds % 60:02d}"
    return DigitReadout(minutes[0], minutes[1], seconds[0], seconds[1], str(deciseconds))


def colon_visible(phase: Phase, remaining_ms: int) -> bool:
    """Solid while running; otherwise blinks with the remaining value."""
    if phase == Phase.RUNNING:
        return True
    return (int(remaining_ms) // COLON_BLINK_MS) % 2 == 0


def alert_blink(phase: Phase, now_ms: float, period_ms: int = 300) -> bool:
    """Whether the display is in the dimmed half of the alert rhythm."""
    if phase != Phase.ALERTING:
        return False
    return int(now_ms // period_ms) % 2 == 0


def progress_percent(initial_ms: int, remaining_ms: int) -> float:
    """Elapsed share of the configured duration, in ``[0, 100]``."""
    if initial_ms <= 0:
        return 0.0
    pct = (initial_ms - remaining_ms) / initial_ms * 100.0
    return min(100.0, max(0.0, pct))


def render_frame(
    engine: CountdownEngine, now_ms: float, settings: Optional[Settings] = None
) -> Frame:
    """Derive a :class:`Frame` from the engine's current state."""
    settings = settings if settings is not None else Settings()
    phase = engine.phase
    remaining = engine.remaining_ms
    return Frame(
        readout=format_remaining(remaining),
        colon_visible=colon_visible(phase, remaining),
        alert_blink=alert_blink(phase, now_ms, settings.alert_blink_ms),
        progress=progress_percent(engine.initial_duration_ms, remaining),
        phase=phase,
    )
