"""Runtime settings for the timer front end."""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_FPS = 60


@dataclass(frozen=True)
class Settings:
    """Tunable intervals and alert parameters.

    Intervals are in seconds except ``alert_blink_ms``, which is compared
    against the millisecond clock.
    """

    frame_interval: float = 1.0 / DEFAULT_FPS
    refresh_interval: float = 1.0 / 30
    alert_pulses: int = 5
    alert_interval: float = 0.25
    alert_blink_ms: int = 300
    bell: bool = True

    def with_fps(self, fps: int) -> Settings:
        """Return a copy ticking *fps* times per second."""
        return replace(self, frame_interval=1.0 / max(1, fps))
