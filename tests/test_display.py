"""Tests for the display formatter."""

import pytest

from segtimer.core.display import (
    DigitReadout,
    alert_blink,
    colon_visible,
    format_remaining,
    progress_percent,
    render_frame,
)
from segtimer.core.engine import CountdownEngine, Phase
from segtimer.core.settings import Settings

# ---------------------------------------------------------------------------
# format_remaining()
# ---------------------------------------------------------------------------


class TestFormatRemaining:
    """format_remaining() splits milliseconds into MM:SS.d digits."""

    def test_zero(self) -> None:
        readout = format_remaining(0)
        assert readout.minutes == "00"
        assert readout.seconds == "00"
        assert readout.deciseconds == "0"

    def test_nine_fifty_nine_point_nine(self) -> None:
        readout = format_remaining(599_900)
        assert (readout.minutes, readout.seconds, readout.deciseconds) == ("09", "59", "9")

    def test_individual_digits(self) -> None:
        assert format_remaining(5_999_000) == DigitReadout("9", "9", "5", "9", "0")

    def test_truncates_rather_than_rounds(self) -> None:
        assert str(format_remaining(1_999)) == "00:01.9"

    def test_str_renders_readout(self) -> None:
        assert str(format_remaining(754_300)) == "12:34.3"

    def test_negative_is_zero(self) -> None:
        assert str(format_remaining(-5)) == "00:00.0"


# ---------------------------------------------------------------------------
# Blinking
# ---------------------------------------------------------------------------


class TestColonVisible:
    """The colon is solid while running and breathes otherwise."""

    @pytest.mark.parametrize("remaining", [0, 250, 499, 500, 999, 1_000])
    def test_always_visible_while_running(self, remaining: int) -> None:
        assert colon_visible(Phase.RUNNING, remaining) is True

    @pytest.mark.parametrize(
        "remaining, expected",
        [(0, True), (499, True), (500, False), (999, False), (1_000, True), (1_500, False)],
    )
    def test_blinks_with_remaining_when_not_running(self, remaining: int, expected: bool) -> None:
        assert colon_visible(Phase.PAUSED, remaining) is expected
        assert colon_visible(Phase.IDLE, remaining) is expected


class TestAlertBlink:
    """The alert blink toggles every 300 ms only while alerting."""

    def test_false_unless_alerting(self) -> None:
        for phase in (Phase.IDLE, Phase.RUNNING, Phase.PAUSED):
            assert alert_blink(phase, 0) is False

    @pytest.mark.parametrize(
        "now, expected", [(0, True), (299, True), (300, False), (599, False), (600, True)]
    )
    def test_toggles_every_period(self, now: float, expected: bool) -> None:
        assert alert_blink(Phase.ALERTING, now) is expected

    def test_custom_period(self) -> None:
        assert alert_blink(Phase.ALERTING, 150, period_ms=100) is False


# ---------------------------------------------------------------------------
# progress_percent()
# ---------------------------------------------------------------------------


class TestProgressPercent:
    def test_zero_duration_is_zero(self) -> None:
        assert progress_percent(0, 0) == 0.0

    def test_start_and_end(self) -> None:
        assert progress_percent(10_000, 10_000) == 0.0
        assert progress_percent(10_000, 0) == 100.0

    def test_midway(self) -> None:
        assert progress_percent(10_000, 2_500) == pytest.approx(75.0)

    def test_clamped(self) -> None:
        assert progress_percent(10_000, 20_000) == 0.0
        assert progress_percent(10_000, -10) == 100.0


# ---------------------------------------------------------------------------
# render_frame()
# ---------------------------------------------------------------------------


class TestRenderFrame:
    """render_frame() bundles every derived value for one frame."""

    def test_running_frame(self) -> None:
        engine = CountdownEngine(clock=lambda: 0.0)
        engine.configure(1, 0)
        engine.start()
        engine.tick(15_000)
        frame = render_frame(engine, 15_000)
        assert str(frame.readout) == "00:45.0"
        assert frame.colon_visible is True
        assert frame.alert_blink is False
        assert frame.progress == pytest.approx(25.0)
        assert frame.phase == Phase.RUNNING

    def test_alerting_frame_uses_settings_period(self) -> None:
        engine = CountdownEngine(clock=lambda: 0.0)
        engine.configure(0, 1)
        engine.start()
        engine.tick(1_000)
        settings = Settings(alert_blink_ms=1_000)
        assert render_frame(engine, 1_500, settings).alert_blink is False
        assert render_frame(engine, 2_500, settings).alert_blink is True
        assert render_frame(engine, 2_500).progress == 100.0
