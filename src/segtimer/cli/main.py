"""CLI entry point for segtimer.

Uses Click to expose the ``segtimer`` command group: ``run`` opens the
interactive full-screen countdown, ``show`` prints a digit readout.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, TypeVar

import click

import segtimer
from segtimer.cli.terminal import TimerApp, TerminalUnavailableError, require_terminal
from segtimer.core.display import MAX_DISPLAY_MS, format_remaining
from segtimer.core.settings import DEFAULT_FPS, Settings

T = TypeVar("T")


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``TerminalUnavailableError`` to a CLI error.

    On ``TerminalUnavailableError`` the message is printed to stderr and the
    process exits with code 1.
    """
    try:
        return action()
    except TerminalUnavailableError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _configure_logging(verbose: bool, log_file: Optional[str]) -> None:
    # The screen owns stdout/stderr, so logs only ever go to a file.
    if log_file is None:
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@click.group()
@click.version_option(version=segtimer.__version__, prog_name="segtimer")
def cli() -> None:
    """segtimer: a full-screen seven-segment countdown timer."""


@cli.command()
@click.option("-m", "--minutes", default="0", envvar="SEGTIMER_MINUTES", show_default=True,
              help="Minutes (0-99); out-of-range or non-numeric values are clamped.")
@click.option("-s", "--seconds", default="0", envvar="SEGTIMER_SECONDS", show_default=True,
              help="Seconds (0-59); out-of-range or non-numeric values are clamped.")
@click.option("--fps", type=click.IntRange(1, 240), default=DEFAULT_FPS, envvar="SEGTIMER_FPS",
              show_default=True, help="Countdown ticks per second.")
@click.option("--bell/--no-bell", default=True, envvar="SEGTIMER_BELL", show_default=True,
              help="Ring the terminal bell when the countdown ends.")
@click.option("--pulses", type=click.IntRange(0, 50), default=5, envvar="SEGTIMER_PULSES",
              show_default=True, help="Number of bell pulses in the alert.")
@click.option("--pulse-interval", type=click.FloatRange(0.0, 5.0), default=0.25,
              envvar="SEGTIMER_PULSE_INTERVAL", show_default=True,
              help="Seconds between bell pulses.")
@click.option("-v", "--verbose", is_flag=True, help="Log at debug level.")
@click.option("--log-file", type=click.Path(dir_okay=False), envvar="SEGTIMER_LOG_FILE",
              help="Write logs to this file.")
def run(
    minutes: str,
    seconds: str,
    fps: int,
    bell: bool,
    pulses: int,
    pulse_interval: float,
    verbose: bool,
    log_file: Optional[str],
) -> None:
    """Open the countdown for MINUTES:SECONDS.

    Space starts or pauses, R resets, F toggles fullscreen, H hides the
    controls and Q quits. The minutes and seconds fields can be edited
    in the app and applied with Enter or the Set button.
    """
    _configure_logging(verbose, log_file)
    _run(require_terminal)
    settings = Settings(bell=bell, alert_pulses=pulses, alert_interval=pulse_interval).with_fps(fps)
    TimerApp(minutes, seconds, settings=settings).run()


@cli.command()
@click.argument("milliseconds", type=click.IntRange(0, MAX_DISPLAY_MS))
def show(milliseconds: int) -> None:
    """Print the MM:SS.d readout for MILLISECONDS remaining."""
    click.echo(str(format_remaining(milliseconds)))
