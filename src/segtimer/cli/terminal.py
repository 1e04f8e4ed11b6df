"""Textual front end: the full-screen seven-segment countdown app."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Optional

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, Digits, Header, Input, Label, ProgressBar, Static

from segtimer.core.alert import AlertTrigger, SilentBeeper, TerminalBell
from segtimer.core.commands import Command, CommandDispatcher
from segtimer.core.display import Frame, render_frame
from segtimer.core.driver import FrameDriver
from segtimer.core.engine import CountdownEngine, Phase
from segtimer.core.settings import Settings

logger = logging.getLogger(__name__)

_BUTTON_COMMANDS = {
    "set": Command.APPLY_CONFIGURATION,
    "toggle": Command.TOGGLE_RUN,
    "reset": Command.RESET,
}


class TerminalUnavailableError(Exception):
    """Raised when the interactive timer is started without a terminal."""


def readout_text(frame: Frame) -> str:
    """The ``MM:SS.d`` text for the Digits widget, with blinking separators."""
    readout = frame.readout
    colon = ":" if frame.colon_visible and not frame.alert_blink else " "
    dot = " " if frame.alert_blink else "."
    return f"{readout.minutes}{colon}{readout.seconds}{dot}{readout.deciseconds}"


def hint_text(phase: Phase, can_start: bool) -> str:
    """Key help for the current state; Space is only offered when it does something."""
    if phase == Phase.RUNNING:
        keys = ["Space pause"]
    elif can_start:
        keys = ["Space start"]
    else:
        keys = ["Set a time to start"]
    keys += ["R reset", "F fullscreen", "H hide/show", "Enter/Set apply", "Esc leave input", "Q quit"]
    return " · ".join(keys)


class ScreenFullscreen:
    """Fullscreen as a screen class that hides everything but the digits."""

    CLASS = "-fullscreen"

    def __init__(self, app: App) -> None:
        self._app = app

    @property
    def is_active(self) -> bool:
        return self._app.screen.has_class(self.CLASS)

    def enter(self) -> None:
        self._app.screen.add_class(self.CLASS)

    def exit(self) -> None:
        self._app.screen.remove_class(self.CLASS)


class TimerApp(App):
    """Seven-segment countdown with keyboard control and a bell alert."""

    TITLE = "segtimer"
    AUTO_FOCUS = None

    CSS = """
    #face {
        height: 1fr;
        align: center middle;
    }

    #clock {
        width: auto;
        color: $text-muted;
    }

    #clock.-running {
        color: $text;
    }

    #clock.-alerting {
        color: red;
    }

    #clock.-dim {
        text-opacity: 60%;
    }

    #progress {
        width: 100%;
    }

    #controls {
        height: auto;
        align: center middle;
    }

    #controls Input {
        width: 10;
    }

    #controls Label {
        padding: 1 1 0 0;
    }

    #hint {
        width: 100%;
        content-align: center middle;
        color: $text-muted;
    }

    Screen.-controls-hidden #controls, Screen.-controls-hidden #hint {
        display: none;
    }

    Screen.-fullscreen Header, Screen.-fullscreen #progress,
    Screen.-fullscreen #controls, Screen.-fullscreen #hint {
        display: none;
    }
    """

    def __init__(self, minutes: Any = 0, seconds: Any = 0, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self.settings = settings if settings is not None else Settings()
        beeper = TerminalBell(self) if self.settings.bell else SilentBeeper()
        self.alert = AlertTrigger(beeper, self.settings.alert_pulses, self.settings.alert_interval)
        self.engine = CountdownEngine(on_complete=self.alert.fire)
        self.fullscreen = ScreenFullscreen(self)
        self.dispatcher = CommandDispatcher(self.engine, self.fullscreen, on_quit=self.exit)
        self.dispatcher.set_inputs(minutes, seconds)
        self.driver: Optional[FrameDriver] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield ProgressBar(total=100, show_eta=False, id="progress")
        with Container(id="face"):
            yield Digits("00:00.0", id="clock")
        with Horizontal(id="controls"):
            yield Input(str(self.dispatcher.minutes_input), placeholder="min", id="minutes")
            yield Label("min")
            yield Input(str(self.dispatcher.seconds_input), placeholder="sec", id="seconds")
            yield Label("sec")
            yield Button("Set", id="set", variant="success")
            yield Button("Start", id="toggle", variant="primary")
            yield Button("Reset", id="reset")
        yield Static(id="hint")

    def on_mount(self) -> None:
        self.driver = FrameDriver(
            self.engine.tick,
            lambda: self.engine.is_running,
            loop=asyncio.get_running_loop(),
            interval=self.settings.frame_interval,
            clock=self.engine.clock,
        )
        self.engine.subscribe(self.driver.sync)
        self.dispatcher.dispatch(Command.APPLY_CONFIGURATION)
        logger.info("countdown set to %d ms", self.engine.initial_duration_ms)
        self.set_interval(self.settings.refresh_interval, self.refresh_display)
        self.refresh_display()

    def on_unmount(self) -> None:
        if self.driver is not None:
            self.driver.stop()
            self.engine.unsubscribe(self.driver.sync)

    # -- input ---------------------------------------------------------------

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.set_focus(None)
            return
        if self.dispatcher.handle_key(event.character or event.key) is not None:
            event.stop()
            self.refresh_display()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.dispatcher.set_inputs(
            self.query_one("#minutes", Input).value,
            self.query_one("#seconds", Input).value,
        )

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.run_command(Command.APPLY_CONFIGURATION)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        command = _BUTTON_COMMANDS.get(event.button.id or "")
        if command is not None:
            self.run_command(command)

    def run_command(self, command: Command) -> None:
        self.dispatcher.dispatch(command)
        self.refresh_display()

    # -- output --------------------------------------------------------------

    def refresh_display(self) -> None:
        """Redraw every widget from the engine's current state."""
        engine = self.engine
        frame = render_frame(engine, engine.clock(), self.settings)

        clock = self.query_one("#clock", Digits)
        clock.update(readout_text(frame))
        clock.set_class(engine.is_running, "-running")
        clock.set_class(engine.is_alerting, "-alerting")
        clock.set_class(frame.alert_blink, "-dim")

        self.query_one("#progress", ProgressBar).update(progress=frame.progress)

        toggle = self.query_one("#toggle", Button)
        toggle.label = "Pause" if engine.is_running else "Start"
        toggle.disabled = not engine.is_running and not engine.can_start

        self.query_one("#hint", Static).update(hint_text(frame.phase, engine.can_start))
        self.screen.set_class(not self.dispatcher.controls_visible, "-controls-hidden")


def require_terminal() -> None:
    """Raise :class:`TerminalUnavailableError` unless stdin and stdout are TTYs."""
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise TerminalUnavailableError("segtimer run needs an interactive terminal")
