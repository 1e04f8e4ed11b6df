"""Command dispatcher: translates decoded key presses into engine calls."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from segtimer.core.engine import CountdownEngine

logger = logging.getLogger(__name__)


class Command(Enum):
    """Commands the control surface can issue."""

    TOGGLE_RUN = "toggle-run"
    RESET = "reset"
    TOGGLE_FULLSCREEN = "toggle-fullscreen"
    TOGGLE_CONTROLS = "toggle-controls-visibility"
    APPLY_CONFIGURATION = "apply-configuration"
    QUIT = "quit"


_KEYMAP = {
    " ": Command.TOGGLE_RUN,
    "space": Command.TOGGLE_RUN,
    "r": Command.RESET,
    "f": Command.TOGGLE_FULLSCREEN,
    "h": Command.TOGGLE_CONTROLS,
    "q": Command.QUIT,
}


def decode_key(key: str) -> Optional[Command]:
    """Map a key press to a :class:`Command`, or ``None`` if it is unbound."""
    if not key:
        return None
    if key != " ":
        key = key.strip()
    return _KEYMAP.get(key.lower())


class Fullscreen(Protocol):
    """An external fullscreen capability."""

    @property
    def is_active(self) -> bool: ...

    def enter(self) -> None: ...

    def exit(self) -> None: ...


class CommandDispatcher:
    """Applies commands to a :class:`CountdownEngine` and the UI flags.

    Holds the raw values of the minutes/seconds input fields and the
    controls-visibility flag; everything timing-related is delegated to the
    engine.
    """

    def __init__(
        self,
        engine: CountdownEngine,
        fullscreen: Optional[Fullscreen] = None,
        on_quit: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._engine = engine
        self._fullscreen = fullscreen
        self._on_quit = on_quit
        self.controls_visible: bool = True
        self.minutes_input: Any = 0
        self.seconds_input: Any = 0

    def set_inputs(self, minutes: Any, seconds: Any) -> None:
        """Store raw input-field values for the next APPLY_CONFIGURATION."""
        self.minutes_input = minutes
        self.seconds_input = seconds

    def dispatch(self, command: Command) -> None:
        logger.debug("dispatch %s", command.value)
        if command == Command.TOGGLE_RUN:
            self._engine.toggle()
        elif command == Command.RESET:
            self._engine.reset()
        elif command == Command.TOGGLE_FULLSCREEN:
            self._toggle_fullscreen()
        elif command == Command.TOGGLE_CONTROLS:
            self.controls_visible = not self.controls_visible
        elif command == Command.APPLY_CONFIGURATION:
            self._engine.configure(self.minutes_input, self.seconds_input)
        elif command == Command.QUIT:
            if self._on_quit is not None:
                self._on_quit()

    def handle_key(self, key: str) -> Optional[Command]:
        """Decode and dispatch *key*; unbound keys are ignored."""
        command = decode_key(key)
        if command is not None:
            self.dispatch(command)
        return command

    def _toggle_fullscreen(self) -> None:
        if self._fullscreen is None:
            return
        if self._fullscreen.is_active:
            self._fullscreen.exit()
        else:
            self._fullscreen.enter()
