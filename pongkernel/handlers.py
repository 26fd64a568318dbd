"""Keyboard key types and the pluggable table of interrupt handlers."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, NoReturn, Optional


class KeyCode(Enum):
    """Keys that do not decode to a printable character."""

    ESCAPE = auto()
    BACKSPACE = auto()
    TAB = auto()
    ENTER = auto()
    ARROW_UP = auto()
    ARROW_DOWN = auto()
    ARROW_LEFT = auto()
    ARROW_RIGHT = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    INSERT = auto()
    DELETE = auto()
    F1 = auto()
    F2 = auto()
    F3 = auto()
    F4 = auto()
    F5 = auto()
    F6 = auto()
    F7 = auto()
    F8 = auto()
    F9 = auto()
    F10 = auto()
    F11 = auto()
    F12 = auto()


@dataclass(frozen=True)
class DecodedKey:
    """A decoded key press: either a raw key code or a single character."""

    code: Optional[KeyCode] = None
    char: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.code is None) == (self.char is None):
            raise ValueError("a decoded key holds exactly one of a key code or a character")
        if self.char is not None and len(self.char) != 1:
            raise ValueError(f"expected a single character, got {self.char!r}")

    @classmethod
    def raw(cls, code: KeyCode) -> "DecodedKey":
        """A key that has no character of its own."""
        return cls(code=code)

    @classmethod
    def unicode(cls, char: str) -> "DecodedKey":
        """A key that decodes to a character."""
        return cls(char=char)


def hlt_loop() -> NoReturn:
    """Idle forever, waking only to idle again."""
    idle = threading.Event()
    while True:
        idle.wait()


class HandlerTable:
    """Table of timer, keyboard and startup handlers, set up builder-style."""

    def __init__(self) -> None:
        self._timer: Optional[Callable[[], Any]] = None
        self._keyboard: Optional[Callable[[DecodedKey], Any]] = None
        self._startup: Optional[Callable[[], Any]] = None
        self._cpu_loop: Callable[[], Any] = hlt_loop

    def timer(self, timer_handler: Callable[[], Any]) -> "HandlerTable":
        """Set the timer handler and return the table."""
        self._timer = timer_handler
        return self

    def keyboard(self, keyboard_handler: Callable[[DecodedKey], Any]) -> "HandlerTable":
        """Set the keyboard handler and return the table."""
        self._keyboard = keyboard_handler
        return self

    def startup(self, startup_handler: Callable[[], Any]) -> "HandlerTable":
        """Set the startup handler and return the table."""
        self._startup = startup_handler
        return self

    def cpu_loop(self, cpu_loop: Callable[[], Any]) -> "HandlerTable":
        """Set the foreground loop, which is expected never to return."""
        self._cpu_loop = cpu_loop
        return self

    def handle_timer(self) -> None:
        """Dispatch a timer event to the timer handler, if any."""
        if self._timer is not None:
            self._timer()

    def handle_keyboard(self, key: DecodedKey) -> None:
        """Dispatch a key to the keyboard handler, if any."""
        if self._keyboard is not None:
            self._keyboard(key)

    def start(self, install: Callable[["HandlerTable"], Any]) -> Any:
        """Run startup, hand the table to ``install``, then enter the CPU loop."""
        if self._startup is not None:
            self._startup()
        foreground = self._cpu_loop
        install(self)
        return foreground()