"""Wiring of the Pong game to the timer and keyboard handlers."""

from __future__ import annotations

import logging

from pongkernel.handlers import DecodedKey, HandlerTable
from pongkernel.pong import PongGame
from pongkernel.screen import ScreenWriter

logger = logging.getLogger(__name__)

WELCOME_LINES = (
    "Welcome to Pong OS!",
    "Use Up/Down arrows to move your paddle",
    "First to 5 points wins!",
)


class Kernel:
    """Holds the game and the screen it is drawn on."""

    def __init__(self, writer: ScreenWriter, width: int, height: int) -> None:
        self.writer = writer
        self.game = PongGame(width, height)

    def start(self) -> None:
        """Greet the player and draw the first frame."""
        for line in WELCOME_LINES:
            logger.info(line)
        self.game.render(self.writer)

    def tick(self) -> None:
        """Advance the game one step and redraw it."""
        self.game.update()
        self.game.render(self.writer)

    def key(self, key: DecodedKey) -> None:
        """Pass a key press to the game."""
        self.game.handle_key(key)

    def handler_table(self) -> HandlerTable:
        """A handler table wired to this kernel."""
        return HandlerTable().keyboard(self.key).timer(self.tick).startup(self.start)