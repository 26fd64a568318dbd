"""A game of Pong against a computer-controlled paddle."""

from __future__ import annotations

from typing import List, Tuple

from pongkernel.handlers import DecodedKey, KeyCode
from pongkernel.screen import ScreenWriter

Color = Tuple[int, int, int]

HISTORY_LENGTH = 30
WINNING_SCORE = 5
SCORE_GAP = " " * 27


def _div_trunc(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class PongGame:
    """State and rules of a Pong match between the player and the computer."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("screen dimensions must not be negative")
        self.width = width
        self.height = height

        paddle_height = height // 6
        paddle_width = width // 50
        ball_size = width // 50
        centred_paddle_y = height // 2 - paddle_height // 2

        self.player_paddle_x = width // 20
        self.player_paddle_y = centred_paddle_y
        self.player_paddle_width = paddle_width
        self.player_paddle_height = paddle_height
        self.player_paddle_speed = height // 50

        self.computer_paddle_x = width - width // 20 - paddle_width
        self.computer_paddle_y = centred_paddle_y
        self.computer_paddle_width = paddle_width
        self.computer_paddle_height = paddle_height
        self.computer_paddle_speed = height // 50

        self.ball_size = ball_size
        self.ball_x = width // 2 - ball_size // 2
        self.ball_y = height // 2 - ball_size // 2
        self.ball_velocity_x = 35
        self.ball_velocity_y = 30

        self.player_score = 0
        self.computer_score = 0
        self.game_over = False

        self.player_position_history: List[int] = [centred_paddle_y] * HISTORY_LENGTH
        self.history_index = 0

        self.background_color: Color = (0, 0, 0)
        self.paddle_color: Color = (255, 255, 255)
        self.ball_color: Color = (255, 255, 0)
        self.text_color: Color = (0, 255, 0)

    def reset(self) -> None:
        """Put the ball and paddles back in the middle for the next rally."""
        self.ball_x = self.width // 2 - self.ball_size // 2
        self.ball_y = self.height // 2 - self.ball_size // 2

        self.player_paddle_y = self.height // 2 - self.player_paddle_height // 2
        self.computer_paddle_y = self.height // 2 - self.computer_paddle_height // 2

        direction = -1 if self.player_score > self.computer_score else 1
        self.ball_velocity_x = direction * 6
        self.ball_velocity_y = 3 if self.ball_y % 2 == 0 else -3

        self.game_over = False

    def new_game(self) -> None:
        """Clear the scores and start a fresh match."""
        self.player_score = 0
        self.computer_score = 0
        centred = self.height // 2 - self.player_paddle_height // 2
        self.player_position_history = [centred] * len(self.player_position_history)
        self.history_index = 0
        self.reset()

    def handle_key(self, key: DecodedKey) -> None:
        """Move the player's paddle, or restart after the game is over."""
        if key.code is KeyCode.ARROW_UP:
            if self.player_paddle_y > self.player_paddle_speed:
                self.player_paddle_y -= self.player_paddle_speed
            else:
                self.player_paddle_y = 0
        elif key.code is KeyCode.ARROW_DOWN:
            if (
                self.player_paddle_y + self.player_paddle_height + self.player_paddle_speed
                < self.height
            ):
                self.player_paddle_y += self.player_paddle_speed
            else:
                self.player_paddle_y = self.height - self.player_paddle_height
        elif key.char == " " and self.game_over:
            self.new_game()

    def _bounce_off_paddle(self, paddle_y: int, paddle_height: int, ball_y: int) -> None:
        self.ball_velocity_x = -self.ball_velocity_x
        relative_intersect_y = (paddle_y + paddle_height // 2) - (ball_y + self.ball_size // 2)
        self.ball_velocity_y = _div_trunc(-relative_intersect_y, 5)
        if self.ball_velocity_y == 0:
            self.ball_velocity_y = 3 if ball_y % 2 == 0 else -3

    def update(self) -> None:
        """Advance the game by one tick."""
        if self.game_over:
            return

        self.player_position_history[self.history_index] = self.player_paddle_y
        self.history_index = (self.history_index + 1) % len(self.player_position_history)

        new_ball_x = self.ball_x + self.ball_velocity_x
        new_ball_y = self.ball_y + self.ball_velocity_y

        top_boundary = 0
        bottom_boundary = self.height - self.ball_size

        corrected_ball_y = new_ball_y
        if new_ball_y <= top_boundary:
            self.ball_velocity_y = abs(self.ball_velocity_y)
            corrected_ball_y = top_boundary
        elif new_ball_y >= bottom_boundary:
            self.ball_velocity_y = -abs(self.ball_velocity_y)
            corrected_ball_y = bottom_boundary

        if (
            self.player_paddle_x <= new_ball_x <= self.player_paddle_x + self.player_paddle_width
            and corrected_ball_y + self.ball_size >= self.player_paddle_y
            and corrected_ball_y <= self.player_paddle_y + self.player_paddle_height
        ):
            self._bounce_off_paddle(
                self.player_paddle_y, self.player_paddle_height, corrected_ball_y
            )

        if (
            new_ball_x + self.ball_size >= self.computer_paddle_x
            and new_ball_x <= self.computer_paddle_x + self.computer_paddle_width
            and corrected_ball_y + self.ball_size >= self.computer_paddle_y
            and corrected_ball_y <= self.computer_paddle_y + self.computer_paddle_height
        ):
            self._bounce_off_paddle(
                self.computer_paddle_y, self.computer_paddle_height, corrected_ball_y
            )

        if new_ball_x <= 0:
            self.computer_score += 1
            self.reset()
        elif new_ball_x + self.ball_size >= self.width:
            self.player_score += 1
            self.reset()
        else:
            self.ball_x = _clamp(new_ball_x, 0, self.width - self.ball_size)
            self.ball_y = _clamp(corrected_ball_y, 0, self.height - self.ball_size)

        if self.player_score >= WINNING_SCORE or self.computer_score >= WINNING_SCORE:
            self.game_over = True

        self._move_computer_paddle()

    def _move_computer_paddle(self) -> None:
        half = self.computer_paddle_height // 2
        if self.ball_velocity_x > 0 and self.ball_x > self.width // 2:
            target_y = max(0, self.ball_y - half)
        else:
            target_y = self.height // 2 - half

        paddle_center = self.computer_paddle_y + half
        target_center = target_y + half

        if paddle_center < target_center:
            if (
                self.computer_paddle_y + self.computer_paddle_height + self.computer_paddle_speed
                < self.height
            ):
                self.computer_paddle_y += self.computer_paddle_speed
            else:
                self.computer_paddle_y = self.height - self.computer_paddle_height
        elif paddle_center > target_center:
            if self.computer_paddle_y > self.computer_paddle_speed:
                self.computer_paddle_y -= self.computer_paddle_speed
            else:
                self.computer_paddle_y = 0

    def _fill_rect(
        self, writer: ScreenWriter, x0: int, y0: int, w: int, h: int, color: Color
    ) -> None:
        for y in range(y0, y0 + h):
            for x in range(x0, x0 + w):
                writer.draw_pixel(x, y, *color)

    def render(self, writer: ScreenWriter) -> None:
        """Draw the court, paddles, ball, scores and any game-over message."""
        writer.clear()

        for y in range(0, self.height, 10):
            for i in range(5):
                writer.draw_pixel(self.width // 2, y + i, 50, 50, 50)

        self._fill_rect(
            writer,
            self.player_paddle_x,
            self.player_paddle_y,
            self.player_paddle_width,
            self.player_paddle_height,
            self.paddle_color,
        )
        self._fill_rect(
            writer,
            self.computer_paddle_x,
            self.computer_paddle_y,
            self.computer_paddle_width,
            self.computer_paddle_height,
            self.paddle_color,
        )
        self._fill_rect(
            writer, self.ball_x, self.ball_y, self.ball_size, self.ball_size, self.ball_color
        )

        writer.write_pixel(self.width // 4, 20, 255)
        writer.write(f"{self.player_score}{SCORE_GAP}{self.computer_score}\n")

        if self.game_over:
            message = (
                "You Win!" if self.player_score > self.computer_score else "Computer Wins!"
            )
            writer.write_pixel(self.width // 2 - 40, self.height // 2 - 20, 255)
            writer.write(f"{message}\n")
            writer.write_pixel(self.width // 2 - 100, self.height // 2, 255)
            writer.write("Press SPACE to play again\n")