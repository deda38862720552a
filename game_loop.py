# Tick scheduling for SnakeGame, decoupled from any particular UI toolkit.
from __future__ import annotations

import logging
from typing import Any, Callable

from game_logic import GameStatus, SnakeGame
from utils import render_text

logger = logging.getLogger(__name__)

Schedule = Callable[[int, Callable[[], None]], Any]
Cancel = Callable[[Any], None]


class GameLoop:
    """Drives SnakeGame.advance_tick at the game's current speed.

    ``schedule(delay_ms, callback)`` must run ``callback`` once after the delay
    and return a handle that ``cancel(handle)`` accepts; Tk's ``root.after`` and
    ``root.after_cancel`` fit directly. All callbacks are expected on one thread.
    """

    def __init__(
        self,
        game: SnakeGame,
        schedule: Schedule,
        cancel: Cancel,
        on_frame: Callable[[SnakeGame], None] | None = None,
        on_score: Callable[[int], None] | None = None,
        on_game_over: Callable[[SnakeGame], None] | None = None,
    ) -> None:
        self.game = game
        self._schedule = schedule
        self._cancel = cancel
        self.on_frame = on_frame
        self.on_score = on_score
        self.on_game_over = on_game_over
        self.after_id: Any = None  # handle of the pending tick callback

    @property
    def running(self) -> bool:
        return self.after_id is not None

    def start(self) -> None:
        """Reset the game and begin ticking at its initial speed."""
        self.stop()
        self.game.reset()
        logger.debug("Loop started at %d ms", self.game.speed_ms)
        self._render()
        if self.on_score is not None:
            self.on_score(self.game.score)
        self._schedule_next()

    def stop(self) -> None:
        """Cancel scheduled tick callback if one exists."""
        if self.after_id is not None:
            self._cancel(self.after_id)
            self.after_id = None
            logger.debug("Loop stopped")

    def tick(self) -> None:
        """Single frame of the game loop; reschedules itself while the game runs."""
        self.after_id = None
        previous_score = self.game.score

        result = self.game.advance_tick()
        self._render()

        if self.game.score != previous_score and self.on_score is not None:
            self.on_score(self.game.score)

        if result.status is GameStatus.OVER:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Final board:\n%s", render_text(self.game))
            if self.on_game_over is not None:
                self.on_game_over(self.game)
            return

        if result.speed_changed:
            logger.debug("Speed changed to %d ms", self.game.speed_ms)
        # Interval is re-read every tick so speed changes apply immediately.
        self._schedule_next()

    def _schedule_next(self) -> None:
        self.after_id = self._schedule(self.game.speed_ms, self.tick)

    def _render(self) -> None:
        if self.on_frame is not None:
            self.on_frame(self.game)
