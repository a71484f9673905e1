"""
Session controller and game loop for snake_canvas.

A ``SnakeSession`` owns every piece of mutable game state: the snake, the
apple, the score, the best score and the session status. The platform layer
feeds it frame timestamps through ``on_frame`` and key names through
``handle_key``; all mutation happens inside its methods.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from snake_canvas.clock import FrameSource, FrameSubscription
from snake_canvas.controls import TOGGLE, DirectionMailbox, InputMapper
from snake_canvas.domain.apples import spawn_apple
from snake_canvas.domain.constants import (
    APPLE_REWARD,
    BOARD_SIZE,
    GAME_OVER,
    IDLE,
    PAUSED,
    RUNNING,
    START_DIRECTION,
    START_SNAKE,
    STEP_MS,
    WON,
)
from snake_canvas.domain.game_state import GameState
from snake_canvas.domain.grid import Grid
from snake_canvas.domain.snake import MoveResult, Snake
from snake_canvas.services.score_store import (
    MemoryScoreStore,
    ScoreStore,
    load_best_score,
    save_best_score,
)

logger = logging.getLogger(__name__)

RenderCallback = Callable[[GameState], None]
NoticeCallback = Callable[[str], None]


@dataclass(frozen=True)
class StatusOutputs:
    """What the labels and the overlay should currently show."""

    score: int
    best_score: int
    status: str
    overlay_visible: bool
    overlay_message: str


class SnakeSession:
    """
    Manages:
      - Board (square grid)
      - Snake and its pending direction
      - Apple
      - Score and persisted best score
      - Session status (idle / running / paused / game_over / won)
      - Fixed-step ticking from frame timestamps
    """

    def __init__(
        self,
        board_size: int = BOARD_SIZE,
        step_ms: int = STEP_MS,
        store: Optional[ScoreStore] = None,
        render: Optional[RenderCallback] = None,
        on_notice: Optional[NoticeCallback] = None,
        rng: Optional[random.Random] = None,
        start_snake=None,
        start_direction: str = START_DIRECTION
    ):
        self.grid = Grid(board_size)
        self.step_ms = step_ms
        self.store = store if store is not None else MemoryScoreStore()
        self.render_callback = render
        self.on_notice = on_notice
        self.rng = rng or random.Random()
        self.start_snake = list(start_snake or START_SNAKE)
        self.start_direction = start_direction

        self.mailbox = DirectionMailbox()
        self.input_mapper = InputMapper(self.mailbox)

        self.status = IDLE
        self.score = 0
        self.best_score = load_best_score(self.store)
        self.last_tick_time = 0.0
        self.tick_count = 0
        self.overlay_visible = False
        self.overlay_message = ""

        self.snake: Snake
        self.apple = None
        self._subscription: Optional[FrameSubscription] = None

        self.reset()
        logger.info("Session ready: board %dx%d, best score %d",
                    board_size, board_size, self.best_score)

    # ------------------------------------------------------------------ state
    def reset(self) -> None:
        """Fresh snake at the start position, fresh apple, score 0, overlay hidden."""
        self.snake = Snake(self.start_snake, self.start_direction, self.grid)
        self.mailbox.clear()
        self.score = 0
        self.tick_count = 0
        self.apple = spawn_apple(self.grid, self.snake.positions, self.rng)
        self._hide_overlay()

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            tick=self.tick_count,
            snake_positions=[tuple(cell) for cell in self.snake.positions],
            direction=self.snake.direction,
            apple=tuple(self.apple) if self.apple is not None else None,
            score=self.score,
            best_score=self.best_score,
            status=self.status,
            board_size=self.grid.size,
        )

    def status_outputs(self) -> StatusOutputs:
        return StatusOutputs(
            score=self.score,
            best_score=self.best_score,
            status=self.status,
            overlay_visible=self.overlay_visible,
            overlay_message=self.overlay_message,
        )

    @property
    def is_running(self) -> bool:
        return self.status == RUNNING

    # ------------------------------------------------------------ transitions
    def start(self) -> None:
        if self.status == RUNNING:
            return
        if self.status in (GAME_OVER, WON):
            self.reset()
        self._hide_overlay()
        self._run()

    def pause(self) -> None:
        if self.status != RUNNING:
            return
        self.status = PAUSED
        logger.info("Paused at score %d", self.score)

    def restart(self) -> None:
        self.reset()
        self._run()

    def toggle(self) -> None:
        if self.status == RUNNING:
            self.pause()
        else:
            self.start()

    def _run(self) -> None:
        self.status = RUNNING
        # Zero so the first frame after (re)starting ticks right away
        self.last_tick_time = 0.0
        logger.info("Running (score %d)", self.score)
        self.render()

    def _game_over(self, result: MoveResult) -> None:
        self.status = GAME_OVER
        self._show_overlay(f"Game over! Score: {self.score}")
        logger.info("Game over: %s collision at %s, score %d",
                    result.death_reason, tuple(result.head), self.score)
        logger.debug("Final board:\n%s", self.get_current_state().print_board())

    def _win(self) -> None:
        self.status = WON
        self._show_overlay(f"You win! Score: {self.score}")
        logger.info("Board filled, score %d", self.score)

    def _show_overlay(self, message: str) -> None:
        self.overlay_message = message
        self.overlay_visible = True
        if self.on_notice is not None:
            self.on_notice(message)

    def _hide_overlay(self) -> None:
        self.overlay_visible = False
        self.overlay_message = ""

    # ------------------------------------------------------------------ input
    def handle_key(self, key: Optional[str]) -> None:
        """Route a key name: directions go to the mailbox, Space toggles."""
        if self.input_mapper.handle_key(key) == TOGGLE:
            self.toggle()

    # ------------------------------------------------------------------- loop
    def on_frame(self, timestamp: float) -> None:
        """
        Handle one frame signal.

        Outside RUNNING the current state is redrawn and nothing changes.
        While RUNNING, frames closer than ``step_ms`` to the last tick are
        dropped without a redraw; otherwise exactly one tick runs, however
        long ago the previous one was.
        """
        if self.status != RUNNING:
            self.render()
            return

        if timestamp - self.last_tick_time < self.step_ms:
            return
        self.last_tick_time = timestamp

        self.step()

    def step(self) -> Optional[MoveResult]:
        """Run a single tick: latch direction, move, score, respawn the apple.

        Does nothing and returns None unless the session is running.
        """
        if self.status != RUNNING:
            return None

        direction = self.snake.latch_direction(self.mailbox.take())
        result = self.snake.advance(direction, self.apple)

        if result.collided:
            self._game_over(result)
            return result

        self.tick_count += 1
        logger.debug("Tick %d: head %s heading %s", self.tick_count, tuple(result.head), direction)

        if result.ate_apple:
            self.score += APPLE_REWARD
            self._record_score()
            self.apple = spawn_apple(self.grid, self.snake.positions, self.rng)
            if self.apple is None:
                self._win()

        self.render()
        return result

    def _record_score(self) -> None:
        if self.score <= self.best_score:
            return
        self.best_score = self.score
        save_best_score(self.store, self.best_score)

    def render(self) -> None:
        if self.render_callback is not None:
            self.render_callback(self.get_current_state())

    # ---------------------------------------------------------- subscription
    def attach(self, frames: FrameSource) -> FrameSubscription:
        """Subscribe ``on_frame`` to a frame source, replacing any previous subscription."""
        self.detach()
        self._subscription = frames.subscribe(self.on_frame)
        return self._subscription

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
