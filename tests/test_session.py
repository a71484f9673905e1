"""
Tests for session.py - the session controller and fixed-step game loop.
"""

import random
import sqlite3
from unittest.mock import Mock

import pytest

from snake_canvas.clock import FrameSource
from snake_canvas.domain.constants import (
    BEST_SCORE_KEY,
    DOWN,
    GAME_OVER,
    IDLE,
    PAUSED,
    RIGHT,
    RUNNING,
    STEP_MS,
    UP,
    WON,
)
from snake_canvas.domain.game_state import GameState
from snake_canvas.services.score_store import MemoryScoreStore
from snake_canvas.session import SnakeSession, StatusOutputs


def make_session(**kwargs) -> SnakeSession:
    kwargs.setdefault("rng", random.Random(3))
    return SnakeSession(**kwargs)


def running_session(**kwargs) -> SnakeSession:
    session = make_session(**kwargs)
    session.start()
    # Park the apple out of the way so plain moves don't eat it
    session.apple = (0, 0)
    return session


class TestSessionSetup:
    """Tests for a freshly created session."""

    def test_initial_state(self):
        """A new session is idle with the start snake heading right."""
        session = make_session()

        assert session.status == IDLE
        assert session.score == 0
        assert list(session.snake.positions) == [(6, 10), (5, 10), (4, 10)]
        assert session.snake.direction == RIGHT
        assert session.apple is not None
        assert session.apple not in session.snake.positions

    def test_best_score_loaded_from_store(self):
        store = MemoryScoreStore({BEST_SCORE_KEY: "150"})
        session = make_session(store=store)
        assert session.best_score == 150

    def test_corrupted_best_score_reads_as_zero(self):
        store = MemoryScoreStore({BEST_SCORE_KEY: "lots"})
        assert make_session(store=store).best_score == 0

    def test_unreadable_store_reads_as_zero(self):
        """A store that fails on get() must not stop the session from starting."""
        store = Mock()
        store.get.side_effect = sqlite3.OperationalError("disk I/O error")
        assert make_session(store=store).best_score == 0

    def test_board_too_small_for_start_snake_raises(self):
        with pytest.raises(ValueError):
            make_session(board_size=10)

    def test_get_current_state(self):
        """get_current_state() returns a GameState snapshot."""
        session = make_session()
        state = session.get_current_state()

        assert isinstance(state, GameState)
        assert state.board_size == 20
        assert state.snake_positions == [(6, 10), (5, 10), (4, 10)]
        assert state.status == IDLE
        assert state.tick == 0

    def test_snapshot_is_detached_from_session(self):
        """Mutating the session after a snapshot doesn't change the snapshot."""
        session = running_session()
        state = session.get_current_state()
        session.on_frame(1000)
        assert state.snake_positions == [(6, 10), (5, 10), (4, 10)]


class TestTransitions:
    """Tests for start / pause / restart / toggle."""

    def test_start_from_idle(self):
        render = Mock()
        session = make_session(render=render)

        session.start()

        assert session.status == RUNNING
        render.assert_called_once()

    def test_start_when_running_is_a_no_op(self):
        render = Mock()
        session = make_session(render=render)
        session.start()
        session.on_frame(1000)
        head = session.snake.head

        session.start()

        assert session.snake.head == head
        assert session.last_tick_time == 1000
        assert render.call_count == 2

    def test_pause_only_from_running(self):
        session = make_session()
        session.pause()
        assert session.status == IDLE

        session.start()
        session.pause()
        assert session.status == PAUSED

    def test_resume_keeps_progress(self):
        """start() from PAUSED continues the same game."""
        session = running_session()
        session.on_frame(1000)
        session.pause()

        session.start()

        assert session.status == RUNNING
        assert session.snake.head == (7, 10)

    def test_restart_resets_and_runs(self):
        session = running_session()
        session.on_frame(1000)
        session.score = 30

        session.restart()

        assert session.status == RUNNING
        assert session.score == 0
        assert list(session.snake.positions) == [(6, 10), (5, 10), (4, 10)]
        assert session.snake.direction == RIGHT

    def test_space_toggles(self):
        session = make_session()
        session.handle_key(" ")
        assert session.status == RUNNING
        session.handle_key(" ")
        assert session.status == PAUSED
        session.handle_key("Space")
        assert session.status == RUNNING

    def test_status_outputs(self):
        session = make_session(store=MemoryScoreStore({BEST_SCORE_KEY: "20"}))
        assert session.status_outputs() == StatusOutputs(
            score=0,
            best_score=20,
            status=IDLE,
            overlay_visible=False,
            overlay_message="",
        )


class TestGameLoop:
    """Tests for on_frame() ticking."""

    def test_one_tick_without_input(self):
        """The start snake moves one cell right; score unchanged."""
        session = running_session()

        session.on_frame(1000)

        assert list(session.snake.positions) == [(7, 10), (6, 10), (5, 10)]
        assert session.score == 0
        assert session.tick_count == 1

    def test_frames_inside_step_are_throttled_without_redraw(self):
        render = Mock()
        session = running_session(render=render)
        session.on_frame(1000)
        calls = render.call_count

        session.on_frame(1000 + STEP_MS - 1)

        assert session.snake.head == (7, 10)
        assert render.call_count == calls

    def test_tick_on_step_boundary(self):
        session = running_session()
        session.on_frame(1000)
        session.on_frame(1000 + STEP_MS)
        assert session.snake.head == (8, 10)

    def test_long_gap_causes_a_single_tick(self):
        """No catch-up: a frame long after the last tick advances one cell."""
        session = running_session()
        session.on_frame(1000)
        session.on_frame(1000 + 50 * STEP_MS)
        assert session.snake.head == (8, 10)
        assert session.tick_count == 2

    def test_frames_while_not_running_render_without_mutation(self):
        render = Mock()
        session = make_session(render=render)

        session.on_frame(1000)
        session.on_frame(2000)

        assert render.call_count == 2
        assert session.snake.head == (6, 10)
        state = render.call_args[0][0]
        assert state.status == IDLE

    def test_reverse_request_is_rejected(self):
        """Heading RIGHT, a LEFT request keeps RIGHT and the head goes to (7,10)."""
        session = running_session()
        session.handle_key("ArrowLeft")

        session.on_frame(1000)

        assert session.snake.direction == RIGHT
        assert session.snake.head == (7, 10)

    def test_turn_is_latched_on_next_tick(self):
        session = running_session()
        session.handle_key("w")
        assert session.snake.direction == RIGHT

        session.on_frame(1000)

        assert session.snake.direction == UP
        assert session.snake.head == (6, 9)

    def test_request_made_while_paused_applies_after_resume(self):
        session = running_session()
        session.pause()
        session.handle_key("s")
        session.on_frame(1000)
        assert session.snake.head == (6, 10)

        session.start()
        session.on_frame(2000)

        assert session.snake.direction == DOWN
        assert session.snake.head == (6, 11)

    def test_attach_and_detach(self):
        """on_frame is driven by a FrameSource until the subscription is cancelled."""
        frames = FrameSource()
        session = running_session()

        session.attach(frames)
        frames.emit(1000)
        assert session.snake.head == (7, 10)

        session.detach()
        frames.emit(2000)
        assert session.snake.head == (7, 10)
        assert frames.subscriber_count == 0


class TestScoring:
    """Tests for eating apples and the best score."""

    def test_eating_scores_ten_and_grows(self):
        store = MemoryScoreStore()
        session = running_session(store=store)
        session.apple = (7, 10)

        session.on_frame(1000)

        assert session.score == 10
        assert len(session.snake) == 4
        assert session.best_score == 10
        assert store.get(BEST_SCORE_KEY) == "10"
        assert session.apple is not None
        assert session.apple not in session.snake.positions

    def test_best_score_never_decreases(self):
        store = MemoryScoreStore({BEST_SCORE_KEY: "150"})
        session = running_session(store=store)
        session.apple = (7, 10)

        session.on_frame(1000)

        assert session.score == 10
        assert session.best_score == 150
        assert store.get(BEST_SCORE_KEY) == "150"

    def test_best_score_written_through_each_time(self):
        store = Mock()
        store.get.return_value = None
        session = running_session(store=store)

        session.apple = (7, 10)
        session.on_frame(1000)
        session.apple = (8, 10)
        session.on_frame(2000)

        assert [c.args for c in store.set.call_args_list] == [
            (BEST_SCORE_KEY, "10"),
            (BEST_SCORE_KEY, "20"),
        ]

    def test_float_formatted_best_is_not_overwritten(self):
        store = MemoryScoreStore({BEST_SCORE_KEY: "150.0"})
        session = running_session(store=store)
        session.apple = (7, 10)

        session.on_frame(1000)

        assert session.best_score == 150
        assert store.get(BEST_SCORE_KEY) == "150.0"

    def test_failing_store_does_not_stop_the_game(self):
        store = Mock()
        store.get.return_value = "0"
        store.set.side_effect = sqlite3.OperationalError("readonly database")
        session = running_session(store=store)
        session.apple = (7, 10)

        session.on_frame(1000)

        assert session.status == RUNNING
        assert session.best_score == 10

    def test_new_game_resets_score(self):
        session = running_session()
        session.apple = (7, 10)
        session.on_frame(1000)

        session.restart()

        assert session.score == 0
        assert session.best_score == 10


class TestGameOver:
    """Tests for collisions ending the game."""

    def _crashing_session(self, **kwargs):
        return running_session(start_snake=[(19, 5), (18, 5)], **kwargs)

    def test_wall_collision_ends_game(self):
        notice = Mock()
        session = self._crashing_session(on_notice=notice)

        session.on_frame(1000)

        assert session.status == GAME_OVER
        assert session.overlay_visible is True
        assert session.overlay_message == "Game over! Score: 0"
        notice.assert_called_once_with("Game over! Score: 0")
        assert list(session.snake.positions) == [(19, 5), (18, 5)]

    def test_self_collision_ends_game(self):
        session = running_session(
            start_snake=[(5, 5), (5, 6), (4, 6), (4, 5), (3, 5)],
            start_direction=UP,
        )
        session.handle_key("a")

        session.on_frame(1000)

        assert session.status == GAME_OVER

    def test_no_ticks_after_game_over(self):
        session = self._crashing_session()
        session.on_frame(1000)

        session.on_frame(2000)
        session.on_frame(3000)

        assert session.tick_count == 0
        assert list(session.snake.positions) == [(19, 5), (18, 5)]

    def test_step_after_game_over_does_not_move(self):
        """Calling step() directly outside RUNNING leaves the board as it was."""
        session = self._crashing_session()
        session.on_frame(1000)

        assert session.step() is None

        assert session.status == GAME_OVER
        assert list(session.snake.positions) == [(19, 5), (18, 5)]

    def test_step_while_idle_or_paused_does_not_move(self):
        session = make_session()
        assert session.step() is None

        session.start()
        session.pause()
        assert session.step() is None

        assert session.snake.head == (6, 10)
        assert session.tick_count == 0

    def test_pause_while_game_over_is_a_no_op(self):
        session = self._crashing_session()
        session.on_frame(1000)

        session.pause()

        assert session.status == GAME_OVER

    def test_start_after_game_over_resets(self):
        session = self._crashing_session()
        session.on_frame(1000)

        session.start()

        assert session.status == RUNNING
        assert session.overlay_visible is False
        assert session.overlay_message == ""
        assert list(session.snake.positions) == [(19, 5), (18, 5)]
        assert session.snake.direction == RIGHT
        assert session.score == 0


class TestWin:
    """Tests for filling the board."""

    def test_filling_the_board_wins(self):
        """Eating the last apple leaves no free cell: the session is won."""
        session = make_session(
            board_size=2,
            start_snake=[(0, 1), (0, 0), (1, 0)],
        )
        assert session.apple == (1, 1)
        session.start()

        session.on_frame(1000)

        assert session.status == WON
        assert session.apple is None
        assert session.score == 10
        assert session.overlay_message == "You win! Score: 10"
        assert len(session.snake) == 4
        assert session.step() is None
        assert len(session.snake) == 4

    def test_start_after_win_resets(self):
        session = make_session(
            board_size=2,
            start_snake=[(0, 1), (0, 0), (1, 0)],
        )
        session.start()
        session.on_frame(1000)

        session.start()

        assert session.status == RUNNING
        assert len(session.snake) == 3
        assert session.apple == (1, 1)
