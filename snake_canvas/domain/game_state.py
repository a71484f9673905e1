"""
GameState entity - a snapshot of the session at a point in time.
"""

from typing import List, Tuple, Optional


class GameState:
    """
    A read-only snapshot handed to renderers and status outputs.

    Attributes:
        tick: number of simulation steps taken this game (0-based)
        snake_positions: list of (x, y), head first
        direction: heading committed at the last tick
        apple: (x, y) of the apple, or None when the board is full
        score: points scored this game
        best_score: highest score ever observed
        status: one of the session statuses
        board_size: cells along each board edge
    """

    def __init__(
        self,
        tick: int,
        snake_positions: List[Tuple[int, int]],
        direction: str,
        apple: Optional[Tuple[int, int]],
        score: int,
        best_score: int,
        status: str,
        board_size: int
    ):
        self.tick = tick
        self.snake_positions = snake_positions
        self.direction = direction
        self.apple = apple
        self.score = score
        self.best_score = best_score
        self.status = status
        self.board_size = board_size

    @property
    def head(self) -> Tuple[int, int]:
        return self.snake_positions[0]

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        A = apple
        S = snake body
        H = snake head
        Rows are printed top to bottom, (0,0) at the top left, x-axis labels at bottom
        """
        board = [['.' for _ in range(self.board_size)] for _ in range(self.board_size)]

        if self.apple is not None:
            ax, ay = self.apple
            board[ay][ax] = 'A'

        for pos_idx, (x, y) in enumerate(self.snake_positions):
            board[y][x] = 'H' if pos_idx == 0 else 'S'

        result = []
        for y in range(self.board_size):
            result.append(f"{y:2d} {' '.join(board[y])}")

        # Only the last digit fits in a single column
        result.append("   " + " ".join(str(i % 10) for i in range(self.board_size)))

        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, status={self.status}, apple={self.apple}, "
            f"length={len(self.snake_positions)}, score={self.score}>"
        )
