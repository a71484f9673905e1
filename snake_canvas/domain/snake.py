"""
Snake entity for the game engine.
"""

from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .collision import hits_wall, is_collision
from .constants import OPPOSITES, VALID_MOVES
from .grid import Cell, Grid


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a single ``Snake.advance`` call."""

    head: Cell
    collided: bool = False
    ate_apple: bool = False
    death_reason: Optional[str] = None  # 'wall' or 'self'


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of Cell from head at index 0 to tail at the end
        direction: the heading committed at the last tick
        grid: the board the snake moves on
    """

    def __init__(self, positions: List[Tuple[int, int]], direction: str, grid: Grid):
        if not positions:
            raise ValueError("A snake needs at least one segment.")
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction '{direction}'.")
        cells = [Cell(*pos) for pos in positions]
        for cell in cells:
            if not grid.contains(cell):
                raise ValueError(f"Snake segment out of bounds at {tuple(cell)}.")
        if len(set(cells)) != len(cells):
            raise ValueError("Snake segments must not overlap.")

        self.positions = deque(cells)
        self.direction = direction
        self.grid = grid

    @property
    def head(self) -> Cell:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Cell:
        return self.positions[-1]

    def __len__(self):
        return len(self.positions)

    def occupies(self, cell) -> bool:
        return Cell(*cell) in self.positions

    def latch_direction(self, pending: Optional[str]) -> str:
        """
        Commit a requested heading, refusing a straight reversal.

        A request exactly opposite to the current heading is ignored while
        the snake has a neck to reverse into (length >= 2).
        """
        if pending is None:
            return self.direction
        if pending not in VALID_MOVES:
            raise ValueError(f"Unknown direction '{pending}'.")
        if len(self.positions) >= 2 and pending == OPPOSITES[self.direction]:
            return self.direction
        self.direction = pending
        return self.direction

    def advance(self, direction: str, apple: Optional[Tuple[int, int]]) -> MoveResult:
        """
        Move one cell in ``direction``.

        On collision nothing changes and the result is flagged. Otherwise the
        new head is prepended and the tail dropped, unless the head lands on
        ``apple``, in which case the tail is kept and the snake grows by one.
        """
        new_head = self.head.shifted(direction)

        if is_collision(new_head, self.positions, self.grid):
            reason = "wall" if hits_wall(new_head, self.grid) else "self"
            return MoveResult(head=new_head, collided=True, death_reason=reason)

        self.positions.appendleft(new_head)

        ate_apple = apple is not None and new_head == Cell(*apple)
        if not ate_apple:
            self.positions.pop()

        return MoveResult(head=new_head, ate_apple=ate_apple)

    def __repr__(self):
        return f"<Snake len={len(self.positions)}, head={tuple(self.head)}, direction={self.direction}>"
