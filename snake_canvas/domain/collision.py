"""
Collision detection for a proposed head position.
"""

from typing import Iterable, Tuple

from .grid import Grid


def hits_wall(head: Tuple[int, int], grid: Grid) -> bool:
    return not grid.contains(head)


def is_collision(head: Tuple[int, int], body: Iterable[Tuple[int, int]], grid: Grid) -> bool:
    """
    Decide whether moving the head to ``head`` ends the game.

    The whole current body counts, including the tail cell that would be
    vacated by this same move: stepping into the old tail is a loss.

    Args:
        head: proposed new head cell
        body: the snake's cells before the move, head first
        grid: the board being played on

    Returns:
        True on a wall or self collision.
    """
    if hits_wall(head, grid):
        return True
    return tuple(head) in {tuple(segment) for segment in body}
