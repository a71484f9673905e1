"""
Apple placement.
"""

import random
from typing import Iterable, Optional, Tuple

from .grid import Cell, Grid


def free_cells(grid: Grid, occupied: Iterable[Tuple[int, int]]):
    """Return every cell of ``grid`` not listed in ``occupied``, row by row."""
    taken = {Cell(*cell) for cell in occupied}
    return [cell for cell in grid.cells() if cell not in taken]


def spawn_apple(
    grid: Grid,
    occupied: Iterable[Tuple[int, int]],
    rng: Optional[random.Random] = None
) -> Optional[Cell]:
    """
    Pick a uniformly random free cell for the next apple.

    Returns None when the snake covers the whole board.
    """
    open_cells = free_cells(grid, occupied)
    if not open_cells:
        return None
    return (rng or random).choice(open_cells)
