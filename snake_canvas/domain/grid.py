"""
Grid model - the fixed-size square coordinate space the snake lives on.
"""

from typing import Iterator, NamedTuple

from .constants import DELTAS


class Cell(NamedTuple):
    """An (x, y) board coordinate."""

    x: int
    y: int

    def shifted(self, direction: str) -> "Cell":
        """Return the neighbouring cell one step away in ``direction``."""
        try:
            dx, dy = DELTAS[direction]
        except KeyError:
            raise ValueError(f"Unknown direction '{direction}'.") from None
        return Cell(self.x + dx, self.y + dy)


class Grid:
    """
    A square board of ``size`` x ``size`` cells.

    Attributes:
        size: number of cells along each axis (BOARD_SIZE)
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"Board size must be positive, got {size}.")
        self.size = size

    def contains(self, cell) -> bool:
        x, y = cell
        return 0 <= x < self.size and 0 <= y < self.size

    def cells(self) -> Iterator[Cell]:
        """Yield every cell row by row, starting at the top-left corner."""
        for y in range(self.size):
            for x in range(self.size):
                yield Cell(x, y)

    @property
    def area(self) -> int:
        return self.size * self.size

    def pixel_size(self, cell_size: int) -> int:
        """Edge length of the render surface for this grid."""
        return self.size * cell_size

    def __repr__(self):
        return f"<Grid size={self.size}>"
