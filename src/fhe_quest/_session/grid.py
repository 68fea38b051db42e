# Area: Session
"""
fhe_quest._session.grid — Known-wrong cells
===========================================

10×10 matrix of cells confirmed empty, indexed ``grid[y][x]``.
Cells only ever flip from False to True during a game; the whole grid
is cleared when a new game begins.
"""

import logging
from typing import List, Tuple

from ..types import GRID_SIZE, Coordinate

logger = logging.getLogger("fhe_quest.session.grid")


class GridState:
    """Append-only record of wrong guesses for the current game."""

    def __init__(self, size: int = GRID_SIZE):
        self.size = size
        self._cells: List[List[bool]] = [[False] * size for _ in range(size)]

    def __getitem__(self, y: int) -> Tuple[bool, ...]:
        return tuple(self._cells[y])

    def mark_wrong(self, coordinate: Coordinate) -> bool:
        """Mark a cell wrong. Returns True if it was not marked before."""
        if self._cells[coordinate.y][coordinate.x]:
            return False
        self._cells[coordinate.y][coordinate.x] = True
        logger.debug("Marked %s as wrong", coordinate)
        return True

    def is_wrong(self, coordinate: Coordinate) -> bool:
        return self._cells[coordinate.y][coordinate.x]

    def wrong_cells(self) -> List[Coordinate]:
        """All cells marked wrong, row by row."""
        return [
            Coordinate(x, y)
            for y, row in enumerate(self._cells)
            for x, wrong in enumerate(row)
            if wrong
        ]

    def snapshot(self) -> Tuple[Tuple[bool, ...], ...]:
        return tuple(tuple(row) for row in self._cells)

    def reset(self) -> None:
        """Clear every cell. Only called when a new game starts."""
        self._cells = [[False] * self.size for _ in range(self.size)]
        logger.info("Grid cleared for new game")
