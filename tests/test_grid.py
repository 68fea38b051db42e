# Area: Session Tests
"""Tests for GridState."""

from fhe_quest._session.grid import GridState
from fhe_quest.types import Coordinate


class TestGridState:
    """Tests for the known-wrong cell matrix."""

    def test_starts_empty(self):
        grid = GridState()
        assert grid.size == 10
        assert grid.wrong_cells() == []
        assert all(not cell for row in grid.snapshot() for cell in row)

    def test_indexed_by_row_then_column(self):
        grid = GridState()
        grid.mark_wrong(Coordinate(3, 4))
        assert grid[4][3] is True
        assert grid[3][4] is False

    def test_mark_is_idempotent(self):
        grid = GridState()
        assert grid.mark_wrong(Coordinate(1, 1)) is True
        assert grid.mark_wrong(Coordinate(1, 1)) is False
        assert grid.wrong_cells() == [Coordinate(1, 1)]

    def test_wrong_cells_row_by_row(self):
        grid = GridState()
        grid.mark_wrong(Coordinate(5, 2))
        grid.mark_wrong(Coordinate(0, 7))
        grid.mark_wrong(Coordinate(9, 2))
        assert grid.wrong_cells() == [Coordinate(5, 2), Coordinate(9, 2), Coordinate(0, 7)]

    def test_rows_are_read_only_copies(self):
        grid = GridState()
        row = grid[0]
        assert isinstance(row, tuple)

    def test_reset_clears_everything(self):
        grid = GridState()
        grid.mark_wrong(Coordinate(2, 2))
        grid.reset()
        assert grid.is_wrong(Coordinate(2, 2)) is False
        assert grid.wrong_cells() == []
