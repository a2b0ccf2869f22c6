"""Tests for the Grid module."""

import pytest

from q_snake.grid import BoundaryMode, Grid


class TestGridInit:
    def test_default_dimensions(self):
        grid = Grid()
        assert grid.width == 20
        assert grid.height == 20
        assert grid.boundary == BoundaryMode.OPEN

    def test_custom_dimensions(self):
        grid = Grid(width=10, height=8)
        assert grid.width == 10
        assert grid.height == 8
        assert grid.center == (4, 5)

    def test_minimum_size_enforced(self):
        with pytest.raises(ValueError, match="at least 4"):
            Grid(width=3, height=4)
        with pytest.raises(ValueError, match="at least 4"):
            Grid(width=4, height=3)


class TestGridValidity:
    def test_open_boundary(self):
        grid = Grid(width=5, height=5)
        assert grid.valid((0, 0))
        assert grid.valid((4, 4))
        assert not grid.valid((-1, 0))
        assert not grid.valid((0, 5))
        assert not grid.valid((5, 0))

    def test_walled_boundary_excludes_outer_ring(self):
        grid = Grid(width=5, height=5, boundary=BoundaryMode.WALLED)
        assert not grid.valid((0, 2))
        assert not grid.valid((2, 4))
        assert grid.valid((1, 1))
        assert grid.valid((3, 3))
        assert grid.in_bounds(0, 2)


class TestGridCells:
    def test_all_cells_row_major(self):
        grid = Grid(width=4, height=4)
        cells = grid.all_cells()
        assert len(cells) == 16
        assert cells[0] == (0, 0)
        assert cells[1] == (0, 1)
        assert cells[4] == (1, 0)
        assert list(cells) == sorted(cells)

    def test_all_cells_reused(self):
        grid = Grid(width=6, height=6)
        assert grid.all_cells() is grid.all_cells()

    def test_walled_cells(self):
        grid = Grid(width=6, height=5, boundary=BoundaryMode.WALLED)
        assert len(grid.all_cells()) == 4 * 3
        assert all(grid.valid(c) for c in grid.all_cells())

    def test_free_cells(self):
        grid = Grid(width=4, height=4)
        free = grid.free_cells({(0, 0), (1, 1)})
        assert len(free) == 14
        assert (0, 0) not in free
        assert (1, 1) not in free

    def test_neighbours_in_action_order(self):
        grid = Grid(width=5, height=5)
        assert list(grid.neighbours((2, 2))) == [(1, 2), (3, 2), (2, 1), (2, 3)]


class TestGridSerialization:
    def test_to_dict(self):
        grid = Grid(width=5, height=6, boundary=BoundaryMode.WALLED)
        assert grid.to_dict() == {"width": 5, "height": 6, "boundary": "walled"}
