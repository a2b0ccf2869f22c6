"""Static grid geometry for the snake simulation."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator

Cell = tuple[int, int]

# (row_delta, col_delta) per action index: up, down, left, right.
ACTION_DELTAS: tuple[Cell, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class BoundaryMode(enum.Enum):
    """Which cells of the rectangle are playable."""

    OPEN = "open"
    WALLED = "walled"


class Grid:
    """Immutable board geometry with a fixed boundary interpretation.

    Coordinates use (row, col) ordering. Under ``BoundaryMode.WALLED``
    the outermost ring of cells is a wall and never valid.
    """

    def __init__(
        self,
        width: int = 20,
        height: int = 20,
        boundary: BoundaryMode = BoundaryMode.OPEN,
    ) -> None:
        if width < 4 or height < 4:
            raise ValueError("Grid dimensions must be at least 4×4.")
        self.width = width
        self.height = height
        self.boundary = boundary
        self._cells: tuple[Cell, ...] = tuple(
            (r, c)
            for r in range(height)
            for c in range(width)
            if self.valid((r, c))
        )

    @property
    def center(self) -> Cell:
        return self.height // 2, self.width // 2

    def in_bounds(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies within the rectangle."""
        return 0 <= row < self.height and 0 <= col < self.width

    def valid(self, cell: Cell) -> bool:
        """Check whether a cell is playable under the boundary mode."""
        row, col = cell
        if self.boundary == BoundaryMode.WALLED:
            return 0 < row < self.height - 1 and 0 < col < self.width - 1
        return self.in_bounds(row, col)

    def all_cells(self) -> tuple[Cell, ...]:
        """Return every playable cell in row-major order."""
        return self._cells

    def free_cells(self, occupied: Iterable[Cell]) -> list[Cell]:
        """Return playable cells not in *occupied*, row-major."""
        taken = set(occupied)
        return [cell for cell in self._cells if cell not in taken]

    def neighbours(self, cell: Cell) -> Iterator[Cell]:
        """Yield the four adjacent cells in action order (may be invalid)."""
        row, col = cell
        for dr, dc in ACTION_DELTAS:
            yield row + dr, col + dc

    def to_dict(self) -> dict:
        """Serialize grid geometry to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "boundary": self.boundary.value,
        }
