"""Food placement on free grid cells."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from q_snake.grid import Cell, Grid

logger = logging.getLogger(__name__)


class NoFreeCellError(Exception):
    """Raised when every playable cell is occupied by the snake."""


class FoodPlacer:
    """Chooses an unoccupied cell for the next food item.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()

    def place(self, occupied: Iterable[Cell]) -> Cell:
        """Pick a uniformly random free cell.

        Raises :class:`NoFreeCellError` when the board is full.
        """
        free = self.grid.free_cells(occupied)
        if not free:
            logger.info("No free cells left for food placement.")
            raise NoFreeCellError("Board is full; no cell available for food.")
        if len(free) == 1:
            return free[0]
        return free[int(self.rng.integers(len(free)))]
