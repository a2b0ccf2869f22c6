"""Explicit simulation state owned by the episode controller."""

from __future__ import annotations

from dataclasses import dataclass

from q_snake.grid import Cell, Grid
from q_snake.snake import Direction, Snake


@dataclass
class World:
    """Grid, snake, food and score for one running episode."""

    grid: Grid
    snake: Snake
    food: Cell
    score: int = 0
    ticks_since_food: int = 0

    @property
    def head(self) -> Cell:
        return self.snake.head

    @property
    def direction(self) -> Direction:
        return self.snake.direction

    def occupied(self) -> set[Cell]:
        """Cells currently covered by the snake."""
        return set(self.snake.body)

    def is_safe(self, cell: Cell) -> bool:
        """A cell is safe when it is playable and not under the body."""
        return self.grid.valid(cell) and not self.snake.occupies(cell)

    def to_dict(self) -> dict:
        """Serialize world state to a dictionary."""
        return {
            "grid": self.grid.to_dict(),
            "snake": self.snake.to_dict(),
            "food": list(self.food),
            "score": self.score,
            "ticks_since_food": self.ticks_since_food,
        }
