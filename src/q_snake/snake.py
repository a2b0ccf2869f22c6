"""Snake representation and movement bookkeeping."""

from __future__ import annotations

import enum
from collections import deque

from q_snake.grid import Cell


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def action(self) -> int:
        """Action index of this direction (0=up, 1=down, 2=left, 3=right)."""
        return ACTION_TO_DIRECTION.index(self)

    @classmethod
    def from_action(cls, action: int) -> Direction:
        return ACTION_TO_DIRECTION[action]

    def step(self, cell: Cell) -> Cell:
        """Return the cell one step from *cell* in this direction."""
        dr, dc = self.value
        return cell[0] + dr, cell[1] + dc


# Fixed action encoding: index -> Direction.
ACTION_TO_DIRECTION: list[Direction] = [
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
]
NUM_ACTIONS = len(ACTION_TO_DIRECTION)


class Snake:
    """A snake held as a deque of (row, col) segments plus a logical length.

    The head is ``body[0]``; the tail is ``body[-1]``. The body never holds
    more than ``length`` cells: growing only raises ``length`` and the
    extra segment appears over the following ticks.
    """

    def __init__(
        self,
        start_row: int,
        start_col: int,
        direction: Direction = Direction.RIGHT,
        length: int = 2,
    ) -> None:
        if length < 2:
            raise ValueError("Snake length must be at least 2.")
        dr, dc = direction.value
        self.body: deque[Cell] = deque(
            (start_row - dr * i, start_col - dc * i) for i in range(length)
        )
        self.direction = direction
        self.length = length

    @classmethod
    def from_cells(
        cls,
        cells: list[Cell],
        direction: Direction = Direction.RIGHT,
        length: int | None = None,
    ) -> Snake:
        """Build a snake from explicit head-to-tail cells."""
        if not cells:
            raise ValueError("A snake needs at least one cell.")
        logical = max(length if length is not None else len(cells), 2)
        if len(cells) > logical:
            raise ValueError("Body is longer than the snake length.")
        head_row, head_col = cells[0]
        snake = cls(head_row, head_col, direction, length=logical)
        snake.body = deque(cells)
        return snake

    @property
    def head(self) -> Cell:
        """Return the head coordinate."""
        return self.body[0]

    def advance(self, new_head: Cell) -> Cell | None:
        """Prepend *new_head* and trim to ``length``.

        Returns the vacated tail cell, or ``None`` if nothing was trimmed.
        """
        self.body.appendleft(new_head)
        vacated = None
        while len(self.body) > self.length:
            vacated = self.body.pop()
        return vacated

    def grow(self, segments: int = 1) -> None:
        """Raise the logical length by *segments*."""
        self.length += segments

    def occupies(self, cell: Cell) -> bool:
        """Check whether the snake occupies a given cell."""
        return cell in self.body

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name.lower(),
            "length": self.length,
        }
