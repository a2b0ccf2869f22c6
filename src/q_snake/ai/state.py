"""State encoding: map a (cell, heading, world) situation to a Q-table row.

Two encodings are supported:

``"position"``
    ``1 + (row * W + col) * 4 + dir``. Key space ``1 + H * W * 4``.

``"full"``
    Position and heading, a 4-bit danger mask (bit ``a`` set when the
    neighbour in action direction ``a`` is a wall or body) and a 4-bit
    food-direction mask (bit ``a`` set when the food lies in direction
    ``a``). Key ``1 + (((row * W + col) * 4 + dir) * 16 + danger) * 16 +
    food``; key space ``1 + H * W * 4 * 256``.

Row 0 is reserved for cells that are not playable, so a crash candidate
never indexes outside the table.
"""

from __future__ import annotations

from typing import Literal

from q_snake.grid import Cell, Grid
from q_snake.snake import NUM_ACTIONS, Direction
from q_snake.world import World

StateEncodingMode = Literal["position", "full"]

OUT_OF_RANGE_KEY = 0
MASK_STATES = 16

_VALID_MODES: set[StateEncodingMode] = {"position", "full"}


def _validate_mode(mode: str) -> StateEncodingMode:
    if mode not in _VALID_MODES:
        raise ValueError(
            f"Unsupported state encoding mode: {mode!r}. "
            f"Expected one of {sorted(_VALID_MODES)}.",
        )
    return mode


def num_states(grid: Grid, mode: StateEncodingMode = "full") -> int:
    """Exact number of Q-table rows needed for *grid* under *mode*."""
    enc_mode = _validate_mode(mode)
    positions = grid.width * grid.height * NUM_ACTIONS
    if enc_mode == "full":
        return 1 + positions * MASK_STATES * MASK_STATES
    return 1 + positions


def danger_mask(cell: Cell, world: World) -> int:
    """Bit ``a`` is set when moving from *cell* by action ``a`` is unsafe."""
    mask = 0
    for action, neighbour in enumerate(world.grid.neighbours(cell)):
        if not world.is_safe(neighbour):
            mask |= 1 << action
    return mask


def food_mask(cell: Cell, food: Cell) -> int:
    """Bit ``a`` is set when the food lies in action direction ``a``."""
    row, col = cell
    food_row, food_col = food
    mask = 0
    if food_row < row:
        mask |= 1 << Direction.UP.action
    elif food_row > row:
        mask |= 1 << Direction.DOWN.action
    if food_col < col:
        mask |= 1 << Direction.LEFT.action
    elif food_col > col:
        mask |= 1 << Direction.RIGHT.action
    return mask


def encode_state(
    cell: Cell,
    direction: Direction,
    world: World,
    mode: StateEncodingMode = "full",
) -> int:
    """Encode a situation as an integer key in ``[0, num_states)``."""
    enc_mode = _validate_mode(mode)
    grid = world.grid
    if not grid.valid(cell):
        return OUT_OF_RANGE_KEY

    row, col = cell
    key = (row * grid.width + col) * NUM_ACTIONS + direction.action
    if enc_mode == "full":
        key = key * MASK_STATES + danger_mask(cell, world)
        key = key * MASK_STATES + food_mask(cell, world.food)
    return 1 + key
