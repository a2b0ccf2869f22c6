"""Reward shaping for candidate transitions."""

from __future__ import annotations

import math

from q_snake.ai.config import RewardConfig
from q_snake.grid import Cell
from q_snake.world import World


def distance(a: Cell, b: Cell, metric: str = "manhattan") -> float:
    """Distance between two cells under the configured metric."""
    dr = a[0] - b[0]
    dc = a[1] - b[1]
    if metric == "euclidean":
        return math.hypot(dr, dc)
    return float(abs(dr) + abs(dc))


def _adjacent_body(world: World, cell: Cell) -> int:
    head = world.head
    return sum(
        1 for n in world.grid.neighbours(cell)
        if n != head and world.snake.occupies(n)
    )


def compute_reward(
    world: World,
    prev_cell: Cell,
    next_cell: Cell,
    *,
    got_food: bool,
    crashed: bool,
    config: RewardConfig,
) -> float:
    """Score the move from *prev_cell* to *next_cell*.

    Crash outranks food, and food outranks any shaped value; shaped
    values are clipped to ``±config.shaping_limit``.
    """
    length_factor = 1.0 + config.length_scale * world.snake.length
    if crashed:
        return config.crash * length_factor
    if got_food:
        return config.food * length_factor

    before = distance(prev_cell, world.food, config.distance)
    after = distance(next_cell, world.food, config.distance)
    shaped = config.closer if after < before else config.farther

    shaped += config.survival_bonus
    if config.body_proximity_penalty:
        shaped -= config.body_proximity_penalty * _adjacent_body(world, next_cell)
    if config.hunger_penalty:
        overdue = max(0, world.ticks_since_food - config.hunger_grace)
        shaped -= config.hunger_penalty * overdue

    limit = config.shaping_limit
    return max(-limit, min(limit, shaped))
