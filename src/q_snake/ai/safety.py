"""Crash-avoidance fallback used when the policy picks a lethal move."""

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Collection

import numpy as np

from q_snake.grid import Cell, Grid
from q_snake.snake import NUM_ACTIONS, Direction
from q_snake.world import World

logger = logging.getLogger(__name__)


class FallbackStrategy(enum.Enum):
    """How a replacement move is picked."""

    ANY_SAFE = "any_safe"
    PATH_TO_FOOD = "path_to_food"


def bfs_path(
    grid: Grid,
    start: Cell,
    goal: Cell,
    obstacles: Collection[Cell] = (),
) -> list[Cell]:
    """Shortest 4-connected path from *start* to *goal*.

    Returns the cells after *start* up to and including *goal*, or an
    empty list when the goal is unreachable (or equal to *start*).
    Obstacle cells are never entered; each cell is expanded at most once.
    """
    if start == goal or not grid.valid(goal) or goal in obstacles:
        return []

    parent: dict[Cell, Cell] = {start: start}
    queue: deque[Cell] = deque([start])
    while queue:
        cur = queue.popleft()
        for nxt in grid.neighbours(cur):
            if nxt in parent or not grid.valid(nxt) or nxt in obstacles:
                continue
            parent[nxt] = cur
            if nxt == goal:
                path = [nxt]
                while parent[path[-1]] != start:
                    path.append(parent[path[-1]])
                path.reverse()
                return path
            queue.append(nxt)
    return []


def safe_actions(world: World) -> list[int]:
    """Actions whose target cell is playable and free of the body."""
    head = world.head
    return [
        action for action in range(NUM_ACTIONS)
        if world.is_safe(Direction.from_action(action).step(head))
    ]


def _action_towards(start: Cell, target: Cell) -> int:
    delta = (target[0] - start[0], target[1] - start[1])
    return Direction(delta).action


class SafetyFallback:
    """Selects a non-lethal action, or ``None`` if the snake is trapped."""

    def __init__(
        self,
        strategy: FallbackStrategy = FallbackStrategy.PATH_TO_FOOD,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.strategy = strategy
        self.rng = rng if rng is not None else np.random.default_rng()

    def any_safe(self, world: World) -> int | None:
        candidates = safe_actions(world)
        if not candidates:
            return None
        return int(self.rng.choice(candidates))

    def path_to_food(self, world: World) -> int | None:
        path = bfs_path(world.grid, world.head, world.food, world.occupied())
        if path:
            return _action_towards(world.head, path[0])
        logger.debug("Food unreachable from %s; trying any safe move.", world.head)
        return self.any_safe(world)

    def choose(self, world: World) -> int | None:
        if self.strategy == FallbackStrategy.PATH_TO_FOOD:
            return self.path_to_food(world)
        return self.any_safe(world)
