"""Q-Snake: tabular Q-learning snake simulation core."""

from q_snake.engine import EpisodeController, Phase, TickResult
from q_snake.food import FoodPlacer, NoFreeCellError
from q_snake.grid import BoundaryMode, Grid
from q_snake.snake import Direction, Snake
from q_snake.world import World

__all__ = [
    "BoundaryMode",
    "Direction",
    "EpisodeController",
    "FoodPlacer",
    "Grid",
    "NoFreeCellError",
    "Phase",
    "Snake",
    "TickResult",
    "World",
]
