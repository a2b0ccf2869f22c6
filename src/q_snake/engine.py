"""Tick-driven episode controller tying the world to the learning agent."""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass

import numpy as np

from q_snake.ai.agent import QLearningAgent
from q_snake.ai.config import TrainingConfig
from q_snake.ai.reward import compute_reward
from q_snake.ai.safety import FallbackStrategy, SafetyFallback
from q_snake.ai.state import OUT_OF_RANGE_KEY, encode_state
from q_snake.food import FoodPlacer, NoFreeCellError
from q_snake.grid import BoundaryMode, Cell, Grid
from q_snake.snake import Direction, Snake
from q_snake.world import World

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    """Controller state machine phases."""

    RUNNING = "running"
    RESETTING = "resetting"


@dataclass
class TickResult:
    """Outcome of a single :meth:`EpisodeController.tick`."""

    crashed: bool = False
    ate_food: bool = False
    action: int | None = None
    used_fallback: bool = False
    reward: float | None = None
    board_full: bool = False
    resetting: bool = False
    episode_over: bool = False
    episode_score: int | None = None
    episode_ticks: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class EpisodeController:
    """Single-snake, tick-driven simulation with online Q-learning.

    The controller owns the :class:`World` and the agent. Each call to
    :meth:`tick` advances by one frame: while running it may consult the
    policy, update the table and move the snake; after a crash it waits
    ``reset_delay`` ticks with the board frozen before starting over.
    """

    def __init__(
        self,
        config: TrainingConfig | None = None,
        agent: QLearningAgent | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or TrainingConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.agent = agent or QLearningAgent(self.config, rng=self.rng)
        self.grid = Grid(
            self.config.grid_width,
            self.config.grid_height,
            BoundaryMode(self.config.boundary),
        )
        self.food_placer = FoodPlacer(self.grid, rng=self.rng)
        self.fallback = SafetyFallback(
            FallbackStrategy(self.config.fallback), rng=self.rng,
        )
        self.phase = Phase.RUNNING
        self.total_ticks = 0
        self.episode_ticks = 0
        self._frame = 0
        self._reset_countdown = 0
        self.world = self._fresh_world()

    # -- read-only accessors ------------------------------------------------

    @property
    def head(self) -> Cell:
        return self.world.head

    @property
    def body(self) -> list[Cell]:
        return list(self.world.snake.body)

    @property
    def food(self) -> Cell:
        return self.world.food

    @property
    def score(self) -> int:
        return self.world.score

    @property
    def length(self) -> int:
        return self.world.snake.length

    @property
    def episode(self) -> int:
        return self.agent.episode

    @property
    def exploration_rate(self) -> float:
        return self.agent.exploration_rate

    # -- lifecycle ----------------------------------------------------------

    def _fresh_world(self) -> World:
        row, col = self.grid.center
        snake = Snake(
            row, col,
            Direction[self.config.initial_direction.upper()],
            length=self.config.initial_snake_length,
        )
        food = self.food_placer.place(snake.body)
        return World(grid=self.grid, snake=snake, food=food)

    def reset(self) -> None:
        """Start a fresh snake and food; the Q-table is kept."""
        self.world = self._fresh_world()
        self.phase = Phase.RUNNING
        self.episode_ticks = 0
        self._reset_countdown = 0
        logger.debug("Episode %d started.", self.agent.episode)

    def force_reset(self) -> TickResult:
        """End the current episode without a crash and reset immediately."""
        result = self._finish_episode(TickResult())
        self.reset()
        return result

    def _finish_episode(self, result: TickResult) -> TickResult:
        result.episode_over = True
        result.episode_score = self.world.score
        result.episode_ticks = self.episode_ticks
        self.agent.end_episode()
        return result

    # -- simulation ---------------------------------------------------------

    def _is_decision_tick(self) -> bool:
        if self.agent.training:
            return True
        return self._frame % self.config.decision_interval == 0

    def _lookahead(self, cell: Cell, direction: Direction) -> World:
        """The world after moving the head to *cell*, food left in place.

        The food that will replace an eaten item is not known yet, so a
        food move sees the eaten cell under the head.
        """
        current = self.world.snake
        snake = Snake.from_cells(list(current.body), direction, current.length)
        snake.advance(cell)
        return World(grid=self.grid, snake=snake, food=self.world.food)

    def _decide(self, result: TickResult) -> Direction | None:
        """Run policy, reward and learning for this tick.

        Returns the direction to commit, or ``None`` if the snake is trapped.
        """
        world = self.world
        head = world.head
        encoding = self.config.state_encoding
        state = encode_state(head, world.direction, world, encoding)
        action = self.agent.choose_action(state)
        candidate_dir = Direction.from_action(action)
        candidate = candidate_dir.step(head)

        valid = world.is_safe(candidate)
        got_food = valid and candidate == world.food
        reward = compute_reward(
            world, head, candidate,
            got_food=got_food, crashed=not valid,
            config=self.config.reward,
        )
        if self.agent.training:
            if valid:
                next_state = encode_state(
                    candidate, candidate_dir,
                    self._lookahead(candidate, candidate_dir), encoding,
                )
            else:
                next_state = OUT_OF_RANGE_KEY
            self.agent.update_q(state, action, next_state, reward)
        result.action = action
        result.reward = reward

        if valid:
            return candidate_dir
        result.used_fallback = True
        fallback = self.fallback.choose(world)
        if fallback is None:
            return None
        return Direction.from_action(fallback)

    def _crash(self, result: TickResult) -> TickResult:
        result.crashed = True
        self._finish_episode(result)
        logger.debug(
            "Crash at %s after %d ticks with score %d.",
            self.world.head, self.episode_ticks, self.world.score,
        )
        if self.config.reset_delay > 0:
            self.phase = Phase.RESETTING
            self._reset_countdown = self.config.reset_delay
        else:
            self.reset()
        return result

    def tick(self) -> TickResult:
        """Advance the simulation by one frame."""
        self.total_ticks += 1
        if self.phase == Phase.RESETTING:
            self._reset_countdown -= 1
            if self._reset_countdown <= 0:
                self.reset()
            return TickResult(resetting=True)

        self._frame += 1
        self.episode_ticks += 1
        result = TickResult()
        world = self.world

        if self._is_decision_tick():
            direction = self._decide(result)
            if direction is None:
                return self._crash(result)
            world.snake.direction = direction

        new_head = world.direction.step(world.head)
        if not world.is_safe(new_head):
            return self._crash(result)

        world.snake.advance(new_head)
        world.ticks_since_food += 1
        if new_head == world.food:
            result.ate_food = True
            world.score += 1
            world.ticks_since_food = 0
            world.snake.grow()
            try:
                world.food = self.food_placer.place(world.snake.body)
            except NoFreeCellError:
                logger.info(
                    "Board full with score %d; forcing a reset.", world.score,
                )
                result.board_full = True
                self._finish_episode(result)
                self.reset()
        return result

    # -- views --------------------------------------------------------------

    def snapshot(self) -> dict:
        """Return a JSON-serializable view for renderers and telemetry."""
        return {
            "tick": self.total_ticks,
            "phase": self.phase.value,
            "head": list(self.head),
            "body": [list(seg) for seg in self.world.snake.body],
            "food": list(self.food),
            "score": self.score,
            "length": self.length,
            "episode": self.episode,
            "exploration_rate": self.exploration_rate,
            "training": self.agent.training,
            "grid": self.grid.to_dict(),
        }

    def render(self) -> str:
        """Return a text rendering of the current board."""
        body = set(self.world.snake.body)
        rows: list[str] = []
        for r in range(self.grid.height):
            row_chars: list[str] = []
            for c in range(self.grid.width):
                cell = (r, c)
                if cell == self.head:
                    row_chars.append("H")
                elif cell in body:
                    row_chars.append("S")
                elif cell == self.food:
                    row_chars.append("F")
                elif not self.grid.valid(cell):
                    row_chars.append("#")
                else:
                    row_chars.append(".")
            rows.append("".join(row_chars))
        return "\n".join(rows)
