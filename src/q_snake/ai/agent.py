"""Tabular Q-learning agent with epsilon-greedy exploration."""

from __future__ import annotations

import logging

import numpy as np

from q_snake.ai.config import TrainingConfig
from q_snake.ai.policy import EpsilonGreedyPolicy, ExplorationSchedule
from q_snake.ai.q_table import QTable
from q_snake.ai.state import num_states
from q_snake.grid import BoundaryMode, Grid

logger = logging.getLogger(__name__)


class QLearningAgent:
    """Owns the Q-table, the policy and the training counters.

    Training is active while fewer than ``max_training_episodes``
    episodes have finished. Once it ends, action selection is purely
    greedy and the table is frozen.
    """

    def __init__(
        self,
        config: TrainingConfig,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        grid = Grid(
            config.grid_width, config.grid_height, BoundaryMode(config.boundary),
        )
        self.q_table = QTable(
            num_states(grid, config.state_encoding),
            init=config.q_init,
            scale=config.q_init_scale,
            rng=self.rng,
        )
        self.policy = EpsilonGreedyPolicy(self.rng, config.tie_tolerance)
        self.schedule = ExplorationSchedule(
            start=config.epsilon_start,
            end=config.epsilon_end,
            decay=config.epsilon_decay,
            mode=config.epsilon_decay_mode,
        )
        self.episode = 0
        self.total_updates = 0

    @property
    def training(self) -> bool:
        return self.episode < self.config.max_training_episodes

    @property
    def exploration_rate(self) -> float:
        """Current epsilon for epsilon-greedy exploration."""
        return self.schedule.value

    def choose_action(self, state: int, epsilon: float | None = None) -> int:
        """Epsilon-greedy action for *state*.

        Without an explicit *epsilon*, the schedule's rate is used while
        training and zero afterwards.
        """
        if epsilon is None:
            epsilon = self.exploration_rate if self.training else 0.0
        return self.policy.choose_action(self.q_table.get(state), epsilon)

    def update_q(
        self,
        prev_state: int,
        action: int,
        next_state: int,
        reward: float,
    ) -> float:
        """Apply one TD(0) update and return the new ``Q[prev][action]``."""
        alpha = self.config.learning_rate
        best_next = self.q_table.best_value(next_state)
        old = float(self.q_table.get(prev_state)[action])
        new = (1 - alpha) * old + alpha * (reward + self.config.gamma * best_next)
        self.q_table.update(prev_state, action, new)
        self.total_updates += 1
        return new

    def end_episode(self) -> None:
        """Count a finished episode and decay exploration while training."""
        was_training = self.training
        self.episode += 1
        if was_training:
            self.schedule.step()
            if not self.training:
                logger.info(
                    "Training finished after %d episodes (eps=%.3f).",
                    self.episode, self.exploration_rate,
                )
