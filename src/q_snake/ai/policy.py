"""Epsilon-greedy action selection and the exploration decay schedule."""

from __future__ import annotations

import numpy as np

from q_snake.snake import NUM_ACTIONS


class EpsilonGreedyPolicy:
    """Epsilon-greedy choice over a row of action-values.

    Greedy choices break ties uniformly at random among every action
    within ``tie_tolerance`` of the maximum, so equal values never bias
    the snake toward one direction.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        tie_tolerance: float = 1e-9,
    ) -> None:
        if tie_tolerance < 0:
            raise ValueError("tie_tolerance must be non-negative.")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.tie_tolerance = tie_tolerance

    def greedy(self, q_values: np.ndarray) -> int:
        """Pick uniformly among the (near-)maximal actions."""
        best = np.flatnonzero(q_values >= q_values.max() - self.tie_tolerance)
        if len(best) == 1:
            return int(best[0])
        return int(self.rng.choice(best))

    def choose_action(self, q_values: np.ndarray, epsilon: float) -> int:
        """Explore with probability *epsilon*, otherwise exploit."""
        if self.rng.random() < epsilon:
            return int(self.rng.integers(NUM_ACTIONS))
        return self.greedy(q_values)


class ExplorationSchedule:
    """Monotonically decaying exploration rate with a floor.

    ``mode="additive"`` subtracts ``decay`` per step; ``"multiplicative"``
    multiplies by ``decay``.
    """

    def __init__(
        self,
        start: float = 0.3,
        end: float = 0.1,
        decay: float = 0.001,
        mode: str = "additive",
    ) -> None:
        if not 0.0 <= end <= start <= 1.0:
            raise ValueError("Require 0 <= end <= start <= 1.")
        if mode not in ("additive", "multiplicative"):
            raise ValueError(f"Unknown decay mode: {mode!r}.")
        self.start = start
        self.end = end
        self.decay = decay
        self.mode = mode
        self._value = start

    @property
    def value(self) -> float:
        """Current exploration rate."""
        return self._value

    def step(self) -> float:
        """Apply one decay step and return the new rate."""
        if self.mode == "additive":
            decayed = self._value - self.decay
        else:
            decayed = self._value * self.decay
        self._value = max(self.end, min(self._value, decayed))
        return self._value

    def reset(self) -> None:
        self._value = self.start
