"""Fixed-size Q-table backed by a NumPy array."""

from __future__ import annotations

import logging

import numpy as np

from q_snake.ai.state import OUT_OF_RANGE_KEY
from q_snake.snake import NUM_ACTIONS

logger = logging.getLogger(__name__)


class QTable:
    """Mapping from integer state keys to four action-values.

    The array is allocated once and never resized. Row
    :data:`OUT_OF_RANGE_KEY` stays at zero so terminal transitions
    bootstrap from a zero future value; keys outside the table resolve to
    that row.
    """

    def __init__(
        self,
        num_states: int,
        *,
        init: str = "zeros",
        scale: float = 1e-3,
        rng: np.random.Generator | None = None,
    ) -> None:
        if num_states < 1:
            raise ValueError("num_states must be at least 1.")
        if init == "zeros":
            self.values = np.zeros((num_states, NUM_ACTIONS), dtype=np.float64)
        elif init == "jitter":
            gen = rng if rng is not None else np.random.default_rng()
            self.values = gen.uniform(
                -scale, scale, size=(num_states, NUM_ACTIONS),
            )
        else:
            raise ValueError(f"Unknown Q-table init: {init!r}.")
        self.values[OUT_OF_RANGE_KEY] = 0.0
        logger.debug(
            "Allocated Q-table with %d states (%.1f MiB).",
            num_states, self.values.nbytes / 2**20,
        )

    @property
    def num_states(self) -> int:
        return self.values.shape[0]

    def _row(self, state: int) -> int:
        if 0 <= state < self.values.shape[0]:
            return state
        return OUT_OF_RANGE_KEY

    def get(self, state: int) -> np.ndarray:
        """Return the action-values of *state* (a view into the table)."""
        return self.values[self._row(state)]

    def best_value(self, state: int) -> float:
        return float(self.values[self._row(state)].max())

    def update(self, state: int, action: int, value: float) -> None:
        """Overwrite ``Q[state][action]``."""
        if not 0 <= action < NUM_ACTIONS:
            raise ValueError(
                f"Action must be in [0, {NUM_ACTIONS - 1}], got {action}.",
            )
        row = self._row(state)
        if row == OUT_OF_RANGE_KEY:
            return
        self.values[row, action] = value
