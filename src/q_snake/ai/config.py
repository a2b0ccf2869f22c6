"""Hyperparameter configuration for tabular Q-learning."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_BOUNDARIES = {"open", "walled"}
_DIRECTIONS = {"up", "down", "left", "right"}
_ENCODINGS = {"position", "full"}
_DECAY_MODES = {"additive", "multiplicative"}
_Q_INITS = {"zeros", "jitter"}
_FALLBACKS = {"any_safe", "path_to_food"}
_DISTANCES = {"manhattan", "euclidean"}


def _check_choice(name: str, value: str, allowed: set[str]) -> None:
    if value not in allowed:
        raise ValueError(
            f"Unsupported {name}: {value!r}. Expected one of {sorted(allowed)}.",
        )


@dataclass(frozen=True)
class RewardConfig:
    """Configurable reward constants for the snake simulation.

    Shaped (non-terminal) rewards are clipped to ``±shaping_limit`` so a
    crash always scores strictly worst and food strictly best.
    """

    crash: float = -10.0
    food: float = 10.0
    length_scale: float = 0.0
    closer: float = 0.1
    farther: float = -0.15
    distance: str = "manhattan"
    survival_bonus: float = 0.0
    body_proximity_penalty: float = 0.0
    hunger_penalty: float = 0.0
    hunger_grace: int = 0
    shaping_limit: float = 1.0

    def __post_init__(self) -> None:
        _check_choice("distance metric", self.distance, _DISTANCES)
        if self.shaping_limit < 0:
            raise ValueError("shaping_limit must be non-negative.")
        if self.crash >= -self.shaping_limit:
            raise ValueError("crash reward must be below -shaping_limit.")
        if self.food <= self.shaping_limit:
            raise ValueError("food reward must exceed shaping_limit.")
        if self.length_scale < 0:
            raise ValueError("length_scale must be non-negative.")
        if self.hunger_grace < 0:
            raise ValueError("hunger_grace must be non-negative.")


@dataclass(frozen=True)
class TrainingConfig:
    """Full simulation and training configuration.

    Supports JSON serialization for reproducibility.
    """

    # Board
    grid_width: int = 20
    grid_height: int = 20
    boundary: str = "open"
    cell_size: int = 20  # pixels, for renderers only
    initial_snake_length: int = 2
    initial_direction: str = "right"

    # Learning
    learning_rate: float = 0.1
    gamma: float = 0.9
    state_encoding: str = "full"
    q_init: str = "zeros"
    q_init_scale: float = 1e-3
    tie_tolerance: float = 1e-9

    # Exploration
    epsilon_start: float = 0.3
    epsilon_end: float = 0.1
    epsilon_decay: float = 0.001
    epsilon_decay_mode: str = "additive"
    max_training_episodes: int = 1_000

    # Controller
    decision_interval: int = 1
    reset_delay: int = 10
    fallback: str = "path_to_food"

    # Headless training loop
    max_episodes: int = 1_000
    max_steps_per_episode: int = 2_000
    log_interval: int = 100
    seed: int | None = None

    # Rewards
    reward: RewardConfig = field(default_factory=RewardConfig)

    def __post_init__(self) -> None:
        _check_choice("boundary", self.boundary, _BOUNDARIES)
        _check_choice("initial_direction", self.initial_direction, _DIRECTIONS)
        _check_choice("state encoding mode", self.state_encoding, _ENCODINGS)
        _check_choice("q_init", self.q_init, _Q_INITS)
        _check_choice("epsilon_decay_mode", self.epsilon_decay_mode, _DECAY_MODES)
        _check_choice("fallback", self.fallback, _FALLBACKS)
        if self.grid_width < 4 or self.grid_height < 4:
            raise ValueError("grid_width and grid_height must each be at least 4.")
        if self.initial_snake_length < 2:
            raise ValueError("initial_snake_length must be at least 2.")
        playable = min(self.grid_width, self.grid_height) // 2
        if self.boundary == "walled":
            playable -= 1
        if self.initial_snake_length > playable:
            raise ValueError(
                "initial_snake_length does not fit behind the centre of the "
                "configured grid; increase grid size or reduce length.",
            )
        if not 0.0 <= self.learning_rate <= 1.0:
            raise ValueError("learning_rate must be in [0, 1].")
        if not 0.0 <= self.gamma <= 1.0:
            raise ValueError("gamma must be in [0, 1].")
        if not 0.0 <= self.epsilon_end <= self.epsilon_start <= 1.0:
            raise ValueError("Require 0 <= epsilon_end <= epsilon_start <= 1.")
        if self.epsilon_decay < 0:
            raise ValueError("epsilon_decay must be non-negative.")
        if self.epsilon_decay_mode == "multiplicative" and self.epsilon_decay > 1:
            raise ValueError("Multiplicative epsilon_decay must be in [0, 1].")
        if self.decision_interval < 1:
            raise ValueError("decision_interval must be at least 1.")
        if self.reset_delay < 0:
            raise ValueError("reset_delay must be non-negative.")
        if self.max_training_episodes < 0:
            raise ValueError("max_training_episodes must be non-negative.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> TrainingConfig:
        """Rebuild a config from :meth:`to_dict` output."""
        data = dict(raw)
        reward_data = data.pop("reward", {})
        data["reward"] = RewardConfig(**reward_data)
        return cls(**data)

    @classmethod
    def load(cls, path: str | Path) -> TrainingConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
