"""Headless training loop with rolling metrics logging."""

from __future__ import annotations

import logging
import time
from collections import deque

import numpy as np

from q_snake.ai.agent import QLearningAgent
from q_snake.ai.config import TrainingConfig
from q_snake.engine import EpisodeController, Phase

logger = logging.getLogger(__name__)


class Trainer:
    """Runs the episode controller as fast as possible, without rendering.

    Each episode ticks the controller until it crashes, fills the board,
    or reaches ``max_steps_per_episode`` (then a forced reset ends it).
    The reset delay is drained before the next episode starts.
    """

    def __init__(self, config: TrainingConfig | None = None) -> None:
        self.config = config or TrainingConfig()
        self.controller = EpisodeController(self.config)

        # Rolling metrics.
        self.episode_scores: deque[int] = deque(maxlen=100)
        self.episode_lengths: deque[int] = deque(maxlen=100)
        self.episode_crashes: deque[int] = deque(maxlen=100)
        self.fallback_uses = 0
        self.best_score = 0
        self.total_steps = 0
        self.total_episodes = 0

    @property
    def agent(self) -> QLearningAgent:
        return self.controller.agent

    def run_episode(self) -> dict:
        """Run a single episode and return summary metrics."""
        cfg = self.config
        controller = self.controller
        while controller.phase == Phase.RESETTING:
            controller.tick()

        steps = 0
        while True:
            result = controller.tick()
            steps += 1
            self.total_steps += 1
            if result.used_fallback:
                self.fallback_uses += 1
            if result.episode_over:
                break
            if steps >= cfg.max_steps_per_episode:
                result = controller.force_reset()
                break

        score = result.episode_score or 0
        self.episode_scores.append(score)
        self.episode_lengths.append(steps)
        self.episode_crashes.append(1 if result.crashed else 0)
        self.best_score = max(self.best_score, score)
        self.total_episodes += 1

        return {
            "episode": self.total_episodes,
            "steps": steps,
            "score": score,
            "crashed": result.crashed,
            "board_full": result.board_full,
            "epsilon": controller.exploration_rate,
        }

    def train(self) -> dict:
        """Run the full training loop and return final summary metrics."""
        cfg = self.config
        logger.info(
            "Starting Q-learning: %d episodes on a %dx%d grid "
            "(training for the first %d).",
            cfg.max_episodes, cfg.grid_width, cfg.grid_height,
            cfg.max_training_episodes,
        )
        start = time.monotonic()

        for ep in range(1, cfg.max_episodes + 1):
            self.run_episode()
            if ep % cfg.log_interval == 0 or ep == cfg.max_episodes:
                self._log_metrics(ep, start)

        summary = self.summary()
        logger.info(
            "Training complete: %d episodes, %d total steps, best score %d.",
            self.total_episodes, self.total_steps, self.best_score,
        )
        return summary

    def summary(self) -> dict:
        return {
            "episodes": self.total_episodes,
            "steps": self.total_steps,
            "best_score": self.best_score,
            "mean_score": (
                float(np.mean(self.episode_scores))
                if self.episode_scores else 0.0
            ),
            "epsilon": self.controller.exploration_rate,
            "fallback_uses": self.fallback_uses,
        }

    def _log_metrics(self, ep: int, start: float) -> None:
        elapsed = time.monotonic() - start
        avg_score = (
            float(np.mean(self.episode_scores))
            if self.episode_scores else 0.0
        )
        avg_length = (
            float(np.mean(self.episode_lengths))
            if self.episode_lengths else 0.0
        )
        crash_rate = (
            float(np.mean(self.episode_crashes))
            if self.episode_crashes else 0.0
        )
        logger.info(
            "Episode %d | score=%.2f | best=%d | length=%.1f "
            "| crash_rate=%.2f | eps=%.3f | %.1fs",
            ep, avg_score, self.best_score, avg_length,
            crash_rate, self.controller.exploration_rate, elapsed,
        )
