"""Performance benchmarking utilities for simulation throughput."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from q_snake.ai.config import TrainingConfig
from q_snake.ai.train import Trainer

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    state_encoding: str
    total_episodes: int
    total_ticks: int
    wall_time_seconds: float
    episodes_per_second: float
    ticks_per_second: float

    def summary(self) -> str:
        return (
            f"Benchmark: {self.state_encoding} encoding, "
            f"{self.total_episodes} episodes, {self.total_ticks} ticks in "
            f"{self.wall_time_seconds:.2f}s | "
            f"{self.episodes_per_second:.1f} episodes/s, "
            f"{self.ticks_per_second:.1f} ticks/s"
        )


def benchmark_throughput(
    *,
    num_episodes: int = 100,
    grid_width: int = 20,
    grid_height: int = 20,
    max_steps: int = 500,
    state_encoding: str = "full",
    seed: int | None = 42,
) -> BenchmarkResult:
    """Measure learning-loop throughput.

    Runs *num_episodes* training episodes (policy, TD update, fallback and
    movement on every tick, reset delay disabled) and reports
    episodes/second and ticks/second.
    """
    if num_episodes < 1:
        raise ValueError("num_episodes must be at least 1.")
    config = TrainingConfig(
        grid_width=grid_width,
        grid_height=grid_height,
        max_steps_per_episode=max_steps,
        max_training_episodes=num_episodes,
        reset_delay=0,
        state_encoding=state_encoding,
        seed=seed,
    )
    trainer = Trainer(config)

    start = time.perf_counter()
    for _ in range(num_episodes):
        trainer.run_episode()
    elapsed = time.perf_counter() - start

    result = BenchmarkResult(
        state_encoding=state_encoding,
        total_episodes=trainer.total_episodes,
        total_ticks=trainer.total_steps,
        wall_time_seconds=elapsed,
        episodes_per_second=trainer.total_episodes / max(elapsed, 1e-9),
        ticks_per_second=trainer.total_steps / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
