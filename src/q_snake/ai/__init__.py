"""Tabular Q-learning agent for Q-Snake.

The trainer and benchmark depend on :mod:`q_snake.engine`; import them
from :mod:`q_snake.ai.train` and :mod:`q_snake.ai.benchmark`.
"""

from q_snake.ai.agent import QLearningAgent
from q_snake.ai.config import RewardConfig, TrainingConfig
from q_snake.ai.policy import EpsilonGreedyPolicy, ExplorationSchedule
from q_snake.ai.q_table import QTable
from q_snake.ai.reward import compute_reward
from q_snake.ai.safety import FallbackStrategy, SafetyFallback, bfs_path
from q_snake.ai.state import encode_state, num_states

__all__ = [
    "EpsilonGreedyPolicy",
    "ExplorationSchedule",
    "FallbackStrategy",
    "QLearningAgent",
    "QTable",
    "RewardConfig",
    "SafetyFallback",
    "TrainingConfig",
    "bfs_path",
    "compute_reward",
    "encode_state",
    "num_states",
]
