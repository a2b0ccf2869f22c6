"""Tests for the tabular Q-learning agent."""

import numpy as np
import pytest

from q_snake.ai.agent import QLearningAgent
from q_snake.ai.config import TrainingConfig
from q_snake.ai.state import OUT_OF_RANGE_KEY


def _small_config(**overrides) -> TrainingConfig:
    """Training config with a small board for fast tests."""
    defaults = dict(
        grid_width=8,
        grid_height=8,
        state_encoding="position",
        epsilon_start=0.3,
        epsilon_end=0.1,
        epsilon_decay=0.05,
        max_training_episodes=10,
        seed=0,
    )
    defaults.update(overrides)
    return TrainingConfig(**defaults)


class TestAgentInit:
    def test_table_sized_for_grid(self):
        agent = QLearningAgent(_small_config())
        assert agent.q_table.num_states == 1 + 8 * 8 * 4

    def test_full_encoding_table(self):
        agent = QLearningAgent(_small_config(state_encoding="full"))
        assert agent.q_table.num_states == 1 + 8 * 8 * 4 * 256

    def test_starts_training(self):
        agent = QLearningAgent(_small_config())
        assert agent.training
        assert agent.episode == 0
        assert agent.exploration_rate == pytest.approx(0.3)


class TestUpdateQ:
    def test_td_update_formula(self):
        agent = QLearningAgent(_small_config(learning_rate=0.1, gamma=0.9))
        agent.q_table.update(5, 2, 1.0)
        agent.q_table.update(9, 0, 2.0)
        new = agent.update_q(5, 2, 9, reward=0.5)
        assert new == pytest.approx(0.9 * 1.0 + 0.1 * (0.5 + 0.9 * 2.0))
        assert agent.q_table.get(5)[2] == pytest.approx(new)
        assert agent.total_updates == 1

    def test_zero_rate_and_reward_is_idempotent(self):
        agent = QLearningAgent(_small_config(learning_rate=0.0))
        agent.q_table.update(5, 1, 0.7)
        before = agent.q_table.values.copy()
        for _ in range(5):
            agent.update_q(5, 1, 6, reward=0.0)
        np.testing.assert_array_equal(agent.q_table.values, before)

    def test_positive_reward_is_monotone(self):
        agent = QLearningAgent(_small_config(gamma=0.0))
        values = [agent.update_q(5, 3, 6, reward=1.0) for _ in range(30)]
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert values[-1] <= 1.0

    def test_terminal_bootstraps_from_zero(self):
        agent = QLearningAgent(_small_config(learning_rate=0.1, gamma=0.9))
        agent.q_table.update(5, 0, 0.4)
        new = agent.update_q(5, 0, OUT_OF_RANGE_KEY, reward=-10.0)
        assert new == pytest.approx(0.9 * 0.4 + 0.1 * -10.0)
        assert np.all(agent.q_table.get(OUT_OF_RANGE_KEY) == 0.0)


class TestEpisodes:
    def test_epsilon_decays_per_episode(self):
        agent = QLearningAgent(_small_config())
        agent.end_episode()
        assert agent.exploration_rate == pytest.approx(0.25)
        for _ in range(3):
            agent.end_episode()
        assert agent.exploration_rate == pytest.approx(0.1)

    def test_training_stops_at_cap(self):
        agent = QLearningAgent(_small_config(max_training_episodes=3))
        for _ in range(3):
            assert agent.training
            agent.end_episode()
        assert not agent.training
        rate = agent.exploration_rate
        agent.end_episode()
        assert agent.episode == 4
        assert agent.exploration_rate == rate

    def test_zero_training_episodes(self):
        agent = QLearningAgent(_small_config(max_training_episodes=0))
        assert not agent.training

    def test_greedy_after_training(self):
        agent = QLearningAgent(_small_config(max_training_episodes=0))
        agent.q_table.update(7, 2, 1.0)
        assert all(agent.choose_action(7) == 2 for _ in range(200))

    def test_explicit_epsilon_overrides_schedule(self):
        agent = QLearningAgent(_small_config())
        agent.q_table.update(7, 1, 1.0)
        assert all(agent.choose_action(7, epsilon=0.0) == 1 for _ in range(100))
