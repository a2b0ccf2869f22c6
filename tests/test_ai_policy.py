"""Tests for epsilon-greedy selection and the exploration schedule."""

import numpy as np
import pytest

from q_snake.ai.policy import EpsilonGreedyPolicy, ExplorationSchedule

# Chi-square critical value for 3 degrees of freedom at p = 0.001.
_CHI2_CRIT_DF3 = 16.27


def _chi_square(counts: np.ndarray) -> float:
    expected = counts.sum() / len(counts)
    return float(((counts - expected) ** 2 / expected).sum())


def _counts(policy, q_values, epsilon, trials=8000) -> np.ndarray:
    counts = np.zeros(4, dtype=np.int64)
    for _ in range(trials):
        counts[policy.choose_action(q_values, epsilon)] += 1
    return counts


class TestEpsilonGreedy:
    def test_full_exploration_is_uniform(self):
        policy = EpsilonGreedyPolicy(np.random.default_rng(0))
        q = np.array([5.0, 0.0, 0.0, 0.0])
        counts = _counts(policy, q, epsilon=1.0)
        assert _chi_square(counts) < _CHI2_CRIT_DF3

    def test_greedy_single_maximum(self):
        policy = EpsilonGreedyPolicy(np.random.default_rng(0))
        q = np.array([0.1, 0.7, -0.2, 0.3])
        assert all(policy.choose_action(q, 0.0) == 1 for _ in range(200))

    def test_ties_are_broken_fairly(self):
        policy = EpsilonGreedyPolicy(np.random.default_rng(1))
        q = np.array([1.0, -1.0, 1.0, 1.0])
        counts = _counts(policy, q, epsilon=0.0, trials=9000)
        assert counts[1] == 0
        tied = counts[[0, 2, 3]]
        expected = tied.sum() / 3
        chi2 = float(((tied - expected) ** 2 / expected).sum())
        # 2 degrees of freedom, p = 0.001.
        assert chi2 < 13.82

    def test_all_zero_row_is_uniform(self):
        policy = EpsilonGreedyPolicy(np.random.default_rng(2))
        counts = _counts(policy, np.zeros(4), epsilon=0.0)
        assert _chi_square(counts) < _CHI2_CRIT_DF3

    def test_near_ties_within_tolerance(self):
        policy = EpsilonGreedyPolicy(np.random.default_rng(3), tie_tolerance=1e-6)
        q = np.array([1.0, 1.0 - 1e-9, 0.0, 0.0])
        seen = {policy.choose_action(q, 0.0) for _ in range(200)}
        assert seen == {0, 1}

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValueError, match="tie_tolerance"):
            EpsilonGreedyPolicy(tie_tolerance=-1.0)


class TestExplorationSchedule:
    def test_additive_decay_to_floor(self):
        sched = ExplorationSchedule(start=0.3, end=0.1, decay=0.05)
        values = [sched.step() for _ in range(10)]
        assert values[0] == pytest.approx(0.25)
        assert values[-1] == pytest.approx(0.1)
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_multiplicative_decay(self):
        sched = ExplorationSchedule(start=1.0, end=0.05, decay=0.5, mode="multiplicative")
        assert sched.step() == pytest.approx(0.5)
        assert sched.step() == pytest.approx(0.25)
        for _ in range(20):
            sched.step()
        assert sched.value == pytest.approx(0.05)

    def test_reset(self):
        sched = ExplorationSchedule(start=0.3, end=0.1, decay=0.1)
        sched.step()
        sched.reset()
        assert sched.value == 0.3

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            ExplorationSchedule(start=0.1, end=0.2)
        with pytest.raises(ValueError, match="mode"):
            ExplorationSchedule(mode="cosine")
