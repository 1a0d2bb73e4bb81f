# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Unit tests for the Gymnasium environment adapter.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
from gymnasium.wrappers import RecordVideo

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gym_env import GymEnvironment


class TestDiscreteEnvironment:
    """Tests using CartPole (discrete actions)."""

    def test_spaces(self):
        env = GymEnvironment("CartPole-v1", seed=0)

        assert env.state_dim == 4
        assert env.is_discrete
        assert env.num_actions == 2
        with pytest.raises(ValueError):
            env.action_dim
        env.close()

    def test_reset(self):
        env = GymEnvironment("CartPole-v1", seed=0)
        observation = env.reset()

        assert observation.shape == (4,)
        assert observation.dtype == np.float32
        assert env.observation is observation
        assert env.done is False
        env.close()

    def test_step_updates_attributes(self):
        env = GymEnvironment("CartPole-v1", seed=0)
        env.reset()

        observation, reward, done = env.step(np.int64(1))

        assert observation is env.observation
        assert reward == env.reward == 1.0
        assert done == env.done
        env.close()

    def test_episode_reaches_done(self):
        """Pushing in one direction topples the pole."""
        env = GymEnvironment("CartPole-v1", seed=0)
        env.reset()

        steps = 0
        while not env.done:
            env.step(0)
            steps += 1
            assert steps < 500

        env.reset()
        assert env.done is False
        env.close()

    def test_seed_reproducible(self):
        first = GymEnvironment("CartPole-v1", seed=3)
        second = GymEnvironment("CartPole-v1", seed=3)

        np.testing.assert_array_equal(first.reset(), second.reset())
        first.close()
        second.close()


class TestVideoRecording:
    """Tests for recording episodes to video."""

    def test_recorder_wraps_environment(self, tmp_path):
        env = GymEnvironment("CartPole-v1", seed=0, video_dir=str(tmp_path / "videos"))

        assert isinstance(env.env, RecordVideo)
        assert env.env.render_mode == "rgb_array"
        assert env.video_dir == str(tmp_path / "videos")
        env.close()

    def test_no_recorder_by_default(self):
        env = GymEnvironment("CartPole-v1")
        assert not isinstance(env.env, RecordVideo)
        env.close()

    def test_episode_written_to_disk(self, tmp_path):
        video_dir = tmp_path / "videos"
        env = GymEnvironment("CartPole-v1", seed=0, max_episode_steps=5, video_dir=str(video_dir))
        env.reset()
        while not env.done:
            env.step(0)
        env.close()

        assert list(video_dir.glob("*.mp4"))


class TestContinuousEnvironment:
    """Tests using MountainCarContinuous (continuous actions)."""

    def test_spaces(self):
        env = GymEnvironment("MountainCarContinuous-v0")

        assert env.state_dim == 2
        assert not env.is_discrete
        assert env.action_dim == 1
        with pytest.raises(ValueError):
            env.num_actions
        env.close()

    def test_action_scaled_and_clipped(self):
        env = GymEnvironment("MountainCarContinuous-v0", action_scale=2.0)

        np.testing.assert_allclose(env._to_env_action(np.array([0.25])), [0.5])
        np.testing.assert_allclose(env._to_env_action(np.array([0.9])), [1.0])
        np.testing.assert_allclose(env._to_env_action([-0.8]), [-1.0])
        env.close()

    def test_time_limit_sets_done(self):
        """Truncation by the time limit counts as done."""
        env = GymEnvironment("MountainCarContinuous-v0", seed=0, max_episode_steps=5)
        env.reset()

        for _ in range(4):
            _, _, done = env.step(np.array([0.0], dtype=np.float32))
            assert not done
        _, _, done = env.step(np.array([0.0], dtype=np.float32))
        assert done
        env.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
