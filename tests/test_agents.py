# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Unit tests for DQN and DDPG agents and their exploration strategies.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
import torch

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rl.ddpg_agent import DDPGAgent
from rl.dqn_agent import DQNAgent
from rl.networks import ActorNetwork, CriticNetwork, DuelingQNetwork, QNetwork
from rl.policy import GreedyPolicy, OUNoise
from rl.replay_buffer import PrioritizedReplayBuffer, ReplayBuffer


STATE_DIM = 4


def fill_discrete(replay, count, num_actions=2):
    rng = np.random.default_rng(0)
    for i in range(count):
        state = rng.normal(size=STATE_DIM).astype(np.float32)
        next_state = rng.normal(size=STATE_DIM).astype(np.float32)
        replay.store(state, i % num_actions, 1.0, next_state, i % 7 == 6, 0.99)


def fill_continuous(replay, count, action_dim=1):
    rng = np.random.default_rng(0)
    for i in range(count):
        state = rng.normal(size=STATE_DIM).astype(np.float32)
        next_state = rng.normal(size=STATE_DIM).astype(np.float32)
        action = rng.uniform(-1, 1, size=action_dim).astype(np.float32)
        replay.store(state, action, -0.1, next_state, False, 0.99)


def params_equal(a, b):
    return all(torch.equal(p, q) for p, q in zip(a.parameters(), b.parameters()))


class TestGreedyPolicy:
    """Tests for epsilon-greedy exploration."""

    def test_anneal_reaches_floor(self):
        policy = GreedyPolicy(initial_epsilon=1.0, anneal_interval=10, min_epsilon=0.1)
        for _ in range(5):
            policy.anneal()
        assert policy.epsilon == pytest.approx(0.55)

        for _ in range(20):
            policy.anneal()
        assert policy.epsilon == pytest.approx(0.1)

    def test_deterministic_is_greedy(self):
        policy = GreedyPolicy(initial_epsilon=1.0)
        values = torch.tensor([[0.0, 5.0, 1.0]])
        for _ in range(20):
            assert policy.sample(values, deterministic=True) == 1

    def test_exploring_stays_in_range(self):
        policy = GreedyPolicy(initial_epsilon=1.0, anneal_interval=1, min_epsilon=1.0)
        values = torch.zeros(1, 3)
        actions = {policy.sample(values) for _ in range(200)}
        assert actions <= {0, 1, 2}
        assert len(actions) > 1

    def test_invalid_anneal_interval(self):
        with pytest.raises(ValueError):
            GreedyPolicy(anneal_interval=0)


class TestOUNoise:
    """Tests for Ornstein-Uhlenbeck noise."""

    def test_sample_shape(self):
        noise = OUNoise(size=3)
        assert noise.sample().shape == (3,)

    def test_full_reversion_without_diffusion(self):
        """theta=1 with no diffusion snaps straight back to mu."""
        noise = OUNoise(size=2, mu=0.5, theta=1.0, sigma=0.0)
        noise.state = np.array([3.0, -3.0], dtype=np.float32)
        np.testing.assert_allclose(noise.sample(), [0.5, 0.5])

    def test_reset(self):
        noise = OUNoise(size=1, mu=0.0, theta=0.15, sigma=0.5)
        for _ in range(10):
            noise.sample()
        noise.reset()
        np.testing.assert_array_equal(noise.state, [0.0])


class TestNetworks:
    """Tests for network output shapes."""

    def test_q_networks(self):
        x = torch.zeros(5, STATE_DIM)
        assert QNetwork(STATE_DIM, 3)(x).shape == (5, 3)
        assert DuelingQNetwork(STATE_DIM, 3)(x).shape == (5, 3)

    def test_actor_bounded(self):
        actor = ActorNetwork(STATE_DIM, 2, init_std=1.0)
        out = actor(torch.randn(8, STATE_DIM) * 100)
        assert out.shape == (8, 2)
        assert out.abs().max() <= 1.0

    def test_critic(self):
        critic = CriticNetwork(STATE_DIM, 2)
        assert critic(torch.zeros(6, STATE_DIM), torch.zeros(6, 2)).shape == (6, 1)


class TestDQNAgent:
    """Tests for the DQN agent."""

    def make_agent(self, replay=None, **kwargs):
        replay = replay if replay is not None else ReplayBuffer(batch_size=8, capacity=100)
        return DQNAgent(STATE_DIM, 2, replay, device='cpu', **kwargs)

    def test_select_action(self):
        agent = self.make_agent()
        agent.state = np.zeros(STATE_DIM, dtype=np.float32)

        action = agent.select_action()

        assert action in (0, 1)
        assert agent.action == action

    def test_select_action_requires_state(self):
        agent = self.make_agent()
        with pytest.raises(ValueError):
            agent.select_action()

    def test_deterministic_action_is_greedy(self):
        agent = self.make_agent()
        agent.deterministic = True
        agent.state = np.ones(STATE_DIM, dtype=np.float32)

        with torch.no_grad():
            expected = agent.policy_net(torch.ones(1, STATE_DIM)).argmax(dim=1).item()
        assert all(agent.select_action() == expected for _ in range(10))

    def test_update_waits_for_batch(self):
        replay = ReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay)
        fill_discrete(replay, 5)

        assert agent.update() is None
        assert agent.updates == 0

    def test_update_returns_loss_and_anneals(self):
        replay = ReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay)
        fill_discrete(replay, 20)
        epsilon = agent.policy.epsilon

        loss = agent.update()

        assert isinstance(loss, float)
        assert agent.updates == 1
        assert agent.policy.epsilon < epsilon

    def test_target_network_sync(self):
        replay = ReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay, target_network_sync_interval=2, learning_rate=0.01)
        fill_discrete(replay, 20)

        agent.update()
        assert not params_equal(agent.policy_net, agent.target_net)

        agent.update()
        assert params_equal(agent.policy_net, agent.target_net)

    def test_double_dueling_prioritized(self):
        replay = PrioritizedReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay, double_q_learning=True, use_dueling=True)
        fill_discrete(replay, 20)
        before = replay.priorities[:20].copy()

        assert isinstance(agent.update(), float)
        assert not np.array_equal(before, replay.priorities[:20])

    def test_save_load(self, tmp_path):
        replay = ReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay)
        fill_discrete(replay, 20)
        agent.update()
        agent.total_steps = 42
        path = tmp_path / "dqn.pt"

        agent.save(str(path))
        restored = self.make_agent()
        restored.load(str(path))

        assert restored.total_steps == 42
        assert restored.updates == 1
        assert restored.policy.epsilon == pytest.approx(agent.policy.epsilon)
        assert params_equal(agent.policy_net, restored.policy_net)


class TestDDPGAgent:
    """Tests for the DDPG agent."""

    def make_agent(self, replay=None, **kwargs):
        replay = replay if replay is not None else ReplayBuffer(batch_size=8, capacity=100)
        return DDPGAgent(STATE_DIM, 1, replay, device='cpu', **kwargs)

    def test_select_action_bounded(self):
        agent = self.make_agent(noise=OUNoise(1, theta=0.15, sigma=5.0))
        agent.state = np.zeros(STATE_DIM, dtype=np.float32)

        for _ in range(20):
            action = agent.select_action()
            assert action.shape == (1,)
            assert -1.0 <= action[0] <= 1.0

    def test_deterministic_has_no_noise(self):
        agent = self.make_agent(noise=OUNoise(1, sigma=1.0))
        agent.deterministic = True
        agent.state = np.ones(STATE_DIM, dtype=np.float32)

        first = agent.select_action().copy()
        second = agent.select_action()
        np.testing.assert_array_equal(first, second)

    def test_update_waits_for_batch(self):
        replay = ReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay)
        fill_continuous(replay, 3)
        assert agent.update() is None

    def test_update_with_full_sync(self):
        """tau=1 copies the online networks into the targets."""
        replay = ReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay, tau=1.0)
        fill_continuous(replay, 20)

        loss = agent.update()

        assert isinstance(loss, float)
        assert params_equal(agent.actor, agent.target_actor)
        assert params_equal(agent.critic, agent.target_critic)

    def test_soft_update_moves_targets(self):
        replay = ReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay, tau=0.5, actor_learning_rate=0.1, critic_learning_rate=0.1)
        fill_continuous(replay, 20)
        target_before = [p.clone() for p in agent.target_critic.parameters()]

        agent.update()

        assert any(not torch.equal(a, b) for a, b in zip(target_before, agent.target_critic.parameters()))
        assert not params_equal(agent.critic, agent.target_critic)

    def test_save_load(self, tmp_path):
        replay = ReplayBuffer(batch_size=8, capacity=100)
        agent = self.make_agent(replay)
        fill_continuous(replay, 20)
        agent.update()
        agent.total_steps = 7
        path = tmp_path / "ddpg.pt"

        agent.save(str(path))
        restored = self.make_agent()
        restored.load(str(path))

        assert restored.total_steps == 7
        assert params_equal(agent.actor, restored.actor)
        assert params_equal(agent.target_critic, restored.target_critic)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
