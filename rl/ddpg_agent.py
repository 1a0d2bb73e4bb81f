# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
DDPG agent for continuous action spaces.

Actor/critic with Polyak-averaged target networks and Ornstein-Uhlenbeck
exploration noise. Actions are produced in [-1, 1]; scaling to the
environment's range is the environment adapter's job.
"""

import logging
from typing import Optional

import numpy as np
import torch
import torch.nn.functional as F
import torch.optim as optim

from rl.networks import ActorNetwork, CriticNetwork
from rl.policy import OUNoise
from rl.replay_buffer import ReplayBuffer


logger = logging.getLogger(__name__)


class DDPGAgent:
    """Deep Deterministic Policy Gradient agent."""

    def __init__(
        self,
        state_dim: int,
        action_dim: int,
        replay: ReplayBuffer,
        noise: Optional[OUNoise] = None,
        device: str = 'cuda' if torch.cuda.is_available() else 'cpu',
        actor_learning_rate: float = 0.001,
        critic_learning_rate: float = 0.001,
        hidden_size: int = 128,
        init_std: float = 0.01,
        tau: float = 0.005,
        target_network_sync_interval: int = 1,
    ):
        """
        Initialize DDPG agent.

        Args:
            state_dim: Size of the observation vector
            action_dim: Size of the action vector
            replay: Replay store the agent samples its updates from
            noise: Exploration noise process (default OUNoise(action_dim))
            device: Device to run on ('cuda' or 'cpu')
            actor_learning_rate: Learning rate of the actor optimizer
            critic_learning_rate: Learning rate of the critic optimizer
            hidden_size: Width of the hidden layers
            init_std: Standard deviation of the Gaussian weight initialization
            tau: Polyak averaging coefficient for target networks
            target_network_sync_interval: Updates between target network syncs
        """
        self.state_dim = state_dim
        self.action_dim = action_dim
        self.device = torch.device(device)

        self.replay = replay
        self.noise = noise if noise is not None else OUNoise(action_dim)
        self.tau = tau
        self.target_network_sync_interval = target_network_sync_interval

        self.actor = ActorNetwork(state_dim, action_dim, hidden_size, init_std).to(self.device)
        self.target_actor = ActorNetwork(state_dim, action_dim, hidden_size, init_std).to(self.device)
        self.critic = CriticNetwork(state_dim, action_dim, hidden_size, init_std).to(self.device)
        self.target_critic = CriticNetwork(state_dim, action_dim, hidden_size, init_std).to(self.device)
        self.target_actor.load_state_dict(self.actor.state_dict())
        self.target_critic.load_state_dict(self.critic.state_dict())

        self.actor_optimizer = optim.Adam(self.actor.parameters(), lr=actor_learning_rate)
        self.critic_optimizer = optim.Adam(self.critic.parameters(), lr=critic_learning_rate)

        self.deterministic = False
        self.total_steps = 0
        self.updates = 0
        self.state: Optional[np.ndarray] = None
        self.action: Optional[np.ndarray] = None

        logger.info(f"DDPG Agent initialized on {device}")

    def select_action(self) -> np.ndarray:
        """Actor output for the current state, plus noise unless deterministic."""
        if self.state is None:
            raise ValueError("Agent state must be set before selecting an action")

        state = torch.as_tensor(self.state, dtype=torch.float32, device=self.device).unsqueeze(0)
        with torch.no_grad():
            action = self.actor(state).cpu().numpy()[0]

        if not self.deterministic:
            action = action + self.noise.sample()

        self.action = np.clip(action, -1.0, 1.0).astype(np.float32)
        return self.action

    def update(self) -> Optional[float]:
        """
        Perform one actor/critic update from a replayed batch.

        Returns:
            Critic loss if training occurred, None otherwise
        """
        if not self.replay.is_ready():
            return None

        states, actions, rewards, next_states, dones, discounts = self.replay.sample()

        states = torch.from_numpy(states).float().to(self.device)
        actions = torch.from_numpy(actions).float().to(self.device).view(-1, self.action_dim)
        rewards = torch.from_numpy(rewards).float().to(self.device).unsqueeze(1)
        next_states = torch.from_numpy(next_states).float().to(self.device)
        dones = torch.from_numpy(dones).float().to(self.device).unsqueeze(1)
        discounts = torch.from_numpy(discounts).float().to(self.device).unsqueeze(1)

        # Critic
        with torch.no_grad():
            next_q_values = self.target_critic(next_states, self.target_actor(next_states))
            target_q_values = rewards + discounts * (1.0 - dones) * next_q_values

        critic_loss = F.mse_loss(self.critic(states, actions), target_q_values)
        self.critic_optimizer.zero_grad()
        critic_loss.backward()
        self.critic_optimizer.step()

        # Actor
        actor_loss = -self.critic(states, self.actor(states)).mean()
        self.actor_optimizer.zero_grad()
        actor_loss.backward()
        self.actor_optimizer.step()

        self.updates += 1
        if self.updates % self.target_network_sync_interval == 0:
            self.soft_update(self.actor, self.target_actor)
            self.soft_update(self.critic, self.target_critic)

        return critic_loss.item()

    def soft_update(self, source: torch.nn.Module, target: torch.nn.Module):
        """target = tau * source + (1 - tau) * target"""
        with torch.no_grad():
            for target_param, param in zip(target.parameters(), source.parameters()):
                target_param.mul_(1.0 - self.tau).add_(param, alpha=self.tau)

    def save(self, filepath: str):
        """Save agent state to file."""
        torch.save({
            'actor_state_dict': self.actor.state_dict(),
            'critic_state_dict': self.critic.state_dict(),
            'target_actor_state_dict': self.target_actor.state_dict(),
            'target_critic_state_dict': self.target_critic.state_dict(),
            'actor_optimizer_state_dict': self.actor_optimizer.state_dict(),
            'critic_optimizer_state_dict': self.critic_optimizer.state_dict(),
            'total_steps': self.total_steps,
            'updates': self.updates,
        }, filepath)
        logger.info(f"Agent saved to {filepath}")

    def load(self, filepath: str):
        """Load agent state from file and restart the noise process."""
        checkpoint = torch.load(filepath, map_location=self.device)
        self.actor.load_state_dict(checkpoint['actor_state_dict'])
        self.critic.load_state_dict(checkpoint['critic_state_dict'])
        self.target_actor.load_state_dict(checkpoint['target_actor_state_dict'])
        self.target_critic.load_state_dict(checkpoint['target_critic_state_dict'])
        self.actor_optimizer.load_state_dict(checkpoint['actor_optimizer_state_dict'])
        self.critic_optimizer.load_state_dict(checkpoint['critic_optimizer_state_dict'])
        self.total_steps = checkpoint['total_steps']
        self.updates = checkpoint['updates']
        self.noise.reset()
        logger.info(f"Agent loaded from {filepath}")
