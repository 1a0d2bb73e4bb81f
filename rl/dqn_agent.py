# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
DQN agent for discrete action spaces.

Implements (Double) DQN with a target network, experience replay and
epsilon-greedy exploration. The agent is driven from the outside: the caller
sets `state`, asks for an action and triggers learning updates.
"""

import numpy as np
import torch
import torch.optim as optim
from typing import Optional, Union
import logging

from rl.networks import QNetwork, DuelingQNetwork
from rl.policy import GreedyPolicy
from rl.replay_buffer import ReplayBuffer, PrioritizedReplayBuffer


logger = logging.getLogger(__name__)


class DQNAgent:
    """
    DQN agent.

    Key features:
    - Double DQN (optional) to reduce overestimation
    - Target network synced every `target_network_sync_interval` updates
    - Uniform or prioritized experience replay
    - Epsilon-greedy exploration annealed once learning starts
    """

    def __init__(
        self,
        state_dim: int,
        num_actions: int,
        replay: Union[ReplayBuffer, PrioritizedReplayBuffer],
        policy: Optional[GreedyPolicy] = None,
        device: str = 'cuda' if torch.cuda.is_available() else 'cpu',
        learning_rate: float = 0.001,
        hidden_size: int = 128,
        init_std: float = 1.0,
        target_network_sync_interval: int = 100,
        double_q_learning: bool = False,
        use_dueling: bool = False,
        max_grad_norm: float = 10.0,
    ):
        """
        Initialize DQN agent.

        Args:
            state_dim: Size of the observation vector
            num_actions: Number of discrete actions
            replay: Replay store the agent samples its updates from
            policy: Exploration policy (default GreedyPolicy(1.0, 2000, 0.1))
            device: Device to run on ('cuda' or 'cpu')
            learning_rate: Learning rate for optimizer
            hidden_size: Width of the Q-network hidden layer
            init_std: Standard deviation of the Gaussian weight initialization
            target_network_sync_interval: Updates between target network syncs
            double_q_learning: Use Double DQN targets
            use_dueling: Use the dueling architecture
            max_grad_norm: Gradient clipping threshold
        """
        self.state_dim = state_dim
        self.num_actions = num_actions
        self.device = torch.device(device)

        self.replay = replay
        self.policy = policy if policy is not None else GreedyPolicy()
        self.target_network_sync_interval = target_network_sync_interval
        self.double_q_learning = double_q_learning
        self.max_grad_norm = max_grad_norm
        self.use_prioritized_replay = isinstance(replay, PrioritizedReplayBuffer)

        # Networks
        NetworkClass = DuelingQNetwork if use_dueling else QNetwork
        self.policy_net = NetworkClass(
            state_dim, num_actions, hidden_size=hidden_size, init_std=init_std
        ).to(self.device)
        self.target_net = NetworkClass(
            state_dim, num_actions, hidden_size=hidden_size, init_std=init_std
        ).to(self.device)
        self.target_net.load_state_dict(self.policy_net.state_dict())
        self.target_net.eval()

        # Optimizer
        self.optimizer = optim.Adam(self.policy_net.parameters(), lr=learning_rate)

        # Driver-facing state
        self.deterministic = False
        self.total_steps = 0
        self.updates = 0
        self.state: Optional[np.ndarray] = None
        self.action: Optional[int] = None

        logger.info(f"DQN Agent initialized on {device}")
        logger.info(f"Network: {NetworkClass.__name__}")
        logger.info(f"Double DQN: {double_q_learning}")
        logger.info(f"Prioritized Replay: {self.use_prioritized_replay}")

    def select_action(self) -> int:
        """
        Select an action for the current state.

        Exploring mode samples from the epsilon-greedy policy, deterministic
        mode always takes the greedy action.

        Returns:
            Selected action index
        """
        if self.state is None:
            raise ValueError("Agent state must be set before selecting an action")

        state = torch.as_tensor(self.state, dtype=torch.float32, device=self.device).unsqueeze(0)
        with torch.no_grad():
            q_values = self.policy_net(state)

        self.action = self.policy.sample(q_values, deterministic=self.deterministic)
        return self.action

    def update(self) -> Optional[float]:
        """
        Perform one learning update from a replayed batch.

        Returns:
            Loss value if training occurred, None otherwise
        """
        if not self.replay.is_ready():
            return None

        # Sample batch
        if self.use_prioritized_replay:
            (states, actions, rewards, next_states, dones, discounts,
             indices, weights) = self.replay.sample()
            weights = torch.from_numpy(weights).float().to(self.device)
        else:
            states, actions, rewards, next_states, dones, discounts = self.replay.sample()
            weights = torch.ones(len(actions), device=self.device)

        # Convert to tensors
        states = torch.from_numpy(states).float().to(self.device)
        actions = torch.from_numpy(actions).long().to(self.device)
        rewards = torch.from_numpy(rewards).float().to(self.device)
        next_states = torch.from_numpy(next_states).float().to(self.device)
        dones = torch.from_numpy(dones).float().to(self.device)
        discounts = torch.from_numpy(discounts).float().to(self.device)

        current_q_values = self.policy_net(states).gather(1, actions.unsqueeze(1)).squeeze(1)

        with torch.no_grad():
            if self.double_q_learning:
                # Policy net selects the action, target net evaluates it
                next_actions = self.policy_net(next_states).argmax(dim=1)
                next_q_values = self.target_net(next_states).gather(1, next_actions.unsqueeze(1)).squeeze(1)
            else:
                next_q_values = self.target_net(next_states).max(dim=1)[0]

            target_q_values = rewards + discounts * (1.0 - dones) * next_q_values

        td_errors = target_q_values - current_q_values
        loss = (td_errors.pow(2) * weights).mean()

        self.optimizer.zero_grad()
        loss.backward()
        torch.nn.utils.clip_grad_norm_(self.policy_net.parameters(), max_norm=self.max_grad_norm)
        self.optimizer.step()

        if self.use_prioritized_replay:
            priorities = td_errors.abs().detach().cpu().numpy()
            self.replay.update_priorities(indices, priorities)

        self.updates += 1
        if self.updates % self.target_network_sync_interval == 0:
            self.update_target_network()

        self.policy.anneal()

        return loss.item()

    def update_target_network(self):
        """Update target network with policy network weights."""
        self.target_net.load_state_dict(self.policy_net.state_dict())

    def save(self, filepath: str):
        """Save agent state to file."""
        torch.save({
            'policy_net_state_dict': self.policy_net.state_dict(),
            'target_net_state_dict': self.target_net.state_dict(),
            'optimizer_state_dict': self.optimizer.state_dict(),
            'total_steps': self.total_steps,
            'updates': self.updates,
            'epsilon': self.policy.epsilon,
        }, filepath)
        logger.info(f"Agent saved to {filepath}")

    def load(self, filepath: str):
        """Load agent state from file."""
        checkpoint = torch.load(filepath, map_location=self.device)
        self.policy_net.load_state_dict(checkpoint['policy_net_state_dict'])
        self.target_net.load_state_dict(checkpoint['target_net_state_dict'])
        self.optimizer.load_state_dict(checkpoint['optimizer_state_dict'])
        self.total_steps = checkpoint['total_steps']
        self.updates = checkpoint['updates']
        self.policy.epsilon = checkpoint['epsilon']
        logger.info(f"Agent loaded from {filepath}")
