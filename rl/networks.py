# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Neural network architectures for the DQN and DDPG agents.

Provides fully connected Q-networks for discrete actions and actor/critic
networks for continuous actions, all with Gaussian weight initialization.
"""

import torch
import torch.nn as nn
import torch.nn.functional as F


def gaussian_init(module: nn.Module, mean: float = 0.0, std: float = 1.0):
    """Draw every Linear weight and bias from N(mean, std)."""
    for m in module.modules():
        if isinstance(m, nn.Linear):
            nn.init.normal_(m.weight, mean=mean, std=std)
            nn.init.normal_(m.bias, mean=mean, std=std)


class QNetwork(nn.Module):
    """
    Deep Q-Network for low-dimensional observations.

    Architecture:
    - Input: state vector
    - One hidden Linear layer with ReLU
    - Output: Q-values for every discrete action
    """

    def __init__(
        self,
        state_dim: int,
        num_actions: int,
        hidden_size: int = 128,
        init_std: float = 1.0,
    ):
        """
        Initialize Q-network.

        Args:
            state_dim: Size of the observation vector
            num_actions: Number of discrete actions
            hidden_size: Width of the hidden layer
            init_std: Standard deviation of the Gaussian weight initialization
        """
        super(QNetwork, self).__init__()

        self.state_dim = state_dim
        self.num_actions = num_actions

        self.fc1 = nn.Linear(state_dim, hidden_size)
        self.fc2 = nn.Linear(hidden_size, num_actions)

        gaussian_init(self, std=init_std)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Forward pass through the network.

        Args:
            x: Input tensor of shape (batch_size, state_dim)

        Returns:
            Q-values tensor of shape (batch_size, num_actions)
        """
        x = F.relu(self.fc1(x))
        return self.fc2(x)


class DuelingQNetwork(nn.Module):
    """
    Dueling Q-network.

    Separates value and advantage streams for better learning.
    Can be used as an alternative to the plain Q-network.
    """

    def __init__(
        self,
        state_dim: int,
        num_actions: int,
        hidden_size: int = 128,
        init_std: float = 1.0,
    ):
        """Initialize dueling Q-network."""
        super(DuelingQNetwork, self).__init__()

        self.state_dim = state_dim
        self.num_actions = num_actions

        self.fc1 = nn.Linear(state_dim, hidden_size)

        # Value stream
        self.value_fc = nn.Linear(hidden_size, 1)

        # Advantage stream
        self.advantage_fc = nn.Linear(hidden_size, num_actions)

        gaussian_init(self, std=init_std)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Forward pass through dueling architecture.

        Q(s,a) = V(s) + (A(s,a) - mean(A(s,a)))
        """
        x = F.relu(self.fc1(x))
        value = self.value_fc(x)
        advantage = self.advantage_fc(x)
        return value + (advantage - advantage.mean(dim=1, keepdim=True))


class ActorNetwork(nn.Module):
    """Deterministic policy network with actions squashed to [-1, 1]."""

    def __init__(
        self,
        state_dim: int,
        action_dim: int,
        hidden_size: int = 128,
        init_std: float = 0.01,
    ):
        super(ActorNetwork, self).__init__()

        self.fc1 = nn.Linear(state_dim, hidden_size)
        self.fc2 = nn.Linear(hidden_size, hidden_size)
        self.fc3 = nn.Linear(hidden_size, action_dim)

        gaussian_init(self, std=init_std)

    def forward(self, state: torch.Tensor) -> torch.Tensor:
        x = F.relu(self.fc1(state))
        x = F.relu(self.fc2(x))
        return torch.tanh(self.fc3(x))


class CriticNetwork(nn.Module):
    """Q(s, a) estimator taking the state and action concatenated."""

    def __init__(
        self,
        state_dim: int,
        action_dim: int,
        hidden_size: int = 128,
        init_std: float = 0.01,
    ):
        super(CriticNetwork, self).__init__()

        self.fc1 = nn.Linear(state_dim + action_dim, hidden_size)
        self.fc2 = nn.Linear(hidden_size, hidden_size)
        self.fc3 = nn.Linear(hidden_size, 1)

        gaussian_init(self, std=init_std)

    def forward(self, state: torch.Tensor, action: torch.Tensor) -> torch.Tensor:
        x = torch.cat([state, action], dim=1)
        x = F.relu(self.fc1(x))
        x = F.relu(self.fc2(x))
        return self.fc3(x)
