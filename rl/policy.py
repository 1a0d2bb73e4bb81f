# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Exploration strategies.

GreedyPolicy covers discrete action spaces (epsilon-greedy over Q-values),
OUNoise covers continuous ones (temporally correlated action noise).
"""

import numpy as np
import torch


class GreedyPolicy:
    """Epsilon-greedy policy with linear epsilon annealing."""

    def __init__(
        self,
        initial_epsilon: float = 1.0,
        anneal_interval: int = 2000,
        min_epsilon: float = 0.1,
    ):
        """
        Initialize policy.

        Args:
            initial_epsilon: Exploration rate before any annealing
            anneal_interval: Number of anneal() calls to reach min_epsilon
            min_epsilon: Floor for the exploration rate
        """
        if anneal_interval < 1:
            raise ValueError(f"anneal_interval must be at least 1, got {anneal_interval}")
        self.epsilon = initial_epsilon
        self.min_epsilon = min_epsilon
        self.delta = (initial_epsilon - min_epsilon) / anneal_interval

    def sample(self, action_values: torch.Tensor, deterministic: bool = False) -> int:
        """
        Pick an action index from a (1, num_actions) tensor of action values.

        Deterministic mode always acts greedily.
        """
        if not deterministic and np.random.rand() < self.epsilon:
            return int(np.random.randint(action_values.shape[-1]))
        return int(action_values.argmax(dim=-1).item())

    def anneal(self):
        """Decrease epsilon by one step, never below the floor."""
        self.epsilon = max(self.min_epsilon, self.epsilon - self.delta)


class OUNoise:
    """Ornstein-Uhlenbeck process."""

    def __init__(self, size: int = 1, mu: float = 0.0, theta: float = 0.15, sigma: float = 0.2):
        self.mu = mu * np.ones(size, dtype=np.float32)
        self.theta = theta
        self.sigma = sigma
        self.state = self.mu.copy()

    def reset(self):
        self.state = self.mu.copy()

    def sample(self) -> np.ndarray:
        dx = self.theta * (self.mu - self.state) + self.sigma * np.random.randn(len(self.state))
        self.state = (self.state + dx).astype(np.float32)
        return self.state
