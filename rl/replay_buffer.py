# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Experience replay stores.

Provides uniform and prioritized experience replay. Each transition carries its
own discount factor so agents never need to know the run's discount.
"""

import numpy as np
import random
from collections import deque, namedtuple
from typing import Any, Tuple


# Transition tuple
Transition = namedtuple(
    'Transition',
    ['state', 'action', 'reward', 'next_state', 'done', 'discount']
)


def _stack(transitions) -> Tuple:
    states = np.array([t.state for t in transitions], dtype=np.float32)
    actions = np.array([t.action for t in transitions])
    rewards = np.array([t.reward for t in transitions], dtype=np.float32)
    next_states = np.array([t.next_state for t in transitions], dtype=np.float32)
    dones = np.array([t.done for t in transitions], dtype=np.float32)
    discounts = np.array([t.discount for t in transitions], dtype=np.float32)
    return states, actions, rewards, next_states, dones, discounts


class ReplayBuffer:
    """
    Uniform experience replay.

    Stores transitions up to a fixed capacity, dropping the oldest first,
    and samples fixed-size batches uniformly at random.
    """

    def __init__(self, batch_size: int = 64, capacity: int = 100000):
        """
        Initialize replay buffer.

        Args:
            batch_size: Number of transitions returned by sample()
            capacity: Maximum number of transitions to store
        """
        self.buffer = deque(maxlen=capacity)
        self.batch_size = batch_size
        self.capacity = capacity

    def store(
        self,
        state: np.ndarray,
        action: Any,
        reward: float,
        next_state: np.ndarray,
        done: bool,
        discount: float,
    ):
        """
        Add a transition to the buffer.

        Args:
            state: Observation the action was selected in
            action: Action taken (index or continuous vector)
            reward: Reward received
            next_state: Observation after the action
            done: Whether the episode ended
            discount: Discount applied to the next state's value
        """
        self.buffer.append(Transition(
            np.asarray(state), action, reward, np.asarray(next_state), done, discount
        ))

    def sample(self) -> Tuple:
        """
        Sample a batch of transitions uniformly.

        Returns:
            Tuple of (states, actions, rewards, next_states, dones, discounts)
        """
        return _stack(random.sample(self.buffer, self.batch_size))

    def __len__(self) -> int:
        """Return current buffer size."""
        return len(self.buffer)

    def is_ready(self) -> bool:
        """Check if buffer has enough samples for a batch."""
        return len(self.buffer) >= self.batch_size


class PrioritizedReplayBuffer:
    """
    Prioritized experience replay.

    Samples transitions in proportion to their last TD error so that
    surprising transitions are replayed more often.
    """

    def __init__(
        self,
        batch_size: int = 64,
        capacity: int = 100000,
        alpha: float = 0.6,
        beta_start: float = 0.4,
        beta_frames: int = 100000,
    ):
        """
        Initialize prioritized replay buffer.

        Args:
            batch_size: Number of transitions returned by sample()
            capacity: Maximum buffer size
            alpha: Prioritization exponent (0 = uniform, 1 = full prioritization)
            beta_start: Initial importance sampling weight
            beta_frames: Number of samples to anneal beta to 1.0
        """
        self.batch_size = batch_size
        self.capacity = capacity
        self.alpha = alpha
        self.beta_start = beta_start
        self.beta_frames = beta_frames
        self.frame = 1

        self.buffer = []
        self.priorities = np.zeros(capacity, dtype=np.float32)
        self.position = 0
        self.size = 0

    def store(
        self,
        state: np.ndarray,
        action: Any,
        reward: float,
        next_state: np.ndarray,
        done: bool,
        discount: float,
    ):
        """Add transition with maximum priority."""
        max_priority = self.priorities.max() if self.size > 0 else 1.0

        transition = Transition(
            np.asarray(state), action, reward, np.asarray(next_state), done, discount
        )

        if len(self.buffer) < self.capacity:
            self.buffer.append(transition)
        else:
            self.buffer[self.position] = transition

        self.priorities[self.position] = max_priority
        self.position = (self.position + 1) % self.capacity
        self.size = min(self.size + 1, self.capacity)

    def sample(self) -> Tuple:
        """
        Sample batch based on priorities.

        Returns:
            Tuple of (states, actions, rewards, next_states, dones, discounts,
                     indices, weights)
        """
        priorities = self.priorities[:self.size]
        probabilities = priorities ** self.alpha
        probabilities /= probabilities.sum()

        indices = np.random.choice(self.size, self.batch_size, p=probabilities)

        # Importance sampling weights
        beta = self._get_beta()
        weights = (self.size * probabilities[indices]) ** (-beta)
        weights /= weights.max()

        transitions = [self.buffer[idx] for idx in indices]
        return _stack(transitions) + (indices, weights.astype(np.float32))

    def update_priorities(self, indices: np.ndarray, td_errors: np.ndarray):
        """
        Update priorities based on TD errors.

        Args:
            indices: Indices of transitions to update
            td_errors: TD errors for priority calculation
        """
        for idx, td_error in zip(indices, td_errors):
            # Zero priority would never be sampled again
            self.priorities[idx] = abs(td_error) + 1e-6

    def _get_beta(self) -> float:
        """Calculate current beta value (annealed over time)."""
        beta = self.beta_start + self.frame * (1.0 - self.beta_start) / self.beta_frames
        self.frame += 1
        return min(1.0, beta)

    def __len__(self) -> int:
        """Return current buffer size."""
        return self.size

    def is_ready(self) -> bool:
        """Check if buffer has enough samples."""
        return self.size >= self.batch_size
