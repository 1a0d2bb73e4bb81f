# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Reinforcement learning module.

Provides a generic agent/environment training loop together with DQN and
DDPG agents, replay stores and exploration strategies.
"""

from rl.config import TrainingConfig, load_config
from rl.training_loop import EpisodeResult, ReturnWindow, RunState, evaluate, train
from rl.networks import QNetwork, DuelingQNetwork, ActorNetwork, CriticNetwork
from rl.policy import GreedyPolicy, OUNoise
from rl.dqn_agent import DQNAgent
from rl.ddpg_agent import DDPGAgent
from rl.replay_buffer import ReplayBuffer, PrioritizedReplayBuffer

__all__ = [
    'TrainingConfig',
    'load_config',
    'EpisodeResult',
    'ReturnWindow',
    'RunState',
    'evaluate',
    'train',
    'QNetwork',
    'DuelingQNetwork',
    'ActorNetwork',
    'CriticNetwork',
    'GreedyPolicy',
    'OUNoise',
    'DQNAgent',
    'DDPGAgent',
    'ReplayBuffer',
    'PrioritizedReplayBuffer',
]
