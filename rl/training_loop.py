# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Generic agent/environment training loop.

Drives episodes against any Environment until the agent's step counter reaches
a budget, recording transitions and issuing learning updates once warm-up is
over. The same episode logic is reused for deterministic evaluation.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import List

from rl.config import TrainingConfig
from rl.interfaces import Agent, Environment, ReplayStore


logger = logging.getLogger(__name__)


class ReturnWindow:
    """
    Trailing window over the most recent episode returns.

    Oldest entries are evicted first once the window is full.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"Window size must be at least 1, got {size}")
        self.size = size
        self._returns = deque(maxlen=size)

    def append(self, episode_return: float):
        self._returns.append(episode_return)

    @property
    def average(self) -> float:
        """Arithmetic mean of the returns currently held."""
        if not self._returns:
            return 0.0
        return sum(self._returns) / len(self._returns)

    def values(self) -> List[float]:
        return list(self._returns)

    def __len__(self) -> int:
        return len(self._returns)


@dataclass
class RunState:
    """Bookkeeping owned by a single training run."""
    window: ReturnWindow
    episodes: int = 0
    history: List[float] = field(default_factory=list)

    @classmethod
    def create(cls, window_size: int) -> 'RunState':
        return cls(window=ReturnWindow(window_size))

    def record(self, episode_return: float):
        self.window.append(episode_return)
        self.history.append(episode_return)
        self.episodes += 1


@dataclass
class EpisodeResult:
    """Outcome of one deterministic episode."""
    steps: int
    total_reward: float


def train(
    env: Environment,
    agent: Agent,
    replay: ReplayStore,
    config: TrainingConfig,
    run_state: RunState,
    num_steps: int,
) -> RunState:
    """
    Train until the agent has taken at least `num_steps` environment steps.

    The budget is only checked between episodes, so the final episode always
    runs to completion and the agent may overshoot the budget.

    Args:
        env: Environment to interact with
        agent: Agent in charge of action selection and learning
        replay: Store receiving every observed transition
        config: Loop parameters (warm-up, update cadence, reporting)
        run_state: Episode bookkeeping, updated in place
        num_steps: Cumulative step budget for the agent

    Returns:
        The updated run state
    """
    agent.deterministic = False
    logger.info(f"Training for {num_steps} steps.")

    while agent.total_steps < num_steps:
        episode_return = _run_training_episode(env, agent, replay, config)
        run_state.record(episode_return)

        if run_state.episodes % config.report_interval == 0:
            logger.info(
                f"Avg return in last {len(run_state.window)} episodes: "
                f"{run_state.window.average:.3f} | Episode: {run_state.episodes} | "
                f"Episode return: {episode_return:.3f} | "
                f"Total steps: {agent.total_steps}"
            )

    return run_state


def _run_training_episode(
    env: Environment,
    agent: Agent,
    replay: ReplayStore,
    config: TrainingConfig,
) -> float:
    episode_return = 0.0
    env.reset()

    while True:
        agent.state = env.observation
        action = agent.select_action()

        next_state, reward, done = env.step(action)
        replay.store(agent.state, action, reward, next_state, done, config.discount)
        episode_return += reward
        agent.total_steps += 1

        if not (agent.deterministic or agent.total_steps < config.exploration_steps):
            for _ in range(config.update_interval):
                agent.update()

        if done:
            return episode_return


def evaluate(env: Environment, agent: Agent, num_episodes: int = 1) -> List[EpisodeResult]:
    """
    Run complete episodes with the agent in deterministic mode.

    Nothing is recorded and no learning happens; the agent's step counter is
    left untouched.
    """
    agent.deterministic = True
    results = []

    for _ in range(num_episodes):
        env.reset()
        total_reward = 0.0
        total_steps = 0

        while True:
            agent.state = env.observation
            action = agent.select_action()
            _, reward, done = env.step(action)
            total_reward += reward
            total_steps += 1
            if done:
                break

        logger.info(f"Total steps: {total_steps} | Total reward: {total_reward:.3f}")
        results.append(EpisodeResult(steps=total_steps, total_reward=total_reward))

    return results
