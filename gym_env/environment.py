# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Gymnasium environment adapter.

Wraps a Gymnasium environment behind a small attribute-style interface:
- reset() and step() refresh `observation`, `reward` and `done`
- discrete actions are passed as plain ints
- continuous actions in [-1, 1] are scaled and clipped to the action space
- episodes can optionally be recorded to video files
"""

import logging
from typing import Any, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces
from gymnasium.wrappers import RecordVideo


logger = logging.getLogger(__name__)


class GymEnvironment:
    """
    Episodic environment backed by `gymnasium.make`.

    `done` is set when the episode terminates or is truncated by its time limit.
    """

    def __init__(
        self,
        env_id: str,
        seed: Optional[int] = None,
        action_scale: float = 1.0,
        max_episode_steps: Optional[int] = None,
        render_mode: Optional[str] = None,
        video_dir: Optional[str] = None,
    ):
        """
        Create the underlying environment.

        Args:
            env_id: Registered Gymnasium id (e.g. 'LunarLander-v3')
            seed: Seed applied on the first reset
            action_scale: Multiplier applied to continuous actions
            max_episode_steps: Override of the registered time limit
            render_mode: Gymnasium render mode ('human', 'rgb_array' or None)
            video_dir: Record every episode to this directory (forces 'rgb_array')
        """
        kwargs = {}
        if max_episode_steps is not None:
            kwargs['max_episode_steps'] = max_episode_steps
        if video_dir is not None:
            render_mode = 'rgb_array'
        self.env = gym.make(env_id, render_mode=render_mode, **kwargs)
        if video_dir is not None:
            self.env = RecordVideo(
                self.env,
                video_folder=video_dir,
                episode_trigger=lambda episode: True,
                name_prefix=env_id,
                disable_logger=True,
            )
            logger.info(f"Recording {env_id} episodes to {video_dir}")
        self.video_dir = video_dir
        self.env_id = env_id
        self.seed = seed
        self.action_scale = action_scale

        if not isinstance(self.env.observation_space, spaces.Box):
            raise ValueError(f"{env_id}: only Box observation spaces are supported")
        if not isinstance(self.env.action_space, (spaces.Discrete, spaces.Box)):
            raise ValueError(f"{env_id}: only Discrete or Box action spaces are supported")

        self.observation: Optional[np.ndarray] = None
        self.reward = 0.0
        self.done = False
        self._seeded = False

        logger.info(f"Environment {env_id} created")

    @property
    def state_dim(self) -> int:
        return int(np.prod(self.env.observation_space.shape))

    @property
    def is_discrete(self) -> bool:
        return isinstance(self.env.action_space, spaces.Discrete)

    @property
    def num_actions(self) -> int:
        """Number of discrete actions."""
        if not self.is_discrete:
            raise ValueError(f"{self.env_id} has a continuous action space")
        return int(self.env.action_space.n)

    @property
    def action_dim(self) -> int:
        """Size of the continuous action vector."""
        if self.is_discrete:
            raise ValueError(f"{self.env_id} has a discrete action space")
        return int(np.prod(self.env.action_space.shape))

    def reset(self) -> np.ndarray:
        """Start a new episode and return the initial observation."""
        if self._seeded:
            observation, _ = self.env.reset()
        else:
            observation, _ = self.env.reset(seed=self.seed)
            self._seeded = True

        self.observation = np.asarray(observation, dtype=np.float32).reshape(-1)
        self.reward = 0.0
        self.done = False
        return self.observation

    def step(self, action: Any) -> Tuple[np.ndarray, float, bool]:
        """
        Apply an action.

        Returns:
            Tuple of (observation, reward, done)
        """
        observation, reward, terminated, truncated, _ = self.env.step(self._to_env_action(action))

        self.observation = np.asarray(observation, dtype=np.float32).reshape(-1)
        self.reward = float(reward)
        self.done = bool(terminated or truncated)
        return self.observation, self.reward, self.done

    def _to_env_action(self, action: Any):
        if self.is_discrete:
            return int(action)

        space = self.env.action_space
        scaled = np.asarray(action, dtype=np.float32).reshape(space.shape) * self.action_scale
        return np.clip(scaled, space.low, space.high).astype(space.dtype)

    def close(self):
        self.env.close()
