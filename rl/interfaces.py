# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Capability interfaces used by the training loop.

The loop only relies on these narrow protocols, so any environment,
learning algorithm or replay mechanism with the same surface can be plugged in.
"""

from typing import Any, Optional, Protocol, Tuple

import numpy as np


class Environment(Protocol):
    """Episodic environment exposing its latest step result as attributes."""

    observation: np.ndarray
    reward: float
    done: bool

    def reset(self) -> np.ndarray:
        ...

    def step(self, action: Any) -> Tuple[np.ndarray, float, bool]:
        ...


class Agent(Protocol):
    """Learning agent driven step by step from the outside."""

    deterministic: bool
    total_steps: int
    state: Optional[np.ndarray]
    action: Any

    def select_action(self) -> Any:
        ...

    def update(self) -> Optional[float]:
        ...


class ReplayStore(Protocol):
    """Sink for observed transitions."""

    def store(
        self,
        state: np.ndarray,
        action: Any,
        reward: float,
        next_state: np.ndarray,
        done: bool,
        discount: float,
    ) -> None:
        ...
