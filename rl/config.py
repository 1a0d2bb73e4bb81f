# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Run configuration.

Run files are YAML documents loaded into plain dictionaries. The subset that
drives the training loop is validated into a TrainingConfig.
"""

from dataclasses import dataclass, field
from typing import Dict, List

import yaml


@dataclass
class TrainingConfig:
    """Parameters of the training loop driver."""
    exploration_steps: int = 100
    update_interval: int = 1
    target_network_sync_interval: int = 100
    discount: float = 0.99
    window_size: int = 50
    report_interval: int = 5
    step_budgets: List[int] = field(default_factory=lambda: [10000])

    def __post_init__(self):
        if self.exploration_steps < 0:
            raise ValueError("exploration_steps must be non-negative")
        for name in ('update_interval', 'target_network_sync_interval',
                     'window_size', 'report_interval'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        if not 0.0 <= self.discount <= 1.0:
            raise ValueError(f"discount must be in [0, 1], got {self.discount}")
        if isinstance(self.step_budgets, int):
            self.step_budgets = [self.step_budgets]
        if not isinstance(self.step_budgets, (list, tuple)):
            raise ValueError(f"step_budgets must be a list of step counts, got {self.step_budgets!r}")
        if not self.step_budgets:
            raise ValueError("step_budgets must not be empty")
        if not all(isinstance(b, int) and b > 0 for b in self.step_budgets):
            raise ValueError(f"step_budgets must be positive integers, got {self.step_budgets}")
        self.step_budgets = list(self.step_budgets)

    @classmethod
    def from_dict(cls, training: Dict) -> 'TrainingConfig':
        """Build from the `training` section of a run configuration."""
        known = {name for name in cls.__dataclass_fields__}
        return cls(**{key: value for key, value in training.items() if key in known})


def load_config(config_path: str) -> Dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    return config
