# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Environment adapters.
"""

from .environment import GymEnvironment

__all__ = ['GymEnvironment']
