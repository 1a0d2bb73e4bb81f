# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Evaluation entry point.

Runs a trained agent deterministically and reports return statistics.
"""

import argparse
import json
import logging
import time
from pathlib import Path
from typing import Dict

import numpy as np

from rl.config import load_config
from rl.interfaces import Agent, Environment
from rl.train import create_agent, create_environment, create_replay, default_device
from rl.training_loop import evaluate


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class Evaluator:
    """Aggregates deterministic episodes of a trained agent."""

    def __init__(self, agent: Agent, env: Environment, num_episodes: int = 10):
        """
        Initialize evaluator.

        Args:
            agent: Trained agent
            env: Environment to evaluate in
            num_episodes: Number of episodes to run
        """
        if num_episodes < 1:
            raise ValueError(f"num_episodes must be at least 1, got {num_episodes}")
        self.agent = agent
        self.env = env
        self.num_episodes = num_episodes

    def evaluate_agent(self) -> Dict:
        """
        Evaluate the agent.

        Returns:
            Evaluation statistics dictionary
        """
        logger.info(f"Evaluating agent on {self.num_episodes} episodes...")
        start_time = time.time()

        results = evaluate(self.env, self.agent, self.num_episodes)

        elapsed_time = time.time() - start_time
        returns = [r.total_reward for r in results]
        steps = [r.steps for r in results]

        return {
            'num_episodes': self.num_episodes,
            'avg_return': float(np.mean(returns)),
            'std_return': float(np.std(returns)),
            'min_return': float(np.min(returns)),
            'max_return': float(np.max(returns)),
            'avg_steps': float(np.mean(steps)),
            'total_time': elapsed_time,
            'episode_logs': [
                {'episode': i + 1, 'steps': r.steps, 'total_reward': r.total_reward}
                for i, r in enumerate(results)
            ],
        }

    def print_summary(self, results: Dict):
        """Print formatted evaluation summary."""
        print("\n" + "="*60)
        print("AGENT EVALUATION RESULTS")
        print("="*60)
        print(f"Episodes:            {results['num_episodes']}")
        print(f"Avg Return:          {results['avg_return']:.2f} ± {results['std_return']:.2f}")
        print(f"Min / Max Return:    {results['min_return']:.2f} / {results['max_return']:.2f}")
        print(f"Avg Steps:           {results['avg_steps']:.1f}")
        print(f"Total Time:          {results['total_time']:.1f}s")
        print("="*60)


def main():
    """Main evaluation entry point."""
    parser = argparse.ArgumentParser(description="Evaluate a trained agent")
    parser.add_argument(
        '--config',
        type=str,
        required=True,
        help='Run configuration the agent was trained with'
    )
    parser.add_argument(
        '--checkpoint',
        type=str,
        required=True,
        help='Path to trained agent checkpoint'
    )
    parser.add_argument(
        '--num-episodes',
        type=int,
        default=10,
        help='Number of episodes to evaluate'
    )
    parser.add_argument(
        '--output',
        type=str,
        default='eval_results',
        help='Output directory for results'
    )
    parser.add_argument(
        '--render',
        action='store_true',
        help='Render episodes in a window'
    )
    parser.add_argument(
        '--video-dir',
        type=str,
        default=None,
        help='Record every episode to this directory (overrides config)'
    )

    args = parser.parse_args()

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    config = load_config(args.config)

    logger.info("Initializing agent...")
    env = create_environment(
        config['environment'],
        render_mode='human' if args.render else None,
        seed=config.get('evaluation', {}).get('seed'),
        video_dir=args.video_dir or config.get('evaluation', {}).get('video_dir'),
    )
    agent = create_agent(
        config,
        env,
        create_replay(config['replay']),
        device=config['training'].get('device') or default_device(),
    )
    agent.load(args.checkpoint)

    evaluator = Evaluator(agent, env, num_episodes=args.num_episodes)
    results = evaluator.evaluate_agent()
    env.close()

    results_path = output_dir / "evaluation_results.json"
    with open(results_path, 'w') as f:
        json.dump(results, f, indent=2)

    evaluator.print_summary(results)
    logger.info(f"Results saved to {results_path}")


if __name__ == "__main__":
    main()
