# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Training entry point.

Builds the environment, replay store and agent described by a YAML run file,
then alternates training stages and deterministic evaluation episodes.
Includes logging, checkpointing and a JSON training history.
"""

import argparse
import json
import logging
import time
from pathlib import Path
from typing import Dict, Optional, Union

import torch

from gym_env import GymEnvironment
from rl.config import TrainingConfig, load_config
from rl.ddpg_agent import DDPGAgent
from rl.dqn_agent import DQNAgent
from rl.policy import GreedyPolicy, OUNoise
from rl.replay_buffer import PrioritizedReplayBuffer, ReplayBuffer
from rl.training_loop import RunState, evaluate, train


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def default_device() -> str:
    return 'cuda' if torch.cuda.is_available() else 'cpu'


def create_environment(env_config: Dict, render_mode: Optional[str] = None,
                       seed: Optional[int] = None,
                       video_dir: Optional[str] = None) -> GymEnvironment:
    """Create the environment described by the `environment` section."""
    return GymEnvironment(
        env_id=env_config['id'],
        seed=seed if seed is not None else env_config.get('seed'),
        action_scale=env_config.get('action_scale', 1.0),
        max_episode_steps=env_config.get('max_episode_steps'),
        render_mode=render_mode,
        video_dir=video_dir,
    )


def create_replay(replay_config: Dict) -> Union[ReplayBuffer, PrioritizedReplayBuffer]:
    """Create the replay store described by the `replay` section."""
    if replay_config.get('prioritized', False):
        return PrioritizedReplayBuffer(
            batch_size=replay_config['batch_size'],
            capacity=replay_config['capacity'],
        )
    return ReplayBuffer(
        batch_size=replay_config['batch_size'],
        capacity=replay_config['capacity'],
    )


def create_agent(
    config: Dict,
    env: GymEnvironment,
    replay: Union[ReplayBuffer, PrioritizedReplayBuffer],
    device: str,
) -> Union[DQNAgent, DDPGAgent]:
    """
    Create the agent described by the `agent` section.

    Args:
        config: Full run configuration
        env: Environment the agent will act in (sets input/output sizes)
        replay: Replay store the agent learns from
        device: Torch device name

    Returns:
        DQNAgent or DDPGAgent
    """
    agent_config = config['agent']
    agent_type = agent_config['type'].lower()
    sync_interval = config['training'].get('target_network_sync_interval', 100)

    if agent_type == 'dqn':
        if not env.is_discrete:
            raise ValueError("DQN requires a discrete action space")
        policy = GreedyPolicy(
            initial_epsilon=agent_config.get('initial_epsilon', 1.0),
            anneal_interval=agent_config.get('anneal_interval', 2000),
            min_epsilon=agent_config.get('min_epsilon', 0.1),
        )
        return DQNAgent(
            state_dim=env.state_dim,
            num_actions=env.num_actions,
            replay=replay,
            policy=policy,
            device=device,
            learning_rate=agent_config.get('learning_rate', 0.001),
            hidden_size=agent_config.get('hidden_size', 128),
            init_std=agent_config.get('init_std', 1.0),
            target_network_sync_interval=sync_interval,
            double_q_learning=agent_config.get('double_q_learning', False),
            use_dueling=agent_config.get('use_dueling', False),
        )

    if agent_type == 'ddpg':
        if env.is_discrete:
            raise ValueError("DDPG requires a continuous action space")
        if isinstance(replay, PrioritizedReplayBuffer):
            raise ValueError("DDPG only supports uniform replay")
        noise_config = agent_config.get('noise', {})
        noise = OUNoise(
            size=env.action_dim,
            mu=noise_config.get('mu', 0.0),
            theta=noise_config.get('theta', 0.15),
            sigma=noise_config.get('sigma', 0.2),
        )
        return DDPGAgent(
            state_dim=env.state_dim,
            action_dim=env.action_dim,
            replay=replay,
            noise=noise,
            device=device,
            actor_learning_rate=agent_config.get('actor_learning_rate', 0.001),
            critic_learning_rate=agent_config.get('critic_learning_rate', 0.001),
            hidden_size=agent_config.get('hidden_size', 128),
            init_std=agent_config.get('init_std', 0.01),
            tau=agent_config.get('tau', 0.005),
            target_network_sync_interval=sync_interval,
        )

    raise ValueError(f"Unknown agent type: {agent_config['type']}")


class Trainer:
    """Trainer following a schedule of cumulative step budgets."""

    def __init__(self, config: Dict):
        """
        Initialize trainer.

        Args:
            config: Configuration dictionary with training parameters
        """
        self.config = config
        self.training_config = TrainingConfig.from_dict(config['training'])

        # Create output directories
        self.checkpoint_dir = Path(config['output']['checkpoint_dir'])
        self.log_dir = Path(config['output']['log_dir'])
        self.checkpoint_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        eval_config = config.get('evaluation', {})
        self.eval_episodes = eval_config.get('num_episodes', 1)

        self.env = create_environment(config['environment'])
        self.eval_env = create_environment(
            config['environment'],
            render_mode=eval_config.get('render_mode'),
            seed=eval_config.get('seed'),
            video_dir=eval_config.get('video_dir'),
        )
        self.replay = create_replay(config['replay'])
        self.agent = create_agent(
            config,
            self.env,
            self.replay,
            device=config['training'].get('device') or default_device(),
        )

        self.run_state = RunState.create(self.training_config.window_size)
        self.eval_history = []

        logger.info("Trainer initialized")
        logger.info(f"Step budgets: {self.training_config.step_budgets}")
        logger.info(f"Checkpoint directory: {self.checkpoint_dir}")
        logger.info(f"Log directory: {self.log_dir}")

    def train(self) -> Dict:
        """Run every training stage, evaluating after each one."""
        logger.info("Starting training...")
        start_time = time.time()

        budgets = self.training_config.step_budgets
        try:
            for stage, num_steps in enumerate(budgets, start=1):
                train(
                    self.env,
                    self.agent,
                    self.replay,
                    self.training_config,
                    self.run_state,
                    num_steps,
                )

                results = evaluate(self.eval_env, self.agent, self.eval_episodes)
                self.eval_history.append({
                    'stage': stage,
                    'total_steps': self.agent.total_steps,
                    'episodes': self.run_state.episodes,
                    'returns': [r.total_reward for r in results],
                    'steps': [r.steps for r in results],
                })

                self.save_checkpoint(stage, final=stage == len(budgets))
        finally:
            self.env.close()
            self.eval_env.close()

        self.save_history()

        elapsed_time = time.time() - start_time
        logger.info(f"Training completed in {elapsed_time/60:.2f} minutes")

        return {
            'total_steps': self.agent.total_steps,
            'episodes': self.run_state.episodes,
            'average_return': self.run_state.window.average,
            'eval_history': self.eval_history,
            'training_time': elapsed_time,
        }

    def save_checkpoint(self, stage: int, final: bool = False):
        """Save training checkpoint."""
        agent_type = self.config['agent']['type'].lower()
        suffix = 'final' if final else f'stage_{stage}'
        checkpoint_path = self.checkpoint_dir / f"{agent_type}_agent_{suffix}.pt"
        self.agent.save(str(checkpoint_path))
        logger.info(f"Checkpoint saved: {checkpoint_path}")

    def save_history(self):
        """Save episode returns and evaluation history."""
        history_path = self.log_dir / "training_history.json"
        with open(history_path, 'w') as f:
            json.dump({
                'config': self.config,
                'episode_returns': self.run_state.history,
                'eval_history': self.eval_history,
            }, f, indent=2)
        logger.info(f"History saved: {history_path}")


def main():
    """Main training entry point."""
    parser = argparse.ArgumentParser(description="Train a DQN or DDPG agent")
    parser.add_argument(
        '--config',
        type=str,
        default='configs/lunar_lander_dqn.yaml',
        help='Path to configuration file'
    )
    parser.add_argument(
        '--device',
        type=str,
        default=None,
        help='Device to train on (overrides config)'
    )
    parser.add_argument(
        '--steps',
        type=int,
        nargs='+',
        default=None,
        help='Cumulative step budgets (overrides config)'
    )
    parser.add_argument(
        '--checkpoint',
        type=str,
        default=None,
        help='Path to checkpoint to resume from'
    )

    args = parser.parse_args()

    config = load_config(args.config)

    # Override with command line arguments
    if args.device is not None:
        config['training']['device'] = args.device
    if args.steps is not None:
        config['training']['step_budgets'] = args.steps

    trainer = Trainer(config)

    if args.checkpoint:
        trainer.agent.load(args.checkpoint)
        logger.info(f"Resumed from checkpoint: {args.checkpoint}")

    results = trainer.train()

    print("\n" + "="*60)
    print("TRAINING COMPLETE")
    print("="*60)
    print(f"Total Steps:         {results['total_steps']}")
    print(f"Episodes:            {results['episodes']}")
    print(f"Avg Return (window): {results['average_return']:.2f}")
    for entry in results['eval_history']:
        print(f"Eval after stage {entry['stage']}: "
              f"returns {', '.join(f'{r:.2f}' for r in entry['returns'])}")
    print(f"Training Time:       {results['training_time']/60:.2f} minutes")
    print("="*60)


if __name__ == "__main__":
    main()
