"""
policy.py - Policy-gradient bot for Connect Four

This module provides a small policy network, the bot that samples moves
from it, and the REINFORCE training loop that improves it by playing
Player.TWO against a random opponent in ConnectFourEnv.
"""

import os
from typing import Any, Callable, Dict, List, NamedTuple, Optional

import numpy as np
import torch
import torch.nn as nn
import torch.nn.functional as F
import torch.optim as optim

from connect4net import config
from connect4net.debug import debug
from connect4net.game.board import Board
from connect4net.game.rules import ConnectFourEnv
from connect4net.utils import WIDTH, HEIGHT, Player
from connect4net.ai.utils import (accumulate_rewards, available_action_mask,
                                  board_to_observation, observation_to_tensor)


class PolicyModel(nn.Module):
    """
    Two-layer policy network.

    Maps the 42-cell board observation to one logit per column.
    """

    def __init__(self, hidden_size: int = config.HIDDEN_SIZE):
        super(PolicyModel, self).__init__()

        debug.debug(f"Initializing PolicyModel with hidden_size={hidden_size}", "ai")
        self.hidden_size = hidden_size
        self.lin1 = nn.Linear(WIDTH * HEIGHT, hidden_size)
        self.lin2 = nn.Linear(hidden_size, WIDTH)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Args:
            x: Tensor of shape (batch_size, WIDTH*HEIGHT)

        Returns:
            Logits of shape (batch_size, WIDTH)
        """
        return self.lin2(torch.tanh(self.lin1(x)))


class Step(NamedTuple):
    observation: np.ndarray
    action: int
    reward: float
    done: bool


class PolicyBot:
    """
    Bot that samples its moves from a PolicyModel.

    Args:
        model: Policy network (a fresh one if None)
        hidden_size: Hidden layer size used when creating a model
    """

    def __init__(self, model: Optional[PolicyModel] = None, hidden_size: int = config.HIDDEN_SIZE):
        self.model = model if model is not None else PolicyModel(hidden_size=hidden_size)

    def predict(self, board: Board, player: Player = Player.TWO) -> int:
        """
        Choose a column for `player`.

        The policy is restricted to columns that can still take a piece.

        Returns:
            0-based column index

        Raises:
            ValueError: if the board has no available column
        """
        if not board.available_columns():
            raise ValueError("No available columns on the board")

        observation = observation_to_tensor(board_to_observation(board, player))
        with torch.no_grad():
            logits = self.model(observation).squeeze(0)

        probabilities = F.softmax(logits + available_action_mask(board), dim=0)
        action = int(torch.multinomial(probabilities, 1).item())
        debug.trace(f"Bot picked column {action}, probabilities: {probabilities.tolist()}", "ai")
        return action

    def save(self, path: str) -> None:
        """Save the model weights to `path`."""
        debug.info(f"Saving bot to {path}", "ai")
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        torch.save({'hidden_size': self.model.hidden_size,
                    'state_dict': self.model.state_dict()}, path)

    @classmethod
    def load(cls, path: str) -> 'PolicyBot':
        """Load a bot saved with save()."""
        debug.info(f"Loading bot from {path}", "ai")
        checkpoint = torch.load(path, map_location='cpu', weights_only=True)
        model = PolicyModel(hidden_size=checkpoint['hidden_size'])
        model.load_state_dict(checkpoint['state_dict'])
        model.eval()
        return cls(model=model)


def collect_rollout(bot: PolicyBot, env: ConnectFourEnv, min_steps: int,
                    seed: Optional[int] = None) -> List[Step]:
    """
    Play episodes with the current policy.

    Stops at the first episode end after at least `min_steps` steps.
    """
    observation, _ = env.reset(seed=seed)
    steps: List[Step] = []
    while True:
        with torch.no_grad():
            logits = bot.model(observation_to_tensor(observation))
            action = int(torch.multinomial(F.softmax(logits, dim=1), 1).item())

        next_observation, reward, terminated, truncated, _ = env.step(action)
        done = terminated or truncated
        steps.append(Step(observation, action, float(reward), done))

        if done:
            if len(steps) >= min_steps:
                return steps
            observation, _ = env.reset()
        else:
            observation = next_observation


def policy_loss(model: PolicyModel, steps: List[Step]) -> torch.Tensor:
    """REINFORCE loss: -mean(return * log pi(action | observation))."""
    actions = torch.tensor([s.action for s in steps], dtype=torch.long).unsqueeze(1)
    returns = torch.tensor(accumulate_rewards([s.reward for s in steps], [s.done for s in steps]),
                           dtype=torch.float32)
    action_mask = torch.zeros(len(steps), WIDTH).scatter_(1, actions, 1.0)

    observations = torch.stack([torch.as_tensor(s.observation, dtype=torch.float32) for s in steps])
    log_probs = (action_mask * F.log_softmax(model(observations), dim=1)).sum(dim=1)
    return -(returns * log_probs).mean()


def train(bot: Optional[PolicyBot] = None,
          epochs: int = config.TRAIN_EPOCHS,
          min_steps: int = config.MIN_ROLLOUT_STEPS,
          learning_rate: float = config.LEARNING_RATE,
          env: Optional[ConnectFourEnv] = None,
          seed: Optional[int] = None,
          on_epoch: Optional[Callable[[Dict[str, Any]], None]] = None) -> List[Dict[str, Any]]:
    """
    Train a bot with the policy-gradient algorithm.

    Args:
        bot: Bot to train in place (a fresh one if None)
        epochs: Number of rollout/update rounds
        min_steps: Minimum number of steps per rollout
        learning_rate: Adam learning rate
        env: Environment to train in (a fresh ConnectFourEnv if None)
        seed: Seed for torch and the environment
        on_epoch: Called with the statistics of each finished epoch

    Returns:
        One statistics dict per epoch (epoch, episodes, avg_reward, loss)
    """
    bot = bot if bot is not None else PolicyBot()
    env = env if env is not None else ConnectFourEnv()

    if seed is not None:
        torch.manual_seed(seed)

    optimizer = optim.Adam(bot.model.parameters(), lr=learning_rate)
    bot.model.train()
    history = []

    for epoch in range(epochs):
        debug.start_timer("epoch")
        steps = collect_rollout(bot, env, min_steps, seed=seed if epoch == 0 else None)

        episodes = sum(1 for s in steps if s.done)
        total_reward = sum(s.reward for s in steps)

        loss = policy_loss(bot.model, steps)
        optimizer.zero_grad()
        loss.backward()
        optimizer.step()

        stats = {
            'epoch': epoch,
            'episodes': episodes,
            'avg_reward': total_reward / episodes,
            'loss': float(loss.item()),
        }
        history.append(stats)
        debug.info(f"epoch: {epoch:<3} episodes: {episodes:<5} "
                   f"avg reward per episode: {stats['avg_reward']:.2f}", "ai")
        debug.end_timer("epoch", "ai")
        if on_epoch is not None:
            on_epoch(stats)

    bot.model.eval()
    return history
