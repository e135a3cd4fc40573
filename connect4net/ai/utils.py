"""
utils.py - Helpers for the policy-gradient bot

This module converts boards into network inputs and turns per-step rewards
into returns for the policy-gradient update.
"""

from typing import List, Sequence

import numpy as np
import torch

from connect4net.debug import debug
from connect4net.game.board import Board
from connect4net.utils import WIDTH, Player


def board_to_observation(board: Board, player: Player = Player.TWO) -> np.ndarray:
    """
    Flatten a board as seen by `player`.

    The bot is trained as Player.TWO, so when it plays Player.ONE the
    piece values are swapped and it still sees its own pieces as 2.

    Returns:
        float32 array of WIDTH*HEIGHT values in {0, 1, 2}
    """
    observation = board.flatten()
    if player == Player.ONE:
        swapped = observation.copy()
        swapped[observation == Player.ONE.value] = Player.TWO.value
        swapped[observation == Player.TWO.value] = Player.ONE.value
        observation = swapped
    return observation


def observation_to_tensor(observation: np.ndarray) -> torch.Tensor:
    """Convert an observation to a float tensor with a batch dimension."""
    return torch.as_tensor(observation, dtype=torch.float32).unsqueeze(0)


def available_action_mask(board: Board) -> torch.Tensor:
    """
    Build an additive mask over the columns.

    Returns:
        Tensor of WIDTH values, 0 for available columns and -inf otherwise
    """
    mask = torch.full((WIDTH,), float('-inf'))
    available = sorted(board.available_columns())
    if available:
        mask[available] = 0.0
    return mask


def accumulate_rewards(rewards: Sequence[float], dones: Sequence[bool]) -> List[float]:
    """
    Compute undiscounted returns-to-go.

    Walking backwards, the running sum restarts at every step that ended
    an episode, so each return only covers the rest of its own episode.

    Args:
        rewards: Reward received at each step
        dones: Whether each step ended its episode

    Returns:
        Return for each step, in the original order
    """
    if len(rewards) != len(dones):
        raise ValueError("rewards and dones must have the same length")

    returns = [0.0] * len(rewards)
    running = 0.0
    for i in range(len(rewards) - 1, -1, -1):
        if dones[i]:
            running = 0.0
        running += rewards[i]
        returns[i] = running

    debug.trace(f"Accumulated {len(returns)} returns", "ai")
    return returns
