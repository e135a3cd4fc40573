"""
rules.py - Game management and Gymnasium environment for Connect Four

This module provides:
1. ConnectFourGame, turn bookkeeping for a game played on one machine
   (hotseat play and random self-play records)
2. ConnectFourEnv, a Gymnasium environment where the learner plays
   Player.TWO against a uniformly random Player.ONE
"""

import random
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from connect4net import config
from connect4net.debug import debug
from connect4net.game.board import Board
from connect4net.utils import WIDTH, HEIGHT, Player, GameResult, opponent, glyph, parse_column


class ConnectFourGame:
    """
    A game of Connect Four played on a single board.

    Player.ONE moves first. The turn passes only after a successful
    placement, and the result is cached once the game is over.
    """

    def __init__(self):
        debug.debug("Initializing ConnectFourGame", "game")
        self.board = Board()
        self.current_player = Player.ONE
        self.result = GameResult.IN_PROGRESS

    @property
    def moves(self) -> List[Tuple[Player, int]]:
        return self.board.moves

    def play(self, column: int) -> GameResult:
        """
        Drop a piece for the current player.

        Args:
            column: Column to place a piece in (0-indexed)

        Returns:
            The game result after the move

        Raises:
            InvalidColumnError: if the column cannot take a piece (the turn
                does not change)
            RuntimeError: if the game is already over
        """
        if self.is_game_over():
            raise RuntimeError(f"Game is already over ({self.result.name})")

        self.board.place(column, self.current_player)
        debug.debug(f"{self.current_player.name} played column {column}", "game")

        self.result = self.board.result()
        if self.result.is_game_over():
            debug.info(f"Game over after {len(self.moves)} moves: {self.result.name}", "game")
        else:
            self.current_player = opponent(self.current_player)
        return self.result

    def is_game_over(self) -> bool:
        return self.result.is_game_over()

    def get_winner(self) -> Optional[Player]:
        return self.result.winner

    @classmethod
    def generate(cls, rng: Optional[random.Random] = None) -> 'ConnectFourGame':
        """
        Play a complete game of uniformly random moves.

        Args:
            rng: Random number generator (a fresh one if None)

        Returns:
            The finished game, with its full move record
        """
        # Imported here: move_sources imports the game package
        from connect4net.interfaces.move_sources import RandomMoveSource

        source = RandomMoveSource(rng or random.Random())
        game = cls()
        while not game.is_game_over():
            game.play(parse_column(source.next_move(game.board, game.current_player)))
        return game

    def summary(self) -> str:
        """Render the board, the winner and the move record."""
        winner = self.get_winner()
        return "\n".join([
            self.board.render(),
            f"Winner: {glyph(winner)}",
            f"Moves made: {len(self.moves)}",
            "Moves (piece, column): " + str([(player.value, column) for player, column in self.moves]),
        ])

    def render(self) -> str:
        """Render the current board as text."""
        return self.board.render()


class ConnectFourEnv(gym.Env):
    """
    Connect Four environment following the Gymnasium interface.

    The agent plays Player.TWO. A uniformly random Player.ONE opens every
    episode and answers each accepted agent move. Invalid moves are
    penalised and leave the board untouched.
    """

    metadata = {'render_modes': ['ascii', 'human']}

    def __init__(self, render_mode: Optional[str] = None):
        debug.debug("Initializing ConnectFourEnv", "env")

        self.action_space = spaces.Discrete(WIDTH)
        self.observation_space = spaces.Box(low=0, high=2, shape=(WIDTH * HEIGHT,), dtype=np.float32)

        self.render_mode = render_mode
        self.board = Board()
        self.agent = Player.TWO

        self.reward_step = config.REWARD_STEP
        self.reward_invalid_move = config.REWARD_INVALID_MOVE
        self.reward_win = config.REWARD_WIN
        self.reward_lose = config.REWARD_LOSE

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        """
        Start a new episode with one random opponent piece on the board.

        Args:
            seed: Seed for the opponent's random moves
            options: Unused, accepted for the Gymnasium interface

        Returns:
            Tuple of (observation, info)
        """
        super().reset(seed=seed)

        self.board = Board()
        self._play_random_move()

        if self.render_mode == "human":
            self.render()
        return self.board.flatten(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Drop the agent's piece in column `action`.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        action = int(action)
        info_extra: Dict[str, Any] = {}

        if action in self.board.available_columns():
            self.board.place(action, self.agent)
            reward = self.reward_step
            if not self.board.finished():
                self._play_random_move()
        else:
            debug.trace(f"Invalid action: {action}", "env")
            reward = self.reward_invalid_move
            info_extra['invalid_move'] = True

        winner = self.board.winner()
        if winner == self.agent:
            reward += self.reward_win
        elif winner is not None:
            reward += self.reward_lose

        terminated = self.board.finished()
        if terminated:
            debug.debug(f"Episode over: {self.board.result().name}", "env")

        if self.render_mode == "human":
            self.render()

        info = self._get_info()
        info.update(info_extra)
        return self.board.flatten(), reward, terminated, False, info

    def render(self) -> Optional[str]:
        """
        Render the environment.

        Returns:
            The board text in 'ascii' mode, otherwise None ('human' mode prints it)
        """
        if self.render_mode == "ascii":
            return self.board.render()
        if self.render_mode == "human":
            print(self.board.render())
        return None

    def _play_random_move(self) -> None:
        column = int(self.np_random.choice(sorted(self.board.available_columns())))
        self.board.place(column, opponent(self.agent))

    def _get_info(self) -> Dict[str, Any]:
        return {
            'valid_moves': sorted(self.board.available_columns()),
            'moves_made': len(self.board.moves),
            'result': self.board.result().name,
        }
