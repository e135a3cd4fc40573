"""
connect4net.game - Core game mechanics for Connect Four

This package contains the board with its win detection, and the game and
environment wrappers that decide whose turn it is.
"""

from connect4net.game.board import Board
from connect4net.game.rules import ConnectFourGame, ConnectFourEnv

__all__ = ['Board', 'ConnectFourGame', 'ConnectFourEnv']
