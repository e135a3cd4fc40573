"""
move_sources.py - Where local moves come from

A move source is asked for a move whenever it is the local player's turn
and answers with a 1-based column number as text, exactly as a person
would type it. The caller parses and validates the answer and asks again
when it is rejected.
"""

import random
from typing import Callable, Optional

from connect4net.debug import debug
from connect4net.game.board import Board
from connect4net.utils import WIDTH, Player, glyph


class MoveSource:
    """Interface for anything that can choose a move."""

    def next_move(self, board: Board, player: Player) -> str:
        """
        Choose a move for `player`.

        Args:
            board: A copy of the current board
            player: The player to move

        Returns:
            A 1-based column number as text
        """
        raise NotImplementedError


class ConsoleMoveSource(MoveSource):
    """Reads moves typed at the terminal."""

    def __init__(self, input_fn: Callable[[str], str] = input, announce_player: bool = False):
        self.input_fn = input_fn
        self.announce_player = announce_player

    def next_move(self, board: Board, player: Player) -> str:
        prompt = f"Your turn! Input a column 1-{WIDTH}"
        if self.announce_player:
            prompt = f"{glyph(player)} to play. Input a column 1-{WIDTH}"
        # EOFError propagates: there is no one left to ask
        return self.input_fn(prompt + "\n")


class RandomMoveSource(MoveSource):
    """Picks uniformly among the columns that can still take a piece."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def next_move(self, board: Board, player: Player) -> str:
        column = self.rng.choice(sorted(board.available_columns()))
        debug.debug(f"Random move for {player.name}: column {column}", "game")
        return str(column + 1)


class BotMoveSource(MoveSource):
    """Asks a trained bot for its move."""

    def __init__(self, bot, display: Optional[Callable[[str], None]] = print):
        self.bot = bot
        self.display = display

    def next_move(self, board: Board, player: Player) -> str:
        column = self.bot.predict(board, player)
        if self.display is not None:
            self.display(f"Bot plays column {column + 1}")
        return str(column + 1)

