"""
utils.py - Constants, enumerations and helpers shared across connect4net

This module defines the board geometry, the two player tokens, the game
result enumeration and the text helpers used to draw boards and read
column numbers typed by a person.
"""

from enum import Enum, auto
from typing import Optional, Union

import numpy as np

from connect4net.errors import ParseError

# Board geometry
WIDTH = 7
HEIGHT = 6
CONNECT_N = 4  # Number of pieces in a row to win

# Value stored in an empty grid cell
EMPTY = 0


class Player(Enum):
    """The two player tokens. Player.ONE always moves first."""
    ONE = 1
    TWO = 2

    def other(self) -> 'Player':
        """Get the other player."""
        return opponent(self)

    @property
    def glyph(self) -> str:
        return glyph(self)

    def __str__(self):
        return self.glyph


def opponent(player: Player) -> Player:
    """Return the player who moves after `player`."""
    return Player.TWO if player == Player.ONE else Player.ONE


class GameResult(Enum):
    """Outcome of a game, derived from the board."""
    IN_PROGRESS = auto()
    PLAYER_ONE_WIN = auto()
    PLAYER_TWO_WIN = auto()
    DRAW = auto()
    ABORTED = auto()  # session ended by a transport error

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameResult.IN_PROGRESS

    @property
    def winner(self) -> Optional[Player]:
        if self == GameResult.PLAYER_ONE_WIN:
            return Player.ONE
        if self == GameResult.PLAYER_TWO_WIN:
            return Player.TWO
        return None

    @classmethod
    def won_by(cls, player: Player) -> 'GameResult':
        return cls.PLAYER_ONE_WIN if player == Player.ONE else cls.PLAYER_TWO_WIN


class Direction(Enum):
    """Scan directions for win checking, in the order they are scanned."""
    VERTICAL = auto()
    HORIZONTAL = auto()
    DIAGONAL_UP = auto()    # bottom-left to top-right
    DIAGONAL_DOWN = auto()  # top-left to bottom-right


def glyph(cell: Union[Player, int, None]) -> str:
    """
    Map a cell to its display character.

    Args:
        cell: A Player, a raw grid value (0, 1, 2) or None for empty

    Returns:
        'X' for player one, 'O' for player two, '.' for an empty cell
    """
    value = cell.value if isinstance(cell, Player) else cell
    if value == Player.ONE.value:
        return 'X'
    if value == Player.TWO.value:
        return 'O'
    return '.'


def render_board_ascii(grid: np.ndarray, show_columns: bool = True) -> str:
    """
    Render a grid indexed [column, row] with row 0 at the bottom.

    Args:
        grid: The board grid
        show_columns: Append a footer with the 1-based column numbers

    Returns:
        One line per row, top row first
    """
    lines = []
    for row in range(HEIGHT - 1, -1, -1):
        lines.append("".join(glyph(int(grid[col, row])) for col in range(WIDTH)))

    if show_columns:
        lines.append("".join(str(col + 1) for col in range(WIDTH)))

    return "\n".join(lines)


def parse_column(text) -> int:
    """
    Convert a 1-based column number typed by a person into a 0-based index.

    Range checking is left to the board so that out-of-range numbers are
    reported as invalid columns rather than parse failures.

    Raises:
        ParseError: if the text is not an integer
    """
    if text is None:
        raise ParseError(text)
    try:
        return int(str(text).strip()) - 1
    except ValueError:
        raise ParseError(text) from None
