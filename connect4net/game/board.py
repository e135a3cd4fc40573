"""
board.py - Board representation and win detection for Connect Four

This module implements the Board class: a 7x6 grid that accepts piece
placements, keeps an append-only move log and answers questions about the
game state (winner, full, available columns). The board has no notion of
whose turn it is; callers decide which player drops each piece.
"""

from typing import Iterator, List, Optional, Set, Tuple

import numpy as np

from connect4net.debug import debug
from connect4net.errors import InvalidColumnError, InvalidPlayerError
from connect4net.utils import (WIDTH, HEIGHT, CONNECT_N, EMPTY, Player, GameResult,
                               Direction, render_board_ascii)

Cell = Tuple[int, int]  # (column, row)


def _lines(direction: Direction) -> Iterator[List[Cell]]:
    """Yield every line of cells along `direction`, in scan order."""
    if direction == Direction.VERTICAL:
        for col in range(WIDTH):
            yield [(col, row) for row in range(HEIGHT)]

    elif direction == Direction.HORIZONTAL:
        for row in range(HEIGHT):
            yield [(col, row) for col in range(WIDTH)]

    elif direction == Direction.DIAGONAL_UP:
        # Start on the left edge then along the bottom edge
        starts = [(0, row) for row in range(HEIGHT - 1, -1, -1)] + [(col, 0) for col in range(1, WIDTH)]
        for col, row in starts:
            line = []
            while col < WIDTH and row < HEIGHT:
                line.append((col, row))
                col += 1
                row += 1
            if len(line) >= CONNECT_N:
                yield line

    elif direction == Direction.DIAGONAL_DOWN:
        # Start on the left edge then along the top edge
        starts = [(0, row) for row in range(HEIGHT)] + [(col, HEIGHT - 1) for col in range(1, WIDTH)]
        for col, row in starts:
            line = []
            while col < WIDTH and row >= 0:
                line.append((col, row))
                col += 1
                row -= 1
            if len(line) >= CONNECT_N:
                yield line


# Lines never change, so compute them once
SCAN_LINES = [(direction, list(_lines(direction))) for direction in Direction]


class Board:
    """
    Represents a Connect Four board.

    The grid is a numpy array indexed [column, row] with row 0 at the
    bottom. Cells hold 0 when empty, otherwise the Player value. Filled
    cells are never cleared or overwritten.
    """

    def __init__(self):
        debug.trace("Initializing new Board", "board")
        self.grid = np.zeros((WIDTH, HEIGHT), dtype=np.int8)
        self.heights = [0] * WIDTH
        self.moves: List[Tuple[Player, int]] = []

    def copy(self) -> 'Board':
        """Create an independent copy of the board."""
        new_board = Board()
        new_board.grid = self.grid.copy()
        new_board.heights = list(self.heights)
        new_board.moves = list(self.moves)
        return new_board

    def place(self, column: int, player: Player) -> None:
        """
        Drop a piece for `player` into `column`.

        Args:
            column: The column to place a piece in (0-indexed)
            player: The player owning the piece

        Raises:
            InvalidPlayerError: if `player` is not a Player member
            InvalidColumnError: if the column is out of range or full
        """
        if not isinstance(player, Player):
            debug.debug(f"Rejected placement: bad player token {player!r}", "board")
            raise InvalidPlayerError(player)

        # bool is an int subclass but never a column
        if isinstance(column, bool) or not isinstance(column, (int, np.integer)):
            raise InvalidColumnError(column, "not an integer")

        if not 0 <= column < WIDTH:
            debug.debug(f"Rejected placement: column {column} out of bounds", "board")
            raise InvalidColumnError(column, "out of range")

        row = self.heights[column]
        if row >= HEIGHT:
            debug.debug(f"Rejected placement: column {column} is full", "board")
            raise InvalidColumnError(column, "column is full")

        self.grid[column, row] = player.value
        self.heights[column] = row + 1
        self.moves.append((player, int(column)))
        debug.trace(f"Placed {player.name} at ({column}, {row})", "board")

    def winner(self) -> Optional[Player]:
        """
        Find four same-player pieces in a row.

        Directions are scanned vertical, horizontal, diagonal up, diagonal
        down. Along each line a run restarts whenever the cell value
        changes; empty cells never start a run.

        Returns:
            The player owning the first run of four found, or None
        """
        grid = self.grid
        for direction, lines in SCAN_LINES:
            for line in lines:
                run_start = 0
                piece = EMPTY
                for index, (col, row) in enumerate(line):
                    value = int(grid[col, row])
                    if value != piece:
                        run_start = index
                        piece = value
                    if piece != EMPTY and index - run_start + 1 >= CONNECT_N:
                        debug.trace(f"Run of {CONNECT_N} found {direction.name.lower()} ending at ({col}, {row})",
                                    "board")
                        return Player(piece)
        return None

    def full(self) -> bool:
        """True when every cell holds a piece."""
        return all(height == HEIGHT for height in self.heights)

    def available_columns(self) -> Set[int]:
        """Columns that can still take a piece."""
        return {col for col in range(WIDTH) if self.heights[col] < HEIGHT}

    def result(self) -> GameResult:
        """
        Evaluate the board.

        A win is checked before a full board, so a board that is both full
        and won is reported as a win.
        """
        player = self.winner()
        if player is not None:
            return GameResult.won_by(player)
        if self.full():
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def finished(self) -> bool:
        """True once the board is won or full."""
        return self.result().is_game_over()

    def flatten(self) -> np.ndarray:
        """
        Get the board as a flat observation vector.

        Returns:
            float32 array of WIDTH*HEIGHT values (0, 1, 2), cell
            (column, row) at index column*HEIGHT + row
        """
        return self.grid.astype(np.float32).reshape(-1)

    def render(self) -> str:
        """
        Render the board as text, top row first.

        Returns:
            One line per row followed by the 1-based column numbers
        """
        return render_board_ascii(self.grid)

    def __str__(self) -> str:
        return self.render()
