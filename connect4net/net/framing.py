"""
framing.py - Wire format of a move

Each move travels as exactly one unsigned byte holding the 0-based column
index. There is no header, acknowledgment or handshake; the two peers
alternate reads and writes in lock step.
"""

from connect4net.errors import DesyncError
from connect4net.utils import WIDTH


def encode_move(column: int) -> int:
    """Return the framing byte for a 0-based column."""
    if not 0 <= column < WIDTH:
        raise ValueError(f"Column {column} cannot be sent, expected 0-{WIDTH - 1}")
    return column


def decode_move(value: int) -> int:
    """
    Turn a received framing byte into a 0-based column.

    Raises:
        DesyncError: if the byte is not a column index
    """
    if not 0 <= value < WIDTH:
        raise DesyncError(f"Peer sent column byte {value}, expected 0-{WIDTH - 1}", value)
    return value
