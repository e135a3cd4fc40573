"""
errors.py - Exception hierarchy for connect4net

Board and input errors are recoverable (the caller asks for another move).
Transport errors end the session they occur in.
"""


class Connect4Error(Exception):
    """Base class for every error raised by connect4net."""


class BoardError(Connect4Error):
    """A placement was rejected by the board."""


class InvalidColumnError(BoardError):
    """The column is out of range or already full."""

    def __init__(self, column, reason: str = "out of range"):
        super().__init__(f"Invalid column {column!r}: {reason}")
        self.column = column
        self.reason = reason


class InvalidPlayerError(BoardError):
    """The piece passed to the board is not Player.ONE or Player.TWO."""

    def __init__(self, player):
        super().__init__(f"Invalid player token {player!r}")
        self.player = player


class ParseError(Connect4Error, ValueError):
    """Local input could not be read as a column number."""

    def __init__(self, text):
        super().__init__(f"Cannot parse column from {text!r}")
        self.text = text


class TransportError(Connect4Error):
    """Reading from or writing to the peer failed, or the peer hung up."""


class DesyncError(TransportError):
    """The peer sent a move that does not fit the local board."""

    def __init__(self, message: str, value=None):
        super().__init__(message)
        self.value = value
