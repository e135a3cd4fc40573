"""
session.py - Turn protocol for a game between two machines

A Session owns one board and one transport. It alternates between asking
the local move source for a column and reading the peer's column from the
transport, so both machines apply the same placements in the same order.
A peer move that does not fit the local board ends the session; it is
never corrected, because the two boards would no longer agree.
"""

from enum import Enum, auto
from typing import Callable, Optional

from connect4net.debug import debug
from connect4net.errors import (DesyncError, InvalidColumnError, InvalidPlayerError,
                                ParseError, TransportError)
from connect4net.game.board import Board
from connect4net.net.framing import decode_move, encode_move
from connect4net.net.transport import Transport
from connect4net.utils import WIDTH, GameResult, Player, opponent, parse_column

COLUMN_ERROR = f"Not a valid column number. Select 1-{WIDTH}."
WAITING_MESSAGE = "It is your opponent's turn, waiting for them to make a move."
DRAW_MESSAGE = "No more available slots remain. Result is a draw."


def result_message(result: GameResult) -> str:
    """Text announcing a finished game."""
    if result.winner is not None:
        return f"{result.winner.glyph} wins!"
    if result == GameResult.DRAW:
        return DRAW_MESSAGE
    if result == GameResult.ABORTED:
        return "Game aborted."
    return "Game in progress."


class SessionState(Enum):
    AWAITING_LOCAL_MOVE = auto()
    AWAITING_REMOTE_MOVE = auto()
    FINISHED = auto()


class Session:
    """
    One networked game seen from one side.

    Player.ONE moves first, so a session whose local player is ONE starts
    by waiting for local input and a session whose local player is TWO
    starts by reading from the peer.

    Args:
        transport: Connection to the peer
        local_player: The side this process plays
        move_source: Supplies local moves as 1-based column text
        display: Callable receiving user-facing messages
    """

    def __init__(self, transport: Transport, local_player: Player, move_source,
                 display: Callable[[str], None] = print):
        if not isinstance(local_player, Player):
            raise InvalidPlayerError(local_player)

        self.transport = transport
        self.local_player = local_player
        self.remote_player = opponent(local_player)
        self.move_source = move_source
        self.display = display

        self.board = Board()
        self.result = GameResult.IN_PROGRESS
        self.error: Optional[TransportError] = None
        if local_player == Player.ONE:
            self.state = SessionState.AWAITING_LOCAL_MOVE
        else:
            self.state = SessionState.AWAITING_REMOTE_MOVE

        debug.info(f"Session started as {local_player.name} with {transport!r}", "session")

    @property
    def current_player(self) -> Optional[Player]:
        """The player expected to move next, or None once finished."""
        if self.state == SessionState.AWAITING_LOCAL_MOVE:
            return self.local_player
        if self.state == SessionState.AWAITING_REMOTE_MOVE:
            return self.remote_player
        return None

    @property
    def finished(self) -> bool:
        """True once the game has ended or been aborted."""
        return self.state == SessionState.FINISHED

    def run(self) -> GameResult:
        """
        Play until the game ends.

        The transport is shut down in both directions on every exit path.

        Returns:
            The final game result

        Raises:
            TransportError: if the connection fails or the peer desynchronizes
        """
        with self.transport:
            while not self.finished:
                self.step()
        return self.result

    def step(self) -> SessionState:
        """
        Perform one transition of the protocol.

        Returns:
            The state after the transition
        """
        if self.state == SessionState.AWAITING_LOCAL_MOVE:
            self._local_turn()
        elif self.state == SessionState.AWAITING_REMOTE_MOVE:
            self._remote_turn()
        else:
            raise RuntimeError(f"Session is finished ({self.result.name})")
        return self.state

    def _local_turn(self) -> None:
        text = self.move_source.next_move(self.board.copy(), self.local_player)
        try:
            column = parse_column(text)
            self.board.place(column, self.local_player)
        except (ParseError, InvalidColumnError) as e:
            debug.debug(f"Local move rejected: {e}", "session")
            self.display(COLUMN_ERROR)
            return

        try:
            self.transport.write_byte(encode_move(column))
        except TransportError as e:
            self._abort(e)
            raise

        debug.debug(f"Sent local move: column {column}", "session")
        self._after_placement(SessionState.AWAITING_REMOTE_MOVE)

    def _remote_turn(self) -> None:
        self.display(WAITING_MESSAGE)
        try:
            value = self.transport.read_byte()
            column = decode_move(value)
            try:
                self.board.place(column, self.remote_player)
            except InvalidColumnError as e:
                raise DesyncError(f"Peer played column {column} which cannot take a piece", value) from e
        except TransportError as e:
            self._abort(e)
            raise

        debug.debug(f"Received remote move: column {column}", "session")
        self._after_placement(SessionState.AWAITING_LOCAL_MOVE)

    def _after_placement(self, next_state: SessionState) -> None:
        self.display(self.board.render())

        result = self.board.result()
        if result.is_game_over():
            self.result = result
            self.state = SessionState.FINISHED
            debug.info(f"Session finished: {result.name} after {len(self.board.moves)} moves", "session")
            self.display(result_message(result))
        else:
            self.state = next_state

    def _abort(self, error: TransportError) -> None:
        debug.error(f"Session aborted: {error}", "session")
        self.error = error
        self.result = GameResult.ABORTED
        self.state = SessionState.FINISHED
