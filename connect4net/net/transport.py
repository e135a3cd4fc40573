"""
transport.py - Byte stream transports used by network sessions

A session only needs three operations from its peer connection: read one
byte, write one byte and shut the stream down. Transports are context
managers; leaving the block shuts down both directions whatever the exit
path.
"""

import socket
from typing import Optional

from connect4net.debug import debug
from connect4net.errors import TransportError


class Transport:
    """Interface of a bidirectional ordered byte stream."""

    def read_byte(self) -> int:
        """Block until one byte arrives and return it (0-255)."""
        raise NotImplementedError

    def write_byte(self, value: int) -> None:
        """
        Send one byte to the peer.

        Raises:
            TransportError: if the stream is closed or the write fails
        """
        raise NotImplementedError

    def shutdown(self) -> None:
        """Shut down reading and writing. Safe to call more than once."""
        raise NotImplementedError

    def __enter__(self) -> 'Transport':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()


class SocketTransport(Transport):
    """Transport over a connected stream socket."""

    def __init__(self, sock: socket.socket, peer: Optional[str] = None):
        self.sock = sock
        self.peer = peer or _peer_name(sock)
        self.closed = False

    def read_byte(self) -> int:
        try:
            data = self.sock.recv(1)
        except OSError as e:
            raise TransportError(f"Error reading from {self.peer}: {e}") from e

        if not data:
            raise TransportError(f"Connection closed by {self.peer}")

        debug.trace(f"Read byte {data[0]} from {self.peer}", "net")
        return data[0]

    def write_byte(self, value: int) -> None:
        try:
            self.sock.sendall(bytes([value]))
        except (OSError, ValueError) as e:
            raise TransportError(f"Error writing to {self.peer}: {e}") from e
        debug.trace(f"Wrote byte {value} to {self.peer}", "net")

    def shutdown(self) -> None:
        if self.closed:
            return
        self.closed = True

        debug.debug(f"Shutting down connection to {self.peer}", "net")
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            # Already disconnected
            debug.trace(f"Shutdown of {self.peer} failed: {e}", "net")
        finally:
            self.sock.close()

    def __repr__(self) -> str:
        return f"SocketTransport(peer={self.peer!r}, closed={self.closed})"


def _peer_name(sock: socket.socket) -> str:
    try:
        peer = sock.getpeername()
    except OSError:
        return "peer"
    if isinstance(peer, tuple) and len(peer) >= 2:
        return f"{peer[0]}:{peer[1]}"
    return str(peer) or "peer"
