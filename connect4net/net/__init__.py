"""
connect4net.net - Network play for Connect Four

This package contains the one-byte move framing, socket transports, the
listener and connector, and the turn protocol that keeps two machines'
boards in step.
"""

from connect4net.net.session import Session, SessionState
from connect4net.net.transport import Transport, SocketTransport

__all__ = ['Session', 'SessionState', 'Transport', 'SocketTransport']
