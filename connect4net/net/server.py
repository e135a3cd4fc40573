"""
server.py - Opening connections for network play

The listening side accepts exactly one opponent and plays Player.ONE.
The connecting side plays Player.TWO.
"""

import socket
from typing import Callable, Optional, Tuple

from connect4net import config
from connect4net.debug import debug
from connect4net.errors import TransportError
from connect4net.net.transport import SocketTransport


def parse_address(address: str, default_port: int = config.DEFAULT_PORT) -> Tuple[str, int]:
    """
    Split 'host:port' into its parts.

    A bare host uses `default_port`; IPv6 hosts are written '[::1]:port'.

    Raises:
        ValueError: if the port is not a number in 1-65535
    """
    address = address.strip()
    if not address:
        raise ValueError("Empty address")

    if address.startswith('['):
        host, sep, rest = address[1:].partition(']')
        if not sep:
            raise ValueError(f"Unterminated IPv6 address: {address!r}")
        port_text = rest[1:] if rest.startswith(':') else rest
    elif address.count(':') == 1:
        host, _, port_text = address.partition(':')
    else:
        host, port_text = address, ''

    if not port_text:
        return host or config.CONNECT_HOST, default_port

    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Invalid port in address {address!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range in address {address!r}")
    return host or config.CONNECT_HOST, port


def listen(host: str = config.DEFAULT_HOST, port: int = config.DEFAULT_PORT,
           on_listening: Optional[Callable[[Tuple[str, int]], None]] = None) -> SocketTransport:
    """
    Wait for one opponent to connect.

    Args:
        host: Address to bind
        port: Port to bind (0 picks a free port)
        on_listening: Called with the bound address once listening

    Returns:
        Transport for the accepted connection
    """
    try:
        # The address family follows the host, so '::' listens on IPv6
        family, _, _, _, sockaddr = socket.getaddrinfo(
            host or None, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE)[0]
        with socket.socket(family, socket.SOCK_STREAM) as listener:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(sockaddr)
            listener.listen(1)
            bound = listener.getsockname()[:2]
            debug.info(f"Listening on {bound[0]}:{bound[1]}", "net")
            if on_listening is not None:
                on_listening(bound)

            conn, addr = listener.accept()
    except OSError as e:
        raise TransportError(f"Cannot accept a connection on {host}:{port}: {e}") from e

    debug.info(f"Accepted connection from {addr[0]}:{addr[1]}", "net")
    return SocketTransport(conn, f"{addr[0]}:{addr[1]}")


def connect(address: str) -> SocketTransport:
    """
    Connect to a listening opponent.

    Args:
        address: 'host:port' of the listening side
    """
    host, port = parse_address(address)
    debug.info(f"Connecting to {host}:{port}", "net")
    try:
        sock = socket.create_connection((host, port))
    except OSError as e:
        raise TransportError(f"Cannot connect to {host}:{port}: {e}") from e
    return SocketTransport(sock, f"{host}:{port}")
