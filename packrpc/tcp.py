"""TCP helpers: socket setup and length-prefixed message framing.

Every message on the wire is a 4-byte big-endian length followed by that
many bytes of payload.
"""

from __future__ import annotations

import socket
import struct

from .errors import RpcError

_HEADER = struct.Struct("!I")
_MAX_LENGTH = 0xFFFFFFFF
_BACKLOG = 5


def client_socket(host: str, port: int) -> socket.socket:
    """Connect to an IPv4 ``host`` and ``port`` and return the socket."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as err:
        raise RpcError("socket() failed") from err

    try:
        try:
            socket.inet_pton(socket.AF_INET, host)
        except OSError as err:
            raise RpcError("inet_pton failed") from err
        try:
            sock.connect((host, port))
        except OSError as err:
            raise RpcError("connect() failed") from err
    except BaseException:
        sock.close()
        raise
    return sock


def server_socket(port: int) -> socket.socket:
    """Return a socket listening on ``port`` on every IPv4 interface."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as err:
        raise RpcError("socket() failed") from err

    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(("", port))
        except OSError as err:
            raise RpcError("bind() failed") from err
        try:
            sock.listen(_BACKLOG)
        except OSError as err:
            raise RpcError("listen() failed") from err
    except BaseException:
        sock.close()
        raise
    return sock


def send_buffer(sock: socket.socket, data: bytes) -> None:
    """Send ``data`` as one framed message.

    Failures of the connection are not reported; the peer notices them as
    a missing response.
    """
    if len(data) > _MAX_LENGTH:
        raise ValueError("message too long for a 32-bit length prefix")
    try:
        sock.sendall(_HEADER.pack(len(data)) + bytes(data))
    except OSError:
        pass


def _recv_exact(sock: socket.socket, size: int) -> bytes | None:
    received = bytearray()
    while len(received) < size:
        chunk = sock.recv(size - len(received))
        if not chunk:
            return None
        received += chunk
    return bytes(received)


def recv_buffer(sock: socket.socket) -> bytes:
    """Receive one framed message.

    Returns empty bytes if the connection was closed or failed first.
    """
    try:
        header = _recv_exact(sock, _HEADER.size)
        if header is None:
            return b""
        (length,) = _HEADER.unpack(header)
        if length == 0:
            return b""
        payload = _recv_exact(sock, length)
    except OSError:
        return b""
    return payload or b""