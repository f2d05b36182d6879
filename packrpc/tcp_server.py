"""TCP transport for the RPC server."""

from __future__ import annotations

import socket
import threading

from .server import Server
from .tcp import recv_buffer, send_buffer, server_socket

_ACCEPT_POLL = 0.2


class TcpServer(Server):
    """An RPC server answering framed calls over TCP.

    Each connection is served by its own thread; a call that fails drops
    the connection. ``port`` holds the port actually listened on, which
    matters when 0 was asked for.
    """

    def __init__(self, port: int) -> None:
        super().__init__()
        self._listen = server_socket(port)
        self._listen.settimeout(_ACCEPT_POLL)
        self.port = self._listen.getsockname()[1]
        self._stopped = threading.Event()
        self._conns: set[socket.socket] = set()
        self._conns_lock = threading.Lock()

    def run(self) -> None:
        """Accept and serve connections until :meth:`close` is called."""
        while not self._stopped.is_set():
            try:
                conn, _ = self._listen.accept()
            except socket.timeout:
                continue
            except OSError:
                if self._stopped.is_set():
                    break
                continue

            with self._conns_lock:
                if self._stopped.is_set():
                    conn.close()
                    break
                self._conns.add(conn)
            threading.Thread(target=self._serve, args=(conn,), daemon=True).start()

    def _serve(self, conn: socket.socket) -> None:
        try:
            while True:
                request = recv_buffer(conn)
                if not request:
                    break
                response = self.handle_call(request)
                if response:
                    send_buffer(conn, response)
        except Exception:
            # A failing call ends the connection; the client sees no response.
            pass
        finally:
            with self._conns_lock:
                self._conns.discard(conn)
            conn.close()

    def close(self) -> None:
        """Stop accepting and drop every open connection."""
        self._stopped.set()
        self._listen.close()
        with self._conns_lock:
            conns = list(self._conns)
        for conn in conns:
            try:
                conn.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            conn.close()

    def __enter__(self) -> TcpServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()