"""TCP transport for the RPC client: one server or many at once."""

from __future__ import annotations

import threading
from typing import Any, Iterable

from .client import Client
from .errors import ClientError
from .tcp import client_socket, recv_buffer, send_buffer


class TcpClient:
    """Calls functions on a single TCP RPC server."""

    def __init__(self, host: str, port: int) -> None:
        self._sock = client_socket(host, port)
        self._client = Client()
        self._lock = threading.Lock()

    def call(self, func_id: str, *args: Any, void: bool = False) -> Any:
        """Call ``func_id`` remotely and return its result.

        With ``void=True`` the request is sent and ``None`` returned without
        waiting for an answer.
        """
        future, buffer, call_id = self._client.call(func_id, *args, void=void)

        with self._lock:
            send_buffer(self._sock, buffer)
            if void:
                return None
            response = recv_buffer(self._sock)

        if not response:
            self._client.cancel(call_id, ClientError("client: no response"))
        else:
            try:
                self._client.ingest_resp(response, True)
            except Exception as err:
                self._client.cancel(call_id, err)

        return future.result()

    def close(self) -> None:
        """Close the connection."""
        self._sock.close()

    def __enter__(self) -> TcpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class TcpMultiClient:
    """Calls the same function on several TCP RPC servers at once."""

    def __init__(self, host: str, ports: Iterable[int]) -> None:
        ports = list(ports)
        if not ports:
            raise ValueError("at least one port is required")
        self._client = Client()
        self._lock = threading.Lock()
        self._socks = []
        try:
            for port in ports:
                self._socks.append(client_socket(host, port))
        except BaseException:
            self.close()
            raise

    def call(self, func_id: str, *args: Any, void: bool = False) -> Any:
        """Call ``func_id`` on every server.

        Returns the list of results in the order the ports were given, or
        ``None`` with ``void=True``, where no answers are awaited.
        """
        future, buffer, call_id = self._client.multi_call(
            func_id, *args, void=void
        )

        with self._lock:
            for sock in self._socks:
                send_buffer(sock, buffer)
            if void:
                return None

            last_index = len(self._socks) - 1
            for index, sock in enumerate(self._socks):
                response = recv_buffer(sock)
                try:
                    self._client.ingest_resp(response, index == last_index)
                except Exception as err:
                    self._client.cancel(call_id, err)

        return future.result()

    def close(self) -> None:
        """Close every connection."""
        for sock in self._socks:
            sock.close()
        self._socks.clear()

    def __enter__(self) -> TcpMultiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()