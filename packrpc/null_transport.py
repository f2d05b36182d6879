"""Null transport: the client hands its buffers straight to a local server."""

from __future__ import annotations

from typing import Any

from .client import Client
from .server import Server


class NullClient:
    """Calls functions bound on an in-process :class:`Server` directly."""

    def __init__(self, server: Server) -> None:
        self._server = server
        self._client = Client()

    def call(self, func_id: str, *args: Any, void: bool = False) -> Any:
        """Call ``func_id`` on the server and return its result.

        With ``void=True`` no result is expected and ``None`` is returned.
        Errors raised by the server propagate; a response that cannot be
        matched to the call is raised from the result.
        """
        future, buffer, call_id = self._client.call(func_id, *args, void=void)

        try:
            response = self._server.handle_call(buffer)
        except BaseException as err:
            self._client.cancel(call_id, err)
            raise

        if void:
            return None

        try:
            self._client.ingest_resp(response, True)
        except Exception as err:
            self._client.cancel(call_id, err)

        return future.result()