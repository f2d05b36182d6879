"""Transport agnostic RPC server."""

from __future__ import annotations

import threading
from typing import Any, Callable

import msgpack

from .errors import ServerError


class Server:
    """Dispatches msgpack call buffers to bound Python callables.

    A function that returns ``None`` is treated as having no return value:
    its call produces an empty response buffer.
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, Callable[..., Any]] = {}
        self._lock = threading.Lock()

    def bind(self, func_id: str, func: Callable[..., Any]) -> None:
        """Register ``func`` under ``func_id``; an existing binding is kept."""
        with self._lock:
            self._callbacks.setdefault(func_id, func)

    def unbind(self, func_id: str) -> None:
        """Remove the binding for ``func_id`` if there is one."""
        with self._lock:
            self._callbacks.pop(func_id, None)

    def handle_call(self, buffer: bytes) -> bytes:
        """Run the call in ``buffer`` and return the packed response.

        The response is ``[call_id, result]``, or empty bytes when the
        function returned nothing.
        """
        try:
            items = msgpack.unpackb(buffer, raw=False)
        except Exception as err:
            raise ServerError("malformed call buffer") from err

        if not isinstance(items, (list, tuple)) or len(items) < 2:
            raise ServerError("malformed call buffer")

        call_id, func_id, *args = items
        if (
            not isinstance(call_id, int)
            or isinstance(call_id, bool)
            or not isinstance(func_id, str)
        ):
            raise ServerError("malformed call buffer")

        with self._lock:
            func = self._callbacks.get(func_id)
        if func is None:
            raise ServerError(f"unregistered function: {func_id}")

        result = func(*args)
        if result is None:
            return b""
        return msgpack.packb([call_id, result], use_bin_type=True)