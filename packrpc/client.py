"""Transport agnostic RPC client.

A call is turned into a msgpack buffer and a future. The caller moves the
buffer over any transport and feeds the server's answer back through
:meth:`Client.ingest_resp`, which resolves the future.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future
from typing import Any, Callable

import msgpack

from .errors import ClientError

_ID_MASK = 0xFFFFFFFF

_Waiter = Callable[[Any, bool, "BaseException | None"], None]


def serialize_call(call_id: int, func_id: str, *args: Any) -> bytes:
    """Pack a call as the msgpack array ``[call_id, func_id, *args]``."""
    return msgpack.packb([call_id, func_id, *args], use_bin_type=True)


class Client:
    """Builds call buffers and matches responses to pending futures."""

    def __init__(self) -> None:
        self._next_id = int(time.time()) & _ID_MASK
        self._id_lock = threading.Lock()
        self._waiters: dict[int, _Waiter] = {}
        self._lock = threading.Lock()

    def _take_id(self) -> int:
        with self._id_lock:
            call_id = self._next_id
            self._next_id = (self._next_id + 1) & _ID_MASK
            return call_id

    def call(
        self, func_id: str, *args: Any, void: bool = False
    ) -> tuple[Future, bytes, int]:
        """Prepare a call expecting a single response.

        Returns ``(future, buffer, call_id)``. With ``void=True`` no response
        is expected and the future is already resolved with ``None``.
        """
        call_id = self._take_id()
        data = serialize_call(call_id, func_id, *args)
        future: Future = Future()

        if void:
            future.set_result(None)
            return future, data, call_id

        def waiter(value: Any, last: bool, exc: BaseException | None) -> None:
            if future.done():
                return
            if exc is not None:
                future.set_exception(exc)
            else:
                future.set_result(value)

        with self._lock:
            self._waiters[call_id] = waiter
        return future, data, call_id

    def multi_call(
        self, func_id: str, *args: Any, void: bool = False
    ) -> tuple[Future, bytes, int]:
        """Prepare a call answered by several servers.

        The future resolves with the list of all responses once the one
        marked ``last`` has been ingested. With ``void=True`` it is already
        resolved with ``None``.
        """
        call_id = self._take_id()
        data = serialize_call(call_id, func_id, *args)
        future: Future = Future()

        if void:
            future.set_result(None)
            return future, data, call_id

        results: list[Any] = []

        def waiter(value: Any, last: bool, exc: BaseException | None) -> None:
            if future.done():
                return
            if exc is not None:
                future.set_exception(exc)
                return
            results.append(value)
            if last:
                future.set_result(list(results))

        with self._lock:
            self._waiters[call_id] = waiter
        return future, data, call_id

    def cancel(self, call_id: int, exc: BaseException) -> bool:
        """Fail a pending call with ``exc``; return False if it is not pending."""
        with self._lock:
            waiter = self._waiters.pop(call_id, None)
        if waiter is None:
            return False
        waiter(None, True, exc)
        return True

    def ingest_resp(self, buffer: bytes, last: bool = True) -> None:
        """Feed one response buffer ``[call_id, value]`` to its pending call."""
        try:
            items = msgpack.unpackb(buffer, raw=False)
        except Exception as err:
            raise ClientError("malformed response buffer") from err

        if not isinstance(items, (list, tuple)) or len(items) != 2:
            raise ClientError("malformed response buffer")

        call_id, value = items
        if not isinstance(call_id, int) or isinstance(call_id, bool):
            raise ClientError("malformed response buffer")

        with self._lock:
            waiter = self._waiters.get(call_id)
            if waiter is None:
                raise ClientError(f"unexpected callID on return: {call_id}")
            if last:
                del self._waiters[call_id]

        waiter(value, last, None)