# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Request/response primitive the wire client delegates to.

Callbacks follow the error-first convention. Errors are whatever the
transport produces; the wire client hands them to callers untouched.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

__all__ = (
    "GetCallback",
    "SetCallback",
    "Transport",
    "MemoryTransport",
)

GetCallback = Callable[[Any, Any, "str | None"], Any]
"""``callback(error, body, content_type)``"""

SetCallback = Callable[[Any, "int | None"], Any]
"""``callback(error, timestamp)``"""


@runtime_checkable
class Transport(Protocol):
    def get(self, address: str, token: str | None, callback: GetCallback) -> None: ...

    def set(
        self,
        address: str,
        body: Any,
        content_type: str | None,
        token: str | None,
        callback: SetCallback,
    ) -> None: ...


class MemoryTransport:
    """Transport answering from a dict, synchronously.

    Missing addresses read as ``(None, None, None)``. Setting ``None`` as the
    body deletes the entry. Every call is appended to :attr:`requests`.
    """

    def __init__(self):
        self._objects: dict[str, tuple[Any, str | None, int]] = {}
        self._lock = threading.Lock()
        self.requests: list[tuple[str, str, str | None]] = []

    @staticmethod
    def _now() -> int:
        return time.time_ns() // 1_000_000

    def get(self, address: str, token: str | None, callback: GetCallback) -> None:
        with self._lock:
            self.requests.append(("get", address, token))
            entry = self._objects.get(address)
        if entry is None:
            callback(None, None, None)
        else:
            body, content_type, _ = entry
            callback(None, body, content_type)

    def set(
        self,
        address: str,
        body: Any,
        content_type: str | None,
        token: str | None,
        callback: SetCallback,
    ) -> None:
        timestamp = self._now()
        with self._lock:
            self.requests.append(("set", address, token))
            if body is None:
                self._objects.pop(address, None)
            else:
                self._objects[address] = (body, content_type, timestamp)
        callback(None, timestamp)

    def timestamp_of(self, address: str) -> int | None:
        with self._lock:
            entry = self._objects.get(address)
        return entry[2] if entry else None
