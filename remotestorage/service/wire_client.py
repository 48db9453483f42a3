# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Connection state and path-addressed access to the remote storage.

The wire client persists three settings (storage type, storage base address,
bearer token) and derives the connection state from which of them are
present. Reads and writes resolve a storage path against the persisted base
address and delegate to a :class:`~remotestorage.service.transport.Transport`.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .._errors import ArgumentError, NotConnectedError
from ..config import settings
from ..diagnostics import Diagnostics
from ..diagnostics import diagnostics as default_diagnostics
from ..ln.concurrency import Future, Scheduler
from ..ln.types import Enum
from ..protocols.generic import EventEmitter
from ..storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore, SettingStore
from .transport import GetCallback, SetCallback, Transport

__all__ = (
    "ConnectionState",
    "WireEvent",
    "WireClient",
    "set_chain",
)

STORAGE_TYPE = "storage_type"
STORAGE_HREF = "storage_href"
BEARER_TOKEN = "bearer_token"


class ConnectionState(str, Enum):
    """How much of the remote configuration is persisted.

    Attributes:
        ANONYMOUS: storage type or address missing.
        AUTHING: storage type and address known, no token yet.
        CONNECTED: everything present.
    """

    ANONYMOUS = "anonymous"
    AUTHING = "authing"
    CONNECTED = "connected"


class WireEvent(str, Enum):
    CONNECTED = "connected"
    ERROR = "error"


def set_chain(
    driver: Transport,
    paths_to_values: Mapping[str, Any] | Iterable[tuple[str, Any]],
    content_type: str | None,
    token: str | None,
    callback: SetCallback,
) -> None:
    """Write entries one after another through ``driver.set``.

    The first error stops the chain and is passed to ``callback``. Otherwise
    ``callback(None, timestamp)`` receives the last write's timestamp, or
    ``None`` when there was nothing to write. Mappings are written in their
    iteration order and are not modified.
    """
    if isinstance(paths_to_values, Mapping):
        entries = iter(list(paths_to_values.items()))
    else:
        entries = iter(list(paths_to_values))

    last_timestamp = None
    running = False
    completed_inline = False

    def _written(error: Any, timestamp: int | None = None) -> None:
        nonlocal last_timestamp, completed_inline
        if error is not None:
            callback(error)
            return
        last_timestamp = timestamp
        if running:
            completed_inline = True
        else:
            _drive()

    # synchronous drivers complete inside driver.set; loop instead of recursing
    def _drive() -> None:
        nonlocal running, completed_inline
        running = True
        try:
            for path, value in entries:
                completed_inline = False
                driver.set(path, value, content_type, token, _written)
                if not completed_inline:
                    return
            callback(None, last_timestamp)
        finally:
            running = False

    _drive()


class WireClient:
    """Stores the user's storage information and drives the transport with it.

    Args:
        transport: Request/response primitive for the remote storage.
        store: Durable store for the configuration. Defaults to a JSON file
            when ``REMOTESTORAGE_SETTINGS_FILE`` is configured, else memory.
        prefix: Key prefix of the persisted fields.
        diagnostics: Logging context.
        scheduler: Scheduler of the futures returned by :meth:`get`/:meth:`set`.

    Events:
        connected: fired when the state changes into ``connected``.
        error: reserved.
    """

    def __init__(
        self,
        transport: Transport,
        store: KeyValueStore | None = None,
        *,
        prefix: str | None = None,
        diagnostics: Diagnostics | None = None,
        scheduler: Scheduler | None = None,
    ):
        if store is None:
            store = (
                JsonFileKeyValueStore(settings.REMOTESTORAGE_SETTINGS_FILE)
                if settings.REMOTESTORAGE_SETTINGS_FILE
                else MemoryKeyValueStore()
            )
        self.transport = transport
        self.diagnostics = diagnostics or default_diagnostics
        self.scheduler = scheduler
        self.events: EventEmitter[WireEvent] = EventEmitter(WireEvent)
        self._settings = SettingStore(
            settings.REMOTESTORAGE_WIRE_PREFIX if prefix is None else prefix,
            store,
            drop_invalid=True,
        )
        self._lock = threading.RLock()
        self._log = self.diagnostics.get_logger("wire")

    # configuration

    @property
    def storage_type(self) -> str | None:
        return self._settings.get(STORAGE_TYPE)

    @property
    def storage_href(self) -> str | None:
        return self._settings.get(STORAGE_HREF)

    @property
    def bearer_token(self) -> str | None:
        return self._settings.get(BEARER_TOKEN)

    def get_state(self) -> ConnectionState:
        with self._lock:
            if self.storage_type and self.storage_href:
                if self.bearer_token:
                    return ConnectionState.CONNECTED
                return ConnectionState.AUTHING
            return ConnectionState.ANONYMOUS

    def _persist(self, fields: dict[str, Any]) -> None:
        with self._lock:
            before = self.get_state()
            for key, value in fields.items():
                self._settings.set(key, value)
            after = self.get_state()
        if after is ConnectionState.CONNECTED and before is not ConnectionState.CONNECTED:
            self._log.info("connected to", self.storage_href)
            self.events.emit(WireEvent.CONNECTED)

    def set_storage_info(self, storage_type: str, storage_href: str) -> None:
        """Persist the storage type and base address.

        Fires ``connected`` if this completes the configuration.
        """
        self._persist({STORAGE_TYPE: storage_type, STORAGE_HREF: storage_href})

    def set_bearer_token(self, bearer_token: str) -> None:
        """Persist the token; fires ``connected`` if this completes the configuration."""
        self._persist({BEARER_TOKEN: bearer_token})

    def disconnect(self) -> None:
        """Forget the whole configuration. No event is fired."""
        with self._lock:
            for key in (STORAGE_TYPE, STORAGE_HREF, BEARER_TOKEN):
                self._settings.remove(key)
        self._log.debug("disconnected")

    # events

    def on(self, event: WireEvent | str, handler: Callable[..., Any]) -> None:
        self.events.on(event, handler)

    def once(self, event: WireEvent | str, handler: Callable[..., Any]) -> None:
        self.events.once(event, handler)

    # remote access

    def resolve(self, path: str) -> str:
        """Absolute address of ``path``: the storage base address plus the path, verbatim."""
        if not isinstance(path, str) or not path:
            raise ArgumentError.from_value(
                path, expected="non-empty str", message='argument "path" should be a string'
            )
        storage_href = self.storage_href
        if not storage_href:
            raise NotConnectedError(
                "No storage address configured", details={"state": self.get_state().value}
            )
        return storage_href + path

    def get(self, path: str, callback: GetCallback | None = None) -> Future | None:
        """Fetch ``path`` from the remote storage.

        With a callback, ``callback(error, body, content_type)`` is called as the
        transport calls it. Without one, a Future is returned, fulfilled with
        ``(body, content_type)`` or failed with the error.
        """
        future, callback = self._bind(callback)
        try:
            address = self.resolve(path)
        except (ArgumentError, NotConnectedError) as exc:
            callback(exc, None, None)
            return future
        self._log.debug("get", address)
        self.transport.get(address, self.bearer_token, callback)
        return future

    def set(
        self,
        path: str,
        body: Any,
        content_type: str | None,
        callback: SetCallback | None = None,
    ) -> Future | None:
        """Write ``body`` to ``path`` with ``content_type``.

        With a callback, ``callback(error, timestamp)`` is called as the
        transport calls it. Without one, a Future is returned, fulfilled with
        the timestamp or failed with the error.
        """
        future, callback = self._bind(callback)
        try:
            address = self.resolve(path)
        except (ArgumentError, NotConnectedError) as exc:
            callback(exc, None)
            return future
        self._log.debug("set", address, content_type)
        self.transport.set(address, body, content_type, self.bearer_token, callback)
        return future

    def set_many(
        self,
        paths_to_values: Mapping[str, Any] | Iterable[tuple[str, Any]],
        content_type: str | None,
        callback: SetCallback | None = None,
    ) -> Future | None:
        """Write several paths sequentially, stopping at the first error."""
        future, callback = self._bind(callback)
        items = paths_to_values.items() if isinstance(paths_to_values, Mapping) else paths_to_values
        try:
            resolved = [(self.resolve(path), value) for path, value in items]
        except (ArgumentError, NotConnectedError) as exc:
            callback(exc, None)
            return future
        set_chain(self.transport, resolved, content_type, self.bearer_token, callback)
        return future

    def _bind(self, callback: Callable[..., Any] | None) -> tuple[Future | None, Callable[..., Any]]:
        if callback is not None:
            return None, callback
        future = Future(scheduler=self.scheduler, diagnostics=self.diagnostics)

        # deferred so callers can attach handlers even when the transport answers inline
        def _settle(error: Any, *results: Any) -> None:
            if error is not None:
                future.fail_later(error)
            else:
                future.fulfill_later(*results)

        return future, _settle
