# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from enum import Enum as _Enum
from typing import Any, Generic, TypeVar

from ..._errors import ArgumentError, UnknownEventError
from ...ln.types import Enum

__all__ = ("EventEmitter",)

E = TypeVar("E", bound=_Enum)


class EventEmitter(Generic[E]):
    """Synchronous pub/sub over a closed vocabulary of events.

    The vocabulary is an Enum; members and their values are both accepted
    wherever an event is expected. Handlers run in registration order.
    Deregistration leaves a gap in the handler list instead of compacting it,
    so slots handed out to ``once`` handlers stay valid.

    Example::

        class WireEvent(str, Enum):
            CONNECTED = "connected"
            ERROR = "error"

        events = EventEmitter(WireEvent)
        events.on("connected", lambda: print("ready"))
        events.emit(WireEvent.CONNECTED)
    """

    def __init__(self, events: type[E] | Iterable[str]):
        if isinstance(events, type) and issubclass(events, _Enum):
            self._kinds: type[E] = events
        else:
            names = list(events)
            self._kinds = Enum(  # type: ignore[assignment]
                "EventKind", {name.upper(): name for name in names}, type=str
            )
        self._lock = threading.RLock()
        self._handlers: dict[E, list[Callable[..., Any] | None]] = self._setup_handlers()

    def _setup_handlers(self) -> dict[E, list[Callable[..., Any] | None]]:
        return {kind: [] for kind in self._kinds}

    @property
    def kinds(self) -> type[E]:
        return self._kinds

    def _resolve(self, event: E | str) -> E:
        try:
            return self._kinds(event)
        except ValueError:
            raise UnknownEventError(
                f"Unknown event: {event}",
                details={"event": event, "allowed": [k.value for k in self._kinds]},
            ) from None

    @staticmethod
    def _check_handler(handler: Any) -> None:
        if not callable(handler):
            raise ArgumentError.from_value(
                handler,
                expected="callable",
                message=f"Expected function as handler, got: {type(handler).__name__}",
            )

    def on(self, event: E | str, handler: Callable[..., Any]) -> None:
        kind = self._resolve(event)
        self._check_handler(handler)
        with self._lock:
            self._handlers[kind].append(handler)

    def once(self, event: E | str, handler: Callable[..., Any]) -> None:
        """Register ``handler`` for the next emission of ``event`` only."""
        kind = self._resolve(event)
        self._check_handler(handler)
        with self._lock:
            slots = self._handlers[kind]
            index = len(slots)

            def _fire_once(*args: Any) -> Any:
                with self._lock:
                    # a reset() in between replaced the list; nothing to clear
                    if index < len(slots) and slots[index] is _fire_once:
                        slots[index] = None
                return handler(*args)

            _fire_once.__wrapped__ = handler
            slots.append(_fire_once)

    def off(self, event: E | str, handler: Callable[..., Any]) -> None:
        """Clear the first slot holding ``handler``, including ``once`` registrations.

        No-op when absent.
        """
        kind = self._resolve(event)
        with self._lock:
            slots = self._handlers[kind]
            for index, registered in enumerate(slots):
                if registered is handler or getattr(registered, "__wrapped__", None) is handler:
                    slots[index] = None
                    return

    def emit(self, event: E | str, *args: Any) -> None:
        kind = self._resolve(event)
        with self._lock:
            handlers = list(self._handlers[kind])
        for handler in handlers:
            if handler is not None:
                handler(*args)

    def listener_count(self, event: E | str) -> int:
        kind = self._resolve(event)
        with self._lock:
            return sum(1 for handler in self._handlers[kind] if handler is not None)

    def reset(self) -> None:
        """Drop every handler; the vocabulary is kept."""
        with self._lock:
            self._handlers = self._setup_handlers()
