# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Cooperative "next tick" schedulers.

A scheduler runs a callback after the caller's stack has unwound. Inside a
running asyncio loop the loop itself is used; elsewhere a process-wide
:class:`TickScheduler` queues the callbacks until someone drains it.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

__all__ = (
    "Scheduler",
    "LoopScheduler",
    "TickScheduler",
    "get_scheduler",
    "tick_scheduler",
)


@runtime_checkable
class Scheduler(Protocol):
    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None: ...


class LoopScheduler:
    """Defers callbacks to an asyncio event loop.

    Args:
        loop: Target loop. ``None`` resolves the running loop on every call.
    """

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        loop = self.loop
        if loop.is_running() and _owns_loop(loop):
            loop.call_soon(callback, *args)
        else:
            loop.call_soon_threadsafe(callback, *args)


def _owns_loop(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


class TickScheduler:
    """FIFO of deferred callbacks drained explicitly, one tick at a time.

    Callbacks queued while a tick runs belong to the next tick. A callback that
    raises is logged and the tick carries on.
    """

    def __init__(self):
        self._queue: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._lock = threading.Lock()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        with self._lock:
            self._queue.append((callback, args))

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def run_pending(self) -> int:
        """Run one tick. Returns the number of callbacks executed."""
        with self._lock:
            batch = list(self._queue)
            self._queue.clear()
        for callback, args in batch:
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Error in scheduled callback {callback!r}: {e}", exc_info=True)
        return len(batch)

    def run_until_idle(self, max_ticks: int | None = None) -> int:
        """Run ticks until the queue is empty. Returns the number of ticks run."""
        ticks = 0
        while self.pending:
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.run_pending()
            ticks += 1
        return ticks

    def clear(self) -> None:
        with self._lock:
            self._queue.clear()


_tick_scheduler = TickScheduler()


def tick_scheduler() -> TickScheduler:
    """The process-wide scheduler used outside a running event loop."""
    return _tick_scheduler


def get_scheduler() -> Scheduler:
    """Scheduler for the current context: the running loop, else the tick queue."""
    try:
        return LoopScheduler(asyncio.get_running_loop())
    except RuntimeError:
        return _tick_scheduler
