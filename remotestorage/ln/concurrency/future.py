# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Single-resolution deferred values with chained continuations.

A :class:`Future` is settled exactly once, either fulfilled or failed, with a
tuple of values. Continuations registered through :meth:`Future.then` run
synchronously, in registration order, when it settles; chained settlements are
queued and drained iteratively, so long chains never deepen the stack of the
code that settled the head. Each continuation owns
a successor future that receives the handler's outcome, so chains read like::

    future.then(parse).then(store, report)

Failures that reach a future nobody listens to are reported to the diagnostic
sink instead of disappearing.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import anyio

from ..._errors import AlreadyResolvedError, ArgumentError, FutureFailedError
from ...diagnostics import Diagnostics
from ...diagnostics import diagnostics as default_diagnostics
from ..types import Enum, Undefined, Unset, is_sentinel
from .scheduler import Scheduler, get_scheduler

logger = logging.getLogger(__name__)

__all__ = (
    "FutureState",
    "Future",
    "unpack_result",
)

_dispatching = threading.local()

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool, type(None))


class FutureState(str, Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    FAILED = "failed"


def unpack_result(values: tuple[Any, ...]) -> Any:
    """Collapse a result tuple: ``()`` -> None, ``(x,)`` -> x, else the tuple."""
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


class _Continuation:
    __slots__ = ("on_fulfilled", "on_failed", "successor")

    def __init__(self, on_fulfilled, on_failed, successor: Future):
        self.on_fulfilled = on_fulfilled
        self.on_failed = on_failed
        self.successor = successor


def _run_dispatches(owner: Future, continuations: Iterable[_Continuation]) -> None:
    """Dispatch ``continuations`` of ``owner`` without growing the stack.

    Settlements triggered while dispatching are queued on this thread and
    drained by the outermost call, in FIFO order, before it returns. The first
    error escaping a dispatch is re-raised once the queue is empty.
    """
    queue: deque[tuple[Future, _Continuation]] | None = getattr(_dispatching, "queue", None)
    if queue is not None:
        queue.extend((owner, continuation) for continuation in continuations)
        return

    queue = _dispatching.queue = deque((owner, c) for c in continuations)
    first_error: Exception | None = None
    try:
        while queue:
            future, continuation = queue.popleft()
            try:
                future._dispatch(continuation)
            except Exception as e:
                if first_error is None:
                    first_error = e
                else:
                    logger.error(f"Error while settling chained future: {e}", exc_info=True)
    finally:
        _dispatching.queue = None
    if first_error is not None:
        raise first_error


class Future:
    """Deferred result settled once through :meth:`fulfill` or :meth:`fail`.

    Args:
        scheduler: Where ``*_later`` resolutions run. Defaults to the running
            asyncio loop, or the process-wide tick scheduler outside one.
        diagnostics: Context receiving uncaught failures.
    """

    __slots__ = (
        "_state",
        "_result",
        "_continuations",
        "_scheduler",
        "_diagnostics",
    )

    def __init__(
        self,
        *,
        scheduler: Scheduler | None = None,
        diagnostics: Diagnostics | None = None,
    ):
        self._state = FutureState.PENDING
        self._result: tuple[Any, ...] | Any = Unset
        self._continuations: list[_Continuation] = []
        self._scheduler = scheduler or get_scheduler()
        self._diagnostics = diagnostics or default_diagnostics

    def __repr__(self) -> str:
        if self._state is FutureState.PENDING:
            return "Future(state=pending)"
        return f"Future(state={self._state.value}, result={self._result!r})"

    @property
    def state(self) -> FutureState:
        return self._state

    @property
    def result(self) -> tuple[Any, ...] | Any:
        """The settled values, or ``Unset`` while pending."""
        return self._result

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    @property
    def is_pending(self) -> bool:
        return self._state is FutureState.PENDING

    @property
    def is_fulfilled(self) -> bool:
        return self._state is FutureState.FULFILLED

    @property
    def is_failed(self) -> bool:
        return self._state is FutureState.FAILED

    def spawn(self) -> Future:
        """New pending future sharing this one's scheduler and diagnostics."""
        return Future(scheduler=self._scheduler, diagnostics=self._diagnostics)

    # resolution

    def fulfill(self, *values: Any) -> None:
        self._settle(FutureState.FULFILLED, values)

    def fail(self, *values: Any) -> None:
        self._settle(FutureState.FAILED, values)

    def fulfill_later(self, *values: Any) -> Future:
        """Fulfill on the next scheduler tick."""
        self._scheduler.call_soon(self.fulfill, *values)
        return self

    def fail_later(self, *values: Any) -> Future:
        """Fail on the next scheduler tick."""
        self._scheduler.call_soon(self.fail, *values)
        return self

    def resolve(self, value: Any) -> None:
        """Adopt ``value`` if it is a future, otherwise fulfill with it."""
        if isinstance(value, Future):
            value.then(self.fulfill, self.fail)
        else:
            self.fulfill(value)

    def _settle(self, state: FutureState, values: tuple[Any, ...]) -> None:
        if self._state is not FutureState.PENDING:
            verb = "fulfill" if state is FutureState.FULFILLED else "fail"
            raise AlreadyResolvedError(
                f"Can't {verb} future, already resolved as: {self._state.value}",
                details={"state": self._state.value},
            )
        self._state = state
        self._result = values
        continuations, self._continuations = self._continuations, []
        if not continuations:
            if state is FutureState.FAILED:
                self._report_uncaught(values)
            return
        _run_dispatches(self, continuations)

    def _report_uncaught(self, values: tuple[Any, ...]) -> None:
        self._diagnostics.get_logger("future").error("Uncaught error:", *values)

    def _dispatch(self, continuation: _Continuation) -> None:
        values = self._result
        successor = continuation.successor
        if self._state is FutureState.FULFILLED:
            handler, passthrough = continuation.on_fulfilled, successor.fulfill
        else:
            handler, passthrough = continuation.on_failed, successor.fail

        if handler is None:
            passthrough(*values)
            return
        try:
            outcome = handler(*values)
        except Exception as exc:
            successor.fail(exc)
            return
        successor.resolve(outcome)

    # continuations

    def then(
        self,
        on_fulfilled: Callable[..., Any] | None = None,
        on_failed: Callable[..., Any] | None = None,
    ) -> Future:
        """Register handlers and return the future receiving their outcome.

        Both handlers are optional; a missing one passes the outcome through.
        Registering on a settled future dispatches immediately.
        """
        for name, handler in (("on_fulfilled", on_fulfilled), ("on_failed", on_failed)):
            if handler is not None and not callable(handler):
                raise ArgumentError.from_value(
                    handler,
                    expected="callable",
                    message=f"{name} handler must be callable",
                )
        continuation = _Continuation(on_fulfilled, on_failed, self.spawn())
        if self._state is FutureState.PENDING:
            self._continuations.append(continuation)
        else:
            _run_dispatches(self, (continuation,))
        return continuation.successor

    def catch(self, on_failed: Callable[..., Any]) -> Future:
        return self.then(None, on_failed)

    def get(self, *field_names: str) -> Future:
        """Future of the named fields of the resolved value.

        Mapping keys and attributes are both accepted; a missing field reads as
        ``Undefined``. Fails when the value is a scalar.
        """

        def _extract(value: Any = Undefined, *_: Any) -> Future:
            future = self.spawn()
            if is_sentinel(value) or isinstance(value, _SCALAR_TYPES):
                future.fail_later(
                    ArgumentError.from_value(
                        value,
                        expected="object",
                        message=(
                            "Can't get properties of non-object "
                            f"(properties: {', '.join(field_names)})"
                        ),
                    )
                )
            else:
                future.fulfill_later(*(_read_field(value, name) for name in field_names))
            return future

        return self.then(_extract)

    def call(self, method_name: str, *args: Any, **kwargs: Any) -> Future:
        """Future of ``resolved_value.method_name(*args, **kwargs)``."""

        def _invoke(value: Any = None, *_: Any) -> Any:
            return getattr(value, method_name)(*args, **kwargs)

        return self.then(_invoke)

    # awaiting

    async def wait(self) -> Any:
        """Wait for settlement; return the unpacked result or raise the failure."""
        done = anyio.Event()

        def _wake(*_: Any) -> None:
            done.set()

        self.then(_wake, _wake)
        await done.wait()
        if self._state is FutureState.FAILED:
            raise _as_exception(self._result)
        return unpack_result(self._result)

    def __await__(self):
        return self.wait().__await__()


def _read_field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name, Undefined)
    return getattr(value, name, Undefined)


def _as_exception(values: tuple[Any, ...]) -> BaseException:
    if values and isinstance(values[0], BaseException):
        return values[0]
    return FutureFailedError(values)
