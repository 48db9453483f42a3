# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Fan-out/fan-in combinators built on :class:`Future`.

Key Features:
- make_future: run a producer on the next tick and adopt its outcome
- async_group: run callables, collect index-aligned results and errors
- async_each: run a callable per item, keep the items
- async_map: transform items
- async_select: filter items by a (possibly deferred) predicate

Task failures never fail the combinator future: they are collected into the
``errors`` list and leave ``Undefined`` at their slot. Results are stored by
input index, so ordering never depends on completion order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import partial
from typing import Any, TypeVar

from ..._errors import ArgumentError
from ...diagnostics import Diagnostics
from ..types import Undefined
from .future import Future, unpack_result
from .scheduler import Scheduler

T = TypeVar("T")
R = TypeVar("R")

__all__ = (
    "make_future",
    "async_group",
    "async_each",
    "async_map",
    "async_select",
)


def make_future(
    producer: Callable[[Future], Any],
    *,
    scheduler: Scheduler | None = None,
    diagnostics: Diagnostics | None = None,
) -> Future:
    """Run ``producer(future)`` on the next tick and return ``future``.

    The producer may settle the future itself or return another future to be
    adopted. An exception it raises fails the future.
    """
    future = Future(scheduler=scheduler, diagnostics=diagnostics)

    def _run() -> None:
        try:
            outcome = producer(future)
        except Exception as exc:
            if not future.is_pending:
                raise
            future.fail(exc)
            return
        if isinstance(outcome, Future):
            outcome.then(future.fulfill, future.fail)

    future.scheduler.call_soon(_run)
    return future


def async_group(
    *tasks: Callable[[], Any],
    scheduler: Scheduler | None = None,
    diagnostics: Diagnostics | None = None,
) -> Future:
    """Run every task and fulfill with ``(results, errors)``.

    Args:
        *tasks: Zero-argument callables returning a value or a Future.

    Returns:
        Future fulfilled once all tasks finished. ``results`` has one slot per
        task, in task order; failed tasks leave ``Undefined`` and add their
        error to ``errors``.

    Raises:
        ArgumentError: If a task is not callable.
    """
    for task in tasks:
        if not callable(task):
            raise ArgumentError.from_value(
                task, expected="callable", message=f"async_group got non-function: {task!r}"
            )

    def _start(future: Future) -> None:
        if not tasks:
            future.fulfill([], [])
            return

        log = future.diagnostics.get_logger("group")
        results: list[Any] = [Undefined] * len(tasks)
        errors: list[Any] = []
        remaining = len(tasks)

        def _finish(index: int, value: Any) -> None:
            nonlocal remaining
            results[index] = value
            remaining -= 1
            if remaining == 0:
                future.fulfill(results, errors)

        def _fail(index: int, error: Any) -> None:
            log.error("group part failed:", error)
            errors.append(error)
            _finish(index, Undefined)

        for index, task in enumerate(tasks):
            try:
                outcome = task()
            except Exception as exc:
                _fail(index, exc)
                continue
            if isinstance(outcome, Future):
                outcome.then(
                    lambda *values, i=index: _finish(i, unpack_result(values)),
                    lambda error=None, *_, i=index: _fail(i, error),
                )
            else:
                _finish(index, outcome)

    return make_future(_start, scheduler=scheduler, diagnostics=diagnostics)


def async_each(
    items: Iterable[T],
    func: Callable[[T, int], Any],
    *,
    scheduler: Scheduler | None = None,
    diagnostics: Diagnostics | None = None,
) -> Future:
    """Call ``func(item, index)`` for every item; fulfill with ``(items, errors)``."""
    items = list(items)
    outcome = Future(scheduler=scheduler, diagnostics=diagnostics)
    group = async_group(
        *(partial(func, item, index) for index, item in enumerate(items)),
        scheduler=outcome.scheduler,
        diagnostics=outcome.diagnostics,
    )
    group.then(lambda _results, errors: outcome.fulfill(items, errors), outcome.fail)
    return outcome


def async_map(
    items: Iterable[T],
    func: Callable[[T], R | Future],
    *,
    scheduler: Scheduler | None = None,
    diagnostics: Diagnostics | None = None,
) -> Future:
    """Call ``func(item)`` for every item; fulfill with ``(results, errors)``."""
    return async_group(
        *(partial(func, item) for item in items),
        scheduler=scheduler,
        diagnostics=diagnostics,
    )


def async_select(
    items: Iterable[T],
    predicate: Callable[[T], Any],
    *,
    scheduler: Scheduler | None = None,
    diagnostics: Diagnostics | None = None,
) -> Future:
    """Fulfill with the items whose predicate result is truthy, in input order.

    ``predicate`` may return a plain value or a Future. Items whose predicate
    fails are left out.
    """
    items = list(items)
    keep = [False] * len(items)

    def _test(item: T, index: int) -> Any:
        verdict = predicate(item)
        if isinstance(verdict, Future):
            return verdict.then(lambda *values: keep.__setitem__(index, bool(unpack_result(values))))
        keep[index] = bool(verdict)
        return None

    return async_each(items, _test, scheduler=scheduler, diagnostics=diagnostics).then(
        lambda selected, _errors: [item for item, kept in zip(selected, keep) if kept]
    )
