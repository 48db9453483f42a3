"""Tests for the cooperative schedulers."""

import asyncio
import logging

import pytest

from remotestorage.ln.concurrency import (
    LoopScheduler,
    Scheduler,
    TickScheduler,
    get_scheduler,
    tick_scheduler,
)


class TestTickScheduler:
    def test_callbacks_wait_for_tick(self, scheduler):
        calls = []
        scheduler.call_soon(calls.append, 1)
        assert calls == []
        assert scheduler.pending == 1
        assert scheduler.run_pending() == 1
        assert calls == [1]

    def test_work_queued_during_tick_runs_next_tick(self, scheduler):
        calls = []

        def first():
            calls.append("first")
            scheduler.call_soon(calls.append, "second")

        scheduler.call_soon(first)
        scheduler.run_pending()
        assert calls == ["first"]
        scheduler.run_pending()
        assert calls == ["first", "second"]

    def test_run_until_idle_counts_ticks(self, scheduler):
        scheduler.call_soon(lambda: scheduler.call_soon(lambda: None))
        assert scheduler.run_until_idle() == 2
        assert scheduler.pending == 0

    def test_max_ticks(self, scheduler):
        def again():
            scheduler.call_soon(again)

        scheduler.call_soon(again)
        assert scheduler.run_until_idle(max_ticks=3) == 3
        assert scheduler.pending == 1
        scheduler.clear()

    def test_raising_callback_is_logged_and_tick_continues(self, scheduler, caplog):
        calls = []

        def explode():
            raise RuntimeError("scheduled failure")

        scheduler.call_soon(explode)
        scheduler.call_soon(calls.append, "after")
        with caplog.at_level(logging.ERROR):
            scheduler.run_pending()
        assert calls == ["after"]
        assert "scheduled failure" in caplog.text

    def test_satisfies_protocol(self, scheduler):
        assert isinstance(scheduler, Scheduler)


class TestDefaults:
    def test_outside_loop_uses_tick_scheduler(self):
        assert get_scheduler() is tick_scheduler()

    @pytest.mark.anyio
    async def test_inside_loop_uses_loop(self, anyio_backend):
        scheduler = get_scheduler()
        assert isinstance(scheduler, LoopScheduler)
        assert scheduler.loop is asyncio.get_running_loop()

        done = asyncio.Event()
        scheduler.call_soon(done.set)
        await asyncio.wait_for(done.wait(), 1)


def test_tick_scheduler_is_fresh_per_fixture(scheduler):
    assert isinstance(scheduler, TickScheduler)
    assert scheduler is not tick_scheduler()
