from .future import Future, FutureState, unpack_result
from .patterns import async_each, async_group, async_map, async_select, make_future
from .scheduler import (
    LoopScheduler,
    Scheduler,
    TickScheduler,
    get_scheduler,
    tick_scheduler,
)

__all__ = (
    "Future",
    "FutureState",
    "unpack_result",
    "make_future",
    "async_group",
    "async_each",
    "async_map",
    "async_select",
    "Scheduler",
    "LoopScheduler",
    "TickScheduler",
    "get_scheduler",
    "tick_scheduler",
)
