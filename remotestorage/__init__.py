# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import TYPE_CHECKING

from .ln.types import Undefined, Unset
from .version import __version__

if TYPE_CHECKING:
    from .access import Access, AccessMode
    from .diagnostics import Diagnostics
    from .ln.concurrency import (
        Future,
        TickScheduler,
        async_each,
        async_group,
        async_map,
        async_select,
        make_future,
    )
    from .protocols.generic import EventEmitter
    from .service import ConnectionState, MemoryTransport, WireClient

logger = logging.getLogger(__name__)
# level filtering happens in Diagnostics; let every forwarded record through
logger.setLevel(logging.DEBUG)

_lazy_imports = {}

_LAZY_MODULES = {
    "Access": "access",
    "AccessMode": "access",
    "Diagnostics": "diagnostics",
    "settings": "config",
    "Future": "ln.concurrency",
    "TickScheduler": "ln.concurrency",
    "make_future": "ln.concurrency",
    "async_group": "ln.concurrency",
    "async_each": "ln.concurrency",
    "async_map": "ln.concurrency",
    "async_select": "ln.concurrency",
    "EventEmitter": "protocols.generic",
    "ConnectionState": "service",
    "MemoryTransport": "service",
    "WireClient": "service",
}


def __getattr__(name: str):
    if name in _lazy_imports:
        return _lazy_imports[name]
    if name not in _LAZY_MODULES:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

    from importlib import import_module

    module = import_module(f"{__name__}.{_LAZY_MODULES[name]}")
    obj_ = getattr(module, name)
    _lazy_imports[name] = obj_
    return obj_


__all__ = (
    "__version__",
    "Access",
    "AccessMode",
    "ConnectionState",
    "Diagnostics",
    "EventEmitter",
    "Future",
    "MemoryTransport",
    "TickScheduler",
    "Undefined",
    "Unset",
    "WireClient",
    "async_each",
    "async_group",
    "async_map",
    "async_select",
    "logger",
    "make_future",
    "settings",
)
