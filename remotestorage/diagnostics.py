# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Process-wide diagnostic context.

Every component logs through a named :class:`DiagnosticLogger` obtained from a
:class:`Diagnostics` instance. The instance owns the global switches: which of
the three levels (``error``, ``info``, ``debug``) are enabled, which logger
names are silenced, and an optional function that replaces the default sink.

Defaults: ``error`` and ``info`` enabled, ``debug`` disabled, nothing silenced,
records forwarded to the standard :mod:`logging` logger
``remotestorage.<name>``.

Example::

    diagnostics = Diagnostics()
    log = diagnostics.get_logger("wire")
    log.info("connected to", href)
    diagnostics.silence("wire")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ._errors import ArgumentError
from .ln.types import Enum

if TYPE_CHECKING:
    from .config import AppSettings

__all__ = (
    "LogLevel",
    "LogFunction",
    "DiagnosticLogger",
    "Diagnostics",
    "diagnostics",
)


class LogLevel(str, Enum):
    ERROR = "error"
    INFO = "info"
    DEBUG = "debug"


LogFunction = Callable[[str, str, tuple[Any, ...]], Any]

_STDLIB_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}

# enabled levels for each maximum level accepted by set_log_level
_LEVEL_PRESETS = {
    LogLevel.DEBUG: {LogLevel.ERROR: True, LogLevel.INFO: True, LogLevel.DEBUG: True},
    LogLevel.INFO: {LogLevel.ERROR: True, LogLevel.INFO: True, LogLevel.DEBUG: False},
    LogLevel.ERROR: {LogLevel.ERROR: True, LogLevel.INFO: False, LogLevel.DEBUG: False},
}


class DiagnosticLogger:
    """Named logger bound to a :class:`Diagnostics` context."""

    __slots__ = ("name", "_diagnostics")

    def __init__(self, name: str, diagnostics: Diagnostics):
        self.name = name
        self._diagnostics = diagnostics

    def error(self, *args: Any) -> None:
        self.log(LogLevel.ERROR, *args)

    def info(self, *args: Any) -> None:
        self.log(LogLevel.INFO, *args)

    def debug(self, *args: Any) -> None:
        self.log(LogLevel.DEBUG, *args)

    def log(self, level: LogLevel | str, *args: Any) -> None:
        self._diagnostics.record(self.name, level, args)

    def __repr__(self) -> str:
        return f"DiagnosticLogger(name={self.name!r})"


class Diagnostics:
    """Global logging switches, passed explicitly to the components using them.

    Thread-safe: the switch tables are guarded by a lock.
    """

    def __init__(
        self,
        level: LogLevel | str = LogLevel.INFO,
        *,
        silenced: tuple[str, ...] | list[str] = (),
        log_function: LogFunction | None = None,
    ):
        self._lock = threading.RLock()
        self._loggers: dict[str, DiagnosticLogger] = {}
        self._initial_level = self._coerce_level(level)
        self._initial_silenced = tuple(silenced)
        self._initial_log_function = log_function
        self._apply_defaults()

    @classmethod
    def from_settings(cls, app_settings: AppSettings) -> Diagnostics:
        return cls(
            app_settings.REMOTESTORAGE_LOG_LEVEL,
            silenced=app_settings.REMOTESTORAGE_SILENCED_LOGGERS,
        )

    def _apply_defaults(self) -> None:
        with self._lock:
            self._levels = dict(_LEVEL_PRESETS[self._initial_level])
            self._silenced = set(self._initial_silenced)
            self._log_function = self._initial_log_function

    @staticmethod
    def _coerce_level(level: LogLevel | str) -> LogLevel:
        try:
            return LogLevel(level)
        except ValueError:
            raise ArgumentError.from_value(
                level,
                expected=" | ".join(LogLevel.allowed()),
                message=f"Unknown log level: {level}",
            ) from None

    @property
    def known_loggers(self) -> list[str]:
        with self._lock:
            return list(self._loggers)

    def get_logger(self, name: str) -> DiagnosticLogger:
        """Get (or create) the logger registered under ``name``."""
        with self._lock:
            if name not in self._loggers:
                self._loggers[name] = DiagnosticLogger(name, self)
            return self._loggers[name]

    def set_log_level(self, level: LogLevel | str) -> None:
        """Enable ``level`` and every level above it.

        Levels are ordered ``debug < info < error``.
        """
        preset = _LEVEL_PRESETS[self._coerce_level(level)]
        with self._lock:
            self._levels = dict(preset)

    def set_log_function(self, log_function: LogFunction | None) -> None:
        """Replace the default sink; ``None`` restores it."""
        if log_function is not None and not callable(log_function):
            raise ArgumentError.from_value(
                log_function, expected="callable", message="Log function must be callable"
            )
        with self._lock:
            self._log_function = log_function

    def silence(self, *names: str) -> None:
        with self._lock:
            self._silenced.update(names)

    def unsilence(self, *names: str) -> None:
        with self._lock:
            self._silenced.difference_update(names)

    def silence_all(self) -> None:
        self.silence(*self.known_loggers)

    def unsilence_all(self) -> None:
        self.unsilence(*self.known_loggers)

    def is_silenced(self, name: str) -> bool:
        with self._lock:
            return name in self._silenced

    def is_enabled(self, name: str, level: LogLevel | str) -> bool:
        level = self._coerce_level(level)
        with self._lock:
            return name not in self._silenced and self._levels[level]

    def reset(self) -> None:
        """Restore the switches this context was created with.

        Loggers handed out earlier stay valid.
        """
        self._apply_defaults()

    def record(self, name: str, level: LogLevel | str, args: tuple[Any, ...]) -> None:
        level = self._coerce_level(level)
        if not self.is_enabled(name, level):
            return
        log_function = self._log_function
        if log_function is not None:
            log_function(name, level.value, args)
            return
        logging.getLogger(f"remotestorage.{name}").log(
            _STDLIB_LEVELS[level],
            " ".join(str(arg) for arg in args),
            exc_info=_find_exception(args) if level is LogLevel.ERROR else None,
        )


def _find_exception(args: tuple[Any, ...]) -> BaseException | None:
    for arg in args:
        if isinstance(arg, BaseException):
            return arg
    return None


def _build_default() -> Diagnostics:
    from .config import settings

    return Diagnostics.from_settings(settings)


diagnostics = _build_default()
"""Process-wide default context, configured from :mod:`remotestorage.config`."""
