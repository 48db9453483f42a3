# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

__all__ = (
    "RemoteStorageError",
    "ArgumentError",
    "UnknownEventError",
    "FutureError",
    "AlreadyResolvedError",
    "FutureFailedError",
    "NotConnectedError",
)


class RemoteStorageError(Exception):
    default_message: ClassVar[str] = "remotestorage error"
    status_code: ClassVar[int] = 500

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}
        self.status_code = status_code or self.status_code

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> Exception | None:
        """Get the cause of this error, if any."""
        return self.__cause__ if hasattr(self, "__cause__") else None


class ArgumentError(RemoteStorageError):
    """Raised when a call has an invalid shape (bad path, handler, name)."""

    default_message = "Invalid argument"
    status_code = 400

    @classmethod
    def from_value(
        cls,
        value: Any,
        *,
        expected: str | None = None,
        message: str | None = None,
        cause: Exception | None = None,
        **extra: Any,
    ):
        """Create an ArgumentError from a value with optional expected type and message."""
        details = {
            "value": value,
            "type": type(value).__name__,
            **({"expected": expected} if expected else {}),
            **extra,
        }
        return cls(message=message, details=details, cause=cause)


class UnknownEventError(ArgumentError):
    default_message = "Unknown event"


class FutureError(RemoteStorageError):
    default_message = "Future error"


class AlreadyResolvedError(FutureError):
    """Raised when settling a future that already has an outcome."""

    default_message = "Future already resolved"
    status_code = 409


class FutureFailedError(FutureError):
    """Raised when awaiting a future that failed with non-exception values."""

    default_message = "Future failed"

    def __init__(self, values: tuple = (), message: str | None = None):
        super().__init__(
            message or f"Future failed with: {values!r}",
            details={"values": values},
        )
        self.values = values


class NotConnectedError(RemoteStorageError):
    default_message = "No storage configured"
    status_code = 401
