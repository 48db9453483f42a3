# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ("AppSettings", "settings")


class AppSettings(BaseSettings, frozen=True):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # diagnostics
    REMOTESTORAGE_LOG_LEVEL: Literal["debug", "info", "error"] = "info"
    REMOTESTORAGE_SILENCED_LOGGERS: list[str] = Field(
        default_factory=list,
        description="Logger names muted at startup",
    )

    # wire client persistence
    REMOTESTORAGE_WIRE_PREFIX: str = "remote_storage_wire_"
    REMOTESTORAGE_SETTINGS_FILE: str | None = Field(
        default=None,
        description="JSON file backing the wire configuration; in-memory if unset",
    )

    # Class variable to store the singleton instance
    _instance: ClassVar[Any] = None


# Create a singleton instance
settings = AppSettings()
# Store the instance in the class variable for singleton pattern
AppSettings._instance = settings
