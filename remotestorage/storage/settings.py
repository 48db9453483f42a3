# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from typing import Any

import orjson

from .backend import KeyValueStore

logger = logging.getLogger(__name__)

__all__ = ("SettingStore",)


class SettingStore:
    """Prefix-scoped view of a :class:`KeyValueStore` holding JSON values.

    Every value is JSON-encoded on write, strings included, so reads can tell
    a stored string from a stored number.

    Args:
        prefix: Prepended to every key; also bounds :meth:`clear`.
        backend: Underlying durable store.
        drop_invalid: Remove entries that fail to decode and read them as
            ``None``. When False the raw string is returned instead.
    """

    def __init__(self, prefix: str, backend: KeyValueStore, *, drop_invalid: bool = False):
        self.prefix = prefix
        self.backend = backend
        self.drop_invalid = drop_invalid

    def make_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str, default: Any = None) -> Any:
        full_key = self.make_key(key)
        raw = self.backend.get(full_key)
        if raw is None:
            return default
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError:
            if not self.drop_invalid:
                return raw
            logger.warning(f"Dropping undecodable setting {full_key!r}")
            self.backend.remove(full_key)
            return default

    def set(self, key: str, value: Any) -> None:
        self.backend.set(self.make_key(key), orjson.dumps(value).decode())

    def remove(self, key: str) -> None:
        self.backend.remove(self.make_key(key))

    def keys(self) -> list[str]:
        return [k[len(self.prefix) :] for k in self.backend.keys(self.prefix)]

    def clear(self) -> None:
        """Remove every key under the prefix."""
        for full_key in list(self.backend.keys(self.prefix)):
            self.backend.remove(full_key)
