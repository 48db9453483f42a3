# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Durable string key/value stores."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

import orjson

logger = logging.getLogger(__name__)

__all__ = (
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
)


@runtime_checkable
class KeyValueStore(Protocol):
    """String-to-string map with prefix scans."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self, prefix: str = "") -> Iterator[str]: ...


class MemoryKeyValueStore:
    """In-process store; contents live as long as the instance."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self, prefix: str = "") -> Iterator[str]:
        with self._lock:
            matching = [k for k in self._data if k.startswith(prefix)]
        return iter(matching)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class JsonFileKeyValueStore(MemoryKeyValueStore):
    """Store persisted as one JSON object, rewritten atomically on each change.

    Args:
        path: JSON file location. Missing parent directories are created on
            first write; a missing file starts an empty store.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        raw = self.path.read_bytes()
        if not raw.strip():
            return {}
        data = orjson.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}, got {type(data).__name__}")
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(orjson.dumps(self._data, option=orjson.OPT_INDENT_2))
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.debug(f"Flushed {len(self._data)} keys to {self.path}")

    def set(self, key: str, value: str) -> None:
        with self._lock:
            super().set(key, value)
            self._flush()

    def remove(self, key: str) -> None:
        with self._lock:
            if key not in self._data:
                return
            super().remove(key)
            self._flush()
