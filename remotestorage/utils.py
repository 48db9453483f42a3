# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Storage path helpers and binary codecs."""

from __future__ import annotations

import base64
import re

__all__ = (
    "is_dir",
    "path_parts",
    "containing_dir",
    "base_name",
    "encode_binary",
    "decode_binary",
)

_LAST_PART = re.compile(r"^(.*?)([^/]+/?)$")
_TRAILING_PART = re.compile(r"[^/]+/?$")


def is_dir(path: str) -> bool:
    """Directories end with a slash."""
    return path.endswith("/")


def path_parts(path: str) -> list[str]:
    """Split a path into its segments, root first.

    Example:
        >>> path_parts("/contacts/work/alice")
        ['/', 'contacts/', 'work/', 'alice']
    """
    parts = ["/"]
    tail: list[str] = []
    while match := _LAST_PART.match(path):
        tail.insert(0, match.group(2))
        path = match.group(1)
    return parts + tail


def containing_dir(path: str) -> str | None:
    """Parent directory of ``path``; ``None`` for a root (``""`` or ``"/"``)."""
    parent = _TRAILING_PART.sub("", path, count=1)
    return None if parent == path else parent


def base_name(path: str) -> str:
    """Last segment of ``path``, keeping the trailing slash of directories."""
    parts = path.split("/")
    if is_dir(path):
        return parts[-2] + "/"
    return parts[-1]


def encode_binary(data: bytes | bytearray | memoryview) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_binary(data: str) -> bytes:
    return base64.b64decode(data)
