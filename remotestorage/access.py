# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Scope grants, permission checks and the root paths they open."""

from __future__ import annotations

import threading
from typing import Any

from ._errors import ArgumentError
from .ln.types import Enum

__all__ = (
    "AccessMode",
    "Access",
    "ROOT_SCOPE",
    "highest_access",
)

ROOT_SCOPE = "root"


class AccessMode(str, Enum):
    """Permission granted on a scope. ``READ_WRITE`` implies ``READ``."""

    READ = "r"
    READ_WRITE = "rw"

    @classmethod
    def _missing_(cls, value: object) -> AccessMode | None:
        aliases = {"read": cls.READ, "read-write": cls.READ_WRITE}
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None

    def satisfies(self, requested: AccessMode) -> bool:
        return self is AccessMode.READ_WRITE or requested is AccessMode.READ


def _coerce_mode(mode: AccessMode | str) -> AccessMode:
    try:
        return AccessMode(mode)
    except ValueError:
        raise ArgumentError.from_value(
            mode,
            expected=" | ".join(AccessMode.allowed()),
            message=f"Unknown access mode: {mode}",
        ) from None


def highest_access(a: AccessMode | str | None, b: AccessMode | str | None) -> AccessMode | None:
    """The more permissive of two modes; ``None`` when neither is set."""
    modes = {_coerce_mode(m) for m in (a, b) if m}
    if AccessMode.READ_WRITE in modes:
        return AccessMode.READ_WRITE
    if AccessMode.READ in modes:
        return AccessMode.READ
    return None


class Access:
    """Table of granted scopes.

    Every scope ``s`` opens ``/s/`` and ``/public/s/``. Granting the ``root``
    scope collapses the root paths to ``['/']`` until :meth:`reset`.

    Example:
        >>> access = Access()
        >>> access.set("contacts", "rw")
        >>> access.check("contacts", "r")
        True
        >>> access.root_paths
        ['/contacts/', '/public/contacts/']
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._scope_modes: dict[str, AccessMode] = {}
        self._root_paths: list[str] = []

    def set(self, scope: str, mode: AccessMode | str) -> None:
        if not isinstance(scope, str) or not scope:
            raise ArgumentError.from_value(scope, expected="non-empty str", message="Invalid scope")
        mode = _coerce_mode(mode)
        with self._lock:
            self._adjust_root_paths(scope)
            self._scope_modes[scope] = mode

    def get(self, scope: str) -> AccessMode | None:
        with self._lock:
            return self._scope_modes.get(scope)

    def check(self, scope: str, mode: AccessMode | str) -> bool:
        """Whether ``scope`` was granted at least ``mode``."""
        requested = _coerce_mode(mode)
        actual = self.get(scope)
        return actual is not None and actual.satisfies(requested)

    @property
    def root_paths(self) -> list[str]:
        with self._lock:
            return list(self._root_paths)

    @property
    def scopes(self) -> list[dict[str, Any]]:
        with self._lock:
            return [{"name": name, "mode": mode} for name, mode in self._scope_modes.items()]

    def reset(self) -> None:
        with self._lock:
            self._scope_modes = {}
            self._root_paths = []

    def _adjust_root_paths(self, new_scope: str) -> None:
        if ROOT_SCOPE in self._scope_modes or new_scope == ROOT_SCOPE:
            self._root_paths = ["/"]
        elif new_scope not in self._scope_modes:
            self._root_paths.append(f"/{new_scope}/")
            self._root_paths.append(f"/public/{new_scope}/")
