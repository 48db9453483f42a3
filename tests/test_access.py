# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for the scope access model."""

import pytest

from remotestorage._errors import ArgumentError
from remotestorage.access import Access, AccessMode, highest_access


@pytest.fixture
def access():
    access = Access()
    access.set("a", "r")
    access.set("b", "rw")
    return access


class TestAccess:
    def test_get_returns_recorded_mode(self, access):
        assert access.get("a") is AccessMode.READ
        assert access.get("b") is AccessMode.READ_WRITE
        assert access.get("c") is None

    def test_long_mode_names_accepted(self):
        access = Access()
        access.set("a", "read")
        access.set("b", "read-write")
        assert access.get("a") is AccessMode.READ
        assert access.get("b") is AccessMode.READ_WRITE

    def test_check(self, access):
        assert access.check("a", "r") is True
        assert access.check("b", "r") is True
        assert access.check("a", "rw") is False
        assert access.check("b", "rw") is True
        assert access.check("c", "r") is False

    def test_set_overwrites(self, access):
        access.set("a", "rw")
        assert access.check("a", "rw") is True
        assert access.root_paths.count("/a/") == 1

    def test_root_paths_contain_private_paths(self, access):
        assert "/a/" in access.root_paths
        assert "/b/" in access.root_paths

    def test_root_paths_contain_public_paths(self, access):
        assert "/public/a/" in access.root_paths
        assert "/public/b/" in access.root_paths

    def test_root_scope_collapses_root_paths(self, access):
        access.set("root", "rw")
        assert access.root_paths == ["/"]

    def test_root_scope_is_sticky(self, access):
        access.set("root", "r")
        access.set("c", "rw")
        assert access.root_paths == ["/"]

    def test_reset_clears_scopes_and_paths(self, access):
        access.set("root", "rw")
        access.reset()
        assert access.scopes == []
        assert access.root_paths == []

    def test_scopes_listing(self, access):
        assert access.scopes == [
            {"name": "a", "mode": AccessMode.READ},
            {"name": "b", "mode": AccessMode.READ_WRITE},
        ]

    def test_unknown_mode_rejected(self):
        with pytest.raises(ArgumentError, match="Unknown access mode"):
            Access().set("a", "write-only")

    def test_root_paths_returns_copy(self, access):
        access.root_paths.append("/tampered/")
        assert "/tampered/" not in access.root_paths

    def test_root_paths_is_a_property(self):
        access = Access()
        access.set("contacts", "rw")
        assert access.check("contacts", "r")
        assert not callable(access.root_paths)
        assert access.root_paths == ["/contacts/", "/public/contacts/"]


class TestHighestAccess:
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("rw", "r", AccessMode.READ_WRITE),
            ("r", "rw", AccessMode.READ_WRITE),
            ("r", None, AccessMode.READ),
            (None, "r", AccessMode.READ),
            (None, None, None),
        ],
    )
    def test_highest_access(self, a, b, expected):
        assert highest_access(a, b) is expected
