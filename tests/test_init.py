"""Tests for the package's lazy exports."""

import pytest

import remotestorage


def test_version():
    assert remotestorage.__version__ == "0.1.0"


@pytest.mark.parametrize("name", [n for n in remotestorage.__all__ if n != "logger"])
def test_exported_names_resolve(name):
    assert getattr(remotestorage, name) is not None


def test_unknown_attribute():
    with pytest.raises(AttributeError):
        remotestorage.does_not_exist
