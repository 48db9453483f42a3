"""Tests for remotestorage.storage.backend module."""

import orjson
import pytest

from remotestorage.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore


class TestMemoryKeyValueStore:
    def test_get_set_remove(self):
        store = MemoryKeyValueStore()
        assert store.get("a") is None
        store.set("a", "1")
        assert store.get("a") == "1"
        store.remove("a")
        assert store.get("a") is None

    def test_remove_missing_key_is_noop(self):
        store = MemoryKeyValueStore()
        store.remove("missing")
        assert len(store) == 0

    def test_prefix_scan(self):
        store = MemoryKeyValueStore({"app:a": "1", "app:b": "2", "other": "3"})
        assert sorted(store.keys("app:")) == ["app:a", "app:b"]
        assert sorted(store.keys()) == ["app:a", "app:b", "other"]

    def test_satisfies_protocol(self):
        assert isinstance(MemoryKeyValueStore(), KeyValueStore)


class TestJsonFileKeyValueStore:
    def test_missing_file_starts_empty(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "nested" / "store.json")
        assert list(store.keys()) == []

    def test_writes_survive_reopen(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        store = JsonFileKeyValueStore(path)
        store.set("token", '"abc"')
        store.set("href", '"https://example.com/storage"')
        store.remove("token")

        reopened = JsonFileKeyValueStore(path)
        assert reopened.get("token") is None
        assert reopened.get("href") == '"https://example.com/storage"'
        assert orjson.loads(path.read_bytes()) == {"href": '"https://example.com/storage"'}

    def test_rejects_non_object_document(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_bytes(b"[1, 2]")
        with pytest.raises(ValueError, match="Expected a JSON object"):
            JsonFileKeyValueStore(path)

    def test_no_temporary_files_left_behind(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        store.set("k", "v")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]
