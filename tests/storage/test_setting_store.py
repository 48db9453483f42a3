"""Tests for remotestorage.storage.settings module."""

from remotestorage.storage import MemoryKeyValueStore, SettingStore


class TestSettingStore:
    def test_values_round_trip_as_json(self):
        backend = MemoryKeyValueStore()
        store = SettingStore("app:", backend)
        store.set("count", 3)
        store.set("name", "alice")
        store.set("flags", {"sync": True})

        assert store.get("count") == 3
        assert store.get("name") == "alice"
        assert store.get("flags") == {"sync": True}
        assert backend.get("app:name") == '"alice"'

    def test_missing_key_returns_default(self):
        store = SettingStore("app:", MemoryKeyValueStore())
        assert store.get("missing") is None
        assert store.get("missing", "fallback") == "fallback"

    def test_undecodable_value_returned_raw(self):
        backend = MemoryKeyValueStore({"app:legacy": "not json"})
        assert SettingStore("app:", backend).get("legacy") == "not json"

    def test_undecodable_value_dropped(self):
        backend = MemoryKeyValueStore({"app:legacy": "not json"})
        store = SettingStore("app:", backend, drop_invalid=True)
        assert store.get("legacy") is None
        assert backend.get("app:legacy") is None

    def test_clear_only_touches_prefix(self):
        backend = MemoryKeyValueStore({"app:a": "1", "app:b": "2", "other:a": "3"})
        store = SettingStore("app:", backend)
        assert sorted(store.keys()) == ["a", "b"]

        store.clear()

        assert list(backend.keys()) == ["other:a"]

    def test_remove(self):
        store = SettingStore("app:", MemoryKeyValueStore())
        store.set("a", 1)
        store.remove("a")
        assert store.get("a") is None
