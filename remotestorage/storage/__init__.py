from .backend import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .settings import SettingStore

__all__ = (
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SettingStore",
)
