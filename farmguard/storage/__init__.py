"""Local persistence: key-value store and the farm data repository."""

from .repository import FarmRepository, StorageKeys
from .store import JsonFileStore, KeyValueStore, MemoryStore, StorageError

__all__ = [
    "FarmRepository",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "StorageError",
    "StorageKeys",
]
