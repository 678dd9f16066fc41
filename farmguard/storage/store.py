from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

"""Key-value stores over whole collections.

A collection is a JSON array of objects stored under a single key. Writes
always replace the whole collection: last write wins, no transactions, no
merging of concurrent writers.
"""

__all__ = [
    "StorageError",
    "KeyValueStore",
    "JsonFileStore",
    "MemoryStore",
]


class StorageError(Exception):
    pass


class KeyValueStore(Protocol):
    def get(self, key: str) -> list[dict[str, Any]] | None: ...

    def set(self, key: str, value: list[dict[str, Any]]) -> None: ...


class JsonFileStore:
    """One ``<key>.json`` file per collection inside ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, key: str) -> Path:
        if not key or not key.replace("_", "").replace("-", "").isalnum():
            raise StorageError(f"invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> list[dict[str, Any]] | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"failed to load {key}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"failed to load {key}: expected a JSON array, got {type(data).__name__}")
        return data

    def set(self, key: str, value: list[dict[str, Any]]) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}-", suffix=".tmp", dir=self.directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except OSError as e:
            raise StorageError(f"failed to save {key}: {e}") from e


class MemoryStore:
    """In-process store (tests, dry runs)."""

    def __init__(self, initial: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> list[dict[str, Any]] | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: list[dict[str, Any]]) -> None:
        # serialize so callers never share mutable state with the store
        self._data[key] = json.dumps(value)

    def keys(self) -> list[str]:
        return list(self._data)
