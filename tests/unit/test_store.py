from __future__ import annotations

import json
from pathlib import Path

import pytest

from farmguard.storage.store import JsonFileStore, MemoryStore, StorageError


def test_json_file_store_missing_key_returns_none(tmp_path: Path):
    store = JsonFileStore(tmp_path / "data")
    assert store.get("farmguard_equipment") is None


def test_json_file_store_set_then_get(tmp_path: Path):
    store = JsonFileStore(tmp_path / "data")
    store.set("farmguard_equipment", [{"id": "e1", "name": "Tractor"}])
    path = tmp_path / "data" / "farmguard_equipment.json"
    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == [{"id": "e1", "name": "Tractor"}]
    assert store.get("farmguard_equipment") == [{"id": "e1", "name": "Tractor"}]
    # no temp files left behind
    assert [p.name for p in (tmp_path / "data").iterdir()] == ["farmguard_equipment.json"]


def test_json_file_store_overwrites_whole_collection(tmp_path: Path):
    store = JsonFileStore(tmp_path)
    store.set("k", [{"a": 1}, {"a": 2}])
    store.set("k", [{"a": 3}])
    assert store.get("k") == [{"a": 3}]


def test_json_file_store_corrupt_file_raises(tmp_path: Path):
    (tmp_path / "k.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError) as e:
        JsonFileStore(tmp_path).get("k")
    assert "failed to load k" in str(e.value)


def test_json_file_store_non_list_raises(tmp_path: Path):
    (tmp_path / "k.json").write_text('{"a": 1}', encoding="utf-8")
    with pytest.raises(StorageError):
        JsonFileStore(tmp_path).get("k")


@pytest.mark.parametrize("key", ["", "../escape", "a/b", "a.b"])
def test_json_file_store_rejects_bad_keys(tmp_path: Path, key: str):
    with pytest.raises(StorageError):
        JsonFileStore(tmp_path).get(key)


def test_memory_store_isolates_values():
    value = [{"id": "x"}]
    store = MemoryStore({"k": value})
    value[0]["id"] = "changed"
    loaded = store.get("k")
    assert loaded == [{"id": "x"}]
    loaded[0]["id"] = "mutated"
    assert store.get("k") == [{"id": "x"}]
    assert store.keys() == ["k"]
    assert store.get("missing") is None
