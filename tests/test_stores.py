"""Tests for MemoryStore and JsonFileStore."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest

from instinct.exceptions import CorruptStoreError
from instinct.manager import InstinctManager
from instinct.store.base import Store
from instinct.store.json_file import JsonFileStore, dump_instincts
from instinct.store.memory import MemoryStore
from instinct.types import Instinct

TS = "2026-01-01T00:00:00+00:00"


def _make_instinct(id: str = "inst-00000001", **kwargs) -> Instinct:
    defaults = dict(
        id=id,
        name=f"name-{id}",
        category="testing",
        pattern="pattern",
        confidence=0.65,
        created=TS,
        last_used=TS,
        use_count=3,
        tags=["a", "b"],
    )
    defaults.update(kwargs)
    return Instinct(**defaults)


@pytest.fixture
def json_path(tmp_path: Path) -> str:
    return str(tmp_path / "learned" / "instincts.json")


@pytest.fixture(params=["memory", "json"])
def store(request: pytest.FixtureRequest, json_path: str) -> Store:
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(json_path)


class TestStore:
    """Tests that run against both MemoryStore and JsonFileStore."""

    def test_load_empty(self, store: Store) -> None:
        assert store.load() == []

    def test_roundtrip(self, store: Store) -> None:
        instincts = [_make_instinct("inst-00000001"), _make_instinct("inst-00000002")]
        store.save(instincts)
        assert store.load() == instincts

    def test_save_replaces_collection(self, store: Store) -> None:
        store.save([_make_instinct("inst-00000001"), _make_instinct("inst-00000002")])
        store.save([_make_instinct("inst-00000002")])
        assert [i.id for i in store.load()] == ["inst-00000002"]

    def test_load_returns_independent_copies(self, store: Store) -> None:
        store.save([_make_instinct()])
        loaded = store.load()
        loaded[0].confidence = 0.9
        assert store.load()[0].confidence == 0.65


class TestJsonFileStore:
    def test_file_format(self, json_path: str) -> None:
        JsonFileStore(json_path).save([_make_instinct()])
        with open(json_path, encoding="utf-8") as f:
            text = f.read()
        assert text.endswith("]\n")
        assert text.startswith('[\n  {\n    "id": "inst-00000001"')
        data = json.loads(text)
        assert data[0]["lastUsed"] == TS
        assert data[0]["useCount"] == 3

    def test_creates_parent_directories(self, json_path: str) -> None:
        JsonFileStore(json_path).save([])
        assert os.path.exists(json_path)

    def test_loads_javascript_timestamps(self, json_path: str) -> None:
        os.makedirs(os.path.dirname(json_path))
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump([{
                "id": "inst-abcdef01",
                "name": "n",
                "category": "c",
                "pattern": "p",
                "confidence": 0.5,
                "created": "2026-01-01T00:00:00.000Z",
                "lastUsed": "2026-01-01T00:00:00.000Z",
                "useCount": 0,
                "tags": [],
            }], f)
        loaded = JsonFileStore(json_path).load()
        assert loaded[0].last_used == "2026-01-01T00:00:00.000Z"

    def test_invalid_policy_rejected(self, json_path: str) -> None:
        with pytest.raises(ValueError):
            JsonFileStore(json_path, on_corrupt="ignore")


class TestCorruptStore:
    @pytest.fixture
    def corrupt_path(self, json_path: str) -> str:
        os.makedirs(os.path.dirname(json_path))
        with open(json_path, "w", encoding="utf-8") as f:
            f.write('[{"id": "inst-1", "name": "trunc')
        return json_path

    def test_discard_returns_empty_and_warns(self, corrupt_path: str, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="instinct"):
            assert JsonFileStore(corrupt_path).load() == []
        assert "Starting fresh" in caplog.text
        assert os.path.exists(corrupt_path)

    def test_empty_file_is_treated_as_corrupt(self, json_path: str) -> None:
        os.makedirs(os.path.dirname(json_path))
        Path(json_path).write_text("")
        assert JsonFileStore(json_path).load() == []

    def test_non_array_is_corrupt(self, json_path: str) -> None:
        os.makedirs(os.path.dirname(json_path))
        Path(json_path).write_text('{"instincts": []}')
        with pytest.raises(CorruptStoreError):
            JsonFileStore(json_path, on_corrupt="fail").load()

    def test_invalid_record_does_not_trigger_policy(self, json_path: str) -> None:
        os.makedirs(os.path.dirname(json_path))
        Path(json_path).write_text('[{"category": "no name"}]')
        assert JsonFileStore(json_path, on_corrupt="fail").load() == []

    def test_fail_policy_raises(self, corrupt_path: str) -> None:
        with pytest.raises(CorruptStoreError) as exc_info:
            JsonFileStore(corrupt_path, on_corrupt="fail").load()
        assert exc_info.value.path == corrupt_path

    def test_backup_policy_moves_file_aside(self, corrupt_path: str, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="instinct"):
            assert JsonFileStore(corrupt_path, on_corrupt="backup").load() == []
        assert not os.path.exists(corrupt_path)
        backups = [
            name for name in os.listdir(os.path.dirname(corrupt_path))
            if name.startswith("instincts.json.corrupt-")
        ]
        assert len(backups) == 1
        assert "Moved it to" in caplog.text


def test_dump_instincts_writes_array(tmp_path: Path) -> None:
    path = str(tmp_path / "out.json")
    dump_instincts(path, [_make_instinct()])
    with open(path, encoding="utf-8") as f:
        assert json.load(f)[0]["name"] == "name-inst-00000001"


class TestInvalidRecords:
    @pytest.fixture
    def mixed_path(self, json_path: str) -> str:
        os.makedirs(os.path.dirname(json_path))
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump([
                _make_instinct("inst-00000001", name="keep-me", confidence=0.8, use_count=5).to_dict(),
                {"name": "imported", "category": "c", "pattern": "p", "confidence": 1.6},
                {"category": "nameless", "confidence": 0.4},
            ], f)
        return json_path

    def test_valid_records_survive_a_mutation(self, mixed_path: str) -> None:
        manager = InstinctManager(path=mixed_path)
        manager.add("new", "c", "p")
        with open(mixed_path, encoding="utf-8") as f:
            data = json.load(f)
        names = [item.get("name") for item in data]
        assert names == ["keep-me", "imported", "new", None]
        assert data[0]["useCount"] == 5
        assert data[3] == {"category": "nameless", "confidence": 0.4}

    def test_out_of_range_confidence_is_clamped(self, mixed_path: str, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="instinct"):
            loaded = JsonFileStore(mixed_path).load()
        imported = next(i for i in loaded if i.name == "imported")
        assert imported.confidence == 0.95
        assert 'Repaired confidence of instinct "imported" at index 1' in caplog.text

    def test_unreadable_record_is_named_by_index(self, mixed_path: str, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="instinct"):
            loaded = JsonFileStore(mixed_path).load()
        assert [i.name for i in loaded] == ["keep-me", "imported"]
        assert "Skipping unreadable instinct at index 2" in caplog.text
        assert "Starting fresh" not in caplog.text

    def test_bad_timestamp_falls_back(self, json_path: str) -> None:
        os.makedirs(os.path.dirname(json_path))
        Path(json_path).write_text(json.dumps([
            {"name": "n", "created": "yesterday", "lastUsed": TS},
        ]))
        loaded = JsonFileStore(json_path).load()
        assert loaded[0].created == TS
        assert loaded[0].last_used == TS

    def test_missing_created_is_stable_across_loads(self, json_path: str) -> None:
        os.makedirs(os.path.dirname(json_path))
        Path(json_path).write_text(json.dumps([{"name": "n", "lastUsed": TS}]))
        store = JsonFileStore(json_path)
        first = store.load()
        store.save(first)
        assert store.load()[0].created == TS
