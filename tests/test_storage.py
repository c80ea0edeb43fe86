from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from core import storage
from core.errors import StorageError


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_load_creates_empty_store_file(json_store: storage.JsonFileStore, data_file: Path) -> None:
    assert json_store.load_sync() == {"tenants": {}}
    assert json.loads(data_file.read_text(encoding="utf-8")) == {"tenants": {}}


def test_load_migrates_legacy_shape_without_persisting(data_file: Path) -> None:
    legacy = {"locations": [{"id": "a", "petId": "P1", "latitude": 1.5, "longitude": 2.5}]}
    _write(data_file, json.dumps(legacy))

    data = storage.JsonFileStore(data_file).load_sync()

    assert data == {
        "tenants": {
            "default": {
                "locations": [{"id": "a", "petId": "P1", "latitude": 1.5, "longitude": 2.5}],
                "devices": [],
            }
        }
    }
    # Only the next save writes the new shape.
    assert json.loads(data_file.read_text(encoding="utf-8")) == legacy


def test_load_folds_legacy_list_into_existing_default_tenant(
    data_file: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    _write(
        data_file,
        json.dumps(
            {
                "locations": [{"id": "current", "label": "old"}, {"id": "legacy"}],
                "tenants": {"default": {"locations": [{"id": "current", "label": "new"}], "devices": []}},
            }
        ),
    )

    with caplog.at_level(logging.WARNING, logger="core.storage"):
        data = storage.JsonFileStore(data_file).load_sync()

    assert data["tenants"]["default"]["locations"] == [
        {"id": "current", "label": "new"},
        {"id": "legacy"},
    ]
    assert "locations" not in data
    assert "store_merged_legacy" in caplog.text
    assert "merged=1 skipped=1" in caplog.text


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", '"text"'])
def test_load_quarantines_unusable_file(data_file: Path, content: str) -> None:
    _write(data_file, content)

    data = storage.JsonFileStore(data_file).load_sync()

    assert data == {"tenants": {}}
    quarantined = list(data_file.parent.glob("locations.json.corrupt-*"))
    assert len(quarantined) == 1
    assert quarantined[0].read_text(encoding="utf-8") == content


def test_load_treats_empty_file_as_empty_store(data_file: Path) -> None:
    _write(data_file, "")

    assert storage.JsonFileStore(data_file).load_sync() == {"tenants": {}}
    assert not list(data_file.parent.glob("*.corrupt-*"))


def test_load_drops_blank_tenant_keys(data_file: Path) -> None:
    _write(data_file, json.dumps({"tenants": {"": {"locations": []}, "u1": {"locations": [], "devices": []}}}))

    data = storage.JsonFileStore(data_file).load_sync()

    assert list(data["tenants"]) == ["u1"]


def test_load_adds_missing_tenants_mapping(data_file: Path) -> None:
    _write(data_file, json.dumps({"tenants": ["nope"], "other": 1}))

    data = storage.JsonFileStore(data_file).load_sync()

    assert data["tenants"] == {}
    assert data["other"] == 1


def test_save_replaces_file_and_leaves_no_temp(json_store: storage.JsonFileStore, data_file: Path) -> None:
    payload = {"tenants": {"u1": {"locations": [{"id": "x", "label": "Casa"}], "devices": []}}}

    json_store.save_sync(payload)

    assert json.loads(data_file.read_text(encoding="utf-8")) == payload
    assert not json_store.tmp_path.exists()
    assert json_store.load_sync() == payload


def test_failed_save_raises_and_keeps_previous_file(
    json_store: storage.JsonFileStore,
    data_file: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    json_store.save_sync({"tenants": {"u1": {"locations": [], "devices": []}}})
    before = data_file.read_text(encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(storage.os, "replace", broken_replace)

    with pytest.raises(StorageError, match="disk full"):
        json_store.save_sync({"tenants": {}})
    assert data_file.read_text(encoding="utf-8") == before


@pytest.mark.asyncio
async def test_transaction_saves_mutation(json_store: storage.JsonFileStore) -> None:
    async with json_store.transaction() as data:
        data["tenants"]["u1"] = {"locations": [{"id": "a"}], "devices": []}

    assert (await json_store.load())["tenants"]["u1"]["locations"] == [{"id": "a"}]


@pytest.mark.asyncio
async def test_transaction_discards_mutation_on_error(json_store: storage.JsonFileStore) -> None:
    with pytest.raises(RuntimeError):
        async with json_store.transaction() as data:
            data["tenants"]["u1"] = {"locations": [{"id": "a"}], "devices": []}
            raise RuntimeError("boom")

    assert await json_store.load() == {"tenants": {}}


def test_store_accessor_requires_init() -> None:
    storage.close_store()
    with pytest.raises(RuntimeError, match="not initialized"):
        storage.store()
