"""
Durable JSON file store.

The whole data set lives in one JSON document:

    {"tenants": {"<tenantId>": {"locations": [...], "devices": [...]}}}

Every operation loads the full document, mutates it in memory and saves it
back. Saves write a temporary file and atomically replace the durable one, so
readers never observe a partially written file.

This module owns the store instance. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator

from .errors import StorageCorruptionError, StorageError
from .tenants import DEFAULT_TENANT

logger = logging.getLogger(__name__)

Store = dict[str, Any]

_store: JsonFileStore | None = None


def empty_store() -> Store:
    return {"tenants": {}}


def _parse(raw: str) -> Any:
    try:
        return json.loads(raw or "{}")
    except ValueError as exc:
        raise StorageCorruptionError(f"Store file is not valid JSON: {exc}") from exc


def normalize(data: Any) -> Store:
    """
    Turn parsed file content into a store.

    - non-object content -> StorageCorruptionError
    - legacy `{"locations": [...]}` -> migrated into the "default" tenant
    - missing/invalid `tenants` -> empty mapping
    """
    if not isinstance(data, dict):
        raise StorageCorruptionError(f"Store file holds {type(data).__name__}, expected an object.")

    tenants = data.get("tenants")
    if not isinstance(tenants, dict):
        tenants = {}

    legacy_locations = data.get("locations")
    if isinstance(legacy_locations, list):
        # Only persisted by the next save().
        default = tenants.get(DEFAULT_TENANT)
        if not isinstance(default, dict):
            tenants[DEFAULT_TENANT] = {"locations": legacy_locations, "devices": []}
            logger.info("store_migrated_legacy locations=%s", len(legacy_locations))
        else:
            # Both shapes present: fold legacy records into "default" by id.
            current = default.get("locations")
            if not isinstance(current, list):
                current = []
                default["locations"] = current
            known = {loc.get("id") for loc in current if isinstance(loc, dict)}
            merged = 0
            for loc in legacy_locations:
                loc_id = loc.get("id") if isinstance(loc, dict) else None
                if loc_id is not None and loc_id in known:
                    continue
                current.append(loc)
                known.add(loc_id)
                merged += 1
            logger.warning(
                "store_merged_legacy tenant=%s merged=%s skipped=%s",
                DEFAULT_TENANT,
                merged,
                len(legacy_locations) - merged,
            )
        data.pop("locations", None)

    data["tenants"] = {str(k): v for (k, v) in tenants.items() if str(k).strip()}
    return data


class JsonFileStore:
    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def _ensure_file(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text(json.dumps(empty_store(), indent=2), encoding="utf-8")

    def _quarantine(self) -> Path:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        os.replace(self.path, target)
        return target

    def load_sync(self) -> Store:
        self._ensure_file()
        raw = self.path.read_text(encoding="utf-8")
        try:
            return normalize(_parse(raw))
        except StorageCorruptionError as exc:
            # Start from empty but keep the bad file around for an operator.
            try:
                target = self._quarantine()
            except OSError:
                logger.exception("store_quarantine_failed path=%s", self.path)
                target = None
            logger.warning(
                "store_corrupted path=%s quarantined_to=%s reason=%s",
                self.path,
                target,
                exc,
            )
            return empty_store()

    def save_sync(self, data: Store) -> None:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
        tmp = self.tmp_path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.exception("store_save_failed path=%s", self.path)
            raise StorageError(f"Failed to save store: {exc}") from exc

    async def load(self) -> Store:
        return await asyncio.to_thread(self.load_sync)

    async def save(self, data: Store) -> None:
        await asyncio.to_thread(self.save_sync, data)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Store]:
        """
        Load, hand the store to the caller for mutation, then save.

        The lock serializes load->mutate->save cycles within this process.
        Nothing is saved if the body raises.
        """
        async with self._lock:
            data = await self.load()
            yield data
            await self.save(data)


def init_store(path: str | os.PathLike[str]) -> JsonFileStore:
    global _store
    if _store is not None:
        return _store
    _store = JsonFileStore(path)
    _store.load_sync()
    logger.info("store_ready path=%s", _store.path)
    return _store


def close_store() -> None:
    global _store
    _store = None


def store() -> JsonFileStore:
    if _store is None:
        raise RuntimeError("Store is not initialized. Call init_store() on startup.")
    return _store
