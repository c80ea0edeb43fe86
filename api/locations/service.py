"""
Location store business logic.

Scope:
- client upserts (create or merge by id)
- device ingestion (owner resolved through the device registry)
- lookup by pet and deletes by id / by pet / tenant-wide
"""

from __future__ import annotations

import logging
from typing import Any

from core import storage
from core.errors import NotFoundError
from core.tenants import get_tenant, peek_tenant
from devices.service import clean

from . import repository

logger = logging.getLogger(__name__)


async def list_locations(tenant_id: str, pet_id: str) -> list[dict[str, Any]]:
    data = await storage.store().load()
    return repository.list_by_pet(peek_tenant(data, tenant_id), pet_id)


async def upsert_location(tenant_id: str, fields: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    fields = dict(fields)
    fields["id"] = clean(fields.get("id"))
    if "petId" in fields:
        fields["petId"] = clean(fields["petId"])
    fields = {k: v for (k, v) in fields.items() if not (k in ("id", "petId") and v is None)}

    async with storage.store().transaction() as data:
        location, created = repository.upsert(get_tenant(data, tenant_id), fields, tenant_id=tenant_id)
    logger.info(
        "location_%s tenant=%s id=%s pet_id=%s",
        "created" if created else "updated",
        tenant_id,
        location["id"],
        location.get("petId"),
    )
    return location, created


async def ingest_location(
    tenant_id: str,
    *,
    lat: float,
    lng: float,
    code: str | None = None,
    device_id: str | None = None,
    accuracy: float | None = None,
    speed: float | None = None,
    timestamp: float | None = None,
    label: str | None = None,
) -> dict[str, Any]:
    async with storage.store().transaction() as data:
        location = repository.ingest(
            get_tenant(data, tenant_id),
            tenant_id=tenant_id,
            lat=lat,
            lng=lng,
            code=clean(code),
            device_id=clean(device_id),
            accuracy=accuracy,
            speed=speed,
            timestamp=timestamp,
            label=label,
        )
    logger.info(
        "location_ingested tenant=%s id=%s pet_id=%s created_by=%s",
        tenant_id,
        location["id"],
        location["petId"],
        location["createdBy"],
    )
    return location


async def delete_location(tenant_id: str, location_id: str) -> bool:
    async with storage.store().transaction() as data:
        if not repository.delete_by_id(get_tenant(data, tenant_id), location_id):
            # Raising skips the save.
            raise NotFoundError("Not found")
    logger.info("location_deleted tenant=%s id=%s", tenant_id, location_id)
    return True


async def delete_locations(tenant_id: str, pet_id: str | None = None) -> int:
    pet_id = clean(pet_id)
    async with storage.store().transaction() as data:
        deleted = repository.delete_by_scope(get_tenant(data, tenant_id), pet_id)
    logger.info("locations_deleted tenant=%s scope=%s deleted=%s", tenant_id, pet_id or "all", deleted)
    return deleted
