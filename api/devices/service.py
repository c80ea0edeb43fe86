"""
Device registry business logic.

Each mutation is one load->mutate->save cycle on the JSON store.
"""

from __future__ import annotations

import logging
from typing import Any

from core import storage
from core.tenants import get_tenant, peek_tenant

from . import repository

logger = logging.getLogger(__name__)


def clean(value: Any) -> str | None:
    """Strip a key field; blank strings count as absent."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


async def list_devices(tenant_id: str) -> list[dict[str, Any]]:
    data = await storage.store().load()
    return repository.list_devices(peek_tenant(data, tenant_id))


async def register_device(
    tenant_id: str,
    *,
    pet_id: str | None,
    code: str | None = None,
    device_id: str | None = None,
    name: str | None = None,
) -> dict[str, Any]:
    async with storage.store().transaction() as data:
        device, created = repository.register(
            get_tenant(data, tenant_id),
            pet_id=clean(pet_id),
            code=clean(code),
            device_id=clean(device_id),
            name=name,
        )
    logger.info(
        "device_%s tenant=%s code=%s device_id=%s pet_id=%s",
        "registered" if created else "updated",
        tenant_id,
        device.get("code"),
        device.get("deviceId"),
        device.get("petId"),
    )
    return device


async def resolve_owner(tenant_id: str, *, code: str | None = None, device_id: str | None = None) -> str | None:
    data = await storage.store().load()
    return repository.resolve_owner(peek_tenant(data, tenant_id), code=clean(code), device_id=clean(device_id))


async def detach_device(tenant_id: str, *, code: str | None = None, device_id: str | None = None) -> dict[str, Any]:
    async with storage.store().transaction() as data:
        device = repository.detach(get_tenant(data, tenant_id), code=clean(code), device_id=clean(device_id))
    logger.info("device_detached tenant=%s code=%s device_id=%s", tenant_id, device.get("code"), device.get("deviceId"))
    return device


async def delete_device(tenant_id: str, *, code: str | None = None, device_id: str | None = None) -> int:
    async with storage.store().transaction() as data:
        deleted = repository.delete(get_tenant(data, tenant_id), code=clean(code), device_id=clean(device_id))
    logger.info("device_deleted tenant=%s code=%s device_id=%s deleted=%s", tenant_id, code, device_id, deleted)
    return deleted
