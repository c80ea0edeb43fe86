"""
Device records inside a tenant partition.

Functions here operate on the in-memory tenant dict; the service wraps them in
a store transaction. Lookups are linear scans in storage order, so when more
than one record matches, the first one wins.
"""

from __future__ import annotations

from typing import Any

from core.clock import utc_now_iso
from core.errors import NotFoundError, ValidationError


def _matches(device: dict[str, Any], code: str | None, device_id: str | None) -> bool:
    return bool(
        (code and device.get("code") == code)
        or (device_id and device.get("deviceId") == device_id)
    )


def find_index(tenant: dict[str, Any], *, code: str | None = None, device_id: str | None = None) -> int:
    for idx, device in enumerate(tenant["devices"]):
        if _matches(device, code, device_id):
            return idx
    return -1


def list_devices(tenant: dict[str, Any]) -> list[dict[str, Any]]:
    return list(tenant["devices"])


def register(
    tenant: dict[str, Any],
    *,
    pet_id: str | None,
    code: str | None = None,
    device_id: str | None = None,
    name: str | None = None,
) -> tuple[dict[str, Any], bool]:
    """
    Upsert a device binding. Returns (device, created).

    An existing device matching `code` or `deviceId` gets the supplied fields
    merged over it; otherwise a new record is appended.
    """
    if not pet_id:
        raise ValidationError("petId required")
    if not code and not device_id:
        raise ValidationError("code or deviceId required")

    if code and device_id:
        # Merging would leave the same key on two records.
        by_code = find_index(tenant, code=code)
        by_device_id = find_index(tenant, device_id=device_id)
        if by_code >= 0 and by_device_id >= 0 and by_code != by_device_id:
            raise ValidationError("code and deviceId belong to different devices")

    idx = find_index(tenant, code=code, device_id=device_id)

    now = utc_now_iso()
    incoming = {"petId": pet_id, "code": code, "deviceId": device_id, "name": name}
    incoming = {k: v for (k, v) in incoming.items() if v is not None}

    if idx >= 0:
        device = tenant["devices"][idx]
        device.update(incoming)
        device["updatedAt"] = now
        return device, False

    device = {**incoming, "createdAt": now, "updatedAt": now}
    tenant["devices"].append(device)
    return device, True


def resolve_owner(tenant: dict[str, Any], *, code: str | None = None, device_id: str | None = None) -> str | None:
    """
    Pet id bound to the first matching device, or None.

    None also covers a matching device that has been detached.
    """
    idx = find_index(tenant, code=code, device_id=device_id)
    if idx < 0:
        return None
    return tenant["devices"][idx].get("petId")


def detach(tenant: dict[str, Any], *, code: str | None = None, device_id: str | None = None) -> dict[str, Any]:
    if not code and not device_id:
        raise ValidationError("code or deviceId required")

    idx = find_index(tenant, code=code, device_id=device_id)
    if idx < 0:
        raise NotFoundError("Device not found")

    device = tenant["devices"][idx]
    device["petId"] = None
    device["updatedAt"] = utc_now_iso()
    return device


def delete(tenant: dict[str, Any], *, code: str | None = None, device_id: str | None = None) -> int:
    if not code and not device_id:
        raise ValidationError("code or deviceId required")

    before = len(tenant["devices"])
    kept = [d for d in tenant["devices"] if not _matches(d, code, device_id)]
    deleted = before - len(kept)
    if deleted == 0:
        raise NotFoundError("Device not found")

    tenant["devices"] = kept
    return deleted
