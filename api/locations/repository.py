"""
Location records inside a tenant partition.

Functions here operate on the in-memory tenant dict; the service wraps them in
a store transaction.
"""

from __future__ import annotations

import math
import uuid
from typing import Any

from core.clock import epoch_ms_to_iso, utc_now_iso
from core.errors import NotFoundError, ValidationError

from devices import repository as device_repository

ORIGIN_MANUAL = "manual"
ORIGIN_DEVICE = "device"
DEFAULT_DEVICE_LABEL = "device"


def generate_id(tenant: dict[str, Any]) -> str:
    existing = {loc.get("id") for loc in tenant["locations"]}
    while True:
        candidate = f"loc_{uuid.uuid4().hex}"
        if candidate not in existing:
            return candidate


def _find_index(tenant: dict[str, Any], location_id: str) -> int:
    for idx, loc in enumerate(tenant["locations"]):
        if loc.get("id") == location_id:
            return idx
    return -1


def _coordinate(name: str, value: Any) -> float | None:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be a number") from exc
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a finite number")
    return number


def _created_at(timestamp: float | None) -> str:
    if not timestamp:
        return utc_now_iso()
    try:
        return epoch_ms_to_iso(timestamp)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValidationError("timestamp is out of range") from exc


def _drop_none(record: dict[str, Any]) -> dict[str, Any]:
    return {k: v for (k, v) in record.items() if v is not None}


def list_by_pet(tenant: dict[str, Any], pet_id: str) -> list[dict[str, Any]]:
    pet_id = str(pet_id)
    return [loc for loc in tenant["locations"] if str(loc.get("petId")) == pet_id]


def upsert(tenant: dict[str, Any], fields: dict[str, Any], *, tenant_id: str) -> tuple[dict[str, Any], bool]:
    """
    Create or update a location by id. Returns (location, created).

    `fields` holds only what the caller supplied. The owning tenant is always
    taken from `tenant_id`, never from the payload.
    """
    fields = dict(fields)
    fields.pop("updatedAt", None)
    location_id = fields.get("id") or generate_id(tenant)
    fields["id"] = location_id
    fields["uid"] = tenant_id
    now = utc_now_iso()

    idx = _find_index(tenant, location_id)
    if idx >= 0:
        merged = {**tenant["locations"][idx], **fields, "updatedAt": now}
        tenant["locations"][idx] = merged
        return merged, False

    if not fields.get("petId"):
        raise ValidationError("petId required")

    location = dict(fields)
    if not location.get("createdAt"):
        location["createdAt"] = now
    location.setdefault("origin", ORIGIN_MANUAL)
    tenant["locations"].append(location)
    return location, True


def ingest(
    tenant: dict[str, Any],
    *,
    tenant_id: str,
    lat: float,
    lng: float,
    code: str | None = None,
    device_id: str | None = None,
    accuracy: float | None = None,
    speed: float | None = None,
    timestamp: float | None = None,
    label: str | None = None,
) -> dict[str, Any]:
    """
    Append a device-reported location for the pet the device is bound to.
    """
    if not code and not device_id:
        raise ValidationError("code or deviceId required")

    latitude = _coordinate("lat", lat)
    longitude = _coordinate("lng", lng)
    accuracy = _coordinate("accuracy", accuracy)
    speed = _coordinate("speed", speed)
    created_at = _created_at(timestamp)

    pet_id = device_repository.resolve_owner(tenant, code=code, device_id=device_id)
    if not pet_id:
        raise NotFoundError("Pet not found for given identifier")

    location = _drop_none(
        {
            "id": generate_id(tenant),
            "petId": pet_id,
            "label": label or DEFAULT_DEVICE_LABEL,
            "latitude": latitude,
            "longitude": longitude,
            "accuracy": accuracy,
            "speed": speed,
            "createdAt": created_at,
            "origin": ORIGIN_DEVICE,
            "createdBy": device_id or code,
            "uid": tenant_id,
        }
    )
    tenant["locations"].append(location)
    return location


def delete_by_id(tenant: dict[str, Any], location_id: str) -> bool:
    before = len(tenant["locations"])
    tenant["locations"] = [loc for loc in tenant["locations"] if loc.get("id") != location_id]
    return len(tenant["locations"]) != before


def delete_by_scope(tenant: dict[str, Any], pet_id: str | None = None) -> int:
    """
    Delete a pet's locations, or every location in the tenant when `pet_id` is None.
    """
    before = len(tenant["locations"])
    if pet_id is not None:
        pet_id = str(pet_id)
        tenant["locations"] = [loc for loc in tenant["locations"] if str(loc.get("petId")) != pet_id]
    else:
        tenant["locations"] = []
    return before - len(tenant["locations"])
