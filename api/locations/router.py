"""
Location API endpoints.

Paths keep the names the mobile app already calls (`/localizacao`).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/localizacao/{pet_id}")
async def list_locations(
    pet_id: str,
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> list[dict]:
    return await service.list_locations(tenant_id, pet_id)


@router.post("/localizacao")
async def upsert_location(
    request: schemas.LocationUpsertRequest,
    response: Response,
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> dict:
    """
    Create a location (201) or merge into the one with the same id (200).
    """
    location, created = await service.upsert_location(tenant_id, request.model_dump(exclude_unset=True))
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return location


@router.post("/locations/ingest", status_code=status.HTTP_201_CREATED)
async def ingest_location(
    request: schemas.IngestRequest,
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> dict:
    return await service.ingest_location(
        tenant_id,
        lat=request.lat,
        lng=request.lng,
        code=request.code,
        device_id=request.deviceId,
        accuracy=request.accuracy,
        speed=request.speed,
        timestamp=request.timestamp,
        label=request.label,
    )


@router.delete("/localizacao/{location_id}")
async def delete_location(
    location_id: str,
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> dict:
    await service.delete_location(tenant_id, location_id)
    return {"ok": True}


@router.delete("/localizacao")
async def delete_locations(
    pet_id: str | None = Query(default=None, alias="petId"),
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> dict:
    """
    Delete a pet's locations. Without `petId` this wipes every location of the tenant.
    """
    pet_id = (pet_id or "").strip() or None
    deleted = await service.delete_locations(tenant_id, pet_id)
    return {"ok": True, "deleted": deleted, "scope": {"petId": pet_id} if pet_id else "all"}
