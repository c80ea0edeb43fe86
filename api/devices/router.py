"""
Device registry API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.post("/devices/register", status_code=status.HTTP_201_CREATED)
async def register_device(
    request: schemas.RegisterDeviceRequest,
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> dict:
    return await service.register_device(
        tenant_id,
        pet_id=request.petId,
        code=request.code,
        device_id=request.deviceId,
        name=request.name,
    )


@router.get("/devices")
async def list_devices(
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> list[dict]:
    return await service.list_devices(tenant_id)


@router.post("/devices/detach")
async def detach_device(
    request: schemas.DeviceKeyRequest | None = Body(default=None),
    code: str | None = Query(default=None),
    device_id: str | None = Query(default=None, alias="deviceId"),
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> dict:
    """
    Unbind a device from its pet. Keys come from the JSON body or the query string.
    """
    body = request or schemas.DeviceKeyRequest()
    return await service.detach_device(
        tenant_id,
        code=body.code or code,
        device_id=body.deviceId or device_id,
    )


@router.delete("/devices")
async def delete_device(
    request: schemas.DeviceKeyRequest | None = Body(default=None),
    code: str | None = Query(default=None),
    device_id: str | None = Query(default=None, alias="deviceId"),
    tenant_id: str = Depends(auth_dependencies.get_current_tenant),
) -> dict:
    body = request or schemas.DeviceKeyRequest()
    deleted = await service.delete_device(
        tenant_id,
        code=code or body.code,
        device_id=device_id or body.deviceId,
    )
    return {"ok": True, "deleted": deleted}
