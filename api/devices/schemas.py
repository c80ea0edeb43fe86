"""
Pydantic schemas for device endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RegisterDeviceRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    petId: str | None = Field(default=None, max_length=200)
    code: str | None = Field(default=None, max_length=200)
    deviceId: str | None = Field(default=None, max_length=200)
    name: str | None = Field(default=None, max_length=200)


class DeviceKeyRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    code: str | None = Field(default=None, max_length=200)
    deviceId: str | None = Field(default=None, max_length=200)
