"""
Pydantic schemas for location endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LocationUpsertRequest(BaseModel):
    """
    Partial location. Only the fields a client sends are merged on update.

    `uid` and `updatedAt` are owned by the server and ignored if present.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True, allow_inf_nan=False)

    id: str | None = Field(default=None, max_length=200)
    petId: str | None = Field(default=None, max_length=200)
    label: str | None = Field(default=None, max_length=500)
    latitude: float | None = None
    longitude: float | None = None
    accuracy: float | None = None
    speed: float | None = None
    origin: str | None = Field(default=None, max_length=50)
    createdBy: str | None = Field(default=None, max_length=200)
    createdAt: str | None = Field(default=None, max_length=64)


class IngestRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, allow_inf_nan=False)

    code: str | None = Field(default=None, max_length=200)
    deviceId: str | None = Field(default=None, max_length=200)
    lat: float
    lng: float
    accuracy: float | None = None
    speed: float | None = None
    # Epoch milliseconds.
    timestamp: float | None = None
    label: str | None = Field(default=None, max_length=500)
