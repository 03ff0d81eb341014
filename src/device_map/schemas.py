"""Pydantic models for device records exchanged over the API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Bounds ---
LONGITUDE_RANGE = (-180.0, 180.0)
LATITUDE_RANGE = (-90.0, 90.0)
SIGNAL_RANGE = (0, 10)


# --- Device Create ---
class DeviceCreate(BaseModel):
    """A validated, coerced device-creation payload."""

    device_id: str = Field(min_length=1)
    coordinate_x: float = Field(ge=LONGITUDE_RANGE[0], le=LONGITUDE_RANGE[1])
    coordinate_y: float = Field(ge=LATITUDE_RANGE[0], le=LATITUDE_RANGE[1])
    signal_quality: int = Field(ge=SIGNAL_RANGE[0], le=SIGNAL_RANGE[1])


# --- Device Record ---
class DeviceRecord(BaseModel):
    """A persisted device row. Longitude is stored as x, latitude as y."""

    id: int
    device_id: str
    coordinate_x: float
    coordinate_y: float
    signal_quality: int

    @property
    def latitude(self) -> float:
        return self.coordinate_y

    @property
    def longitude(self) -> float:
        return self.coordinate_x
