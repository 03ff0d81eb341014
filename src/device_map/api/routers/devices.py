"""Devices router — list and register located devices."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

import structlog

from device_map.api.deps import get_device_store
from device_map.errors import DeviceValidationError, StorageError
from device_map.schemas import DeviceRecord
from device_map.store import DeviceStore
from device_map.validation import validate_device_payload

logger = structlog.get_logger(__name__)

router = APIRouter()

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_payload(request: Request) -> Any:
    """Decode a JSON or form body into a plain mapping.

    Returns None when the body cannot be decoded.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        # JSONDecodeError, UnicodeDecodeError and the integer digit limit
        return None


@router.options("/devices")
async def devices_preflight():
    """Cross-origin pre-flight: always succeeds with an empty body."""
    return Response(status_code=200, media_type="application/json")


@router.get("/devices", response_model=list[DeviceRecord])
async def list_devices(
    device_id: str | None = None,
    store: DeviceStore = Depends(get_device_store),
):
    """List all devices, optionally only those with the given label."""
    try:
        devices = await store.list_all(device_id=device_id)
    except StorageError:
        return JSONResponse(status_code=500, content={"error": "Failed to fetch devices"})
    return devices


@router.post("/devices", status_code=201, response_model=DeviceRecord)
async def create_device(
    request: Request,
    store: DeviceStore = Depends(get_device_store),
):
    """Register a new device and return the stored record."""
    payload = await _read_payload(request)

    try:
        device = validate_device_payload(payload)
    except DeviceValidationError as e:
        logger.info("device_rejected", errors=e.errors)
        return JSONResponse(status_code=400, content={"errors": e.errors})

    try:
        new_id = await store.insert(
            device.device_id,
            device.coordinate_x,
            device.coordinate_y,
            device.signal_quality,
        )
        created = await store.get(new_id)
    except StorageError as e:
        return JSONResponse(status_code=500, content={"error": f"Database error: {e}"})

    if created is None:
        # removed out of band before the read-back; answer with what was written
        created = DeviceRecord(id=new_id, **device.model_dump())

    logger.info("device_created", id=created.id, device_id=created.device_id)
    return created
