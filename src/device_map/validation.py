"""Validation of untyped device-creation payloads.

Payloads arrive from JSON bodies or HTML forms, so every value may be a
string, a number or missing. All violated rules are collected and reported
together; nothing is inserted unless the whole payload passes.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from device_map.errors import DeviceValidationError
from device_map.schemas import (
    LATITUDE_RANGE,
    LONGITUDE_RANGE,
    SIGNAL_RANGE,
    DeviceCreate,
)

REQUIRED_FIELDS = ("device_id", "coordinate_x", "coordinate_y", "signal_quality")


def _is_blank(value: Any) -> bool:
    # lists and objects never carry a usable value
    if not isinstance(value, (str, int, float)):
        return True
    return str(value).strip() == ""


def parse_number(value: Any) -> float | None:
    """Parse a finite number from a JSON scalar or form string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _in_range(value: float, bounds: tuple[float, float]) -> bool:
    return bounds[0] <= value <= bounds[1]


def collect_errors(data: Any) -> list[str]:
    """Return every violated rule for ``data``; empty when valid."""
    if not isinstance(data, Mapping):
        return ["Invalid or missing request body"]

    errors: list[str] = []
    for field in REQUIRED_FIELDS:
        if field not in data or _is_blank(data[field]):
            errors.append(f"Missing or empty {field}")

    present = {f for f in REQUIRED_FIELDS if f in data and not _is_blank(data[f])}

    for field, label, bounds in (
        ("coordinate_x", "Coordinate_x", LONGITUDE_RANGE),
        ("coordinate_y", "Coordinate_y", LATITUDE_RANGE),
    ):
        if field not in present:
            continue
        number = parse_number(data[field])
        if number is None:
            errors.append(f"{label} must be a number")
        elif not _in_range(number, bounds):
            errors.append(f"{label} must be between {bounds[0]:g} and {bounds[1]:g}")

    if "signal_quality" in present:
        signal = parse_number(data["signal_quality"])
        if signal is None or not _in_range(signal, SIGNAL_RANGE):
            errors.append(
                f"Signal quality must be a number between {SIGNAL_RANGE[0]} and {SIGNAL_RANGE[1]}"
            )

    return errors


def validate_device_payload(data: Any) -> DeviceCreate:
    """Validate and coerce a creation payload.

    Raises:
        DeviceValidationError: listing every violated rule.
    """
    errors = collect_errors(data)
    if errors:
        raise DeviceValidationError(errors)

    return DeviceCreate(
        device_id=str(data["device_id"]),
        coordinate_x=parse_number(data["coordinate_x"]),
        coordinate_y=parse_number(data["coordinate_y"]),
        # fractional signal values are truncated toward zero
        signal_quality=int(parse_number(data["signal_quality"])),
    )
