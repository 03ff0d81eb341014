"""Error taxonomy shared by the API and the map client."""

from __future__ import annotations


class DeviceMapError(Exception):
    """Base class for all device map errors."""


class DeviceValidationError(DeviceMapError):
    """Malformed or out-of-range device payload.

    Carries every violated rule, not just the first one.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class StorageError(DeviceMapError):
    """Read or write failure at the persistence layer."""


class TransportError(DeviceMapError):
    """Client-side network failure or non-2xx API response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
