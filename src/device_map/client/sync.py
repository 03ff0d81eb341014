"""HTTP client for the device API."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from device_map.client.config import ClientConfig
from device_map.errors import TransportError
from device_map.schemas import DeviceRecord

logger = structlog.get_logger(__name__)

DEVICES_PATH = "/api/devices"


def _error_message(response: httpx.Response) -> str:
    """Server-reported error text, joining validation messages if present."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(e) for e in errors)
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    return f"Server error ({response.status_code})"


class DeviceApiClient:
    """Reads and creates devices over HTTP. No retries."""

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.request_timeout_s,
            transport=transport,
        )

    async def fetch_devices(self) -> list[DeviceRecord]:
        """Fetch the full device list.

        Raises:
            TransportError: on network failure or a non-2xx response.
        """
        try:
            response = await self._client.get(DEVICES_PATH)
        except httpx.HTTPError as e:
            logger.exception("device_fetch_failed")
            raise TransportError("Network error") from e

        if not response.is_success:
            logger.warning("device_fetch_rejected", status=response.status_code)
            raise TransportError(_error_message(response), response.status_code)

        try:
            return [DeviceRecord.model_validate(item) for item in response.json()]
        except (ValueError, TypeError) as e:
            logger.exception("device_fetch_malformed")
            raise TransportError("Invalid response from server", response.status_code) from e

    async def create_device(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a new device and return the decoded response body.

        The body is either the full created record or ``{id, message}``.

        Raises:
            TransportError: on network failure or a non-2xx response.
        """
        try:
            response = await self._client.post(DEVICES_PATH, json=payload)
        except httpx.HTTPError as e:
            logger.exception("device_create_failed")
            raise TransportError("Network error") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning("device_create_rejected", status=response.status_code, error=message)
            raise TransportError(message, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Invalid response from server", response.status_code) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
