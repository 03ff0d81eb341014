"""Map client controller: sync, rendering and the add-device flow."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from device_map.client.config import ClientConfig
from device_map.client.layer import MarkerRenderer
from device_map.client.state import AppState, ToastKind
from device_map.client.sync import DeviceApiClient
from device_map.errors import DeviceValidationError, TransportError
from device_map.schemas import DeviceCreate, DeviceRecord
from device_map.validation import validate_device_payload

logger = structlog.get_logger(__name__)

MAP_CLICK_MESSAGE = "Click on the map to select device location"
SAVED_MESSAGE = "Device added successfully"
LOAD_FAILED_MESSAGE = "Failed to load devices"


def _record_from_response(body: Any, submitted: DeviceCreate) -> DeviceRecord:
    """Accept either the full created record or an ``{id, message}`` ack."""
    if not isinstance(body, dict) or "id" not in body:
        raise TransportError("Invalid response from server")
    try:
        if all(name in body for name in DeviceRecord.model_fields):
            return DeviceRecord.model_validate(body)
        return DeviceRecord(id=int(body["id"]), **submitted.model_dump())
    except (ValueError, TypeError) as e:
        raise TransportError("Invalid response from server") from e


class DeviceMapApp:
    """Owns an :class:`AppState` and drives it from user actions.

    Network calls are not serialized against each other: a load that
    finishes after a save may briefly omit the saved device until the next
    load.
    """

    def __init__(
        self,
        state: AppState,
        api: DeviceApiClient,
        renderer: MarkerRenderer | None = None,
    ) -> None:
        self.state = state
        self.api = api
        self.renderer = renderer or MarkerRenderer(
            state.layer,
            chunk_size=state.config.render_chunk_size,
            chunk_delay_s=state.config.render_chunk_delay_s,
            coverage_radius_m=state.config.coverage_radius_m,
            marker_size_px=state.config.marker_size_px,
        )
        self._map_click_toast = None

    @classmethod
    def from_config(
        cls,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> DeviceMapApp:
        config = config or ClientConfig()
        return cls(AppState.from_config(config), DeviceApiClient(config, transport=transport))

    # --- Notifications ---
    def show_error(self, message: str) -> None:
        self.state.toasts.show(ToastKind.ERROR, message, self.state.config.error_toast_ms)

    # --- Sync ---
    async def load_devices(self) -> bool:
        """Replace the cache with the server's list and redraw every marker.

        On failure the current cache and markers are left as they are.
        """
        try:
            devices = await self.api.fetch_devices()
        except TransportError as e:
            logger.warning("load_devices_failed", error=str(e))
            self.show_error(LOAD_FAILED_MESSAGE)
            return False

        self.state.devices = list(devices)
        await self.renderer.render_all(self.state.devices)
        logger.info("devices_loaded", count=len(devices))
        return True

    async def save_device(self, form_values: Mapping[str, Any] | None = None) -> DeviceRecord | None:
        """Validate the form, create the device and draw its marker.

        Uses the form in the app state unless ``form_values`` is given.
        Returns the created record, or None when nothing was saved.
        """
        values = dict(form_values) if form_values is not None else dict(self.state.form.values)
        try:
            device = validate_device_payload(values)
        except DeviceValidationError as e:
            self.show_error("; ".join(e.errors))
            return None

        button = self.state.save_button
        button.set_busy()
        try:
            body = await self.api.create_device(device.model_dump())
            record = _record_from_response(body, device)
        except TransportError as e:
            self.show_error(str(e))
            return None
        finally:
            button.reset()

        self.renderer.add_one(record)
        self.state.devices.append(record)
        self.state.dialog_open = False
        self.state.form.reset()
        self.state.selected_coordinates = None
        self.state.toasts.show(ToastKind.SUCCESS, SAVED_MESSAGE, self.state.config.success_toast_ms)
        logger.info("device_saved", id=record.id, device_id=record.device_id)
        return record

    # --- Add flow ---
    def begin_add_flow(self) -> None:
        """Arm a one-shot map click that fills the form and opens the dialog."""
        self.state.selected_coordinates = None
        pending = self._map_click_toast is not None
        self.state.toasts.hide(self._map_click_toast)
        self._map_click_toast = self.state.toasts.show(
            ToastKind.INFO, MAP_CLICK_MESSAGE, self.state.config.map_click_toast_ms
        )
        if not pending:
            self.state.map.once_click(self._on_map_click)

    def _on_map_click(self, lat: float, lng: float) -> None:
        self.state.selected_coordinates = (lat, lng)
        self.state.form.set("coordinate_x", f"{lng:.6f}")
        self.state.form.set("coordinate_y", f"{lat:.6f}")
        self.state.toasts.hide(self._map_click_toast)
        self._map_click_toast = None
        self.state.dialog_open = True

    async def close(self) -> None:
        await self.api.close()
