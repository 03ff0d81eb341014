"""Explicit UI state for the map client.

Everything the page would otherwise keep in globals (device cache, marker
layer, armed click listener, open dialog, form fields, save control and
toasts) hangs off one :class:`AppState`.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

from device_map.client.config import ClientConfig
from device_map.client.layer import MarkerLayer
from device_map.schemas import DeviceRecord

ClickHandler = Callable[[float, float], None]


# --- Toasts ---
class ToastKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Toast:
    id: int
    kind: ToastKind
    message: str
    delay_ms: int
    visible: bool = True


class ToastCenter:
    """Transient notifications, newest last.

    Hidden toasts are dropped; at most ``limit`` are kept.
    """

    def __init__(self, limit: int = 20) -> None:
        self._ids = itertools.count(1)
        self.limit = limit
        self.toasts: list[Toast] = []

    def show(self, kind: ToastKind, message: str, delay_ms: int) -> Toast:
        toast = Toast(id=next(self._ids), kind=kind, message=message, delay_ms=delay_ms)
        self.toasts.append(toast)
        del self.toasts[:-self.limit]
        return toast

    def hide(self, toast: Toast | None) -> None:
        if toast is None:
            return
        toast.visible = False
        self.toasts = [t for t in self.toasts if t is not toast]

    @property
    def visible(self) -> list[Toast]:
        return [t for t in self.toasts if t.visible]

    def last(self, kind: ToastKind | None = None) -> Toast | None:
        for toast in reversed(self.toasts):
            if kind is None or toast.kind == kind:
                return toast
        return None


# --- Map ---
class MapView:
    """Map viewport with one-shot click listeners."""

    def __init__(self, center: tuple[float, float], zoom: int, max_zoom: int = 19) -> None:
        self.center = center
        self.zoom = zoom
        self.max_zoom = max_zoom
        self._once_click: list[ClickHandler] = []

    def set_view(self, center: tuple[float, float], zoom: int) -> None:
        self.center = center
        self.zoom = max(0, min(zoom, self.max_zoom))

    def once_click(self, handler: ClickHandler) -> None:
        """Call ``handler(lat, lng)`` on the next click only."""
        self._once_click.append(handler)

    @property
    def click_armed(self) -> bool:
        return bool(self._once_click)

    def click(self, lat: float, lng: float) -> None:
        handlers, self._once_click = self._once_click, []
        for handler in handlers:
            handler(lat, lng)


# --- Form & controls ---
FORM_FIELDS = ("device_id", "coordinate_x", "coordinate_y", "signal_quality")


@dataclass
class DeviceForm:
    values: dict[str, str] = field(default_factory=lambda: dict.fromkeys(FORM_FIELDS, ""))

    def set(self, name: str, value: str) -> None:
        if name not in FORM_FIELDS:
            raise KeyError(name)
        self.values[name] = value

    def get(self, name: str) -> str:
        return self.values[name]

    def reset(self) -> None:
        self.values = dict.fromkeys(FORM_FIELDS, "")


@dataclass
class SaveButton:
    label: str = "Save"
    disabled: bool = False
    busy: bool = False

    def set_busy(self) -> None:
        self.disabled = True
        self.busy = True
        self.label = "Saving..."

    def reset(self) -> None:
        self.disabled = False
        self.busy = False
        self.label = "Save"


@dataclass
class AppState:
    config: ClientConfig
    map: MapView
    layer: MarkerLayer
    devices: list[DeviceRecord] = field(default_factory=list)
    form: DeviceForm = field(default_factory=DeviceForm)
    save_button: SaveButton = field(default_factory=SaveButton)
    toasts: ToastCenter = field(default_factory=ToastCenter)
    dialog_open: bool = False
    selected_coordinates: tuple[float, float] | None = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> AppState:
        return cls(
            config=config,
            map=MapView(
                center=(config.map_center_lat, config.map_center_lng),
                zoom=config.map_zoom,
                max_zoom=config.map_max_zoom,
            ),
            layer=MarkerLayer(
                cluster_radius_px=config.cluster_radius_px,
                disable_clustering_at_zoom=config.disable_clustering_at_zoom,
            ),
        )
