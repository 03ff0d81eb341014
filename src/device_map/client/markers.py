"""Device → map marker conversion."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape

from device_map.client.colors import color_for_signal, signal_class
from device_map.schemas import DeviceRecord

COVERAGE_RADIUS_M = 30
MARKER_SIZE_PX = 20


@dataclass(frozen=True)
class MarkerIcon:
    color: str
    size_px: int = MARKER_SIZE_PX

    def html(self) -> str:
        return (
            f'<div style="background: {self.color}; '
            f"width: {self.size_px}px; height: {self.size_px}px; "
            "border-radius: 50%; border: 2px solid white; "
            'box-shadow: 0 0 5px rgba(0,0,0,0.3);"></div>'
        )

    @property
    def icon_size(self) -> tuple[int, int]:
        # the 2px border on each side
        return (self.size_px + 4, self.size_px + 4)


@dataclass(frozen=True)
class Marker:
    """A rendered device marker. Positioned by (lat, lng), not (x, y)."""

    device: DeviceRecord
    lat: float
    lng: float
    icon: MarkerIcon
    popup_html: str

    @property
    def color(self) -> str:
        return self.icon.color

    @property
    def signal_quality(self) -> int:
        return self.device.signal_quality


def popup_html(device: DeviceRecord, coverage_radius_m: int = COVERAGE_RADIUS_M) -> str:
    """Popup body for a device. The label is escaped here and only here."""
    return (
        f"<b>{escape(device.device_id)}</b>"
        f'<div class="{signal_class(device.signal_quality)}">'
        f"Signal: {device.signal_quality}/10</div>"
        "<div>Coordinates:<br>"
        f"{device.coordinate_x:.6f},<br>{device.coordinate_y:.6f}</div>"
        f"<div>Coverage: {coverage_radius_m}m radius</div>"
    )


def render_marker(
    device: DeviceRecord,
    coverage_radius_m: int = COVERAGE_RADIUS_M,
    size_px: int = MARKER_SIZE_PX,
) -> Marker:
    """Build the marker for a device (lat from coordinate_y, lng from coordinate_x)."""
    return Marker(
        device=device,
        lat=device.latitude,
        lng=device.longitude,
        icon=MarkerIcon(color=color_for_signal(device.signal_quality), size_px=size_px),
        popup_html=popup_html(device, coverage_radius_m),
    )
