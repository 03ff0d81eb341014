"""Screen-space clustering of device markers."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field

from device_map.client.colors import color_for_signal
from device_map.client.markers import Marker

TILE_SIZE = 256
MAX_MERCATOR_LAT = 85.0511287798


def project(lat: float, lng: float, zoom: int) -> tuple[float, float]:
    """Web Mercator projection to world pixel coordinates at ``zoom``."""
    scale = TILE_SIZE * 2 ** zoom
    lat = max(min(lat, MAX_MERCATOR_LAT), -MAX_MERCATOR_LAT)
    x = (lng + 180.0) / 360.0 * scale
    sin_lat = math.sin(math.radians(lat))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * scale
    return x, y


@dataclass
class Cluster:
    """A group of nearby markers drawn as one glyph."""

    anchor: tuple[float, float]
    markers: list[Marker] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.markers)

    @property
    def lat(self) -> float:
        return sum(m.lat for m in self.markers) / self.count

    @property
    def lng(self) -> float:
        return sum(m.lng for m in self.markers) / self.count

    @property
    def mean_signal(self) -> float:
        return sum(m.signal_quality for m in self.markers) / self.count

    @property
    def color(self) -> str:
        return color_for_signal(self.mean_signal)

    def icon_html(self) -> str:
        return (
            f'<div style="background: {self.color}; border-radius: 50%; '
            'border: 2px solid white; text-align: center; font-weight: bold;">'
            f"{self.count}</div>"
        )


def cluster_markers(
    markers: list[Marker],
    zoom: int,
    radius_px: int = 100,
    disable_at_zoom: int | None = 18,
) -> list[Cluster | Marker]:
    """Group markers closer than ``radius_px`` screen pixels at ``zoom``.

    Greedy, in input order: each marker joins the first cluster whose anchor
    (the projected position of its first member) lies within the radius,
    otherwise it starts a new cluster. Groups of one come back as plain
    markers. At or above ``disable_at_zoom`` nothing is clustered.
    """
    if disable_at_zoom is not None and zoom >= disable_at_zoom:
        return list(markers)

    radius_sq = radius_px * radius_px
    grid: dict[tuple[int, int], list[Cluster]] = defaultdict(list)
    clusters: list[Cluster] = []

    for marker in markers:
        x, y = project(marker.lat, marker.lng, zoom)
        cx, cy = int(x // radius_px), int(y // radius_px)

        target = None
        for gx in (cx - 1, cx, cx + 1):
            for gy in (cy - 1, cy, cy + 1):
                for candidate in grid.get((gx, gy), ()):
                    ax, ay = candidate.anchor
                    if (ax - x) ** 2 + (ay - y) ** 2 <= radius_sq:
                        target = candidate
                        break
                if target is not None:
                    break
            if target is not None:
                break

        if target is None:
            target = Cluster(anchor=(x, y))
            grid[(cx, cy)].append(target)
            clusters.append(target)
        target.markers.append(marker)

    return [c.markers[0] if c.count == 1 else c for c in clusters]
