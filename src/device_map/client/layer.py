"""Marker layer and the chunked batch renderer."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

import structlog

from device_map.client.clustering import Cluster, cluster_markers
from device_map.client.markers import Marker, render_marker
from device_map.schemas import DeviceRecord

logger = structlog.get_logger(__name__)


class MarkerLayer:
    """Holds the markers currently on the map, clustered on demand."""

    def __init__(self, cluster_radius_px: int = 100, disable_clustering_at_zoom: int | None = 18) -> None:
        self.cluster_radius_px = cluster_radius_px
        self.disable_clustering_at_zoom = disable_clustering_at_zoom
        self._markers: list[Marker] = []

    def __len__(self) -> int:
        return len(self._markers)

    @property
    def markers(self) -> list[Marker]:
        return list(self._markers)

    def add(self, marker: Marker) -> None:
        self._markers.append(marker)

    def add_many(self, markers: Iterable[Marker]) -> None:
        self._markers.extend(markers)

    def clear(self) -> None:
        self._markers.clear()

    def visible(self, zoom: int) -> list[Cluster | Marker]:
        """Glyphs to draw at ``zoom``: clusters and single markers."""
        return cluster_markers(
            self._markers,
            zoom,
            radius_px=self.cluster_radius_px,
            disable_at_zoom=self.disable_clustering_at_zoom,
        )


class MarkerRenderer:
    """Fills a :class:`MarkerLayer` in fixed-size chunks.

    Yields to the event loop between chunks so large device lists do not
    stall other tasks. Starting a new pass supersedes any pass still in
    flight; the old one stops at its next chunk boundary.
    """

    def __init__(
        self,
        layer: MarkerLayer,
        chunk_size: int = 1000,
        chunk_delay_s: float = 0.05,
        coverage_radius_m: int = 30,
        marker_size_px: int = 20,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.layer = layer
        self.chunk_size = chunk_size
        self.chunk_delay_s = chunk_delay_s
        self.coverage_radius_m = coverage_radius_m
        self.marker_size_px = marker_size_px
        self._generation = 0

    def marker_for(self, device: DeviceRecord) -> Marker:
        return render_marker(
            device,
            coverage_radius_m=self.coverage_radius_m,
            size_px=self.marker_size_px,
        )

    def add_one(self, device: DeviceRecord) -> Marker:
        """Render and insert a single device without touching the rest."""
        marker = self.marker_for(device)
        self.layer.add(marker)
        return marker

    async def render_all(self, devices: Sequence[DeviceRecord]) -> int:
        """Clear the layer and insert markers for ``devices`` in chunks.

        Returns:
            Number of markers inserted by this pass.
        """
        self._generation += 1
        generation = self._generation
        self.layer.clear()

        inserted = 0
        for start in range(0, len(devices), self.chunk_size):
            if start:
                await asyncio.sleep(self.chunk_delay_s)
                if generation != self._generation:
                    logger.debug("render_pass_superseded", inserted=inserted)
                    return inserted
            chunk = devices[start:start + self.chunk_size]
            self.layer.add_many(self.marker_for(d) for d in chunk)
            inserted += len(chunk)

        logger.debug("render_pass_complete", markers=inserted)
        return inserted
