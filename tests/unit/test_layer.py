"""Unit tests for the marker layer and chunked renderer."""

from __future__ import annotations

import asyncio

import pytest

from device_map.client.layer import MarkerLayer, MarkerRenderer

CHUNK = 7


@pytest.fixture
def layer() -> MarkerLayer:
    return MarkerLayer()


@pytest.fixture
def devices(make_device):
    def _devices(n: int, offset: int = 0):
        return [make_device(id=offset + i + 1, signal=i % 11) for i in range(n)]
    return _devices


class TestMarkerRenderer:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("n", [0, 1, CHUNK, CHUNK + 1, 10 * CHUNK])
    async def test_renders_every_device_once_in_order(self, layer, devices, n):
        renderer = MarkerRenderer(layer, chunk_size=CHUNK, chunk_delay_s=0)
        batch = devices(n)

        inserted = await renderer.render_all(batch)

        assert inserted == n
        assert len(layer) == n
        assert [m.device.id for m in layer.markers] == [d.id for d in batch]

    @pytest.mark.asyncio
    async def test_default_chunk_size(self, layer, devices):
        renderer = MarkerRenderer(layer, chunk_delay_s=0)
        assert renderer.chunk_size == 1000
        assert await renderer.render_all(devices(10_000)) == 10_000
        assert len(layer) == 10_000

    @pytest.mark.asyncio
    async def test_clears_previous_markers(self, layer, devices):
        renderer = MarkerRenderer(layer, chunk_size=CHUNK, chunk_delay_s=0)
        await renderer.render_all(devices(20))
        await renderer.render_all(devices(3, offset=100))
        assert [m.device.id for m in layer.markers] == [101, 102, 103]

    @pytest.mark.asyncio
    async def test_yields_between_chunks(self, layer, devices):
        renderer = MarkerRenderer(layer, chunk_size=2, chunk_delay_s=0.01)
        task = asyncio.create_task(renderer.render_all(devices(6)))
        await asyncio.sleep(0)
        # first chunk is in, the rest waits for the next tick
        assert len(layer) == 2
        await task
        assert len(layer) == 6

    @pytest.mark.asyncio
    async def test_newer_pass_supersedes_older(self, layer, devices):
        renderer = MarkerRenderer(layer, chunk_size=2, chunk_delay_s=0.01)
        stale = asyncio.create_task(renderer.render_all(devices(10)))
        await asyncio.sleep(0)

        await renderer.render_all(devices(3, offset=100))
        stale_count = await stale

        assert stale_count < 10
        assert [m.device.id for m in layer.markers] == [101, 102, 103]

    def test_add_one(self, layer, make_device):
        renderer = MarkerRenderer(layer)
        marker = renderer.add_one(make_device(id=9, signal=10))
        assert layer.markers == [marker]
        assert marker.color == "#00ff00"

    def test_rejects_empty_chunks(self, layer):
        with pytest.raises(ValueError):
            MarkerRenderer(layer, chunk_size=0)


class TestMarkerLayer:
    def test_visible_uses_cluster_settings(self, make_device):
        layer = MarkerLayer(cluster_radius_px=100, disable_clustering_at_zoom=18)
        renderer = MarkerRenderer(layer)
        for i in range(3):
            renderer.add_one(make_device(id=i + 1))
        assert len(layer.visible(zoom=12)) == 1
        assert len(layer.visible(zoom=18)) == 3
