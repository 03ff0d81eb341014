"""Unit tests for screen-space marker clustering."""

from __future__ import annotations

import pytest

from device_map.client.clustering import MAX_MERCATOR_LAT, Cluster, cluster_markers, project
from device_map.client.markers import render_marker


class TestProject:
    def test_origin_is_world_center(self):
        assert project(0.0, 0.0, 0) == pytest.approx((128.0, 128.0))

    def test_scales_with_zoom(self):
        x0, y0 = project(55.75, 37.61, 10)
        x1, y1 = project(55.75, 37.61, 11)
        assert x1 == pytest.approx(2 * x0)
        assert y1 == pytest.approx(2 * y0)

    def test_clamps_poles(self):
        assert project(90.0, 0.0, 0) == project(MAX_MERCATOR_LAT, 0.0, 0)
        assert project(90.0, 0.0, 0)[1] == pytest.approx(0.0, abs=1e-3)
        assert project(-90.0, 0.0, 0)[1] == pytest.approx(256.0, abs=1e-3)


class TestClusterMarkers:
    def test_close_markers_merge(self, make_device):
        markers = [
            render_marker(make_device(id=1, signal=0, x=37.6184, y=55.7512)),
            render_marker(make_device(id=2, signal=10, x=37.6185, y=55.7513)),
        ]
        glyphs = cluster_markers(markers, zoom=15)
        assert len(glyphs) == 1
        cluster = glyphs[0]
        assert isinstance(cluster, Cluster)
        assert cluster.count == 2
        assert cluster.mean_signal == 5
        assert cluster.color == "#ffff00"
        assert ">2</div>" in cluster.icon_html()

    def test_far_markers_stay_single(self, make_device):
        moscow = render_marker(make_device(id=1, x=37.6184, y=55.7512))
        petersburg = render_marker(make_device(id=2, x=30.3141, y=59.9386))
        glyphs = cluster_markers([moscow, petersburg], zoom=10)
        assert glyphs == [moscow, petersburg]

    def test_disabled_at_high_zoom(self, make_device):
        markers = [render_marker(make_device(id=i, x=37.6184, y=55.7512)) for i in range(5)]
        assert len(cluster_markers(markers, zoom=15)) == 1
        assert cluster_markers(markers, zoom=18, disable_at_zoom=18) == markers

    def test_every_marker_accounted_for(self, make_device):
        markers = [
            render_marker(make_device(id=i, signal=i % 11, x=37.0 + (i % 20) * 0.05, y=55.0 + (i // 20) * 0.05))
            for i in range(200)
        ]
        glyphs = cluster_markers(markers, zoom=9)
        total = sum(g.count if isinstance(g, Cluster) else 1 for g in glyphs)
        assert total == 200
        assert len(glyphs) < 200

    def test_cluster_position_is_mean(self, make_device):
        markers = [
            render_marker(make_device(id=1, x=10.0, y=20.0)),
            render_marker(make_device(id=2, x=10.0002, y=20.0002)),
        ]
        (cluster,) = cluster_markers(markers, zoom=12)
        assert cluster.lat == pytest.approx(20.0001)
        assert cluster.lng == pytest.approx(10.0001)

    def test_empty(self):
        assert cluster_markers([], zoom=5) == []
