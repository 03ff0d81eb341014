"""Map client configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientConfig(BaseSettings):
    """Configuration for the map client, loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # API
    api_base_url: str = "http://localhost:8080"
    request_timeout_s: float = 10.0

    # Batched rendering
    render_chunk_size: int = 1000
    render_chunk_delay_ms: int = 50

    # Clustering
    cluster_radius_px: int = 100
    disable_clustering_at_zoom: int = 18

    # Initial view (Moscow, Red Square)
    map_center_lat: float = 55.751244
    map_center_lng: float = 37.618423
    map_zoom: int = 15
    map_max_zoom: int = 19

    # Presentation
    coverage_radius_m: int = 30
    marker_size_px: int = 20

    # Toast lifetimes
    success_toast_ms: int = 3000
    map_click_toast_ms: int = 5000
    error_toast_ms: int = 5000

    @property
    def render_chunk_delay_s(self) -> float:
        return self.render_chunk_delay_ms / 1000
