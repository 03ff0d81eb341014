"""Device map server configuration."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/devices.db"
    database_echo: bool = False

    # CORS
    cors_allow_origin: str = "*"
    cors_allow_headers: str = "Content-Type, Authorization, X-Requested-With"
    cors_allow_methods: str = "GET, POST, PUT, DELETE, OPTIONS"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
