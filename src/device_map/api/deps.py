"""Dependency injection for settings, database and the device store."""

from __future__ import annotations

from functools import lru_cache

from device_map.config import Settings
from device_map.db import DatabaseManager
from device_map.store import DeviceStore


@lru_cache
def get_settings() -> Settings:
    return Settings()


_db_manager: DatabaseManager | None = None


def get_db_manager(settings: Settings | None = None) -> DatabaseManager:
    global _db_manager
    if _db_manager is None:
        s = settings or get_settings()
        _db_manager = DatabaseManager(s.database_url, echo=s.database_echo)
    return _db_manager


async def close_db_manager() -> None:
    global _db_manager
    if _db_manager is not None:
        await _db_manager.close()
        _db_manager = None


def get_device_store() -> DeviceStore:
    """FastAPI dependency: the device store bound to the shared engine."""
    return DeviceStore(get_db_manager())
