"""Shared test fixtures and configuration."""

from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from device_map.api.deps import get_device_store
from device_map.config import Settings
from device_map.db import DatabaseManager
from device_map.errors import StorageError
from device_map.main import create_app
from device_map.schemas import DeviceRecord
from device_map.store import DeviceStore


class BrokenStore:
    """A store whose every operation fails like a dead disk."""

    def __init__(self, message: str = "disk I/O error") -> None:
        self.message = message

    async def initialize(self) -> None:
        raise StorageError(self.message)

    async def list_all(self, device_id: str | None = None) -> list[DeviceRecord]:
        raise StorageError(self.message)

    async def get(self, id: int) -> DeviceRecord | None:
        raise StorageError(self.message)

    async def insert(self, device_id: str, x: float, y: float, signal: int) -> int:
        raise StorageError(self.message)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'devices.db'}"


@pytest_asyncio.fixture
async def db_manager(database_url: str):
    db = DatabaseManager(database_url)
    yield db
    await db.close()


@pytest_asyncio.fixture
async def store(db_manager: DatabaseManager) -> DeviceStore:
    device_store = DeviceStore(db_manager)
    await device_store.initialize()
    return device_store


@pytest.fixture
def app(store: DeviceStore, database_url: str):
    """Application wired to the temporary store."""
    application = create_app(Settings(database_url=database_url))
    application.dependency_overrides[get_device_store] = lambda: store
    return application


@pytest_asyncio.fixture
async def api_client(app):
    """In-process HTTP client for the API."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
        timeout=10.0,
    ) as client:
        yield client


@pytest.fixture
def broken_app(database_url: str):
    application = create_app(Settings(database_url=database_url))
    application.dependency_overrides[get_device_store] = lambda: BrokenStore()
    return application


@pytest.fixture
def sample_device_payload() -> dict:
    """Sample device creation payload (Red Square)."""
    return {
        "device_id": "sensor-1",
        "coordinate_x": 37.618423,
        "coordinate_y": 55.751244,
        "signal_quality": 7,
    }


@pytest.fixture
def make_device():
    """Factory for persisted-looking device records."""

    def _make(id: int = 1, signal: int = 5, x: float = 37.6, y: float = 55.75, label: str | None = None):
        return DeviceRecord(
            id=id,
            device_id=label or f"device-{id}",
            coordinate_x=x,
            coordinate_y=y,
            signal_quality=signal,
        )

    return _make
