"""Device store: append-only SQLite table of located devices."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

import structlog

from device_map import models  # noqa: F401  registers DeviceRow on Base.metadata
from device_map.db import DatabaseManager
from device_map.errors import StorageError
from device_map.schemas import DeviceRecord

logger = structlog.get_logger(__name__)

_COLUMNS = "id, device_id, coordinate_x, coordinate_y, signal_quality"


class DeviceStore:
    """Reads and appends rows of the ``device_data`` table.

    Every operation is a single statement; consistency is left to SQLite.
    Engine failures are re-raised as :class:`StorageError`.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def initialize(self) -> None:
        """Create the device table and its label index if absent."""
        try:
            await self._db.create_tables()
        except SQLAlchemyError as e:
            logger.exception("device_store_init_failed")
            raise StorageError(str(e)) from e

    async def list_all(self, device_id: str | None = None) -> list[DeviceRecord]:
        """Return all devices in insertion order, optionally filtered by label."""
        query = f"SELECT {_COLUMNS} FROM device_data"
        params = {}
        if device_id is not None:
            query += " WHERE device_id = :device_id"
            params["device_id"] = device_id
        query += " ORDER BY id"

        try:
            async with self._db.session() as session:
                result = await session.execute(text(query), params)
                rows = result.fetchall()
        except SQLAlchemyError as e:
            logger.exception("device_list_failed")
            raise StorageError(str(e)) from e

        return [DeviceRecord.model_validate(dict(row._mapping)) for row in rows]

    async def get(self, id: int) -> DeviceRecord | None:
        """Fetch a single device by its surrogate id."""
        try:
            async with self._db.session() as session:
                result = await session.execute(
                    text(f"SELECT {_COLUMNS} FROM device_data WHERE id = :id"),
                    {"id": id},
                )
                row = result.fetchone()
        except SQLAlchemyError as e:
            logger.exception("device_get_failed", id=id)
            raise StorageError(str(e)) from e

        if row is None:
            return None
        return DeviceRecord.model_validate(dict(row._mapping))

    async def insert(self, device_id: str, x: float, y: float, signal: int) -> int:
        """Append one device and return its generated id."""
        try:
            async with self._db.session() as session:
                result = await session.execute(
                    text("""
                        INSERT INTO device_data
                            (device_id, coordinate_x, coordinate_y, signal_quality)
                        VALUES
                            (:device_id, :x, :y, :signal)
                    """),
                    {"device_id": device_id, "x": x, "y": y, "signal": signal},
                )
                new_id = result.lastrowid
        except SQLAlchemyError as e:
            logger.exception("device_insert_failed", device_id=device_id)
            raise StorageError(str(e)) from e

        logger.info("device_inserted", id=new_id, device_id=device_id)
        return new_id
