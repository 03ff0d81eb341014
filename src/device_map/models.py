"""ORM model for the device table."""

from __future__ import annotations

from sqlalchemy import Float, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from device_map.db import Base


class DeviceRow(Base):
    __tablename__ = "device_data"
    # AUTOINCREMENT keeps ids from being reused after the highest row goes away
    __table_args__ = (
        Index("idx_device_id", "device_id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(Text, nullable=False)
    coordinate_x: Mapped[float] = mapped_column(Float, nullable=False)
    coordinate_y: Mapped[float] = mapped_column(Float, nullable=False)
    signal_quality: Mapped[int] = mapped_column(Integer, nullable=False)
