"""
Channel Database Models

Relational layout of a channel document: scalar fields as columns,
the playlist and house-ad inventory as JSON.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for NextVOD models."""
    pass


class TimestampMixin:
    """Adds created_at / updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )


class ChannelRecord(Base, TimestampMixin):
    """
    A channel row.

    ``revision`` is bumped on every position write and guards
    conditional updates.
    """

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    channel_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
    assets: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    house_ad_urls: Mapped[Optional[list[dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ChannelRecord {self.channel_id} position={self.position} rev={self.revision}>"
