"""
NextVOD Database Module

SQLAlchemy models and connection helpers for the SQL channel store.
"""

from nextvod.database.connection import init_db
from nextvod.database.models import Base, ChannelRecord, TimestampMixin

__all__ = [
    "Base",
    "ChannelRecord",
    "TimestampMixin",
    "init_db",
]
