"""
Channel stores.

Backends:
- couchdb: CouchDB HTTP API (Mango query + revisioned PUT)
- sql: SQLAlchemy asyncio (SQLite, PostgreSQL, MySQL)
"""

import logging

from nextvod.config import StoreConfig
from nextvod.store.base import ChannelStore
from nextvod.store.couchdb import CouchDBChannelStore
from nextvod.store.sql import SQLChannelStore

logger = logging.getLogger(__name__)


async def create_store(config: StoreConfig) -> ChannelStore:
    """
    Build the channel store selected by configuration.

    Args:
        config: Store settings

    Returns:
        Connected channel store
    """
    if config.backend == "sql":
        store: ChannelStore = await SQLChannelStore.connect(config.database)
    else:
        store = CouchDBChannelStore(config.couchdb)
    logger.info(f"Channel store backend: {store.backend_name}")
    return store


__all__ = [
    "ChannelStore",
    "CouchDBChannelStore",
    "SQLChannelStore",
    "create_store",
]
