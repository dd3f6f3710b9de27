"""SQL channel store using SQLAlchemy asyncio"""

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from nextvod.config import DatabaseConfig
from nextvod.database import ChannelRecord, init_db
from nextvod.errors import StoreUnavailableError
from nextvod.models import Channel
from nextvod.store.base import ChannelStore

logger = logging.getLogger(__name__)


class SQLChannelStore(ChannelStore):
    """
    Channel store backed by a relational database.

    Position writes are ``UPDATE ... WHERE revision = :read_revision``;
    a zero row count means another writer got there first.
    """

    backend_name = "sql"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        self.session_factory = session_factory
        self._engine = engine

    @classmethod
    async def connect(cls, config: DatabaseConfig) -> "SQLChannelStore":
        """Create the engine, ensure the schema and return a store."""
        try:
            engine, session_factory = await init_db(config)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Database unavailable: {e}", e) from e
        return cls(session_factory, engine=engine)

    @staticmethod
    def _to_channel(record: ChannelRecord) -> Channel:
        try:
            return Channel(
                channel_id=record.channel_id,
                position=record.position,
                assets=record.assets or [],
                house_ad_urls=record.house_ad_urls,
                document_id=str(record.id),
                revision=str(record.revision),
            )
        except ValidationError as e:
            raise StoreUnavailableError(
                f"Malformed channel row {record.channel_id}: {e}", e
            ) from e

    async def find_channel(self, channel_id: str) -> Channel | None:
        stmt = select(ChannelRecord).where(ChannelRecord.channel_id == channel_id).limit(1)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                record = result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Channel lookup for {channel_id} failed: {e}")
            raise StoreUnavailableError(f"Channel store error: {e}", e) from e
        if record is None:
            return None
        return self._to_channel(record)

    async def compare_and_set_position(self, channel: Channel, position: int) -> bool:
        if channel.revision is None:
            raise ValueError("Channel was not loaded from the SQL store")

        stmt = (
            update(ChannelRecord)
            .where(
                ChannelRecord.channel_id == channel.channel_id,
                ChannelRecord.revision == int(channel.revision),
            )
            .values(position=position, revision=ChannelRecord.revision + 1)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Position write for {channel.channel_id} failed: {e}")
            raise StoreUnavailableError(f"Channel store error: {e}", e) from e
        return result.rowcount == 1

    async def add_channel(self, channel: Channel) -> Channel:
        """
        Provision a channel row.

        Raises:
            ValueError: If a channel with the same identifier exists.
        """
        record = ChannelRecord(
            channel_id=channel.channel_id,
            position=channel.position,
            assets=[asset.model_dump() for asset in channel.assets],
            house_ad_urls=(
                [ad.model_dump() for ad in channel.house_ad_urls]
                if channel.house_ad_urls is not None
                else None
            ),
            revision=0,
        )
        try:
            async with self.session_factory() as session:
                session.add(record)
                await session.commit()
                await session.refresh(record)
        except IntegrityError as e:
            raise ValueError(f"Channel {channel.channel_id} already exists") from e
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Channel store error: {e}", e) from e
        logger.info(f"Added channel {channel.channel_id} with {len(channel.assets)} assets")
        return self._to_channel(record)

    async def ping(self) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False
        return True

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
