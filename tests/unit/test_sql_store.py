"""
Unit tests for the SQL channel store (in-memory SQLite).
"""

import pytest

from nextvod.database.connection import _get_async_url
from nextvod.errors import ChannelNotFoundError

from tests.fixtures.factories import ChannelFactory

HOUSE_ADS = [{"url": "https://ads.example.com/house.m3u8", "duration": 20}]


@pytest.mark.unit
class TestAsyncUrl:

    def test_sqlite_gets_aiosqlite(self):
        assert _get_async_url("sqlite:///./nextvod.db") == "sqlite+aiosqlite:///./nextvod.db"

    def test_postgres_gets_asyncpg(self):
        assert _get_async_url("postgresql://u:p@db/nextvod") == "postgresql+asyncpg://u:p@db/nextvod"

    def test_explicit_driver_kept(self):
        assert _get_async_url("sqlite+aiosqlite://") == "sqlite+aiosqlite://"


@pytest.mark.unit
class TestSQLChannelStore:

    @pytest.mark.asyncio
    async def test_add_and_get_channel(self, sql_store):
        await sql_store.add_channel(
            ChannelFactory.create(channel_id="retro-tv", asset_count=2, house_ads=HOUSE_ADS)
        )

        channel = await sql_store.get_channel("retro-tv")

        assert channel.channel_id == "retro-tv"
        assert channel.position == -1
        assert len(channel.assets) == 2
        assert channel.house_ad_urls[0].duration == 20
        assert channel.revision == "0"

    @pytest.mark.asyncio
    async def test_duplicate_channel_rejected(self, sql_store):
        await sql_store.add_channel(ChannelFactory.create(channel_id="dup"))

        with pytest.raises(ValueError):
            await sql_store.add_channel(ChannelFactory.create(channel_id="dup"))

    @pytest.mark.asyncio
    async def test_unknown_channel(self, sql_store):
        with pytest.raises(ChannelNotFoundError):
            await sql_store.get_channel("missing")
        assert await sql_store.get_position("missing") == -1

    @pytest.mark.asyncio
    async def test_cas_bumps_revision(self, sql_store):
        await sql_store.add_channel(ChannelFactory.create(channel_id="retro-tv"))
        channel = await sql_store.get_channel("retro-tv")

        assert await sql_store.compare_and_set_position(channel, 0) is True

        reloaded = await sql_store.get_channel("retro-tv")
        assert reloaded.position == 0
        assert reloaded.revision == "1"

    @pytest.mark.asyncio
    async def test_cas_with_stale_revision_fails(self, sql_store):
        await sql_store.add_channel(ChannelFactory.create(channel_id="retro-tv"))
        first = await sql_store.get_channel("retro-tv")
        second = await sql_store.get_channel("retro-tv")

        assert await sql_store.compare_and_set_position(first, 0) is True
        assert await sql_store.compare_and_set_position(second, 0) is False
        assert await sql_store.get_position("retro-tv") == 0

    @pytest.mark.asyncio
    async def test_set_position(self, sql_store):
        await sql_store.add_channel(ChannelFactory.create(channel_id="retro-tv", position=1))

        await sql_store.set_position("retro-tv", 2)

        assert await sql_store.get_position("retro-tv") == 2

    @pytest.mark.asyncio
    async def test_set_position_missing_channel_is_noop(self, sql_store):
        await sql_store.set_position("missing", 2)

        assert await sql_store.get_position("missing") == -1

    @pytest.mark.asyncio
    async def test_ping(self, sql_store):
        assert await sql_store.ping() is True

