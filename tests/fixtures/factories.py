"""
Test Data Factories

Factory classes for generating channels and an in-memory channel store.
"""

import random
import string
from typing import Any, Dict, List, Optional

from nextvod.models import NEVER_PLAYED, Asset, Channel, HouseAd
from nextvod.store.base import ChannelStore


class BaseFactory:
    """Base factory class."""

    _counter = 0

    @classmethod
    def _next_id(cls) -> int:
        BaseFactory._counter += 1
        return BaseFactory._counter

    @classmethod
    def _random_string(cls, length: int = 8) -> str:
        return "".join(random.choices(string.ascii_lowercase, k=length))


class AssetFactory(BaseFactory):
    """Factory for creating Asset test instances."""

    @classmethod
    def create(cls, asset_id: Optional[str] = None, **kwargs) -> Asset:
        asset_id = asset_id or f"asset-{cls._next_id()}"
        return Asset(
            id=asset_id,
            url=kwargs.get("url", f"https://vod.example.com/{asset_id}/index.m3u8"),
            title=kwargs.get("title", f"Episode {asset_id}"),
            breaks=kwargs.get("breaks", [10, 20]),
        )

    @classmethod
    def create_batch(cls, count: int, **kwargs) -> List[Asset]:
        return [cls.create(**kwargs) for _ in range(count)]


class ChannelFactory(BaseFactory):
    """Factory for creating Channel test instances."""

    @classmethod
    def create(
        cls,
        channel_id: Optional[str] = None,
        asset_count: int = 3,
        position: int = NEVER_PLAYED,
        house_ads: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> Channel:
        assets = kwargs.get("assets")
        if assets is None:
            assets = AssetFactory.create_batch(asset_count, breaks=kwargs.get("breaks", [10, 20]))
        return Channel(
            channel_id=channel_id or f"channel-{cls._random_string()}",
            position=position,
            assets=assets,
            house_ad_urls=[HouseAd(**ad) for ad in house_ads] if house_ads is not None else None,
        )

    @classmethod
    def create_document(cls, doc_id: str = "doc-1", rev: str = "1-a", **kwargs) -> Dict[str, Any]:
        """Create a CouchDB channel document (JSON shape, with _id/_rev)."""
        channel = cls.create(**kwargs)
        doc = channel.model_dump(by_alias=True, exclude_none=True)
        doc.update({"_id": doc_id, "_rev": rev, "name": "Test Channel"})
        return doc


class FakeChannelStore(ChannelStore):
    """
    In-memory channel store with revision checks.

    ``conflicts`` makes the next N conditional writes lose to a simulated
    concurrent writer.
    """

    backend_name = "fake"

    def __init__(self, channels: Optional[List[Channel]] = None, conflicts: int = 0):
        self._channels: Dict[str, Channel] = {}
        self._revisions: Dict[str, int] = {}
        self.conflicts = conflicts
        self.lookups = 0
        self.cas_calls = 0
        self.writes: List[tuple] = []
        self.healthy = True
        for channel in channels or []:
            self.add(channel)

    def add(self, channel: Channel) -> None:
        self._channels[channel.channel_id] = channel.model_copy(deep=True)
        self._revisions[channel.channel_id] = 1

    def stored_position(self, channel_id: str) -> int:
        return self._channels[channel_id].position

    async def find_channel(self, channel_id: str) -> Channel | None:
        self.lookups += 1
        channel = self._channels.get(channel_id)
        if channel is None:
            return None
        return channel.model_copy(
            update={"revision": str(self._revisions[channel_id]), "document_id": channel_id},
            deep=True,
        )

    async def compare_and_set_position(self, channel: Channel, position: int) -> bool:
        self.cas_calls += 1
        channel_id = channel.channel_id
        if channel_id not in self._channels:
            return False
        if self.conflicts > 0:
            self.conflicts -= 1
            self._revisions[channel_id] += 1
            return False
        if str(self._revisions[channel_id]) != channel.revision:
            return False
        self._channels[channel_id].position = position
        self._revisions[channel_id] += 1
        self.writes.append((channel_id, position))
        return True

    async def ping(self) -> bool:
        return self.healthy
