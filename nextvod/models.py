"""
Channel, asset and ad-break models.

Field aliases follow the JSON shape of channel documents
(``channelId``, ``houseAdUrls``) and of the API response (``hlsUrl``).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TITLE = "No title"
NEVER_PLAYED = -1


class HouseAd(BaseModel):
    """A channel-owned ad creative."""

    url: str
    duration: float  # seconds


class Asset(BaseModel):
    """One playable video with ad-break offsets in seconds."""

    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    title: Optional[str] = None
    breaks: list[float] = Field(default_factory=list)


class Channel(BaseModel):
    """
    A linear channel: an ordered playlist and a cursor into it.

    ``document_id`` and ``revision`` are set by the store that loaded the
    channel and are used for conditional position writes.
    """

    model_config = ConfigDict(populate_by_name=True)

    channel_id: str = Field(alias="channelId")
    position: int = NEVER_PLAYED
    assets: list[Asset] = Field(default_factory=list)
    house_ad_urls: Optional[list[HouseAd]] = Field(default=None, alias="houseAdUrls")

    document_id: Optional[str] = Field(default=None, exclude=True)
    revision: Optional[str] = Field(default=None, exclude=True)

    @property
    def has_house_ads(self) -> bool:
        return bool(self.house_ad_urls)


class BreakDescriptor(BaseModel):
    """One ad insertion on the stitch timeline, in milliseconds."""

    pos: int
    duration: int
    url: str


class NextVod(BaseModel):
    """Result of advancing a channel."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = DEFAULT_TITLE
    hls_url: str = Field(alias="hlsUrl")

    @classmethod
    def from_asset(cls, asset: Asset, hls_url: str) -> "NextVod":
        return cls(id=asset.id, title=asset.title or DEFAULT_TITLE, hls_url=hls_url)
