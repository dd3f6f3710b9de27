"""
Playlist advancement.

A channel's state is a single integer: -1 before the first play, then an
index into its asset list. Each request moves it forward by one and wraps
to the start after the last asset; there is no terminal state.
"""

import logging
from typing import Optional

from nextvod.errors import EmptyPlaylistError, PositionConflictError
from nextvod.models import NEVER_PLAYED, NextVod
from nextvod.playout.breaks import AdBreakPlanner
from nextvod.playout.locks import ChannelLocks
from nextvod.store.base import ChannelStore
from nextvod.streaming.stitcher import StitchClient

logger = logging.getLogger(__name__)


def next_position(position: int, asset_count: int) -> int:
    """
    Compute the playlist index that follows ``position``.

    Args:
        position: Stored position, -1 if never played
        asset_count: Number of assets in the playlist

    Returns:
        Index in ``[0, asset_count - 1]``

    Raises:
        ValueError: If the playlist is empty
    """
    if asset_count <= 0:
        raise ValueError("Cannot advance an empty playlist")
    # A stale index past the end (playlist shrank) restarts like a first play
    if position < 0 or position >= asset_count - 1:
        return 0
    return position + 1


class PlaylistAdvancer:
    """
    Serves the next asset of a channel.

    Reads the channel, picks the next asset, plans and stitches its ad
    breaks, then writes the new position. The write happens after
    stitching, so a crash in between serves the same asset again instead
    of skipping one. Requests for the same channel are serialized within
    the process; across processes the write is conditional on the revision
    that was read, and a lost race re-reads and recomputes.
    """

    def __init__(
        self,
        store: ChannelStore,
        planner: AdBreakPlanner,
        stitcher: StitchClient,
        max_attempts: int = 3,
        locks: Optional[ChannelLocks] = None,
    ):
        self.store = store
        self.planner = planner
        self.stitcher = stitcher
        self.max_attempts = max_attempts
        self.locks = locks or ChannelLocks()

    async def get_next_vod(self, channel_id: str) -> NextVod:
        """
        Advance a channel and return the asset to play.

        Raises:
            ChannelNotFoundError: Unknown channel identifier
            EmptyPlaylistError: The channel has no assets
            PositionConflictError: Every attempt lost the position write
            StoreUnavailableError: The channel store failed
        """
        logger.info(f"Requesting next VOD for channel {channel_id}")
        async with self.locks.hold(channel_id):
            for attempt in range(1, self.max_attempts + 1):
                result = await self._advance_once(channel_id)
                if result is not None:
                    return result
                logger.warning(
                    f"Position of channel {channel_id} changed concurrently "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
        raise PositionConflictError(channel_id, self.max_attempts)

    async def _advance_once(self, channel_id: str) -> Optional[NextVod]:
        channel = await self.store.get_channel(channel_id)
        asset_count = len(channel.assets)
        if asset_count == 0:
            raise EmptyPlaylistError(channel_id)

        position = channel.position
        new_position = next_position(position, asset_count)
        if position == NEVER_PLAYED:
            logger.info(f"No current position, starting channel {channel_id} at 0")
        elif new_position == 0:
            logger.info(f"End of playlist reached, resetting channel {channel_id} to 0")

        asset = channel.assets[new_position]
        breaks = self.planner.plan(asset, channel)
        hls_url = await self.stitcher.stitch(asset.url, breaks)

        if not await self.store.compare_and_set_position(channel, new_position):
            return None

        logger.debug(f"Channel {channel_id} advanced {position} -> {new_position} ({asset.id})")
        return NextVod.from_asset(asset, hls_url)
