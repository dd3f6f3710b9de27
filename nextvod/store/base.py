"""
Base channel store.

Provides the abstract interface every channel persistence backend
implements. Lookups are by the ``channelId`` field, which is not
necessarily the backend's own storage key.
"""

import logging
from abc import ABC, abstractmethod

from nextvod.errors import ChannelNotFoundError
from nextvod.models import NEVER_PLAYED, Channel

logger = logging.getLogger(__name__)


class ChannelStore(ABC):
    """
    Abstract base class for channel stores.

    Every call goes to the backend; there is no caching layer.
    Backend and transport failures raise StoreUnavailableError.
    """

    backend_name: str = "unknown"

    @abstractmethod
    async def find_channel(self, channel_id: str) -> Channel | None:
        """Return the first channel carrying ``channel_id``, or None."""
        pass

    @abstractmethod
    async def compare_and_set_position(self, channel: Channel, position: int) -> bool:
        """
        Write ``position`` only if the stored channel is still at ``channel.revision``.

        Args:
            channel: Channel as previously returned by this store.
            position: New playlist position.

        Returns:
            True if the write was applied, False on a revision conflict or
            when the channel no longer exists.
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backend answers."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None

    async def get_channel(self, channel_id: str) -> Channel:
        """
        Get a channel by identifier.

        Raises:
            ChannelNotFoundError: If no channel carries the identifier.
        """
        channel = await self.find_channel(channel_id)
        if channel is None:
            raise ChannelNotFoundError(channel_id)
        return channel

    async def get_position(self, channel_id: str) -> int:
        """Get the stored position, or -1 for a missing or never-played channel."""
        channel = await self.find_channel(channel_id)
        if channel is None:
            return NEVER_PLAYED
        return channel.position

    async def set_position(self, channel_id: str, position: int) -> None:
        """
        Overwrite the stored position of a channel.

        Read-modify-write of the full record. Does nothing if the channel no
        longer exists.
        """
        channel = await self.find_channel(channel_id)
        if channel is None:
            logger.debug(f"Channel {channel_id} disappeared, position not written")
            return
        if not await self.compare_and_set_position(channel, position):
            logger.warning(
                f"Channel {channel_id} changed while writing position {position}"
            )
