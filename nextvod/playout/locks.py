"""Per-channel serialization of playlist advancement"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class ChannelLocks:
    """
    Keyed asyncio locks, one per channel identifier.

    A lock exists only while someone holds or waits for it, so idle
    channels do not accumulate entries.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, channel_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(channel_id)
        if lock is None:
            lock = self._locks[channel_id] = asyncio.Lock()
        self._waiters[channel_id] = self._waiters.get(channel_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[channel_id] -= 1
            if self._waiters[channel_id] == 0:
                del self._waiters[channel_id]
                del self._locks[channel_id]

    def __len__(self) -> int:
        return len(self._locks)
