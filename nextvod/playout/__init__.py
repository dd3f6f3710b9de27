"""
NextVOD Playout Engine

- Playlist advancement with wrap-around
- Ad break planning (house ads or filler)
- Per-channel serialization
"""

from nextvod.playout.advancer import PlaylistAdvancer, next_position
from nextvod.playout.breaks import AdBreakPlanner
from nextvod.playout.locks import ChannelLocks

__all__ = [
    "AdBreakPlanner",
    "ChannelLocks",
    "PlaylistAdvancer",
    "next_position",
]
