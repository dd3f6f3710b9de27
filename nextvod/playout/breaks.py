"""
Ad break planning.

Turns an asset's break offsets into the insertion timeline sent to the
stitcher. Channels with house-ad inventory get every house ad, back to back,
at each break; other channels get one filler slate per break.

All descriptor positions and durations are integer milliseconds. Break
offsets, house-ad durations and the filler duration are all given in
seconds and scaled by 1000.
"""

import logging
from typing import List, Optional

from nextvod.config import FillerConfig
from nextvod.models import Asset, BreakDescriptor, Channel

logger = logging.getLogger(__name__)


def seconds_to_ms(seconds: float) -> int:
    """Convert seconds to whole milliseconds."""
    return int(round(seconds * 1000))


class AdBreakPlanner:
    """
    Builds break plans for assets.

    The filler slate comes from configuration passed in at construction.
    """

    def __init__(self, filler: FillerConfig):
        self.filler = filler

    def plan(self, asset: Asset, channel: Optional[Channel] = None) -> List[BreakDescriptor]:
        """
        Build the break plan for an asset.

        Args:
            asset: Asset whose break offsets are expanded
            channel: Owning channel; its house ads are preferred over filler

        Returns:
            Descriptors ordered break by break (ascending offset), and within
            a break in house-ad inventory order. Empty if the asset has no breaks.
        """
        # Stable sort keeps declared order for equal offsets
        offsets = sorted(asset.breaks)
        if not offsets:
            return []

        if channel is not None and channel.has_house_ads:
            descriptors = self._plan_house_ads(offsets, channel)
        else:
            descriptors = self._plan_filler(offsets)

        logger.debug(
            f"Planned {len(descriptors)} ad insertions over {len(offsets)} breaks "
            f"for asset {asset.id}"
        )
        return descriptors

    def _plan_house_ads(self, offsets: List[float], channel: Channel) -> List[BreakDescriptor]:
        descriptors: List[BreakDescriptor] = []
        for offset in offsets:
            pos = seconds_to_ms(offset)
            for ad in channel.house_ad_urls or []:
                duration = seconds_to_ms(ad.duration)
                descriptors.append(BreakDescriptor(pos=pos, duration=duration, url=ad.url))
                pos += duration
        return descriptors

    def _plan_filler(self, offsets: List[float]) -> List[BreakDescriptor]:
        duration = seconds_to_ms(self.filler.duration_sec)
        return [
            BreakDescriptor(pos=seconds_to_ms(offset), duration=duration, url=self.filler.url)
            for offset in offsets
        ]
