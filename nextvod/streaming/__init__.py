"""Streaming output: ad stitching"""

from nextvod.streaming.stitcher import StitchClient

__all__ = ["StitchClient"]
