"""
NextVOD - Next-video decision service for FAST channels

Serves the next asset of a linear channel playlist:
- Per-channel playlist position with wrap-around
- Ad break planning from house-ad inventory or filler
- Remote ad stitching with fallback to the unstitched asset
- CouchDB or SQL channel storage
"""

__version__ = "1.0.0"
__author__ = "NextVOD Contributors"
__license__ = "MIT"

from nextvod.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
