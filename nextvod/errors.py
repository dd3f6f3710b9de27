"""
Error types for NextVOD.

Each error carries the HTTP status the API answers with. StitchError never
reaches a caller: the stitch client recovers from it by serving the
unstitched asset.
"""

from typing import Optional


class NextVodError(Exception):
    """Base class for NextVOD errors."""

    status_code: int = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class MissingParameterError(NextVodError):
    """A required request parameter was not provided."""

    status_code = 400


class ChannelNotFoundError(NextVodError):
    """No channel carries the requested identifier."""

    status_code = 404

    def __init__(self, channel_id: str):
        super().__init__(f"Channel {channel_id} not found")
        self.channel_id = channel_id


class EmptyPlaylistError(NextVodError):
    """The channel exists but has no assets to play."""

    status_code = 409

    def __init__(self, channel_id: str):
        super().__init__(f"Channel {channel_id} has no assets")
        self.channel_id = channel_id


class PositionConflictError(NextVodError):
    """Concurrent writers kept winning the position update."""

    status_code = 503

    def __init__(self, channel_id: str, attempts: int):
        super().__init__(
            f"Position update for channel {channel_id} conflicted "
            f"{attempts} time(s), try again"
        )
        self.channel_id = channel_id
        self.attempts = attempts


class StoreUnavailableError(NextVodError):
    """The channel store could not be reached or answered with an error."""

    status_code = 503


class StitchError(NextVodError):
    """The stitcher did not produce a playable URL."""

    status_code = 502
