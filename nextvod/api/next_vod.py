"""Next VOD API endpoint"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ..errors import MissingParameterError, NextVodError
from ..models import NextVod
from ..playout.advancer import PlaylistAdvancer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Playout"])


def get_advancer(request: Request) -> PlaylistAdvancer:
    """Playlist advancer built during application startup."""
    return request.app.state.advancer


def error_response(error: NextVodError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": str(error)})


@router.get(
    "/nextVod",
    response_model=NextVod,
    responses={
        400: {"description": "Channel ID not provided"},
        404: {"description": "Channel not found"},
        409: {"description": "Channel has no assets"},
        503: {"description": "Channel store unavailable"},
    },
)
async def next_vod(
    channel_id: Optional[str] = Query(default=None, alias="channelId"),
    advancer: PlaylistAdvancer = Depends(get_advancer),
) -> Union[NextVod, JSONResponse]:
    """
    Advance a channel and return the next asset to play.

    Args:
        channel_id: Channel identifier

    Returns:
        NextVod: Asset id, title and playable (stitched) URL
    """
    try:
        if not channel_id:
            raise MissingParameterError("Channel ID not provided")
        return await advancer.get_next_vod(channel_id)
    except NextVodError as e:
        if e.status_code >= 500:
            logger.error(f"nextVod for channel {channel_id} failed: {e}")
        else:
            logger.info(f"nextVod for channel {channel_id} rejected: {e}")
        return error_response(e)
