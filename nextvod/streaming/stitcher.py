"""
Remote ad stitching client.

Sends an asset URL and its break plan to the stitcher and returns the
stitched playlist URL. Any failure degrades to the original, unstitched
asset URL: a broken stitcher costs ad insertions, never playback.
"""

import asyncio
import logging
from typing import Any, List, Optional
from urllib.parse import urljoin

import httpx

from nextvod.config import StitcherConfig
from nextvod.errors import StitchError
from nextvod.models import BreakDescriptor

logger = logging.getLogger(__name__)


class StitchClient:
    """
    Client for the stitch endpoint.

    Request:  POST {"uri": <asset url>, "breaks": [{"pos", "duration", "url"}]}
    Response: {"uri": <relative or absolute url>} on success,
              {"reason": <text>} on failure.
    """

    def __init__(self, config: StitcherConfig, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initialize stitch client.

        Args:
            config: Stitcher endpoint and timeout
            http_client: Optional preconfigured client (tests pass a mock transport)
        """
        self.config = config
        self.endpoint = urljoin(config.base_url.rstrip("/") + "/", config.path.lstrip("/"))
        self.timeout = config.timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            headers={"Accept": "application/json"},
        )

    async def stitch(self, asset_url: str, breaks: List[BreakDescriptor]) -> str:
        """
        Stitch ad breaks into an asset.

        Args:
            asset_url: Source playlist URL of the asset
            breaks: Break plan from the ad break planner

        Returns:
            Stitched playlist URL, or ``asset_url`` if stitching failed.
        """
        try:
            return await asyncio.wait_for(
                self._request_stitch(asset_url, breaks), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Failed to stitch VOD: no answer within {self.timeout}s, "
                f"serving {asset_url} without ads"
            )
        except StitchError as e:
            logger.error(f"Failed to stitch VOD: {e}, serving {asset_url} without ads")
        return asset_url

    async def _request_stitch(self, asset_url: str, breaks: List[BreakDescriptor]) -> str:
        payload = {
            "uri": asset_url,
            "breaks": [descriptor.model_dump() for descriptor in breaks],
        }
        try:
            response = await self._http_client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            raise StitchError(f"transport error: {e}", e) from e

        if not response.is_success:
            reason = self._reason(response)
            raise StitchError(
                f"{response.status_code} {response.reason_phrase}"
                + (f" ({reason})" if reason else "")
            )

        try:
            body = response.json()
        except ValueError as e:
            raise StitchError("response is not JSON", e) from e

        uri = body.get("uri") if isinstance(body, dict) else None
        if not isinstance(uri, str) or not uri:
            raise StitchError("response has no uri")

        stitched = urljoin(self.endpoint, uri)
        logger.debug(f"Stitched {asset_url} with {len(breaks)} insertions -> {stitched}")
        return stitched

    @staticmethod
    def _reason(response: httpx.Response) -> Optional[str]:
        try:
            body: Any = response.json()
        except ValueError:
            return response.text or None
        if isinstance(body, dict) and body.get("reason"):
            return str(body["reason"])
        return None

    async def close(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()
