"""CouchDB channel store over the CouchDB HTTP API"""

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from nextvod.config import CouchDBConfig
from nextvod.errors import StoreUnavailableError
from nextvod.models import NEVER_PLAYED, Channel
from nextvod.store.base import ChannelStore

logger = logging.getLogger(__name__)


class CouchDBChannelStore(ChannelStore):
    """
    Channel store backed by a CouchDB database.

    Channels are looked up with a Mango ``_find`` query on ``channelId``.
    Position writes PUT the full document with the ``_rev`` that was read,
    so CouchDB rejects a write that raced another one with 409.
    """

    backend_name = "couchdb"

    def __init__(self, config: CouchDBConfig, http_client: httpx.AsyncClient | None = None):
        """
        Initialize CouchDB store.

        Args:
            config: CouchDB connection settings
            http_client: Optional preconfigured client (tests pass a mock transport)
        """
        self.config = config
        self.base_url = config.url.rstrip("/")
        self.database = config.database
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            auth=httpx.BasicAuth(config.username, config.password),
            timeout=httpx.Timeout(config.timeout),
            headers={"Accept": "application/json"},
        )

    def _db_url(self, *parts: str) -> str:
        segments = [self.base_url, quote(self.database, safe="")]
        segments.extend(quote(part, safe="") for part in parts)
        return "/".join(segments)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http_client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"CouchDB {method} {url} failed: {e}")
            raise StoreUnavailableError(f"Channel store unreachable: {e}", e) from e
        if response.status_code >= 500:
            logger.error(f"CouchDB {method} {url} returned {response.status_code}")
            raise StoreUnavailableError(
                f"Channel store error: HTTP {response.status_code}"
            )
        return response

    @staticmethod
    def _to_channel(doc: dict[str, Any]) -> Channel:
        data = dict(doc)
        if data.get("position") is None:
            data["position"] = NEVER_PLAYED
        data["document_id"] = doc.get("_id")
        data["revision"] = doc.get("_rev")
        try:
            return Channel.model_validate(data)
        except ValidationError as e:
            raise StoreUnavailableError(
                f"Malformed channel document {doc.get('_id')}: {e}", e
            ) from e

    async def find_channel(self, channel_id: str) -> Channel | None:
        query = {"selector": {"channelId": {"$eq": channel_id}}, "limit": 1}
        response = await self._request("POST", self._db_url("_find"), json=query)
        if response.status_code != 200:
            raise StoreUnavailableError(
                f"Channel lookup failed: HTTP {response.status_code}"
            )
        try:
            docs = response.json().get("docs", [])
        except ValueError as e:
            raise StoreUnavailableError("Channel lookup returned invalid JSON", e) from e
        if not docs:
            return None
        return self._to_channel(docs[0])

    async def compare_and_set_position(self, channel: Channel, position: int) -> bool:
        if channel.document_id is None:
            raise ValueError("Channel was not loaded from CouchDB")

        response = await self._request("GET", self._db_url(channel.document_id))
        if response.status_code == 404:
            return False
        if response.status_code != 200:
            raise StoreUnavailableError(
                f"Channel read failed: HTTP {response.status_code}"
            )
        try:
            doc = response.json()
        except ValueError as e:
            raise StoreUnavailableError("Channel read returned invalid JSON", e) from e
        if doc.get("_rev") != channel.revision:
            logger.debug(
                f"Channel {channel.channel_id} revision moved "
                f"{channel.revision} -> {doc.get('_rev')}"
            )
            return False

        # Full-document overwrite; CouchDB checks _rev again on PUT
        doc["position"] = position
        response = await self._request("PUT", self._db_url(channel.document_id), json=doc)
        if response.status_code == 409:
            return False
        if response.status_code not in (200, 201, 202):
            raise StoreUnavailableError(
                f"Channel write failed: HTTP {response.status_code}"
            )
        return True

    async def ping(self) -> bool:
        try:
            response = await self._http_client.get(self._db_url())
        except httpx.HTTPError as e:
            logger.warning(f"CouchDB ping failed: {e}")
            return False
        return response.status_code == 200

    async def close(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()
