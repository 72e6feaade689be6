"""ipinfo.io client built on httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from iplens.core.errors import GeoLookupError
from iplens.core.types import GeoRecord
from iplens.geo.base import SELF, GeoClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://ipinfo.io"
_DEFAULT_TIMEOUT = 10.0


class IpInfoClient(GeoClient):
    """
    Resolves addresses against ipinfo.io-shaped endpoints.

    ``GET {base_url}/geo`` for the caller's own address,
    ``GET {base_url}/{ip}/geo`` for an explicit one. A single attempt is made;
    any transport error, non-2xx status or non-object body raises GeoLookupError.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, transport=transport)

    def url_for(self, query: str) -> str:
        if query == SELF:
            return f"{self._base_url}/geo"
        return f"{self._base_url}/{query}/geo"

    async def lookup(self, query: str) -> GeoRecord:
        url = self.url_for(query)
        params = {"token": self._token} if self._token else None
        logger.debug("GET %s", url)
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Geolocation request for %s failed: %s", query, exc)
            raise GeoLookupError(f"Failed to fetch IP info: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "Geolocation request for %s returned HTTP %d", query, response.status_code
            )
            raise GeoLookupError(
                "Failed to fetch IP info", status_code=response.status_code
            )

        payload = self._decode(response)
        return GeoRecord.from_dict(payload)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> IpInfoClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise GeoLookupError("Unparsable response body") from exc
        if not isinstance(payload, dict):
            raise GeoLookupError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        return payload
