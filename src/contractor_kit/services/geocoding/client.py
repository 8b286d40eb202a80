"""HTTP client for a Nominatim-compatible geocoding service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ...config import settings
from ..geospatial import is_valid_coordinate
from ..routing.models import Coordinate

logger = logging.getLogger(__name__)


def parse_first_result(payload: Any) -> Coordinate | None:
    """Extract the first result's lat/lon from a search response body."""

    if not isinstance(payload, list) or not payload:
        return None
    first = payload[0]
    if not isinstance(first, dict):
        return None
    try:
        lat = float(first["lat"])
        lon = float(first["lon"])
    except (KeyError, TypeError, ValueError):
        return None
    if not is_valid_coordinate(lat, lon):
        return None
    return Coordinate(lat, lon)


class GeocodeClient:
    """Resolves free-text addresses to coordinates.

    ``resolve`` never raises: timeouts, transport errors, bad statuses and
    malformed bodies all come back as ``None``. There are no retries; a miss
    is final for that address.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.geocode_timeout_seconds
        self.user_agent = user_agent or settings.geocoder_user_agent
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))

    async def __aenter__(self) -> "GeocodeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _search(self, query: str) -> httpx.Response:
        return await self._client.get(
            f"{self.base_url}/search",
            params={"format": "json", "limit": 1, "q": query},
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
        )

    async def resolve(self, address: str) -> Coordinate | None:
        query = (address or "").strip()
        if not query:
            return None

        try:
            # wait_for cancels the request once the overall cap is hit
            response = await asyncio.wait_for(self._search(query), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Geocoding timed out after {self.timeout:.1f}s for '{query}'")
            return None
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            logger.warning(f"Geocoding request failed for '{query}': {exc}")
            return None
        except UnicodeError as exc:
            # lone surrogates and similar cannot be sent as a query string
            logger.warning(f"Address cannot be encoded for geocoding: {query!r} ({exc})")
            return None

        if not response.is_success:
            logger.warning(f"Geocoding service returned HTTP {response.status_code} for '{query}'")
            return None

        content_type = response.headers.get("content-type", "")
        if "json" not in content_type.lower():
            logger.warning(f"Geocoding service returned non-JSON content ({content_type or 'none'}) for '{query}'")
            return None

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning(f"Unparsable geocoding response for '{query}': {exc}")
            return None

        coordinate = parse_first_result(payload)
        if coordinate is None:
            logger.debug(f"No usable geocoding match for '{query}'")
            return None

        logger.debug(f"Geocoded '{query}' to {coordinate.latitude}, {coordinate.longitude}")
        return coordinate


def check_health(base_url: str | None = None) -> bool:
    """Check the geocoding service through its ``/status`` endpoint.

    Nominatim answers ``{"status": 0, "message": "OK"}`` with ``format=json``.
    """
    base = (base_url or settings.geocoder_base_url).rstrip("/")
    try:
        response = httpx.get(
            f"{base}/status",
            params={"format": "json"},
            headers={"User-Agent": settings.geocoder_user_agent},
            timeout=5.0,
        )
        response.raise_for_status()
        data = response.json()
        return isinstance(data, dict) and data.get("status") == 0
    except httpx.HTTPError:
        return False
    except ValueError:
        return False
