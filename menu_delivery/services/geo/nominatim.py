"""
Nominatim Free-Text Geocoder

OpenStreetMap's public geocoder. It is rate limited (1 request/second per
client), so HTTP 429 responses are retried with a linear backoff instead of
failing straight through.

API Documentation:
    https://nominatim.org/release-docs/latest/api/Search/
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx

from menu_delivery.services.geo.base import Coordinates
from menu_delivery.services.geo.http import get_within

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """
    Outcome of one free-text query, across all retry attempts.

    Attributes:
        coordinates: First match (None when nothing usable was found)
        attempts: HTTP calls made
        error_code: Why no coordinates were returned
    """
    coordinates: Optional[Coordinates] = None
    attempts: int = 0
    error_code: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.coordinates is not None


class NominatimGeocoder:
    """
    Free-text search scoped to one country, with retry.

    Retry policy per query:
        - HTTP 429: sleep attempt x rate_limit_backoff, then retry
        - other HTTP errors, timeouts, transport or JSON errors:
          sleep retry_delay, then retry
        - empty result list or non-finite coordinates: definitive miss

    Example:
        >>> geocoder = NominatimGeocoder(client, base_url, user_agent="app/1.0")
        >>> result = await geocoder.search("01310100, Brasil")
        >>> result.coordinates
        Coordinates(latitude=-23.56, longitude=-46.65)
    """

    provider_name = "nominatim"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        user_agent: str,
        country_code: str = "br",
        max_attempts: int = 2,
        rate_limit_backoff: float = 1.2,
        retry_delay: float = 0.5,
        deadline: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._client = client
        self._url = f"{base_url.rstrip('/')}/search"
        self._headers = {"User-Agent": user_agent}
        self._country_code = country_code
        self.max_attempts = max(1, max_attempts)
        self.rate_limit_backoff = rate_limit_backoff
        self.retry_delay = retry_delay
        self._deadline = deadline
        self._sleep = sleep

    async def search(self, query: str) -> SearchResult:
        """Geocode a free-text query, returning the first match."""
        params = {
            "format": "json",
            "limit": 1,
            "countrycodes": self._country_code,
            "q": query,
        }
        error_code = None

        for attempt in range(1, self.max_attempts + 1):
            delay = self.retry_delay
            try:
                response = await get_within(
                    self._client, self._url, self._deadline, params=params, headers=self._headers
                )

                if response.status_code == 429:
                    logger.warning(f"Nominatim: rate limited (attempt {attempt}/{self.max_attempts})")
                    error_code = "rate_limited"
                    delay = attempt * self.rate_limit_backoff
                elif not response.is_success:
                    logger.warning(
                        f"Nominatim: HTTP {response.status_code} "
                        f"(attempt {attempt}/{self.max_attempts})"
                    )
                    error_code = "http_error"
                else:
                    return self._parse(response.json(), attempt)

            except httpx.TimeoutException:
                logger.warning(f"Nominatim: timeout (attempt {attempt}/{self.max_attempts})")
                error_code = "timeout"
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"Nominatim: request failed (attempt {attempt}/{self.max_attempts}) - {e}")
                error_code = "transport_error"

            if attempt < self.max_attempts:
                await self._sleep(delay)

        return SearchResult(attempts=self.max_attempts, error_code=error_code)

    def _parse(self, data, attempts: int) -> SearchResult:
        if not isinstance(data, list) or not data:
            return SearchResult(attempts=attempts, error_code="no_results")

        first = data[0] if isinstance(data[0], dict) else {}
        coordinates = Coordinates.parse(first.get("lat"), first.get("lon"))
        if coordinates is None:
            return SearchResult(attempts=attempts, error_code="invalid_coordinates")

        return SearchResult(coordinates=coordinates, attempts=attempts)
