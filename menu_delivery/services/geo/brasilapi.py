"""
BrasilAPI CEP Client

Structured postal-code database. The v2 endpoint returns coordinates for
part of the CEP base, so it is the cheapest first step of the chain.

API Documentation:
    https://brasilapi.com.br/docs#tag/CEP-V2
"""

import logging
from datetime import datetime
from typing import Optional

import httpx

from menu_delivery.services.geo.base import Coordinates, GeocodingResult
from menu_delivery.services.geo.http import get_within

logger = logging.getLogger(__name__)


class BrasilApiClient:
    """
    Lookup of CEP coordinates in BrasilAPI.

    A single attempt is made; any failure lets the chain move on.
    """

    provider_name = "brasilapi"

    def __init__(self, client: httpx.AsyncClient, base_url: str, deadline: Optional[float] = None):
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._deadline = deadline

    async def lookup(self, postal_code: str) -> GeocodingResult:
        """Return coordinates for a normalized CEP, when BrasilAPI has them."""
        start_time = datetime.now()
        url = f"{self._base_url}/cep/v2/{postal_code}"

        try:
            response = await get_within(self._client, url, self._deadline)
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000

            if not response.is_success:
                logger.info(f"BrasilAPI: HTTP {response.status_code} for {postal_code}")
                return GeocodingResult(
                    success=False,
                    postal_code=postal_code,
                    provider=self.provider_name,
                    attempts=1,
                    error_message=f"BrasilAPI returned HTTP {response.status_code}",
                    error_code="http_error",
                    response_time_ms=elapsed_ms,
                )

            data = response.json()
            coords = ((data or {}).get("location") or {}).get("coordinates") or {}
            coordinates = Coordinates.parse(coords.get("latitude"), coords.get("longitude"))

            if coordinates is None:
                logger.debug(f"BrasilAPI: no coordinates for {postal_code}")
                return GeocodingResult(
                    success=False,
                    postal_code=postal_code,
                    provider=self.provider_name,
                    attempts=1,
                    error_message="BrasilAPI has no coordinates for this CEP",
                    error_code="no_coordinates",
                    response_time_ms=elapsed_ms,
                )

            return GeocodingResult(
                success=True,
                postal_code=postal_code,
                coordinates=coordinates,
                provider=self.provider_name,
                attempts=1,
                response_time_ms=elapsed_ms,
            )

        except httpx.TimeoutException:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.warning(f"BrasilAPI: timeout for {postal_code}")
            return GeocodingResult(
                success=False,
                postal_code=postal_code,
                provider=self.provider_name,
                attempts=1,
                error_message="BrasilAPI timed out",
                error_code="timeout",
                response_time_ms=elapsed_ms,
            )

        except (httpx.HTTPError, ValueError, AttributeError) as e:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.warning(f"BrasilAPI: request failed for {postal_code} - {e}")
            return GeocodingResult(
                success=False,
                postal_code=postal_code,
                provider=self.provider_name,
                attempts=1,
                error_message=str(e),
                error_code="transport_error",
                response_time_ms=elapsed_ms,
            )
