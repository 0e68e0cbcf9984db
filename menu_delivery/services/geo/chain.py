"""
Geocoding Provider Chain

Production implementation that resolves a CEP by querying public providers
in priority order, stopping at the first one that yields valid coordinates.
Used when ENV_MODE=production or ENV_MODE=staging.

Order:
    1. BrasilAPI CEP v2 (structured database, may carry coordinates)
    2. Nominatim free-text search for "<cep>, Brasil"
    3. ViaCEP address lookup, then Nominatim on the full address
    4. Nominatim on "<city>, <state>, Brasil" when the full address misses

Every provider is treated as unreliable; failures are logged and the chain
moves on. Nothing raised by httpx escapes this module.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

import httpx

from menu_delivery.core.config import Settings, get_settings
from menu_delivery.services.geo.base import BaseGeocodingService, GeocodingResult
from menu_delivery.services.geo.brasilapi import BrasilApiClient
from menu_delivery.services.geo.nominatim import NominatimGeocoder
from menu_delivery.services.geo.viacep import ViaCepClient

logger = logging.getLogger(__name__)

HEALTH_CHECK_POSTAL_CODE = "01310100"


class GeocodingProviderChain(BaseGeocodingService):
    """
    Real geocoding service built on BrasilAPI, Nominatim and ViaCEP.

    A single httpx.AsyncClient is shared by all providers; each request
    carries the configured per-attempt timeout.

    Example:
        >>> chain = GeocodingProviderChain()
        >>> result = await chain.resolve("20040020")
        >>> print(result.provider, result.coordinates)
        'nominatim' Coordinates(latitude=-22.90, longitude=-43.17)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        settings = settings or get_settings()

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.geocoding_timeout_seconds),
            transport=transport,
            follow_redirects=True,
        )
        self._country_name = settings.geocoding_country_name
        deadline = settings.geocoding_timeout_seconds

        self.brasilapi = BrasilApiClient(self._client, settings.brasilapi_base_url, deadline)
        self.viacep = ViaCepClient(self._client, settings.viacep_base_url, deadline)
        self.nominatim = NominatimGeocoder(
            self._client,
            settings.nominatim_base_url,
            user_agent=settings.nominatim_user_agent,
            country_code=settings.geocoding_country_code,
            max_attempts=settings.geocoding_max_attempts,
            rate_limit_backoff=settings.geocoding_rate_limit_backoff_seconds,
            retry_delay=settings.geocoding_retry_delay_seconds,
            deadline=deadline,
            sleep=sleep,
        )

        logger.info(
            f"GeocodingProviderChain initialized "
            f"(timeout={settings.geocoding_timeout_seconds}s, "
            f"max_attempts={settings.geocoding_max_attempts})"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "chain"

    async def resolve(self, postal_code: str) -> GeocodingResult:
        """Resolve a normalized CEP, falling through the providers in order."""
        start_time = datetime.now()
        attempts = 0

        def elapsed_ms() -> float:
            return (datetime.now() - start_time).total_seconds() * 1000

        # 1) Structured database
        direct = await self.brasilapi.lookup(postal_code)
        attempts += direct.attempts
        if direct.success:
            logger.info(f"Geocoding: {postal_code} resolved by brasilapi")
            direct.attempts = attempts
            direct.response_time_ms = elapsed_ms()
            return direct

        # 2) Free-text search on the postal code itself
        by_postal = await self.nominatim.search(f"{postal_code}, {self._country_name}")
        attempts += by_postal.attempts
        if by_postal.found:
            logger.info(f"Geocoding: {postal_code} resolved by nominatim (postal code)")
            return GeocodingResult(
                success=True,
                postal_code=postal_code,
                coordinates=by_postal.coordinates,
                provider="nominatim",
                attempts=attempts,
                response_time_ms=elapsed_ms(),
            )

        # 3) Street address, then 4) city/state
        address = await self.viacep.lookup(postal_code)
        attempts += 1
        if address.success:
            tried = set()
            for label, query in (
                ("address", address.full_query(self._country_name)),
                ("city", address.coarse_query(self._country_name)),
            ):
                if not query or query in tried:
                    continue
                tried.add(query)
                found = await self.nominatim.search(query)
                attempts += found.attempts
                if found.found:
                    logger.info(f"Geocoding: {postal_code} resolved by viacep+nominatim ({label})")
                    return GeocodingResult(
                        success=True,
                        postal_code=postal_code,
                        coordinates=found.coordinates,
                        provider=f"viacep+nominatim:{label}",
                        attempts=attempts,
                        response_time_ms=elapsed_ms(),
                    )

        logger.warning(f"Geocoding: no provider resolved {postal_code} ({attempts} calls)")
        return GeocodingResult(
            success=False,
            postal_code=postal_code,
            attempts=attempts,
            error_message="Could not resolve coordinates for this CEP",
            error_code="coordinates_not_found",
            response_time_ms=elapsed_ms(),
        )

    async def health_check(self) -> bool:
        """Resolve a well-known CEP to verify at least one provider answers."""
        try:
            result = await self.resolve(HEALTH_CHECK_POSTAL_CODE)
        except Exception as e:
            logger.error(f"Geocoding: health check failed - {e}")
            return False
        return result.success

    async def aclose(self) -> None:
        await self._client.aclose()
