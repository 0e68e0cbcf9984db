"""
Geocoding Service Factory

Provides a single entry point for obtaining a geocoding service instance.
Automatically selects Mock or the real provider chain based on ENV_MODE.

Usage:
    from menu_delivery.services.geo import get_geocoding_service

    geocoder = get_geocoding_service()
    result = await geocoder.resolve("01310100")
"""

import logging
from functools import lru_cache

from menu_delivery.core.config import get_settings
from menu_delivery.services.geo.base import (
    AddressLookupResult,
    BaseGeocodingService,
    Coordinates,
    GeocodingResult,
)
from menu_delivery.services.geo.chain import GeocodingProviderChain
from menu_delivery.services.geo.mock import MockGeocodingService

logger = logging.getLogger(__name__)


@lru_cache()
def get_geocoding_service() -> BaseGeocodingService:
    """
    Get the configured geocoding service instance.

    Returns MockGeocodingService in development mode and
    GeocodingProviderChain in staging/production.
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Geocoding Service: Using MockGeocodingService (development mode)")
        return MockGeocodingService(failure_rate=settings.mock_geocoding_failure_rate)

    logger.info(
        f"Geocoding Service: Using GeocodingProviderChain "
        f"({settings.env_mode.value} mode)"
    )
    return GeocodingProviderChain(settings)


def reset_geocoding_service() -> None:
    """
    Clear the cached geocoding service instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_geocoding_service.cache_clear()
    logger.debug("Geocoding service cache cleared")


__all__ = [
    "get_geocoding_service",
    "reset_geocoding_service",
    "AddressLookupResult",
    "BaseGeocodingService",
    "Coordinates",
    "GeocodingResult",
    "GeocodingProviderChain",
    "MockGeocodingService",
]
