"""
Delivery Fee Service

Orchestrates one estimation: validate the customer CEP, load the tenant
settings, geocode business and customer concurrently, then price.
"""

import asyncio
import logging
from typing import Optional

from menu_delivery.services.delivery.config_resolver import BaseConfigResolver
from menu_delivery.services.delivery.errors import DeliveryUnavailableError
from menu_delivery.services.delivery.estimator import DeliveryEstimate, FeeEstimator
from menu_delivery.services.delivery.postal_code import require_postal_code
from menu_delivery.services.geo.base import BaseGeocodingService, GeocodingResult

logger = logging.getLogger(__name__)


class DeliveryFeeService:
    """
    Postal code -> coordinates -> distance -> fee.

    Example:
        >>> service = DeliveryFeeService(resolver, get_geocoding_service())
        >>> estimate = await service.calculate("pizzaria-centro", "20040-020")
        >>> print(estimate.fee, estimate.estimated_minutes)
    """

    def __init__(
        self,
        resolver: BaseConfigResolver,
        geocoder: BaseGeocodingService,
        estimator: Optional[FeeEstimator] = None,
    ):
        self.resolver = resolver
        self.geocoder = geocoder
        self.estimator = estimator or FeeEstimator()

    async def calculate(self, slug: str, raw_postal_code: Optional[str]) -> DeliveryEstimate:
        """
        Estimate the delivery fee for a customer CEP.

        Raises:
            InvalidPostalCodeError: malformed customer CEP (400)
            DeliveryUnavailableError: unknown tenant or delivery disabled (404)
            DeliveryConfigurationError: tenant pricing misconfigured (400)
            CoordinatesUnavailableError: geocoding failed, strict policy (422)
        """
        postal_code = require_postal_code(raw_postal_code)

        config = await self.resolver.get_delivery_config(slug)
        if config is None or not config.delivery_enabled:
            raise DeliveryUnavailableError("Delivery is not available for this business.")

        # No geocoding when distance pricing cannot apply anyway
        if not self.estimator.supports_distance_pricing(config):
            return self.estimator.estimate(config, None, None, postal_code)

        origin, destination = await asyncio.gather(
            self.geocoder.resolve(config.normalized_origin),
            self.geocoder.resolve(postal_code),
        )
        self._log_resolution(config.slug, origin, destination)

        estimate = self.estimator.estimate(
            config,
            origin.coordinates if origin.success else None,
            destination.coordinates if destination.success else None,
            postal_code,
        )

        logger.info(
            f"Delivery [{config.slug}]: {postal_code} -> fee={estimate.fee:.2f} "
            f"pricing={estimate.pricing} distance_km={estimate.distance_km}"
        )
        return estimate

    @staticmethod
    def _log_resolution(slug: str, origin: GeocodingResult, destination: GeocodingResult) -> None:
        for side, result in (("origin", origin), ("destination", destination)):
            if result.success:
                logger.debug(
                    f"Delivery [{slug}]: {side} {result.postal_code} via {result.provider} "
                    f"({result.attempts} calls, {result.response_time_ms:.0f}ms)"
                )
            else:
                logger.warning(
                    f"Delivery [{slug}]: {side} {result.postal_code} unresolved "
                    f"({result.error_code}, {result.attempts} calls)"
                )
