"""
Delivery Fee Estimator

Turns a tenant's delivery settings and the resolved coordinates into a fee
and an ETA. Distance pricing is the normal path; the flat fee is only used
when the tenant opted into the lenient fallback policy.

Policy summary:
    - per-km rate missing/invalid or business CEP invalid:
        lenient + flat fee -> flat fee, otherwise configuration error
    - coordinates missing for either side:
        lenient + flat fee -> flat fee, otherwise coordinates error
    - both coordinates present:
        fee = distance_km x rate, rounded half-up to cents
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from menu_delivery.models import FallbackPolicy
from menu_delivery.services.delivery.distance import haversine_km
from menu_delivery.services.delivery.errors import (
    CoordinatesUnavailableError,
    DeliveryConfigurationError,
)
from menu_delivery.services.delivery.postal_code import normalize_postal_code
from menu_delivery.services.geo.base import Coordinates

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def round_half_up(value: float, places: Decimal = CENT) -> float:
    """Round to cents using half-up on the decimal representation."""
    return float(Decimal(repr(value)).quantize(places, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class DeliveryConfig:
    """
    Delivery settings of one tenant, read-only to the pipeline.

    Attributes:
        slug: Public menu identifier of the business
        delivery_enabled: Whether the business accepts delivery orders
        origin_postal_code: Business CEP as stored (may be formatted)
        per_kilometer_rate: Price per kilometer (None when unset)
        flat_fee: Fixed delivery fee used by the lenient fallback
        average_prep_time_minutes: ETA shown to customers
        fallback_policy: strict or lenient
    """
    slug: str
    delivery_enabled: bool = True
    origin_postal_code: Optional[str] = None
    per_kilometer_rate: Optional[float] = None
    flat_fee: Optional[float] = None
    average_prep_time_minutes: Optional[int] = None
    fallback_policy: FallbackPolicy = FallbackPolicy.STRICT

    @property
    def normalized_origin(self) -> Optional[str]:
        return normalize_postal_code(self.origin_postal_code)

    @property
    def allows_flat_fallback(self) -> bool:
        return (
            self.fallback_policy == FallbackPolicy.LENIENT
            and self.flat_fee is not None
            and math.isfinite(self.flat_fee)
            and self.flat_fee >= 0
        )


@dataclass
class DeliveryEstimate:
    """
    Result of one estimation. Never persisted.

    Attributes:
        fee: Delivery fee in BRL, 2 decimals
        estimated_minutes: ETA in minutes
        normalized_postal_code: Customer CEP, digits only
        distance_km: Great-circle distance (only for distance pricing)
        per_km_rate: Rate applied (only for distance pricing)
        pricing: "distance" or "flat"
    """
    fee: float
    estimated_minutes: int
    normalized_postal_code: str
    distance_km: Optional[float] = None
    per_km_rate: Optional[float] = None
    pricing: str = "distance"


class FeeEstimator:
    """
    Computes DeliveryEstimate values from settings and coordinates.

    Example:
        >>> estimator = FeeEstimator()
        >>> config = DeliveryConfig(slug="pizza", origin_postal_code="01310-100",
        ...                         per_kilometer_rate=2.5)
        >>> estimate = estimator.estimate(config, origin, destination, "20040020")
        >>> estimate.pricing
        'distance'
    """

    def __init__(self, default_prep_time_minutes: int = 30):
        self.default_prep_time_minutes = default_prep_time_minutes

    def estimated_minutes(self, config: DeliveryConfig) -> int:
        # Distance does not affect the ETA
        return config.average_prep_time_minutes or self.default_prep_time_minutes

    def supports_distance_pricing(self, config: DeliveryConfig) -> bool:
        return self._configuration_problem(config) is None

    def _configuration_problem(self, config: DeliveryConfig) -> Optional[DeliveryConfigurationError]:
        if config.normalized_origin is None:
            return DeliveryConfigurationError(
                "Business CEP is invalid or missing. Configure it in the admin settings.",
                setting="origin_postal_code",
            )
        rate = config.per_kilometer_rate
        if rate is None or not math.isfinite(rate) or rate <= 0:
            return DeliveryConfigurationError(
                "Invalid price per km. Configure a value greater than 0 in the admin settings.",
                setting="per_kilometer_rate",
            )
        return None

    def flat_estimate(self, config: DeliveryConfig, postal_code: str) -> DeliveryEstimate:
        return DeliveryEstimate(
            fee=round_half_up(config.flat_fee),
            estimated_minutes=self.estimated_minutes(config),
            normalized_postal_code=postal_code,
            pricing="flat",
        )

    def estimate(
        self,
        config: DeliveryConfig,
        origin: Optional[Coordinates],
        destination: Optional[Coordinates],
        postal_code: str,
    ) -> DeliveryEstimate:
        """
        Price a delivery to postal_code.

        origin/destination are None when geocoding failed for that side.

        Raises:
            DeliveryConfigurationError: distance pricing is not configured
                and no flat fallback applies
            CoordinatesUnavailableError: geocoding failed and no flat
                fallback applies
        """
        problem = self._configuration_problem(config)
        if problem is not None:
            if config.allows_flat_fallback:
                logger.info(f"Delivery [{config.slug}]: {problem.setting} unusable, charging flat fee")
                return self.flat_estimate(config, postal_code)
            logger.warning(f"Delivery [{config.slug}]: misconfigured {problem.setting}")
            raise problem

        if origin is None or destination is None:
            if config.allows_flat_fallback:
                logger.info(f"Delivery [{config.slug}]: coordinates unavailable, charging flat fee")
                return self.flat_estimate(config, postal_code)
            if origin is None:
                raise CoordinatesUnavailableError(
                    "Could not get coordinates for the business CEP.",
                    endpoint="origin",
                )
            raise CoordinatesUnavailableError(
                "Could not get coordinates for the informed CEP.",
                endpoint="destination",
            )

        distance_km = haversine_km(origin, destination)
        rate = config.per_kilometer_rate
        fee = round_half_up(distance_km * rate)

        if distance_km == 0:
            logger.warning(
                f"Delivery [{config.slug}]: zero distance to {postal_code}, fee is {fee:.2f}"
            )

        return DeliveryEstimate(
            fee=fee,
            estimated_minutes=self.estimated_minutes(config),
            normalized_postal_code=postal_code,
            distance_km=round_half_up(distance_km),
            per_km_rate=rate,
            pricing="distance",
        )
