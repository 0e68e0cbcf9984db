"""
Delivery fee estimation pipeline.

Usage:
    from menu_delivery.services.delivery import DeliveryFeeService

    service = DeliveryFeeService(resolver, geocoder)
    estimate = await service.calculate("pizzaria-centro", "20040-020")
"""

from menu_delivery.services.delivery.client import DeliveryEstimateClient, EstimateOutcome
from menu_delivery.services.delivery.config_resolver import (
    BaseConfigResolver,
    SqlConfigResolver,
)
from menu_delivery.services.delivery.distance import haversine_km
from menu_delivery.services.delivery.errors import (
    CoordinatesUnavailableError,
    DeliveryConfigurationError,
    DeliveryError,
    DeliveryUnavailableError,
    InvalidPostalCodeError,
)
from menu_delivery.services.delivery.estimator import (
    DeliveryConfig,
    DeliveryEstimate,
    FeeEstimator,
)
from menu_delivery.services.delivery.postal_code import (
    format_postal_code,
    normalize_postal_code,
)
from menu_delivery.services.delivery.sequencer import RequestSequencer
from menu_delivery.services.delivery.service import DeliveryFeeService

__all__ = [
    "BaseConfigResolver",
    "CoordinatesUnavailableError",
    "DeliveryConfig",
    "DeliveryConfigurationError",
    "DeliveryError",
    "DeliveryEstimate",
    "DeliveryEstimateClient",
    "DeliveryFeeService",
    "DeliveryUnavailableError",
    "EstimateOutcome",
    "FeeEstimator",
    "InvalidPostalCodeError",
    "RequestSequencer",
    "SqlConfigResolver",
    "format_postal_code",
    "haversine_km",
    "normalize_postal_code",
]
