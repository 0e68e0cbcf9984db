# tests/conftest.py
import os
from typing import Optional

import pytest

# Mock geocoder, no .env surprises
os.environ.setdefault("ENV_MODE", "development")

from menu_delivery.services.delivery import BaseConfigResolver, DeliveryConfig  # noqa: E402
from menu_delivery.services.geo import (  # noqa: E402
    BaseGeocodingService,
    Coordinates,
    GeocodingResult,
)

SAO_PAULO = Coordinates(-23.5505, -46.6333)
RIO_DE_JANEIRO = Coordinates(-22.9068, -43.1729)


class InMemoryConfigResolver(BaseConfigResolver):
    """Resolver over a dict of slug -> DeliveryConfig."""

    def __init__(self, *configs: DeliveryConfig):
        self.configs = {c.slug: c for c in configs}
        self.calls: list[str] = []

    async def get_delivery_config(self, slug: str) -> Optional[DeliveryConfig]:
        self.calls.append(slug)
        return self.configs.get(slug.strip().lower())


class FakeGeocoder(BaseGeocodingService):
    """Returns fixed coordinates per CEP; unknown CEPs are not found."""

    def __init__(self, coordinates: Optional[dict] = None):
        self.coordinates = coordinates or {}
        self.calls: list[str] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def resolve(self, postal_code: str) -> GeocodingResult:
        self.calls.append(postal_code)
        coords = self.coordinates.get(postal_code)
        if coords is None:
            return GeocodingResult(
                success=False,
                postal_code=postal_code,
                attempts=1,
                error_code="coordinates_not_found",
            )
        return GeocodingResult(
            success=True,
            postal_code=postal_code,
            coordinates=coords,
            provider="fake",
            attempts=1,
        )

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def strict_config() -> DeliveryConfig:
    return DeliveryConfig(
        slug="pizzaria-paulista",
        origin_postal_code="01310-100",
        per_kilometer_rate=2.00,
        flat_fee=8.00,
        average_prep_time_minutes=40,
    )


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder({"01310100": SAO_PAULO, "20040020": RIO_DE_JANEIRO})
