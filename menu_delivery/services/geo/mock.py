"""
Mock Geocoding Service Implementation

Simulates the provider chain without making real API calls.
Used in development mode (ENV_MODE=development) for local testing.

Behavior:
    - Known fixture CEPs return their real coordinates
    - Other CEPs map to their postal region (first digit) plus a small,
      deterministic offset taken from the remaining digits
    - Simulates network latency
    - Optional random failure rate for testing the fallback policies
"""

import asyncio
import logging
import random
import re
from datetime import datetime

from menu_delivery.services.geo.base import (
    BaseGeocodingService,
    Coordinates,
    GeocodingResult,
)

logger = logging.getLogger(__name__)

_POSTAL_CODE = re.compile(r"[0-9]{8}")


class MockGeocodingService(BaseGeocodingService):
    """
    Mock implementation of the geocoding service.

    Attributes:
        failure_rate: Probability of simulated lookup failure (0.0-1.0)
        min_latency: Minimum response time in seconds
        max_latency: Maximum response time in seconds

    Example:
        >>> service = MockGeocodingService(failure_rate=0.0)
        >>> result = await service.resolve("01310100")
        >>> print(result.coordinates)
        Coordinates(latitude=-23.5614, longitude=-46.6559)
    """

    KNOWN_POSTAL_CODES = {
        "01310100": Coordinates(-23.5614, -46.6559),  # Av. Paulista, São Paulo
        "20040020": Coordinates(-22.9035, -43.1767),  # Centro, Rio de Janeiro
    }

    # Approximate centre of each CEP region, keyed by the first digit
    REGION_CENTERS = {
        "0": Coordinates(-23.5505, -46.6333),  # Grande São Paulo
        "1": Coordinates(-22.9056, -47.0608),  # Interior de SP
        "2": Coordinates(-22.9068, -43.1729),  # RJ / ES
        "3": Coordinates(-19.9167, -43.9345),  # MG
        "4": Coordinates(-12.9777, -38.5016),  # BA / SE
        "5": Coordinates(-8.0476, -34.8770),   # PE / AL / PB / RN
        "6": Coordinates(-3.7319, -38.5267),   # CE / PI / MA / PA / AM / AP / RR
        "7": Coordinates(-15.7939, -47.8828),  # DF / GO / TO / MT / MS / RO / AC
        "8": Coordinates(-25.4284, -49.2733),  # PR / SC
        "9": Coordinates(-30.0346, -51.2177),  # RS
    }

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.05,
        max_latency: float = 0.2,
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency

        logger.info(f"MockGeocodingService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    async def _simulate_latency(self) -> float:
        """Sleep for a random latency and return it in milliseconds."""
        latency = random.uniform(self.min_latency, self.max_latency)
        await asyncio.sleep(latency)
        return latency * 1000

    def _should_fail(self) -> bool:
        """Determine if this request should simulate a failure."""
        return random.random() < self.failure_rate

    def _coordinates_for(self, postal_code: str) -> Coordinates:
        if postal_code in self.KNOWN_POSTAL_CODES:
            return self.KNOWN_POSTAL_CODES[postal_code]

        center = self.REGION_CENTERS[postal_code[0]]
        # Sub-region digits spread codes over roughly +/- 0.5 degrees
        lat_offset = (int(postal_code[1:4]) / 999 - 0.5)
        lng_offset = (int(postal_code[4:8]) / 9999 - 0.5)
        return Coordinates(
            latitude=round(center.latitude + lat_offset, 6),
            longitude=round(center.longitude + lng_offset, 6),
        )

    async def resolve(self, postal_code: str) -> GeocodingResult:
        start_time = datetime.now()
        logger.debug(f"Mock: Resolving CEP {postal_code}")

        await self._simulate_latency()
        elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000

        if self._should_fail() or not _POSTAL_CODE.fullmatch(postal_code):
            logger.debug("Mock: Simulated geocoding failure")
            return GeocodingResult(
                success=False,
                postal_code=postal_code,
                attempts=1,
                error_message="Could not resolve coordinates for this CEP",
                error_code="coordinates_not_found",
                response_time_ms=elapsed_ms,
            )

        return GeocodingResult(
            success=True,
            postal_code=postal_code,
            coordinates=self._coordinates_for(postal_code),
            provider=self.provider_name,
            attempts=1,
            response_time_ms=elapsed_ms,
        )

    async def health_check(self) -> bool:
        """Mock health check always returns True."""
        logger.debug("Mock: Geocoding health check passed")
        return True
