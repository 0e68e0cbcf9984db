"""
Geocoding Service Abstract Base Class

Defines the interface contract for all postal-code geocoding implementations.
Both MockGeocodingService and GeocodingProviderChain must implement these
methods.

Use Cases:
    - Resolving a business CEP (delivery origin) to coordinates
    - Resolving a customer CEP (delivery destination) to coordinates
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Coordinates:
    """A (latitude, longitude) pair in decimal degrees."""
    latitude: float
    longitude: float

    @classmethod
    def parse(cls, latitude: Any, longitude: Any) -> Optional["Coordinates"]:
        """
        Build coordinates from untrusted provider values.

        Providers return numbers or numeric strings; anything that does not
        convert to a finite float is rejected.
        """
        try:
            lat = float(latitude)
            lng = float(longitude)
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(lat) and math.isfinite(lng)):
            return None
        return cls(latitude=lat, longitude=lng)


@dataclass
class GeocodingResult:
    """
    Standardized result from resolving a postal code.

    Attributes:
        success: Whether coordinates were found
        postal_code: The normalized CEP that was resolved
        coordinates: Resolved coordinates (None when not found)
        provider: Step of the chain that produced the coordinates
        attempts: Outbound HTTP calls made while resolving
        error_message: Error description if resolution failed
        error_code: Machine-readable error code
        response_time_ms: Total time spent resolving
    """
    success: bool
    postal_code: str
    coordinates: Optional[Coordinates] = None
    provider: Optional[str] = None
    attempts: int = 0
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    response_time_ms: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "postal_code": self.postal_code,
            "latitude": self.coordinates.latitude if self.coordinates else None,
            "longitude": self.coordinates.longitude if self.coordinates else None,
            "provider": self.provider,
            "attempts": self.attempts,
            "error_message": self.error_message,
            "error_code": self.error_code,
            "response_time_ms": self.response_time_ms,
        }


@dataclass
class AddressLookupResult:
    """
    Structured address returned by a CEP lookup service.

    Attributes:
        success: Whether an address was found
        street: Street name (logradouro)
        neighborhood: Neighborhood (bairro)
        city: City (localidade)
        state: State abbreviation (uf)
        error_code: Machine-readable error code
    """
    success: bool
    street: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    error_code: Optional[str] = None

    def full_query(self, country: str) -> Optional[str]:
        """Free-text query with every known part of the address."""
        parts = [self.street, self.neighborhood, self.city, self.state, country]
        return self._join(parts, country)

    def coarse_query(self, country: str) -> Optional[str]:
        """Free-text query with only city and state."""
        return self._join([self.city, self.state, country], country)

    @staticmethod
    def _join(parts: list[Optional[str]], country: str) -> Optional[str]:
        cleaned = [p.strip() for p in parts if isinstance(p, str) and p.strip()]
        # Country alone is too vague to geocode
        if cleaned == [country]:
            return None
        return ", ".join(cleaned) or None


class BaseGeocodingService(ABC):
    """
    Abstract base class for postal-code geocoding services.

    Implementations must never raise for provider failures; every outcome
    is reported through GeocodingResult.

    Example:
        >>> service = get_geocoding_service()
        >>> result = await service.resolve("01310100")
        >>> if result.success:
        ...     print(result.coordinates)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the geocoding provider.

        Returns:
            str: Provider name (e.g., "mock", "chain")
        """
        pass

    @abstractmethod
    async def resolve(self, postal_code: str) -> GeocodingResult:
        """
        Resolve a normalized 8-digit CEP to coordinates.

        Args:
            postal_code: Normalized CEP (digits only)

        Returns:
            GeocodingResult: Coordinates or a NotFound outcome
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the geocoding providers.

        Returns:
            bool: True if service is operational
        """
        pass

    async def aclose(self) -> None:
        """Release network resources. No-op by default."""
        return None
