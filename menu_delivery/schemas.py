"""
Pydantic Schemas for Request/Response Validation
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from menu_delivery.services.delivery import DeliveryEstimate, format_postal_code


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class DeliveryEstimateResponse(BaseModel):
    """Delivery fee quote for a customer CEP."""

    model_config = ConfigDict(populate_by_name=True)

    fee: float = Field(..., examples=[25.0])
    estimated_minutes: int = Field(..., alias="estimatedMinutes", examples=[40])
    cep: str = Field(..., examples=["20040-020"])
    distance_km: Optional[float] = Field(None, alias="distanceKm", examples=[10.0])
    per_km: Optional[float] = Field(None, alias="perKm", examples=[2.5])

    @classmethod
    def from_estimate(cls, estimate: DeliveryEstimate) -> "DeliveryEstimateResponse":
        return cls(
            fee=estimate.fee,
            estimated_minutes=estimate.estimated_minutes,
            cep=format_postal_code(estimate.normalized_postal_code),
            distance_km=estimate.distance_km,
            per_km=estimate.per_km_rate,
        )


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    geocoding_service: str
    timestamp: datetime
