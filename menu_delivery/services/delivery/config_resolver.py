"""
Delivery configuration resolution.

Reads the tenant's delivery settings from the business table. The pipeline
never writes; settings are edited through the admin CRUD.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from menu_delivery.models import Business, FallbackPolicy
from menu_delivery.services.delivery.estimator import DeliveryConfig

logger = logging.getLogger(__name__)


def normalize_slug(slug: str) -> str:
    return (slug or "").strip().lower()


class BaseConfigResolver(ABC):
    """Read accessor for per-tenant delivery settings."""

    @abstractmethod
    async def get_delivery_config(self, slug: str) -> Optional[DeliveryConfig]:
        """
        Load delivery settings for an active business.

        Args:
            slug: Public menu slug (case-insensitive)

        Returns:
            DeliveryConfig, or None when no active business has this slug
        """
        pass


class SqlConfigResolver(BaseConfigResolver):
    """Resolver backed by the businesses table."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_delivery_config(self, slug: str) -> Optional[DeliveryConfig]:
        slug_norm = normalize_slug(slug)
        result = await self._session.execute(
            select(Business).where(Business.slug == slug_norm, Business.active.is_(True))
        )
        business = result.scalar_one_or_none()

        if business is None:
            logger.info(f"Delivery config: no active business '{slug_norm}'")
            return None

        return business_to_config(business)


def _to_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def business_to_config(business: Business) -> DeliveryConfig:
    """Map a Business row to the pipeline's DeliveryConfig."""
    return DeliveryConfig(
        slug=business.slug,
        delivery_enabled=bool(business.delivery_enabled),
        origin_postal_code=business.business_postal_code,
        per_kilometer_rate=_to_float(business.delivery_fee_per_km),
        flat_fee=_to_float(business.delivery_fee),
        average_prep_time_minutes=business.avg_prep_time,
        fallback_policy=business.delivery_fallback_policy or FallbackPolicy.STRICT,
    )
