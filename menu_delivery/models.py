"""
SQLAlchemy Database Models

Tenant (business) records holding the delivery settings consumed by the
fee estimation pipeline. Menu, order and payment tables live elsewhere.
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, Numeric, String
from sqlalchemy.sql import func

from menu_delivery.database import Base


class FallbackPolicy(str, enum.Enum):
    """What to do when distance pricing cannot be applied."""
    STRICT = "strict"    # surface an error to the caller
    LENIENT = "lenient"  # charge the flat delivery fee instead


class Business(Base):
    """
    Tenant table - one row per restaurant with a public menu.

    Only the columns the delivery calculator reads are mapped here.
    """
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    active = Column(Boolean, default=True, nullable=False)

    # =========================================================================
    # ORDER TYPES
    # =========================================================================
    delivery_enabled = Column(Boolean, default=True, nullable=False)
    pickup_enabled = Column(Boolean, default=True, nullable=False)

    # =========================================================================
    # DELIVERY PRICING
    # =========================================================================
    business_postal_code = Column(String(9), nullable=True)
    delivery_fee_per_km = Column(Numeric(10, 2), nullable=True)
    delivery_fee = Column(Numeric(10, 2), nullable=True)  # flat fee
    avg_prep_time = Column(Integer, nullable=True)  # minutes
    delivery_fallback_policy = Column(
        Enum(FallbackPolicy),
        default=FallbackPolicy.STRICT,
        nullable=False,
    )

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Business {self.slug} - delivery={'on' if self.delivery_enabled else 'off'}>"
