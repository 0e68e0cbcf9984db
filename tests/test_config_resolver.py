"""
🧪 test_config_resolver.py — tenant settings from the businesses table

Runs against an in-memory SQLite database (aiosqlite).
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from menu_delivery.database import Base
from menu_delivery.models import Business, FallbackPolicy
from menu_delivery.services.delivery import SqlConfigResolver


@pytest_asyncio.fixture
async def session():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as db:
        db.add_all([
            Business(
                name="Pizzaria Paulista",
                slug="pizzaria-paulista",
                business_postal_code="01310-100",
                delivery_fee_per_km=Decimal("2.50"),
                delivery_fee=Decimal("8.00"),
                avg_prep_time=40,
            ),
            Business(
                name="Sushi Carioca",
                slug="sushi-carioca",
                business_postal_code="20040020",
                delivery_fee=Decimal("12.00"),
                delivery_fallback_policy=FallbackPolicy.LENIENT,
                delivery_enabled=False,
            ),
            Business(name="Closed Bistro", slug="closed-bistro", active=False),
        ])
        await db.commit()
        yield db

    await engine.dispose()


@pytest.mark.asyncio
async def test_loads_delivery_settings(session):
    config = await SqlConfigResolver(session).get_delivery_config("pizzaria-paulista")

    assert config.slug == "pizzaria-paulista"
    assert config.delivery_enabled is True
    assert config.origin_postal_code == "01310-100"
    assert config.normalized_origin == "01310100"
    assert config.per_kilometer_rate == 2.5
    assert isinstance(config.per_kilometer_rate, float)
    assert config.flat_fee == 8.0
    assert config.average_prep_time_minutes == 40
    assert config.fallback_policy == FallbackPolicy.STRICT


@pytest.mark.asyncio
async def test_slug_lookup_ignores_case_and_whitespace(session):
    config = await SqlConfigResolver(session).get_delivery_config("  Pizzaria-Paulista ")

    assert config is not None
    assert config.slug == "pizzaria-paulista"


@pytest.mark.asyncio
async def test_missing_values_stay_none(session):
    config = await SqlConfigResolver(session).get_delivery_config("sushi-carioca")

    assert config.per_kilometer_rate is None
    assert config.average_prep_time_minutes is None
    assert config.delivery_enabled is False
    assert config.fallback_policy == FallbackPolicy.LENIENT


@pytest.mark.asyncio
@pytest.mark.parametrize("slug", ["closed-bistro", "does-not-exist", ""])
async def test_inactive_or_unknown_business_is_none(session, slug):
    assert await SqlConfigResolver(session).get_delivery_config(slug) is None
