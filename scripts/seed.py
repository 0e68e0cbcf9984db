"""
Demo Data Seeding Script

Creates the tables and a demo business configured for distance pricing.
Run from project root: python scripts/seed.py
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from menu_delivery.core.config import setup_logging
from menu_delivery.database import dispose_engine, get_session_maker, init_db
from menu_delivery.models import Business, FallbackPolicy


async def seed(slug: str, policy: FallbackPolicy) -> None:
    await init_db()

    async with get_session_maker()() as session:
        result = await session.execute(select(Business).where(Business.slug == slug))
        business = result.scalar_one_or_none()

        if business is None:
            business = Business(name="Pizzaria Paulista", slug=slug)
            session.add(business)

        business.active = True
        business.delivery_enabled = True
        business.business_postal_code = "01310-100"
        business.delivery_fee_per_km = 2.00
        business.delivery_fee = 8.00
        business.avg_prep_time = 40
        business.delivery_fallback_policy = policy

        await session.commit()
        print(f"✅ Business '{slug}' ready (policy={policy.value})")

    await dispose_engine()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a demo business")
    parser.add_argument("--slug", default="pizzaria-paulista")
    parser.add_argument("--lenient", action="store_true", help="Use the flat-fee fallback policy")
    args = parser.parse_args()

    setup_logging()
    asyncio.run(seed(args.slug, FallbackPolicy.LENIENT if args.lenient else FallbackPolicy.STRICT))
