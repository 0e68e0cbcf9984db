"""
Typing Simulation Script

Simulates customers typing CEPs into the menu calculators: every keystroke
fires a new estimate request while earlier ones are still in flight, and
only the last request per slot may update what the customer sees.
Run from project root (API running, demo data seeded):

    python scripts/seed.py
    python scripts/simulate.py --slug pizzaria-paulista
"""

import argparse
import asyncio
import os
import random
import sys
import time
from datetime import datetime
from typing import Any

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from menu_delivery.services.delivery import DeliveryEstimateClient

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_CUSTOMERS = 20

SAMPLE_CEPS = [
    "20040-020",  # Rio de Janeiro
    "01310-100",  # São Paulo
    "30130-010",  # Belo Horizonte
    "80010-000",  # Curitiba
    "90010-150",  # Porto Alegre
    "40020-000",  # Salvador
    "04538-133",  # São Paulo (Itaim)
]


def keystrokes(cep: str) -> list[str]:
    """Every prefix a customer produces while typing a CEP."""
    return [cep[:i] for i in range(1, len(cep) + 1)]


async def type_cep(
    client: DeliveryEstimateClient,
    slug: str,
    customer: int,
) -> dict[str, Any]:
    """Fire one request per keystroke without waiting, like an eager UI."""
    slot = f"customer-{customer}"
    cep = random.choice(SAMPLE_CEPS)
    start_time = time.time()

    tasks = []
    for partial in keystrokes(cep):
        tasks.append(asyncio.create_task(client.request_estimate(slot, slug, partial)))
        await asyncio.sleep(random.uniform(0.01, 0.08))

    applied = [o for o in await asyncio.gather(*tasks) if o is not None]
    final = client.latest(slot)

    return {
        "customer": customer,
        "cep": cep,
        "requests": len(tasks),
        "applied": len(applied),
        "final_cep": final.postal_code if final else None,
        "consistent": final is not None and final.postal_code == cep,
        "fee": final.fee if final else None,
        "error": final.error if final else None,
        "time": round(time.time() - start_time, 3),
    }


async def run_simulation(slug: str, customers: int = TOTAL_CUSTOMERS) -> dict[str, Any]:
    print("=" * 70)
    print("⌨️  CEP TYPING SIMULATION")
    print("=" * 70)
    print(f"📋 Customers: {customers}")
    print(f"🎯 Target: {API_BASE_URL}/menu/{slug}/calculate-delivery")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()
    async with DeliveryEstimateClient(API_BASE_URL) as client:
        results = await asyncio.gather(*(type_cep(client, slug, i + 1) for i in range(customers)))
    total_time = round(time.time() - start_time, 2)

    consistent = [r for r in results if r["consistent"]]
    priced = [r for r in results if r["fee"] is not None]

    print(f"\n✅ Final state matches last keystroke: {len(consistent)}/{customers}")
    print(f"💰 Customers with a fee shown: {len(priced)}/{customers}")
    print(f"📨 Requests sent: {sum(r['requests'] for r in results)}")
    print(f"🗑️  Stale responses dropped: {sum(r['requests'] - r['applied'] for r in results)}")
    print(f"⏱️  Total Time: {total_time}s")

    for r in results[:10]:
        shown = f"R$ {r['fee']:.2f}" if r["fee"] is not None else r["error"]
        print(f"   #{r['customer']:<3} {r['cep']}  →  {shown}")

    print("=" * 70)
    return {"total": customers, "consistent": len(consistent), "results": results}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="CEP typing simulation")
    parser.add_argument("--slug", default="pizzaria-paulista", help="Business slug")
    parser.add_argument("--customers", type=int, default=TOTAL_CUSTOMERS, help="Concurrent customers")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url
    summary = asyncio.run(run_simulation(args.slug, args.customers))
    sys.exit(0 if summary["consistent"] == summary["total"] else 1)
