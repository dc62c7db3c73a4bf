"""
Toggle Storm Simulation Script

Fires many concurrent availability toggles through the toggle engine
against a running portal API, then checks that the engine's mirror
agrees with the branch the server reports.

Run from project root (API must be running): python scripts/simulate.py
"""

import asyncio
import sys
import os
import random
import time
import argparse
from collections import Counter

import httpx
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from restaurant_portal.services.availability.http import HttpAvailabilityStore
from restaurant_portal.services.catalog.http import HttpCatalogSource
from restaurant_portal.services.toggle_engine import ToggleOutcome, load_ingredients_page

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_TOGGLES = 50


async def run_simulation(
    base_url: str,
    total: int,
    policy: str,
    hot_ratio: float,
) -> bool:
    """Run the toggle storm and print a report."""
    async with httpx.AsyncClient() as client:
        source = HttpCatalogSource(base_url=base_url, client=client)
        store = HttpAvailabilityStore(base_url=base_url, client=client)
        engine = await load_ingredients_page(source=source, store=store, failure_policy=policy)

        names = [ingredient.ingredient_name for ingredient in engine.catalog]
        if not names:
            print("\n❌ Catalog is empty, nothing to toggle")
            return False

        # A share of toggles hit one ingredient to exercise per-name serialization
        hot = random.choice(names)
        targets = [
            hot if random.random() < hot_ratio else random.choice(names)
            for _ in range(total)
        ]
        # Plus one that never existed
        targets.append("Unicorn Tears")

        print("=" * 60)
        print("🔁 TOGGLE STORM")
        print("=" * 60)
        print(f"🌐 API: {base_url}")
        print(f"🏪 Branch: {engine.branch_id}")
        print(f"🧪 Ingredients: {len(names)} (hot: {hot})")
        print(f"📨 Toggles: {len(targets)}")
        print(f"🛟 Failure policy: {engine.failure_policy.value}")
        print("=" * 60)

        start_time = time.time()
        results = await asyncio.gather(*(engine.toggle_availability(name) for name in targets))
        elapsed = round(time.time() - start_time, 3)

        outcomes = Counter(result.outcome for result in results)
        print(f"\n📊 RESULTS ({elapsed}s):")
        for outcome in ToggleOutcome:
            print(f"   {outcome.value:<20} {outcomes.get(outcome, 0)}")

        server_branch = await source.fetch_current_branch()
        server_unavailable = server_branch.unavailable_names & set(names)
        mirror = set(engine.unavailable_ingredient_names) & set(names)

        print("\n🔍 CONVERGENCE:")
        print(f"   Server unavailable: {sorted(server_unavailable)}")
        print(f"   Engine mirror:      {sorted(mirror)}")

        converged = server_unavailable == mirror
        if converged:
            print("\n✅ Engine mirror matches the server")
        else:
            print("\n⚠️ Engine mirror differs from the server")
            print(f"   Desynced: {sorted(engine.desynced_names)}")

        print("=" * 60)
        return converged


def main() -> None:
    parser = argparse.ArgumentParser(description="Concurrent availability toggle simulation")
    parser.add_argument("--base-url", default=API_BASE_URL, help="Portal API base URL")
    parser.add_argument("--toggles", type=int, default=TOTAL_TOGGLES, help="Number of toggles")
    parser.add_argument(
        "--policy",
        choices=["rollback", "keep"],
        default="rollback",
        help="Failure policy for the engine",
    )
    parser.add_argument(
        "--hot-ratio",
        type=float,
        default=0.3,
        help="Share of toggles aimed at a single ingredient",
    )
    args = parser.parse_args()

    ok = asyncio.run(run_simulation(args.base_url, args.toggles, args.policy, args.hot_ratio))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
