#!/usr/bin/env python3
"""
Seed script to create the default subscription plans.

Existing plans (matched by name) are left untouched, so the script is safe
to run repeatedly.

Run: python scripts/seed_plans.py
"""

import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from marketplace.domain.subscription import PlanDuration
from marketplace.infrastructure.db.database import get_session_context
from marketplace.infrastructure.db.models import SubscriptionPlan
from marketplace.infrastructure.db.repositories import SubscriptionPlanRepository


logger = logging.getLogger("seed_plans")


DEFAULT_PLANS = [
    {
        "name": "Weekly",
        "description": "Post up to 3 ads for 7 days",
        "price": Decimal("99.00"),
        "duration": PlanDuration.WEEKLY,
        "post_limit": 3,
        "sort_order": 1,
    },
    {
        "name": "Monthly",
        "description": "Post up to 15 ads for 30 days",
        "price": Decimal("299.00"),
        "duration": PlanDuration.MONTHLY,
        "post_limit": 15,
        "sort_order": 2,
    },
    {
        "name": "Yearly",
        "description": "Post up to 200 ads for 365 days",
        "price": Decimal("2999.00"),
        "duration": PlanDuration.YEARLY,
        "post_limit": 200,
        "sort_order": 3,
    },
]


async def seed_plans() -> int:
    """Insert any default plan that does not exist yet. Returns the number created."""
    created = 0

    async with get_session_context() as session:
        repo = SubscriptionPlanRepository(session)

        for plan_data in DEFAULT_PLANS:
            if await repo.get_by_name(plan_data["name"]):
                logger.info(f"Plan '{plan_data['name']}' already exists, skipping")
                continue

            plan = await repo.save(SubscriptionPlan(**plan_data))
            logger.info(f"Created plan '{plan.name}' ({plan.duration}, {plan.post_limit} posts)")
            created += 1

    return created


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    count = asyncio.run(seed_plans())
    logger.info(f"Seeded {count} subscription plans")
