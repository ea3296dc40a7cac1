"""
Subscription Plan Repository

Plan catalogue queries with public/admin visibility.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.infrastructure.db.models.subscription_plan import SubscriptionPlan
from marketplace.infrastructure.db.repositories.base_repository import BaseRepository


class SubscriptionPlanRepository(BaseRepository[SubscriptionPlan]):
    """Repository for the plan catalogue."""

    def __init__(self, session: AsyncSession):
        super().__init__(SubscriptionPlan, session)

    async def list_plans(self, active_only: bool = True) -> List[SubscriptionPlan]:
        """List plans ordered by sort_order, then name."""
        stmt = select(SubscriptionPlan)
        if active_only:
            stmt = stmt.where(SubscriptionPlan.is_active.is_(True))
        stmt = stmt.order_by(SubscriptionPlan.sort_order, SubscriptionPlan.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_visible(
        self,
        id: UUID,
        active_only: bool = True,
    ) -> Optional[SubscriptionPlan]:
        """Get a plan, hiding inactive ones unless active_only is False."""
        plan = await self.get_by_id(id)
        if plan is None or (active_only and not plan.is_active):
            return None
        return plan

    async def get_by_name(self, name: str) -> Optional[SubscriptionPlan]:
        stmt = select(SubscriptionPlan).where(SubscriptionPlan.name == name)
        result = await self.session.execute(stmt)
        return result.scalars().first()
