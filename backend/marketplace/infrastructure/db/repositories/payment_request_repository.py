"""
Payment Request Repository

Data access for payment requests, including row locking for verification.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.domain.payment import PaymentStatus
from marketplace.infrastructure.db.models.payment_request import PaymentRequest
from marketplace.infrastructure.db.repositories.base_repository import BaseRepository


class PaymentRequestRepository(BaseRepository[PaymentRequest]):
    """
    Repository for PaymentRequest CRUD and filtered listing.

    Extends base repository with:
    - get_for_update: row lock held until the request's session ends
    - find: newest-first listing with optional owner/status filters
    """

    def __init__(self, session: AsyncSession):
        super().__init__(PaymentRequest, session)

    async def get_for_update(self, id: UUID) -> Optional[PaymentRequest]:
        """
        Load a payment request and lock its row (SELECT ... FOR UPDATE).

        Concurrent verifications of the same request queue behind the lock
        and then observe the non-pending status.
        """
        stmt = select(PaymentRequest).where(PaymentRequest.id == id).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find(
        self,
        user_id: Optional[UUID] = None,
        status: Optional[PaymentStatus] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> List[PaymentRequest]:
        """
        List payment requests, newest first.

        Args:
            user_id: Restrict to one owner
            status: Restrict to one status
            skip: Offset for pagination
            limit: Page size
        """
        stmt = select(PaymentRequest)
        if user_id is not None:
            stmt = stmt.where(PaymentRequest.user_id == user_id)
        if status is not None:
            stmt = stmt.where(PaymentRequest.status == PaymentStatus(status).value)
        stmt = stmt.order_by(PaymentRequest.created_at.desc()).offset(skip).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
