"""
User Subscription Repository

Data access layer for subscription persistence and per-user serialization.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.infrastructure.db.models.user_subscription import UserSubscription
from marketplace.infrastructure.db.repositories.base_repository import BaseRepository
from marketplace.infrastructure.exceptions import ConflictError


logger = logging.getLogger(__name__)


def advisory_lock_key(user_id: UUID) -> int:
    """Fold a UUID into the signed 64-bit key pg_advisory_xact_lock expects."""
    key = user_id.int & 0xFFFFFFFFFFFFFFFF
    if key >= 1 << 63:
        key -= 1 << 64
    return key


class UserSubscriptionRepository(BaseRepository[UserSubscription]):
    """
    Repository for UserSubscription data access.

    A user holds at most one active subscription. Callers serialize the
    lookup-then-write sequence with lock_user(); the partial unique index on
    (user_id) WHERE is_active rejects anything that slips through.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(UserSubscription, session)

    # =========================================================================
    # Query Methods
    # =========================================================================

    async def get_active_for_user(
        self,
        user_id: UUID,
        for_update: bool = False,
    ) -> Optional[UserSubscription]:
        """
        Get the user's active subscription.

        Args:
            user_id: Owner of the subscription
            for_update: Lock the row until the session ends

        Returns:
            UserSubscription or None
        """
        stmt = select(UserSubscription).where(
            UserSubscription.user_id == user_id,
            UserSubscription.is_active.is_(True),
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find(
        self,
        user_id: Optional[UUID] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> List[UserSubscription]:
        """List subscriptions, newest first."""
        stmt = select(UserSubscription)
        if user_id is not None:
            stmt = stmt.where(UserSubscription.user_id == user_id)
        if is_active is not None:
            stmt = stmt.where(UserSubscription.is_active.is_(is_active))
        stmt = stmt.order_by(UserSubscription.created_at.desc()).offset(skip).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # =========================================================================
    # Command Methods
    # =========================================================================

    async def lock_user(self, user_id: UUID) -> None:
        """
        Take a transaction-scoped advisory lock for this user.

        PostgreSQL only; on other dialects the unique index is the only guard.
        """
        dialect = self.session.get_bind().dialect.name
        if dialect != "postgresql":
            return
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": advisory_lock_key(user_id)},
        )

    async def save(self, obj: UserSubscription) -> UserSubscription:
        """Flush the subscription, translating the one-active index violation."""
        try:
            return await super().save(obj)
        except IntegrityError as e:
            logger.warning(f"Active subscription conflict for user {obj.user_id}")
            raise ConflictError(
                f"User {obj.user_id} already has an active subscription",
                operation="save",
                table="user_subscriptions",
                original_error=e,
            )
