"""
Advertisement Repository
"""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.infrastructure.db.models.advertisement import Advertisement
from marketplace.infrastructure.db.repositories.base_repository import BaseRepository


class AdvertisementRepository(BaseRepository[Advertisement]):
    """Repository for advertisements owned by users."""

    def __init__(self, session: AsyncSession):
        super().__init__(Advertisement, session)

    async def list_for_user(self, user_id: UUID) -> List[Advertisement]:
        """Get a user's advertisements, newest first."""
        stmt = (
            select(Advertisement)
            .where(Advertisement.user_id == user_id)
            .order_by(Advertisement.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
