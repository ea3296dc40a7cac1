"""
Advertisement Database Model

Only the columns the payment workflow reads or writes, plus what is
needed to create a draft.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, String, Text
from sqlmodel import Field

from marketplace.domain.models import AdvertisementStatus
from marketplace.infrastructure.db.models.base import BaseModel


class Advertisement(BaseModel, table=True):
    """Maps to the 'advertisements' table."""

    __tablename__ = "advertisements"

    user_id: UUID = Field(index=True, nullable=False)
    title: str = Field(max_length=200, nullable=False)
    description: Optional[str] = Field(default=None, sa_type=Text)
    price: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)

    status: AdvertisementStatus = Field(
        default=AdvertisementStatus.DRAFT,
        sa_type=String(20),
        nullable=False,
        index=True,
    )
    subscription_plan_id: Optional[UUID] = Field(
        default=None,
        foreign_key="subscription_plans.id",
    )
    published_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
