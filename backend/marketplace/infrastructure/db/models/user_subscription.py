"""
User Subscription Database Model

Posting quota granted to a user by a verified payment.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, Index, text
from sqlmodel import Field

from marketplace.infrastructure.db.models.base import BaseModel


class UserSubscription(BaseModel, table=True):
    """
    Maps to the 'user_subscriptions' table.

    The partial unique index allows at most one active row per user.
    """

    __tablename__ = "user_subscriptions"
    __table_args__ = (
        Index(
            "uq_user_subscriptions_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    user_id: UUID = Field(index=True, nullable=False)
    subscription_plan_id: Optional[UUID] = Field(
        default=None,
        foreign_key="subscription_plans.id",
    )

    # Usage tracking (limit copied from the plan, not live-linked)
    posts_used: int = Field(default=0, ge=0)
    posts_limit: int = Field(default=0)

    start_date: datetime = Field(sa_type=DateTime(timezone=True), nullable=False)
    end_date: datetime = Field(sa_type=DateTime(timezone=True), nullable=False)
    is_active: bool = Field(default=True)
    renewed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
