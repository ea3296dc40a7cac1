"""
Subscription Plan Database Model

Catalogue of purchasable posting plans.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import String
from sqlmodel import Field

from marketplace.domain.subscription import PlanDuration
from marketplace.infrastructure.db.models.base import BaseModel


class SubscriptionPlan(BaseModel, table=True):
    """Maps to the 'subscription_plans' table."""

    __tablename__ = "subscription_plans"

    name: str = Field(max_length=100, nullable=False)
    description: Optional[str] = Field(default=None, max_length=1000)
    price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)

    # Stored as text; the domain restricts it to weekly/monthly/yearly
    duration: PlanDuration = Field(
        default=PlanDuration.MONTHLY,
        sa_type=String(20),
        nullable=False,
    )
    post_limit: int = Field(default=1, ge=0)

    is_active: bool = Field(default=True, index=True)
    sort_order: int = Field(default=0)
