"""
Subscription Domain Models

Enums, DTOs, and business rules for subscription plans and user subscriptions.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from marketplace.infrastructure.exceptions import ConfigurationError


class PlanDuration(str, Enum):
    """Billing period of a subscription plan."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


PLAN_DURATION_DAYS = {
    PlanDuration.WEEKLY: 7,
    PlanDuration.MONTHLY: 30,
    PlanDuration.YEARLY: 365,
}


# =============================================================================
# Business Rules
# =============================================================================

def duration_days(duration) -> int:
    """
    Number of days a plan duration grants.

    Raises:
        ConfigurationError: the stored duration is outside the closed set
    """
    try:
        return PLAN_DURATION_DAYS[PlanDuration(duration)]
    except (ValueError, KeyError) as e:
        raise ConfigurationError(
            f"Unsupported plan duration: {duration!r}",
            original_error=e,
        )


def compute_end_date(start: datetime, duration) -> datetime:
    """Subscription end date for a period starting at ``start``."""
    return start + timedelta(days=duration_days(duration))


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps read back from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(end_date: datetime, now: datetime) -> bool:
    return now > as_utc(end_date)


def posts_remaining(posts_limit: int, posts_used: int) -> int:
    return posts_limit - posts_used


# =============================================================================
# Request/Response DTOs
# =============================================================================

class SubscriptionPlanCreate(BaseModel):
    """Request DTO for creating a plan (admin)."""
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    duration: PlanDuration
    post_limit: int = Field(..., ge=0)
    is_active: bool = True
    sort_order: int = 0


class SubscriptionPlanUpdate(BaseModel):
    """Request DTO for updating a plan (all fields optional)."""
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    duration: Optional[PlanDuration] = None
    post_limit: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class SubscriptionPlanRead(BaseModel):
    """Response DTO for a plan."""
    id: UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    duration: PlanDuration
    post_limit: int
    is_active: bool
    sort_order: int = 0

    model_config = ConfigDict(from_attributes=True)


class UserSubscriptionRead(BaseModel):
    """Response DTO for a user subscription."""
    id: UUID
    user_id: UUID
    subscription_plan_id: Optional[UUID] = None
    posts_used: int
    posts_limit: int
    start_date: datetime
    end_date: datetime
    is_active: bool
    renewed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SubscriptionSummary(BaseModel):
    """Active subscription details embedded in a limit check."""
    id: UUID
    start_date: datetime
    end_date: datetime
    plan: Optional[SubscriptionPlanRead] = None


class SubscriptionLimitResponse(BaseModel):
    """Response DTO for the posting-quota check."""
    has_active_subscription: bool
    can_post: bool
    posts_used: int = 0
    posts_limit: int = 0
    posts_remaining: int = 0
    subscription: Optional[SubscriptionSummary] = None

    @classmethod
    def inactive(cls, posts_used: int = 0, posts_limit: int = 0) -> "SubscriptionLimitResponse":
        return cls(
            has_active_subscription=False,
            can_post=False,
            posts_used=posts_used,
            posts_limit=posts_limit,
            posts_remaining=0,
        )
