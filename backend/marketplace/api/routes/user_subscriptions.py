"""
User Subscription API Routes

Posting-quota check and subscription listing.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from marketplace.api.dependencies import CurrentActor, SubscriptionServiceDep
from marketplace.domain.subscription import (
    SubscriptionLimitResponse,
    UserSubscriptionRead,
)


router = APIRouter()


@router.get("/user-subscriptions/check-limit", response_model=SubscriptionLimitResponse)
async def check_subscription_limit(
    actor: CurrentActor,
    service: SubscriptionServiceDep,
):
    """
    Check whether the caller may publish another advertisement.

    An expired subscription is deactivated as part of the check.
    """
    return await service.check_limit(actor)


@router.get("/user-subscriptions", response_model=List[UserSubscriptionRead])
async def list_user_subscriptions(
    actor: CurrentActor,
    service: SubscriptionServiceDep,
    is_active: Optional[bool] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """List subscriptions. Non-admins only see their own."""
    return await service.list_subscriptions(actor, is_active=is_active, skip=skip, limit=limit)
