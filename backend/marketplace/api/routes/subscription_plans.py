"""
Subscription Plan API Routes

Public plan catalogue plus admin management.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, status

from marketplace.api.dependencies import (
    CurrentActor,
    OptionalActor,
    SubscriptionPlanServiceDep,
)
from marketplace.domain.subscription import (
    SubscriptionPlanCreate,
    SubscriptionPlanRead,
    SubscriptionPlanUpdate,
)


router = APIRouter()


@router.get("/subscription-plans", response_model=List[SubscriptionPlanRead])
async def list_subscription_plans(
    actor: OptionalActor,
    service: SubscriptionPlanServiceDep,
):
    """List plans ordered by sort order. Inactive plans are admin-only."""
    return await service.list_plans(actor)


@router.get("/subscription-plans/{plan_id}", response_model=SubscriptionPlanRead)
async def get_subscription_plan(
    plan_id: UUID,
    actor: OptionalActor,
    service: SubscriptionPlanServiceDep,
):
    return await service.get_plan(actor, plan_id)


@router.post(
    "/subscription-plans",
    response_model=SubscriptionPlanRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_subscription_plan(
    request: SubscriptionPlanCreate,
    actor: CurrentActor,
    service: SubscriptionPlanServiceDep,
):
    return await service.create_plan(actor, request)


@router.patch("/subscription-plans/{plan_id}", response_model=SubscriptionPlanRead)
async def update_subscription_plan(
    plan_id: UUID,
    request: SubscriptionPlanUpdate,
    actor: CurrentActor,
    service: SubscriptionPlanServiceDep,
):
    return await service.update_plan(actor, plan_id, request)
