"""
Unit tests for SubscriptionService, SubscriptionPlanService and
AdvertisementService.
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from conftest import NOW, USER_ID, make_advertisement, make_plan, make_subscription
from marketplace.domain.models import AdvertisementCreate, AdvertisementStatus
from marketplace.domain.services import (
    AdvertisementService,
    SubscriptionPlanService,
    SubscriptionService,
)
from marketplace.domain.subscription import (
    PlanDuration,
    SubscriptionPlanCreate,
    SubscriptionPlanUpdate,
)
from marketplace.infrastructure.exceptions import ForbiddenError, NotFoundError


@pytest.fixture
def subscription_service(repos):
    return SubscriptionService(repos.subscriptions, repos.plans, clock=lambda: NOW)


# =============================================================================
# Limit Check
# =============================================================================

class TestCheckLimit:

    @pytest.mark.asyncio
    async def test_no_subscription(self, subscription_service, user_actor):
        result = await subscription_service.check_limit(user_actor)

        assert result.has_active_subscription is False
        assert result.can_post is False
        assert result.posts_used == 0
        assert result.posts_limit == 0
        assert result.posts_remaining == 0

    @pytest.mark.asyncio
    async def test_active_subscription_with_quota(self, subscription_service, repos, user_actor):
        plan = make_plan(post_limit=10)
        subscription = make_subscription(plan, posts_used=4, end_date=NOW + timedelta(days=5))
        repos.subscriptions.get_active_for_user.return_value = subscription
        repos.plans.get_by_id.return_value = plan

        result = await subscription_service.check_limit(user_actor)

        assert result.has_active_subscription is True
        assert result.can_post is True
        assert result.posts_remaining == 6
        assert result.subscription.id == subscription.id
        assert result.subscription.plan.id == plan.id
        repos.subscriptions.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exhausted_quota(self, subscription_service, repos, user_actor):
        subscription = make_subscription(
            make_plan(post_limit=2), posts_used=2, end_date=NOW + timedelta(days=1)
        )
        repos.subscriptions.get_active_for_user.return_value = subscription

        result = await subscription_service.check_limit(user_actor)

        assert result.has_active_subscription is True
        assert result.can_post is False
        assert result.posts_remaining == 0

    @pytest.mark.asyncio
    async def test_expired_subscription_is_deactivated(self, subscription_service, repos, user_actor):
        subscription = make_subscription(
            make_plan(post_limit=10), posts_used=7, end_date=NOW - timedelta(minutes=1)
        )
        repos.subscriptions.get_active_for_user.return_value = subscription

        result = await subscription_service.check_limit(user_actor)

        assert subscription.is_active is False
        repos.subscriptions.save.assert_awaited_once_with(subscription)
        assert result.has_active_subscription is False
        assert result.can_post is False
        assert result.posts_used == 7
        assert result.posts_limit == 10
        assert result.posts_remaining == 0


class TestListSubscriptions:

    @pytest.mark.asyncio
    async def test_non_admin_is_scoped(self, subscription_service, repos, user_actor):
        repos.subscriptions.find.return_value = [make_subscription(make_plan())]

        results = await subscription_service.list_subscriptions(user_actor, is_active=True)

        repos.subscriptions.find.assert_awaited_once_with(
            user_id=USER_ID, is_active=True, skip=0, limit=50
        )
        assert results[0].user_id == USER_ID

    @pytest.mark.asyncio
    async def test_admin_sees_all(self, subscription_service, repos, admin_actor):
        await subscription_service.list_subscriptions(admin_actor)

        repos.subscriptions.find.assert_awaited_once_with(
            user_id=None, is_active=None, skip=0, limit=50
        )


# =============================================================================
# Plans
# =============================================================================

class TestSubscriptionPlanService:

    @pytest.mark.asyncio
    async def test_anonymous_sees_active_only(self, repos):
        repos.plans.list_plans.return_value = [make_plan()]

        plans = await SubscriptionPlanService(repos.plans).list_plans(None)

        repos.plans.list_plans.assert_awaited_once_with(active_only=True)
        assert len(plans) == 1

    @pytest.mark.asyncio
    async def test_admin_sees_inactive(self, repos, admin_actor):
        repos.plans.list_plans.return_value = []

        await SubscriptionPlanService(repos.plans).list_plans(admin_actor)

        repos.plans.list_plans.assert_awaited_once_with(active_only=False)

    @pytest.mark.asyncio
    async def test_hidden_plan_is_not_found(self, repos, user_actor):
        repos.plans.get_visible.return_value = None

        with pytest.raises(NotFoundError):
            await SubscriptionPlanService(repos.plans).get_plan(user_actor, uuid4())

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, repos, user_actor):
        data = SubscriptionPlanCreate(
            name="Weekly", price=Decimal("99"), duration=PlanDuration.WEEKLY, post_limit=3
        )
        with pytest.raises(ForbiddenError):
            await SubscriptionPlanService(repos.plans).create_plan(user_actor, data)

        repos.plans.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_admin_creates_plan(self, repos, admin_actor):
        data = SubscriptionPlanCreate(
            name="Weekly", price=Decimal("99"), duration=PlanDuration.WEEKLY, post_limit=3
        )

        plan = await SubscriptionPlanService(repos.plans).create_plan(admin_actor, data)

        assert plan.name == "Weekly"
        assert plan.duration == PlanDuration.WEEKLY
        assert plan.is_active is True

    @pytest.mark.asyncio
    async def test_update_only_sends_set_fields(self, repos, admin_actor):
        plan = make_plan(is_active=False)
        repos.plans.update.return_value = plan
        plan_id = plan.id

        await SubscriptionPlanService(repos.plans).update_plan(
            admin_actor, plan_id, SubscriptionPlanUpdate(is_active=False)
        )

        repos.plans.update.assert_awaited_once_with(plan_id, {"is_active": False})

    @pytest.mark.asyncio
    async def test_update_missing_plan(self, repos, admin_actor):
        repos.plans.update.return_value = None

        with pytest.raises(NotFoundError):
            await SubscriptionPlanService(repos.plans).update_plan(
                admin_actor, uuid4(), SubscriptionPlanUpdate(post_limit=5)
            )


# =============================================================================
# Advertisements
# =============================================================================

class TestAdvertisementService:

    @pytest.mark.asyncio
    async def test_create_draft_owned_by_caller(self, repos, user_actor):
        result = await AdvertisementService(repos.advertisements).create(
            user_actor, AdvertisementCreate(title="Used bicycle", price=Decimal("1500"))
        )

        assert result.user_id == USER_ID
        assert result.status == AdvertisementStatus.DRAFT
        assert result.published_at is None

    @pytest.mark.asyncio
    async def test_list_mine(self, repos, user_actor):
        repos.advertisements.list_for_user.return_value = [make_advertisement()]

        results = await AdvertisementService(repos.advertisements).list_mine(user_actor)

        repos.advertisements.list_for_user.assert_awaited_once_with(USER_ID)
        assert len(results) == 1
