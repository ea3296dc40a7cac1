"""
Marketplace Domain Services

Business workflows over the repositories:
- PaymentRequestService: submit, list, verify, cancel payment requests
- SubscriptionService: posting-quota checks and subscription listing
- SubscriptionPlanService: plan catalogue
- AdvertisementService: draft advertisements

Services never commit. Every write goes through the request-scoped session,
so a failure anywhere in a workflow rolls the whole request back.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from marketplace.domain.models import (
    Actor,
    AdvertisementCreate,
    AdvertisementRead,
    AdvertisementStatus,
)
from marketplace.domain.payment import (
    PaymentRequestCreate,
    PaymentRequestRead,
    PaymentStatus,
    ProofFile,
    VerifyPaymentRequest,
    can_transition,
)
from marketplace.domain.subscription import (
    SubscriptionLimitResponse,
    SubscriptionPlanCreate,
    SubscriptionPlanRead,
    SubscriptionPlanUpdate,
    SubscriptionSummary,
    UserSubscriptionRead,
    compute_end_date,
    is_expired,
    posts_remaining,
)
from marketplace.infrastructure.db.models import (
    Advertisement,
    PaymentRequest,
    SubscriptionPlan,
    UserSubscription,
)
from marketplace.infrastructure.db.models.base import utcnow
from marketplace.infrastructure.exceptions import (
    ConfigurationError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _require_admin(actor: Actor, message: str) -> None:
    if not actor.is_admin:
        logger.warning(f"Non-admin {actor.id} denied: {message}")
        raise ForbiddenError(message, actor_id=str(actor.id))


class PaymentRequestService:
    """
    Manual payment verification workflow.

    Handles:
    - Payment request submission (with optional proof upload)
    - Owner-scoped listing
    - Admin verification, which provisions the subscription and
      publishes the linked advertisement
    - Cancellation by owner or admin
    """

    def __init__(
        self,
        payments,
        subscriptions,
        plans,
        advertisements,
        storage=None,
        clock: Optional[Clock] = None,
    ):
        self._payments = payments
        self._subscriptions = subscriptions
        self._plans = plans
        self._advertisements = advertisements
        self._storage = storage
        self._clock = clock or utcnow

    async def create(
        self,
        actor: Actor,
        data: PaymentRequestCreate,
        proof: Optional[ProofFile] = None,
    ) -> PaymentRequestRead:
        """
        Submit a payment request on the caller's own behalf.

        The owner is always the caller and the amount is always the plan's
        current price, whatever the client sent.

        Raises:
            ValidationError: unknown/inactive plan, unknown advertisement, or a
                proof path outside the caller's folder
            ForbiddenError: the advertisement belongs to another user
            StorageError: the proof upload failed (nothing is written)
        """
        plan = await self._plans.get_visible(data.subscription_plan_id, active_only=True)
        if plan is None:
            raise ValidationError(
                "Subscription plan not found",
                details={"subscription_plan_id": str(data.subscription_plan_id)},
            )

        if data.advertisement_id is not None:
            advertisement = await self._advertisements.get_by_id(data.advertisement_id)
            if advertisement is None:
                raise ValidationError(
                    "Advertisement not found",
                    details={"advertisement_id": str(data.advertisement_id)},
                )
            if advertisement.user_id != actor.id:
                raise ForbiddenError(
                    "You can only pay for your own advertisements",
                    actor_id=str(actor.id),
                )

        payment_proof = data.payment_proof
        if payment_proof and not payment_proof.startswith(f"{actor.id}/"):
            raise ValidationError(
                "Payment proof does not belong to the caller",
                details={"payment_proof": payment_proof},
            )
        if proof is not None:
            if self._storage is None:
                raise ConfigurationError("Proof storage is not configured")
            payment_proof = await self._storage.upload(actor.id, proof)

        record = PaymentRequest(
            user_id=actor.id,
            advertisement_id=data.advertisement_id,
            subscription_plan_id=plan.id,
            amount=plan.price,
            status=PaymentStatus.PENDING,
            payment_method=data.payment_method,
            transaction_id=data.transaction_id,
            payment_proof=payment_proof,
        )
        record = await self._payments.save(record)

        logger.info(f"Created payment request {record.id} for user {actor.id} (plan {plan.id})")
        return PaymentRequestRead.from_record(record, plan)

    async def find(
        self,
        actor: Actor,
        status: Optional[PaymentStatus] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> List[PaymentRequestRead]:
        """
        List payment requests visible to the caller.

        Non-admins only ever see their own requests; the owner filter is
        injected here rather than taken from the query.
        """
        owner = None if actor.is_admin else actor.id
        records = await self._payments.find(
            user_id=owner,
            status=status,
            skip=skip,
            limit=limit,
        )
        plans = await self._plans.get_many(r.subscription_plan_id for r in records)
        return [
            PaymentRequestRead.from_record(r, plans.get(r.subscription_plan_id))
            for r in records
        ]

    async def verify_payment(
        self,
        actor: Actor,
        payment_request_id: UUID,
        data: Optional[VerifyPaymentRequest] = None,
    ) -> PaymentRequestRead:
        """
        Mark a pending payment as paid and provision what it paid for.

        Steps:
        1. pending -> paid, stamping paid_at and verified_by
        2. create or extend the owner's active subscription (when a plan is set)
        3. approve and publish the linked advertisement (when one is set)
        4. count that advertisement against the subscription quota

        Raises:
            ForbiddenError: caller is not an admin
            NotFoundError: no such payment request
            InvalidStateError: request is not pending
            ConfigurationError: the plan's duration is not weekly/monthly/yearly
        """
        _require_admin(actor, "Only admins can verify payments")
        data = data or VerifyPaymentRequest()

        record = await self._payments.get_for_update(payment_request_id)
        if record is None:
            raise NotFoundError(
                "Payment request not found",
                operation="verify",
                table="payment_requests",
            )
        if not can_transition(record.status, PaymentStatus.PAID):
            logger.warning(
                f"Rejected verification of payment request {record.id} in status {record.status}"
            )
            raise InvalidStateError(
                "Payment request is not in pending status",
                current_status=PaymentStatus(record.status).value,
            )

        plan = None
        if record.subscription_plan_id is not None:
            plan = await self._plans.get_by_id(record.subscription_plan_id)

        now = self._clock()
        # Resolve the period before the first write
        end_date = compute_end_date(now, plan.duration) if plan else None

        record.status = PaymentStatus.PAID
        record.paid_at = now
        record.verified_by = actor.id
        record.transaction_id = data.transaction_id or record.transaction_id
        record.payment_method = data.payment_method or record.payment_method
        record.admin_notes = data.admin_notes or record.admin_notes
        record = await self._payments.save(record)

        subscription = None
        if plan is not None:
            subscription = await self._provision_subscription(record.user_id, plan, now, end_date)

        advertisement_approved = False
        if record.advertisement_id is not None:
            advertisement_approved = await self._approve_advertisement(
                record.advertisement_id, plan, now
            )

        if subscription is not None and advertisement_approved:
            subscription.posts_used = (subscription.posts_used or 0) + 1
            await self._subscriptions.save(subscription)

        logger.info(
            f"Payment request {record.id} verified by {actor.id} "
            f"(subscription={subscription.id if subscription else None}, "
            f"advertisement_approved={advertisement_approved})"
        )
        return PaymentRequestRead.from_record(record, plan)

    async def _provision_subscription(
        self,
        user_id: UUID,
        plan: SubscriptionPlan,
        now: datetime,
        end_date: datetime,
    ) -> UserSubscription:
        """Extend the user's active subscription, or create one if none exists."""
        await self._subscriptions.lock_user(user_id)
        existing = await self._subscriptions.get_active_for_user(user_id, for_update=True)

        if existing is not None:
            existing.subscription_plan_id = plan.id
            existing.posts_limit = plan.post_limit
            existing.end_date = end_date
            existing.renewed_at = now
            subscription = await self._subscriptions.save(existing)
            logger.info(f"Extended subscription {subscription.id} for user {user_id} to {end_date}")
            return subscription

        subscription = await self._subscriptions.save(
            UserSubscription(
                user_id=user_id,
                subscription_plan_id=plan.id,
                posts_used=0,
                posts_limit=plan.post_limit,
                start_date=now,
                end_date=end_date,
                is_active=True,
            )
        )
        logger.info(f"Created subscription {subscription.id} for user {user_id} until {end_date}")
        return subscription

    async def _approve_advertisement(
        self,
        advertisement_id: UUID,
        plan: Optional[SubscriptionPlan],
        now: datetime,
    ) -> bool:
        """Publish the advertisement a payment was for. Returns False if it is gone."""
        advertisement = await self._advertisements.get_by_id(advertisement_id)
        if advertisement is None:
            logger.warning(f"Advertisement {advertisement_id} linked to a payment no longer exists")
            return False

        advertisement.status = AdvertisementStatus.APPROVED
        advertisement.subscription_plan_id = plan.id if plan else None
        advertisement.published_at = now
        await self._advertisements.save(advertisement)
        return True

    async def cancel(self, actor: Actor, payment_request_id: UUID) -> PaymentRequestRead:
        """
        Cancel a pending payment request.

        Raises:
            NotFoundError: no such payment request
            ForbiddenError: caller is neither the owner nor an admin
            InvalidStateError: request is not pending
        """
        record = await self._payments.get_for_update(payment_request_id)
        if record is None:
            raise NotFoundError(
                "Payment request not found",
                operation="cancel",
                table="payment_requests",
            )

        if not actor.is_admin and record.user_id != actor.id:
            raise ForbiddenError(
                "You can only cancel your own payment requests",
                actor_id=str(actor.id),
            )

        if not can_transition(record.status, PaymentStatus.CANCELLED):
            raise InvalidStateError(
                "Only pending payment requests can be cancelled",
                current_status=PaymentStatus(record.status).value,
            )

        record.status = PaymentStatus.CANCELLED
        record = await self._payments.save(record)
        logger.info(f"Payment request {record.id} cancelled by {actor.id}")

        plan = None
        if record.subscription_plan_id is not None:
            plan = await self._plans.get_by_id(record.subscription_plan_id)
        return PaymentRequestRead.from_record(record, plan)

    async def update_notes(
        self,
        actor: Actor,
        payment_request_id: UUID,
        admin_notes: Optional[str],
    ) -> PaymentRequestRead:
        """Edit admin notes, the one field writable in every status."""
        _require_admin(actor, "Only admins can edit payment notes")

        record = await self._payments.get_by_id(payment_request_id)
        if record is None:
            raise NotFoundError(
                "Payment request not found",
                operation="update_notes",
                table="payment_requests",
            )

        record.admin_notes = admin_notes
        record = await self._payments.save(record)

        plan = None
        if record.subscription_plan_id is not None:
            plan = await self._plans.get_by_id(record.subscription_plan_id)
        return PaymentRequestRead.from_record(record, plan)


class SubscriptionService:
    """Posting quota checks and subscription listing."""

    def __init__(self, subscriptions, plans, clock: Optional[Clock] = None):
        self._subscriptions = subscriptions
        self._plans = plans
        self._clock = clock or utcnow

    async def check_limit(self, actor: Actor) -> SubscriptionLimitResponse:
        """
        Report whether the caller may publish another advertisement.

        Expiry is enforced lazily: an active subscription past its end date
        is deactivated here, as a side effect of the check.
        """
        subscription = await self._subscriptions.get_active_for_user(actor.id)
        if subscription is None:
            return SubscriptionLimitResponse.inactive()

        if is_expired(subscription.end_date, self._clock()):
            subscription.is_active = False
            await self._subscriptions.save(subscription)
            logger.info(f"Deactivated expired subscription {subscription.id} for user {actor.id}")
            return SubscriptionLimitResponse.inactive(
                posts_used=subscription.posts_used,
                posts_limit=subscription.posts_limit,
            )

        remaining = posts_remaining(subscription.posts_limit, subscription.posts_used)

        plan = None
        if subscription.subscription_plan_id is not None:
            plan = await self._plans.get_by_id(subscription.subscription_plan_id)

        return SubscriptionLimitResponse(
            has_active_subscription=True,
            can_post=remaining > 0,
            posts_used=subscription.posts_used,
            posts_limit=subscription.posts_limit,
            posts_remaining=remaining,
            subscription=SubscriptionSummary(
                id=subscription.id,
                start_date=subscription.start_date,
                end_date=subscription.end_date,
                plan=SubscriptionPlanRead.model_validate(plan) if plan else None,
            ),
        )

    async def list_subscriptions(
        self,
        actor: Actor,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> List[UserSubscriptionRead]:
        """List subscriptions; non-admins only see their own."""
        owner = None if actor.is_admin else actor.id
        records = await self._subscriptions.find(
            user_id=owner,
            is_active=is_active,
            skip=skip,
            limit=limit,
        )
        return [UserSubscriptionRead.model_validate(r) for r in records]


class SubscriptionPlanService:
    """Plan catalogue. Inactive plans are visible to admins only."""

    def __init__(self, plans):
        self._plans = plans

    async def list_plans(self, actor: Optional[Actor] = None) -> List[SubscriptionPlanRead]:
        active_only = not (actor and actor.is_admin)
        plans = await self._plans.list_plans(active_only=active_only)
        return [SubscriptionPlanRead.model_validate(p) for p in plans]

    async def get_plan(self, actor: Optional[Actor], plan_id: UUID) -> SubscriptionPlanRead:
        active_only = not (actor and actor.is_admin)
        plan = await self._plans.get_visible(plan_id, active_only=active_only)
        if plan is None:
            raise NotFoundError(
                "Subscription plan not found",
                operation="select",
                table="subscription_plans",
            )
        return SubscriptionPlanRead.model_validate(plan)

    async def create_plan(self, actor: Actor, data: SubscriptionPlanCreate) -> SubscriptionPlanRead:
        _require_admin(actor, "Only admins can manage subscription plans")
        plan = await self._plans.save(SubscriptionPlan(**data.model_dump()))
        logger.info(f"Created subscription plan {plan.id} ({plan.name})")
        return SubscriptionPlanRead.model_validate(plan)

    async def update_plan(
        self,
        actor: Actor,
        plan_id: UUID,
        data: SubscriptionPlanUpdate,
    ) -> SubscriptionPlanRead:
        _require_admin(actor, "Only admins can manage subscription plans")
        plan = await self._plans.update(plan_id, data.model_dump(exclude_unset=True))
        if plan is None:
            raise NotFoundError(
                "Subscription plan not found",
                operation="update",
                table="subscription_plans",
            )
        return SubscriptionPlanRead.model_validate(plan)


class AdvertisementService:
    """Draft advertisements owned by the caller."""

    def __init__(self, advertisements):
        self._advertisements = advertisements

    async def create(self, actor: Actor, data: AdvertisementCreate) -> AdvertisementRead:
        advertisement = await self._advertisements.save(
            Advertisement(
                user_id=actor.id,
                status=AdvertisementStatus.DRAFT,
                **data.model_dump(),
            )
        )
        return AdvertisementRead.model_validate(advertisement)

    async def list_mine(self, actor: Actor) -> List[AdvertisementRead]:
        advertisements = await self._advertisements.list_for_user(actor.id)
        return [AdvertisementRead.model_validate(a) for a in advertisements]
