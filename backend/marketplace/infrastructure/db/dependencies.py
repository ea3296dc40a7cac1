"""
Dependency Injection Providers for the Classifieds Marketplace

Provides FastAPI dependencies for database sessions, repositories, and
domain services. Every provider in one request shares the same session,
so a whole workflow runs in a single transaction.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.domain.services import (
    AdvertisementService,
    PaymentRequestService,
    SubscriptionPlanService,
    SubscriptionService,
)
from marketplace.infrastructure.db.database import get_session
from marketplace.infrastructure.db.repositories import (
    AdvertisementRepository,
    PaymentRequestRepository,
    SubscriptionPlanRepository,
    UserSubscriptionRepository,
)
from marketplace.infrastructure.storage import ProofStorageService, get_proof_storage


# Function scope: the session commits when the handler returns, before the
# response is sent, so commit failures become error responses.
SessionDep = Annotated[AsyncSession, Depends(get_session, scope="function")]


# =============================================================================
# Repositories
# =============================================================================

async def get_payment_request_repository(
    session: SessionDep,
) -> PaymentRequestRepository:
    """
    Dependency provider for PaymentRequestRepository.

    Usage:
        @router.get("/payment-requests")
        async def list_requests(repo: PaymentRequestRepoDep):
            ...
    """
    return PaymentRequestRepository(session)


async def get_user_subscription_repository(
    session: SessionDep,
) -> UserSubscriptionRepository:
    return UserSubscriptionRepository(session)


async def get_subscription_plan_repository(
    session: SessionDep,
) -> SubscriptionPlanRepository:
    return SubscriptionPlanRepository(session)


async def get_advertisement_repository(
    session: SessionDep,
) -> AdvertisementRepository:
    return AdvertisementRepository(session)


PaymentRequestRepoDep = Annotated[
    PaymentRequestRepository,
    Depends(get_payment_request_repository)
]
UserSubscriptionRepoDep = Annotated[
    UserSubscriptionRepository,
    Depends(get_user_subscription_repository)
]
SubscriptionPlanRepoDep = Annotated[
    SubscriptionPlanRepository,
    Depends(get_subscription_plan_repository)
]
AdvertisementRepoDep = Annotated[
    AdvertisementRepository,
    Depends(get_advertisement_repository)
]
ProofStorageDep = Annotated[ProofStorageService, Depends(get_proof_storage)]


# =============================================================================
# Services
# =============================================================================

async def get_payment_request_service(
    payments: PaymentRequestRepoDep,
    subscriptions: UserSubscriptionRepoDep,
    plans: SubscriptionPlanRepoDep,
    advertisements: AdvertisementRepoDep,
    storage: ProofStorageDep,
) -> PaymentRequestService:
    return PaymentRequestService(
        payments=payments,
        subscriptions=subscriptions,
        plans=plans,
        advertisements=advertisements,
        storage=storage,
    )


async def get_subscription_service(
    subscriptions: UserSubscriptionRepoDep,
    plans: SubscriptionPlanRepoDep,
) -> SubscriptionService:
    return SubscriptionService(subscriptions=subscriptions, plans=plans)


async def get_subscription_plan_service(
    plans: SubscriptionPlanRepoDep,
) -> SubscriptionPlanService:
    return SubscriptionPlanService(plans)


async def get_advertisement_service(
    advertisements: AdvertisementRepoDep,
) -> AdvertisementService:
    return AdvertisementService(advertisements)


PaymentRequestServiceDep = Annotated[
    PaymentRequestService,
    Depends(get_payment_request_service)
]
SubscriptionServiceDep = Annotated[
    SubscriptionService,
    Depends(get_subscription_service)
]
SubscriptionPlanServiceDep = Annotated[
    SubscriptionPlanService,
    Depends(get_subscription_plan_service)
]
AdvertisementServiceDep = Annotated[
    AdvertisementService,
    Depends(get_advertisement_service)
]
