"""
Repository Layer for the Classifieds Marketplace

Exports all repository classes for dependency injection.
"""

from marketplace.infrastructure.db.repositories.base_repository import (
    BaseRepository,
    IReadRepository,
    IWriteRepository,
)
from marketplace.infrastructure.db.repositories.payment_request_repository import (
    PaymentRequestRepository,
)
from marketplace.infrastructure.db.repositories.user_subscription_repository import (
    UserSubscriptionRepository,
)
from marketplace.infrastructure.db.repositories.subscription_plan_repository import (
    SubscriptionPlanRepository,
)
from marketplace.infrastructure.db.repositories.advertisement_repository import (
    AdvertisementRepository,
)


__all__ = [
    # Base
    "BaseRepository",
    "IReadRepository",
    "IWriteRepository",
    # Repositories
    "PaymentRequestRepository",
    "UserSubscriptionRepository",
    "SubscriptionPlanRepository",
    "AdvertisementRepository",
]
