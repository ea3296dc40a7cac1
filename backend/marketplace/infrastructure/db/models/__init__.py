"""
SQLModel ORM Models for the Classifieds Marketplace

Exports all database models for Alembic autogenerate and application use.
Import models here to register them with SQLModel.metadata.
"""

from marketplace.infrastructure.db.models.base import (
    BaseModel,
    TimestampMixin,
    UUIDMixin,
)
from marketplace.infrastructure.db.models.subscription_plan import SubscriptionPlan
from marketplace.infrastructure.db.models.advertisement import Advertisement
from marketplace.infrastructure.db.models.payment_request import PaymentRequest
from marketplace.infrastructure.db.models.user_subscription import UserSubscription


__all__ = [
    # Base
    "BaseModel",
    "TimestampMixin",
    "UUIDMixin",
    # Tables
    "SubscriptionPlan",
    "Advertisement",
    "PaymentRequest",
    "UserSubscription",
]
