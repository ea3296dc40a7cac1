"""
Payment Request Database Model

A user's claim of having paid for a plan, pending admin confirmation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, String
from sqlmodel import Field

from marketplace.domain.payment import PaymentStatus
from marketplace.infrastructure.db.models.base import BaseModel


class PaymentRequest(BaseModel, table=True):
    """Maps to the 'payment_requests' table."""

    __tablename__ = "payment_requests"

    user_id: UUID = Field(index=True, nullable=False)
    advertisement_id: Optional[UUID] = Field(
        default=None,
        foreign_key="advertisements.id",
        index=True,
    )
    subscription_plan_id: Optional[UUID] = Field(
        default=None,
        foreign_key="subscription_plans.id",
    )

    amount: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    status: PaymentStatus = Field(
        default=PaymentStatus.PENDING,
        sa_type=String(20),
        nullable=False,
        index=True,
    )

    payment_method: Optional[str] = Field(default=None, max_length=100)
    transaction_id: Optional[str] = Field(default=None, max_length=255)
    admin_notes: Optional[str] = Field(default=None, max_length=2000)
    payment_proof: Optional[str] = Field(default=None, max_length=500)

    verified_by: Optional[UUID] = Field(default=None)
    paid_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
