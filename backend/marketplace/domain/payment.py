"""
Payment Request Domain Models

Status machine, DTOs, and upload value objects for manual payment verification.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from marketplace.domain.subscription import SubscriptionPlanRead


class PaymentStatus(str, Enum):
    """Payment request lifecycle status."""
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    FAILED = "failed"


ALLOWED_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.CANCELLED},
    PaymentStatus.PAID: set(),
    PaymentStatus.CANCELLED: set(),
    PaymentStatus.FAILED: set(),
}


def can_transition(current, target: PaymentStatus) -> bool:
    """Check whether ``current`` -> ``target`` is a legal status change."""
    try:
        return target in ALLOWED_TRANSITIONS[PaymentStatus(current)]
    except ValueError:
        return False


@dataclass(frozen=True)
class ProofFile:
    """Payment proof received from the client, not yet stored."""
    filename: str
    content: bytes
    content_type: str

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return "bin"
        return self.filename.rsplit(".", 1)[-1].lower()

    @property
    def size(self) -> int:
        return len(self.content)


# =============================================================================
# Request/Response DTOs
# =============================================================================

class PaymentRequestCreate(BaseModel):
    """Request DTO for submitting a payment request."""
    subscription_plan_id: UUID
    advertisement_id: Optional[UUID] = None
    payment_method: Optional[str] = Field(default=None, max_length=100)
    transaction_id: Optional[str] = Field(default=None, max_length=255)
    payment_proof: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Object id returned by the upload endpoint"
    )


class VerifyPaymentRequest(BaseModel):
    """Request DTO for admin verification. Omitted fields keep stored values."""
    transaction_id: Optional[str] = Field(default=None, max_length=255)
    payment_method: Optional[str] = Field(default=None, max_length=100)
    admin_notes: Optional[str] = Field(default=None, max_length=2000)


class AdminNotesUpdate(BaseModel):
    """Request DTO for editing admin notes."""
    admin_notes: Optional[str] = Field(default=None, max_length=2000)


class PaymentRequestRead(BaseModel):
    """Response DTO for a payment request with its plan populated."""
    id: UUID
    user_id: UUID
    advertisement_id: Optional[UUID] = None
    subscription_plan_id: Optional[UUID] = None
    subscription_plan: Optional[SubscriptionPlanRead] = None
    amount: Decimal
    status: PaymentStatus
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    admin_notes: Optional[str] = None
    payment_proof: Optional[str] = None
    verified_by: Optional[UUID] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_record(cls, record, plan=None) -> "PaymentRequestRead":
        """Build the response from a stored record and its (optional) plan."""
        return cls(
            id=record.id,
            user_id=record.user_id,
            advertisement_id=record.advertisement_id,
            subscription_plan_id=record.subscription_plan_id,
            subscription_plan=SubscriptionPlanRead.model_validate(plan) if plan else None,
            amount=record.amount,
            status=record.status,
            payment_method=record.payment_method,
            transaction_id=record.transaction_id,
            admin_notes=record.admin_notes,
            payment_proof=record.payment_proof,
            verified_by=record.verified_by,
            paid_at=record.paid_at,
            created_at=record.created_at,
        )


class UploadResponse(BaseModel):
    """Response DTO for a stored proof object."""
    id: str
    content_type: str
    size: int
