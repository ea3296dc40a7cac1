"""
Core Domain Models for the Classifieds Marketplace

Actors and advertisement enums shared by every bounded context.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AdvertisementStatus(str, Enum):
    """Advertisement lifecycle status."""
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


class Actor(BaseModel):
    """
    Authenticated caller of a domain operation.

    Built from the verified bearer token and passed explicitly into every
    workflow call instead of being read from request context.
    """
    id: UUID
    role: str = "authenticated"
    is_admin: bool = False

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Advertisement DTOs
# =============================================================================

class AdvertisementCreate(BaseModel):
    """Request DTO for creating a draft advertisement."""
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class AdvertisementRead(BaseModel):
    """Response DTO for an advertisement."""
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    price: Optional[Decimal] = None
    status: AdvertisementStatus
    subscription_plan_id: Optional[UUID] = None
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
