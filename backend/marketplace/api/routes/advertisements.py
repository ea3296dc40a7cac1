"""
Advertisement API Routes

Draft creation and the caller's own listings. Publication happens through
payment verification.
"""

from typing import List

from fastapi import APIRouter, status

from marketplace.api.dependencies import AdvertisementServiceDep, CurrentActor
from marketplace.domain.models import AdvertisementCreate, AdvertisementRead


router = APIRouter()


@router.post(
    "/advertisements",
    response_model=AdvertisementRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_advertisement(
    request: AdvertisementCreate,
    actor: CurrentActor,
    service: AdvertisementServiceDep,
):
    """Create a draft advertisement owned by the caller."""
    return await service.create(actor, request)


@router.get("/advertisements/mine", response_model=List[AdvertisementRead])
async def list_my_advertisements(
    actor: CurrentActor,
    service: AdvertisementServiceDep,
):
    return await service.list_mine(actor)
