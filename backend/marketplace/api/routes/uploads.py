"""
Upload API Routes

Standalone proof upload; the returned id can be sent as ``payment_proof``
when creating a payment request.
"""

import logging

from fastapi import APIRouter, File, UploadFile, status

from marketplace.api.dependencies import CurrentActor, ProofStorageDep
from marketplace.api.routes.payment_requests import read_proof_file
from marketplace.domain.payment import UploadResponse
from marketplace.infrastructure.exceptions import ValidationError


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_proof(
    actor: CurrentActor,
    storage: ProofStorageDep,
    file: UploadFile = File(...),
):
    """
    Store a payment proof for the caller.

    Raises:
        ValidationError: empty, oversized, or unsupported file
        StorageError: the object store rejected the upload
    """
    proof = await read_proof_file(file)
    if proof is None:
        raise ValidationError("No file provided")

    path = await storage.upload(actor.id, proof)
    return UploadResponse(id=path, content_type=proof.content_type, size=proof.size)
