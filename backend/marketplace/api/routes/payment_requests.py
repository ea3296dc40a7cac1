"""
Payment Request API Routes

Submission, listing, and admin verification of manual payments.
Domain errors propagate to the handlers registered in main.py.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from marketplace.api.dependencies import CurrentActor, PaymentRequestServiceDep
from marketplace.config.settings import get_settings
from marketplace.domain.payment import (
    AdminNotesUpdate,
    PaymentRequestCreate,
    PaymentRequestRead,
    PaymentStatus,
    ProofFile,
    VerifyPaymentRequest,
)
from marketplace.infrastructure.exceptions import ValidationError


logger = logging.getLogger(__name__)

router = APIRouter()


async def read_proof_file(upload: Optional[UploadFile]) -> Optional[ProofFile]:
    """
    Read an uploaded file into memory; ``None`` when nothing was sent.

    At most one byte past the size limit is read, so oversized uploads are
    rejected without buffering them.

    Raises:
        ValidationError: file exceeds MAX_PROOF_SIZE_MB
    """
    if upload is None or not upload.filename:
        return None

    max_bytes = get_settings().max_proof_size_bytes
    if upload.size is not None and upload.size > max_bytes:
        raise ValidationError(
            "Payment proof file is too large",
            details={"max_bytes": max_bytes, "size": upload.size},
        )

    content = await upload.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise ValidationError(
            "Payment proof file is too large",
            details={"max_bytes": max_bytes},
        )

    return ProofFile(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type or "application/octet-stream",
    )


# =============================================================================
# User Endpoints
# =============================================================================

@router.post(
    "/payment-requests",
    response_model=PaymentRequestRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment_request(
    actor: CurrentActor,
    service: PaymentRequestServiceDep,
    subscription_plan_id: UUID = Form(...),
    advertisement_id: Optional[UUID] = Form(None),
    payment_method: Optional[str] = Form(None, max_length=100),
    transaction_id: Optional[str] = Form(None, max_length=255),
    payment_proof: Optional[str] = Form(None, max_length=500),
    proof_file: Optional[UploadFile] = File(None),
):
    """
    Submit a payment request for a subscription plan.

    Accepts a multipart form so a receipt can be attached in the same call.
    Ownership and amount are set server-side.
    """
    data = PaymentRequestCreate(
        subscription_plan_id=subscription_plan_id,
        advertisement_id=advertisement_id,
        payment_method=payment_method,
        transaction_id=transaction_id,
        payment_proof=payment_proof,
    )
    proof = await read_proof_file(proof_file)
    return await service.create(actor, data, proof)


@router.get("/payment-requests", response_model=List[PaymentRequestRead])
async def list_payment_requests(
    actor: CurrentActor,
    service: PaymentRequestServiceDep,
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """List payment requests. Non-admins only ever see their own."""
    return await service.find(actor, status=status_filter, skip=skip, limit=limit)


@router.post("/payment-requests/{payment_request_id}/cancel", response_model=PaymentRequestRead)
async def cancel_payment_request(
    payment_request_id: UUID,
    actor: CurrentActor,
    service: PaymentRequestServiceDep,
):
    """Cancel a pending payment request (owner or admin)."""
    return await service.cancel(actor, payment_request_id)


# =============================================================================
# Admin Endpoints
# =============================================================================

@router.post("/payment-requests/{payment_request_id}/verify", response_model=PaymentRequestRead)
async def verify_payment_request(
    payment_request_id: UUID,
    actor: CurrentActor,
    service: PaymentRequestServiceDep,
    request: Optional[VerifyPaymentRequest] = None,
):
    """
    Verify a pending payment.

    Marks it paid, creates or extends the owner's subscription, and publishes
    the linked advertisement, all in the request's transaction.
    """
    return await service.verify_payment(actor, payment_request_id, request)


@router.patch("/payment-requests/{payment_request_id}/notes", response_model=PaymentRequestRead)
async def update_payment_request_notes(
    payment_request_id: UUID,
    request: AdminNotesUpdate,
    actor: CurrentActor,
    service: PaymentRequestServiceDep,
):
    """Edit admin notes on a payment request in any status."""
    return await service.update_notes(actor, payment_request_id, request.admin_notes)
