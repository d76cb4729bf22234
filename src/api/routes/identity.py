"""
Routes under /api/identity for the identity verification workflow.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import (
    CallerRateLimit,
    ServiceContainer,
    get_container,
    get_current_user_id,
)
from src.api.schemas.requests import SubmitDocumentsRequest, UpdateStatusRequest
from src.api.schemas.responses import (
    DecisionData,
    HistoryItem,
    PendingData,
    PendingDocumentItem,
    PendingVerificationItem,
    StatusData,
    SubmissionData,
    VerificationData,
    ok,
)
from src.core.use_cases.submit_documents import SubmissionInput
from src.core.use_cases.update_verification_status import DecisionInput

router = APIRouter()


@router.post("/submit-documents")
def submit_documents(
    body: SubmitDocumentsRequest,
    user_id: str = Depends(CallerRateLimit("submit")),
    container: ServiceContainer = Depends(get_container),
):
    """
    Submit identity documents for review (5 requests/min per caller).

    The referenced files must already be uploaded and active.
    """
    result = container.submit_documents.execute(
        user_id,
        SubmissionInput(
            document_type=body.document_type,
            front_document_ref=body.document_front_file_id,
            back_document_ref=body.document_back_file_id,
            notes=body.notes,
        ),
    )
    return ok(
        SubmissionData(status=result.state.value, submitted_at=result.submitted_at),
        message="Documents submitted for verification",
    )


@router.get("/status")
def get_status(
    user_id: str = Depends(get_current_user_id),
    container: ServiceContainer = Depends(get_container),
):
    """Caller's own verification status and recent history."""
    status = container.get_status.execute(user_id)
    v = status.verification
    return ok(
        StatusData(
            verification=VerificationData(
                is_verified=v.is_verified,
                status=v.status,
                verified_at=v.verified_at,
                submitted_at=v.submitted_at,
                document_type=v.document_type,
                has_documents=v.has_documents,
                notes=v.notes,
                rejection_reason=v.rejection_reason,
            ),
            history=[
                HistoryItem(state=h.state, requested_at=h.requested_at, updated_at=h.updated_at, notes=h.notes)
                for h in status.history
            ],
        )
    )


@router.put("/update-status")
def update_status(
    body: UpdateStatusRequest,
    user_id: str = Depends(CallerRateLimit("update")),
    container: ServiceContainer = Depends(get_container),
):
    """Approve, reject or reopen a user's verification (admin only, 10 requests/min)."""
    result = container.update_status.execute(
        user_id,
        DecisionInput(
            user_id=body.user_id,
            status=body.status,
            notes=body.notes,
            rejection_reason=body.rejection_reason,
        ),
    )
    return ok(DecisionData(user_id=result.user_id, status=result.status.value), message=result.message)


@router.get("/pending")
def get_pending(
    user_id: str = Depends(get_current_user_id),
    container: ServiceContainer = Depends(get_container),
):
    """Admin review queue, oldest submission first."""
    queue = container.get_pending.execute(user_id)
    items = [
        PendingVerificationItem(
            user_id=p.user_id,
            email=p.email,
            user_type=p.user_type,
            full_name=p.full_name,
            submitted_at=p.submitted_at,
            document_type=p.document_type,
            notes=p.notes,
            documents=[PendingDocumentItem(type=d.type, url=d.url, name=d.name) for d in p.documents],
        )
        for p in queue
    ]
    return ok(PendingData(pending_verifications=items, total=len(items)))
