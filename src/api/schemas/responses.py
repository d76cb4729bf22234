"""
Pydantic schemas: Response models for the API.

Every response is wrapped in the same envelope:
{success, data?, error?, message?}
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class Envelope(BaseModel):
    success: bool
    data: Any | None = None
    error: str | None = None
    message: str | None = None


class SubmissionData(BaseModel):
    status: str
    submitted_at: datetime


class VerificationData(BaseModel):
    is_verified: bool
    status: str
    verified_at: datetime | None = None
    submitted_at: datetime | None = None
    document_type: str | None = None
    has_documents: bool
    notes: str | None = None
    rejection_reason: str | None = None


class HistoryItem(BaseModel):
    state: str
    requested_at: datetime
    updated_at: datetime | None = None
    notes: str | None = None


class StatusData(BaseModel):
    verification: VerificationData
    history: list[HistoryItem]


class DecisionData(BaseModel):
    user_id: str
    status: str


class PendingDocumentItem(BaseModel):
    type: str
    url: str | None = None
    name: str | None = None


class PendingVerificationItem(BaseModel):
    user_id: str
    email: str
    user_type: str
    full_name: str
    submitted_at: datetime | None = None
    document_type: str | None = None
    notes: str | None = None
    documents: list[PendingDocumentItem]


class PendingData(BaseModel):
    pending_verifications: list[PendingVerificationItem]
    total: int


def _envelope(success: bool, data: Any = None, error: str | None = None, message: str | None = None) -> dict:
    body = Envelope(success=success, error=error, message=message).model_dump(exclude_none=True)
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    if data is not None:
        body["data"] = data
    return body


def ok(data: Any = None, message: str | None = None) -> dict:
    """Success envelope; null members are left out."""
    return _envelope(True, data=data, message=message)


def fail(error: str, data: Any = None) -> dict:
    return _envelope(False, data=data, error=error)
