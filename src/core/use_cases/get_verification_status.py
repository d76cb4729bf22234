"""
Use Case: Get Verification Status

Read-only view of the caller's own verification record and recent
history. A user without a record gets a not_started view, not an error.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from src.core.entities.verification import VerificationRecord, VerificationHistoryEntry
from src.core.interfaces.verification_store import IUnitOfWork
from src.core.use_cases.authorization import require_caller, require_user


@dataclass
class VerificationView:
    is_verified: bool
    status: str
    verified_at: datetime | None
    submitted_at: datetime | None
    document_type: str | None
    has_documents: bool
    notes: str | None
    rejection_reason: str | None

    @classmethod
    def from_record(cls, record: VerificationRecord) -> "VerificationView":
        return cls(
            is_verified=record.is_verified,
            status=record.state.value,
            verified_at=record.verified_at,
            submitted_at=record.submitted_at,
            document_type=record.document_type,
            has_documents=record.has_documents,
            notes=record.notes,
            rejection_reason=record.rejection_reason,
        )


@dataclass
class HistoryView:
    state: str
    requested_at: datetime
    updated_at: datetime | None
    notes: str | None

    @classmethod
    def from_entry(cls, entry: VerificationHistoryEntry) -> "HistoryView":
        return cls(
            state=entry.state,
            requested_at=entry.requested_at,
            updated_at=entry.updated_at,
            notes=entry.notes,
        )


@dataclass
class VerificationStatus:
    verification: VerificationView
    history: list[HistoryView] = field(default_factory=list)


class GetVerificationStatusUseCase:
    """Use Case: caller id -> own record + last N history entries."""

    DEFAULT_HISTORY_LIMIT = 10

    def __init__(self, uow_factory: Callable[[], IUnitOfWork], history_limit: int = DEFAULT_HISTORY_LIMIT):
        self._uow_factory = uow_factory
        self._history_limit = history_limit

    def execute(self, caller_id: str | None) -> VerificationStatus:
        caller_id = require_caller(caller_id)

        with self._uow_factory() as uow:
            user = require_user(uow, caller_id)
            profile = uow.profiles.get_for_user(user)
            record = profile.verification if profile else VerificationRecord(owner_id=caller_id)
            entries = uow.history.recent(caller_id, self._history_limit)

        return VerificationStatus(
            verification=VerificationView.from_record(record),
            history=[HistoryView.from_entry(e) for e in entries],
        )
