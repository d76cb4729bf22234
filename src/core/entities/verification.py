"""
Entity: Verification Record

Mutable per-user identity-check fields and the state machine that moves
them between not_started, pending, approved and rejected.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class VerificationState(str, Enum):
    NOT_STARTED = "not_started"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Values an administrator may set through a decision.
DECISION_STATES = (
    VerificationState.APPROVED,
    VerificationState.REJECTED,
    VerificationState.PENDING,
)


@dataclass
class VerificationRecord:
    """Verification fields embedded in a user's profile."""
    owner_id: str
    state: VerificationState = VerificationState.NOT_STARTED
    document_type: str | None = None
    front_document_ref: str | None = None
    back_document_ref: str | None = None
    submitted_at: datetime | None = None
    verified_at: datetime | None = None
    notes: str | None = None
    rejection_reason: str | None = None

    @property
    def is_verified(self) -> bool:
        return self.state == VerificationState.APPROVED

    @property
    def has_documents(self) -> bool:
        return bool(self.front_document_ref)

    @property
    def has_submission(self) -> bool:
        return self.state != VerificationState.NOT_STARTED

    def submit(
        self,
        document_type: str,
        front_document_ref: str,
        back_document_ref: str | None,
        notes: str | None,
        now: datetime,
    ) -> None:
        """(Re)enter pending with a fresh set of documents."""
        self.document_type = document_type
        self.front_document_ref = front_document_ref
        self.back_document_ref = back_document_ref
        self.notes = notes
        self.state = VerificationState.PENDING
        self.submitted_at = now

    def decide(
        self,
        status: VerificationState,
        now: datetime,
        notes: str | None = None,
        rejection_reason: str | None = None,
    ) -> None:
        """Apply an administrative decision."""
        if status == VerificationState.APPROVED:
            self.verified_at = now
        elif status == VerificationState.REJECTED:
            self.rejection_reason = rejection_reason
        elif status != VerificationState.PENDING:
            raise ValueError(f"Not a decision state: {status}")
        self.state = status
        if notes:
            self.notes = notes


@dataclass
class VerificationHistoryEntry:
    """One submission/decision cycle in the audit trail."""
    owner_id: str
    state: str
    requested_at: datetime
    verification_type: str = "identity"
    updated_at: datetime | None = None
    notes: str | None = None
    documents: dict = field(default_factory=dict)
    id: str | None = None

    SUPERSEDED = "superseded"

    @property
    def is_open(self) -> bool:
        return self.updated_at is None

    def resolve(self, state: str, now: datetime, notes: str | None = None) -> None:
        self.state = state
        self.updated_at = now
        if notes:
            self.notes = notes

    def supersede(self, now: datetime) -> None:
        self.resolve(self.SUPERSEDED, now)
