"""
Use Case: Submit Documents

User sends identity documents for review. The profile's verification
fields, the document tags and the history entry are written in a single
transaction; the "submitted" email goes out after commit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from src.core.entities.document import IDENTITY_CONTEXT
from src.core.entities.profile import Profile, UserAccount
from src.core.entities.verification import (
    VerificationHistoryEntry,
    VerificationState,
    utcnow,
)
from src.core.errors import InvalidArgument, NotFound, WriteConflict
from src.core.interfaces.notification_service import (
    INotificationDispatcher,
    NotificationEvent,
    VerificationNotification,
)
from src.core.interfaces.verification_store import IUnitOfWork
from src.core.use_cases.authorization import require_caller, require_user
from src.core.use_cases.notify import notify_after_commit

logger = logging.getLogger(__name__)


@dataclass
class SubmissionInput:
    """Submission payload."""
    document_type: str | None
    front_document_ref: str | None
    back_document_ref: str | None = None
    notes: str | None = None


@dataclass
class SubmissionResult:
    state: VerificationState
    submitted_at: datetime


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class SubmitDocumentsUseCase:
    """
    Use Case: validate references -> pending record + tags + history -> notify.

    Dependency Injection: the unit-of-work factory and the dispatcher come
    through the constructor. The dispatcher may be None.
    """

    MAX_ATTEMPTS = 2

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notifier: INotificationDispatcher | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._uow_factory = uow_factory
        self._notifier = notifier
        self._clock = clock

    def execute(self, caller_id: str | None, data: SubmissionInput) -> SubmissionResult:
        caller_id = require_caller(caller_id)

        document_type = _clean(data.document_type)
        front_ref = _clean(data.front_document_ref)
        back_ref = _clean(data.back_document_ref)
        notes = _clean(data.notes)

        missing = {}
        if not document_type:
            missing["document_type"] = "required"
        if not front_ref:
            missing["document_front_file_id"] = "required"
        if missing:
            raise InvalidArgument("Document type and front document are required", fields=missing)

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            try:
                user, profile, now = self._record_submission(
                    caller_id, document_type, front_ref, back_ref, notes
                )
                break
            except WriteConflict:
                if attempt == self.MAX_ATTEMPTS:
                    raise
                logger.warning(f"Concurrent first submission for user {caller_id}; retrying")

        logger.info(f"Identity documents submitted by user {caller_id} [{profile.kind.value}]")
        notify_after_commit(
            self._notifier,
            VerificationNotification(
                event=NotificationEvent.SUBMITTED,
                user_id=user.id,
                email=user.email,
                full_name=profile.display_name(user) or user.email,
            ),
        )

        return SubmissionResult(state=VerificationState.PENDING, submitted_at=now)

    def _record_submission(
        self,
        caller_id: str,
        document_type: str,
        front_ref: str,
        back_ref: str | None,
        notes: str | None,
    ) -> tuple[UserAccount, Profile, datetime]:
        with self._uow_factory() as uow:
            front = uow.documents.get(front_ref)
            if front is None or not front.usable_by(caller_id):
                raise InvalidArgument(
                    "front document not found or invalid",
                    fields={"document_front_file_id": "not found or invalid"},
                )
            if back_ref:
                back = uow.documents.get(back_ref)
                if back is None or not back.usable_by(caller_id):
                    raise InvalidArgument(
                        "back document not found or invalid",
                        fields={"document_back_file_id": "not found or invalid"},
                    )

            user = require_user(uow, caller_id)
            if user.kind is None:
                raise NotFound("User profile type not resolvable")
            now = self._clock()

            # ── 1. Profile (created empty on first submission) ──
            profile = uow.profiles.get_for_user(user, for_update=True)
            if profile is None:
                profile = uow.profiles.create_for_user(user, now)

            # ── 2. Verification fields ──
            profile.verification.submit(document_type, front_ref, back_ref, notes, now)
            uow.profiles.save(profile, now)

            # ── 3. Document tags ──
            uow.documents.tag(front_ref, IDENTITY_CONTEXT, caller_id)
            if back_ref:
                uow.documents.tag(back_ref, IDENTITY_CONTEXT, caller_id)

            # ── 4. History: one open entry per user ──
            for stale in uow.history.open_entries(caller_id):
                stale.supersede(now)
                uow.history.save(stale)
            uow.history.add(
                VerificationHistoryEntry(
                    owner_id=caller_id,
                    state=VerificationState.PENDING.value,
                    requested_at=now,
                    notes=notes,
                    documents={"front": front_ref, "back": back_ref, "type": document_type},
                )
            )

            # ── 5. Commit ──
            uow.commit()

        return user, profile, now
