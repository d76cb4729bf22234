"""
Use Case: Update Verification Status (admin)

An administrator approves, rejects or reopens a user's verification.
Profile fields and the open history entry change together in one
transaction; the user is emailed after commit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from src.core.entities.verification import (
    DECISION_STATES,
    VerificationHistoryEntry,
    VerificationState,
    utcnow,
)
from src.core.errors import InvalidArgument, NotFound
from src.core.interfaces.notification_service import (
    INotificationDispatcher,
    NotificationEvent,
    VerificationNotification,
)
from src.core.interfaces.verification_store import IUnitOfWork
from src.core.use_cases.authorization import require_admin
from src.core.use_cases.notify import notify_after_commit

logger = logging.getLogger(__name__)


@dataclass
class DecisionInput:
    user_id: str | None
    status: str | None
    notes: str | None = None
    rejection_reason: str | None = None


@dataclass
class DecisionResult:
    user_id: str
    status: VerificationState

    @property
    def message(self) -> str:
        verb = {
            VerificationState.APPROVED: "approved",
            VerificationState.REJECTED: "rejected",
        }.get(self.status, "updated")
        return f"Verification {verb} successfully"


_EVENTS = {
    VerificationState.APPROVED: NotificationEvent.APPROVED,
    VerificationState.REJECTED: NotificationEvent.REJECTED,
}


def _parse_status(value: str | None) -> VerificationState:
    try:
        status = VerificationState(value)
    except ValueError:
        status = None
    if status not in DECISION_STATES:
        raise InvalidArgument(
            "Invalid verification status",
            fields={"status": "must be one of approved, rejected, pending"},
        )
    return status


class UpdateVerificationStatusUseCase:
    """
    Use Case: admin decision -> profile fields + history resolution -> notify.

    Rules:
      - caller must be an admin, checked before anything else
      - the target must have submitted at least once
      - pending reopens the review: a fresh open history entry is appended
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notifier: INotificationDispatcher | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._uow_factory = uow_factory
        self._notifier = notifier
        self._clock = clock

    def execute(self, admin_id: str | None, data: DecisionInput) -> DecisionResult:
        with self._uow_factory() as uow:
            admin = require_admin(uow, admin_id)

            status = _parse_status(data.status)
            if not data.user_id:
                raise InvalidArgument("user_id is required", fields={"user_id": "required"})

            user = uow.users.get(data.user_id)
            if user is None or user.kind is None:
                raise NotFound("User not found")

            profile = uow.profiles.get_for_user(user, for_update=True)
            if profile is None or not profile.verification.has_submission:
                raise InvalidArgument(
                    "User has not submitted identity documents",
                    fields={"user_id": "no verification submitted"},
                )

            now = self._clock()
            profile.verification.decide(
                status, now, notes=data.notes, rejection_reason=data.rejection_reason
            )
            uow.profiles.save(profile, now)

            # Newest open entry takes the decision; any others lost a
            # concurrent resubmission race.
            open_entries = uow.history.open_entries(user.id)
            if open_entries:
                current, *stale = open_entries
                current.resolve(status.value, now, notes=data.notes or data.rejection_reason)
                uow.history.save(current)
                for entry in stale:
                    entry.supersede(now)
                    uow.history.save(entry)
            else:
                logger.warning(f"No open history entry for user {user.id}; decision recorded on profile only")

            if status == VerificationState.PENDING:
                record = profile.verification
                uow.history.add(
                    VerificationHistoryEntry(
                        owner_id=user.id,
                        state=VerificationState.PENDING.value,
                        requested_at=now,
                        notes=data.notes,
                        documents={
                            "front": record.front_document_ref,
                            "back": record.back_document_ref,
                            "type": record.document_type,
                        },
                    )
                )

            uow.commit()

            notification = None
            if status in _EVENTS:
                notification = VerificationNotification(
                    event=_EVENTS[status],
                    user_id=user.id,
                    email=user.email,
                    full_name=profile.display_name(user) or user.email,
                    rejection_reason=profile.verification.rejection_reason,
                )

        logger.info(f"Verification of user {user.id} set to {status.value} by admin {admin.id}")
        if notification is not None:
            notify_after_commit(self._notifier, notification)

        return DecisionResult(user_id=user.id, status=status)
