"""Test helpers: seeding, tokens and test doubles."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta

from src.core.interfaces.notification_service import (
    INotificationDispatcher,
    VerificationNotification,
)
from src.infrastructure.db.database import Database
from src.infrastructure.db.models import (
    FileUploadRecord,
    ProviderProfileRecord,
    SeekerProfileRecord,
    UserRecord,
)
from src.infrastructure.security.tokens import create_access_token

JWT_SECRET = "test-secret"


class RecordingDispatcher(INotificationDispatcher):
    """Keeps dispatched notifications instead of sending them."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[VerificationNotification] = []
        self.fail = fail

    def dispatch(self, notification: VerificationNotification):
        if self.fail:
            raise RuntimeError("mail queue down")
        self.sent.append(notification)
        return None


class StepClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 12, 0, 0)) -> None:
        self._ticks = itertools.count()
        self._start = start

    def __call__(self) -> datetime:
        return self._start + timedelta(minutes=next(self._ticks))


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, JWT_SECRET)}"}


def add_user(
    database: Database,
    user_id: str,
    user_type: str = "provider",
    role: str = "user",
    first_name: str | None = "Ana",
    last_name: str | None = "Lopez",
    with_profile: bool = False,
) -> str:
    with database.session_scope() as session:
        session.add(
            UserRecord(
                id=user_id,
                email=f"{user_id}@example.com",
                user_type=user_type,
                role=role,
                first_name=first_name,
                last_name=last_name,
            )
        )
        if with_profile:
            table = ProviderProfileRecord if user_type == "provider" else SeekerProfileRecord
            session.add(table(user_id=user_id))
    return user_id


def add_document(
    database: Database,
    doc_id: str,
    status: str = "active",
    uploaded_by: str | None = None,
    url: str | None = None,
) -> str:
    with database.session_scope() as session:
        session.add(
            FileUploadRecord(
                id=doc_id,
                status=status,
                uploaded_by=uploaded_by,
                original_name=f"{doc_id}.jpg",
                file_url=url or f"https://files.example.com/{doc_id}.jpg",
            )
        )
    return doc_id
