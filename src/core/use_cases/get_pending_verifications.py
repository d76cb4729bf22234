"""
Use Case: Get Pending Verifications (admin)

Review queue across provider and seeker profiles, oldest submission
first, with presentable links to the submitted documents.

Known limit: no pagination, and up to two document lookups per entry.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from src.core.interfaces.verification_store import IUnitOfWork
from src.core.use_cases.authorization import require_admin


@dataclass
class PendingDocument:
    type: str                 # "front" | "back"
    url: str | None
    name: str | None


@dataclass
class PendingVerification:
    user_id: str
    email: str
    user_type: str
    full_name: str
    submitted_at: datetime | None
    document_type: str | None
    notes: str | None
    documents: list[PendingDocument] = field(default_factory=list)


class GetPendingVerificationsUseCase:
    """Use Case: admin id -> pending queue."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]):
        self._uow_factory = uow_factory

    def execute(self, admin_id: str | None) -> list[PendingVerification]:
        with self._uow_factory() as uow:
            require_admin(uow, admin_id)

            queue = []
            for user, profile in uow.profiles.list_pending():
                record = profile.verification
                documents = []
                for side, ref in (("front", record.front_document_ref), ("back", record.back_document_ref)):
                    if not ref:
                        continue
                    doc = uow.documents.get(ref)
                    if doc is not None:
                        documents.append(PendingDocument(type=side, url=doc.url, name=doc.original_name))

                queue.append(
                    PendingVerification(
                        user_id=user.id,
                        email=user.email,
                        user_type=user.user_type,
                        full_name=profile.display_name(user),
                        submitted_at=record.submitted_at,
                        document_type=record.document_type,
                        notes=record.notes,
                        documents=documents,
                    )
                )
            return queue
