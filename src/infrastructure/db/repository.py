"""
Verification Repositories: SQLAlchemy adapters for the verification store.

Handles:
  - Resolving a user's profile table (provider or seeker) once per call
  - Reading and tagging document references
  - Appending and resolving verification history entries
  - Grouping all of the above in one session/transaction (unit of work)
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.entities.document import DocumentReference
from src.core.entities.profile import PROFILE_TYPES, Profile, UserAccount, UserKind
from src.core.entities.verification import (
    VerificationHistoryEntry,
    VerificationRecord,
    VerificationState,
)
from src.core.errors import InternalError, WriteConflict
from src.core.interfaces.verification_store import (
    IDocumentRepository,
    IHistoryRepository,
    IProfileRepository,
    IUnitOfWork,
    IUserRepository,
)
from src.infrastructure.db.database import Database
from src.infrastructure.db.models import (
    FileUploadRecord,
    ProviderProfileRecord,
    SeekerProfileRecord,
    UserRecord,
    VerificationHistoryRecord,
)

logger = logging.getLogger(__name__)

PROFILE_TABLES = {
    UserKind.PROVIDER: ProviderProfileRecord,
    UserKind.SEEKER: SeekerProfileRecord,
}


def _flush(session: Session) -> None:
    try:
        session.flush()
    except SQLAlchemyError as e:
        logger.exception("Verification store write failed")
        raise InternalError() from e


def _to_user(row: UserRecord) -> UserAccount:
    return UserAccount(
        id=row.id,
        email=row.email,
        user_type=row.user_type,
        role=row.role,
        first_name=row.first_name,
        last_name=row.last_name,
    )


def _to_profile(kind: UserKind, row) -> Profile:
    record = VerificationRecord(
        owner_id=row.user_id,
        state=VerificationState(row.verification_state or VerificationState.NOT_STARTED.value),
        document_type=row.document_type,
        front_document_ref=row.document_front_id,
        back_document_ref=row.document_back_id,
        submitted_at=row.verification_requested_at,
        verified_at=row.verified_at,
        notes=row.verification_notes,
        rejection_reason=row.rejection_reason,
    )
    return PROFILE_TYPES[kind](
        owner_id=row.user_id,
        first_name=row.first_name,
        last_name=row.last_name,
        verification=record,
    )


def _to_entry(row: VerificationHistoryRecord) -> VerificationHistoryEntry:
    return VerificationHistoryEntry(
        id=row.id,
        owner_id=row.user_id,
        verification_type=row.verification_type,
        state=row.state,
        requested_at=row.requested_at,
        updated_at=row.updated_at,
        notes=row.notes,
        documents=row.uploaded_documents or {},
    )


class SqlAlchemyUserRepository(IUserRepository):

    def __init__(self, session: Session):
        self._session = session

    def get(self, user_id: str) -> UserAccount | None:
        row = self._session.get(UserRecord, user_id)
        return _to_user(row) if row else None


class SqlAlchemyProfileRepository(IProfileRepository):
    """Profile table chosen from the user's kind; callers never see the table."""

    def __init__(self, session: Session):
        self._session = session

    @staticmethod
    def _table(kind: UserKind | None):
        if kind is None:
            raise ValueError("User has no resolvable profile kind")
        return PROFILE_TABLES[kind]

    def _row(self, kind: UserKind, owner_id: str, for_update: bool = False):
        table = self._table(kind)
        stmt = select(table).where(table.user_id == owner_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self._session.execute(stmt).scalars().first()

    def get_for_user(self, user: UserAccount, for_update: bool = False) -> Profile | None:
        if user.kind is None:
            return None
        row = self._row(user.kind, user.id, for_update=for_update)
        return _to_profile(user.kind, row) if row else None

    def create_for_user(self, user: UserAccount, now: datetime) -> Profile:
        table = self._table(user.kind)
        row = table(
            user_id=user.id,
            verification_state=VerificationState.NOT_STARTED.value,
            identity_verified=False,
            created_at=now,
            updated_at=now,
        )
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError as e:
            raise WriteConflict(f"Profile for user {user.id} was created concurrently") from e
        except SQLAlchemyError as e:
            logger.exception("Verification store write failed")
            raise InternalError() from e
        logger.debug(f"Created empty {user.kind.value} profile for user {user.id}")
        return _to_profile(user.kind, row)

    def save(self, profile: Profile, now: datetime) -> None:
        row = self._row(profile.kind, profile.owner_id)
        if row is None:
            raise ValueError(f"No {profile.kind.value} profile for user {profile.owner_id}")
        record = profile.verification
        row.verification_state = record.state.value
        row.identity_verified = record.is_verified
        row.document_type = record.document_type
        row.document_front_id = record.front_document_ref
        row.document_back_id = record.back_document_ref
        row.verification_requested_at = record.submitted_at
        row.verified_at = record.verified_at
        row.verification_notes = record.notes
        row.rejection_reason = record.rejection_reason
        row.updated_at = now
        _flush(self._session)

    def list_pending(self) -> list[tuple[UserAccount, Profile]]:
        pending = []
        for kind, table in PROFILE_TABLES.items():
            stmt = (
                select(UserRecord, table)
                .join(table, table.user_id == UserRecord.id)
                .where(table.verification_state == VerificationState.PENDING.value)
                .where(UserRecord.user_type == kind.value)
            )
            for user_row, profile_row in self._session.execute(stmt).all():
                pending.append((_to_user(user_row), _to_profile(kind, profile_row)))

        pending.sort(key=lambda item: (
            item[1].verification.submitted_at is None,
            item[1].verification.submitted_at or datetime.min,
        ))
        return pending


class SqlAlchemyDocumentRepository(IDocumentRepository):

    def __init__(self, session: Session):
        self._session = session

    def get(self, document_id: str) -> DocumentReference | None:
        row = self._session.get(FileUploadRecord, document_id)
        if row is None:
            return None
        return DocumentReference(
            id=row.id,
            status=row.status,
            owner_id=row.uploaded_by,
            context=row.context,
            entity_id=row.entity_id,
            url=row.file_url,
            original_name=row.original_name,
        )

    def tag(self, document_id: str, context: str, entity_id: str) -> None:
        row = self._session.get(FileUploadRecord, document_id)
        if row is None:
            raise ValueError(f"Document {document_id} disappeared during tagging")
        row.context = context
        row.entity_id = entity_id
        _flush(self._session)


class SqlAlchemyHistoryRepository(IHistoryRepository):

    def __init__(self, session: Session):
        self._session = session

    def add(self, entry: VerificationHistoryEntry) -> None:
        row = VerificationHistoryRecord(
            user_id=entry.owner_id,
            verification_type=entry.verification_type,
            state=entry.state,
            requested_at=entry.requested_at,
            updated_at=entry.updated_at,
            uploaded_documents=entry.documents,
            notes=entry.notes,
        )
        self._session.add(row)
        _flush(self._session)
        entry.id = row.id

    def save(self, entry: VerificationHistoryEntry) -> None:
        row = self._session.get(VerificationHistoryRecord, entry.id)
        if row is None:
            raise ValueError(f"History entry {entry.id} not found")
        row.state = entry.state
        row.updated_at = entry.updated_at
        row.notes = entry.notes
        _flush(self._session)

    def _query(self, owner_id: str, verification_type: str):
        return (
            select(VerificationHistoryRecord)
            .where(VerificationHistoryRecord.user_id == owner_id)
            .where(VerificationHistoryRecord.verification_type == verification_type)
            .order_by(desc(VerificationHistoryRecord.requested_at))
        )

    def open_entries(self, owner_id: str, verification_type: str = "identity") -> list[VerificationHistoryEntry]:
        stmt = self._query(owner_id, verification_type).where(VerificationHistoryRecord.updated_at.is_(None))
        return [_to_entry(r) for r in self._session.execute(stmt).scalars().all()]

    def recent(self, owner_id: str, limit: int, verification_type: str = "identity") -> list[VerificationHistoryEntry]:
        stmt = self._query(owner_id, verification_type).limit(limit)
        return [_to_entry(r) for r in self._session.execute(stmt).scalars().all()]


class SqlAlchemyUnitOfWork(IUnitOfWork):
    """One session per unit of work; commit only on request."""

    def __init__(self, session: Session):
        self._session = session
        self.users = SqlAlchemyUserRepository(session)
        self.profiles = SqlAlchemyProfileRepository(session)
        self.documents = SqlAlchemyDocumentRepository(session)
        self.history = SqlAlchemyHistoryRepository(session)

    def commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.exception("Verification transaction failed to commit")
            raise InternalError() from e

    def rollback(self) -> None:
        self._session.rollback()

    def close(self) -> None:
        self._session.close()


def unit_of_work_factory(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    """Bind a unit-of-work factory to a database."""
    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(database.new_session())
    return factory
