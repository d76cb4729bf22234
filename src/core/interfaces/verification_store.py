"""
Contract: Verification Store

Repositories over users, profiles, document references and the
verification history, grouped in a unit of work so that a use case can
write to all of them inside one transaction.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from src.core.entities.document import DocumentReference
from src.core.entities.profile import Profile, UserAccount
from src.core.entities.verification import VerificationHistoryEntry


class IUserRepository(ABC):
    """Port: read access to user rows."""

    @abstractmethod
    def get(self, user_id: str) -> UserAccount | None:
        ...


class IProfileRepository(ABC):
    """
    Port: Profile Repository

    Resolves the concrete profile variant (provider or seeker) for a user
    and persists its embedded verification record.
    """

    @abstractmethod
    def get_for_user(self, user: UserAccount, for_update: bool = False) -> Profile | None:
        """
        Load the user's profile.

        Args:
            user: Owner of the profile; its user_type selects the variant.
            for_update: Lock the row until the transaction ends.

        Returns:
            The profile, or None when no row exists yet.
        """
        ...

    @abstractmethod
    def create_for_user(self, user: UserAccount, now: datetime) -> Profile:
        """Insert an empty profile row of the user's variant.

        Raises WriteConflict when another transaction inserted it first.
        """
        ...

    @abstractmethod
    def save(self, profile: Profile, now: datetime) -> None:
        """Write the profile's verification fields back."""
        ...

    @abstractmethod
    def list_pending(self) -> list[tuple[UserAccount, Profile]]:
        """All pending profiles of both variants, oldest submission first."""
        ...


class IDocumentRepository(ABC):
    """Port: the document reference store."""

    @abstractmethod
    def get(self, document_id: str) -> DocumentReference | None:
        ...

    @abstractmethod
    def tag(self, document_id: str, context: str, entity_id: str) -> None:
        """Associate a reference with a context and the entity it now belongs to."""
        ...


class IHistoryRepository(ABC):
    """Port: verification history ledger."""

    @abstractmethod
    def add(self, entry: VerificationHistoryEntry) -> None:
        ...

    @abstractmethod
    def save(self, entry: VerificationHistoryEntry) -> None:
        ...

    @abstractmethod
    def open_entries(self, owner_id: str, verification_type: str = "identity") -> list[VerificationHistoryEntry]:
        """Entries with updated_at unset, newest requested_at first."""
        ...

    @abstractmethod
    def recent(self, owner_id: str, limit: int, verification_type: str = "identity") -> list[VerificationHistoryEntry]:
        """Up to `limit` entries, newest requested_at first."""
        ...


class IUnitOfWork(ABC):
    """
    Port: Unit of Work

    One transaction. Nothing is persisted unless commit() is called;
    leaving the context without committing rolls back. The underlying
    connection is released on every exit path.
    """

    users: IUserRepository
    profiles: IProfileRepository
    documents: IDocumentRepository
    history: IHistoryRepository

    def __enter__(self) -> "IUnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self.close()

    @abstractmethod
    def commit(self) -> None:
        ...

    @abstractmethod
    def rollback(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...
