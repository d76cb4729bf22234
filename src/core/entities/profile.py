"""
Entity: User Account & Profile

A user owns exactly one profile, whose variant follows the user's side of
the marketplace. Both variants embed the same VerificationRecord.
"""

from dataclasses import dataclass, field
from enum import Enum

from src.core.entities.verification import VerificationRecord


class UserKind(str, Enum):
    PROVIDER = "provider"
    SEEKER = "seeker"


ADMIN_ROLE = "admin"


def _join_name(first: str | None, last: str | None) -> str:
    return f"{first or ''} {last or ''}".strip()


@dataclass
class UserAccount:
    """Identity fields of a user row (read-only for the workflow)."""
    id: str
    email: str
    user_type: str
    role: str = "user"
    first_name: str | None = None
    last_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def kind(self) -> UserKind | None:
        try:
            return UserKind(self.user_type)
        except ValueError:
            return None

    @property
    def full_name(self) -> str:
        return _join_name(self.first_name, self.last_name)


@dataclass
class Profile:
    """Common shape of provider and seeker profiles."""
    owner_id: str
    first_name: str | None = None
    last_name: str | None = None
    verification: VerificationRecord | None = None

    kind: UserKind = field(init=False)

    def __post_init__(self):
        if self.verification is None:
            self.verification = VerificationRecord(owner_id=self.owner_id)

    def display_name(self, user: UserAccount) -> str:
        """Profile names first, user row names as fallback."""
        first = self.first_name or user.first_name
        last = self.last_name or user.last_name
        return _join_name(first, last)


@dataclass
class ProviderProfile(Profile):
    kind: UserKind = field(default=UserKind.PROVIDER, init=False)


@dataclass
class SeekerProfile(Profile):
    kind: UserKind = field(default=UserKind.SEEKER, init=False)


PROFILE_TYPES: dict[UserKind, type[Profile]] = {
    UserKind.PROVIDER: ProviderProfile,
    UserKind.SEEKER: SeekerProfile,
}
