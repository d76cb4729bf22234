"""
Database Models: SQLAlchemy.

Tables:
  - users: marketplace accounts (read by the workflow)
  - provider_profiles / seeker_profiles: per-side profiles carrying the
    verification columns
  - file_uploads: document reference store
  - verification_history: audit trail of submission/decision cycles
"""

import uuid

from sqlalchemy import (
    Column, String, Boolean, DateTime, Text, JSON,
    ForeignKey, Index,
)
from sqlalchemy.orm import DeclarativeBase, declared_attr

from src.core.entities.verification import utcnow


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    user_type = Column(String(20), nullable=False, default="seeker")   # "provider" | "seeker"
    role = Column(String(20), nullable=False, default="user")          # "user" | "admin"
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<User {self.id} [{self.user_type}/{self.role}]>"


class VerificationColumnsMixin:
    """Verification fields shared by both profile tables."""

    @declared_attr
    def user_id(cls):
        return Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    id = Column(String(36), primary_key=True, default=_uuid)
    first_name = Column(String(100))
    last_name = Column(String(100))

    identity_verified = Column(Boolean, nullable=False, default=False)
    verification_state = Column(String(20), nullable=False, default="not_started", index=True)
    document_type = Column(String(50))
    document_front_id = Column(String(36))
    document_back_id = Column(String(36))
    verification_requested_at = Column(DateTime)
    verified_at = Column(DateTime)
    verification_notes = Column(Text)
    rejection_reason = Column(Text)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)


class ProviderProfileRecord(VerificationColumnsMixin, Base):
    __tablename__ = "provider_profiles"

    def __repr__(self):
        return f"<ProviderProfile user={self.user_id} [{self.verification_state}]>"


class SeekerProfileRecord(VerificationColumnsMixin, Base):
    __tablename__ = "seeker_profiles"

    def __repr__(self):
        return f"<SeekerProfile user={self.user_id} [{self.verification_state}]>"


class FileUploadRecord(Base):
    """Uploaded file metadata. Uploads themselves happen elsewhere."""
    __tablename__ = "file_uploads"

    id = Column(String(36), primary_key=True, default=_uuid)
    uploaded_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    original_name = Column(String(255))
    file_url = Column(String(1024))
    status = Column(String(20), nullable=False, default="active")
    context = Column(String(50))
    entity_id = Column(String(36))
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<FileUpload {self.id} [{self.status}] ctx={self.context}>"


class VerificationHistoryRecord(Base):
    __tablename__ = "verification_history"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    verification_type = Column(String(30), nullable=False, default="identity")
    state = Column(String(20), nullable=False)
    requested_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)
    uploaded_documents = Column(JSON, default=dict)
    notes = Column(Text)

    __table_args__ = (
        Index("ix_verification_history_user_open", "user_id", "verification_type", "updated_at"),
    )

    def __repr__(self):
        return f"<VerificationHistory {self.id} user={self.user_id} [{self.state}]>"
