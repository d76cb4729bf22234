"""
Database connection management.

Supports:
  - SQLite (local dev and tests, no setup)
  - PostgreSQL (production)

The engine and its session factory live on a Database object that the
application builds once and hands to whoever needs it; there is no
process-wide engine.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from src.infrastructure.db.models import Base

logger = logging.getLogger(__name__)


def create_db_engine(url: str) -> Engine:
    """Create SQLAlchemy engine."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # Single shared connection, otherwise every session gets its own empty DB
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    # PostgreSQL
    return create_engine(
        url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        echo=False,
    )


class Database:
    """Engine + session factory for one database URL."""

    def __init__(self, url: str):
        self.url = url
        self.engine = create_db_engine(url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def init_db(self):
        """Create all tables. Safe to call multiple times."""
        Base.metadata.create_all(self.engine)
        logger.info(f"Database initialized: {self.safe_url}")

    def new_session(self) -> Session:
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager for database sessions: commit, or rollback and re-raise."""
        session = self.new_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    @property
    def safe_url(self) -> str:
        return self.url.split("@")[-1] if "@" in self.url else self.url

    def dispose(self):
        self.engine.dispose()
