"""Relational store access for Titan Organizations.

Wraps a SQLAlchemy engine and session factory. Each inbound action works
inside one ``session_scope()``: the transaction commits when the block
finishes and rolls back on any exception, and the session is always closed.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from titan_orgs.config import Settings
from titan_orgs.models import Base

logger = structlog.get_logger()


class Database:
    """Engine, connection pool and transactional session scopes."""

    def __init__(self, settings: Settings) -> None:
        url = settings.database_url
        kwargs: dict = {"echo": settings.database_echo, "pool_pre_ping": True}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
        else:
            kwargs["pool_size"] = settings.database_pool_size

        self.engine = create_engine(url, **kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )
        self.SerializableSession = sessionmaker(
            bind=self.engine.execution_options(isolation_level="SERIALIZABLE"),
            autoflush=False,
            expire_on_commit=False,
        )

    def create_schema(self) -> None:
        """Create all tables — used in development and tests."""
        Base.metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        Base.metadata.drop_all(self.engine)

    def ping(self) -> None:
        """Run a trivial query; raises if the store is unreachable."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    @contextmanager
    def session_scope(self, serializable: bool = False) -> Iterator[Session]:
        """Yield a session bound to one transaction.

        Args:
            serializable: Run the transaction at SERIALIZABLE isolation. Used
                for check-then-act paths such as role assignment and reorder.
        """
        factory = self.SerializableSession if serializable else self.SessionLocal
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        logger.info("database_disposed")
        self.engine.dispose()
