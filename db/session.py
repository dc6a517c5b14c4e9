"""
db/session.py

SQLAlchemy engine, session factory and the transaction boundary used by
every ledger write.
"""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import get_database_settings

logger = logging.getLogger(__name__)


def create_db_engine() -> Engine:
    settings = get_database_settings()
    if not settings.url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported.")

    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_recycle=settings.pool_recycle,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        connect_args=settings.connect_args,
    )


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session options shared by the application and the test suite."""
    return sessionmaker(
        bind=engine,
        class_=Session,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def _get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(get_engine())
    return _session_factory


def SessionLocal() -> Session:
    """Lazy session factory. Drop-in replacement for a sessionmaker() call."""
    return _get_session_factory()()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction_scope(session: Session, *, operation: str) -> Iterator[Session]:
    """
    Run one logical write on ``session`` as a single transaction.

    Commits when the block exits normally. Any exception triggers an
    explicit rollback before it is re-raised, so callers never observe a
    partially applied write.
    """

    try:
        yield session
        session.commit()
    except Exception as exc:
        session.rollback()
        logger.warning("Rolled back %s: %s", operation, exc)
        raise
