"""
Database helpers for the feed publisher.

The engine and session factory are created lazily so importing modules
(and tests that inject their own engine) never opens a connection.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .db_models import Base
from .logging import logger

_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.database_url,
            echo=settings.sql_echo,
            pool_pre_ping=True,
        )
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = build_session_factory(get_engine())
    return _SessionLocal


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        class_=Session,
    )


@contextmanager
def get_session(factory: sessionmaker[Session] | None = None) -> Iterator[Session]:
    """
    Provide a transactional session: commit on success, rollback on error.

    Usage:
        with get_session() as session:
            session.add(obj)
    """
    session = (factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception as exc:
        session.rollback()
        logger.warning("db_session_rollback", error=str(exc))
        raise
    finally:
        session.close()


def init_db(engine: Engine | None = None) -> None:
    """Create tables directly (local development and tests; production uses alembic)."""
    Base.metadata.create_all(engine or get_engine())


__all__ = ["build_session_factory", "get_engine", "get_session", "get_session_factory", "init_db"]
