"""
Database configuration with connection pooling.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, QueuePool

from models.config import settings
from models.exceptions import BackendUnavailableException

F = TypeVar("F", bound=Callable[..., Any])


def create_db_engine():
    """
    Create database engine with appropriate configuration.

    Uses QueuePool for PostgreSQL/production and NullPool for SQLite.
    NullPool creates a new connection per request, avoiding concurrency issues.
    """
    is_sqlite = "sqlite" in settings.DATABASE_URL

    if is_sqlite:
        return create_engine(
            settings.DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
    else:
        return create_engine(
            settings.DATABASE_URL,
            poolclass=QueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,  # Verify connections before use
        )


engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Get database session with automatic cleanup."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def translate_backend_errors(func: F) -> F:
    """
    Convert transport-level database failures into BackendUnavailableException.

    The wrapped function must take the session as its first positional
    argument or as the ``db`` keyword. The session is rolled back before the
    domain exception is raised so no partial write is left pending.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as e:
            db = kwargs.get("db")
            if db is None and args and isinstance(args[0], Session):
                db = args[0]
            if db is not None:
                db.rollback()
            logger.error(f"Database unavailable in {func.__qualname__}: {e!r}")
            raise BackendUnavailableException(
                "The data service is temporarily unavailable, please retry"
            ) from e

    return wrapper  # type: ignore[return-value]
