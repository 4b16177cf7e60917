# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

Uses the SQLAlchemy 2.0 async API with the asyncpg driver. One engine is
created per process at application startup.

Example:
    from src.infrastructure.database.connection import (
        init_database,
        get_session,
    )

    # Initialize at application startup
    await init_database(settings)

    # Use in request handlers
    async with get_session() as session:
        exam = await session.get(Exam, exam_id)
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.infrastructure.database.models import Base

if TYPE_CHECKING:
    from src.core.config.settings import Settings

# Module-level state for the database connection
_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


async def init_database(settings: "Settings") -> None:
    """Initialize the database connection pool.

    Args:
        settings: Application settings containing database configuration.

    Raises:
        DatabaseError: If connection pool creation fails.
    """
    global _engine, _sessionmaker

    try:
        _engine = create_async_engine(
            settings.db.url,
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.max_overflow,
            pool_pre_ping=True,
            pool_recycle=1800,
            echo=False,
        )

        _sessionmaker = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize database connection", e) from e


async def close_database() -> None:
    """Dispose of the connection pool. Called at application shutdown."""
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_engine() -> AsyncEngine:
    """Get the async engine.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _engine is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the sessionmaker.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _sessionmaker is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _sessionmaker


async def create_schema() -> None:
    """Create all tables that do not exist yet.

    Intended for development databases and test fixtures.
    """
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Get an async session.

    Services commit their own units of work; anything left pending when
    the block exits normally is committed, and everything is rolled back
    on exception.

    Yields:
        AsyncSession for database operations.

    Raises:
        DatabaseError: If the database has not been initialized or
            if a database operation fails.
    """
    sessionmaker = get_sessionmaker()

    async with sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            await session.rollback()
            raise


async def check_database_connection() -> bool:
    """Check if the database is reachable.

    Returns:
        True if the database is reachable, False otherwise.
    """
    if _engine is None:
        return False

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
