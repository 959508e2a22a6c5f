"""
StudyHub Backend - Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   One engine with connection pooling at import time; one session per
       request that commits on success and rolls back on error.

Connection Pooling:
    pool_size=20, max_overflow=10 → at most 30 connections per worker.
    pool_pre_ping catches connections killed by a database restart.
    pool_recycle=3600 drops connections older than an hour.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from studyhub.config import settings


def _engine_options(url: str) -> Dict[str, Any]:
    # SQLite (local runs, tests) uses its own pool class and rejects pool sizing.
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

# expire_on_commit=False: attributes stay readable after commit, so response
# models can be built from ORM objects outside the transaction.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all StudyHub ORM models (shared metadata for Alembic)."""
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    On success the transaction is committed; on any exception it is rolled
    back and the exception re-raised for the global handlers.

    Example usage in a route:
        @router.get("/getUserDetails")
        async def get_user_details(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Close every pooled connection. Called from the lifespan shutdown."""
    await engine.dispose()
