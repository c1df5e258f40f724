"""
Database engines and sessions for FreshRoute Dispatch.

Two engines share one schema:

- async (asyncpg) for the read-only job endpoints,
- sync (psycopg2) for planning passes, which run in Celery workers and
  in the API threadpool and hold a row lock on the fleet while booking.
"""
from contextlib import contextmanager
from typing import AsyncGenerator, Generator, Iterator

from sqlalchemy import MetaData, create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from freshroute.core.config import settings

# Constraint names match the ones written by the Alembic baseline
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


class Base(DeclarativeBase):
    """Declarative base for dispatch models."""
    metadata = metadata


# =========================================================================
# Async: API reads
# =========================================================================
engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


# =========================================================================
# Sync: planning passes
# =========================================================================
sync_engine = create_engine(
    settings.database_url_sync,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

sync_session_maker = sessionmaker(
    sync_engine,
    class_=Session,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI routes to get database session.

    Usage:
        @router.get("/jobs")
        async def list_jobs(session: AsyncSession = Depends(get_async_session)):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@contextmanager
def planning_session() -> Iterator[Session]:
    """
    Sync session for one planning pass.

    Commits whatever the pass left uncommitted on success; rolls back on
    any error and re-raises. The planner commits per job, so a rollback
    only discards the job in flight.
    """
    with sync_session_maker() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def get_sync_session() -> Generator[Session, None, None]:
    """Dependency for endpoints that run a planning pass in the threadpool."""
    with planning_session() as session:
        yield session
