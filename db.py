"""Signup store: async engine, sessions and the commit helper used by services."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

import config
from errors import RepositoryError

engine = create_async_engine(
    config.settings.DATABASE_URL,
    echo=config.settings.SQL_ECHO,
    pool_pre_ping=True,
)

# Services commit explicitly; nothing is flushed behind their back
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db() -> AsyncSession:
    """
    Yield a session for one request.

    Anything the handler left uncommitted is rolled back when the session
    closes, so a failed request never half-applies a transition.
    """
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    """Create missing tables. Deployed databases are managed by Alembic."""
    import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()


async def commit(session: AsyncSession) -> None:
    """
    Commit the session, surfacing store failures as RepositoryError.

    The session is rolled back before the error propagates.
    """
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise RepositoryError(f"Failed to commit transaction: {e}") from e
