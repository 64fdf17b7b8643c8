from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from booktracker.errors import StoreUnavailable


class Base(DeclarativeBase):
    pass


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_store(engine: AsyncEngine) -> None:
    """Check the connection and create missing tables."""
    import booktracker.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        await conn.run_sync(Base.metadata.create_all)


async def open_store(database_url: str) -> AsyncEngine:
    """Create an engine and run ``init_store`` on it; raise StoreUnavailable if that fails."""
    engine = create_engine(database_url)
    try:
        await init_store(engine)
    except (DBAPIError, OSError) as e:
        await engine.dispose()
        raise StoreUnavailable(f"Could not connect to the store: {e}") from e
    return engine


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    sessionmaker: async_sessionmaker[AsyncSession] = request.app.state.sessionmaker
    async with sessionmaker() as session:
        yield session
