from typing import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from resourcekit.config import get_settings


@lru_cache()
def get_engine() -> AsyncEngine:
    """
    Create (once) the AsyncEngine for the configured DATABASE_URL.

    Built lazily so importing this module never opens a connection or reads
    the environment; tests can point at their own engine instead.
    """
    settings = get_settings()
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,   # Set to False in production
        pool_pre_ping=True,              # Enables connection health checks
    )


@lru_cache()
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: DTOs are mapped from entities after the unit of work commits.
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. Yields a session and ensures it's closed after the request.

    Usage:
        async def endpoint(db: AsyncSession = Depends(get_async_session)):
            await db.execute(...)

    Transactions are opened by the service layer (`repository.transaction()`),
    not here.
    """
    async with get_session_maker()() as session:
        yield session
