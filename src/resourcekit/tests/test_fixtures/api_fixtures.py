"""Fixtures for HTTP tests (FastAPI app + httpx client on the test database)."""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resourcekit.config import Settings
from resourcekit.database.session import get_async_session
from resourcekit.main import create_app


@pytest.fixture
def app(session_maker: async_sessionmaker[AsyncSession]) -> FastAPI:
    """
    A fresh application whose request sessions come from the per-test engine.

    ASGITransport does not run the lifespan, so the application never touches
    the configured DATABASE_URL; the schema is created by `async_engine`.
    """
    application = create_app(Settings(ENV="testing", LOG_LEVEL="DEBUG", LOG_FORMAT="text", LOG_TO_STDOUT=True))

    async def _test_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    application.dependency_overrides[get_async_session] = _test_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
