"""
Core pytest configuration for the entire test suite.

This module provides only the essentials needed across ALL test types
(repositories, services, API, logging):

- quiet third-party loggers, installed before anything heavy is imported
- application logging installed once per session
- an in-memory SQLite engine per test, with SAVEPOINT support enabled
- a session bound to that engine

Domain-specific fixtures live in:
- tests/test_fixtures/repository_fixtures.py
- tests/test_fixtures/service_fixtures.py
- tests/test_fixtures/api_fixtures.py
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import logging
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above the project imports so collection stays quiet.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "httpx",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
    AsyncEngine,
)

from resourcekit.database.base import Base
import resourcekit.models  # noqa: F401 – import to register models with Base.metadata
from resourcekit.config import Settings
from resourcekit.core.logging.builder import setup_logging

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# -------------------------------
# Logging
# -------------------------------
def _install_suite_logging() -> None:
    setup_logging(Settings(LOG_LEVEL="DEBUG", LOG_FORMAT="text", LOG_TO_STDOUT=True, ENV="testing"))


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install application logging for the whole session (console only, text format).

    Logging tests that need a different configuration call setup_logging themselves
    and restore it with the `restore_logging` fixture.
    """
    _install_suite_logging()
    yield


@pytest.fixture()
def restore_logging():
    """Reinstall the session logging configuration after the test."""
    yield
    _install_suite_logging()


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    pysqlite's own transaction handling breaks SAVEPOINT; take it over.

    Recipe from the SQLAlchemy SQLite dialect docs ("Serializable isolation / Savepoints"):
    disable the driver's implicit BEGIN and emit our own.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    One in-memory database per test.

    StaticPool keeps a single connection, so every session of the test sees
    the same in-memory database; the database disappears with the engine.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    _enable_sqlite_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """
    A plain session with no transaction open.

    Services open their own unit of work on it (`session.begin()`), exactly
    as they do on a request-scoped session in the application.
    """
    async with session_maker() as session:
        yield session


# Domain fixtures, registered globally
from resourcekit.tests.test_fixtures.repository_fixtures import (  # noqa: E402
    user_role_repository,
    sample_role_data,
    create_role,
    created_role,
    multiple_roles,
)
from resourcekit.tests.test_fixtures.service_fixtures import (  # noqa: E402
    faker_seeded,
    user_role_service,
    fake_repository,
    fake_service,
)
from resourcekit.tests.test_fixtures.api_fixtures import (  # noqa: E402
    app,
    client,
)
