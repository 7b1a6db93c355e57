"""
SQLite-backed fixtures for integration tests.

Each test gets its own in-memory database through aiosqlite, so tests are
isolated without any external service.

Usage:
    async def test_something(db_session):
        repo = UserRepositorySQLAlchemy(db_session)
        await repo.create(user)
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from learnhub_identity.infrastructure.persistence.sqlalchemy import IdentityBase

IN_MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """
    Async engine on a private in-memory database.

    StaticPool keeps a single connection so every session sees the same
    database for the lifetime of the test.
    """
    engine = create_async_engine(
        IN_MEMORY_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine):
    """Isolated session; uncommitted changes are rolled back afterwards."""
    session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
