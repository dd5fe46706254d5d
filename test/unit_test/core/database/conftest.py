"""Test configuration for repository unit tests.

Each test runs against its own in-memory SQLite database created from the
ORM metadata.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from vira.core.database import create_all, create_sessionmaker
from vira.core.database.repositories import RepositoryBundle, build_repositories


@pytest_asyncio.fixture
async def in_memory_engine():
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture
def repos(in_memory_session: AsyncSession) -> RepositoryBundle:
    return build_repositories(in_memory_session)
