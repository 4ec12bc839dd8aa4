"""Fixtures for integration tests against a real SQLite database."""

import pytest
import pytest_asyncio

from commission_engine.database import create_engine, create_session_maker
from commission_engine.models import Base
from seed_helpers import Seeder


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Async engine on a per-test SQLite file with the schema created."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'commissions.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    """Session maker bound to the test database."""
    return create_session_maker(db_engine)


@pytest_asyncio.fixture
async def session(session_maker):
    """Session handed to the code under test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def seeder(session_maker) -> Seeder:
    """Seed data helper."""
    return Seeder(session_maker)
