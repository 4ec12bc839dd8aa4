"""
Unit tests for database session decorators.

Tests cover:
- Commit on success and rollback on error
- Failed rollbacks are logged with their traceback
"""

from unittest.mock import AsyncMock

import pytest
from loguru import logger

from commission_engine.utils.db_decorators import (
    with_auto_commit,
    with_rollback_on_error,
)


@pytest.fixture
def error_records():
    """Collect ERROR records emitted while the test runs."""
    records = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="ERROR"
    )
    yield records
    logger.remove(handler_id)


class TestWithAutoCommit:
    """Test with_auto_commit."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self):
        """The session is committed once the function returns."""
        session = AsyncMock()

        @with_auto_commit
        async def seed(session):
            return "seeded"

        assert await seed(session=session) == "seeded"
        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rolls_back_and_reraises(self):
        """Errors roll back instead of committing."""
        session = AsyncMock()

        @with_auto_commit
        async def seed(session):
            raise ValueError("bad tier")

        with pytest.raises(ValueError, match="bad tier"):
            await seed(session=session)
        session.commit.assert_not_awaited()
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_rollback_is_logged_with_traceback(self, error_records):
        """A rollback that raises is logged and the original error survives."""
        session = AsyncMock()
        session.rollback.side_effect = RuntimeError("connection gone")

        @with_auto_commit
        async def seed(session):
            raise ValueError("bad tier")

        with pytest.raises(ValueError, match="bad tier"):
            await seed(session=session)

        assert len(error_records) == 1
        assert "connection gone" in error_records[0]["message"]
        assert error_records[0]["exception"] is not None
        assert error_records[0]["exception"].type is RuntimeError


class TestWithRollbackOnError:
    """Test with_rollback_on_error."""

    @pytest.mark.asyncio
    async def test_success_leaves_session_alone(self):
        """Nothing is rolled back or committed on success."""
        session = AsyncMock()

        @with_rollback_on_error
        async def run(session):
            return 7

        assert await run(session=session) == 7
        session.rollback.assert_not_awaited()
        session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_rollback_is_logged_with_traceback(self, error_records):
        """Rollback failures do not hide the original exception."""
        session = AsyncMock()
        session.rollback.side_effect = RuntimeError("connection gone")

        @with_rollback_on_error
        async def run(session):
            raise ValueError("{braces} in message")

        with pytest.raises(ValueError, match="braces"):
            await run(session=session)

        assert len(error_records) == 1
        assert error_records[0]["level"].name == "ERROR"
        assert error_records[0]["exception"].type is RuntimeError

    @pytest.mark.asyncio
    async def test_missing_session_still_runs(self):
        """Functions without a session run undecorated."""

        @with_rollback_on_error
        async def run(value):
            return value * 2

        assert await run(3) == 6
