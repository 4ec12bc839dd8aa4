"""
Unit tests for the commission queue retry policy.
"""

from sqlalchemy.exc import IntegrityError, OperationalError

from commission_engine.config.settings import settings
from commission_engine.utils.exceptions import (
    InvalidTransactionError,
    TransientPersistenceError,
    UpstreamDataError,
)
from jobs.broker import broker, should_retry


class TestShouldRetry:
    """Test which failures are re-delivered."""

    def test_transient_errors_retried(self):
        """Lock contention and timeouts are retried."""
        assert should_retry(0, TransientPersistenceError("timed out")) is True
        assert should_retry(0, OperationalError("UPDATE", {}, Exception("locked"))) is True
        assert should_retry(1, TimeoutError()) is True

    def test_permanent_errors_not_retried(self):
        """Validation, upstream data and constraint errors are final."""
        assert should_retry(0, InvalidTransactionError("bad amount")) is False
        assert should_retry(0, UpstreamDataError("dangling sponsor")) is False
        assert should_retry(0, IntegrityError("INSERT", {}, Exception("dup"))) is False
        assert should_retry(0, ValueError("boom")) is False

    def test_retry_limit(self, monkeypatch):
        """Transient errors stop being retried at the configured limit."""
        monkeypatch.setattr(settings, "commission_task_max_retries", 2)

        assert should_retry(1, TransientPersistenceError("x")) is True
        assert should_retry(2, TransientPersistenceError("x")) is False


class TestBroker:
    """Test broker selection."""

    def test_stub_broker_in_test_environment(self):
        """Tests never need a Redis server."""
        assert type(broker).__name__ == "StubBroker"
