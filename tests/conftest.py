"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
import uuid
from decimal import Decimal
from pathlib import Path

# Minimal environment for settings; integration tests bind their own database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./commission_engine_test.db")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("REDIS_HOST", "localhost")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from loguru import logger

from commission_engine.services.commission.schemas import PartnerSnapshot


@pytest.fixture
def audit_records():
    """Collect audit records emitted through loguru while the test runs."""
    records: list[dict] = []

    def sink(message) -> None:
        records.append(dict(message.record["extra"]))

    handler_id = logger.add(
        sink, level="INFO", filter=lambda record: bool(record["extra"].get("audit"))
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def make_snapshot():
    """Factory for PartnerSnapshot objects used by in-memory tests."""

    def _make(
        code: str,
        rate: str = "0.10",
        depth: int = 3,
        status: str = "active",
        sponsor_id: uuid.UUID | None = None,
        override: str | None = None,
        min_rate: str = "0",
        max_rate: str = "1",
    ) -> PartnerSnapshot:
        return PartnerSnapshot(
            partner_id=uuid.uuid4(),
            code=code,
            status=status,
            tier_id=uuid.uuid4(),
            tier_name=f"tier-{code}",
            tier_rate=Decimal(rate),
            tier_min_rate=Decimal(min_rate),
            tier_max_rate=Decimal(max_rate),
            tier_max_depth=depth,
            rate=Decimal(override) if override is not None else Decimal(rate),
            has_rate_override=override is not None,
            sponsor_id=sponsor_id,
        )

    return _make
