"""
Unit tests for settings and engine configuration.
"""

import pytest
from pydantic import ValidationError

from commission_engine.config.settings import Settings
from commission_engine.services.commission.config import CommissionEngineConfig


def _settings(**overrides) -> Settings:
    return Settings(database_url="sqlite+aiosqlite:///:memory:", _env_file=None, **overrides)


class TestSettings:
    """Test settings loading and validation."""

    def test_commission_defaults(self):
        """Commission settings have the documented defaults."""
        settings = _settings()
        assert settings.commission_max_global_depth == 10
        assert settings.commission_record_zero_amounts is True
        assert settings.commission_run_timeout_seconds == 30
        assert settings.commission_engine_version == "1.0"
        assert settings.commission_task_max_retries == 5

    @pytest.mark.parametrize("depth", [0, 51])
    def test_global_depth_bounds(self, depth):
        """Global depth must be within 1..50."""
        with pytest.raises(ValidationError):
            _settings(commission_max_global_depth=depth)

    def test_timeout_must_be_positive(self):
        """A zero run timeout is rejected."""
        with pytest.raises(ValidationError):
            _settings(commission_run_timeout_seconds=0)

    def test_log_level_normalized(self):
        """Log level is upper-cased for loguru."""
        assert _settings(log_level="debug").log_level == "DEBUG"

    def test_is_sqlite(self):
        """SQLite URLs are detected."""
        assert _settings().is_sqlite
        assert not Settings(
            database_url="postgresql+asyncpg://u:p@localhost/db", _env_file=None
        ).is_sqlite


class TestCommissionEngineConfig:
    """Test engine configuration built from settings."""

    def test_from_settings(self):
        """Engine config mirrors the commission settings."""
        config = CommissionEngineConfig.from_settings(
            _settings(
                commission_max_global_depth=4,
                commission_record_zero_amounts=False,
                commission_run_timeout_seconds=2.5,
                commission_engine_version="1.1",
            )
        )
        assert config == CommissionEngineConfig(
            max_global_depth=4,
            record_zero_amounts=False,
            run_timeout_seconds=2.5,
            engine_version="1.1",
        )
