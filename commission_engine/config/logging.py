"""
Logging configuration.

Configures loguru for the engine: a rotating application log plus a
JSON-serialized audit sink that only receives records bound with
``audit=True``.
"""

import sys
from pathlib import Path

from loguru import logger

from commission_engine.config.settings import settings


def _is_audit_record(record: dict) -> bool:
    return bool(record["extra"].get("audit"))


def setup_logging(log_dir: str | None = None, console: bool = True) -> None:
    """Configure logger with file rotation and the audit sink."""
    directory = Path(log_dir or settings.log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    logger.remove()

    if console:
        logger.add(sys.stderr, level=settings.log_level)

    logger.add(
        directory / "commission_engine.log",
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )

    # Reconciliation reads this file; keep it longer than the app log
    logger.add(
        directory / "commission_audit.log",
        rotation="1 day",
        retention="90 days",
        level="INFO",
        encoding="utf-8",
        serialize=True,
        filter=_is_audit_record,
    )

    logger.info("Commission engine logging configured")
