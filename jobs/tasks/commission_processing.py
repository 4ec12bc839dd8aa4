"""
Commission processing task.

Runs the commission engine for one serialized transaction event.
Retryable failures are raised so the Retries middleware re-delivers the
message; everything else is final.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

import dramatiq
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.config.settings import settings
from commission_engine.services.commission import (
    CommissionAuditLogger,
    CommissionEngine,
    CommissionRunResult,
    RunStatus,
    TransactionEvent,
)
from commission_engine.utils.exceptions import TransientPersistenceError
from jobs.async_runner import create_local_session, run_async
from jobs.broker import broker

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


@dramatiq.actor(
    broker=broker,
    queue_name="commissions",
    time_limit=int(settings.commission_run_timeout_seconds * 1000) + 30_000,
)
def process_commission_event(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Process one transaction event.

    Args:
        payload: Transaction event in its camelCase wire form
    """
    logger.info(
        f"Processing commission event {payload.get('transactionId')}"
    )
    return run_async(_process_commission_event_async(payload))


async def _process_commission_event_async(
    payload: dict[str, Any],
    session_factory: SessionFactory | None = None,
) -> dict[str, Any]:
    """
    Async implementation of commission event processing.

    Args:
        payload: Transaction event in its camelCase wire form
        session_factory: Session context factory (defaults to a local NullPool session)

    Returns:
        Engine result payload

    Raises:
        TransientPersistenceError: When the run failed but may succeed on retry
    """
    try:
        event = TransactionEvent.model_validate(payload)
    except ValidationError as e:
        result = CommissionRunResult(
            success=False,
            transaction_id=str(payload.get("transactionId", "")),
            status=RunStatus.FAILED,
            errors=[f"Invalid transaction event: {err['loc']}: {err['msg']}" for err in e.errors()],
        )
        CommissionAuditLogger(settings.commission_engine_version).emit(result)
        return result.to_payload()

    session_factory = session_factory or create_local_session

    async with session_factory() as session:
        result = await CommissionEngine(session).process(event)

    if not result.success and result.retryable:
        raise TransientPersistenceError(
            f"Commission run for {event.transaction_id} failed, retrying: "
            f"{'; '.join(result.errors)}"
        )

    return result.to_payload()
