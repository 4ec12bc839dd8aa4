#!/usr/bin/env python3
"""
Process one transaction event from a JSON file.

Usage:
    python scripts/process_transaction.py event.json
    python scripts/process_transaction.py event.json --show-records
    python scripts/process_transaction.py event.json --enqueue

The file holds the event in its wire form:
    {"tenantId": "...", "transactionId": "...", "sourcePartnerId": "...",
     "amount": "100000", "currency": "USD", "type": "payment",
     "occurredAt": "2024-05-01T12:00:00Z", "metadata": {}}

Exit code is 0 on success, 1 on a final failure and 2 on a retryable one.
"""

import argparse
import asyncio
import json
import sys
import uuid
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.config.logging import setup_logging
from commission_engine.database import dispose_engine, get_session_maker
from commission_engine.services.commission import (
    CommissionEngine,
    CommissionQueryManager,
    TransactionEvent,
)
from commission_engine.utils.db_decorators import with_rollback_on_error


@with_rollback_on_error
async def load_records(
    session: AsyncSession, tenant_id: uuid.UUID, transaction_id: str
) -> list[dict]:
    """Load the stored records of a transaction for display."""
    records = await CommissionQueryManager(session).get_transaction_commissions(
        tenant_id, transaction_id
    )
    return [
        {
            "id": str(record.id),
            "beneficiary": record.beneficiary_partner_code,
            "level": record.levels_from_source,
            "rate": str(record.commission_percentage),
            "amount": str(record.commission_amount),
            "payoutStatus": record.payout_status,
        }
        for record in records
    ]


async def process_file(path: Path, show_records: bool) -> int:
    """Run the engine for the event in ``path`` and print the result."""
    try:
        event = TransactionEvent.model_validate(json.loads(path.read_text()))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Cannot read transaction event from {path}: {e}")
        return 1

    session_maker = get_session_maker()
    try:
        async with session_maker() as session:
            result = await CommissionEngine(session).process(event)
            output = result.to_payload()
            if show_records:
                output["records"] = await load_records(
                    session, event.tenant_id, event.transaction_id
                )
    finally:
        await dispose_engine()

    print(json.dumps(output, indent=2))

    if result.success:
        return 0
    return 2 if result.retryable else 1


def enqueue_file(path: Path) -> int:
    """Send the event to the commission queue instead of running it here."""
    from jobs.tasks.commission_processing import process_commission_event

    payload = json.loads(path.read_text())
    message = process_commission_event.send(payload)
    logger.info(f"Enqueued commission event {payload.get('transactionId')}: {message.message_id}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Process a transaction event")
    parser.add_argument("event_file", type=Path, help="JSON file with the event")
    parser.add_argument(
        "--show-records",
        action="store_true",
        help="Print the stored commission records of the transaction",
    )
    parser.add_argument(
        "--enqueue",
        action="store_true",
        help="Send to the dramatiq queue instead of processing inline",
    )
    args = parser.parse_args()

    setup_logging()

    if args.enqueue:
        sys.exit(enqueue_file(args.event_file))
    sys.exit(asyncio.run(process_file(args.event_file, args.show_records)))


if __name__ == "__main__":
    main()
