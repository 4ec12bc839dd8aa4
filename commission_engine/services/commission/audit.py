"""
Commission audit emitter.

One structured record per engine run, success or failure. Records are
bound with ``audit=True`` so the audit sink configured in
``commission_engine.config.logging`` picks them up.
"""

import uuid

from loguru import logger

from commission_engine.services.commission.schemas import (
    CommissionRunResult,
    RunStatus,
)


class CommissionAuditLogger:
    """Emits the per-run audit record."""

    def __init__(self, engine_version: str) -> None:
        self.engine_version = engine_version
        self.logger = logger.bind(audit=True, service="CommissionAudit")

    def build_record(
        self,
        result: CommissionRunResult,
        source_partner_id: uuid.UUID | None,
        source_partner_code: str | None,
    ) -> dict:
        """Build the audit payload for a finished run."""
        return {
            "tenant_id": str(result.tenant_id) if result.tenant_id else None,
            "transaction_id": result.transaction_id,
            "source_partner_id": str(source_partner_id) if source_partner_id else None,
            "source_partner_code": source_partner_code,
            "status": result.status.value,
            "ancestors_processed": result.ancestors_processed,
            "records_created": result.records_created,
            "records_already_present": result.records_already_present,
            "total_commission_amount": str(result.total_commission_amount),
            "duration_ms": round(result.duration_ms, 3),
            "errors": list(result.errors),
            "retryable": result.retryable,
            "engine_version": self.engine_version,
        }

    def emit(
        self,
        result: CommissionRunResult,
        source_partner_id: uuid.UUID | None = None,
        source_partner_code: str | None = None,
    ) -> dict:
        """
        Emit the audit record.

        Args:
            result: Finished run result
            source_partner_id: Partner credited with the sale
            source_partner_code: Code of that partner, when it was found

        Returns:
            The emitted audit payload
        """
        record = self.build_record(result, source_partner_id, source_partner_code)

        if result.status == RunStatus.COMPLETED:
            self.logger.bind(**record).info(
                f"Commission run completed for transaction {result.transaction_id}: "
                f"{result.records_created} created, "
                f"{result.records_already_present} already present, "
                f"total {result.total_commission_amount}"
            )
        else:
            self.logger.bind(**record).error(
                f"Commission run failed for transaction {result.transaction_id}: "
                f"{'; '.join(result.errors)}"
            )
        return record
