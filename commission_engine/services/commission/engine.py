"""
Commission engine.

Orchestrates one run per transaction event: validate, resolve the upline,
calculate every ancestor, persist idempotently, then commit everything or
nothing. Every run ends with an audit record.
"""

import asyncio
import time
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.services.base_service import BaseService
from commission_engine.services.commission.audit import CommissionAuditLogger
from commission_engine.services.commission.calculator import CommissionCalculator
from commission_engine.services.commission.config import CommissionEngineConfig
from commission_engine.services.commission.ledger_writer import IdempotentLedgerWriter
from commission_engine.services.commission.partner_directory import PartnerDirectory
from commission_engine.services.commission.schemas import (
    CommissionLine,
    CommissionRunResult,
    PartnerSnapshot,
    RunStatus,
    TransactionEvent,
    UplineAncestor,
)
from commission_engine.services.commission.upline_resolver import UplineResolver
from commission_engine.utils.exceptions import (
    CommissionEngineError,
    classify_exception,
)
from commission_engine.validators.transaction import validate_transaction_event


@dataclass
class _RunState:
    result: CommissionRunResult
    source: PartnerSnapshot | None = None


class CommissionEngine(BaseService):
    """
    Commission engine orchestrator.

    The session's transaction is the unit of work: the engine commits it
    only when every qualifying ancestor was written, and rolls it back on
    any failure or timeout.
    """

    def __init__(
        self,
        session: AsyncSession,
        config: CommissionEngineConfig | None = None,
    ) -> None:
        """
        Initialize commission engine.

        Args:
            session: Async database session, used for exactly one run at a time
            config: Engine configuration (defaults to settings)
        """
        super().__init__(session)
        self.config = config or CommissionEngineConfig.from_settings()
        self.directory = PartnerDirectory(session)
        self.resolver = UplineResolver(self.directory)
        self.calculator = CommissionCalculator()
        self.writer = IdempotentLedgerWriter(
            session, self.directory, self.config.engine_version
        )
        self.audit = CommissionAuditLogger(self.config.engine_version)

    async def process(self, event: TransactionEvent) -> CommissionRunResult:
        """
        Process one transaction event.

        Expected failures (invalid input, bad directory data, transient store
        errors, timeout) are reported in the result, never raised.

        Args:
            event: Transaction event

        Returns:
            CommissionRunResult with status COMPLETED or FAILED
        """
        started = time.monotonic()
        state = _RunState(
            result=CommissionRunResult(
                success=False,
                transaction_id=event.transaction_id,
                tenant_id=event.tenant_id,
            )
        )
        result = state.result
        unexpected: Exception | None = None

        try:
            async with asyncio.timeout(self.config.run_timeout_seconds):
                await self._run(event, state)
        except TimeoutError:
            self._fail(
                result,
                [f"Commission run timed out after {self.config.run_timeout_seconds}s"],
                retryable=True,
            )
        except CommissionEngineError as e:
            self._fail(result, [str(e)], retryable=e.retryable)
        except SQLAlchemyError as e:
            category, retryable = classify_exception(e)
            self._fail(result, [f"{category} database error: {e}"], retryable=retryable)
        except Exception as e:
            self.logger.bind(transaction_id=event.transaction_id).exception(
                "Unexpected error processing commission run"
            )
            self._fail(result, [f"Unexpected error: {e}"], retryable=False)
            unexpected = e

        await self._finish(result)

        result.duration_ms = (time.monotonic() - started) * 1000
        self.audit.emit(
            result,
            source_partner_id=event.source_partner_id,
            source_partner_code=state.source.code if state.source else None,
        )

        if unexpected is not None:
            raise unexpected
        return result

    async def _run(self, event: TransactionEvent, state: _RunState) -> None:
        result = state.result
        tenant_id = event.tenant_id

        errors = validate_transaction_event(event)
        if errors:
            self._fail(result, errors, retryable=False)
            return

        if not await self.directory.tenant_exists(tenant_id):
            self._fail(result, [f"Unknown tenant {tenant_id}"], retryable=False)
            return

        state.source = await self.directory.get_partner(tenant_id, event.source_partner_id)
        if state.source is None:
            self._fail(
                result,
                [f"Unknown source partner {event.source_partner_id}"],
                retryable=False,
            )
            return

        result.status = RunStatus.RESOLVING_UPLINE
        ancestors = await self.resolver.resolve(
            tenant_id, event.source_partner_id, self.config.max_global_depth
        )
        result.ancestors_processed = len(ancestors)

        if not ancestors:
            self.logger.info(
                "No eligible ancestors",
                extra={
                    "tenant_id": str(tenant_id),
                    "transaction_id": event.transaction_id,
                    "source_partner": state.source.code,
                },
            )
            result.status = RunStatus.COMPLETED
            return

        result.status = RunStatus.CALCULATING
        lines, errors = self._calculate(event, ancestors)
        result.lines = lines
        if errors:
            self._fail(result, errors, retryable=False)
            return

        result.status = RunStatus.PERSISTING
        await self._persist(event, state.source, ancestors, result)

        if result.errors:
            result.status = RunStatus.FAILED
            return
        result.status = RunStatus.COMPLETED

    def _calculate(
        self, event: TransactionEvent, ancestors: list[UplineAncestor]
    ) -> tuple[list[CommissionLine], list[str]]:
        lines: list[CommissionLine] = []
        errors: list[str] = []

        for ancestor in ancestors:
            amount, error = self.calculator.calculate(event.amount, ancestor.rate)
            if error:
                errors.append(
                    f"{ancestor.code} level {ancestor.levels_from_source}: {error}"
                )
                continue
            lines.append(
                CommissionLine(
                    beneficiary_partner_id=ancestor.partner_id,
                    beneficiary_code=ancestor.code,
                    levels_from_source=ancestor.levels_from_source,
                    rate=ancestor.rate,
                    amount=amount,
                )
            )
        return lines, errors

    async def _persist(
        self,
        event: TransactionEvent,
        source: PartnerSnapshot,
        ancestors: list[UplineAncestor],
        result: CommissionRunResult,
    ) -> None:
        total = Decimal("0.00")

        for ancestor, line in zip(ancestors, result.lines):
            if line.amount == 0 and not self.config.record_zero_amounts:
                continue

            try:
                written = await self.writer.write(
                    event.tenant_id, event, ancestor, source, line.amount
                )
            except (CommissionEngineError, SQLAlchemyError) as e:
                # Keep going so the result lists every failing ancestor
                _, retryable = classify_exception(e)
                result.retryable = result.retryable or retryable
                result.errors.append(
                    f"{ancestor.code} level {ancestor.levels_from_source}: {e}"
                )
                continue

            line.record_id = written.record_id
            line.was_newly_created = written.was_newly_created
            total += written.commission_amount
            if written.was_newly_created:
                result.records_created += 1
            else:
                result.records_already_present += 1

        result.total_commission_amount = total

    async def _finish(self, result: CommissionRunResult) -> None:
        if result.status == RunStatus.COMPLETED:
            try:
                await self.commit()
                result.success = True
                return
            except SQLAlchemyError as e:
                category, retryable = classify_exception(e)
                self._fail(result, [f"Commit failed ({category}): {e}"], retryable=retryable)

        # Nothing from a failed run may stay visible
        result.success = False
        self._discard_partial_counts(result)
        try:
            await self.rollback()
        except Exception as rollback_error:
            self.logger.bind(
                transaction_id=result.transaction_id,
                rollback_error=repr(rollback_error),
            ).opt(exception=True).error("Failed to rollback commission run")

    @staticmethod
    def _discard_partial_counts(result: CommissionRunResult) -> None:
        result.records_created = 0
        result.records_already_present = 0
        result.total_commission_amount = Decimal("0.00")
        for line in result.lines:
            line.record_id = None
            line.was_newly_created = False

    def _fail(
        self, result: CommissionRunResult, errors: list[str], retryable: bool
    ) -> None:
        result.status = RunStatus.FAILED
        result.success = False
        result.errors.extend(errors)
        result.retryable = result.retryable or retryable
        # Bound, not formatted: transaction ids are caller text and may hold braces
        self.logger.bind(
            transaction_id=result.transaction_id,
            tenant_id=str(result.tenant_id),
            errors=errors,
            retryable=retryable,
        ).warning("Commission run failed")
