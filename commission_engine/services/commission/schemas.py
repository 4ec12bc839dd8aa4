"""
Commission engine data shapes.

Inbound transaction event (pydantic, accepts camelCase payloads) and the
dataclasses passed between resolver, calculator, writer and engine.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from commission_engine.models.enums import TransactionType
from commission_engine.utils.datetime_utils import utc_now


class RunStatus(str, Enum):
    """States of one engine run. Only COMPLETED and FAILED are terminal."""

    STARTED = "started"
    RESOLVING_UPLINE = "resolving_upline"
    CALCULATING = "calculating"
    PERSISTING = "persisting"
    COMPLETED = "completed"
    FAILED = "failed"


class TransactionEvent(BaseModel):
    """Completed transaction attributed to a referring partner.

    Emitted once upstream after payment confirmation, delivered at least
    once. The engine never mutates it.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    tenant_id: uuid.UUID = Field(..., alias="tenantId", description="Owning tenant")
    transaction_id: str = Field(
        ..., alias="transactionId", description="Unique per tenant"
    )
    source_partner_id: uuid.UUID = Field(
        ..., alias="sourcePartnerId", description="Partner credited with the sale"
    )
    amount: Decimal = Field(..., description="Transaction amount, must be positive")
    currency: str = Field(default="USD", description="Currency or unit code")
    transaction_type: TransactionType = Field(
        default=TransactionType.PAYMENT, alias="type"
    )
    occurred_at: datetime = Field(default_factory=utc_now, alias="occurredAt")
    metadata: dict[str, Any] = Field(default_factory=dict)


@dataclass
class PartnerSnapshot:
    """Partner plus the tier values read at calculation time."""

    partner_id: uuid.UUID
    code: str
    status: str
    tier_id: uuid.UUID
    tier_name: str
    tier_rate: Decimal
    tier_min_rate: Decimal
    tier_max_rate: Decimal
    tier_max_depth: int
    rate: Decimal
    has_rate_override: bool = False
    sponsor_id: uuid.UUID | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"


@dataclass
class UplineAncestor:
    """Ancestor eligible to earn from a sale ``levels_from_source`` hops away."""

    partner_id: uuid.UUID
    code: str
    tier_id: uuid.UUID
    tier_name: str
    rate: Decimal
    tier_rate: Decimal
    tier_max_depth: int
    levels_from_source: int


@dataclass
class LedgerWriteResult:
    """Outcome of one idempotent ledger write."""

    record_id: uuid.UUID
    was_newly_created: bool
    commission_amount: Decimal


@dataclass
class CommissionLine:
    """One beneficiary's commission within a run."""

    beneficiary_partner_id: uuid.UUID
    beneficiary_code: str
    levels_from_source: int
    rate: Decimal
    amount: Decimal
    record_id: uuid.UUID | None = None
    was_newly_created: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "beneficiaryPartnerId": str(self.beneficiary_partner_id),
            "beneficiaryCode": self.beneficiary_code,
            "levelsFromSource": self.levels_from_source,
            "rate": str(self.rate),
            "amount": str(self.amount),
            "recordId": str(self.record_id) if self.record_id else None,
            "wasNewlyCreated": self.was_newly_created,
        }


@dataclass
class CommissionRunResult:
    """Result of processing one transaction event."""

    success: bool
    transaction_id: str
    tenant_id: uuid.UUID | None = None
    status: RunStatus = RunStatus.STARTED
    records_created: int = 0
    records_already_present: int = 0
    total_commission_amount: Decimal = Decimal("0.00")
    ancestors_processed: int = 0
    errors: list[str] = field(default_factory=list)
    retryable: bool = False
    lines: list[CommissionLine] = field(default_factory=list)
    duration_ms: float = 0.0

    def to_payload(self) -> dict[str, Any]:
        """Outbound engine result, JSON-safe."""
        return {
            "success": self.success,
            "transactionId": self.transaction_id,
            "status": self.status.value,
            "recordsCreated": self.records_created,
            "recordsAlreadyPresent": self.records_already_present,
            "totalCommissionAmount": str(self.total_commission_amount),
            "errors": list(self.errors),
            "retryable": self.retryable,
            "commissions": [line.to_payload() for line in self.lines],
        }
