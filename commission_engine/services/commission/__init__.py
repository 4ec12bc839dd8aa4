"""
Commission services package.

Contains the modules of the commission engine:
- config: Engine configuration (depth ceiling, zero-amount policy, timeout)
- schemas: Transaction event and result shapes
- partner_directory: Read-only partner / tier / edge lookups
- upline_resolver: Breadth-first upline traversal
- calculator: Rounded commission arithmetic
- ledger_writer: Idempotent commission record writes
- engine: Orchestrator
- audit: Per-run audit records
- query_manager: Commission queries
- statistics: Partner statistics
"""

from commission_engine.services.commission.audit import CommissionAuditLogger
from commission_engine.services.commission.calculator import CommissionCalculator
from commission_engine.services.commission.config import CommissionEngineConfig
from commission_engine.services.commission.engine import CommissionEngine
from commission_engine.services.commission.ledger_writer import IdempotentLedgerWriter
from commission_engine.services.commission.partner_directory import PartnerDirectory
from commission_engine.services.commission.query_manager import CommissionQueryManager
from commission_engine.services.commission.schemas import (
    CommissionLine,
    CommissionRunResult,
    LedgerWriteResult,
    PartnerSnapshot,
    RunStatus,
    TransactionEvent,
    UplineAncestor,
)
from commission_engine.services.commission.statistics import (
    CommissionStatisticsManager,
)
from commission_engine.services.commission.upline_resolver import UplineResolver


__all__ = [
    # Configuration
    "CommissionEngineConfig",
    # Engine parts
    "CommissionEngine",
    "CommissionCalculator",
    "IdempotentLedgerWriter",
    "PartnerDirectory",
    "UplineResolver",
    "CommissionAuditLogger",
    # Queries
    "CommissionQueryManager",
    "CommissionStatisticsManager",
    # Shapes
    "TransactionEvent",
    "CommissionRunResult",
    "CommissionLine",
    "LedgerWriteResult",
    "PartnerSnapshot",
    "UplineAncestor",
    "RunStatus",
]
