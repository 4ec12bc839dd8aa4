"""
Exception handling utilities.

Defines categorized exception types for commission processing and a helper
that maps arbitrary exceptions onto those categories.
"""

import asyncio

from sqlalchemy.exc import DBAPIError, OperationalError


class CommissionEngineError(Exception):
    """Base class for commission engine errors."""

    category = "internal"
    retryable = False


class InvalidTransactionError(CommissionEngineError):
    """Raised when a transaction event fails validation. Caller must fix it."""

    category = "validation"
    retryable = False


class UpstreamDataError(CommissionEngineError):
    """
    Raised when partner directory data is inconsistent.

    Dangling sponsor references, missing tiers, out-of-range rate
    overrides. Safe to re-run once the data is fixed, but not retried
    automatically.
    """

    category = "upstream_data"
    retryable = False


class TenantIsolationError(UpstreamDataError):
    """Raised when a record would reference another tenant's partner."""

    category = "tenant_isolation"


class TransientPersistenceError(CommissionEngineError):
    """Raised on store unavailability, lock contention or timeout."""

    category = "transient"
    retryable = True


# Exception categories based on handling strategy

TRANSIENT_ERRORS = (
    OperationalError,  # Connection loss, database locked, serialization
    TimeoutError,
    asyncio.TimeoutError,
    TransientPersistenceError,
)


def is_transient(exc: BaseException) -> bool:
    """
    Check if exception is transient and the run may be retried as-is.

    Args:
        exc: Exception to check

    Returns:
        True if re-invoking with the identical event may succeed
    """
    if isinstance(exc, TRANSIENT_ERRORS):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return False


def classify_exception(exc: BaseException) -> tuple[str, bool]:
    """
    Classify exception for reporting.

    Args:
        exc: Exception to classify

    Returns:
        Tuple of (category, retryable)
    """
    if isinstance(exc, CommissionEngineError):
        return exc.category, exc.retryable
    if is_transient(exc):
        return TransientPersistenceError.category, True
    return CommissionEngineError.category, False
