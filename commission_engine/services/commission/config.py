"""
Commission engine configuration.

Per-run knobs read from settings. Tests and callers may build their own.
"""

from dataclasses import dataclass

from commission_engine.config.settings import Settings, settings


@dataclass(frozen=True)
class CommissionEngineConfig:
    """Runtime configuration of one CommissionEngine."""

    # Platform ceiling on hops walked, regardless of tier depths
    max_global_depth: int = 10
    # Persist zero-amount lines so the audit trail lists every qualifying ancestor
    record_zero_amounts: bool = True
    run_timeout_seconds: float = 30.0
    engine_version: str = "1.0"

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "CommissionEngineConfig":
        source = source or settings
        return cls(
            max_global_depth=source.commission_max_global_depth,
            record_zero_amounts=source.commission_record_zero_amounts,
            run_timeout_seconds=source.commission_run_timeout_seconds,
            engine_version=source.commission_engine_version,
        )
