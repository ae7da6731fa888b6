"""Domain models for the BESS signal engine."""

from bess_signals.domain.models import (
    HistoryEntry,
    IrrComparison,
    MarketComparisonRow,
    Percentiles,
    ReadResult,
    RevenueInputs,
    RevenueResult,
    ServingTier,
    SignalHealth,
    WriteOutcome,
)

__all__ = [
    "ServingTier",
    "IrrComparison",
    "ReadResult",
    "WriteOutcome",
    "SignalHealth",
    "HistoryEntry",
    "Percentiles",
    "RevenueInputs",
    "RevenueResult",
    "MarketComparisonRow",
]
