"""Upstream collectors producing one signal observation per run."""

from bess_signals.collectors.base import (
    FetchError,
    FetchOutcome,
    UpstreamCollector,
)
from bess_signals.collectors.entsoe import EntsoeDayAheadCollector

__all__ = [
    "FetchError",
    "FetchOutcome",
    "UpstreamCollector",
    "EntsoeDayAheadCollector",
]
