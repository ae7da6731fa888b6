"""Cached revenue snapshot.

The projection is cheap but its inputs change slowly, so the full snapshot
(inputs, per-duration results, market ranking) is stored with a TTL and
recomputed only when it expires or a scheduler run refreshes it.
"""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict, ValidationError

from bess_signals.domain.models import MarketComparisonRow, RevenueInputs, RevenueResult
from bess_signals.revenue.inputs import revenue_inputs_from_cache
from bess_signals.revenue.markets import rank_markets
from bess_signals.revenue.model import compute_all_durations
from bess_signals.signals.cache import SignalCache

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "revenue:snapshot"
DEFAULT_CACHE_HOURS = 6.0


class RevenueSnapshot(BaseModel):
    """Everything the revenue endpoint serves."""

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    updated_at: datetime
    inputs_used: RevenueInputs
    results_per_duration: dict[int, RevenueResult]
    market_ranking: list[MarketComparisonRow]


def build_snapshot(cache: SignalCache) -> RevenueSnapshot:
    """Compute a fresh snapshot from the current cached signals."""
    inputs = revenue_inputs_from_cache(cache)
    return RevenueSnapshot(
        updated_at=cache.now(),
        inputs_used=inputs,
        results_per_duration=compute_all_durations(inputs),
        market_ranking=rank_markets(inputs),
    )


class RevenueSnapshotCache:
    """TTL-cached revenue snapshot stored alongside the signals."""

    def __init__(self, cache: SignalCache, cache_hours: float = DEFAULT_CACHE_HOURS) -> None:
        self.cache = cache
        self.cache_hours = cache_hours

    def refresh(self) -> RevenueSnapshot:
        """Recompute and store the snapshot."""
        snapshot = build_snapshot(self.cache)
        self.cache.store.put(
            SNAPSHOT_KEY,
            snapshot.model_dump_json(),
            ttl_seconds=self.cache_hours * 3600,
        )
        logger.info("revenue snapshot refreshed")
        return snapshot

    def get(self) -> RevenueSnapshot:
        """Return the cached snapshot, recomputing if absent or unreadable."""
        raw = self.cache.store.get(SNAPSHOT_KEY)
        if raw is not None:
            try:
                return RevenueSnapshot.model_validate_json(raw)
            except ValidationError as e:
                logger.error(f"revenue snapshot unreadable, recomputing: {e}")
        return self.refresh()
