"""Tests for the cross-market ranking and the revenue snapshot cache."""

from __future__ import annotations

import json
import math

from bess_signals.domain.models import RevenueInputs
from bess_signals.revenue.benchmarks import REFERENCE_MARKETS, ReferenceMarket
from bess_signals.revenue.markets import market_inputs, rank_markets
from bess_signals.revenue.model import compute_revenue
from bess_signals.revenue.snapshot import SNAPSHOT_KEY, RevenueSnapshotCache
from bess_signals.signals.cache import SignalCache

from conftest import FakeClock


class TestRankMarkets:
    """Tests for rank_markets."""

    def test_sorted_by_irr(self, baseline_inputs: RevenueInputs) -> None:
        """Rows are ordered by IRR, highest first."""
        rows = rank_markets(baseline_inputs)
        assert len(rows) == len(REFERENCE_MARKETS)
        irrs = [row.irr_pct for row in rows]
        assert irrs == sorted(irrs, reverse=True)

    def test_only_live_market_is_computed(self, baseline_inputs: RevenueInputs) -> None:
        """Lithuania uses the computed 2h IRR; others use published IRRs."""
        rows = {row.country: row for row in rank_markets(baseline_inputs)}
        assert [c for c, r in rows.items() if r.is_live] == ["Lithuania"]
        assert rows["Lithuania"].irr_pct == compute_revenue(baseline_inputs, 2).irr_pct
        assert rows["Great Britain"].irr_pct == 12
        assert rows["Great Britain"].capex_per_mw == 580_000.0

    def test_missing_prices_use_live_inputs(self, baseline_inputs: RevenueInputs) -> None:
        """Unpublished prices are taken from the live inputs."""
        partial = ReferenceMarket(
            country="Testland",
            flag="",
            capex_per_mw=500_000.0,
            note="",
            afrr_up_eur_mwh=10.0,
        )
        inputs = market_inputs(partial, baseline_inputs)
        assert inputs.afrr_up_avg == 10.0
        assert inputs.mfrr_up_avg == baseline_inputs.mfrr_up_avg
        assert inputs.daily_swing_eur_mwh == baseline_inputs.daily_swing_eur_mwh


class TestRevenueSnapshotCache:
    """Tests for the TTL-cached revenue snapshot."""

    def test_get_computes_and_stores(self, cache: SignalCache) -> None:
        """The first read computes and persists the snapshot."""
        snapshots = RevenueSnapshotCache(cache, cache_hours=6)
        snapshot = snapshots.get()
        assert sorted(snapshot.results_per_duration) == [2, 4]
        assert cache.store.get(SNAPSHOT_KEY) is not None

    def test_cached_until_expiry(
        self, cache: SignalCache, clock: FakeClock, s2_record: dict
    ) -> None:
        """New signals show up only after the TTL or an explicit refresh."""
        snapshots = RevenueSnapshotCache(cache, cache_hours=6)
        first = snapshots.get()

        cache.write_signal("s2", {**s2_record, "timestamp": clock().isoformat()})
        clock.advance(hours=1)
        assert snapshots.get().inputs_used == first.inputs_used

        clock.advance(hours=6)
        assert snapshots.get().inputs_used.afrr_up_avg == 72.0

    def test_infinite_payback_round_trips(self, cache: SignalCache) -> None:
        """A never-paying project survives JSON storage."""
        now = cache.now().isoformat()
        dead_market = {
            "s1": {
                "lt_avg_eur_mwh": 50.0,
                "se4_avg_eur_mwh": 50.0,
                "spread_eur_mwh": 0.0,
                "lt_daily_swing_eur_mwh": 0.0,
            },
            "s2": {"afrr_up_avg": 0.0, "mfrr_up_avg": 0.0},
        }
        for key, record in dead_market.items():
            assert cache.write_signal(key, {**record, "timestamp": now}).success

        snapshots = RevenueSnapshotCache(cache)
        snapshots.refresh()
        loaded = snapshots.get()
        assert math.isinf(loaded.results_per_duration[2].simple_payback_years)

    def test_corrupt_snapshot_recomputed(self, cache: SignalCache) -> None:
        """An unreadable stored snapshot is replaced."""
        cache.store.put(SNAPSHOT_KEY, json.dumps({"bogus": True}))
        snapshot = RevenueSnapshotCache(cache).get()
        assert snapshot.results_per_duration
