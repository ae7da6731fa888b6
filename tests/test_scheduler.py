"""Tests for the refresh scheduler.

Tests cover:
- Partial upstream failure (some collectors time out)
- Rejected writes with operator alerts
- History appends for tracked signals
- Revenue snapshot refresh after successful writes
- Store failures confined to the signal being committed
"""

from __future__ import annotations

import asyncio

import pytest

from bess_signals.collectors.base import FetchError
from bess_signals.domain.models import ServingTier
from bess_signals.revenue.snapshot import SNAPSHOT_KEY, RevenueSnapshotCache
from bess_signals.scheduler import Scheduler
from bess_signals.signals.cache import SignalCache
from bess_signals.signals.history import HistoryTracker, history_key
from bess_signals.signals.store import InMemoryStore

from conftest import FakeClock, RecordingNotifier, StaticCollector


def timed(clock: FakeClock, record: dict) -> dict:
    return {**record, "timestamp": clock().isoformat()}


class TestRunOnce:
    """Tests for a single scheduler run."""

    @pytest.mark.asyncio
    async def test_partial_failure(
        self,
        cache: SignalCache,
        history: HistoryTracker,
        clock: FakeClock,
        notifier: RecordingNotifier,
        s1_record: dict,
        s2_record: dict,
    ) -> None:
        """Two timeouts out of five leave the other three written."""
        cache.write_signal("s9", timed(clock, {"eua_eur_t": 70.0}))
        previous_s9 = cache.store.get("s9")

        collectors = [
            StaticCollector("s1", s1_record),
            StaticCollector("s2", s2_record),
            StaticCollector("s7", timed(clock, {"ttf_eur_mwh": 31.0})),
            StaticCollector("s6", {"fill_pct": 60.0}, delay_seconds=1.0, timeout_seconds=0.05),
            StaticCollector("s9", {"eua_eur_t": 90.0}, delay_seconds=1.0, timeout_seconds=0.05),
        ]
        scheduler = Scheduler(cache, history, collectors, notifier=notifier)
        report = await scheduler.run_once()

        assert sorted(report.written) == ["s1", "s2", "s7"]
        assert sorted(report.failed) == ["static-s6", "static-s9"]
        assert report.rejected == {}
        assert report.success_count == 3

        for key in ("s1", "s2", "s7"):
            assert cache.read(key).tier == ServingTier.LIVE
        assert cache.read("s6").tier == ServingTier.DEFAULT
        assert cache.store.get("s9") == previous_s9
        assert notifier.messages == []

    @pytest.mark.asyncio
    async def test_rejection_alerts(
        self,
        cache: SignalCache,
        history: HistoryTracker,
        notifier: RecordingNotifier,
        s2_record: dict,
    ) -> None:
        """An out-of-bounds observation is rejected and alerted."""
        scheduler = Scheduler(
            cache,
            history,
            [StaticCollector("s2", {**s2_record, "afrr_up_avg": 99999.0})],
            notifier=notifier,
        )
        report = await scheduler.run_once()
        await scheduler.drain_alerts()

        assert report.written == []
        assert "s2" in report.rejected
        assert cache.store.get("s2") is None
        assert len(notifier.messages) == 1
        assert "[s2]" in notifier.messages[0]
        assert "afrr_up_avg" in notifier.messages[0]

    @pytest.mark.asyncio
    async def test_history_appended(
        self,
        cache: SignalCache,
        history: HistoryTracker,
        s1_record: dict,
    ) -> None:
        """Tracked fields are appended to the day's history."""
        scheduler = Scheduler(cache, history, [StaticCollector("s1", s1_record)])
        await scheduler.run_once()
        await scheduler.run_once()

        entries = history.entries("s1")
        assert len(entries) == 1
        assert entries[0].day.isoformat() == "2026-02-10"
        assert entries[0].values == {
            "spread_eur_mwh": 15.1,
            "separation_pct": 18.9,
            "lt_daily_swing_eur_mwh": 140.0,
        }

    @pytest.mark.asyncio
    async def test_untracked_signal_has_no_history(
        self, cache: SignalCache, history: HistoryTracker
    ) -> None:
        """Signals without history fields only update the cache."""
        scheduler = Scheduler(cache, history, [StaticCollector("s5", {"signal": "OPEN"})])
        await scheduler.run_once()
        assert history.entries("s5") == []

    @pytest.mark.asyncio
    async def test_revenue_refreshed_after_write(
        self,
        cache: SignalCache,
        history: HistoryTracker,
        s2_record: dict,
    ) -> None:
        """A successful write refreshes the revenue snapshot."""
        revenue = RevenueSnapshotCache(cache)
        revenue.get()

        scheduler = Scheduler(
            cache, history, [StaticCollector("s2", s2_record)], revenue=revenue
        )
        await scheduler.run_once()
        assert revenue.get().inputs_used.afrr_up_avg == 72.0

    @pytest.mark.asyncio
    async def test_no_refresh_when_nothing_written(
        self, cache: SignalCache, history: HistoryTracker
    ) -> None:
        """All sources failing leaves the snapshot alone."""
        revenue = RevenueSnapshotCache(cache)
        scheduler = Scheduler(
            cache,
            history,
            [StaticCollector("s2", error=FetchError("test", "down"))],
            revenue=revenue,
        )
        report = await scheduler.run_once()
        assert report.failed == {"static-s2": "down"}
        assert cache.store.get(SNAPSHOT_KEY) is None


class FailingPutStore(InMemoryStore):
    """In-memory store whose writes fail for selected keys."""

    def __init__(self, failing_keys: set[str], clock: FakeClock) -> None:
        super().__init__(clock=clock)
        self.failing_keys = failing_keys

    def put(self, key: str, value: str, ttl_seconds: float | None = None) -> None:
        if key in self.failing_keys:
            raise OSError("disk full")
        super().put(key, value, ttl_seconds=ttl_seconds)


class TestCommitIsolation:
    """Store failures while committing stay confined to one signal."""

    @pytest.mark.asyncio
    async def test_store_failure_does_not_block_others(
        self, clock: FakeClock, s1_record: dict, s2_record: dict
    ) -> None:
        """A failing write for s1 still lets s2 commit and refresh revenue."""
        store = FailingPutStore({"s1"}, clock)
        cache = SignalCache(store, clock=clock)
        history = HistoryTracker(store)
        revenue = RevenueSnapshotCache(cache)
        scheduler = Scheduler(
            cache,
            history,
            [StaticCollector("s1", s1_record), StaticCollector("s2", s2_record)],
            revenue=revenue,
        )

        report = await scheduler.run_once()

        assert report.written == ["s2"]
        assert "disk full" in report.failed["static-s1"]
        assert cache.read("s2").tier == ServingTier.LIVE
        assert cache.read("s1").tier == ServingTier.DEFAULT
        assert store.get(SNAPSHOT_KEY) is not None

    @pytest.mark.asyncio
    async def test_history_failure_keeps_write(
        self, clock: FakeClock, s1_record: dict, s2_record: dict
    ) -> None:
        """A failing history write is reported; the signal itself is committed."""
        store = FailingPutStore({history_key("s1")}, clock)
        cache = SignalCache(store, clock=clock)
        scheduler = Scheduler(
            cache,
            HistoryTracker(store),
            [StaticCollector("s1", s1_record), StaticCollector("s2", s2_record)],
        )

        report = await scheduler.run_once()

        assert report.written == ["s1", "s2"]
        assert "static-s1" in report.failed
        assert cache.read("s1").tier == ServingTier.LIVE
        assert HistoryTracker(store).entries("s2") != []


class TestRunForever:
    """Tests for the periodic loop."""

    @pytest.mark.asyncio
    async def test_stops_on_event(self, cache: SignalCache, history: HistoryTracker) -> None:
        """The loop runs until the stop event is set."""
        collector = StaticCollector("s5", {"signal": "OPEN"})
        scheduler = Scheduler(cache, history, [collector])
        stop = asyncio.Event()

        task = asyncio.create_task(scheduler.run_forever(0.01, stop_event=stop))
        await asyncio.sleep(0.1)
        stop.set()
        await asyncio.wait_for(task, timeout=1.0)

        assert collector.calls >= 2
