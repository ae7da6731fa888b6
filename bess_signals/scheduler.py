"""
Periodic signal refresh.

Each run fans out to all collectors in parallel (each under its own
timeout), then handles every outcome independently:

- fetch failure: log and skip; the previous record stays and ages into
  ``stale``
- validation failure: rejected write plus a fire-and-forget operator alert
- success: validated write, then the day's history entry
- store failure while committing: logged and reported for that signal
  only; the remaining outcomes are still committed

There is no cross-signal transaction. A run that updates some signals and
fails others leaves the system valid, just partially stale. When anything
was written, the revenue snapshot is refreshed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from bess_signals.collectors.base import FetchOutcome, UpstreamCollector
from bess_signals.notify import LogNotifier, Notifier, rejection_message
from bess_signals.revenue.snapshot import RevenueSnapshotCache
from bess_signals.signals.cache import SignalCache
from bess_signals.signals.history import HistoryTracker

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    """Summary of one scheduler run.

    Attributes:
        started_at: Run start time.
        written: Signal keys committed.
        rejected: Signal key to validation errors.
        failed: Collector name to failure message.
        finished_at: Run end time.
    """

    started_at: datetime
    written: list[str] = field(default_factory=list)
    rejected: dict[str, list[str]] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)
    finished_at: datetime | None = None

    @property
    def success_count(self) -> int:
        """Number of signals written."""
        return len(self.written)


class Scheduler:
    """Drives collectors on a fixed cadence and writes through the cache."""

    def __init__(
        self,
        cache: SignalCache,
        history: HistoryTracker,
        collectors: Sequence[UpstreamCollector],
        notifier: Notifier | None = None,
        revenue: RevenueSnapshotCache | None = None,
    ) -> None:
        self.cache = cache
        self.history = history
        self.collectors = list(collectors)
        self.notifier = notifier or LogNotifier()
        self.revenue = revenue
        self._pending_alerts: set[asyncio.Task] = set()

    def _alert(self, message: str) -> None:
        # Fire-and-forget; the notifier never raises
        task = asyncio.create_task(self.notifier.notify(message))
        self._pending_alerts.add(task)
        task.add_done_callback(self._pending_alerts.discard)

    async def drain_alerts(self) -> None:
        """Wait for outstanding alerts (used at shutdown and in tests)."""
        if self._pending_alerts:
            await asyncio.gather(*self._pending_alerts, return_exceptions=True)

    def _handle(self, outcome: FetchOutcome, report: BatchReport) -> None:
        if not outcome.ok:
            message = outcome.error.message if outcome.error else "no observation"
            report.failed[outcome.collector] = message
            return

        key = outcome.signal_key
        result = self.cache.write_signal(key, outcome.observation)
        if not result.success:
            report.rejected[key] = result.errors
            self._alert(rejection_message(key, result.errors))
            return

        report.written.append(key)
        self.history.record(key, outcome.observation, self.cache.now().date())

    async def run_once(self) -> BatchReport:
        """Run every collector once and commit what succeeded."""
        report = BatchReport(started_at=self.cache.now())

        results = await asyncio.gather(
            *(collector.collect() for collector in self.collectors),
            return_exceptions=True,
        )
        for collector, result in zip(self.collectors, results, strict=True):
            if isinstance(result, BaseException):
                # collect() does not raise; guard against subclasses that override it
                report.failed[collector.name] = str(result)
                continue
            try:
                self._handle(result, report)
            except Exception as e:
                logger.exception(f"Failed to commit {result.signal_key} from {collector.name}")
                report.failed[collector.name] = f"{type(e).__name__}: {e}"

        if report.written and self.revenue is not None:
            self.revenue.refresh()

        report.finished_at = self.cache.now()
        logger.info(
            f"Scheduler run: {len(report.written)} written, "
            f"{len(report.rejected)} rejected, {len(report.failed)} failed"
        )
        return report

    async def run_forever(
        self,
        interval_seconds: float,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        """Run on a fixed cadence until ``stop_event`` is set or cancelled."""
        stop = stop_event or asyncio.Event()
        while not stop.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval_seconds)
            except asyncio.TimeoutError:
                continue
        await self.drain_alerts()
