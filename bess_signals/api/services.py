"""Service layer wiring the store, cache, history and revenue snapshot.

Routes depend on ``get_service`` so tests can substitute a service built on
an in-memory store via ``app.dependency_overrides``.
"""

from __future__ import annotations

import hmac
import logging
from functools import lru_cache
from typing import Any

from bess_signals.collectors.base import UpstreamCollector
from bess_signals.collectors.entsoe import EntsoeDayAheadCollector
from bess_signals.config import Settings, get_settings
from bess_signals.domain.models import Percentiles, ReadResult, SignalHealth, WriteOutcome
from bess_signals.notify import LogNotifier, Notifier, TelegramNotifier
from bess_signals.revenue.snapshot import RevenueSnapshot, RevenueSnapshotCache
from bess_signals.scheduler import Scheduler
from bess_signals.signals.cache import SignalCache
from bess_signals.signals.history import HistoryTracker
from bess_signals.signals.registry import known_signal_keys
from bess_signals.signals.store import Clock, KeyValueStore, create_store, utc_now

logger = logging.getLogger(__name__)


class SignalService:
    """Signal reads, manual writes, history and revenue for the API."""

    def __init__(
        self,
        store: KeyValueStore,
        write_secret: str = "",
        history_max_entries: int = 90,
        revenue_cache_hours: float = 6.0,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the service.

        Args:
            store: Durable key-value store shared by all components.
            write_secret: Shared secret for manual writes; empty disables them.
            history_max_entries: History window per signal.
            revenue_cache_hours: Revenue snapshot TTL.
            clock: Time source.
        """
        self.store = store
        self.write_secret = write_secret
        self.cache = SignalCache(store, clock=clock)
        self.history = HistoryTracker(store, max_entries=history_max_entries)
        self.revenue = RevenueSnapshotCache(self.cache, cache_hours=revenue_cache_hours)

    @classmethod
    def from_settings(cls, settings: Settings) -> SignalService:
        """Build a service from application settings."""
        return cls(
            store=create_store(settings.DATABASE_URL),
            write_secret=settings.SIGNAL_WRITE_SECRET,
            history_max_entries=settings.HISTORY_MAX_ENTRIES,
            revenue_cache_hours=settings.REVENUE_CACHE_HOURS,
        )

    def is_known(self, key: str) -> bool:
        """Whether ``key`` is a registered signal."""
        return key in known_signal_keys()

    def authorize(self, provided: str | None) -> bool:
        """Check a caller-supplied write secret.

        Writes are refused outright when no server secret is configured.
        """
        if not self.write_secret or not provided:
            return False
        return hmac.compare_digest(provided.encode(), self.write_secret.encode())

    def read_signal(self, key: str) -> ReadResult:
        return self.cache.read(key)

    def write_signal(self, key: str, record: dict[str, Any]) -> WriteOutcome:
        """Validated manual write.

        On success the override joins the day's history window and the
        revenue snapshot is refreshed.
        """
        stamped = {**record, "_source": "manual"}
        outcome = self.cache.write_signal(key, stamped)
        if outcome.success:
            self.history.record(key, stamped, self.cache.now().date())
            self.revenue.refresh()
        return outcome

    def history_entries(self, key: str) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in self.history.entries(key)]

    def percentiles(self, key: str, field: str) -> Percentiles:
        return self.history.percentiles(key, field)

    def signal_health(self) -> dict[str, SignalHealth]:
        """Freshness of every registered signal."""
        return {key: self.cache.inspect(key) for key in known_signal_keys()}

    def revenue_snapshot(self) -> RevenueSnapshot:
        return self.revenue.get()


def build_collectors(settings: Settings) -> list[UpstreamCollector]:
    """Collectors enabled by the current settings."""
    collectors: list[UpstreamCollector] = []
    if settings.ENTSOE_API_KEY:
        collectors.append(
            EntsoeDayAheadCollector(
                api_key=settings.ENTSOE_API_KEY,
                denominator_floor=settings.SEPARATION_DENOMINATOR_FLOOR,
                timeout_seconds=settings.COLLECTOR_TIMEOUT_SECONDS,
            )
        )
    else:
        logger.warning("ENTSOE_API_KEY not set, price separation collector disabled")
    return collectors


def build_notifier(settings: Settings) -> Notifier:
    """Telegram when configured, otherwise log-only alerts."""
    telegram = TelegramNotifier(settings.TELEGRAM_BOT_TOKEN, settings.TELEGRAM_CHAT_ID)
    if telegram.configured:
        return telegram
    return LogNotifier()


def build_scheduler(service: SignalService, settings: Settings) -> Scheduler:
    """Scheduler sharing the service's cache, history and revenue snapshot."""
    return Scheduler(
        cache=service.cache,
        history=service.history,
        collectors=build_collectors(settings),
        notifier=build_notifier(settings),
        revenue=service.revenue,
    )


@lru_cache()
def get_service() -> SignalService:
    """Application-wide service instance."""
    return SignalService.from_settings(get_settings())
