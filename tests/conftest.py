"""Test fixtures for signal-engine tests.

Provides a controllable clock, in-memory store, cache and history
fixtures, collector and notifier fakes, plus standard revenue inputs:
- Baseline benchmark inputs
- Zero-revenue inputs (project never pays back)
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from bess_signals.collectors.base import UpstreamCollector
from bess_signals.domain.models import RevenueInputs
from bess_signals.notify import Notifier
from bess_signals.signals.cache import SignalCache
from bess_signals.signals.history import HistoryTracker
from bess_signals.signals.store import InMemoryStore

# =============================================================================
# Time Fixtures
# =============================================================================


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, hours: float = 0.0, seconds: float = 0.0) -> None:
        self.current += timedelta(hours=hours, seconds=seconds)


@pytest.fixture
def base_timestamp() -> datetime:
    """Standard base timestamp for testing (midday UTC, winter day)."""
    return datetime(2026, 2, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(base_timestamp: datetime) -> FakeClock:
    """Clock starting at the base timestamp."""
    return FakeClock(base_timestamp)


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def store(clock: FakeClock) -> InMemoryStore:
    """Empty in-memory store on the test clock."""
    return InMemoryStore(clock=clock)


@pytest.fixture
def cache(store: InMemoryStore, clock: FakeClock) -> SignalCache:
    """Signal cache over the in-memory store."""
    return SignalCache(store, clock=clock)


@pytest.fixture
def history(store: InMemoryStore) -> HistoryTracker:
    """History tracker with a short window."""
    return HistoryTracker(store, max_entries=5)


# =============================================================================
# Signal Record Fixtures
# =============================================================================


@pytest.fixture
def s1_record(base_timestamp: datetime) -> dict:
    """Valid price-separation record measured at the base timestamp."""
    return {
        "lt_avg_eur_mwh": 95.2,
        "se4_avg_eur_mwh": 80.1,
        "spread_eur_mwh": 15.1,
        "separation_pct": 18.9,
        "lt_daily_swing_eur_mwh": 140.0,
        "state": "WATCH",
        "timestamp": base_timestamp.isoformat(),
    }


@pytest.fixture
def s2_record(base_timestamp: datetime) -> dict:
    """Valid balancing-market record measured at the base timestamp."""
    return {
        "afrr_up_avg": 72.0,
        "mfrr_up_avg": 41.5,
        "imbalance_p90": 210.0,
        "timestamp": base_timestamp.isoformat(),
    }


# =============================================================================
# Revenue Fixtures
# =============================================================================


@pytest.fixture
def baseline_inputs() -> RevenueInputs:
    """Benchmark default inputs."""
    return RevenueInputs(
        afrr_up_avg=60.0,
        mfrr_up_avg=39.0,
        spread_eur_mwh=6.0,
        daily_swing_eur_mwh=95.0,
        euribor_3m=2.6,
    )


@pytest.fixture
def zero_inputs() -> RevenueInputs:
    """Markets paying nothing."""
    return RevenueInputs(
        afrr_up_avg=0.0,
        mfrr_up_avg=0.0,
        spread_eur_mwh=0.0,
        daily_swing_eur_mwh=0.0,
        euribor_3m=2.6,
    )


# =============================================================================
# Collector Fakes
# =============================================================================


class StaticCollector(UpstreamCollector):
    """Collector returning a fixed observation, or raising a fixed error."""

    def __init__(
        self,
        signal_key: str,
        observation: dict | None = None,
        error: Exception | None = None,
        delay_seconds: float = 0.0,
        timeout_seconds: float = 1.0,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds, session=FakeSession())
        self.signal_key = signal_key
        self.observation = observation or {}
        self.error = error
        self.delay_seconds = delay_seconds
        self.calls = 0

    @property
    def name(self) -> str:
        return f"static-{self.signal_key}"

    async def fetch(self, session) -> dict:
        self.calls += 1
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return dict(self.observation)


class FakeResponse:
    """Minimal stand-in for an aiohttp response."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None


class FakeSession:
    """Records GET requests and answers from a per-domain table."""

    def __init__(self, responses: dict[str, FakeResponse] | None = None) -> None:
        self.responses = responses or {}
        self.requests: list[dict] = []

    def get(self, url: str, params: dict | None = None) -> FakeResponse:
        params = params or {}
        self.requests.append({"url": url, **params})
        return self.responses.get(params.get("in_Domain", url), FakeResponse(404, "not found"))


class RecordingNotifier(Notifier):
    """Collects alerts instead of sending them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    async def notify(self, message: str) -> bool:
        self.messages.append(message)
        return True


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Notifier capturing alert messages."""
    return RecordingNotifier()
