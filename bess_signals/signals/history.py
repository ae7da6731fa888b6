"""Bounded rolling history of daily signal summaries.

One entry per calendar day per signal. Appending for a date that already
exists replaces that entry, and the window is capped with the oldest entry
evicted first. Percentiles use a nearest-rank estimator, which is adequate
for a window of at most a few months of daily points.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from datetime import date
from typing import Any

import numpy as np

from bess_signals.domain.models import HistoryEntry, Percentiles
from bess_signals.signals.cache import record_time
from bess_signals.signals.registry import get_signal_spec
from bess_signals.signals.store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 90
PERCENTILE_FRACTIONS = {"p25": 0.25, "p50": 0.50, "p75": 0.75, "p90": 0.90}


def history_key(signal_key: str) -> str:
    """Store key holding a signal's history window."""
    return f"history:{signal_key}"


def nearest_rank(values: list[float], fraction: float) -> float:
    """Value at index ``floor(n * fraction)`` of the sorted values, clamped."""
    ordered = np.sort(np.asarray(values, dtype=float))
    index = min(int(math.floor(len(ordered) * fraction)), len(ordered) - 1)
    return float(ordered[index])


class HistoryTracker:
    """Rolling per-signal history persisted in the key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        """Initialize the tracker.

        Args:
            store: Durable key-value store.
            max_entries: Window capacity per signal.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.store = store
        self.max_entries = max_entries

    def entries(self, signal_key: str) -> list[HistoryEntry]:
        """Load the stored window, oldest first. Unreadable history is empty."""
        raw = self.store.get(history_key(signal_key))
        if raw is None:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
                raise ValueError(f"expected a list of objects, got {type(items).__name__}")
            return [HistoryEntry.from_dict(item) for item in items]
        except (ValueError, TypeError, KeyError) as e:
            logger.error(f"history unreadable [{signal_key}]: {e}")
            return []

    def append(
        self,
        signal_key: str,
        date_key: date,
        values: Mapping[str, float | None],
    ) -> list[HistoryEntry]:
        """Add or replace the entry for ``date_key`` and enforce the cap.

        Args:
            signal_key: Signal the entry belongs to.
            date_key: Calendar day of the entry.
            values: Summary values for that day.

        Returns:
            The updated window, oldest first.
        """
        window = [e for e in self.entries(signal_key) if e.day != date_key]
        window.append(HistoryEntry(day=date_key, values=dict(values)))
        if len(window) > self.max_entries:
            window = window[-self.max_entries :]

        self.store.put(
            history_key(signal_key),
            json.dumps([e.to_dict() for e in window]),
        )
        return window

    def record(
        self,
        signal_key: str,
        observation: Mapping[str, Any],
        fallback_day: date,
    ) -> list[HistoryEntry] | None:
        """Append the tracked fields of a committed observation.

        The entry is dated by the observation's own timestamp, or
        ``fallback_day`` when it has none. Non-numeric values are kept as
        ``None``. Signals without history fields are skipped.

        Returns:
            The updated window, or ``None`` when the signal is untracked.
        """
        fields = get_signal_spec(signal_key).history_fields
        if not fields:
            return None
        measured_at = record_time(observation)
        day = measured_at.date() if measured_at is not None else fallback_day
        values: dict[str, float | None] = {}
        for name in fields:
            value = observation.get(name)
            numeric = isinstance(value, (int, float)) and not isinstance(value, bool)
            values[name] = float(value) if numeric else None
        return self.append(signal_key, day, values)

    def values(self, signal_key: str, field: str) -> list[float]:
        """Finite numeric values of ``field`` across the window."""
        found: list[float] = []
        for entry in self.entries(signal_key):
            value = entry.values.get(field)
            if value is not None and math.isfinite(value):
                found.append(float(value))
        return found

    def percentiles(self, signal_key: str, field: str) -> Percentiles:
        """Nearest-rank p25/p50/p75/p90 of a field over the window."""
        values = self.values(signal_key, field)
        if not values:
            return Percentiles(n=0)
        return Percentiles(
            n=len(values),
            **{name: nearest_rank(values, q) for name, q in PERCENTILE_FRACTIONS.items()},
        )
