"""Signal resilience cache.

Wraps the durable store with a three-tier read path and a validated write
path:

    Tier 1: live    record present, age <= threshold
    Tier 2: stale   record present, age >  threshold
    Tier 3: default no record, or the stored payload is unreadable

The tier is recomputed on every read and never persisted, so a single
successful write restores ``live`` on the next read with no recovery step.
Reads never raise; writes report rejection synchronously and leave the
store untouched.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from bess_signals.domain.models import (
    ReadResult,
    ServingTier,
    SignalHealth,
    WriteOutcome,
)
from bess_signals.signals.registry import get_signal_spec
from bess_signals.signals.store import Clock, KeyValueStore, utc_now
from bess_signals.signals.validation import validate_record

logger = logging.getLogger(__name__)

# Time fields consulted for age, in order of preference
_TIME_FIELDS = ("timestamp", "written_at", "updated_at")


def _generic_default(key: str) -> dict[str, Any]:
    return {
        "_source": "default",
        "_default_reason": f"no reference defaults registered for '{key}'",
        "timestamp": None,
    }


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (or datetime) into an aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def record_time(record: Mapping[str, Any]) -> datetime | None:
    """Measurement time of a record, falling back to its commit time."""
    meta = record.get("_meta")
    candidates = [record.get("timestamp")]
    if isinstance(meta, Mapping):
        candidates.append(meta.get("written_at"))
    candidates.extend(record.get(name) for name in _TIME_FIELDS[1:])
    for candidate in candidates:
        parsed = parse_timestamp(candidate)
        if parsed is not None:
            return parsed
    return None


class SignalCache:
    """Validated, freshness-aware access to signal records."""

    def __init__(self, store: KeyValueStore, clock: Clock = utc_now) -> None:
        """Initialize the cache.

        Args:
            store: Durable key-value store.
            clock: Time source for staleness and ``written_at`` stamps.
        """
        self.store = store
        self._clock = clock

    def now(self) -> datetime:
        """Current time according to the cache clock."""
        return self._clock()

    # -------------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------------

    def write(
        self,
        key: str,
        record: Mapping[str, Any],
        required_fields: Iterable[str] = (),
        bounds_key: str | None = None,
    ) -> WriteOutcome:
        """Validate and commit a record, replacing any previous value.

        Args:
            key: Signal key.
            record: Candidate record.
            required_fields: Fields that must be present and finite.
            bounds_key: Key into the sanity-bounds table, if bounds apply.

        Returns:
            WriteOutcome; on rejection the store has not been touched.
        """
        result = validate_record(record, required_fields, bounds_key)
        if not result.valid:
            logger.error(f"write REJECTED [{key}]: {' | '.join(result.errors)}")
            return WriteOutcome(
                key=key, success=False, errors=result.errors, action="rejected"
            )

        written_at = self._clock()
        payload = dict(record)
        payload["written_at"] = written_at.isoformat()
        payload["_meta"] = {
            "written_at": written_at.isoformat(),
            "source": payload.get("_source", "live"),
            "validation_passed": True,
        }
        self.store.put(key, json.dumps(payload, default=str))
        logger.info(f"write OK [{key}]")
        return WriteOutcome(key=key, success=True, action="written", written_at=written_at)

    def write_signal(self, key: str, record: Mapping[str, Any]) -> WriteOutcome:
        """Write using the registered required fields and bounds for ``key``."""
        spec = get_signal_spec(key)
        return self.write(
            key,
            record,
            required_fields=spec.required_fields,
            bounds_key=key if spec.bounds else None,
        )

    # -------------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------------

    def _load(self, key: str) -> dict[str, Any] | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"stored payload is {type(data).__name__}, not an object")
        return data

    def _default(
        self,
        key: str,
        threshold: float,
        default_record: Mapping[str, Any] | None,
        reason: str,
    ) -> ReadResult:
        record = dict(default_record) if default_record is not None else _generic_default(key)
        return ReadResult(
            key=key,
            tier=ServingTier.DEFAULT,
            record=record,
            threshold_hours=threshold,
            reason=reason,
        )

    def read(
        self,
        key: str,
        stale_threshold_hours: float | None = None,
        default_record: Mapping[str, Any] | None = None,
    ) -> ReadResult:
        """Read a signal, classifying it as live, stale or default.

        Args:
            key: Signal key.
            stale_threshold_hours: Override for the registered threshold.
            default_record: Override for the registered default record.

        Returns:
            ReadResult that always carries a usable record.
        """
        spec = get_signal_spec(key)
        threshold = (
            stale_threshold_hours
            if stale_threshold_hours is not None
            else spec.stale_threshold_hours
        )
        fallback = default_record if default_record is not None else spec.default_record

        try:
            data = self._load(key)
        except Exception as e:
            logger.error(f"read error [{key}]: {e}")
            return self._default(key, threshold, fallback, f"stored payload unreadable: {e}")

        if data is None:
            logger.warning(f"[{key}] empty, serving static defaults")
            reason = (fallback or {}).get("_default_reason") or "no record in store"
            return self._default(key, threshold, fallback, str(reason))

        measured_at = record_time(data)
        if measured_at is None:
            logger.warning(f"[{key}] record has no parseable time, serving as stale")
            return ReadResult(
                key=key, tier=ServingTier.STALE, record=data, threshold_hours=threshold
            )

        age_hours = (self._clock() - measured_at).total_seconds() / 3600
        if age_hours > threshold:
            logger.warning(f"[{key}] stale: {age_hours:.1f}h (threshold: {threshold}h)")
            tier = ServingTier.STALE
        else:
            tier = ServingTier.LIVE
        return ReadResult(
            key=key,
            tier=tier,
            record=data,
            threshold_hours=threshold,
            age_hours=age_hours,
        )

    def inspect(self, key: str) -> SignalHealth:
        """Presence and age of a key without falling back to defaults."""
        result = self.read(key)
        if result.tier == ServingTier.DEFAULT:
            return SignalHealth(
                key=key, status="missing", threshold_hours=result.threshold_hours
            )
        age = result.age_hours
        return SignalHealth(
            key=key,
            status="present",
            age_hours=round(age, 1) if age is not None and math.isfinite(age) else None,
            stale=result.is_stale,
            threshold_hours=result.threshold_hours,
        )
