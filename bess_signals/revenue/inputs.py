"""Assemble revenue-model inputs from cached signals.

Each input is picked independently: a missing or non-finite field falls
back to its benchmark default without affecting the others. Cache reads
never raise, so this always produces a complete ``RevenueInputs``.

The intraday swing is the exception: a record without one leaves it unset
so trading is priced on that record's own spread. The static ``s1``
defaults carry the benchmark swing.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from bess_signals.domain.models import RevenueInputs
from bess_signals.revenue import benchmarks as B
from bess_signals.signals.cache import SignalCache


def optional_number(record: Mapping[str, Any], *fields: str) -> float | None:
    """First finite numeric value among ``fields``, else ``None``."""
    for name in fields:
        value = record.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
            return float(value)
    return None


def pick_number(record: Mapping[str, Any], *fields: str, default: float) -> float:
    """First finite numeric value among ``fields``, else ``default``."""
    value = optional_number(record, *fields)
    return default if value is None else value


def revenue_inputs_from_records(
    s1: Mapping[str, Any],
    s2: Mapping[str, Any],
    s3: Mapping[str, Any],
) -> RevenueInputs:
    """Build inputs from the price-separation, balancing and rates records."""
    return RevenueInputs(
        afrr_up_avg=pick_number(s2, "afrr_up_avg", default=B.DEFAULT_AFRR_UP_AVG),
        mfrr_up_avg=pick_number(s2, "mfrr_up_avg", default=B.DEFAULT_MFRR_UP_AVG),
        spread_eur_mwh=pick_number(s1, "spread_eur_mwh", default=B.DEFAULT_SPREAD_EUR_MWH),
        daily_swing_eur_mwh=optional_number(s1, "lt_daily_swing_eur_mwh"),
        euribor_3m=pick_number(
            s3, "euribor_3m", "euribor_nominal_3m", default=B.DEFAULT_EURIBOR_3M
        ),
    )


def revenue_inputs_from_cache(cache: SignalCache) -> RevenueInputs:
    """Read ``s1``, ``s2`` and ``s3`` through the cache and build inputs."""
    return revenue_inputs_from_records(
        cache.read("s1").record,
        cache.read("s2").record,
        cache.read("s3").record,
    )
