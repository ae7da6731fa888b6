"""Static signal tables: defaults, sanity bounds and staleness thresholds.

Each signal is a named, independently-updated unit of external information.
The tables here are the only place per-signal policy lives:

- ``DEFAULTS``: last-resort reference records served when nothing is cached.
- ``SANITY_BOUNDS``: per-field ``(min, max)``; partial by intent, only fields
  with known physical or economic limits are listed.
- ``STALE_THRESHOLDS_HOURS``: how old a record may be before it is stale.

Reference values: Clean Horizon S1 2025, BNEF Dec 2025, Litgrid 2026-02.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_STALE_THRESHOLD_HOURS = 48.0

# =============================================================================
# Static Floor Defaults
# =============================================================================

DEFAULTS: dict[str, dict[str, Any]] = {
    "s1": {
        "lt_avg_eur_mwh": 88.0,
        "se4_avg_eur_mwh": 82.0,
        "spread_eur_mwh": 6.0,
        "separation_pct": 7.3,
        "lt_daily_swing_eur_mwh": 95.0,
        "state": "CALM",
        "spread_stats_90d": {"p50": 52.0, "p75": 118.0, "p90": 149.0, "days_of_data": 0},
        "_source": "default",
        "_default_reason": "ENTSO-E fetch unavailable",
        "timestamp": None,
    },
    "s2": {
        "fcr_avg": 79.0,  # €/MW/h
        "afrr_up_avg": 60.0,  # €/MW/h
        "afrr_down_avg": 56.0,
        "mfrr_up_avg": 39.0,  # €/MW/h
        "mfrr_down_avg": 55.0,
        "imbalance_mean": 120.0,  # €/MWh
        "imbalance_p90": 180.0,
        "pct_up": 50.0,
        "pct_down": 50.0,
        "signal": "EARLY",
        "interpretation": "Default values shown, live balancing data not yet available.",
        "_source": "default",
        "_default_reason": "Balancing auction fetch not yet run",
        "timestamp": None,
    },
    "s3": {
        "europe_system_eur_kwh": 88.0,
        "china_system_eur_kwh": 68.0,
        "global_avg_eur_kwh": 117.0,
        "euribor_3m": 2.6,  # % nominal
        "euribor_nominal_3m": 2.6,
        "euribor_real_3m": 0.15,
        "hicp_yoy": 2.4,
        "signal": "STABLE",
        "interpretation": "Default values shown, live data not yet available.",
        "_source": "default",
        "_default_reason": "Cost and rates fetch not yet run",
        "timestamp": None,
    },
    "s4": {
        "free_mw": 3107.0,
        "connected_mw": 8802.0,
        "reserved_mw": 4800.0,
        "utilisation_pct": 73.9,
        "signal": "OPEN",
        "interpretation": "Default values shown, live data not yet available.",
        "_source": "default",
        "_default_reason": "Grid capacity fetch not yet run",
        "timestamp": None,
    },
    "s5": {
        "signal": "OPEN",
        "grid_free_mw": 3107.0,
        "grid_connected_mw": 8802.0,
        "pipeline_mw": None,
        "news_items": [],
        "interpretation": "Default values shown, live data not yet available.",
        "_source": "default",
        "_default_reason": "Pipeline fetch not yet run",
        "timestamp": None,
    },
    "s6": {
        "fill_pct": None,  # Norway reservoir fill %
        "deviation_pp": None,
        "median_fill_pct": None,
        "signal": "NORMAL",
        "interpretation": "Default values, live reservoir data not yet available.",
        "_source": "default",
        "_default_reason": "Reservoir fetch not yet run",
        "timestamp": None,
    },
    "s7": {
        "ttf_eur_mwh": None,  # TTF natural gas
        "ttf_trend": None,
        "signal": "NORMAL",
        "interpretation": "Default values, live gas price data not yet available.",
        "_source": "default",
        "_default_reason": "Gas price fetch not yet run",
        "timestamp": None,
    },
    "s8": {
        "nordbalt_avg_mw": None,
        "litpol_avg_mw": None,
        "nordbalt_signal": None,
        "litpol_signal": None,
        "signal": "NEUTRAL",
        "interpretation": "Default values, live interconnector data not yet available.",
        "_source": "default",
        "_default_reason": "Interconnector fetch not yet run",
        "timestamp": None,
    },
    "s9": {
        "eua_eur_t": None,  # EU ETS carbon price
        "eua_trend": None,
        "signal": "NORMAL",
        "interpretation": "Default values, live carbon price data not yet available.",
        "_source": "default",
        "_default_reason": "Carbon price fetch not yet run",
        "timestamp": None,
    },
}

# =============================================================================
# Sanity Bounds
# =============================================================================

SANITY_BOUNDS: dict[str, dict[str, tuple[float, float]]] = {
    "s1": {
        "lt_avg_eur_mwh": (-500, 1000),
        "se4_avg_eur_mwh": (-500, 1000),
        "spread_eur_mwh": (-300, 500),
        "lt_daily_swing_eur_mwh": (0, 2000),
        "pl_avg_eur_mwh": (-500, 1000),
        "lt_pl_spread_eur_mwh": (-300, 500),
    },
    "s2": {
        "fcr_avg": (0, 5000),
        "afrr_up_avg": (0, 5000),
        "mfrr_up_avg": (0, 2000),
        "imbalance_p90": (0, 10000),
    },
    "s3": {
        "europe_system_eur_kwh": (30, 500),
        "euribor_nominal_3m": (-2, 15),
        "hicp_yoy": (-5, 30),
    },
    "s4": {
        "free_mw": (0, 20000),
        "connected_mw": (0, 50000),
        "utilisation_pct": (0, 100),
    },
    "s6": {
        "fill_pct": (0, 100),
        "deviation_pp": (-50, 50),
    },
    "s7": {
        "ttf_eur_mwh": (0, 500),
    },
    "s8": {
        "nordbalt_avg_mw": (-1000, 1000),
        "litpol_avg_mw": (-1000, 1000),
    },
    "s9": {
        "eua_eur_t": (0, 300),
    },
}

# =============================================================================
# Staleness Thresholds
# =============================================================================

STALE_THRESHOLDS_HOURS: dict[str, float] = {
    "s1": 36,  # day-ahead prices, daily 06:00 UTC
    "s2": 48,  # balancing auctions, daily
    "s3": 36,
    "euribor": 168,  # weekly is fine
    "s4": 36,
    "s4_pipeline": 840,  # monthly
    "s5": 6,  # every 4h
    "s6": 168,  # weekly upstream data
    "s7": 12,
    "s8": 12,
    "s9": 12,
}

# Fields tracked in the rolling daily history per signal
HISTORY_FIELDS: dict[str, tuple[str, ...]] = {
    "s1": ("spread_eur_mwh", "separation_pct", "lt_daily_swing_eur_mwh"),
    "s2": ("afrr_up_avg", "mfrr_up_avg", "imbalance_p90"),
    "s7": ("ttf_eur_mwh",),
    "s9": ("eua_eur_t",),
}

# Fields a periodic writer must always provide
REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "s1": ("lt_avg_eur_mwh", "se4_avg_eur_mwh", "spread_eur_mwh"),
    "s2": ("afrr_up_avg", "mfrr_up_avg"),
    "s3": ("euribor_nominal_3m",),
    "s4": ("free_mw",),
    "s6": ("fill_pct",),
    "s7": ("ttf_eur_mwh",),
    "s9": ("eua_eur_t",),
}


@dataclass(frozen=True)
class SignalSpec:
    """Per-signal policy assembled from the static tables.

    Attributes:
        key: Short signal key (e.g. ``"s1"``).
        stale_threshold_hours: Age beyond which a record is served stale.
        required_fields: Fields that must be present and finite on write.
        bounds: Per-field ``(min, max)`` checked on write.
        default_record: Reference record served when nothing is cached.
        history_fields: Fields appended to the daily history window.
    """

    key: str
    stale_threshold_hours: float = DEFAULT_STALE_THRESHOLD_HOURS
    required_fields: tuple[str, ...] = ()
    bounds: dict[str, tuple[float, float]] = field(default_factory=dict)
    default_record: dict[str, Any] | None = None
    history_fields: tuple[str, ...] = ()

    @property
    def cache_max_age_seconds(self) -> int:
        """HTTP cache hint matched to the signal's refresh cadence.

        Signals refreshed at least daily get one hour; slower signals get
        a quarter of their staleness threshold, capped at one day.
        """
        if self.stale_threshold_hours <= 48:
            return 3600
        return int(min(self.stale_threshold_hours / 4, 24) * 3600)


def get_signal_spec(key: str) -> SignalSpec:
    """Build the spec for a signal key (unknown keys get generic policy)."""
    return SignalSpec(
        key=key,
        stale_threshold_hours=float(
            STALE_THRESHOLDS_HOURS.get(key, DEFAULT_STALE_THRESHOLD_HOURS)
        ),
        required_fields=REQUIRED_FIELDS.get(key, ()),
        bounds=SANITY_BOUNDS.get(key, {}),
        default_record=DEFAULTS.get(key),
        history_fields=HISTORY_FIELDS.get(key, ()),
    )


def known_signal_keys() -> list[str]:
    """All signal keys with any registered policy, sorted."""
    return sorted(set(DEFAULTS) | set(STALE_THRESHOLDS_HOURS))
