"""Static BESS benchmark tables.

Figures from the Clean Horizon S1 2025 Lithuania report unless noted.
Capex is in € per MW installed (tier-1 supplier, Q1 2025 Europe, 50 MW
reference size).
"""

from __future__ import annotations

from dataclasses import dataclass

# =============================================================================
# Capex and Operating Assumptions
# =============================================================================

CAPEX_PER_MW: dict[int, float] = {
    1: 385_000.0,  # 50 MW / 50 MWh
    2: 525_000.0,  # 50 MW / 100 MWh
    3: 665_000.0,
    4: 805_000.0,  # 50 MW / 200 MWh
}

# aFRR/mFRR sizing: 2 MW power + 4 MWh energy provide 1 MW of sustained
# service, so a 2h system commits half its nameplate and a 4h system all of it.
CAPACITY_ALLOCATION: dict[int, float] = {
    2: 0.5,
    4: 1.0,
}

SUPPORTED_DURATIONS: tuple[int, ...] = tuple(sorted(CAPACITY_ALLOCATION))

HOURS_PER_YEAR = 8760
DAYS_PER_YEAR = 365

AVAILABILITY = 0.97
ROUNDTRIP_EFFICIENCY = 0.85
CYCLES_PER_DAY = 1.5
TRADING_CAPTURE_FACTOR = 0.35  # share of the theoretical daily swing captured

OPEX_PCT_CAPEX = 0.025
AGGREGATOR_PCT_REVENUE = 0.08

PROJECT_LIFE_YEARS = 18

# =============================================================================
# Published IRR Benchmarks (COD 2027, central case)
# =============================================================================

BENCHMARK_IRR_CENTRAL_PCT: dict[int, float] = {1: 6.5, 2: 16.6, 3: 14.9, 4: 10.8}
BENCHMARK_IRR_LOW_PCT: dict[int, float] = {1: 1, 2: 6, 3: 9, 4: 6}
BENCHMARK_IRR_HIGH_PCT: dict[int, float] = {1: 9, 2: 31, 3: 27, 4: 20}

IRR_TOLERANCE_RELATIVE = 0.10

REVENUE_PEAK_NOTE = "aFRR/mFRR cannibalization begins 2029"

# =============================================================================
# Benchmark Input Defaults
# =============================================================================

DEFAULT_AFRR_UP_AVG = 60.0  # €/MW/h
DEFAULT_MFRR_UP_AVG = 39.0  # €/MW/h
DEFAULT_SPREAD_EUR_MWH = 6.0
DEFAULT_EURIBOR_3M = 2.6  # %


# =============================================================================
# Reference Markets
# =============================================================================


@dataclass(frozen=True)
class ReferenceMarket:
    """Static reference data for one European balancing market.

    ``None`` prices are substituted with live inputs; a market with no
    published IRR relies on the computed one.
    """

    country: str
    flag: str
    capex_per_mw: float
    note: str
    afrr_up_eur_mwh: float | None = None
    mfrr_up_eur_mwh: float | None = None
    da_spread_eur_mwh: float | None = None
    irr_central_pct: float | None = None

    @property
    def is_live(self) -> bool:
        """Whether this market is priced from live signals."""
        return self.afrr_up_eur_mwh is None


REFERENCE_MARKETS: tuple[ReferenceMarket, ...] = (
    ReferenceMarket(
        country="Lithuania",
        flag="🇱🇹",
        capex_per_mw=525_000.0,
        note="Post-sync anomaly, peak window 2025-28",
    ),
    ReferenceMarket(
        country="Great Britain",
        flag="🇬🇧",
        capex_per_mw=580_000.0,
        note="Mature, BM + FFR products",
        afrr_up_eur_mwh=14,
        mfrr_up_eur_mwh=10,
        da_spread_eur_mwh=55,
        irr_central_pct=12,
    ),
    ReferenceMarket(
        country="Ireland",
        flag="🇮🇪",
        capex_per_mw=560_000.0,
        note="DS3 + I-SEM, strong frequency market",
        afrr_up_eur_mwh=18,
        mfrr_up_eur_mwh=14,
        da_spread_eur_mwh=48,
        irr_central_pct=13,
    ),
    ReferenceMarket(
        country="Italy",
        flag="🇮🇹",
        capex_per_mw=540_000.0,
        note="MSD balancing market",
        afrr_up_eur_mwh=11,
        mfrr_up_eur_mwh=9,
        da_spread_eur_mwh=42,
        irr_central_pct=10,
    ),
    ReferenceMarket(
        country="Germany",
        flag="🇩🇪",
        capex_per_mw=530_000.0,
        note="FCR saturated, aFRR compressing",
        afrr_up_eur_mwh=8,
        mfrr_up_eur_mwh=7,
        da_spread_eur_mwh=38,
        irr_central_pct=8,
    ),
    ReferenceMarket(
        country="Belgium",
        flag="🇧🇪",
        capex_per_mw=540_000.0,
        note="CRM capacity market support",
        afrr_up_eur_mwh=7,
        mfrr_up_eur_mwh=6,
        da_spread_eur_mwh=35,
        irr_central_pct=7,
    ),
)
