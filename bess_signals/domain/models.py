"""Core domain models for the BESS signal engine.

All models use Pydantic. Units follow Baltic market conventions:
- Capacity prices: €/MW/h
- Energy prices: €/MWh
- Annual revenue and capex: € per MW installed
- Time: hours
"""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Type Aliases with Validation
# =============================================================================

CapacityPrice = Annotated[float, Field(description="Capacity price in €/MW/h")]
EnergyPrice = Annotated[float, Field(description="Energy price in €/MWh (can be negative)")]
EuroPerMW = Annotated[float, Field(description="€ per MW installed")]


# =============================================================================
# Enums
# =============================================================================


class ServingTier(str, Enum):
    """Freshness tier a read is served from."""

    LIVE = "live"
    STALE = "stale"
    DEFAULT = "default"

    @property
    def wire_label(self) -> str:
        """Value of the ``_serving`` sidecar field."""
        return _WIRE_LABELS[self]


_WIRE_LABELS = {
    ServingTier.LIVE: "live",
    ServingTier.STALE: "stale_cache",
    ServingTier.DEFAULT: "static_defaults",
}


class IrrComparison(str, Enum):
    """Position of a computed IRR relative to the published benchmark."""

    ABOVE = "above"
    BELOW = "below"
    WITHIN = "within range of"


# =============================================================================
# Signal Cache Models
# =============================================================================


class ReadResult(BaseModel):
    """Result of reading a signal through the resilience cache.

    ``record`` is always a usable mapping; degraded states are carried in
    ``tier``, ``age_hours`` and ``reason`` rather than by raising.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    tier: ServingTier
    record: dict[str, Any]
    threshold_hours: float
    age_hours: float | None = None
    reason: str | None = None

    @property
    def is_stale(self) -> bool:
        """Whether the record is older than its threshold."""
        return self.tier == ServingTier.STALE

    def annotated(self) -> dict[str, Any]:
        """Record with the ``_serving``/``_stale``/``_age_hours`` sidecars."""
        payload = dict(self.record)
        payload["_serving"] = self.tier.wire_label
        payload["_stale"] = self.is_stale
        if self.tier == ServingTier.DEFAULT:
            payload["_default_reason"] = self.reason or payload.get("_default_reason")
            return payload

        payload["_age_hours"] = (
            round(self.age_hours, 1) if self.age_hours is not None else None
        )
        if self.is_stale:
            payload["_stale_threshold_hours"] = self.threshold_hours
        return payload


class WriteOutcome(BaseModel):
    """Outcome of a validated cache write."""

    model_config = ConfigDict(frozen=True)

    key: str
    success: bool
    errors: list[str] = Field(default_factory=list)
    action: Literal["written", "rejected"]
    written_at: datetime | None = None


class SignalHealth(BaseModel):
    """Diagnostic freshness view of one signal key."""

    model_config = ConfigDict(frozen=True)

    key: str
    status: Literal["present", "missing"]
    age_hours: float | None = None
    stale: bool = False
    threshold_hours: float


# =============================================================================
# History Models
# =============================================================================


class HistoryEntry(BaseModel):
    """One day of summary values for a signal."""

    model_config = ConfigDict(frozen=True)

    day: date
    values: dict[str, float | None] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flat JSON-ready form: ``{"date": "YYYY-MM-DD", **values}``."""
        return {"date": self.day.isoformat(), **self.values}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        """Parse the flat stored form."""
        values = {k: v for k, v in data.items() if k != "date"}
        return cls(day=date.fromisoformat(str(data["date"])), values=values)


class Percentiles(BaseModel):
    """Nearest-rank percentile summary of a history field."""

    model_config = ConfigDict(frozen=True)

    p25: float | None = None
    p50: float | None = None
    p75: float | None = None
    p90: float | None = None
    n: int = 0


# =============================================================================
# Revenue Models
# =============================================================================


class RevenueInputs(BaseModel):
    """Current market values feeding the revenue model.

    Derived fresh from cached signals on every request; each field is
    defaulted independently by the caller when its signal is unavailable.
    """

    model_config = ConfigDict(frozen=True)

    afrr_up_avg: CapacityPrice
    mfrr_up_avg: CapacityPrice
    spread_eur_mwh: EnergyPrice
    euribor_3m: Annotated[float, Field(description="3M Euribor, % nominal")]
    daily_swing_eur_mwh: EnergyPrice | None = None

    @property
    def trading_swing(self) -> float:
        """Intraday swing used for trading, falling back to the spread."""
        if self.daily_swing_eur_mwh is not None:
            return self.daily_swing_eur_mwh
        return self.spread_eur_mwh


class RevenueResult(BaseModel):
    """Annualized economics for one battery duration, per MW installed."""

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    duration_hours: int
    afrr_annual_per_mw: EuroPerMW
    mfrr_annual_per_mw: EuroPerMW
    trading_annual_per_mw: EuroPerMW
    gross_annual_per_mw: EuroPerMW
    opex_annual_per_mw: EuroPerMW
    net_annual_per_mw: EuroPerMW
    capex_per_mw: EuroPerMW
    simple_payback_years: float  # inf when net revenue is non-positive
    irr: Annotated[float, Field(description="IRR as a fraction (0.12 = 12%)")]
    irr_vs_benchmark: IrrComparison
    benchmark_irr_central_pct: float
    benchmark_irr_range: str
    market_window_note: str

    @property
    def irr_pct(self) -> float:
        """IRR in percent."""
        return self.irr * 100

    @property
    def has_payback(self) -> bool:
        """Whether the investment pays back at all."""
        return math.isfinite(self.simple_payback_years)


class MarketComparisonRow(BaseModel):
    """One reference market in the cross-market ranking."""

    model_config = ConfigDict(frozen=True)

    country: str
    flag: str
    irr_pct: float
    net_annual_per_mw: EuroPerMW
    capex_per_mw: EuroPerMW
    note: str
    is_live: bool
