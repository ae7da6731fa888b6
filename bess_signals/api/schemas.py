"""Pydantic schemas for API responses.

These schemas define the wire contract for the dashboard. Field names are
camelCase on the wire; euro amounts are rounded to whole euros, payback and
IRR to one decimal. The engine itself never rounds.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from bess_signals.domain.models import (
    MarketComparisonRow,
    Percentiles,
    RevenueInputs,
    RevenueResult,
    SignalHealth,
    WriteOutcome,
)
from bess_signals.revenue.snapshot import RevenueSnapshot


class CamelModel(BaseModel):
    """Response base with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Signal Schemas
# =============================================================================


class WriteResponse(CamelModel):
    """Outcome of a manual signal write."""

    key: str
    success: bool
    action: Literal["written", "rejected"]
    errors: list[str]
    written_at: datetime | None = None

    @classmethod
    def from_outcome(cls, outcome: WriteOutcome) -> WriteResponse:
        return cls(
            key=outcome.key,
            success=outcome.success,
            action=outcome.action,
            errors=list(outcome.errors),
            written_at=outcome.written_at,
        )


class PercentilesResponse(CamelModel):
    """Percentile summary of one history field."""

    key: str
    field: str
    p25: float | None = None
    p50: float | None = None
    p75: float | None = None
    p90: float | None = None
    n: int

    @classmethod
    def from_percentiles(cls, key: str, field: str, p: Percentiles) -> PercentilesResponse:
        return cls(key=key, field=field, **p.model_dump())


class SignalHealthResponse(CamelModel):
    """Freshness of one signal key."""

    status: Literal["present", "missing"]
    age_hours: float | None = None
    stale: bool
    threshold_hours: float

    @classmethod
    def from_health(cls, health: SignalHealth) -> SignalHealthResponse:
        return cls(
            status=health.status,
            age_hours=health.age_hours,
            stale=health.stale,
            threshold_hours=health.threshold_hours,
        )


# =============================================================================
# Revenue Schemas
# =============================================================================


class InputsUsedResponse(CamelModel):
    """Market inputs the projection was computed from."""

    afrr_up_avg: float
    mfrr_up_avg: float
    spread_eur_mwh: float
    daily_swing_eur_mwh: float | None = None
    euribor_3m: float

    @classmethod
    def from_inputs(cls, inputs: RevenueInputs) -> InputsUsedResponse:
        return cls(**inputs.model_dump())


class RevenueResultResponse(CamelModel):
    """Economics for one battery duration, per MW installed."""

    duration_hours: int
    afrr_annual_per_mw: int
    mfrr_annual_per_mw: int
    trading_annual_per_mw: int
    gross_annual_per_mw: int
    opex_annual_per_mw: int
    net_annual_per_mw: int
    capex_per_mw: int
    simple_payback_years: float | None  # null when the project never pays back
    irr_pct: float
    irr_vs_benchmark: str
    benchmark_irr_central_pct: float
    benchmark_irr_range: str
    market_window_note: str

    @classmethod
    def from_result(cls, result: RevenueResult) -> RevenueResultResponse:
        payback = result.simple_payback_years
        return cls(
            duration_hours=result.duration_hours,
            afrr_annual_per_mw=round(result.afrr_annual_per_mw),
            mfrr_annual_per_mw=round(result.mfrr_annual_per_mw),
            trading_annual_per_mw=round(result.trading_annual_per_mw),
            gross_annual_per_mw=round(result.gross_annual_per_mw),
            opex_annual_per_mw=round(result.opex_annual_per_mw),
            net_annual_per_mw=round(result.net_annual_per_mw),
            capex_per_mw=round(result.capex_per_mw),
            simple_payback_years=round(payback, 1) if math.isfinite(payback) else None,
            irr_pct=round(result.irr_pct, 1),
            irr_vs_benchmark=result.irr_vs_benchmark.value,
            benchmark_irr_central_pct=result.benchmark_irr_central_pct,
            benchmark_irr_range=result.benchmark_irr_range,
            market_window_note=result.market_window_note,
        )


class MarketRowResponse(CamelModel):
    """One row of the cross-market IRR ranking."""

    country: str
    flag: str
    irr_pct: float
    net_annual_per_mw: int
    capex_per_mw: int
    note: str
    is_live: bool

    @classmethod
    def from_row(cls, row: MarketComparisonRow) -> MarketRowResponse:
        return cls(
            country=row.country,
            flag=row.flag,
            irr_pct=round(row.irr_pct, 1),
            net_annual_per_mw=round(row.net_annual_per_mw),
            capex_per_mw=round(row.capex_per_mw),
            note=row.note,
            is_live=row.is_live,
        )


class RevenueResponse(CamelModel):
    """Full revenue projection payload."""

    updated_at: datetime
    inputs_used: InputsUsedResponse
    results_per_duration: dict[str, RevenueResultResponse]
    market_ranking: list[MarketRowResponse]

    @classmethod
    def from_snapshot(cls, snapshot: RevenueSnapshot) -> RevenueResponse:
        return cls(
            updated_at=snapshot.updated_at,
            inputs_used=InputsUsedResponse.from_inputs(snapshot.inputs_used),
            results_per_duration={
                f"{duration}h": RevenueResultResponse.from_result(result)
                for duration, result in sorted(snapshot.results_per_duration.items())
            },
            market_ranking=[MarketRowResponse.from_row(r) for r in snapshot.market_ranking],
        )


# =============================================================================
# Health & Info Schemas
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    timestamp: datetime
