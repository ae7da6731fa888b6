"""Revenue projection for a Baltic BESS, per MW installed.

Three revenue streams are modeled:
- aFRR and mFRR capacity: price × 8760 h × availability × committed power
- Trading: daily swing × capture × cycles/day × 365 × MWh per MW × RTE

Net revenue after fixed opex and the aggregator share feeds an 18-year
cash-flow schedule shaped by the decay curves, from which the IRR is found
by bisection.

The engine is a pure function of its inputs and static tables. It does no
defaulting; callers substitute benchmark values for unavailable signals.
"""

from __future__ import annotations

import math

from bess_signals.domain.models import IrrComparison, RevenueInputs, RevenueResult
from bess_signals.revenue import benchmarks as B
from bess_signals.revenue.decay import blend_schedule
from bess_signals.revenue.solver import DEFAULT_ITERATIONS, irr, npv


def capacity_revenue(price: float, duration_hours: int) -> float:
    """Annual capacity revenue (€/MW/yr) for a €/MW/h clearing price."""
    return price * B.HOURS_PER_YEAR * B.AVAILABILITY * B.CAPACITY_ALLOCATION[duration_hours]


def trading_revenue(daily_swing: float, duration_hours: int) -> float:
    """Annual arbitrage revenue (€/MW/yr) from the intraday price swing."""
    return (
        daily_swing
        * B.TRADING_CAPTURE_FACTOR
        * B.CYCLES_PER_DAY
        * B.DAYS_PER_YEAR
        * duration_hours
        * B.ROUNDTRIP_EFFICIENCY
    )


def cash_flow_schedule(net_annual: float, years: int = B.PROJECT_LIFE_YEARS) -> list[float]:
    """Yearly cash flows ``net × blend(t)`` for t = 1..years."""
    return list(net_annual * blend_schedule(years))


def project_npv(rate: float, capex: float, net_annual: float) -> float:
    """NPV of the project at ``rate`` for a given capex and base net revenue."""
    return npv(rate, capex, cash_flow_schedule(net_annual))


def classify_irr(irr_pct: float, benchmark_pct: float) -> IrrComparison:
    """Compare an IRR to a benchmark with a ±10% relative band."""
    if irr_pct > benchmark_pct * (1 + B.IRR_TOLERANCE_RELATIVE):
        return IrrComparison.ABOVE
    if irr_pct < benchmark_pct * (1 - B.IRR_TOLERANCE_RELATIVE):
        return IrrComparison.BELOW
    return IrrComparison.WITHIN


def compute_revenue(
    inputs: RevenueInputs,
    duration_hours: int,
    iterations: int = DEFAULT_ITERATIONS,
) -> RevenueResult:
    """Project annual economics and IRR for one battery duration.

    Args:
        inputs: Current market values (already defaulted by the caller).
        duration_hours: Storage duration; one of ``SUPPORTED_DURATIONS``.
        iterations: Bisection iterations for the IRR.

    Returns:
        RevenueResult per MW installed.

    Raises:
        ValueError: If the duration is not modeled.
    """
    if duration_hours not in B.CAPACITY_ALLOCATION:
        raise ValueError(
            f"duration_hours must be one of {B.SUPPORTED_DURATIONS}, got {duration_hours}"
        )

    capex = B.CAPEX_PER_MW[duration_hours]

    afrr_annual = capacity_revenue(inputs.afrr_up_avg, duration_hours)
    mfrr_annual = capacity_revenue(inputs.mfrr_up_avg, duration_hours)
    trading_annual = trading_revenue(inputs.trading_swing, duration_hours)
    gross_annual = afrr_annual + mfrr_annual + trading_annual

    opex = capex * B.OPEX_PCT_CAPEX + gross_annual * B.AGGREGATOR_PCT_REVENUE
    net_annual = gross_annual - opex

    payback = capex / net_annual if net_annual > 0 else math.inf

    rate = irr(capex, cash_flow_schedule(net_annual), iterations=iterations)

    benchmark = B.BENCHMARK_IRR_CENTRAL_PCT[duration_hours]
    return RevenueResult(
        duration_hours=duration_hours,
        afrr_annual_per_mw=afrr_annual,
        mfrr_annual_per_mw=mfrr_annual,
        trading_annual_per_mw=trading_annual,
        gross_annual_per_mw=gross_annual,
        opex_annual_per_mw=opex,
        net_annual_per_mw=net_annual,
        capex_per_mw=capex,
        simple_payback_years=payback,
        irr=rate,
        irr_vs_benchmark=classify_irr(rate * 100, benchmark),
        benchmark_irr_central_pct=benchmark,
        benchmark_irr_range=(
            f"{B.BENCHMARK_IRR_LOW_PCT[duration_hours]}%–"
            f"{B.BENCHMARK_IRR_HIGH_PCT[duration_hours]}%"
        ),
        market_window_note=B.REVENUE_PEAK_NOTE,
    )


def compute_all_durations(inputs: RevenueInputs) -> dict[int, RevenueResult]:
    """Results for every modeled duration, keyed by hours."""
    return {h: compute_revenue(inputs, h) for h in B.SUPPORTED_DURATIONS}
