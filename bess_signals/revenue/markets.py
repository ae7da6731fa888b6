"""Cross-market IRR ranking."""

from __future__ import annotations

from collections.abc import Sequence

from bess_signals.domain.models import MarketComparisonRow, RevenueInputs
from bess_signals.revenue.benchmarks import REFERENCE_MARKETS, ReferenceMarket
from bess_signals.revenue.model import compute_revenue

COMPARISON_DURATION_HOURS = 2


def market_inputs(market: ReferenceMarket, live: RevenueInputs) -> RevenueInputs:
    """Inputs for a market, filling unpublished prices from live values.

    A market's reference day-ahead spread stands in for its intraday swing.
    """
    return RevenueInputs(
        afrr_up_avg=(
            market.afrr_up_eur_mwh if market.afrr_up_eur_mwh is not None else live.afrr_up_avg
        ),
        mfrr_up_avg=(
            market.mfrr_up_eur_mwh if market.mfrr_up_eur_mwh is not None else live.mfrr_up_avg
        ),
        spread_eur_mwh=(
            market.da_spread_eur_mwh
            if market.da_spread_eur_mwh is not None
            else live.spread_eur_mwh
        ),
        daily_swing_eur_mwh=(
            market.da_spread_eur_mwh
            if market.da_spread_eur_mwh is not None
            else live.daily_swing_eur_mwh
        ),
        euribor_3m=live.euribor_3m,
    )


def rank_markets(
    live_inputs: RevenueInputs,
    markets: Sequence[ReferenceMarket] = REFERENCE_MARKETS,
) -> list[MarketComparisonRow]:
    """Rank reference markets by IRR, highest first.

    Published IRRs are used where available since the model is less
    accurate than third-party benchmarks for mature markets; only markets
    without one use the computed IRR.
    """
    rows: list[MarketComparisonRow] = []
    for market in markets:
        result = compute_revenue(market_inputs(market, live_inputs), COMPARISON_DURATION_HOURS)
        rows.append(
            MarketComparisonRow(
                country=market.country,
                flag=market.flag,
                irr_pct=(
                    market.irr_central_pct
                    if market.irr_central_pct is not None
                    else result.irr_pct
                ),
                net_annual_per_mw=result.net_annual_per_mw,
                capex_per_mw=market.capex_per_mw,
                note=market.note,
                is_live=market.is_live,
            )
        )
    return sorted(rows, key=lambda row: row.irr_pct, reverse=True)
