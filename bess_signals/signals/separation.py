"""Baltic price separation signal (LT vs SE4 day-ahead).

The separation percentage divides the LT-SE4 spread by the SE4 reference
price. The reference price can sit near zero (or cross it) in windy hours,
so the denominator's magnitude is floored before dividing.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import numpy as np

DEFAULT_DENOMINATOR_FLOOR = 10.0  # €/MWh

ACT_THRESHOLD_PCT = 20.0
WATCH_THRESHOLD_PCT = 5.0


def separation_pct(
    spread: float,
    reference_price: float,
    floor: float = DEFAULT_DENOMINATOR_FLOOR,
) -> float:
    """Spread as a percentage of the reference price, with a floored denominator.

    Args:
        spread: Price spread (€/MWh).
        reference_price: Reference price (€/MWh), may be near zero or negative.
        floor: Minimum magnitude of the denominator (€/MWh).

    Returns:
        Separation in percent.

    Example:
        >>> separation_pct(5.0, 0.4)
        50.0
    """
    if floor <= 0:
        raise ValueError("floor must be positive")
    return spread / max(abs(reference_price), floor) * 100


def separation_state(pct: float) -> str:
    """Map a separation percentage to ``ACT``, ``WATCH`` or ``CALM``."""
    if pct > ACT_THRESHOLD_PCT:
        return "ACT"
    if pct >= WATCH_THRESHOLD_PCT:
        return "WATCH"
    return "CALM"


def build_price_separation_record(
    lt_prices: Sequence[float],
    se4_prices: Sequence[float],
    floor: float = DEFAULT_DENOMINATOR_FLOOR,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the ``s1`` signal record from hourly day-ahead prices.

    Args:
        lt_prices: Lithuania hourly prices (€/MWh).
        se4_prices: Sweden SE4 hourly prices (€/MWh).
        floor: Denominator floor for the separation percentage.
        now: Measurement time; defaults to the current UTC time.

    Returns:
        Signal record ready for a validated cache write.

    Raises:
        ValueError: If either price series is empty.
    """
    if len(lt_prices) == 0 or len(se4_prices) == 0:
        raise ValueError(f"No price data: LT={len(lt_prices)}h SE4={len(se4_prices)}h")

    lt = np.asarray(lt_prices, dtype=float)
    se4 = np.asarray(se4_prices, dtype=float)
    lt_avg = float(lt.mean())
    se4_avg = float(se4.mean())
    spread = lt_avg - se4_avg
    pct = separation_pct(spread, se4_avg, floor)
    measured_at = now or datetime.now(timezone.utc)

    return {
        "signal": "S1",
        "name": "Baltic Price Separation",
        "lt_avg_eur_mwh": round(lt_avg, 2),
        "se4_avg_eur_mwh": round(se4_avg, 2),
        "spread_eur_mwh": round(spread, 2),
        "separation_pct": round(pct, 1),
        "lt_daily_swing_eur_mwh": round(float(np.ptp(lt)), 2),
        "state": separation_state(pct),
        "lt_hours": int(lt.size),
        "se4_hours": int(se4.size),
        "timestamp": measured_at.isoformat(),
    }
