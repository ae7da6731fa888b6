"""Revenue projection engine for battery storage investments.

This module turns current signal values into per-MW annual revenue,
payback and IRR for each modeled battery duration, and ranks reference
markets by IRR.
"""

from bess_signals.revenue.inputs import (
    revenue_inputs_from_cache,
    revenue_inputs_from_records,
)
from bess_signals.revenue.markets import rank_markets
from bess_signals.revenue.model import (
    classify_irr,
    compute_all_durations,
    compute_revenue,
    project_npv,
)
from bess_signals.revenue.solver import bisect_root, irr, npv

__all__ = [
    # Engine
    "compute_revenue",
    "compute_all_durations",
    "classify_irr",
    "project_npv",
    "rank_markets",
    # Root finding
    "bisect_root",
    "irr",
    "npv",
    # Input assembly
    "revenue_inputs_from_cache",
    "revenue_inputs_from_records",
]
