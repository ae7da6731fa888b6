"""Tests for the LT/SE4 price separation signal."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from bess_signals.signals.registry import REQUIRED_FIELDS
from bess_signals.signals.separation import (
    build_price_separation_record,
    separation_pct,
    separation_state,
)
from bess_signals.signals.validation import validate_record


class TestSeparationPct:
    """Tests for the floored separation percentage."""

    def test_normal_reference(self) -> None:
        """Away from zero the plain ratio applies."""
        assert separation_pct(15.0, 75.0) == pytest.approx(20.0)

    def test_degenerate_reference_is_floored(self) -> None:
        """A 0.4 €/MWh reference uses the 10 €/MWh floor."""
        assert separation_pct(5.0, 0.4) == pytest.approx(50.0)

    def test_zero_and_negative_reference(self) -> None:
        """Zero and negative references stay finite."""
        assert math.isfinite(separation_pct(5.0, 0.0))
        assert separation_pct(5.0, -40.0) == pytest.approx(12.5)

    def test_custom_floor(self) -> None:
        """The floor is configurable."""
        assert separation_pct(5.0, 0.4, floor=20.0) == pytest.approx(25.0)

    def test_invalid_floor(self) -> None:
        """A non-positive floor is rejected."""
        with pytest.raises(ValueError):
            separation_pct(5.0, 0.4, floor=0.0)


class TestSeparationState:
    """Tests for state thresholds."""

    @pytest.mark.parametrize(
        ("pct", "state"),
        [(25.0, "ACT"), (20.0, "WATCH"), (5.0, "WATCH"), (4.9, "CALM"), (-30.0, "CALM")],
    )
    def test_thresholds(self, pct: float, state: str) -> None:
        assert separation_state(pct) == state


class TestPriceSeparationRecord:
    """Tests for building the s1 record from hourly prices."""

    def test_record_fields(self) -> None:
        """Averages, spread, swing and counts are derived from the series."""
        now = datetime(2026, 2, 10, 6, 0, tzinfo=timezone.utc)
        record = build_price_separation_record(
            [100.0, 120.0, 80.0, 100.0],
            [90.0, 90.0, 90.0, 90.0],
            now=now,
        )
        assert record["lt_avg_eur_mwh"] == 100.0
        assert record["se4_avg_eur_mwh"] == 90.0
        assert record["spread_eur_mwh"] == 10.0
        assert record["separation_pct"] == 11.1
        assert record["state"] == "WATCH"
        assert record["lt_daily_swing_eur_mwh"] == 40.0
        assert record["lt_hours"] == 4
        assert record["timestamp"] == now.isoformat()

    def test_record_passes_validation(self) -> None:
        """A built record satisfies the s1 write policy."""
        record = build_price_separation_record([50.0, 60.0], [0.2, 0.6])
        result = validate_record(record, REQUIRED_FIELDS["s1"], bounds_key="s1")
        assert result.valid
        assert math.isfinite(record["separation_pct"])

    def test_empty_series(self) -> None:
        """Missing price data is an error, not a zero record."""
        with pytest.raises(ValueError):
            build_price_separation_record([], [50.0])
