"""Tests for write-time record validation.

Tests cover:
- Required-field checks (missing, null, NaN, Infinity)
- Sanity-bounds checks (range, non-numeric, partial tables)
- Combined validation and result merging
"""

from __future__ import annotations

import math

from bess_signals.signals.validation import (
    ValidationResult,
    check_bounds,
    check_required,
    validate_record,
)

# --- ValidationResult Tests ---


class TestValidationResult:
    """Tests for the ValidationResult dataclass."""

    def test_from_empty_errors_is_valid(self) -> None:
        """No errors means valid."""
        result = ValidationResult.from_errors([])
        assert result.valid
        assert result.errors == []

    def test_merge_keeps_all_errors(self) -> None:
        """Merging is invalid if either side is invalid."""
        a = ValidationResult.from_errors(["a: bad"])
        b = ValidationResult(valid=True)
        merged = a.merge(b)
        assert not merged.valid
        assert merged.errors == ["a: bad"]


# --- check_required Tests ---


class TestCheckRequired:
    """Tests for required-field validation."""

    def test_all_present(self) -> None:
        """Present finite values pass."""
        result = check_required({"a": 1.0, "b": "x"}, ["a", "b"])
        assert result.valid

    def test_missing_and_null(self) -> None:
        """Missing and null fields are both reported."""
        result = check_required({"a": None}, ["a", "b"])
        assert not result.valid
        assert len(result.errors) == 2
        assert all("missing or null" in e for e in result.errors)

    def test_nan_and_infinity(self) -> None:
        """Non-finite numbers are rejected."""
        result = check_required({"a": math.nan, "b": math.inf}, ["a", "b"])
        assert not result.valid
        assert len(result.errors) == 2

    def test_does_not_mutate_input(self) -> None:
        """Validation is pure."""
        record = {"a": None}
        check_required(record, ["a"])
        assert record == {"a": None}


# --- check_bounds Tests ---


class TestCheckBounds:
    """Tests for sanity-bounds validation."""

    def test_in_range_passes(self) -> None:
        """Values within bounds pass."""
        result = check_bounds("s1", {"spread_eur_mwh": 12.0, "lt_avg_eur_mwh": 90.0})
        assert result.valid

    def test_out_of_range_fails(self) -> None:
        """A spread above the physical limit is rejected."""
        result = check_bounds("s1", {"spread_eur_mwh": 9999.0})
        assert not result.valid
        assert "spread_eur_mwh" in result.errors[0]
        assert "outside bounds" in result.errors[0]

    def test_negative_prices_allowed(self) -> None:
        """Negative day-ahead prices are physically possible."""
        result = check_bounds("s1", {"lt_avg_eur_mwh": -50.0})
        assert result.valid

    def test_absent_fields_skipped(self) -> None:
        """Bounds apply only to fields that are present."""
        assert check_bounds("s1", {}).valid
        assert check_bounds("s1", {"spread_eur_mwh": None}).valid

    def test_unlisted_fields_unchecked(self) -> None:
        """Fields outside the table are never checked."""
        result = check_bounds("s1", {"some_other_field": 1e12})
        assert result.valid

    def test_unknown_signal_passes(self) -> None:
        """Signals without a bounds table always pass."""
        assert check_bounds("s5", {"anything": -1e9}).valid

    def test_non_numeric_fails(self) -> None:
        """Strings and NaN in a bounded field are rejected."""
        result = check_bounds("s2", {"afrr_up_avg": "high", "mfrr_up_avg": math.nan})
        assert not result.valid
        assert len(result.errors) == 2
        assert all("not a number" in e for e in result.errors)

    def test_bool_is_not_a_number(self) -> None:
        """Booleans are not accepted as measurements."""
        result = check_bounds("s2", {"afrr_up_avg": True})
        assert not result.valid

    def test_explicit_bounds_override(self) -> None:
        """An explicit table replaces the registry."""
        result = check_bounds("s1", {"x": 11}, bounds={"x": (0, 10)})
        assert not result.valid


# --- validate_record Tests ---


class TestValidateRecord:
    """Tests for combined validation."""

    def test_combines_both_checks(self) -> None:
        """Required and bounds errors are both reported."""
        result = validate_record(
            {"afrr_up_avg": -5.0},
            required_fields=["afrr_up_avg", "mfrr_up_avg"],
            bounds_key="s2",
        )
        assert not result.valid
        assert len(result.errors) == 2

    def test_no_bounds_key_skips_bounds(self) -> None:
        """Without a bounds key only required fields are checked."""
        result = validate_record({"afrr_up_avg": -5.0}, required_fields=["afrr_up_avg"])
        assert result.valid
