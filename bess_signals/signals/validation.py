"""Write-time validation for signal records.

Validation is deliberately partial. Upstream sources legitimately omit
fields when only partially available, so the checks target *impossible*
values (NaN propagation, prices outside known physical limits) rather than
schema completeness.

Both checks are pure and composable: a write combines them and rejects the
whole record if either reports errors.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from bess_signals.signals.registry import SANITY_BOUNDS


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a candidate record.

    Attributes:
        valid: Whether the record passed.
        errors: Human-readable error per failing field.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> ValidationResult:
        """Build a result from a (possibly empty) error list."""
        return cls(valid=not errors, errors=list(errors))

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine two results; invalid if either is invalid."""
        return ValidationResult.from_errors(self.errors + other.errors)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a measurement
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_required(
    record: Mapping[str, Any],
    required_fields: Iterable[str],
) -> ValidationResult:
    """Check that required fields are present and finite.

    Args:
        record: Candidate record.
        required_fields: Field names that must be present.

    Returns:
        ValidationResult with one error per missing, null, NaN or
        infinite field.
    """
    errors: list[str] = []
    for name in required_fields:
        value = record.get(name)
        if value is None:
            errors.append(f"{name}: missing or null")
        elif _is_number(value) and not math.isfinite(value):
            errors.append(f"{name}: NaN or Infinity")
    return ValidationResult.from_errors(errors)


def check_bounds(
    signal_key: str,
    record: Mapping[str, Any],
    bounds: Mapping[str, tuple[float, float]] | None = None,
) -> ValidationResult:
    """Check present fields against the signal's bounds table.

    Fields missing from the bounds table are not checked, and signals with
    no table always pass.

    Args:
        signal_key: Key into ``SANITY_BOUNDS``.
        record: Candidate record.
        bounds: Explicit bounds table overriding the registry.

    Returns:
        ValidationResult with one error per out-of-range or non-numeric field.
    """
    table = bounds if bounds is not None else SANITY_BOUNDS.get(signal_key)
    if not table:
        return ValidationResult(valid=True)

    errors: list[str] = []
    for name, (low, high) in table.items():
        value = record.get(name)
        if value is None:
            continue
        if not _is_number(value) or math.isnan(value):
            errors.append(f"{name}: not a number ({value!r})")
        elif value < low or value > high:
            errors.append(f"{name}: {value} outside bounds [{low}, {high}]")
    return ValidationResult.from_errors(errors)


def validate_record(
    record: Mapping[str, Any],
    required_fields: Iterable[str] = (),
    bounds_key: str | None = None,
) -> ValidationResult:
    """Run the required-field check and, if a bounds key is given, the bounds check."""
    result = check_required(record, required_fields)
    if bounds_key:
        result = result.merge(check_bounds(bounds_key, record))
    return result
