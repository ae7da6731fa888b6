"""Signal storage, validation, freshness classification and history."""

from bess_signals.signals.cache import SignalCache
from bess_signals.signals.history import HistoryTracker
from bess_signals.signals.registry import SignalSpec, get_signal_spec, known_signal_keys
from bess_signals.signals.separation import (
    build_price_separation_record,
    separation_pct,
    separation_state,
)
from bess_signals.signals.store import (
    InMemoryStore,
    KeyValueStore,
    SqlAlchemyStore,
    create_store,
)
from bess_signals.signals.validation import (
    ValidationResult,
    check_bounds,
    check_required,
    validate_record,
)

__all__ = [
    # Store
    "KeyValueStore",
    "InMemoryStore",
    "SqlAlchemyStore",
    "create_store",
    # Validation
    "ValidationResult",
    "check_required",
    "check_bounds",
    "validate_record",
    # Cache and history
    "SignalCache",
    "HistoryTracker",
    # Registry
    "SignalSpec",
    "get_signal_spec",
    "known_signal_keys",
    # Price separation
    "separation_pct",
    "separation_state",
    "build_price_separation_record",
]
