"""FastAPI endpoints for the signal engine.

This module provides the REST API serving signals, history, revenue
projections and freshness diagnostics to the dashboard.
"""

from bess_signals.api.main import app, create_app
from bess_signals.api.services import SignalService, get_service

__all__ = [
    "app",
    "create_app",
    "SignalService",
    "get_service",
]
