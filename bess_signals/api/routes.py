"""FastAPI routers for signal, revenue and health endpoints."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse

from bess_signals.api.schemas import (
    PercentilesResponse,
    RevenueResponse,
    SignalHealthResponse,
    WriteResponse,
)
from bess_signals.api.services import SignalService, get_service
from bess_signals.signals.registry import get_signal_spec

router = APIRouter(prefix="/api/v1/signals", tags=["signals"])


def _require_known(service: SignalService, key: str) -> None:
    if not service.is_known(key):
        raise HTTPException(status_code=404, detail=f"Unknown signal '{key}'")


@router.get("/{key}")
async def read_signal(
    key: str,
    response: Response,
    service: SignalService = Depends(get_service),
) -> dict[str, Any]:
    """Read a signal with serving-tier annotations.

    Always answers with a usable record: live, stale cache or static
    defaults, as indicated by ``_serving``.
    """
    _require_known(service, key)
    result = service.read_signal(key)
    max_age = get_signal_spec(key).cache_max_age_seconds
    response.headers["Cache-Control"] = f"public, max-age={max_age}"
    return result.annotated()


@router.post("/{key}", response_model=WriteResponse)
async def write_signal(
    key: str,
    request: Request,
    x_signal_secret: str | None = Header(default=None),
    service: SignalService = Depends(get_service),
) -> WriteResponse | JSONResponse:
    """Manually write a signal record.

    Requires the ``X-Signal-Secret`` header. The record is validated
    against the signal's required fields and sanity bounds; a rejected
    write leaves the stored value untouched and returns 422.
    """
    if not service.authorize(x_signal_secret):
        raise HTTPException(status_code=401, detail="Unauthorized")
    _require_known(service, key)

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=400, detail="Body must be a JSON object") from e
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Body must be a JSON object")

    outcome = WriteResponse.from_outcome(service.write_signal(key, body))
    if not outcome.success:
        return JSONResponse(
            status_code=422,
            content=outcome.model_dump(mode="json", by_alias=True),
        )
    return outcome


@router.get("/{key}/history")
async def read_history(
    key: str,
    service: SignalService = Depends(get_service),
) -> list[dict[str, Any]]:
    """Daily history entries for a signal, oldest first."""
    _require_known(service, key)
    return service.history_entries(key)


@router.get("/{key}/history/percentiles", response_model=PercentilesResponse)
async def read_percentiles(
    key: str,
    field: str = Query(..., description="History field to summarize"),
    service: SignalService = Depends(get_service),
) -> PercentilesResponse:
    """Nearest-rank p25/p50/p75/p90 of a history field."""
    _require_known(service, key)
    return PercentilesResponse.from_percentiles(key, field, service.percentiles(key, field))


# =============================================================================
# Revenue Endpoints
# =============================================================================

revenue_router = APIRouter(prefix="/api/v1/revenue", tags=["revenue"])


@revenue_router.get("", response_model=RevenueResponse)
async def read_revenue(
    response: Response,
    service: SignalService = Depends(get_service),
) -> RevenueResponse:
    """Revenue projection per duration plus the cross-market ranking."""
    snapshot = service.revenue_snapshot()
    max_age = int(service.revenue.cache_hours * 3600)
    response.headers["Cache-Control"] = f"public, max-age={max_age}"
    return RevenueResponse.from_snapshot(snapshot)


# =============================================================================
# Health Endpoints
# =============================================================================

health_router = APIRouter(prefix="/api/v1/health", tags=["health"])


@health_router.get("/signals", response_model=dict[str, SignalHealthResponse])
async def signal_health(
    service: SignalService = Depends(get_service),
) -> dict[str, SignalHealthResponse]:
    """Presence and age of every registered signal."""
    return {
        key: SignalHealthResponse.from_health(health)
        for key, health in service.signal_health().items()
    }
