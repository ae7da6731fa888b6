"""FastAPI application for the Baltic BESS signal engine.

This module provides the main FastAPI application with all routes,
middleware, and the optional in-process refresh scheduler.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bess_signals import __version__
from bess_signals.api.routes import health_router, revenue_router
from bess_signals.api.routes import router as signals_router
from bess_signals.api.schemas import HealthResponse
from bess_signals.api.services import build_scheduler, get_service
from bess_signals.config import configure_logging, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting BESS signal engine API...")

    stop = asyncio.Event()
    task: asyncio.Task | None = None
    if settings.SCHEDULER_ENABLED:
        scheduler = build_scheduler(get_service(), settings)
        task = asyncio.create_task(
            scheduler.run_forever(settings.SCHEDULER_INTERVAL_SECONDS, stop_event=stop)
        )
        logger.info(
            f"Scheduler started: {len(scheduler.collectors)} collectors, "
            f"every {settings.SCHEDULER_INTERVAL_SECONDS:.0f}s"
        )

    yield

    stop.set()
    if task is not None:
        await task
    logger.info("Shutting down API...")


# Create FastAPI application
app = FastAPI(
    title="Baltic BESS Signal Engine",
    description="""
Market signals and revenue projections for battery storage in the Baltics.

## Features

- **Resilient signals**: every read answers with live, stale or default data
- **Validated writes**: sanity bounds gate every stored record
- **Revenue model**: per-MW revenue, payback and IRR for 2h and 4h systems

## Key Endpoints

- `GET /api/v1/signals/{key}`: Annotated signal record
- `GET /api/v1/signals/{key}/history`: Daily history
- `GET /api/v1/revenue`: Revenue projection and market ranking
- `GET /api/v1/health/signals`: Freshness of every signal
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add CORS middleware for the dashboard
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(signals_router)
app.include_router(revenue_router)
app.include_router(health_router)


# =============================================================================
# Root & Health Endpoints
# =============================================================================


@app.get("/", response_class=JSONResponse)
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Baltic BESS Signal Engine",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )


# =============================================================================
# Main Entry Point
# =============================================================================


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bess_signals.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
