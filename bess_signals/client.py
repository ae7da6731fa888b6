"""
Presentation-side signal reads.

A reader gets exactly one retry after a short fixed delay, each attempt
bounded by a timeout, so a transient network blip does not surface as a
failed card. Scheduler writes never go through this path.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp

logger = logging.getLogger(__name__)

T = TypeVar("T")

FETCH_TIMEOUT_SECONDS = 5.0
RETRY_DELAY_SECONDS = 2.0


async def fetch_with_retry(
    fetch: Callable[[], Awaitable[T]],
    timeout_seconds: float = FETCH_TIMEOUT_SECONDS,
    retry_delay_seconds: float = RETRY_DELAY_SECONDS,
) -> T:
    """
    Call ``fetch`` with one retry after a fixed delay.

    Args:
        fetch: Zero-argument coroutine factory
        timeout_seconds: Per-attempt timeout
        retry_delay_seconds: Delay before the single retry

    Returns:
        Result of the first successful attempt

    Raises:
        Exception: Whatever the second attempt raised
    """
    try:
        return await asyncio.wait_for(fetch(), timeout=timeout_seconds)
    except (asyncio.TimeoutError, aiohttp.ClientError, ValueError) as e:
        logger.info(f"Signal read failed ({e!r}), retrying in {retry_delay_seconds}s")
    await asyncio.sleep(retry_delay_seconds)
    return await asyncio.wait_for(fetch(), timeout=timeout_seconds)


class SignalClient:
    """HTTP client for the read-signal endpoints."""

    def __init__(
        self,
        base_url: str,
        session: aiohttp.ClientSession,
        timeout_seconds: float = FETCH_TIMEOUT_SECONDS,
        retry_delay_seconds: float = RETRY_DELAY_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout_seconds = timeout_seconds
        self.retry_delay_seconds = retry_delay_seconds

    async def _get_json(self, path: str) -> Any:
        async with self.session.get(f"{self.base_url}{path}") as response:
            response.raise_for_status()
            return await response.json()

    async def get_signal(self, key: str) -> dict[str, Any]:
        """Fetch an annotated signal record."""
        return await fetch_with_retry(
            lambda: self._get_json(f"/api/v1/signals/{key}"),
            timeout_seconds=self.timeout_seconds,
            retry_delay_seconds=self.retry_delay_seconds,
        )

    async def get_revenue(self) -> dict[str, Any]:
        """Fetch the revenue snapshot."""
        return await fetch_with_retry(
            lambda: self._get_json("/api/v1/revenue"),
            timeout_seconds=self.timeout_seconds,
            retry_delay_seconds=self.retry_delay_seconds,
        )
