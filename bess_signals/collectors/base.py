"""
Upstream collector contract.

Each collector turns one external source into one signal observation.
``collect()`` is the boundary: it bounds the fetch with the collector's own
timeout and converts every failure into a ``FetchOutcome`` instead of
raising, so a batch of collectors can be awaited together without one
failure affecting the others.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 20.0


class FetchError(Exception):
    """An upstream fetch failed (network, timeout, or unusable response)."""

    def __init__(self, source: str, message: str, timed_out: bool = False) -> None:
        super().__init__(f"[{source}] {message}")
        self.source = source
        self.message = message
        self.timed_out = timed_out


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one collector run: an observation or a FetchError.

    Attributes:
        collector: Collector name.
        signal_key: Signal the observation is written to.
        observation: Signal record on success.
        error: Failure on error.
        elapsed_seconds: Wall time spent.
    """

    collector: str
    signal_key: str
    observation: dict[str, Any] | None = None
    error: FetchError | None = None
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        """Whether the fetch produced an observation."""
        return self.error is None and self.observation is not None


class UpstreamCollector(ABC):
    """Base class for all upstream collectors.

    Subclasses implement ``fetch()``; callers use ``collect()``.
    """

    #: Signal key the observation is written to
    signal_key: str = ""

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._session = session

    @property
    def name(self) -> str:
        """Collector name used in logs."""
        return type(self).__name__

    @abstractmethod
    async def fetch(self, session: aiohttp.ClientSession) -> dict[str, Any]:
        """
        Fetch and normalize one observation.

        Args:
            session: HTTP session to use

        Returns:
            Signal record

        Raises:
            FetchError: If the source is unavailable or unusable
        """

    async def collect(self) -> FetchOutcome:
        """
        Run the fetch under this collector's timeout.

        Never raises; failures are returned in the outcome.
        """
        start = time.monotonic()
        try:
            if self._session is not None:
                observation = await asyncio.wait_for(
                    self.fetch(self._session), timeout=self.timeout_seconds
                )
            else:
                async with aiohttp.ClientSession() as session:
                    observation = await asyncio.wait_for(
                        self.fetch(session), timeout=self.timeout_seconds
                    )
        except asyncio.TimeoutError:
            error = FetchError(
                self.name, f"timed out after {self.timeout_seconds}s", timed_out=True
            )
        except FetchError as e:
            error = e
        except aiohttp.ClientError as e:
            error = FetchError(self.name, f"HTTP error: {e}")
        except Exception as e:
            logger.exception(f"[{self.name}] Unexpected error")
            error = FetchError(self.name, f"unexpected error: {e}")
        else:
            elapsed = time.monotonic() - start
            logger.info(f"[{self.name}] fetched {self.signal_key} in {elapsed:.2f}s")
            return FetchOutcome(
                collector=self.name,
                signal_key=self.signal_key,
                observation=observation,
                elapsed_seconds=elapsed,
            )

        elapsed = time.monotonic() - start
        logger.warning(f"[{self.name}] fetch failed: {error.message}")
        return FetchOutcome(
            collector=self.name,
            signal_key=self.signal_key,
            error=error,
            elapsed_seconds=elapsed,
        )
