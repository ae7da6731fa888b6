"""
ENTSO-E day-ahead price collector (signal ``s1``).

Fetches LT and SE4 day-ahead prices (document type A44) for the current
UTC day and builds the Baltic price separation record.
"""

from __future__ import annotations

import asyncio
import re
from datetime import datetime, timedelta, timezone
from typing import Any

import aiohttp

from bess_signals.collectors.base import DEFAULT_TIMEOUT_SECONDS, FetchError, UpstreamCollector
from bess_signals.signals.separation import (
    DEFAULT_DENOMINATOR_FLOOR,
    build_price_separation_record,
)

ENTSOE_API = "https://web-api.tp.entsoe.eu/api"

LT_BZN = "10YLT-1001A0008Q"  # Lithuania bidding zone
SE4_BZN = "10Y1001A1001A47J"  # Sweden SE4 bidding zone

_PRICE_RE = re.compile(r"<price\.amount>(-?[\d.]+)</price\.amount>")


def utc_period(offset_days: int = 0, now: datetime | None = None) -> str:
    """ENTSO-E period string (``YYYYMMDD0000``) for a UTC day."""
    day = (now or datetime.now(timezone.utc)) + timedelta(days=offset_days)
    return day.strftime("%Y%m%d") + "0000"


def extract_prices(xml: str) -> list[float]:
    """Hourly prices from an A44 publication document."""
    return [float(m) for m in _PRICE_RE.findall(xml)]


class EntsoeDayAheadCollector(UpstreamCollector):
    """Collector for the LT/SE4 price separation signal."""

    signal_key = "s1"

    def __init__(
        self,
        api_key: str,
        denominator_floor: float = DEFAULT_DENOMINATOR_FLOOR,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds, session=session)
        self.api_key = api_key
        self.denominator_floor = denominator_floor

    async def _fetch_zone(self, session: aiohttp.ClientSession, bzn: str) -> list[float]:
        params = {
            "documentType": "A44",
            "in_Domain": bzn,
            "out_Domain": bzn,
            "periodStart": utc_period(0),
            "periodEnd": utc_period(1),
            "securityToken": self.api_key,
        }
        async with session.get(ENTSOE_API, params=params) as response:
            body = await response.text()
            if response.status != 200:
                raise FetchError(self.name, f"{bzn}: HTTP {response.status} {body[:200]}")
        return extract_prices(body)

    async def fetch(self, session: aiohttp.ClientSession) -> dict[str, Any]:
        if not self.api_key:
            raise FetchError(self.name, "ENTSOE_API_KEY not set")

        lt_prices, se4_prices = await asyncio.gather(
            self._fetch_zone(session, LT_BZN),
            self._fetch_zone(session, SE4_BZN),
        )
        try:
            return build_price_separation_record(
                lt_prices, se4_prices, floor=self.denominator_floor
            )
        except ValueError as e:
            raise FetchError(self.name, str(e)) from e
