"""Application settings and logging configuration.

Settings are read from environment variables (and an optional ``.env``
file). Units follow the rest of the package:
- Prices: €/MWh
- Time windows: hours unless the name says otherwise
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Storage
    DATABASE_URL: str = "sqlite:///./bess_signals.db"

    # Manual-override writes
    SIGNAL_WRITE_SECRET: str = ""

    # External APIs
    ENTSOE_API_KEY: str = ""
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_CHAT_ID: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Signal computation
    SEPARATION_DENOMINATOR_FLOOR: float = 10.0
    HISTORY_MAX_ENTRIES: int = 90

    # Revenue snapshot cache window
    REVENUE_CACHE_HOURS: float = 6.0

    # Scheduler
    SCHEDULER_ENABLED: bool = False
    SCHEDULER_INTERVAL_SECONDS: float = 4 * 3600.0
    COLLECTOR_TIMEOUT_SECONDS: float = 20.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service.

    Args:
        level: Log level name. Defaults to ``LOG_LEVEL`` from settings.
    """
    logging.basicConfig(
        level=(level or get_settings().LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
