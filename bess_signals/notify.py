"""
Operator alerting for rejected signal writes.

Alert delivery is fire-and-forget: ``notify()`` never raises, so a failing
alert channel cannot break the signal pipeline.
"""

from __future__ import annotations

import html
import logging
from abc import ABC, abstractmethod

import aiohttp

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"


class Notifier(ABC):
    """Alert channel."""

    @abstractmethod
    async def notify(self, message: str) -> bool:
        """Send an alert. Returns whether it was delivered; never raises."""


class LogNotifier(Notifier):
    """Writes alerts to the log only."""

    async def notify(self, message: str) -> bool:
        logger.warning(f"ALERT: {message}")
        return True


class TelegramNotifier(Notifier):
    """Sends alerts to a Telegram chat."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout_seconds = timeout_seconds

    @property
    def configured(self) -> bool:
        """Whether both the token and chat id are set."""
        return bool(self.bot_token and self.chat_id)

    async def notify(self, message: str) -> bool:
        if not self.configured:
            logger.debug("Telegram not configured, alert dropped")
            return False

        url = f"{TELEGRAM_API}/bot{self.bot_token}/sendMessage"
        payload = {
            "chat_id": self.chat_id,
            "text": f"<b>BESS signals alert</b>\n{html.escape(message)}",
            "parse_mode": "HTML",
        }
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=payload) as response:
                    if response.status != 200:
                        logger.error(f"Telegram notify failed: HTTP {response.status}")
                        return False
            return True
        except Exception as e:
            logger.error(f"Telegram notify failed: {e}")
            return False


def rejection_message(key: str, errors: list[str]) -> str:
    """Alert text for a rejected write."""
    return f"Write rejected for [{key}]:\n" + "\n".join(f"- {e}" for e in errors)
