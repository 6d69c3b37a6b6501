from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Protocol

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.token import TokenValidationError

from dex_arbitrage.config.models import TelegramConfig
from dex_arbitrage.core.exceptions import NotificationError
from dex_arbitrage.services.schemas import Opportunity

log = logging.getLogger(__name__)


class AlertSink(Protocol):
    async def send(self, message: str) -> None:
        ...

    async def close(self) -> None:
        ...


class TelegramAlertSink:
    def __init__(self, config: TelegramConfig) -> None:
        self._config = config
        self._bot: Bot | None = None

    async def send(self, message: str) -> None:
        bot = self._get_bot()
        chat_id = self._config.chat_id
        try:
            await bot.send_message(
                chat_id=chat_id,
                text=message,
                parse_mode=self._config.parse_mode,
                disable_web_page_preview=True,
            )
        except TelegramAPIError as exc:
            raise NotificationError(str(exc)) from exc
        log.info("Telegram notification sent", extra={"chat_id": chat_id})

    def _get_bot(self) -> Bot:
        if self._bot:
            return self._bot
        token = self._config.bot_token.strip()
        if not token:
            raise NotificationError("bot_token is empty or not configured")
        try:
            self._bot = Bot(token=token)
        except TokenValidationError as exc:
            raise NotificationError(f"Invalid bot token: {exc}") from exc
        return self._bot

    async def close(self) -> None:
        if self._bot:
            await self._bot.session.close()
            self._bot = None


class LogAlertSink:
    """Writes alerts to the log; used when Telegram is disabled."""

    async def send(self, message: str) -> None:
        log.info("Alert:\n%s", message)

    async def close(self) -> None:
        return None


@dataclass
class NotificationState:
    last_attempt_ms: float | None = None


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


def format_opportunity(opportunity: Opportunity) -> str:
    detected_at = datetime.fromtimestamp(opportunity.timestamp_ms / 1000, tz=timezone.utc)
    return (
        "🚀 *Arbitrage Opportunity Detected* 🚀\n"
        "\n"
        f"*Network:* {opportunity.network}\n"
        f"*Pair:* {opportunity.pair}\n"
        f"*Buy At:* {opportunity.buy_venue} ({opportunity.buy_price:.6f})\n"
        f"*Sell At:* {opportunity.sell_venue} ({opportunity.sell_price:.6f})\n"
        f"*Profit Spread:* {opportunity.spread_pct:.2f}%\n"
        "\n"
        f"⏱ _{detected_at:%Y-%m-%d %H:%M:%S} UTC_"
    )


class Notifier:
    """Formats opportunities and delivers them with a global cooldown.

    The cooldown runs from the last dispatch attempt, successful or not.
    Notifications arriving inside the cooldown are dropped, never queued.
    """

    def __init__(
        self,
        sink: AlertSink,
        cooldown_ms: int = 2000,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        self._sink = sink
        self._cooldown_ms = cooldown_ms
        self._clock = clock
        self._state = NotificationState()

    @property
    def state(self) -> NotificationState:
        return self._state

    async def notify(self, opportunity: Opportunity) -> bool:
        now = self._clock()
        last = self._state.last_attempt_ms
        if last is not None and now - last < self._cooldown_ms:
            log.info(
                "Skipping notification for %s %s due to cooldown (%.0f ms left)",
                opportunity.network,
                opportunity.pair,
                self._cooldown_ms - (now - last),
            )
            return False

        self._state.last_attempt_ms = now
        message = format_opportunity(opportunity)
        try:
            await self._sink.send(message)
        except Exception as exc:
            log.error("Failed to send notification for %s %s: %s", opportunity.network, opportunity.pair, exc)
            return False
        return True

    async def close(self) -> None:
        await self._sink.close()
