"""Telegram alert delivery.

Sends liquidation alerts to a configured chat. Delivery failures are logged
and swallowed; the monitor never waits on an acknowledgement.
"""

import logging
from typing import Optional

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError

from swapsentry.notifications.base import AlertSink, format_alert_message
from swapsentry.positions.models import RiskAlert

logger = logging.getLogger(__name__)


class TelegramAlertSink(AlertSink):
    """Alert sink posting to a Telegram chat."""

    def __init__(
        self,
        chat_id: int,
        bot: Optional[Bot] = None,
        token: Optional[str] = None,
    ):
        """Initialize with a bot instance or a bot token.

        Args:
            chat_id: Chat receiving alerts
            bot: Existing bot (tests pass a mock)
            token: Bot token used when no bot is given
        """
        if bot is None and not token:
            raise ValueError("TelegramAlertSink needs a bot or a token")
        self.chat_id = chat_id
        self._bot = bot
        self._token = token

    def _get_bot(self) -> Bot:
        if self._bot is None:
            self._bot = Bot(token=self._token)
        return self._bot

    async def send_message(self, message: str, parse_mode: Optional[str] = "HTML") -> bool:
        """Send a message to the alert chat.

        Returns:
            True if message was sent successfully
        """
        bot = self._get_bot()
        try:
            await bot.send_message(chat_id=self.chat_id, text=message, parse_mode=parse_mode)
            return True
        except TelegramForbiddenError:
            logger.warning(f"Chat {self.chat_id} has blocked the bot")
            return False
        except TelegramBadRequest as e:
            logger.error(f"Bad request sending to {self.chat_id}: {e}")
            return False
        except Exception as e:
            logger.error(f"Failed to send alert to {self.chat_id}: {e}")
            return False

    async def emit(self, alert: RiskAlert) -> bool:
        return await self.send_message(format_alert_message(alert))

    async def close(self) -> None:
        """Close the bot session (call on shutdown)."""
        if self._bot is not None:
            await self._bot.session.close()
            self._bot = None
