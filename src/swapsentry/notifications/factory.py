"""Factory for the configured alert sink."""

import logging
from typing import Optional

from swapsentry.config import Settings, get_settings
from swapsentry.notifications.base import AlertSink, LoggingAlertSink

logger = logging.getLogger(__name__)


def create_alert_sink(settings: Optional[Settings] = None) -> AlertSink:
    """Telegram sink when a bot token and chat are configured, log sink otherwise."""
    settings = settings or get_settings()

    if settings.has_telegram_alerts:
        from swapsentry.notifications.telegram import TelegramAlertSink

        return TelegramAlertSink(chat_id=settings.alert_chat_id, token=settings.telegram_bot_token)

    logger.warning("Telegram alerts not configured - risk alerts go to the log only")
    return LoggingAlertSink()
