"""Risk alert delivery."""

from swapsentry.notifications.base import AlertSink, LoggingAlertSink, format_alert_message
from swapsentry.notifications.factory import create_alert_sink

__all__ = [
    "AlertSink",
    "LoggingAlertSink",
    "create_alert_sink",
    "format_alert_message",
]
