"""Alert sink interface and message formatting."""

import logging
from abc import ABC, abstractmethod

from swapsentry.positions.models import RiskAlert, RiskSeverity

logger = logging.getLogger(__name__)

SEVERITY_ICONS = {
    RiskSeverity.CRITICAL: "🚨",
    RiskSeverity.HIGH: "⚠️",
    RiskSeverity.MEDIUM: "🟡",
    RiskSeverity.LOW: "🟢",
}


def format_alert_message(alert: RiskAlert) -> str:
    """Format a risk alert as an HTML message."""
    position = alert.position
    icon = SEVERITY_ICONS.get(alert.severity, "")
    lines = [
        f"{icon} <b>Liquidation risk: {alert.severity.value.upper()}</b>",
        "",
        f"Market: {position.market} ({position.side.value.upper()})",
        f"Size: {position.size}",
        f"Entry: {position.entry_price}",
        f"Liquidation: {position.liquidation_price}",
        f"Distance: {alert.distance_percent:.2f}%",
    ]
    if alert.recommended_action:
        lines.extend(["", alert.recommended_action])
    return "\n".join(lines)


class AlertSink(ABC):
    """Destination for risk alerts. Fire-and-forget."""

    @abstractmethod
    async def emit(self, alert: RiskAlert) -> bool:
        """Deliver an alert.

        Returns:
            True if delivered (informational only)
        """
        pass


class LoggingAlertSink(AlertSink):
    """Writes alerts to the log."""

    async def emit(self, alert: RiskAlert) -> bool:
        position = alert.position
        level = logging.ERROR if alert.severity == RiskSeverity.CRITICAL else logging.WARNING
        logger.log(
            level,
            f"Liquidation risk {alert.severity.value} for {position.owner_address} "
            f"{position.market} {position.side.value}: "
            f"{alert.distance_percent:.2f}% from liquidation",
        )
        return True
