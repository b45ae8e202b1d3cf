"""Liquidation distance and risk classification.

distance = (entry - liquidation) / entry   for LONG
distance = (liquidation - entry) / entry   for SHORT

Smaller is riskier; a negative distance means the liquidation price has
already been crossed relative to entry. Computed with Decimal so that
entry=100 / liquidation=90 is exactly 0.10.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Union

from swapsentry.positions.models import Position, PositionSide, RiskAlert, RiskSeverity

logger = logging.getLogger(__name__)

DEFAULT_ALERT_THRESHOLD = Decimal("0.15")
CRITICAL_DISTANCE = Decimal("0.05")
MEDIUM_DISTANCE = Decimal("0.30")

RECOMMENDED_ACTIONS = {
    RiskSeverity.CRITICAL: "Close position immediately or add margin",
    RiskSeverity.HIGH: "Consider reducing position size or adding margin",
    RiskSeverity.MEDIUM: "Monitor closely",
    RiskSeverity.LOW: "",
}


def liquidation_distance(position: Position) -> Optional[Decimal]:
    """Fractional price move remaining before liquidation.

    Returns:
        Distance as a fraction, or None if a price is missing or non-finite, or entry is zero
    """
    if not position.has_prices:
        return None

    entry = position.entry_price
    liquidation = position.liquidation_price
    if not (entry.is_finite() and liquidation.is_finite()) or entry == 0:
        return None
    if position.side == PositionSide.LONG:
        return (entry - liquidation) / entry
    return (liquidation - entry) / entry


def classify_severity(distance: Decimal, threshold: Decimal = DEFAULT_ALERT_THRESHOLD) -> RiskSeverity:
    """Map a liquidation distance to a severity band."""
    if distance < CRITICAL_DISTANCE:
        return RiskSeverity.CRITICAL
    if distance < threshold:
        return RiskSeverity.HIGH
    if distance < MEDIUM_DISTANCE:
        return RiskSeverity.MEDIUM
    return RiskSeverity.LOW


def evaluate_positions(
    positions: Iterable[Position],
    threshold: Union[Decimal, float, str] = DEFAULT_ALERT_THRESHOLD,
) -> list[RiskAlert]:
    """Build alerts for open positions closer to liquidation than threshold.

    Positions without both prices are skipped, not errored.
    """
    threshold = Decimal(str(threshold))
    alerts = []

    for position in positions:
        if not position.is_open:
            continue

        distance = liquidation_distance(position)
        if distance is None:
            logger.debug(f"Skipping {position.market} position without prices")
            continue

        if distance < threshold:
            severity = classify_severity(distance, threshold)
            alerts.append(
                RiskAlert(
                    position=position,
                    distance_to_liquidation=distance,
                    severity=severity,
                    recommended_action=RECOMMENDED_ACTIONS[severity],
                )
            )

    return alerts
