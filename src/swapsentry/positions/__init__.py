"""Leveraged position monitoring.

Provides:
- PositionRiskMonitor: polling loop with liquidation alerts
- liquidation_distance / evaluate_positions: risk math
- PositionIndexer / HttpPositionIndexer: position source
"""

from swapsentry.positions.indexer import HttpPositionIndexer, PositionIndexer
from swapsentry.positions.models import (
    Position,
    PositionSide,
    PositionStatus,
    RiskAlert,
    RiskSeverity,
)
from swapsentry.positions.monitor import MonitorStatus, PositionRiskMonitor
from swapsentry.positions.risk import (
    classify_severity,
    evaluate_positions,
    liquidation_distance,
)

__all__ = [
    "HttpPositionIndexer",
    "PositionIndexer",
    "Position",
    "PositionSide",
    "PositionStatus",
    "RiskAlert",
    "RiskSeverity",
    "MonitorStatus",
    "PositionRiskMonitor",
    "classify_severity",
    "evaluate_positions",
    "liquidation_distance",
]
