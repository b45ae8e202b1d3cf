"""Position and risk alert types.

Positions are owned by the indexer; the monitor only ever holds a
read-only snapshot that is replaced wholesale on each poll.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class PositionSide(str, Enum):
    LONG = "long"
    SHORT = "short"


class PositionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class Position:
    """A leveraged position as reported by the indexer."""

    owner_address: str
    market: str  # e.g. "BTC-USD"
    side: PositionSide
    size: Decimal
    entry_price: Optional[Decimal]
    liquidation_price: Optional[Decimal]
    opened_at: Optional[datetime] = None
    status: PositionStatus = PositionStatus.OPEN
    position_id: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == PositionStatus.OPEN

    @property
    def has_prices(self) -> bool:
        """Both prices needed for a liquidation distance are present."""
        return self.entry_price is not None and self.liquidation_price is not None


class RiskSeverity(str, Enum):
    """How close a position is to liquidation."""

    CRITICAL = "critical"  # < 5%
    HIGH = "high"  # < 15%
    MEDIUM = "medium"  # < 30%
    LOW = "low"


@dataclass(frozen=True)
class RiskAlert:
    """Liquidation warning for one position. Derived, never persisted."""

    position: Position
    distance_to_liquidation: Decimal  # fraction, 0.10 == 10%
    severity: RiskSeverity
    recommended_action: str = ""

    @property
    def distance_percent(self) -> Decimal:
        return self.distance_to_liquidation * 100
