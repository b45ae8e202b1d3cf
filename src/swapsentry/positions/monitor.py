"""Liquidation risk monitor for one wallet address.

Polls the indexer on a fixed interval, replaces the cached position
snapshot wholesale, and emits an alert for every open position whose
distance to liquidation is below the threshold.

"Is monitoring" and the loop task are a single piece of state
(_MonitorLoop), installed by start() and removed by stop(). A tick that
belongs to a replaced loop never touches the snapshot.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from swapsentry.notifications.base import AlertSink
from swapsentry.positions.indexer import PositionIndexer
from swapsentry.positions.models import Position, RiskAlert
from swapsentry.positions.risk import DEFAULT_ALERT_THRESHOLD, evaluate_positions

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0


@dataclass
class _MonitorLoop:
    address: str
    interval: float
    task: Optional[asyncio.Task] = None


@dataclass(frozen=True)
class MonitorStatus:
    """Read-only view of the monitor."""

    is_monitoring: bool
    address: Optional[str]
    interval: Optional[float]
    tick_count: int
    failed_ticks: int
    position_count: int
    last_refreshed_at: Optional[float]
    last_error: Optional[str]


class PositionRiskMonitor:
    """Polls one address's open positions and raises liquidation alerts.

    Only one monitoring loop per instance. Fetch failures keep the previous
    snapshot and never stop the loop.
    """

    def __init__(
        self,
        indexer: PositionIndexer,
        sink: AlertSink,
        threshold: Union[Decimal, float, str] = DEFAULT_ALERT_THRESHOLD,
    ):
        """Initialize monitor.

        Args:
            indexer: Source of open positions
            sink: Destination for risk alerts
            threshold: Alert when distance to liquidation is below this fraction
        """
        self.indexer = indexer
        self.sink = sink
        self.threshold = Decimal(str(threshold))

        self._loop: Optional[_MonitorLoop] = None
        self._address: Optional[str] = None
        self._positions: tuple[Position, ...] = ()
        self._alerts: tuple[RiskAlert, ...] = ()
        self._tick_count = 0
        self._failed_ticks = 0
        self._last_refreshed_at: Optional[float] = None
        self._last_error: Optional[str] = None

    @property
    def is_monitoring(self) -> bool:
        return self._loop is not None

    @property
    def positions(self) -> tuple[Position, ...]:
        """Latest position snapshot (immutable, replaced on each refresh)."""
        return self._positions

    @property
    def alerts(self) -> tuple[RiskAlert, ...]:
        """Alerts raised by the latest successful refresh."""
        return self._alerts

    async def start(self, address: str, interval: float = DEFAULT_INTERVAL) -> None:
        """Start monitoring an address.

        No-op if a loop is already active. Refreshes once immediately,
        then repeats every `interval` seconds.
        """
        if self._loop is not None:
            logger.debug(f"Monitor already running for {self._loop.address}, ignoring start")
            return

        loop_state = _MonitorLoop(address=address, interval=interval)
        self._loop = loop_state

        if address != self._address:
            self._positions = ()
            self._alerts = ()
            self._address = address

        logger.info(f"Starting position monitor for {address} (interval: {interval}s)")
        try:
            await self._refresh(address, loop_state)
        except Exception as e:
            # The loop still starts; the next tick retries
            logger.error(f"Initial refresh failed for {address}: {type(e).__name__}: {e}")

        # stop() may have run while the initial refresh was suspended
        if self._loop is not loop_state:
            logger.debug(f"Monitor for {address} stopped during initial refresh")
            return

        loop_state.task = asyncio.create_task(
            self._run(loop_state), name=f"position-monitor-{address}"
        )

    def stop(self) -> None:
        """Stop monitoring. Safe to call when idle or repeatedly."""
        loop_state = self._loop
        if loop_state is None:
            return

        self._loop = None
        if loop_state.task is not None:
            loop_state.task.cancel()
        logger.info(f"Stopped position monitor for {loop_state.address}")

    def get_status(self) -> MonitorStatus:
        """Current monitor state. Pure read."""
        loop_state = self._loop
        return MonitorStatus(
            is_monitoring=loop_state is not None,
            address=self._address,
            interval=loop_state.interval if loop_state else None,
            tick_count=self._tick_count,
            failed_ticks=self._failed_ticks,
            position_count=len(self._positions),
            last_refreshed_at=self._last_refreshed_at,
            last_error=self._last_error,
        )

    async def refresh(self, address: Optional[str] = None) -> list[RiskAlert]:
        """Run one refresh outside the loop.

        Args:
            address: Address to refresh (defaults to the monitored one)

        Returns:
            Alerts raised by this refresh (empty if the fetch failed)

        Raises:
            ValueError: If no address is known, or a loop runs for another address
        """
        address = address or self._address
        if not address:
            raise ValueError("No address to refresh")
        if self._loop is not None and address != self._loop.address:
            raise ValueError(f"Monitor is running for {self._loop.address}, cannot refresh {address}")
        if address != self._address:
            self._positions = ()
            self._alerts = ()
            self._address = address
        return await self._refresh(address, None)

    async def _run(self, loop_state: _MonitorLoop) -> None:
        while self._loop is loop_state:
            await asyncio.sleep(loop_state.interval)
            if self._loop is not loop_state:
                break
            try:
                await self._refresh(loop_state.address, loop_state)
            except Exception as e:
                # A tick must never end the loop
                logger.error(f"Unexpected monitor tick error for {loop_state.address}: {e}")

    def _is_stale(self, loop_state: Optional[_MonitorLoop]) -> bool:
        return loop_state is not None and self._loop is not loop_state

    async def _refresh(self, address: str, loop_state: Optional[_MonitorLoop]) -> list[RiskAlert]:
        try:
            positions = await self.indexer.fetch_open_positions(address)
        except Exception as e:
            if self._is_stale(loop_state):
                return []
            self._tick_count += 1
            self._failed_ticks += 1
            self._last_error = f"{type(e).__name__}: {e}"
            logger.warning(f"Position fetch failed for {address}, keeping previous snapshot: {e}")
            return []

        if self._is_stale(loop_state):
            logger.debug(f"Discarding positions for {address} from a stopped loop")
            return []

        self._tick_count += 1
        self._positions = tuple(positions)
        self._last_refreshed_at = time.time()
        self._last_error = None

        alerts = evaluate_positions(self._positions, self.threshold)
        self._alerts = tuple(alerts)

        if alerts:
            logger.info(f"{len(alerts)} position(s) near liquidation for {address}")
        for alert in alerts:
            try:
                await self.sink.emit(alert)
            except Exception as e:
                logger.error(f"Failed to emit risk alert for {alert.position.market}: {e}")

        return alerts
