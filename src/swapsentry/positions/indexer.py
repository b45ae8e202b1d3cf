"""Position indexer collaborator.

The indexer is the source of truth for open positions. Every call is a
fresh query; nothing is cached here.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from swapsentry.errors import IndexerFetchFailed
from swapsentry.positions.models import Position, PositionSide, PositionStatus

logger = logging.getLogger(__name__)


class PositionIndexer(ABC):
    """Abstract source of a wallet's open positions."""

    @abstractmethod
    async def fetch_open_positions(self, address: str) -> list[Position]:
        """Fetch every open position for an address.

        Raises:
            IndexerFetchFailed: If the indexer cannot be queried
        """
        pass


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def _to_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_position(row: dict[str, Any], address: str) -> Position:
    """Convert an indexer row to a Position.

    Raises:
        ValueError: If side/market/size are missing or invalid
    """
    side = str(row.get("side", "")).lower()
    market = row.get("market")
    size = _to_decimal(row.get("size"))
    if not market or size is None:
        raise ValueError("position row missing market or size")

    return Position(
        owner_address=row.get("owner_address") or address,
        market=market,
        side=PositionSide(side),
        size=size,
        entry_price=_to_decimal(row.get("entry_price")),
        liquidation_price=_to_decimal(row.get("liquidation_price")),
        opened_at=_to_datetime(row.get("opened_at")),
        status=PositionStatus(str(row.get("status", "open")).lower()),
        position_id=row.get("id"),
    )


class HttpPositionIndexer(PositionIndexer):
    """Indexer reached over its REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize HTTP indexer.

        Args:
            base_url: Indexer API base URL
            timeout: HTTP timeout in seconds
            client: Pre-built HTTP client (tests inject a mock transport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def fetch_open_positions(self, address: str) -> list[Position]:
        client = await self._get_client()

        try:
            response = await client.get(
                f"{self.base_url}/v1/positions",
                params={"address": address, "status": "open"},
            )
        except httpx.HTTPError as e:
            raise IndexerFetchFailed(address, f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            raise IndexerFetchFailed(address, f"indexer returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise IndexerFetchFailed(address, "indexer returned invalid JSON") from e

        rows = data.get("positions", []) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise IndexerFetchFailed(address, "unexpected indexer response shape")

        positions = []
        for row in rows:
            try:
                positions.append(parse_position(row, address))
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed position row for {address}: {e}")

        logger.debug(f"Fetched {len(positions)} open positions for {address}")
        return positions

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
