"""Pytest configuration and fixtures."""

import os
import time
from decimal import Decimal
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DRY_RUN"] = "true"
os.environ["TELEGRAM_BOT_TOKEN"] = ""
os.environ["DEBUG"] = "true"

from swapsentry.config import Settings, get_settings
from swapsentry.errors import IndexerFetchFailed
from swapsentry.positions.indexer import PositionIndexer
from swapsentry.positions.models import Position, PositionSide, RiskAlert
from swapsentry.notifications.base import AlertSink
from swapsentry.relay.base import RelayProvider, RelaySubmission
from swapsentry.signing.base import SigningHandle, WalletService
from swapsentry.swap.models import SwapQuote

FEE_RECIPIENT = "0x1111111111111111111111111111111111111111"
ROUTER = "0x2222222222222222222222222222222222222222"
OWNER = "0x3333333333333333333333333333333333333333"
WALLET_ADDRESS = "0x4444444444444444444444444444444444444444"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached process-wide; reset between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, fee_recipient=FEE_RECIPIENT)


def make_quote(expires_in: float = 60.0, now: Optional[float] = None, **overrides) -> SwapQuote:
    """Build a quote expiring `expires_in` seconds from now."""
    now = time.time() if now is None else now
    fields = dict(
        quote_id="q-1",
        input_asset="USDC",
        output_asset="WETH",
        input_amount=1_000_000_000,
        min_output_amount=250_000_000_000_000_000,
        fee_basis_points=30,
        fee_recipient=FEE_RECIPIENT,
        expires_at=now + expires_in,
        chain_id=1,
        router_address=ROUTER,
        calldata="0xdeadbeef",
    )
    fields.update(overrides)
    return SwapQuote(**fields)


def make_position(
    side: PositionSide = PositionSide.LONG,
    entry: Optional[str] = "100",
    liquidation: Optional[str] = "90",
    market: str = "BTC-USD",
    **overrides,
) -> Position:
    fields = dict(
        owner_address=OWNER,
        market=market,
        side=side,
        size=Decimal("1.5"),
        entry_price=Decimal(entry) if entry is not None else None,
        liquidation_price=Decimal(liquidation) if liquidation is not None else None,
    )
    fields.update(overrides)
    return Position(**fields)


@pytest.fixture
def signing_handle() -> MagicMock:
    handle = MagicMock(spec=SigningHandle)
    handle.address = WALLET_ADDRESS
    handle.sign_typed_data.return_value = "0x" + "ab" * 65
    return handle


@pytest.fixture
def wallet(signing_handle) -> MagicMock:
    wallet = MagicMock(spec=WalletService)
    wallet.resolve_signing_capability = AsyncMock(return_value=signing_handle)
    return wallet


@pytest.fixture
def relay() -> MagicMock:
    relay = MagicMock(spec=RelayProvider)
    relay.name = "MockRelay"
    relay.submit_gasless_order = AsyncMock(
        return_value=RelaySubmission(task_id="task-123", provider="MockRelay")
    )
    relay.poll_task_status = AsyncMock()
    return relay


class FakeIndexer(PositionIndexer):
    """Indexer returning scripted responses; exceptions in the script are raised."""

    def __init__(self, responses=None, default=None):
        self.responses = list(responses or [])
        self.default = default if default is not None else []
        self.calls: list[str] = []

    async def fetch_open_positions(self, address: str) -> list[Position]:
        self.calls.append(address)
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        return list(response)


class RecordingSink(AlertSink):
    """Alert sink that keeps every alert it receives."""

    def __init__(self):
        self.alerts: list[RiskAlert] = []

    async def emit(self, alert: RiskAlert) -> bool:
        self.alerts.append(alert)
        return True


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


def fetch_failure(address: str = OWNER) -> IndexerFetchFailed:
    return IndexerFetchFailed(address, "indexer returned HTTP 503")
