"""Factory for the configured relay provider.

Uses the real Gelato relay only when dry-run mode is disabled.
"""

import logging
from typing import Optional

from swapsentry.config import Settings, get_settings
from swapsentry.relay.base import RelayProvider

logger = logging.getLogger(__name__)


def create_relay(settings: Optional[Settings] = None) -> RelayProvider:
    """Create the relay provider for the current settings."""
    settings = settings or get_settings()

    if settings.dry_run:
        from swapsentry.relay.dry_run import DryRunRelay

        logger.info("Dry-run mode: using simulated relay")
        return DryRunRelay()

    from swapsentry.relay.gelato import GelatoRelay

    logger.info(f"Using Gelato relay at {settings.relay_api_url}")
    return GelatoRelay(
        api_url=settings.relay_api_url,
        api_key=settings.relay_api_key,
        fee_token=settings.relay_fee_token,
        timeout=settings.relay_timeout_seconds,
    )
