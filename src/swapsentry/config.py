"""Application configuration using pydantic-settings.

All durations are in seconds.
"""

import re
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from swapsentry.errors import ConfigurationInvalid

EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_evm_address(address: Optional[str]) -> bool:
    """Check that a value looks like a 0x-prefixed 20-byte hex address."""
    return bool(address) and bool(EVM_ADDRESS_RE.match(address.strip()))


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug logging")
    dry_run: bool = Field(default=True, description="Use the simulated relay (no real orders)")

    # ======================
    # Credential session
    # ======================
    session_ttl_seconds: float = Field(
        default=1800.0, description="How long an unlocked credential stays usable (30 min)"
    )

    # ======================
    # Gasless relay
    # ======================
    relay_api_url: str = Field(
        default="https://api.gelato.digital", description="Gelato relay API base URL"
    )
    relay_api_key: str = Field(default="", description="Gelato sponsor API key")
    relay_fee_token: str = Field(
        default="0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",
        description="Token the relay fee is paid in (native by default)",
    )
    relay_timeout_seconds: float = Field(default=30.0, description="Relay HTTP timeout")
    relay_poll_interval_seconds: float = Field(
        default=5.0, description="Delay between relay task status polls"
    )
    relay_max_poll_attempts: int = Field(
        default=60, description="Status polls before giving up on tracking (5 min)"
    )

    # ======================
    # Swap fees
    # ======================
    fee_recipient: str = Field(
        default="0x0000000000000000000000000000000000000001",
        description="Address receiving the platform swap fee",
    )
    max_fee_basis_points: int = Field(default=100, description="Upper bound for the swap fee (1%)")

    # ======================
    # Position monitoring
    # ======================
    indexer_url: str = Field(
        default="http://127.0.0.1:8080", description="Position indexer base URL"
    )
    indexer_timeout_seconds: float = Field(default=15.0, description="Indexer HTTP timeout")
    monitor_interval_seconds: float = Field(default=30.0, description="Seconds between polls")
    liquidation_alert_threshold: float = Field(
        default=0.15, description="Alert when distance to liquidation drops below (15%)"
    )

    # ======================
    # Notifications
    # ======================
    telegram_bot_token: str = Field(default="", description="Telegram bot token for alerts")
    alert_chat_id: Optional[int] = Field(default=None, description="Telegram chat receiving alerts")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def has_telegram_alerts(self) -> bool:
        """Check if Telegram alert delivery is configured."""
        return bool(self.telegram_bot_token and self.alert_chat_id)

    def validate_startup(self) -> None:
        """Reject settings that cannot be used.

        Raises:
            ConfigurationInvalid: On the first invalid field found
        """
        if not is_evm_address(self.fee_recipient):
            raise ConfigurationInvalid("fee_recipient", "must be a 0x-prefixed 40 hex digit address")
        if not 0 <= self.max_fee_basis_points <= 10000:
            raise ConfigurationInvalid("max_fee_basis_points", "must be between 0 and 10000")
        if self.session_ttl_seconds <= 0:
            raise ConfigurationInvalid("session_ttl_seconds", "must be positive")
        if self.monitor_interval_seconds <= 0:
            raise ConfigurationInvalid("monitor_interval_seconds", "must be positive")
        if not 0 < self.liquidation_alert_threshold < 1:
            raise ConfigurationInvalid("liquidation_alert_threshold", "must be between 0 and 1")
        if self.relay_poll_interval_seconds <= 0 or self.relay_max_poll_attempts < 1:
            raise ConfigurationInvalid("relay_poll_interval_seconds", "relay polling must be positive")
        if not self.dry_run and not self.relay_api_url:
            raise ConfigurationInvalid("relay_api_url", "required when dry_run is disabled")

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "dry_run": self.dry_run,
            "session_ttl_seconds": self.session_ttl_seconds,
            "relay": {
                "url": self.relay_api_url,
                "api_key": "***" if self.relay_api_key else "(not set)",
                "poll_interval": self.relay_poll_interval_seconds,
                "max_poll_attempts": self.relay_max_poll_attempts,
            },
            "fees": {
                "recipient": self.fee_recipient,
                "max_basis_points": self.max_fee_basis_points,
            },
            "monitor": {
                "indexer_url": self.indexer_url,
                "interval": self.monitor_interval_seconds,
                "threshold": self.liquidation_alert_threshold,
            },
            "telegram_bot_token": "***" if self.telegram_bot_token else "(not set)",
            "alert_chat_id": self.alert_chat_id or "(none)",
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
