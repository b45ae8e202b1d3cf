"""Position risk monitor runner.

Monitors one wallet address for positions nearing liquidation and sends
alerts to the configured sink.

Usage:
    python -m swapsentry.runner --address 0xabc... --interval 30

Environment variables:
    INDEXER_URL: Position indexer base URL
    MONITOR_INTERVAL_SECONDS: Seconds between polls (default: 30)
    LIQUIDATION_ALERT_THRESHOLD: Alert threshold as a fraction (default: 0.15)
    TELEGRAM_BOT_TOKEN / ALERT_CHAT_ID: Telegram alert delivery
"""

import argparse
import asyncio
import logging
import signal
from typing import Optional

from swapsentry.config import Settings, get_settings
from swapsentry.errors import ConfigurationInvalid
from swapsentry.notifications import create_alert_sink
from swapsentry.positions import HttpPositionIndexer, PositionRiskMonitor

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_monitor(settings: Settings) -> PositionRiskMonitor:
    """Wire a monitor to the configured indexer and alert sink."""
    indexer = HttpPositionIndexer(settings.indexer_url, timeout=settings.indexer_timeout_seconds)
    return PositionRiskMonitor(
        indexer=indexer,
        sink=create_alert_sink(settings),
        threshold=settings.liquidation_alert_threshold,
    )


async def run(address: str, interval: float, settings: Settings) -> None:
    """Run the monitor until SIGINT/SIGTERM."""
    monitor = build_monitor(settings)
    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    await monitor.start(address, interval=interval)
    try:
        await stop_event.wait()
    finally:
        monitor.stop()
        status = monitor.get_status()
        logger.info(
            f"Monitor stopped after {status.tick_count} ticks ({status.failed_ticks} failed)"
        )


async def run_once(address: str, settings: Settings) -> int:
    """Single refresh. Returns the number of alerts raised."""
    monitor = build_monitor(settings)
    alerts = await monitor.refresh(address)
    status = monitor.get_status()
    if status.last_error:
        logger.error(f"Refresh failed: {status.last_error}")
    return len(alerts)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Monitor positions for liquidation risk")
    parser.add_argument("--address", required=True, help="Wallet address to monitor")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.monitor_interval_seconds,
        help=f"Seconds between polls (default: {settings.monitor_interval_seconds})",
    )
    parser.add_argument("--once", action="store_true", help="Refresh once and exit")
    args = parser.parse_args(argv)

    configure_logging(settings)

    try:
        settings.validate_startup()
    except ConfigurationInvalid as e:
        logger.error(str(e))
        return 2

    if args.interval <= 0:
        logger.error("--interval must be positive")
        return 2

    if args.once:
        count = asyncio.run(run_once(args.address, settings))
        print(f"{count} position(s) near liquidation")
        return 0

    asyncio.run(run(args.address, args.interval, settings))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
