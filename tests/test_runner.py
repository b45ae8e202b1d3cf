"""Tests for the monitor runner entry point."""

from unittest.mock import AsyncMock, patch

from conftest import OWNER
from swapsentry import runner
from swapsentry.config import Settings
from swapsentry.positions import HttpPositionIndexer, PositionRiskMonitor


class TestRunner:
    """Tests for CLI wiring."""

    def test_invalid_config_exits_with_code_2(self):
        settings = Settings(_env_file=None, fee_recipient="0xbad")

        with patch("swapsentry.runner.get_settings", return_value=settings):
            assert runner.main(["--address", OWNER, "--once"]) == 2

    def test_non_positive_interval_rejected(self):
        settings = Settings(_env_file=None)

        with patch("swapsentry.runner.get_settings", return_value=settings):
            assert runner.main(["--address", OWNER, "--interval", "0"]) == 2

    def test_once_runs_single_refresh(self, capsys):
        settings = Settings(_env_file=None)
        run_once = AsyncMock(return_value=3)

        with patch("swapsentry.runner.get_settings", return_value=settings), patch(
            "swapsentry.runner.run_once", run_once
        ):
            assert runner.main(["--address", OWNER, "--once"]) == 0

        run_once.assert_awaited_once_with(OWNER, settings)
        assert "3 position(s)" in capsys.readouterr().out

    def test_build_monitor_uses_settings(self):
        settings = Settings(
            _env_file=None, indexer_url="https://indexer.test", liquidation_alert_threshold=0.2
        )

        monitor = runner.build_monitor(settings)

        assert isinstance(monitor, PositionRiskMonitor)
        assert isinstance(monitor.indexer, HttpPositionIndexer)
        assert monitor.indexer.base_url == "https://indexer.test"
        assert str(monitor.threshold) == "0.2"
