"""
Tests for the command-line entry point.
"""

import os
from unittest.mock import MagicMock, patch

import pytest

from internship_tracker.config import TrackerConfig
from internship_tracker.main import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    USAGE,
    build_parser,
    main,
    parse_interval,
    run_command,
)


class TestParseInterval:
    """Tests for the monitor interval argument."""

    def test_absent_uses_default(self):
        assert parse_interval(None, 30) == 30

    def test_valid_value(self):
        assert parse_interval("10", 30) == 10

    @pytest.mark.parametrize("raw", ["abc", "0", "-5"])
    def test_invalid_value_falls_back(self, raw):
        """Test that unusable intervals fall back instead of failing."""
        assert parse_interval(raw, 30) == 30


class TestBuildParser:
    def test_command_and_interval(self):
        args = build_parser().parse_args(["monitor", "15"])

        assert args.command == "monitor"
        assert args.interval == "15"

    def test_no_arguments(self):
        args = build_parser().parse_args([])

        assert args.command is None
        assert args.interval is None


class TestRunCommand:
    """Tests for command dispatch."""

    @pytest.mark.parametrize("command", [None, "help", "--help", "status"])
    def test_usage_for_unknown_commands(self, command, capsys):
        """Test that anything but the three commands prints usage."""
        tracker = MagicMock()

        assert run_command(command, None, TrackerConfig(), tracker) == EXIT_SUCCESS

        assert "Internship Tracker Commands" in capsys.readouterr().out
        assert tracker.method_calls == []

    def test_check(self):
        tracker = MagicMock()

        assert run_command("check", None, TrackerConfig(), tracker) == EXIT_SUCCESS

        tracker.check_once.assert_called_once_with()

    def test_list(self):
        tracker = MagicMock()

        run_command("list", None, TrackerConfig(), tracker)

        tracker.list_postings.assert_called_once_with()
        tracker.check_once.assert_not_called()

    def test_monitor_default_interval(self):
        """Test that monitor uses the configured interval by default."""
        tracker = MagicMock()

        run_command("monitor", None, TrackerConfig(interval_minutes=45), tracker)

        tracker.monitor.assert_called_once_with(45)

    def test_monitor_custom_interval(self):
        tracker = MagicMock()

        run_command("monitor", "10", TrackerConfig(), tracker)

        tracker.monitor.assert_called_once_with(10)

    def test_monitor_invalid_interval(self):
        """Test that a bad interval argument falls back to the default."""
        tracker = MagicMock()

        run_command("monitor", "soon", TrackerConfig(), tracker)

        tracker.monitor.assert_called_once_with(30)

    @patch("internship_tracker.main.InternshipTracker")
    def test_builds_tracker_from_config(self, mock_tracker_cls):
        config = TrackerConfig()

        run_command("check", None, config)

        mock_tracker_cls.from_config.assert_called_once_with(config)
        mock_tracker_cls.from_config.return_value.check_once.assert_called_once()


class TestMain:
    """Tests for the process entry point."""

    @patch("internship_tracker.main.setup_logging")
    def test_usage_exit_code(self, _mock_logging, capsys):
        assert main([]) == EXIT_SUCCESS
        assert USAGE in capsys.readouterr().out

    @patch("internship_tracker.main.setup_logging")
    @patch("internship_tracker.main.run_command", side_effect=RuntimeError("boom"))
    def test_unexpected_error(self, _mock_run, _mock_logging):
        """Test that unexpected errors are logged and reported via exit code."""
        assert main(["check"]) == EXIT_FAILURE

    @patch("internship_tracker.main.setup_logging")
    @patch("internship_tracker.main.run_command", side_effect=KeyboardInterrupt)
    def test_interrupt(self, _mock_run, _mock_logging):
        assert main(["monitor"]) == EXIT_FAILURE

    @patch("internship_tracker.main.setup_logging")
    @patch("internship_tracker.main.run_command", return_value=EXIT_SUCCESS)
    def test_passes_arguments(self, mock_run, _mock_logging):
        main(["monitor", "5"])

        command, interval, config = mock_run.call_args.args
        assert (command, interval) == ("monitor", "5")
        assert isinstance(config, TrackerConfig)

    @patch("internship_tracker.main.run_command", return_value=EXIT_SUCCESS)
    def test_logging_configured_before_settings(self, _mock_run):
        """Test that configuration warnings go through the configured handler."""
        calls = []

        def record_config():
            calls.append("config")
            return TrackerConfig()

        with patch("internship_tracker.main.setup_logging", side_effect=lambda level: calls.append(level)), \
                patch.object(TrackerConfig, "from_env", side_effect=record_config), \
                patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            main(["check"])

        assert calls == ["debug", "config"]
