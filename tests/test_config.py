"""
Tests for the config module.

Tests cover environment parsing, fallbacks for invalid values and alert
template handling.
"""

import os
from unittest.mock import patch

import pytest

from internship_tracker.config import (
    DEFAULT_ALERT_FORMAT,
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_MAX_LISTING_RESULTS,
    DEFAULT_STATE_PATH,
    ConfigError,
    TrackerConfig,
    parse_positive_int,
    validate_alert_format,
)


class TestParsePositiveInt:
    @pytest.mark.parametrize("raw,expected", [("1", 1), ("10", 10), (" 45 ", 45)])
    def test_valid(self, raw, expected):
        assert parse_positive_int(raw) == expected

    @pytest.mark.parametrize("raw", ["0", "-3", "abc", "1.5", "", None])
    def test_invalid(self, raw):
        with pytest.raises(ConfigError):
            parse_positive_int(raw)

    def test_config_error_is_value_error(self):
        """Test that callers catching ValueError also catch ConfigError."""
        assert issubclass(ConfigError, ValueError)


class TestFromEnv:
    """Tests for building configuration from the environment."""

    def test_defaults(self):
        """Test that an empty environment yields the defaults."""
        with patch.dict(os.environ, {}, clear=True):
            config = TrackerConfig.from_env()

        assert config == TrackerConfig()
        assert config.state_path == DEFAULT_STATE_PATH
        assert config.interval_minutes == DEFAULT_INTERVAL_MINUTES
        assert config.max_listing_results == DEFAULT_MAX_LISTING_RESULTS
        assert config.desktop_notifications is True

    def test_overrides(self):
        """Test that every variable is read."""
        env = {
            "TRACKER_STATE_PATH": "/var/lib/tracker/state.json",
            "TRACKER_INTERVAL_MINUTES": "10",
            "TRACKER_MAX_LISTING_RESULTS": "25",
            "TRACKER_LISTING_URL": "https://github.com/example/internships",
            "TRACKER_REQUEST_TIMEOUT": "5",
            "TRACKER_USER_AGENT": "TestAgent/2.0",
            "TRACKER_DESKTOP_NOTIFICATIONS": "false",
            "LOG_LEVEL": "debug",
        }

        with patch.dict(os.environ, env, clear=True):
            config = TrackerConfig.from_env()

        assert config.state_path == "/var/lib/tracker/state.json"
        assert config.interval_minutes == 10
        assert config.max_listing_results == 25
        assert config.listing_url == "https://github.com/example/internships"
        assert config.request_timeout == 5
        assert config.user_agent == "TestAgent/2.0"
        assert config.desktop_notifications is False
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["0", "-1", "thirty"])
    def test_invalid_interval_falls_back(self, value):
        """Test that an unusable interval is replaced by the default."""
        with patch.dict(os.environ, {"TRACKER_INTERVAL_MINUTES": value}, clear=True):
            assert TrackerConfig.from_env().interval_minutes == DEFAULT_INTERVAL_MINUTES

    @pytest.mark.parametrize("value,expected", [("1", True), ("yes", True), ("off", False), ("no", False)])
    def test_desktop_flag(self, value, expected):
        with patch.dict(os.environ, {"TRACKER_DESKTOP_NOTIFICATIONS": value}, clear=True):
            assert TrackerConfig.from_env().desktop_notifications is expected


class TestAlertFormat:
    """Tests for the configurable alert template."""

    def test_escaped_newlines_expanded(self):
        """Test that literal \\n sequences become line breaks."""
        with patch.dict(os.environ, {"TRACKER_ALERT_FORMAT": "NEW: {company}\\n{title}"}, clear=True):
            config = TrackerConfig.from_env()

        assert config.alert_format == "NEW: {company}\n{title}"

    def test_unknown_placeholder_falls_back(self):
        """Test that a template with an unknown field is rejected."""
        with patch.dict(os.environ, {"TRACKER_ALERT_FORMAT": "{salary}"}, clear=True):
            assert TrackerConfig.from_env().alert_format == DEFAULT_ALERT_FORMAT

    def test_default_format_is_valid(self):
        validate_alert_format(DEFAULT_ALERT_FORMAT)

    @pytest.mark.parametrize("template", ["{company", "{0}", "{nope}"])
    def test_validate_rejects(self, template):
        with pytest.raises(ConfigError):
            validate_alert_format(template)
