"""
Runtime configuration for the Internship Tracker.

Every setting has a default and may be overridden through an environment
variable. Invalid values are reported and replaced by the default so a typo
never stops the monitor from starting.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from internship_tracker.utils import get_env_var, get_logger, is_truthy


logger = get_logger("config")

DEFAULT_STATE_PATH = "tracker-state.json"
DEFAULT_INTERVAL_MINUTES = 30
DEFAULT_MAX_LISTING_RESULTS = 15
DEFAULT_LISTING_URL = "https://github.com/SimplifyJobs/Summer2025-Internships"
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; InternshipBot/1.0)"
DEFAULT_CLOSED_MARKERS = ("❌", "🔒", "Closed")
DEFAULT_ALERT_FORMAT = (
    "\n🚨🚨🚨 NEW INTERNSHIP ALERT! 🚨🚨🚨\n"
    "🏢 {company}\n"
    "💼 {title}\n"
    "📍 {location}\n"
    "🌐 Source: {source}\n"
    + "─" * 40
)


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


@dataclass(frozen=True)
class TrackerConfig:
    """
    Settings for one tracker process.

    Attributes:
        state_path: Location of the JSON state file.
        interval_minutes: Default polling period for the monitor.
        max_listing_results: Cap on postings taken from the listing page.
        listing_url: Page scraped by the listing source.
        request_timeout: Per-request HTTP timeout in seconds.
        user_agent: User-Agent header sent upstream.
        closed_markers: Title substrings marking a closed posting.
        alert_format: Template used for console alerts.
        desktop_notifications: Whether to attempt native desktop alerts.
        log_level: Logging level name.
    """
    state_path: str = DEFAULT_STATE_PATH
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    max_listing_results: int = DEFAULT_MAX_LISTING_RESULTS
    listing_url: str = DEFAULT_LISTING_URL
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    closed_markers: Tuple[str, ...] = field(default=DEFAULT_CLOSED_MARKERS)
    alert_format: str = DEFAULT_ALERT_FORMAT
    desktop_notifications: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        """
        Build a configuration from TRACKER_* environment variables.

        Returns:
            TrackerConfig with defaults for anything unset or invalid.
        """
        desktop_raw = get_env_var("TRACKER_DESKTOP_NOTIFICATIONS")

        return cls(
            state_path=get_env_var("TRACKER_STATE_PATH", default=DEFAULT_STATE_PATH),
            interval_minutes=_positive_int_env("TRACKER_INTERVAL_MINUTES", DEFAULT_INTERVAL_MINUTES),
            max_listing_results=_positive_int_env(
                "TRACKER_MAX_LISTING_RESULTS", DEFAULT_MAX_LISTING_RESULTS
            ),
            listing_url=get_env_var("TRACKER_LISTING_URL", default=DEFAULT_LISTING_URL),
            request_timeout=_positive_int_env("TRACKER_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            user_agent=get_env_var("TRACKER_USER_AGENT", default=DEFAULT_USER_AGENT),
            alert_format=_alert_format_env(),
            desktop_notifications=True if desktop_raw is None else is_truthy(desktop_raw),
            log_level=(get_env_var("LOG_LEVEL", default="INFO") or "INFO").upper(),
        )


def parse_positive_int(raw: Optional[str]) -> int:
    """
    Parse a strictly positive integer.

    Raises:
        ConfigError: If the value is missing, not an integer, or not positive.
    """
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ConfigError(f"Expected a positive integer, got {raw!r}")

    if value <= 0:
        raise ConfigError(f"Expected a positive integer, got {raw!r}")

    return value


def _positive_int_env(name: str, default: int) -> int:
    raw = get_env_var(name)
    if raw is None:
        return default

    try:
        return parse_positive_int(raw)
    except ConfigError as e:
        logger.warning(f"{name}: {e}; using default {default}")
        return default


def _alert_format_env() -> str:
    raw = get_env_var("TRACKER_ALERT_FORMAT")
    if raw is None:
        return DEFAULT_ALERT_FORMAT

    # Environment values usually carry literal "\n" sequences
    template = raw.replace("\\n", "\n")
    try:
        validate_alert_format(template)
    except ConfigError as e:
        logger.warning(f"TRACKER_ALERT_FORMAT: {e}; using default format")
        return DEFAULT_ALERT_FORMAT

    return template


def validate_alert_format(template: str) -> None:
    """
    Check that an alert template only uses known placeholders.

    Raises:
        ConfigError: If formatting the template with sample values fails.
    """
    try:
        template.format(company="", title="", location="", source="", url="")
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"Invalid alert format {template!r}: {e}")
