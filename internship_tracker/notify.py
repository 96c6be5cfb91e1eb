"""
Notify module for the Internship Tracker.

This module handles alerting when new internships are detected and the
console listings shown by each command. Alert channels:
- Console (always available, primary output)
- Native desktop notification (best effort: osascript on macOS, PowerShell
  on Windows, notify-send on Linux)
- No-op (when desktop alerts are disabled or unsupported)

Desktop notifications are fire-and-forget; any failure is discarded.
"""

import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import IO, List, Optional, Sequence

from internship_tracker.config import DEFAULT_ALERT_FORMAT, TrackerConfig
from internship_tracker.models import Posting
from internship_tracker.utils import get_logger


# Module logger
logger = get_logger("notify")

NOTIFICATION_TITLE = "New Internship!"
LIST_RULE = "═" * 60


def format_alert(posting: Posting, template: str = DEFAULT_ALERT_FORMAT) -> str:
    """
    Render the console alert for a new posting.

    Args:
        posting: Newly discovered posting.
        template: str.format template with {company}, {title}, {location},
                  {source} and {url} placeholders.

    Returns:
        Alert text.
    """
    return template.format(
        company=posting.company,
        title=posting.title,
        location=posting.location,
        source=posting.source,
        url=posting.url,
    )


def format_notification_message(posting: Posting) -> str:
    """Short one-line message used by desktop notifications."""
    return f"{posting.company} - {posting.title}"


def format_posting_list(postings: Sequence[Posting], heading: str) -> str:
    """
    Format postings as a numbered console listing.

    Newly discovered postings are marked 🆕, previously known ones 📌.

    Args:
        postings: Postings to show.
        heading: Title line of the listing.

    Returns:
        Multi-line listing text.
    """
    lines = [
        "",
        f"📋 {heading}",
        LIST_RULE,
    ]

    if not postings:
        lines.append("No internships found.")
        return "\n".join(lines)

    for i, posting in enumerate(postings, 1):
        status = "🆕" if posting.is_new else "📌"
        discovered = posting.discovered_at.astimezone().strftime("%Y-%m-%d")

        lines.extend([
            "",
            f"{i}. {status} {posting.company} - {posting.title}",
            f"   📍 Location: {posting.location}",
            f"   🌐 Source: {posting.source}",
            f"   🕒 Discovered: {discovered}",
            f"   🔗 Link: {posting.url}",
        ])

    return "\n".join(lines)


def display_postings(
    postings: Sequence[Posting],
    heading: str,
    stream: Optional[IO[str]] = None
) -> None:
    """Print a posting listing to ``stream`` (stdout by default)."""
    print(format_posting_list(postings, heading), file=stream)


class Notifier(ABC):
    """Alert channel for newly discovered postings."""

    @abstractmethod
    def notify(self, posting: Posting) -> None:
        raise NotImplementedError


class ConsoleNotifier(Notifier):
    """Prints an alert banner for each new posting."""

    def __init__(self, template: str = DEFAULT_ALERT_FORMAT, stream: Optional[IO[str]] = None):
        self.template = template
        self.stream = stream

    def notify(self, posting: Posting) -> None:
        print(format_alert(posting, self.template), file=self.stream)


class NullNotifier(Notifier):
    """Discards every alert."""

    def notify(self, posting: Posting) -> None:
        return None


def build_desktop_command(message: str, platform: str) -> Optional[List[str]]:
    """
    Build the native notification command for a platform.

    Args:
        message: Notification body.
        platform: Value in the style of ``sys.platform``.

    Returns:
        Command argument list, or None when the platform has no supported
        notification tool.
    """
    if platform == "darwin":
        escaped = message.replace("\\", "\\\\").replace('"', '\\"')
        script = f'display notification "{escaped}" with title "{NOTIFICATION_TITLE}"'
        return ["osascript", "-e", script]

    if platform == "win32":
        escaped = message.replace("'", "''")
        script = (
            "Add-Type -AssemblyName System.Windows.Forms; "
            f"[System.Windows.Forms.MessageBox]::Show('{escaped}', '{NOTIFICATION_TITLE}')"
        )
        return ["powershell", "-NoProfile", "-Command", script]

    if platform.startswith("linux") and shutil.which("notify-send"):
        return ["notify-send", NOTIFICATION_TITLE, message]

    return None


class DesktopNotifier(Notifier):
    """
    Best-effort native desktop notification.

    The command is launched and never awaited. Launch failures are logged at
    debug level and otherwise ignored.
    """

    def __init__(self, platform: Optional[str] = None):
        self.platform = platform or sys.platform

    def notify(self, posting: Posting) -> None:
        command = build_desktop_command(format_notification_message(posting), self.platform)
        if command is None:
            return

        try:
            subprocess.Popen(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logger.debug(f"Desktop notification failed: {e}")


class CompositeNotifier(Notifier):
    """Sends each alert to several notifiers; one failing never stops the rest."""

    def __init__(self, notifiers: Sequence[Notifier]):
        self.notifiers = list(notifiers)

    def notify(self, posting: Posting) -> None:
        for notifier in self.notifiers:
            try:
                notifier.notify(posting)
            except Exception as e:
                logger.warning(f"{type(notifier).__name__} failed for {posting.id}: {e}")


def desktop_notifications_supported(platform: str) -> bool:
    """Whether a native notification tool is expected on this platform."""
    if platform in ("darwin", "win32"):
        return True
    return platform.startswith("linux") and shutil.which("notify-send") is not None


def build_notifier(config: TrackerConfig, platform: Optional[str] = None) -> Notifier:
    """
    Select the alert channels for this environment.

    Console alerts are always on. A desktop notifier is added when enabled in
    configuration and the platform supports it; otherwise a no-op stands in.

    Args:
        config: Tracker configuration.
        platform: Platform override, defaults to ``sys.platform``.

    Returns:
        Composite notifier.
    """
    platform = platform or sys.platform

    if config.desktop_notifications and desktop_notifications_supported(platform):
        logger.debug(f"Desktop notifications enabled for {platform}")
        side_channel: Notifier = DesktopNotifier(platform)
    else:
        logger.debug(f"Desktop notifications unavailable or disabled on {platform}")
        side_channel = NullNotifier()

    return CompositeNotifier([ConsoleNotifier(config.alert_format), side_channel])
