#!/usr/bin/env python3
"""
Command-line entry point for the Internship Tracker.

Commands:
    check                  Fetch once, record results, and exit
    monitor [minutes]      Check now and then every N minutes (default 30)
    list                   Show every tracked internship

Anything else prints usage help.
"""

import argparse
import sys
from typing import List, Optional

from internship_tracker.config import ConfigError, TrackerConfig, parse_positive_int
from internship_tracker.tracker import InternshipTracker
from internship_tracker.utils import get_env_var, get_logger, setup_logging


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

COMMANDS = ("check", "monitor", "list")

USAGE = """🎯 Internship Tracker Commands:
  internship-tracker check        - Check once and exit
  internship-tracker monitor      - Monitor continuously (30 min intervals)
  internship-tracker list         - List all tracked internships

Custom intervals:
  internship-tracker monitor 10   - Check every 10 minutes"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="internship-tracker",
        description="Track new internship postings.",
        add_help=False,
    )
    parser.add_argument("command", nargs="?", default=None)
    parser.add_argument("interval", nargs="?", default=None)
    return parser


def parse_interval(raw: Optional[str], default: int) -> int:
    """
    Resolve the monitor interval from the command line.

    Args:
        raw: Interval argument as typed, or None.
        default: Interval used when ``raw`` is absent or not a positive integer.

    Returns:
        Interval in minutes.
    """
    if raw is None:
        return default

    try:
        return parse_positive_int(raw)
    except ConfigError:
        get_logger("main").warning(f"Invalid interval {raw!r}, using {default} minutes")
        return default


def run_command(
    command: Optional[str],
    interval: Optional[str],
    config: TrackerConfig,
    tracker: Optional[InternshipTracker] = None
) -> int:
    """
    Dispatch a CLI command.

    Args:
        command: One of "check", "monitor", "list"; anything else shows usage.
        interval: Optional monitor interval argument.
        config: Tracker configuration.
        tracker: Pre-built tracker (tests); built from ``config`` otherwise.

    Returns:
        Exit code.
    """
    if command not in COMMANDS:
        print(USAGE)
        return EXIT_SUCCESS

    tracker = tracker or InternshipTracker.from_config(config)

    if command == "check":
        tracker.check_once()
    elif command == "monitor":
        tracker.monitor(parse_interval(interval, config.interval_minutes))
    else:
        tracker.list_postings()

    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Internship Tracker.

    Sets up logging and runs the requested command with top-level error
    handling.

    Returns:
        Exit code for the process.
    """
    # Logging first, so warnings about invalid settings are formatted
    setup_logging(get_env_var("LOG_LEVEL", default="INFO"))
    logger = get_logger("main")

    config = TrackerConfig.from_env()

    args, _extra = build_parser().parse_known_args(argv)

    try:
        return run_command(args.command, args.interval, config)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_FAILURE

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
