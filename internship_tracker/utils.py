"""
Utility functions for the Internship Tracker.

This module provides:
- Central logging configuration
- Safe JSON read/write helpers
- Environment variable access
- Shared text helpers used across modules
"""

import json
import logging
import os
import re
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional


TRUTHY_VALUES = ("true", "1", "yes", "on")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure and return the root logger for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to INFO.

    Returns:
        Configured logger instance.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    logger = logging.getLogger("internship_tracker")
    logger.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Name for the logger, typically the module name.

    Returns:
        Logger instance configured as a child of the main application logger.
    """
    return logging.getLogger(f"internship_tracker.{name}")


def safe_read_json(filepath: str, default: Optional[Any] = None) -> Any:
    """
    Read a JSON document, returning ``default`` instead of raising.

    A missing file is the normal first-run case and is logged at debug level;
    unreadable or malformed files are logged as warnings.
    """
    logger = get_logger("utils")

    path = Path(filepath)
    if not path.is_file():
        logger.debug(f"No JSON file at {filepath}")
        return default

    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        # ValueError covers both JSONDecodeError and UnicodeDecodeError
        logger.warning(f"Could not read JSON from {filepath}: {e}")
        return default


def safe_write_json(filepath: str, data: Any, indent: int = 2) -> bool:
    """
    Write a JSON document atomically.

    The document is written to a sibling temporary file which then replaces
    ``filepath``, so readers only ever see the old or the new content.

    Args:
        filepath: Destination path; missing parent directories are created.
        data: JSON-serializable value.
        indent: Indentation of the written document.

    Returns:
        True on success. Failures are logged and reported as False.
    """
    logger = get_logger("utils")

    path = Path(filepath)
    temp_path = None

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(prefix="tracker_", suffix=".json", dir=path.parent)

        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)

        shutil.move(temp_path, filepath)
        temp_path = None
        return True

    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Could not write JSON to {filepath}: {e}")
        return False

    finally:
        if temp_path is not None and os.path.exists(temp_path):
            os.unlink(temp_path)


def get_env_var(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return a stripped environment variable, or ``default`` when unset or blank."""
    value = os.environ.get(name, "").strip()
    return value or default


def is_truthy(value: Optional[str]) -> bool:
    """Interpret an environment-style flag ("true", "1", "yes", "on")."""
    return (value or "").strip().lower() in TRUTHY_VALUES


def sanitize_text(text: str) -> str:
    """
    Clean and normalize text content.

    Collapses runs of whitespace (including newlines) to a single space.

    Args:
        text: Raw text to sanitize.

    Returns:
        Cleaned text string.
    """
    if not text:
        return ""

    cleaned = re.sub(r"\s+", " ", text)
    return cleaned.strip()
