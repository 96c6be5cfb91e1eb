"""
State store for the Internship Tracker.

The tracker keeps every posting it has ever seen, plus the time of the last
check, in a single versioned JSON document:

    {
      "version": 1,
      "last_check": "2025-01-01T12:00:00+00:00",
      "postings": {"<id>": {...posting record...}},
      "custom_sources": {"<name>": "<url>"}
    }

Documents written by the earlier unversioned format (``internships``,
``lastCheck``, ``customSources`` with camelCase posting fields) are migrated
on load. Anything else that cannot be read yields an empty state.
"""

from typing import Any, Callable, Dict

from internship_tracker.config import DEFAULT_STATE_PATH
from internship_tracker.models import Posting, TrackerState, format_timestamp, parse_timestamp, utc_now
from internship_tracker.utils import get_logger, safe_read_json, safe_write_json


# Module logger
logger = get_logger("store")

SCHEMA_VERSION = 1

_LEGACY_FIELD_NAMES = {
    "discoveredAt": "discovered_at",
    "postedDate": "posted_at",
}


def encode_state(state: TrackerState) -> Dict[str, Any]:
    """Serialize a TrackerState into the versioned document shape."""
    return {
        "version": SCHEMA_VERSION,
        "last_check": format_timestamp(state.last_check),
        "postings": {pid: posting.to_dict() for pid, posting in state.postings.items()},
        "custom_sources": dict(state.custom_sources),
    }


def decode_state(data: Any) -> TrackerState:
    """
    Build a TrackerState from a loaded JSON document.

    Invalid individual posting records are skipped; a document whose overall
    shape is wrong is rejected.

    Args:
        data: Parsed JSON content.

    Returns:
        Decoded TrackerState.

    Raises:
        ValueError: If the document is not a supported state document.
    """
    if not isinstance(data, dict):
        raise ValueError(f"State document must be an object, got {type(data).__name__}")

    version = data.get("version")
    if version is None and "internships" in data:
        data = migrate_legacy_document(data)
    elif version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported state version: {version!r}")

    raw_postings = data.get("postings")
    if not isinstance(raw_postings, dict):
        raise ValueError("State field 'postings' must be an object")

    postings: Dict[str, Posting] = {}
    for key, record in raw_postings.items():
        try:
            posting = Posting.from_dict(record)
        except ValueError as e:
            logger.warning(f"Skipping invalid posting record '{key}': {e}")
            continue
        postings[posting.id] = posting

    raw_sources = data.get("custom_sources") or {}
    if not isinstance(raw_sources, dict):
        raise ValueError("State field 'custom_sources' must be an object")

    custom_sources = {
        str(name): url for name, url in raw_sources.items() if isinstance(url, str)
    }

    return TrackerState(
        postings=postings,
        last_check=parse_timestamp(data.get("last_check")),
        custom_sources=custom_sources,
    )


def migrate_legacy_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert an unversioned state document into the version 1 shape.

    Args:
        data: Document with ``internships``/``lastCheck``/``customSources``.

    Returns:
        Equivalent version 1 document.
    """
    internships = data.get("internships")
    if not isinstance(internships, dict):
        raise ValueError("Legacy field 'internships' must be an object")

    postings: Dict[str, Any] = {}
    for key, record in internships.items():
        if not isinstance(record, dict):
            postings[key] = record
            continue
        converted = {_LEGACY_FIELD_NAMES.get(k, k): v for k, v in record.items()}
        converted.pop("isNew", None)
        postings[key] = converted

    logger.info(f"Migrating {len(postings)} posting(s) from unversioned state format")

    return {
        "version": SCHEMA_VERSION,
        "last_check": data.get("lastCheck"),
        "postings": postings,
        "custom_sources": data.get("customSources") or {},
    }


class StateStore:
    """
    Loads and persists the tracker state at a fixed path.

    Single writer, single process: there is no locking.
    """

    def __init__(self, path: str = DEFAULT_STATE_PATH, clock: Callable = utc_now):
        self.path = path
        self.clock = clock

    def empty_state(self) -> TrackerState:
        return TrackerState(postings={}, last_check=self.clock(), custom_sources={})

    def load(self) -> TrackerState:
        """
        Load the persisted state.

        Returns:
            The stored state, or a fresh empty state if the file is missing,
            unreadable, or not a valid state document.
        """
        logger.debug(f"Loading state from {self.path}")

        data = safe_read_json(self.path, default=None)
        if data is None:
            logger.info("No previous state found, starting fresh")
            return self.empty_state()

        try:
            state = decode_state(data)
        except ValueError as e:
            logger.warning(f"Failed to load previous state ({e}), starting fresh")
            return self.empty_state()

        logger.info(f"Loaded {len(state.postings)} tracked posting(s)")
        return state

    def save(self, state: TrackerState) -> bool:
        """
        Persist the full state, replacing the previous snapshot.

        Args:
            state: State to write.

        Returns:
            True if the write succeeded. Failures are logged, never raised.
        """
        success = safe_write_json(self.path, encode_state(state))

        if success:
            logger.info(f"Saved {len(state.postings)} posting(s) to {self.path}")
        else:
            logger.error(f"Failed to save state to {self.path}")

        return success
