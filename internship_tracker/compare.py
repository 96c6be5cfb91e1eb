"""
Compare module for the Internship Tracker.

This module derives stable posting identifiers and compares freshly fetched
postings against the ones already stored, so only newly discovered
internships trigger alerts.
"""

import re
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Set

from internship_tracker.models import Posting
from internship_tracker.utils import get_logger


# Module logger
logger = get_logger("compare")

ID_SEPARATOR = "_"

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_SEPARATOR_RUN = re.compile(r"_+")


def generate_posting_id(company: str, title: str, location: str) -> str:
    """
    Generate a stable identifier for a posting.

    The three fields are joined, lowercased, and every character outside
    [a-z0-9] becomes a separator; runs of separators collapse into one. Two
    postings that differ only in case or punctuation therefore share an id.

    Args:
        company: Organization name.
        title: Role title.
        location: Location text.

    Returns:
        Identifier such as "google_swe_intern_mountain_view".
    """
    joined = ID_SEPARATOR.join([company or "", title or "", location or ""]).lower()
    return _SEPARATOR_RUN.sub(ID_SEPARATOR, _NON_ALNUM.sub(ID_SEPARATOR, joined))


def build_id_set(postings: Iterable[Posting]) -> Set[str]:
    """Build a set of identifiers from a list of postings."""
    return {p.id for p in postings if p.id}


def find_new_postings(
    current: List[Posting],
    previous_by_id: Mapping[str, Posting]
) -> List[Posting]:
    """
    Find postings that are in current but not in previous.

    Matching is by identifier only: a stored posting whose other fields
    changed is not reported as new. Duplicates inside ``current`` are kept.

    Args:
        current: Postings fetched in this cycle, in fetch order.
        previous_by_id: Stored postings keyed by identifier.

    Returns:
        New postings, in the same order as ``current``.
    """
    new_postings = [p for p in current if p.id not in previous_by_id]

    logger.info(f"Found {len(new_postings)} new posting(s)")

    return new_postings


def mark_new(current: List[Posting], new_ids: Set[str]) -> List[Posting]:
    """Return ``current`` with copies flagged ``is_new`` where the id is in ``new_ids``."""
    return [p.mark_new() if p.id in new_ids else p for p in current]


def merge_postings(stored: Dict[str, Posting], current: List[Posting]) -> int:
    """
    Merge fetched postings into the stored mapping in place.

    New identifiers are inserted and existing ones have their snapshot
    refreshed. Nothing is ever removed. When ``current`` holds the same
    identifier twice, the later occurrence wins.

    Args:
        stored: Mapping of identifier to Posting, modified in place.
        current: Postings fetched in this cycle.

    Returns:
        Number of identifiers that were not present before the merge.
    """
    before = len(stored)

    for posting in current:
        # The transient flag is not part of the stored snapshot.
        stored[posting.id] = posting if not posting.is_new else _unflagged(posting)

    inserted = len(stored) - before
    logger.debug(f"Merged {len(current)} posting(s): {inserted} inserted, {len(stored)} total")

    return inserted


def _unflagged(posting: Posting) -> Posting:
    return replace(posting, is_new=False)


def get_comparison_summary(
    current: List[Posting],
    previous_by_id: Mapping[str, Posting]
) -> Dict[str, int]:
    """
    Get a summary of the comparison between current and previous postings.

    Args:
        current: Postings fetched in this cycle.
        previous_by_id: Stored postings keyed by identifier.

    Returns:
        Dictionary with comparison statistics.
    """
    current_ids = build_id_set(current)
    previous_ids = set(previous_by_id)

    return {
        "current_count": len(current),
        "previous_count": len(previous_ids),
        "new_count": len(current_ids - previous_ids),
        "unchanged_count": len(current_ids & previous_ids),
        "not_seen_count": len(previous_ids - current_ids),
    }
