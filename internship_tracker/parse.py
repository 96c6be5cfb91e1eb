"""
Parse module for the Internship Tracker.

This module extracts postings from a listing page laid out as an HTML table
whose first three columns are company, role and location. Closed postings
and rows without a company or role are dropped.
"""

from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from internship_tracker.config import DEFAULT_CLOSED_MARKERS, DEFAULT_MAX_LISTING_RESULTS
from internship_tracker.models import PostingCandidate
from internship_tracker.utils import get_logger, sanitize_text


# Module logger
logger = get_logger("parse")

ROW_SELECTOR = "table tbody tr"
MIN_COLUMNS = 3


def extract_row_cells(row: Tag) -> Optional[List[str]]:
    """
    Extract the visible text of each cell in a table row.

    Args:
        row: BeautifulSoup <tr> element.

    Returns:
        List of cleaned cell texts, or None if the row has fewer than
        three cells.
    """
    cells = row.find_all("td")
    if len(cells) < MIN_COLUMNS:
        return None

    return [sanitize_text(cell.get_text()) for cell in cells]


def is_closed_title(title: str, closed_markers: Iterable[str] = DEFAULT_CLOSED_MARKERS) -> bool:
    """
    Check whether a role title marks the posting as closed.

    Args:
        title: Text of the role column.
        closed_markers: Substrings that flag a closed or withdrawn posting.

    Returns:
        True if any marker occurs in the title.
    """
    return any(marker in title for marker in closed_markers if marker)


def parse_listing_rows(
    html: str,
    source_url: str,
    source: str,
    closed_markers: Iterable[str] = DEFAULT_CLOSED_MARKERS
) -> List[PostingCandidate]:
    """
    Parse every open posting row from a listing page.

    Args:
        html: Raw HTML content.
        source_url: URL recorded on each candidate.
        source: Source label recorded on each candidate.
        closed_markers: Substrings that flag a closed posting.

    Returns:
        Candidates in document order, uncapped.
    """
    if not html:
        logger.warning(f"Empty HTML content for {source_url}")
        return []

    soup = BeautifulSoup(html, "html.parser")
    markers = tuple(closed_markers)

    candidates: List[PostingCandidate] = []
    skipped_closed = 0

    for row in soup.select(ROW_SELECTOR):
        cells = extract_row_cells(row)
        if cells is None:
            continue

        company, title, location = cells[0], cells[1], cells[2]

        if not company or not title:
            continue

        if is_closed_title(title, markers):
            skipped_closed += 1
            continue

        candidates.append(PostingCandidate(
            company=company,
            title=title,
            location=location,
            url=source_url,
            source=source
        ))

    logger.debug(f"Skipped {skipped_closed} closed posting(s) on {source_url}")

    return candidates


def parse_listing_page(
    html: str,
    source_url: str,
    source: str,
    max_results: int = DEFAULT_MAX_LISTING_RESULTS,
    closed_markers: Iterable[str] = DEFAULT_CLOSED_MARKERS
) -> List[PostingCandidate]:
    """
    Parse a listing page and cap the number of postings returned.

    Args:
        html: Raw HTML content.
        source_url: URL recorded on each candidate.
        source: Source label recorded on each candidate.
        max_results: Maximum number of candidates to return.
        closed_markers: Substrings that flag a closed posting.

    Returns:
        At most ``max_results`` open postings, in document order.
    """
    candidates = parse_listing_rows(html, source_url, source, closed_markers)

    logger.info(f"Found {len(candidates)} open posting(s) on {source_url}")

    return candidates[:max(max_results, 0)]
