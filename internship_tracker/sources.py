"""
Posting sources for the Internship Tracker.

Each source knows how to produce raw PostingCandidate objects from one
origin. Sources are independent: the aggregator runs them concurrently and a
failing source contributes nothing without affecting the others.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from internship_tracker.compare import generate_posting_id
from internship_tracker.config import (
    DEFAULT_CLOSED_MARKERS,
    DEFAULT_LISTING_URL,
    DEFAULT_MAX_LISTING_RESULTS,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
    TrackerConfig,
)
from internship_tracker.fetch import fetch_page
from internship_tracker.models import Posting, PostingCandidate, utc_now
from internship_tracker.parse import parse_listing_page
from internship_tracker.utils import get_logger


logger = get_logger("sources")

Clock = Callable[[], datetime]

LEVELS_FYI_URL = "https://levels.fyi/internships"

# (company, title, location)
BIG_TECH_INTERNSHIPS: Tuple[Tuple[str, str, str], ...] = (
    ("Google", "Software Engineering Intern", "Mountain View, CA"),
    ("Microsoft", "Software Engineering Intern", "Redmond, WA"),
    ("Apple", "Software Engineering Intern", "Cupertino, CA"),
    ("Meta", "Software Engineering Intern", "Menlo Park, CA"),
    ("Amazon", "SDE Intern", "Seattle, WA"),
    ("Netflix", "Software Engineering Intern", "Los Gatos, CA"),
    ("Tesla", "Software Engineering Intern", "Austin, TX"),
    ("Uber", "Software Engineering Intern", "San Francisco, CA"),
)


class PostingSource(ABC):
    """
    Abstract posting source.

    Contract:
      - fetch() returns freshly built candidates on every call.
      - Implementations handle their own network/parse failures and return
        an empty list instead of raising.
    """

    name: str = ""

    @abstractmethod
    def fetch(self) -> List[PostingCandidate]:
        """Fetch the current candidates from this source."""
        raise NotImplementedError


class ListingPageSource(PostingSource):
    """Scrapes a community-maintained internship table (SimplifyJobs README)."""

    name = "GitHub"

    def __init__(
        self,
        url: str = DEFAULT_LISTING_URL,
        max_results: int = DEFAULT_MAX_LISTING_RESULTS,
        timeout: int = DEFAULT_REQUEST_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        closed_markers: Iterable[str] = DEFAULT_CLOSED_MARKERS
    ):
        self.url = url
        self.max_results = max_results
        self.timeout = timeout
        self.user_agent = user_agent
        self.closed_markers = tuple(closed_markers)

    def fetch(self) -> List[PostingCandidate]:
        logger.info(f"Checking {self.name} internship repository...")

        result = fetch_page(self.url, user_agent=self.user_agent, timeout=self.timeout)
        if not result.success:
            logger.error(f"Error scraping {self.name}: {result.error_message}")
            return []

        try:
            candidates = parse_listing_page(
                result.html_content or "",
                source_url=self.url,
                source=self.name,
                max_results=self.max_results,
                closed_markers=self.closed_markers
            )
        except Exception as e:
            logger.error(f"Error parsing {self.name} listing page: {e}")
            return []

        logger.info(f"Found {len(candidates)} internship(s) from {self.name}")
        return candidates


class StaticSource(PostingSource):
    """
    Fixed list of well-known companies.

    Stands in for sites that would need a heavier scraper. Every call returns
    the same entries, stamped with the current time as their posted date.
    """

    name = "Levels.fyi"

    def __init__(
        self,
        entries: Sequence[Tuple[str, str, str]] = BIG_TECH_INTERNSHIPS,
        url: str = LEVELS_FYI_URL,
        clock: Clock = utc_now
    ):
        self.entries = tuple(entries)
        self.url = url
        self.clock = clock

    def fetch(self) -> List[PostingCandidate]:
        posted_at = self.clock()
        return [
            PostingCandidate(
                company=company,
                title=title,
                location=location,
                url=self.url,
                source=self.name,
                posted_at=posted_at
            )
            for company, title, location in self.entries
        ]


def to_posting(candidate: PostingCandidate, discovered_at: datetime) -> Posting:
    """Assign identity and discovery time to a raw candidate."""
    return Posting(
        id=generate_posting_id(candidate.company, candidate.title, candidate.location),
        company=candidate.company,
        title=candidate.title,
        location=candidate.location,
        url=candidate.url,
        source=candidate.source,
        discovered_at=discovered_at,
        posted_at=candidate.posted_at,
        is_new=False
    )


def fetch_all_sources(
    sources: Sequence[PostingSource],
    now: Optional[datetime] = None
) -> List[Posting]:
    """
    Run every source concurrently and merge their postings.

    Results keep source registration order, then each source's own order.
    A source that raises is logged and contributes nothing.

    Args:
        sources: Registered sources.
        now: Discovery timestamp for this cycle. Defaults to the current time.

    Returns:
        Identified postings from all sources.
    """
    if not sources:
        logger.warning("No sources configured")
        return []

    discovered_at = now or utc_now()
    postings: List[Posting] = []

    with ThreadPoolExecutor(max_workers=len(sources)) as pool:
        futures: List[Tuple[PostingSource, Future]] = [
            (source, pool.submit(source.fetch)) for source in sources
        ]

        for source, future in futures:
            try:
                candidates = future.result()
            except Exception as e:
                logger.error(f"Source {source.name or type(source).__name__} failed: {e!r}")
                continue

            postings.extend(to_posting(c, discovered_at) for c in candidates)

    logger.info(f"Fetched {len(postings)} posting(s) from {len(sources)} source(s)")

    return postings


def default_sources(config: TrackerConfig, clock: Clock = utc_now) -> List[PostingSource]:
    """Build the standard source list from configuration."""
    return [
        ListingPageSource(
            url=config.listing_url,
            max_results=config.max_listing_results,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
            closed_markers=config.closed_markers
        ),
        StaticSource(clock=clock),
    ]
