"""
Fetch module for the Internship Tracker.

This module handles retrieving listing pages over HTTP(S) with a custom
user agent and a bounded timeout. Failures never raise; they are reported
through the returned FetchResult.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from internship_tracker.config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_USER_AGENT
from internship_tracker.utils import get_logger


# Module logger
logger = get_logger("fetch")

# A failed source simply contributes nothing until the next poll
DEFAULT_MAX_RETRIES = 0
DEFAULT_BACKOFF_FACTOR = 0.0


@dataclass
class FetchResult:
    """
    Outcome of one page fetch.

    Attributes:
        source_url: URL that was requested.
        html_content: Page body on success.
        success: True only for a 200 response.
        error_message: Short reason when the fetch failed.
        status_code: HTTP status, when a response arrived at all.
    """
    source_url: str
    html_content: Optional[str]
    success: bool
    error_message: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def failure(cls, url: str, message: str, status_code: Optional[int] = None) -> "FetchResult":
        return cls(
            source_url=url,
            html_content=None,
            success=False,
            error_message=message,
            status_code=status_code
        )


RETRY_STATUSES = (429, 500, 502, 503, 504)
ACCEPT_HTML = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"


def create_session(
    user_agent: str = DEFAULT_USER_AGENT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
) -> requests.Session:
    """
    Build a session that identifies itself as the tracker bot.

    ``max_retries`` of zero (the default) mounts an adapter that never
    retries; a positive value retries GETs on throttling and 5xx responses.
    """
    adapter = HTTPAdapter(max_retries=Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=("GET",),
        raise_on_status=False
    ))

    session = requests.Session()
    for prefix in ("http://", "https://"):
        session.mount(prefix, adapter)

    session.headers["User-Agent"] = user_agent
    session.headers["Accept"] = ACCEPT_HTML

    return session


def validate_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def fetch_single_url(
    url: str,
    session: requests.Session,
    timeout: int = DEFAULT_REQUEST_TIMEOUT
) -> FetchResult:
    """
    GET one page through ``session``.

    Only a 200 response counts as success. Invalid URLs, other status codes,
    timeouts and transport errors come back as failed results.

    Args:
        url: Page to fetch.
        session: Session from :func:`create_session`.
        timeout: Request timeout in seconds.

    Returns:
        FetchResult describing the outcome.
    """
    if not validate_url(url):
        logger.warning(f"Refusing to fetch malformed URL: {url}")
        return FetchResult.failure(url, "Invalid URL format")

    logger.debug(f"GET {url}")

    try:
        response = session.get(url, timeout=timeout)
    except requests.exceptions.Timeout:
        logger.warning(f"Timed out after {timeout}s: {url}")
        return FetchResult.failure(url, "Request timeout")
    except requests.exceptions.ConnectionError as e:
        logger.warning(f"Could not connect to {url}: {e}")
        return FetchResult.failure(url, f"Connection error: {e}")
    except requests.exceptions.RequestException as e:
        logger.error(f"Request to {url} failed: {e}")
        return FetchResult.failure(url, f"Request failed: {e}")

    if response.status_code != 200:
        logger.warning(f"{url} answered HTTP {response.status_code}")
        return FetchResult.failure(url, f"HTTP {response.status_code}", response.status_code)

    logger.info(f"Fetched {url} ({len(response.text)} chars)")
    return FetchResult(
        source_url=url,
        html_content=response.text,
        success=True,
        status_code=response.status_code
    )


def fetch_page(
    url: str,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: int = DEFAULT_REQUEST_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES
) -> FetchResult:
    """
    Fetch one page with a short-lived session.

    Args:
        url: URL to fetch.
        user_agent: Value of the User-Agent header.
        timeout: Request timeout in seconds.
        max_retries: Automatic retries for transient failures.

    Returns:
        FetchResult containing the fetch outcome.
    """
    session = create_session(user_agent=user_agent, max_retries=max_retries)

    try:
        return fetch_single_url(url, session, timeout)
    finally:
        session.close()
