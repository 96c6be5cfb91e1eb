"""
Data models for the Internship Tracker.

Sources produce PostingCandidate objects. The aggregation step turns each
candidate into a Posting by assigning its identifier and discovery time.
TrackerState is the durable snapshot persisted between runs.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime as ISO-8601, normalised to UTC."""
    return ensure_utc(value).isoformat()


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts the trailing "Z" form and naive values (interpreted as UTC).

    Raises:
        ValueError: If the value is not a parseable timestamp string, or it
                    falls outside the representable range once shifted to UTC.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(text))
    except OverflowError:
        raise ValueError(f"Timestamp out of range: {value!r}")


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class PostingCandidate:
    """
    A raw posting as returned by a source, before identification.

    Attributes:
        company: Organization offering the internship.
        title: Role title.
        location: Free-form location text.
        url: Where the posting was found.
        source: Short label of the source that produced it.
        posted_at: When the source says it was posted, if known.
    """
    company: str
    title: str
    location: str
    url: str
    source: str
    posted_at: Optional[datetime] = None


@dataclass(frozen=True)
class Posting:
    """
    One discovered internship opportunity.

    The identifier is derived from (company, title, location) so the same
    posting seen on different runs maps to the same key. ``is_new`` is only
    meaningful within a single cycle and is never persisted.
    """
    id: str
    company: str
    title: str
    location: str
    url: str
    source: str
    discovered_at: datetime
    posted_at: Optional[datetime] = None
    is_new: bool = False

    def mark_new(self) -> "Posting":
        """Return a copy flagged as newly discovered in this cycle."""
        return replace(self, is_new=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted record shape (``is_new`` excluded)."""
        return {
            "id": self.id,
            "company": self.company,
            "title": self.title,
            "location": self.location,
            "url": self.url,
            "source": self.source,
            "discovered_at": format_timestamp(self.discovered_at),
            "posted_at": format_timestamp(self.posted_at) if self.posted_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Posting":
        """
        Build a Posting from a persisted record.

        Raises:
            ValueError: If a required field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Posting record must be an object, got {type(data).__name__}")

        values: Dict[str, str] = {}
        for key in ("id", "company", "title", "location", "url", "source"):
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"Posting field '{key}' must be a string")
            values[key] = value

        posted_raw = data.get("posted_at")

        return cls(
            discovered_at=parse_timestamp(data.get("discovered_at")),
            posted_at=parse_timestamp(posted_raw) if posted_raw else None,
            **values,
        )


@dataclass
class TrackerState:
    """
    Durable snapshot of everything the tracker has seen.

    Attributes:
        postings: Identifier -> last known Posting. Entries are overwritten when
                  seen again and never removed automatically.
        last_check: When the last fetch cycle completed.
        custom_sources: User-registered source name -> URL. Persisted only.
    """
    postings: Dict[str, Posting] = field(default_factory=dict)
    last_check: datetime = field(default_factory=utc_now)
    custom_sources: Dict[str, str] = field(default_factory=dict)
