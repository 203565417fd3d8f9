"""
Common mention shape shared by every source adapter.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

import pytz


class Source(str, Enum):
    """Closed set of mention sources, in provider priority order."""

    GOOGLE_NEWS = "google-news"
    REDDIT = "reddit"
    HACKERNEWS = "hackernews"
    NEWSAPI = "newsapi"
    YOUTUBE = "youtube"
    SYNTHETIC = "synthetic"

    @classmethod
    def parse(cls, value: str) -> "Source":
        """Map a stored string back to a Source, rejecting unknown values."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown mention source: {value!r}") from None


LIVE_SOURCES = (
    Source.GOOGLE_NEWS,
    Source.REDDIT,
    Source.HACKERNEWS,
    Source.NEWSAPI,
    Source.YOUTUBE,
)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


@dataclass(frozen=True)
class RawMention:
    """A normalized, not yet enriched, mention from a single provider."""

    source: Source
    title: str
    content: str
    url: str = ""
    author: str = "Unknown"
    published_at: datetime = field(default_factory=utc_now)

    @property
    def dedup_key(self) -> str:
        """URL when present, otherwise the title."""
        return self.url or self.title

    @property
    def text(self) -> str:
        """Text analyzed by the enrichment step."""
        return f"{self.title} {self.content}".strip()


def make_mention(
    source: Source,
    title: Optional[str],
    content: Optional[str] = None,
    url: Optional[str] = None,
    author: Optional[str] = None,
    published_at: Optional[datetime] = None,
) -> RawMention:
    """
    Build a RawMention applying the provider-independent defaults.

    Args:
        source: Provider the mention came from
        title: Headline or post title
        content: Body text; falls back to the title when empty
        url: Canonical link, empty string when unknown
        author: Author name, "Unknown" when empty
        published_at: Publish time, ingestion time when missing

    Returns:
        RawMention with every field populated
    """
    title = (title or "").strip()
    return RawMention(
        source=source,
        title=title,
        content=(content or "").strip() or title,
        url=(url or "").strip(),
        author=(author or "").strip() or "Unknown",
        published_at=ensure_utc(published_at) if published_at else utc_now(),
    )
