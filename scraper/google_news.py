"""
Google News RSS adapter

Searches the public Google News RSS endpoint for a brand. No API key
is required.
"""

import calendar
from datetime import datetime
from typing import List, Optional

import feedparser
import pytz

from .base import SourceAdapter, strip_html
from .types import RawMention, Source, make_mention


class GoogleNewsAdapter(SourceAdapter):
    """News-feed provider backed by Google News RSS search."""

    source = Source.GOOGLE_NEWS

    def fetch(self, brand_name: str) -> str:
        language = self.config.get("language", "en-US")
        country = self.config.get("country", "US")
        params = {
            "q": brand_name,
            "hl": language,
            "gl": country,
            "ceid": f"{country}:{language.split('-')[0]}",
        }
        response = self._get(self.config["url"], params=params)
        return response.text

    def parse(self, payload: str, brand_name: str) -> List[RawMention]:
        feed = feedparser.parse(payload)
        if feed.bozo and not feed.entries:
            raise ValueError(f"unreadable feed: {feed.get('bozo_exception')}")

        mentions = []
        for entry in feed.entries[: self.limit]:
            source_info = entry.get("source") or {}
            mentions.append(
                make_mention(
                    self.source,
                    title=entry.get("title"),
                    content=strip_html(entry.get("summary")),
                    url=entry.get("link"),
                    author=entry.get("author") or source_info.get("title") or "Google News",
                    published_at=_entry_published(entry),
                )
            )
        return mentions


def _entry_published(entry) -> Optional[datetime]:
    """feedparser exposes the pubDate as a UTC struct_time."""
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime.fromtimestamp(calendar.timegm(parsed), tz=pytz.UTC)
