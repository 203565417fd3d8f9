"""
Hacker News adapter

Scans the current top stories from the public Firebase API and keeps the
ones whose title or text mentions the brand. No API key is required.
"""

from typing import Any, Dict, List, Optional

import requests

from .base import SourceAdapter, from_epoch, strip_html
from .types import RawMention, Source, make_mention


class HackerNewsAdapter(SourceAdapter):
    """Link-aggregator provider backed by Hacker News top stories."""

    source = Source.HACKERNEWS

    @property
    def stories_to_scan(self) -> int:
        return int(self.config.get("stories_to_scan", 10))

    def _fetch_item(self, story_id: int) -> Optional[Dict[str, Any]]:
        """Fetch one story; a failed item is skipped rather than failing the batch."""
        try:
            response = self._get(self.config["item_url"].format(id=story_id))
            return response.json()
        except (requests.RequestException, ValueError) as e:
            self.logger.debug(f"Skipping HN item {story_id}: {e}")
            return None

    def fetch(self, brand_name: str) -> List[Dict[str, Any]]:
        story_ids = self._get(self.config["top_stories_url"]).json()[:100]
        to_scan = story_ids[: self.stories_to_scan]

        # Items share self.session, which is not thread-safe
        stories = (self._fetch_item(story_id) for story_id in to_scan)
        return [story for story in stories if story]

    def parse(self, payload: List[Dict[str, Any]], brand_name: str) -> List[RawMention]:
        needle = brand_name.lower()

        mentions = []
        for story in payload:
            title = story.get("title") or ""
            text = strip_html(story.get("text"))
            if needle not in title.lower() and needle not in text.lower():
                continue

            mentions.append(
                make_mention(
                    self.source,
                    title=title,
                    content=text,
                    url=story.get("url")
                    or self.config["discussion_url"].format(id=story.get("id")),
                    author=story.get("by"),
                    published_at=from_epoch(story.get("time")),
                )
            )
        return mentions
