"""
YouTube search adapter

Searches recent videos through the YouTube Data API v3. Requires
YOUTUBE_API_KEY; without it the adapter is a no-op.
"""

from typing import Any, Dict, List, Optional

from config import get_youtube_api_key

from .base import SourceAdapter, parse_iso_datetime
from .types import RawMention, Source, make_mention


class YouTubeAdapter(SourceAdapter):
    """Video search provider backed by the YouTube Data API."""

    source = Source.YOUTUBE

    def __init__(self, api_key: Optional[str] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else get_youtube_api_key()

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def fetch(self, brand_name: str) -> Dict[str, Any]:
        params = {
            "part": "snippet",
            "q": brand_name,
            "type": "video",
            "maxResults": self.limit,
            "order": self.config.get("order", "date"),
            "key": self.api_key,
        }
        response = self._get(self.config["url"], params=params)
        return response.json()

    def parse(self, payload: Dict[str, Any], brand_name: str) -> List[RawMention]:
        mentions = []
        for item in payload.get("items") or []:
            snippet = item.get("snippet")
            video_id = (item.get("id") or {}).get("videoId")
            if not snippet or not video_id:
                self.logger.debug(f"Skipping malformed YouTube item: {item!r}")
                continue

            mentions.append(
                make_mention(
                    self.source,
                    title=snippet.get("title"),
                    content=snippet.get("description"),
                    url=self.config["watch_url"].format(video_id=video_id),
                    author=snippet.get("channelTitle"),
                    published_at=parse_iso_datetime(snippet.get("publishedAt")),
                )
            )
        return mentions
