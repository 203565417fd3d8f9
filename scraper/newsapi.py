"""
NewsAPI adapter

Searches syndicated articles through newsapi.org. Requires NEWS_API_KEY;
without it the adapter is a no-op.
"""

from typing import Any, Dict, List, Optional

from config import get_news_api_key

from .base import SourceAdapter, parse_iso_datetime
from .types import RawMention, Source, make_mention


class NewsAPIAdapter(SourceAdapter):
    """Syndicated-article search provider backed by NewsAPI."""

    source = Source.NEWSAPI

    def __init__(self, api_key: Optional[str] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else get_news_api_key()

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def fetch(self, brand_name: str) -> Dict[str, Any]:
        params = {
            "q": brand_name,
            "sortBy": self.config.get("sort_by", "publishedAt"),
            "pageSize": self.limit,
            "language": self.config.get("language", "en"),
            "apiKey": self.api_key,
        }
        response = self._get(self.config["url"], params=params)
        return response.json()

    def parse(self, payload: Dict[str, Any], brand_name: str) -> List[RawMention]:
        mentions = []
        for article in payload.get("articles") or []:
            source_info = article.get("source") or {}
            mentions.append(
                make_mention(
                    self.source,
                    title=article.get("title"),
                    content=article.get("description"),
                    url=article.get("url"),
                    author=article.get("author") or source_info.get("name"),
                    published_at=parse_iso_datetime(article.get("publishedAt")),
                )
            )
        return mentions
