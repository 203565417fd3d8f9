"""
Mention Enrichment

Composes sentiment scoring, keyword extraction and categorization into a
single deterministic annotation step applied to every ingested mention.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from scraper.types import RawMention, Source

from .categorize import Categorizer, Category
from .keywords import KeywordExtractor
from .sentiment import Sentiment, SentimentScorer


@dataclass(frozen=True)
class Enrichment:
    """Sentiment, category and keywords, always assigned together."""

    sentiment: Sentiment
    sentiment_score: float
    category: Category
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class EnrichedMention:
    """A raw mention plus its enrichment."""

    mention: RawMention
    enrichment: Enrichment

    # Flat accessors so callers can treat this like the stored record
    @property
    def source(self) -> Source:
        return self.mention.source

    @property
    def title(self) -> str:
        return self.mention.title

    @property
    def content(self) -> str:
        return self.mention.content

    @property
    def url(self) -> str:
        return self.mention.url

    @property
    def author(self) -> str:
        return self.mention.author

    @property
    def published_at(self) -> datetime:
        return self.mention.published_at

    @property
    def sentiment(self) -> Sentiment:
        return self.enrichment.sentiment

    @property
    def sentiment_score(self) -> float:
        return self.enrichment.sentiment_score

    @property
    def category(self) -> Category:
        return self.enrichment.category

    @property
    def keywords(self) -> List[str]:
        return list(self.enrichment.keywords)

    def to_record(self) -> Dict[str, Any]:
        """Column values for persisting this mention."""
        return {
            "source": self.source.value,
            "title": self.title,
            "content": self.content,
            "url": self.url,
            "author": self.author,
            "published_at": self.published_at,
            "sentiment": self.sentiment.value,
            "sentiment_score": self.sentiment_score,
            "category": self.category.value,
            "keywords": self.keywords,
        }


class Enricher:
    """Applies the three text analyzers to a mention in one step."""

    def __init__(
        self,
        scorer: Optional[SentimentScorer] = None,
        extractor: Optional[KeywordExtractor] = None,
        categorizer: Optional[Categorizer] = None,
    ):
        self.scorer = scorer or SentimentScorer()
        self.extractor = extractor or KeywordExtractor()
        self.categorizer = categorizer or Categorizer()

    def analyze(self, text: str) -> Enrichment:
        scored = self.scorer.score(text)
        return Enrichment(
            sentiment=scored.sentiment,
            sentiment_score=scored.score,
            category=self.categorizer.categorize(text),
            keywords=tuple(self.extractor.extract(text)),
        )

    def enrich(self, mention: RawMention) -> EnrichedMention:
        return EnrichedMention(mention=mention, enrichment=self.analyze(mention.text))

    def enrich_all(self, mentions: Iterable[RawMention]) -> List[EnrichedMention]:
        return [self.enrich(mention) for mention in mentions]
