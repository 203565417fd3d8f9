"""
Multi-source Mention Aggregator

This module provides functionality to:
1. Query every configured provider concurrently, each under its own timeout
2. Combine the results in fixed provider priority order
3. De-duplicate by URL (or title) and sort newest first
4. Fall back to the synthetic source when no provider returned anything
5. Enrich every surviving mention
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from config import get_request_timeout, load_sources_config
from nlp.enricher import EnrichedMention, Enricher

from .base import SourceAdapter
from .google_news import GoogleNewsAdapter
from .hackernews import HackerNewsAdapter
from .newsapi import NewsAPIAdapter
from .reddit import RedditAdapter
from .synthetic import SyntheticSource
from .types import RawMention, Source
from .youtube import YouTubeAdapter

logger = logging.getLogger(__name__)

ADAPTER_CLASSES = {
    Source.GOOGLE_NEWS: GoogleNewsAdapter,
    Source.REDDIT: RedditAdapter,
    Source.HACKERNEWS: HackerNewsAdapter,
    Source.NEWSAPI: NewsAPIAdapter,
    Source.YOUTUBE: YouTubeAdapter,
}


@dataclass
class SourceOutcome:
    """Result of one provider call: its mentions, or the reason it produced none."""

    source: Source
    mentions: List[RawMention] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def default_adapters() -> List[SourceAdapter]:
    """Instantiate the live adapters in configured priority order."""
    order = load_sources_config().get("provider_order") or [s.value for s in ADAPTER_CLASSES]
    return [ADAPTER_CLASSES[Source(name)]() for name in order]


def deduplicate(mentions: Iterable[RawMention]) -> List[RawMention]:
    """Keep the first mention for each URL (title when the URL is empty)."""
    seen = set()
    unique = []
    for mention in mentions:
        key = mention.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(mention)
    return unique


def sort_newest_first(mentions: Iterable[RawMention]) -> List[RawMention]:
    """Stable sort by publish time, newest first."""
    return sorted(mentions, key=lambda m: m.published_at, reverse=True)


class MentionAggregator:
    """Fans out to every provider and returns one enriched, ordered mention list."""

    def __init__(
        self,
        adapters: Optional[Sequence[SourceAdapter]] = None,
        synthetic: Optional[SyntheticSource] = None,
        enricher: Optional[Enricher] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            adapters: Live providers in priority order, defaults to sources.yml
            synthetic: Fallback source used when every provider comes back empty
            enricher: Annotation step applied to every returned mention
            timeout: Seconds allowed for each provider call
        """
        self.adapters = list(adapters) if adapters is not None else default_adapters()
        self.synthetic = synthetic or SyntheticSource()
        self.enricher = enricher or Enricher()
        self.timeout = timeout if timeout is not None else get_request_timeout()

    async def _run_adapter(
        self, executor: ThreadPoolExecutor, adapter: SourceAdapter, brand_name: str
    ) -> SourceOutcome:
        """Run one blocking adapter in a worker thread under its own timeout."""
        loop = asyncio.get_running_loop()
        try:
            mentions = await asyncio.wait_for(
                loop.run_in_executor(executor, adapter.collect, brand_name),
                timeout=self.timeout,
            )
            return SourceOutcome(source=adapter.source, mentions=list(mentions))
        except asyncio.TimeoutError:
            logger.warning(f"{adapter.source.value}: timed out after {self.timeout}s")
            return SourceOutcome(source=adapter.source, error="timeout")
        except Exception as e:
            logger.error(f"{adapter.source.value}: failed with error: {e}")
            return SourceOutcome(source=adapter.source, error=str(e))

    async def gather_outcomes(self, brand_name: str) -> List[SourceOutcome]:
        """Query all providers concurrently; results come back in adapter order."""
        if not self.adapters:
            return []

        executor = ThreadPoolExecutor(
            max_workers=len(self.adapters), thread_name_prefix="mention-source"
        )
        try:
            return await asyncio.gather(
                *(self._run_adapter(executor, adapter, brand_name) for adapter in self.adapters)
            )
        finally:
            # Do not wait on calls that already timed out
            executor.shutdown(wait=False, cancel_futures=True)

    async def try_live_sources(self, brand_name: str) -> List[RawMention]:
        """Combined, de-duplicated, newest-first mentions from the live providers."""
        outcomes = await self.gather_outcomes(brand_name)
        combined = [mention for outcome in outcomes for mention in outcome.mentions]
        return sort_newest_first(deduplicate(combined))

    def synthetic_mentions(self, brand_name: str) -> List[RawMention]:
        return sort_newest_first(deduplicate(self.synthetic.collect(brand_name)))

    async def fetch_all_mentions_async(self, brand_name: str) -> List[EnrichedMention]:
        """
        Fetch, normalize and enrich mentions of a brand from every provider.

        Never raises for provider problems; when nothing comes back from any
        live provider the synthetic source is used instead.

        Args:
            brand_name: Brand to search for

        Returns:
            Enriched mentions, newest first
        """
        start_time = time.time()

        mentions = await self.try_live_sources(brand_name)
        if mentions:
            source_count = len({m.source for m in mentions})
            logger.info(
                f"Fetched {len(mentions)} real-time mentions for '{brand_name}' "
                f"from {source_count} sources in {time.time() - start_time:.2f}s"
            )
        else:
            logger.info(f"No real-time mentions found for '{brand_name}', using synthetic data")
            mentions = self.synthetic_mentions(brand_name)

        return self.enricher.enrich_all(mentions)

    def fetch_all_mentions(self, brand_name: str) -> List[EnrichedMention]:
        """Synchronous entry point; must not be called from a running event loop."""
        return asyncio.run(self.fetch_all_mentions_async(brand_name))


def fetch_all_mentions(brand_name: str) -> List[EnrichedMention]:
    """Fetch mentions for a brand with the default provider set."""
    return MentionAggregator().fetch_all_mentions(brand_name)
