"""
Ingestion flows for tracked brands

Creates brands, re-scrapes them on demand and runs the periodic scrape over
every active brand. Storage, counters and notifications all happen here;
fetching and enrichment are delegated to the MentionAggregator.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from analytics.spike import detect_spike
from db import SessionLocal
from db import repository
from db.models import Brand
from db.repository import BrandExistsError, BrandNotFoundError
from nlp.enricher import EnrichedMention
from notifications.events import (
    EventEmitter,
    LoggingEventEmitter,
    NewMentionsEvent,
    SpikeAlertEvent,
)

from .aggregator import MentionAggregator
from .types import utc_now

__all__ = [
    "BrandExistsError",
    "BrandNotFoundError",
    "MentionIngestor",
    "create_brand",
    "scrape_brand",
    "scrape_active_brands",
]


class MentionIngestor:
    """Handles brand creation and mention ingestion"""

    # Shared by every ingestor in the process
    _locks: Dict[str, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(
        self,
        aggregator: Optional[MentionAggregator] = None,
        session_factory=None,
        emitter: Optional[EventEmitter] = None,
    ):
        """
        Initialize the ingestor.

        Args:
            aggregator: Mention fetcher, defaults to every configured provider
            session_factory: Optional custom session factory, defaults to SessionLocal
            emitter: Event sink, defaults to logging the events
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._aggregator = aggregator
        self.session_factory = session_factory or SessionLocal
        self.emitter = emitter or LoggingEventEmitter()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass

    @property
    def aggregator(self) -> MentionAggregator:
        # Built lazily so read-only callers never touch provider config
        if self._aggregator is None:
            self._aggregator = MentionAggregator()
        return self._aggregator

    def _brand_lock(self, brand_name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(brand_name, threading.Lock())

    def _emit_new_mentions(self, brand: Brand, stored: List[Any], spike=None) -> None:
        self.emitter.emit(
            NewMentionsEvent(
                brand_id=brand.id,
                brand_name=brand.name,
                count=len(stored),
                mentions=[row.to_dict() for row in stored],
                spike=spike,
            )
        )

    def create_brand(self, name: str, user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Start tracking a brand and store its first batch of mentions.

        Args:
            name: Brand name as entered by the user
            user_id: Optional owner

        Returns:
            Dict with the brand and the number of mentions stored

        Raises:
            ValueError: If the name is empty
            BrandExistsError: If the brand is already tracked
        """
        display_name = (name or "").strip()
        if not display_name:
            raise ValueError("Brand name is required")

        lock = self._brand_lock(repository.normalize_brand_name(display_name))
        if not lock.acquire(blocking=False):
            raise BrandExistsError(f"Brand '{display_name}' is already being created")

        try:
            # Refuse duplicates before spending time on the providers
            with self.session_factory() as session:
                if repository.get_brand_by_name(session, display_name) is not None:
                    raise BrandExistsError(f"Brand '{display_name}' is already being tracked")

            enriched = self.aggregator.fetch_all_mentions(display_name)

            with self.session_factory() as session:
                try:
                    brand = repository.add_brand(session, display_name, user_id=user_id)
                    stored = repository.add_mentions(session, brand, enriched)
                    brand.total_mentions = len(stored)
                    brand.last_scraped = utc_now()
                    session.commit()
                except SQLAlchemyError as e:
                    session.rollback()
                    self.logger.error(f"Database error creating brand '{display_name}': {e}")
                    raise

                self.logger.info(
                    f"Created brand '{brand.display_name}' with {len(stored)} mentions"
                )
                if stored:
                    self._emit_new_mentions(brand, stored)
                return {"brand": brand.to_dict(), "mentions_stored": len(stored)}
        finally:
            lock.release()

    def _store_new_mentions(
        self, brand_id: int, enriched: List[EnrichedMention], require_url: bool
    ) -> Optional[Dict[str, Any]]:
        """
        Store the mentions whose URL is not yet stored for the brand.

        Returns:
            Dict with the stored rows, the brand after the update and the
            total before it,
            or None when the brand no longer exists
        """
        with self.session_factory() as session:
            try:
                brand = repository.get_brand(session, brand_id)
                if brand is None:
                    return None

                previous_total = brand.total_mentions or 0
                known_urls = repository.existing_urls(session, brand_id)

                fresh = []
                for mention in enriched:
                    if require_url and not mention.url:
                        continue
                    if mention.url and mention.url in known_urls:
                        continue
                    if mention.url:
                        known_urls.add(mention.url)
                    fresh.append(mention)

                stored = repository.add_mentions(session, brand, fresh)
                repository.increment_mention_count(session, brand_id, len(stored))
                brand.last_scraped = utc_now()
                session.commit()
                session.refresh(brand)

                return {
                    "stored": stored,
                    "previous_total": previous_total,
                    "brand_dict": brand.to_dict(),
                    "mention_dicts": [row.to_dict() for row in stored],
                }
            except SQLAlchemyError as e:
                session.rollback()
                self.logger.error(f"Database error storing mentions for brand {brand_id}: {e}")
                raise

    def scrape_brand(self, brand_id: int) -> Dict[str, Any]:
        """
        Re-scrape one brand and store the mentions not seen before.

        Args:
            brand_id: Brand to refresh

        Returns:
            Dict with success, skipped, new_mentions and total_mentions

        Raises:
            BrandNotFoundError: If the brand does not exist
        """
        with self.session_factory() as session:
            brand = repository.get_brand(session, brand_id)
            if brand is None:
                raise BrandNotFoundError(f"Brand {brand_id} not found")
            brand_name, display_name = brand.name, brand.display_name

        lock = self._brand_lock(brand_name)
        if not lock.acquire(blocking=False):
            self.logger.info(f"Scrape already in progress for '{display_name}', skipping")
            return {"success": True, "skipped": True, "new_mentions": 0}

        try:
            enriched = self.aggregator.fetch_all_mentions(display_name)
            result = self._store_new_mentions(brand_id, enriched, require_url=False)
            if result is None:
                raise BrandNotFoundError(f"Brand {brand_id} not found")

            self.logger.info(
                f"Scraped '{display_name}': {len(result['stored'])} new mentions"
            )
            if result["stored"]:
                self.emitter.emit(
                    NewMentionsEvent(
                        brand_id=brand_id,
                        brand_name=brand_name,
                        count=len(result["stored"]),
                        mentions=result["mention_dicts"],
                    )
                )
            return {
                "success": True,
                "skipped": False,
                "new_mentions": len(result["stored"]),
                "total_mentions": result["brand_dict"]["total_mentions"],
            }
        finally:
            lock.release()

    def _scrape_for_schedule(self, brand_id: int, brand_name: str, display_name: str) -> int:
        """One brand's share of the periodic scrape; returns mentions stored."""
        lock = self._brand_lock(brand_name)
        if not lock.acquire(blocking=False):
            self.logger.info(f"Scrape already in progress for '{display_name}', skipping")
            return 0

        try:
            enriched = self.aggregator.fetch_all_mentions(display_name)
            result = self._store_new_mentions(brand_id, enriched, require_url=True)
            if result is None or not result["stored"]:
                return 0

            new_total = result["brand_dict"]["total_mentions"]
            spike = detect_spike(new_total, result["previous_total"])

            self.emitter.emit(
                NewMentionsEvent(
                    brand_id=brand_id,
                    brand_name=brand_name,
                    count=len(result["stored"]),
                    mentions=result["mention_dicts"],
                    spike=spike if spike.is_spike else None,
                )
            )
            if spike.is_spike:
                self.logger.warning(
                    f"Mention spike for '{display_name}': +{spike.percentage}%"
                )
                self.emitter.emit(SpikeAlertEvent.for_mentions(brand_id, brand_name, spike))

            return len(result["stored"])
        finally:
            lock.release()

    def scrape_active_brands(self) -> Dict[str, Any]:
        """
        Periodic scrape over every active brand.

        A failure for one brand is logged and the rest still run.

        Returns:
            Dict with success, brands_processed, brands_failed and new_mentions
        """
        with self.session_factory() as session:
            brands = [
                (brand.id, brand.name, brand.display_name)
                for brand in repository.list_active_brands(session)
            ]

        self.logger.info(f"Scraping {len(brands)} active brands")

        new_mentions = 0
        failed = []
        for brand_id, brand_name, display_name in brands:
            try:
                stored = self._scrape_for_schedule(brand_id, brand_name, display_name)
                new_mentions += stored
                self.logger.info(f"'{display_name}': {stored} new mentions")
            except Exception as e:
                self.logger.error(f"Error scraping brand '{display_name}': {e}")
                failed.append(display_name)

        return {
            "success": not failed,
            "brands_processed": len(brands) - len(failed),
            "brands_failed": failed,
            "new_mentions": new_mentions,
        }


def create_brand(name: str, user_id: Optional[int] = None) -> Dict[str, Any]:
    return MentionIngestor().create_brand(name, user_id=user_id)


def scrape_brand(brand_id: int) -> Dict[str, Any]:
    return MentionIngestor().scrape_brand(brand_id)


def scrape_active_brands() -> Dict[str, Any]:
    return MentionIngestor().scrape_active_brands()
