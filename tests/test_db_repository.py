"""
Unit tests for the brand and mention repository
"""

import pytest

from db import repository
from db.models import Brand
from db.repository import BrandExistsError, BrandNotFoundError
from nlp.enricher import Enricher
from nlp.sentiment import SentimentScorer
from scraper.types import Source

from .conftest import raw_mention


@pytest.fixture
def enricher():
    return Enricher(scorer=SentimentScorer(lexicon={"great": 3.0, "awful": -3.0}))


@pytest.fixture
def brand(session):
    brand = repository.add_brand(session, "Acme")
    session.commit()
    return brand


@pytest.fixture
def stored_mentions(session, brand, enricher):
    mentions = [
        raw_mention(title="Acme is great", url="https://m/1", source=Source.REDDIT, hours_ago=1),
        raw_mention(title="Awful support from Acme", url="https://m/2", source=Source.GOOGLE_NEWS, hours_ago=2),
        raw_mention(title="Acme review", url="https://m/3", source=Source.REDDIT, hours_ago=3),
        raw_mention(title="Acme launches product", url="", source=Source.YOUTUBE, hours_ago=4),
    ]
    rows = repository.add_mentions(session, brand, enricher.enrich_all(mentions))
    session.commit()
    return rows


class TestBrands:
    """Brand queries"""

    def test_add_brand_lowercases_key(self, session):
        brand = repository.add_brand(session, "  Acme Corp ")
        assert brand.name == "acme corp"
        assert brand.display_name == "Acme Corp"
        assert brand.is_active is True

    def test_add_brand_rejects_empty(self, session):
        with pytest.raises(ValueError):
            repository.add_brand(session, "   ")

    def test_add_brand_rejects_duplicate(self, session, brand):
        with pytest.raises(BrandExistsError):
            repository.add_brand(session, "ACME")

    def test_get_brand_by_name(self, session, brand):
        assert repository.get_brand_by_name(session, "AcMe").id == brand.id
        assert repository.get_brand_by_name(session, "globex") is None

    def test_list_active_brands_newest_first(self, session, brand):
        second = repository.add_brand(session, "Globex")
        third = repository.add_brand(session, "Initech")
        repository.deactivate_brand(session, second.id)
        session.commit()

        assert [b.name for b in repository.list_active_brands(session)] == ["initech", "acme"]
        assert third.is_active is True

    def test_update_brand_ignores_unknown_fields(self, session, brand):
        updated = repository.update_brand(session, brand.id, display_name="ACME", name="hacked")
        assert updated.display_name == "ACME"
        assert updated.name == "acme"

    def test_update_missing_brand(self, session):
        with pytest.raises(BrandNotFoundError):
            repository.update_brand(session, 404, display_name="x")

    def test_deactivate_is_soft_delete(self, session, brand):
        repository.deactivate_brand(session, brand.id)
        session.commit()

        assert repository.get_brand(session, brand.id).is_active is False

    def test_increment_mention_count(self, session, brand):
        repository.increment_mention_count(session, brand.id, 5)
        repository.increment_mention_count(session, brand.id, 3)
        session.commit()

        assert session.get(Brand, brand.id).total_mentions == 8

    def test_increment_by_zero_is_noop(self, session, brand):
        repository.increment_mention_count(session, brand.id, 0)
        session.commit()

        assert session.get(Brand, brand.id).total_mentions == 0


class TestMentions:
    """Mention queries"""

    def test_add_mentions_denormalizes_brand(self, stored_mentions, brand):
        assert all(row.brand_id == brand.id for row in stored_mentions)
        assert all(row.brand_name == "acme" for row in stored_mentions)
        assert stored_mentions[0].sentiment == "positive"
        assert stored_mentions[1].category == "complaint"

    def test_existing_urls_skips_empty(self, session, brand, stored_mentions):
        assert repository.existing_urls(session, brand.id) == {
            "https://m/1",
            "https://m/2",
            "https://m/3",
        }

    def test_list_mentions_default_order(self, session, brand, stored_mentions):
        rows, total = repository.list_mentions(session, brand_id=brand.id)

        assert total == 4
        assert [row.url for row in rows[:3]] == ["https://m/1", "https://m/2", "https://m/3"]

    def test_list_mentions_filters(self, session, brand, stored_mentions):
        rows, total = repository.list_mentions(session, brand_id=brand.id, source="reddit")
        assert total == 2
        assert {row.source for row in rows} == {"reddit"}

        rows, total = repository.list_mentions(session, sentiment="negative")
        assert total == 1
        assert rows[0].url == "https://m/2"

        rows, total = repository.list_mentions(session, category="review")
        assert [row.url for row in rows] == ["https://m/3"]

    def test_list_mentions_pagination(self, session, brand, stored_mentions):
        rows, total = repository.list_mentions(session, brand_id=brand.id, limit=2, skip=1)

        assert total == 4
        assert [row.url for row in rows] == ["https://m/2", "https://m/3"]

    def test_list_mentions_ascending(self, session, brand, stored_mentions):
        rows, _ = repository.list_mentions(session, brand_id=brand.id, order="asc")
        assert rows[0].source == "youtube"

    def test_latest_mentions(self, session, stored_mentions):
        rows = repository.latest_mentions(session, limit=2)
        assert [row.url for row in rows] == ["https://m/1", "https://m/2"]

    def test_get_mention(self, session, stored_mentions):
        assert repository.get_mention(session, stored_mentions[0].id).title == "Acme is great"
        assert repository.get_mention(session, 9999) is None

    def test_mention_stats(self, session, brand, stored_mentions):
        stats = repository.mention_stats(session, brand_id=brand.id)

        assert stats == {
            "total": 4,
            "positive": 1,
            "negative": 1,
            "neutral": 2,
            "complaints": 1,
            "reviews": 1,
            "products": 1,
            "support": 0,
        }

    def test_mention_stats_empty(self, session):
        assert repository.mention_stats(session)["total"] == 0

    def test_mentions_for_brand(self, session, brand, stored_mentions):
        other = repository.add_brand(session, "Globex")
        session.commit()

        assert len(repository.mentions_for_brand(session, brand.id)) == 4
        assert repository.mentions_for_brand(session, other.id) == []
