"""
Brand Dashboard Aggregation Module

This module provides functionality to:
1. Load a brand's stored mentions
2. Compute sentiment and category totals over the whole set
3. Build a daily trend series for the trailing 30 days
4. Compare against the previous 30-day window for spike detection
5. Rank keywords and compose a dashboard summary
"""

import logging
import math
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from db import SessionLocal
from db import repository
from db.repository import BrandNotFoundError
from nlp.categorize import Category
from scraper.types import ensure_utc, utc_now

from .spike import SpikeResult, detect_negative_spike, detect_spike

logger = logging.getLogger(__name__)

TREND_WINDOW_DAYS = 30
TOP_KEYWORDS = 5
LATEST_MENTIONS = 10
DATE_FORMAT = "%Y-%m-%d"

TREND_UPWARD = "upward"
TREND_DOWNWARD = "downward"
TREND_STABLE = "stable"


@dataclass
class TrendBucket:
    """Mention counts for one UTC calendar day."""

    date: str
    mentions: int
    positive: int
    negative: int


@dataclass
class DashboardSummary:
    """Headline figures shown above the dashboard charts."""

    positive_percentage: int
    top_keywords: List[str]
    trend_direction: str
    has_spike: bool
    has_negative_spike: bool
    total_mentions: int
    sentiment_breakdown: Dict[str, int]


@dataclass
class DashboardData:
    """Everything needed to render one brand's dashboard."""

    brand: Any
    stats: Dict[str, int]
    categories: Dict[str, int]
    trend: List[TrendBucket]
    top_keywords: List[Dict[str, Any]]
    spikes: Dict[str, SpikeResult]
    summary: DashboardSummary
    latest_mentions: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brand": _as_dict(self.brand),
            "stats": dict(self.stats),
            "categories": dict(self.categories),
            "trend": [asdict(bucket) for bucket in self.trend],
            "top_keywords": [dict(item) for item in self.top_keywords],
            "spikes": {name: spike.to_dict() for name, spike in self.spikes.items()},
            "summary": asdict(self.summary),
            "latest_mentions": [_as_dict(mention) for mention in self.latest_mentions],
        }


def _as_dict(value: Any) -> Any:
    """Serialize ORM rows and enriched mentions; pass anything else through."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if hasattr(value, "to_record"):
        return value.to_record()
    return value


def _text(value: Any) -> str:
    """Plain string for enum members and stored strings alike."""
    return getattr(value, "value", value)


def mentions_frame(mentions: Sequence[Any]) -> pd.DataFrame:
    """
    Tabulate mentions for aggregation.

    Args:
        mentions: Stored Mention rows or EnrichedMention values

    Returns:
        DataFrame with columns: published_at (UTC), sentiment, category
    """
    df = pd.DataFrame(
        [
            {
                "published_at": ensure_utc(m.published_at),
                "sentiment": _text(m.sentiment),
                "category": _text(m.category),
            }
            for m in mentions
        ],
        columns=["published_at", "sentiment", "category"],
    )
    df["published_at"] = pd.to_datetime(df["published_at"], utc=True)
    return df


def sentiment_totals(df: pd.DataFrame) -> Dict[str, int]:
    counts = df["sentiment"].value_counts()
    return {
        "total": int(len(df)),
        "positive": int(counts.get("positive", 0)),
        "negative": int(counts.get("negative", 0)),
        "neutral": int(counts.get("neutral", 0)),
    }


def category_totals(df: pd.DataFrame) -> Dict[str, int]:
    """Counts per category in taxonomy order, empty categories omitted."""
    counts = df["category"].value_counts()
    return {
        category.value: int(counts[category.value])
        for category in Category
        if counts.get(category.value, 0) > 0
    }


def trend_series(df: pd.DataFrame, now: datetime) -> List[TrendBucket]:
    """Daily buckets for the trailing window, ascending, days without mentions skipped."""
    recent = df[df["published_at"] >= now - timedelta(days=TREND_WINDOW_DAYS)]
    if recent.empty:
        return []

    daily = (
        recent.assign(
            date=recent["published_at"].dt.strftime(DATE_FORMAT),
            positive=recent["sentiment"] == "positive",
            negative=recent["sentiment"] == "negative",
        )
        .groupby("date", sort=True)
        .agg(
            mentions=("sentiment", "size"),
            positive=("positive", "sum"),
            negative=("negative", "sum"),
        )
    )

    return [
        TrendBucket(
            date=date,
            mentions=int(row["mentions"]),
            positive=int(row["positive"]),
            negative=int(row["negative"]),
        )
        for date, row in daily.iterrows()
    ]


def previous_window_totals(df: pd.DataFrame, now: datetime) -> Dict[str, int]:
    """Totals for [now - 60d, now - 30d)."""
    window_end = now - timedelta(days=TREND_WINDOW_DAYS)
    window_start = window_end - timedelta(days=TREND_WINDOW_DAYS)
    previous = df[(df["published_at"] >= window_start) & (df["published_at"] < window_end)]
    return {
        "total": int(len(previous)),
        "negative": int((previous["sentiment"] == "negative").sum()),
    }


def trend_direction(trend: List[TrendBucket]) -> str:
    if len(trend) < 2:
        return TREND_STABLE
    if trend[-1].mentions > trend[0].mentions:
        return TREND_UPWARD
    return TREND_DOWNWARD


def rank_keywords(mentions: Sequence[Any], top_n: int = TOP_KEYWORDS) -> List[Dict[str, Any]]:
    """Most frequent keywords across mentions; ties keep first-seen order."""
    counts = Counter(keyword for m in mentions for keyword in (m.keywords or []))
    return [{"word": word, "count": count} for word, count in counts.most_common(top_n)]


def positive_percentage(positive: int, total: int) -> int:
    """Share of positive mentions, rounded half up."""
    if not total:
        return 0
    return int(math.floor(positive / total * 100 + 0.5))


def compute_dashboard(
    brand: Any, mentions: Sequence[Any], now: Optional[datetime] = None
) -> DashboardData:
    """
    Build a brand's dashboard from its mentions.

    Args:
        brand: Brand row (or any value to echo back in the result)
        mentions: The brand's stored mentions
        now: Reference time, defaults to the current UTC time

    Returns:
        DashboardData with totals, trend, spikes and summary
    """
    now = ensure_utc(now) if now else utc_now()
    mentions = list(mentions)
    df = mentions_frame(mentions)

    stats = sentiment_totals(df)
    trend = trend_series(df, now)
    previous = previous_window_totals(df, now)
    top_keywords = rank_keywords(mentions)

    spikes = {
        "mentions": detect_spike(stats["total"], previous["total"]),
        "negative": detect_negative_spike(stats["negative"], previous["negative"]),
    }

    summary = DashboardSummary(
        positive_percentage=positive_percentage(stats["positive"], stats["total"]),
        top_keywords=[item["word"] for item in top_keywords],
        trend_direction=trend_direction(trend),
        has_spike=spikes["mentions"].is_spike,
        has_negative_spike=spikes["negative"].is_spike,
        total_mentions=stats["total"],
        sentiment_breakdown={
            "positive": stats["positive"],
            "negative": stats["negative"],
            "neutral": stats["neutral"],
        },
    )

    latest = sorted(mentions, key=lambda m: ensure_utc(m.published_at), reverse=True)

    return DashboardData(
        brand=brand,
        stats=stats,
        categories=category_totals(df),
        trend=trend,
        top_keywords=top_keywords,
        spikes=spikes,
        summary=summary,
        latest_mentions=latest[:LATEST_MENTIONS],
    )


class DashboardAggregator:
    """Loads a brand's mentions from the database and builds its dashboard."""

    def __init__(self, session_factory=None):
        """
        Initialize the dashboard aggregator.

        Args:
            session_factory: Optional custom session factory, defaults to SessionLocal
        """
        self.session_factory = session_factory or SessionLocal

    def get_dashboard_data(
        self, brand_id: int, now: Optional[datetime] = None
    ) -> DashboardData:
        """
        Build the dashboard for a stored brand.

        Raises:
            BrandNotFoundError: If the brand does not exist
        """
        try:
            with self.session_factory() as session:
                brand = repository.get_brand(session, brand_id)
                if brand is None:
                    raise BrandNotFoundError(f"Brand {brand_id} not found")

                mentions = repository.mentions_for_brand(session, brand_id)
                logger.info(
                    f"Building dashboard for '{brand.display_name}' from {len(mentions)} mentions"
                )
                return compute_dashboard(brand, mentions, now=now)

        except SQLAlchemyError as e:
            logger.error(f"Database error building dashboard for brand {brand_id}: {e}")
            raise


def get_dashboard_data(brand_id: int, now: Optional[datetime] = None) -> DashboardData:
    return DashboardAggregator().get_dashboard_data(brand_id, now=now)
