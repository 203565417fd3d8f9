"""
Repository queries for brands and mentions

Plain functions over an open SQLAlchemy session. They flush but never
commit; the caller owns the transaction.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import case, func, select, update
from sqlalchemy.orm import Session

from nlp.enricher import EnrichedMention

from .models import Brand, Mention

logger = logging.getLogger(__name__)

UPDATABLE_BRAND_FIELDS = {"display_name", "user_id", "is_active", "last_scraped"}
SORTABLE_MENTION_FIELDS = {
    "published_at",
    "created_at",
    "sentiment_score",
    "source",
    "title",
}


class BrandExistsError(Exception):
    """A brand with the same (lowercased) name is already tracked."""


class BrandNotFoundError(Exception):
    """No brand with the requested id exists."""


def normalize_brand_name(name: str) -> str:
    return name.strip().lower()


# Brands


def list_active_brands(session: Session) -> List[Brand]:
    query = (
        select(Brand)
        .where(Brand.is_active.is_(True))
        .order_by(Brand.created_at.desc(), Brand.id.desc())
    )
    return list(session.execute(query).scalars())


def get_brand(session: Session, brand_id: int) -> Optional[Brand]:
    return session.get(Brand, brand_id)


def get_brand_by_name(session: Session, name: str) -> Optional[Brand]:
    query = select(Brand).where(Brand.name == normalize_brand_name(name))
    return session.execute(query).scalar_one_or_none()


def add_brand(session: Session, name: str, user_id: Optional[int] = None) -> Brand:
    """
    Create a tracked brand.

    Args:
        session: Open session
        name: Brand name as entered; stored lowercased as the unique key
        user_id: Optional owner

    Returns:
        The new Brand row, flushed so its id is assigned

    Raises:
        ValueError: If the name is empty
        BrandExistsError: If the lowercased name is already tracked
    """
    display_name = (name or "").strip()
    if not display_name:
        raise ValueError("Brand name is required")

    if get_brand_by_name(session, display_name) is not None:
        raise BrandExistsError(f"Brand '{display_name}' is already being tracked")

    brand = Brand(
        name=normalize_brand_name(display_name),
        display_name=display_name,
        user_id=user_id,
        is_active=True,
        total_mentions=0,
    )
    session.add(brand)
    session.flush()
    return brand


def update_brand(session: Session, brand_id: int, **fields: Any) -> Brand:
    """Update known brand columns; unknown keys are ignored."""
    brand = get_brand(session, brand_id)
    if brand is None:
        raise BrandNotFoundError(f"Brand {brand_id} not found")

    for key, value in fields.items():
        if key in UPDATABLE_BRAND_FIELDS:
            setattr(brand, key, value)
        else:
            logger.debug(f"Ignoring unknown brand field: {key}")

    session.flush()
    return brand


def deactivate_brand(session: Session, brand_id: int) -> Brand:
    """Soft delete: the brand and its mentions stay, it just stops being scraped."""
    return update_brand(session, brand_id, is_active=False)


def increment_mention_count(session: Session, brand_id: int, count: int) -> None:
    """Add to a brand's running total in a single UPDATE."""
    if count <= 0:
        return
    session.execute(
        update(Brand)
        .where(Brand.id == brand_id)
        .values(total_mentions=Brand.total_mentions + count)
    )
    session.flush()


# Mentions


def add_mentions(
    session: Session, brand: Brand, enriched: Iterable[EnrichedMention]
) -> List[Mention]:
    """Store enriched mentions for a brand."""
    rows = [
        Mention(brand_id=brand.id, brand_name=brand.name, **mention.to_record())
        for mention in enriched
    ]
    session.add_all(rows)
    session.flush()
    return rows


def existing_urls(session: Session, brand_id: int) -> Set[str]:
    query = select(Mention.url).where(Mention.brand_id == brand_id, Mention.url != "")
    return set(session.execute(query).scalars())


def list_mentions(
    session: Session,
    brand_id: Optional[int] = None,
    sentiment: Optional[str] = None,
    category: Optional[str] = None,
    source: Optional[str] = None,
    limit: int = 50,
    skip: int = 0,
    sort_by: str = "published_at",
    order: str = "desc",
) -> Tuple[List[Mention], int]:
    """
    Filtered, paginated mention listing.

    Args:
        session: Open session
        brand_id: Restrict to one brand
        sentiment: positive, negative or neutral
        category: complaint, review, product, support or general
        source: Source value such as "reddit"
        limit: Page size
        skip: Rows to skip
        sort_by: Column to sort on, falls back to published_at
        order: "asc" or "desc"

    Returns:
        Tuple of (page rows, total rows matching the filters)
    """
    conditions = []
    if brand_id is not None:
        conditions.append(Mention.brand_id == brand_id)
    if sentiment:
        conditions.append(Mention.sentiment == sentiment)
    if category:
        conditions.append(Mention.category == category)
    if source:
        conditions.append(Mention.source == source)

    column = getattr(Mention, sort_by if sort_by in SORTABLE_MENTION_FIELDS else "published_at")
    ordering = column.asc() if order == "asc" else column.desc()

    total = session.execute(
        select(func.count()).select_from(Mention).where(*conditions)
    ).scalar_one()
    rows = session.execute(
        select(Mention)
        .where(*conditions)
        .order_by(ordering, Mention.id.desc())
        .offset(skip)
        .limit(limit)
    ).scalars()
    return list(rows), total


def latest_mentions(session: Session, limit: int = 20) -> List[Mention]:
    query = (
        select(Mention)
        .order_by(Mention.published_at.desc(), Mention.id.desc())
        .limit(limit)
    )
    return list(session.execute(query).scalars())


def get_mention(session: Session, mention_id: int) -> Optional[Mention]:
    return session.get(Mention, mention_id)


def mentions_for_brand(session: Session, brand_id: int) -> List[Mention]:
    query = (
        select(Mention)
        .where(Mention.brand_id == brand_id)
        .order_by(Mention.published_at.desc(), Mention.id.desc())
    )
    return list(session.execute(query).scalars())


def mention_stats(session: Session, brand_id: Optional[int] = None) -> Dict[str, int]:
    """Counts by sentiment and by non-general category."""

    def count_where(column, value):
        return func.coalesce(func.sum(case((column == value, 1), else_=0)), 0)

    query = select(
        func.count(Mention.id),
        count_where(Mention.sentiment, "positive"),
        count_where(Mention.sentiment, "negative"),
        count_where(Mention.sentiment, "neutral"),
        count_where(Mention.category, "complaint"),
        count_where(Mention.category, "review"),
        count_where(Mention.category, "product"),
        count_where(Mention.category, "support"),
    )
    if brand_id is not None:
        query = query.where(Mention.brand_id == brand_id)

    row = session.execute(query).one()
    keys = [
        "total",
        "positive",
        "negative",
        "neutral",
        "complaints",
        "reviews",
        "products",
        "support",
    ]
    return {key: int(value or 0) for key, value in zip(keys, row)}
