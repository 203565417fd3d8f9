"""
SQLAlchemy ORM Models for the Brand Tracker Database

This module defines the database schema using SQLAlchemy declarative models
for tracked brands and their enriched mentions.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from . import Base


class Brand(Base):
    """Brand table storing the brands a user tracks"""

    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True, index=True)  # lowercase key
    display_name = Column(String(255), nullable=False)
    user_id = Column(Integer, nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    last_scraped = Column(DateTime(timezone=True), nullable=True)
    total_mentions = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    mentions = relationship("Mention", back_populates="brand")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "is_active": self.is_active,
            "last_scraped": self.last_scraped,
            "total_mentions": self.total_mentions,
        }


class Mention(Base):
    """Mention table storing one enriched piece of brand-related content"""

    __tablename__ = "mentions"

    id = Column(Integer, primary_key=True, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, index=True)
    brand_name = Column(String(255), nullable=False, index=True)
    source = Column(String(20), nullable=False)  # scraper.types.Source value
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    url = Column(String(1000), nullable=False, default="")
    author = Column(String(255), nullable=False, default="Unknown")
    published_at = Column(DateTime(timezone=True), nullable=False, index=True)
    sentiment = Column(String(10), nullable=False, index=True)
    sentiment_score = Column(Float, nullable=False, default=0.0)
    category = Column(String(20), nullable=False, default="general", index=True)
    keywords = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    brand = relationship("Brand", back_populates="mentions")

    __table_args__ = (
        Index("ix_mentions_brand_published", "brand_id", "published_at"),
        Index("ix_mentions_brand_name_published", "brand_name", "published_at"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "brand_name": self.brand_name,
            "source": self.source,
            "title": self.title,
            "content": self.content,
            "url": self.url,
            "author": self.author,
            "published_at": self.published_at,
            "sentiment": self.sentiment,
            "sentiment_score": self.sentiment_score,
            "category": self.category,
            "keywords": list(self.keywords or []),
        }
