"""
Database Models & Session Module

This module handles database connections and ORM models for the Brand Tracker
system using SQLAlchemy. SQLite is the default; MySQL/MariaDB and PostgreSQL
URLs are supported through DATABASE_URL.
"""

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import get_database_url as _configured_database_url

load_dotenv()

__version__ = "0.1.0"
__author__ = "Brand Tracker Team"

DATABASE_URL = _configured_database_url()


def build_engine(url: str):
    """Create an engine with pool settings appropriate for the backend."""
    if url.startswith("sqlite"):
        return create_engine(
            url, echo=False, connect_args={"check_same_thread": False}
        )

    return create_engine(
        url,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,  # Recycle connections every hour
    )


engine = build_engine(DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create declarative base
Base = declarative_base()

