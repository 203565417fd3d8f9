"""
Shared fixtures: in-memory database and mention builders.
"""

from datetime import datetime, timedelta

import pytest
import pytz
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from db import models  # noqa: F401
from scraper.types import RawMention, Source

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=pytz.UTC)


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across sessions and threads"""
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


def raw_mention(
    title="Acme news",
    content=None,
    url="",
    source=Source.GOOGLE_NEWS,
    hours_ago=0,
    author="Unknown",
):
    """RawMention published hours_ago before NOW."""
    return RawMention(
        source=source,
        title=title,
        content=content if content is not None else title,
        url=url,
        author=author,
        published_at=NOW - timedelta(hours=hours_ago),
    )
