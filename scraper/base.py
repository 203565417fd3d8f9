"""
Abstract base class for mention source adapters

Provides common functionality for all provider adapters including
session management, user agent handling, retries and failure isolation.
"""

import abc
import logging
from abc import ABCMeta
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytz
import requests
from bs4 import BeautifulSoup
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config import get_provider_config, get_request_timeout, get_user_agent

from .types import RawMention, Source

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)


class SourceAdapter(metaclass=ABCMeta):
    """
    Abstract base class for mention providers.

    All adapters must implement fetch() and parse(). collect() wraps the
    two so that any provider failure yields an empty list instead of an
    exception.
    """

    source: Source

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the adapter with provider configuration.

        Args:
            config: Provider settings; read from sources.yml when omitted
            timeout: HTTP timeout in seconds for a single request
            user_agent: Custom user agent string (optional)
        """
        self.config = config if config is not None else get_provider_config(self.source.value)
        self.timeout = timeout if timeout is not None else get_request_timeout()
        self.user_agent = user_agent or get_user_agent()
        self.session = self._create_session()

        # Configure logging
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _create_session(self) -> requests.Session:
        """Create and configure a requests session."""
        session = requests.Session()
        session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json, application/rss+xml, application/xml;q=0.9, */*;q=0.8",
                "Accept-Language": "en-US,en;q=0.5",
            }
        )
        return session

    @property
    def limit(self) -> int:
        return int(self.config.get("limit", 15))

    def is_configured(self) -> bool:
        """Adapters that need credentials return False when they are missing."""
        return True

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, max=2),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        """GET with one retry on transient network errors."""
        kwargs.setdefault("timeout", self.timeout)
        response = self.session.get(url, **kwargs)
        response.raise_for_status()
        return response

    @abc.abstractmethod
    def fetch(self, brand_name: str) -> Any:
        """
        Fetch the provider's raw response for a brand.

        Args:
            brand_name: Brand to search for

        Returns:
            Provider payload (decoded JSON or feed text)
        """
        pass

    @abc.abstractmethod
    def parse(self, payload: Any, brand_name: str) -> List[RawMention]:
        """
        Convert a provider payload into common mentions.

        Args:
            payload: Value returned by fetch()
            brand_name: Brand that was searched for

        Returns:
            List of RawMention objects
        """
        pass

    def collect(self, brand_name: str) -> List[RawMention]:
        """Fetch and parse, returning an empty list on any provider failure."""
        if not self.is_configured():
            self.logger.debug(f"{self.source.value}: no credentials configured, skipping")
            return []

        try:
            payload = self.fetch(brand_name)
            mentions = self.parse(payload, brand_name)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            self.logger.warning(f"{self.source.value}: HTTP {status} for '{brand_name}': {e}")
            return []
        except requests.RequestException as e:
            self.logger.error(f"{self.source.value}: request failed for '{brand_name}': {e}")
            return []
        except (KeyError, TypeError, ValueError) as e:
            self.logger.error(f"{self.source.value}: malformed response for '{brand_name}': {e}")
            return []

        self.logger.info(f"{self.source.value}: collected {len(mentions)} mentions for '{brand_name}'")
        return mentions

    def close(self):
        """Close the session and clean up resources."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


def strip_html(fragment: Optional[str]) -> str:
    """Reduce an HTML snippet to its visible text."""
    if not fragment:
        return ""
    return BeautifulSoup(fragment, "html.parser").get_text(" ", strip=True)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp such as '2024-05-01T10:00:00Z'."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Failed to parse datetime '{value}'")
        return None
    if parsed.tzinfo is None:
        parsed = pytz.UTC.localize(parsed)
    return parsed.astimezone(pytz.UTC)


def from_epoch(value: Any) -> Optional[datetime]:
    """Convert epoch seconds to an aware UTC datetime."""
    if value in (None, ""):
        return None
    return datetime.fromtimestamp(float(value), tz=pytz.UTC)
