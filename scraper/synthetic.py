"""
Synthetic mention source

Built-in fallback content used when no live provider returns data, so
brand creation and re-scrapes always produce a usable result set.
"""

import json
import logging
from datetime import datetime, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import load_sources_config

from .types import RawMention, Source, make_mention, utc_now

logger = logging.getLogger(__name__)

DATA_PATH = Path(__file__).parent / "data" / "synthetic_mentions.json"
BRAND_PLACEHOLDER = "[Brand]"


@lru_cache(maxsize=4)
def load_templates(path: Path = DATA_PATH) -> List[Dict[str, Any]]:
    """Load the bundled template mentions."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class SyntheticSource:
    """Produces template mentions for a brand."""

    source = Source.SYNTHETIC

    def __init__(
        self,
        templates: Optional[List[Dict[str, Any]]] = None,
        max_mentions: Optional[int] = None,
    ):
        self.templates = templates if templates is not None else load_templates()
        if max_mentions is None:
            max_mentions = load_sources_config().get("synthetic", {}).get("max_mentions", 20)
        self.max_mentions = max_mentions

    def _matching_templates(self, brand_name: str) -> List[Dict[str, Any]]:
        """Templates that already talk about this brand, if any."""
        needle = brand_name.lower()
        return [
            t
            for t in self.templates
            if needle in t.get("title", "").lower() or needle in t.get("content", "").lower()
        ]

    def collect(self, brand_name: str, now: Optional[datetime] = None) -> List[RawMention]:
        now = now or utc_now()

        templates = self._matching_templates(brand_name)
        substitute = not templates
        if substitute:
            templates = self.templates

        mentions = []
        for template in templates[: self.max_mentions]:
            title = template.get("title", "")
            content = template.get("content", "")
            if substitute:
                title = title.replace(BRAND_PLACEHOLDER, brand_name)
                content = content.replace(BRAND_PLACEHOLDER, brand_name)

            mentions.append(
                make_mention(
                    self.source,
                    title=title,
                    content=content,
                    url=template.get("url"),
                    author=template.get("author"),
                    published_at=now - timedelta(hours=template.get("hours_ago", 0)),
                )
            )

        logger.info(f"Generated {len(mentions)} synthetic mentions for '{brand_name}'")
        return mentions
