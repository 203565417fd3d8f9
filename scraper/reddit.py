"""
Reddit search adapter

Uses OAuth client-credentials when REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET
are configured, and the public search.json endpoint otherwise or when
authentication fails.
"""

from typing import Any, Dict, List, Optional

import requests

from config import get_reddit_credentials

from .base import SourceAdapter, from_epoch
from .types import RawMention, Source, make_mention

PUBLIC_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.124 Safari/537.36"
)


class RedditAdapter(SourceAdapter):
    """Forum/social search provider backed by Reddit."""

    source = Source.REDDIT

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        if client_id is None and client_secret is None:
            client_id, client_secret = get_reddit_credentials()
        self.client_id = client_id
        self.client_secret = client_secret

    def _search_params(self, brand_name: str) -> Dict[str, Any]:
        return {
            "q": brand_name,
            "limit": self.limit,
            "sort": self.config.get("sort", "new"),
        }

    def _get_access_token(self) -> str:
        response = self.session.post(
            self.config["token_url"],
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self.client_secret),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()["access_token"]

    def _fetch_authenticated(self, brand_name: str) -> Dict[str, Any]:
        token = self._get_access_token()
        response = self._get(
            self.config["oauth_search_url"],
            params=self._search_params(brand_name),
            headers={"Authorization": f"Bearer {token}"},
        )
        return response.json()

    def fetch(self, brand_name: str) -> Dict[str, Any]:
        if self.client_id and self.client_secret:
            try:
                return self._fetch_authenticated(brand_name)
            except (requests.RequestException, KeyError, ValueError) as e:
                self.logger.warning(f"Reddit auth failed, trying public API: {e}")

        response = self._get(
            self.config["public_search_url"],
            params=self._search_params(brand_name),
            headers={"User-Agent": PUBLIC_USER_AGENT},
        )
        return response.json()

    def parse(self, payload: Dict[str, Any], brand_name: str) -> List[RawMention]:
        children = (payload.get("data") or {}).get("children") or []

        mentions = []
        for child in children:
            post = child.get("data") or {}
            permalink = post.get("permalink")
            if not permalink:
                self.logger.debug(f"Skipping Reddit post without permalink: {post.get('title')!r}")
                continue

            mentions.append(
                make_mention(
                    self.source,
                    title=post.get("title"),
                    content=post.get("selftext"),
                    url=f"https://reddit.com{permalink}",
                    author=post.get("author"),
                    published_at=from_epoch(post.get("created_utc")),
                )
            )
        return mentions
