"""
Unit tests for the provider adapters.

HTTP is mocked at the requests session; each adapter is checked for its
payload mapping, its credential handling and its failure isolation.
"""

import threading
from datetime import datetime
from unittest.mock import Mock, patch

import pytz
import requests

from scraper.base import from_epoch, parse_iso_datetime, strip_html
from scraper.google_news import GoogleNewsAdapter
from scraper.hackernews import HackerNewsAdapter
from scraper.newsapi import NewsAPIAdapter
from scraper.reddit import PUBLIC_USER_AGENT, RedditAdapter
from scraper.types import Source
from scraper.youtube import YouTubeAdapter

EPOCH_2024 = 1704103200  # 2024-01-01 10:00:00 UTC

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Acme - Google News</title>
    <item>
      <title>Acme launches rocket skates - Reuters</title>
      <link>https://news.google.com/articles/abc</link>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
      <description>&lt;a href="https://reuters.com/x"&gt;Acme launches rocket skates&lt;/a&gt;</description>
      <source url="https://www.reuters.com">Reuters</source>
    </item>
    <item>
      <title>Acme shares climb</title>
      <link>https://news.google.com/articles/def</link>
    </item>
  </channel>
</rss>
"""


def json_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def adapter_kwargs():
    return {"timeout": 1, "user_agent": "brand-tracker-tests"}


class TestHelpers:
    def test_strip_html(self):
        assert strip_html("<p>Hello <b>world</b></p>") == "Hello world"
        assert strip_html(None) == ""

    def test_parse_iso_datetime(self):
        expected = datetime(2024, 1, 1, 10, tzinfo=pytz.UTC)
        assert parse_iso_datetime("2024-01-01T10:00:00Z") == expected
        assert parse_iso_datetime("2024-01-01T11:00:00+01:00") == expected

    def test_parse_iso_datetime_invalid(self):
        assert parse_iso_datetime("yesterday") is None
        assert parse_iso_datetime(None) is None

    def test_from_epoch(self):
        assert from_epoch(EPOCH_2024) == datetime(2024, 1, 1, 10, tzinfo=pytz.UTC)
        assert from_epoch(None) is None


class TestGoogleNewsAdapter:
    """Test cases for the Google News RSS adapter."""

    def test_parses_feed(self):
        adapter = GoogleNewsAdapter(**adapter_kwargs())
        response = Mock(text=RSS_FEED)
        response.raise_for_status.return_value = None

        with patch.object(adapter.session, "get", return_value=response) as mock_get:
            mentions = adapter.collect("Acme")

        assert mock_get.call_args.kwargs["params"]["q"] == "Acme"
        assert len(mentions) == 2

        first = mentions[0]
        assert first.source == Source.GOOGLE_NEWS
        assert first.title == "Acme launches rocket skates - Reuters"
        assert first.content == "Acme launches rocket skates"
        assert first.url == "https://news.google.com/articles/abc"
        assert first.author == "Reuters"
        assert first.published_at == datetime(2024, 1, 1, 10, tzinfo=pytz.UTC)

    def test_item_without_description_or_source(self):
        adapter = GoogleNewsAdapter(**adapter_kwargs())
        second = adapter.parse(RSS_FEED, "Acme")[1]

        assert second.content == "Acme shares climb"
        assert second.author == "Google News"
        assert second.published_at.tzinfo is not None

    def test_limit_applied(self):
        adapter = GoogleNewsAdapter(config={"url": "https://example.com", "limit": 1}, **adapter_kwargs())
        assert len(adapter.parse(RSS_FEED, "Acme")) == 1

    def test_http_error_yields_empty(self):
        adapter = GoogleNewsAdapter(**adapter_kwargs())
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError(response=Mock(status_code=503))

        with patch.object(adapter.session, "get", return_value=response):
            assert adapter.collect("Acme") == []


class TestRedditAdapter:
    """Test cases for the Reddit adapter."""

    PAYLOAD = {
        "data": {
            "children": [
                {
                    "data": {
                        "title": "Anyone tried Acme?",
                        "selftext": "",
                        "permalink": "/r/gadgets/comments/1/anyone_tried_acme/",
                        "author": "roadrunner",
                        "created_utc": EPOCH_2024,
                    }
                }
            ]
        }
    }

    def test_public_search_without_credentials(self):
        adapter = RedditAdapter(client_id="", client_secret="", **adapter_kwargs())

        with patch.object(adapter.session, "get", return_value=json_response(self.PAYLOAD)) as mock_get, \
                patch.object(adapter.session, "post") as mock_post:
            mentions = adapter.collect("Acme")

        mock_post.assert_not_called()
        assert mock_get.call_args.args[0] == adapter.config["public_search_url"]
        assert mock_get.call_args.kwargs["headers"]["User-Agent"] == PUBLIC_USER_AGENT

        assert len(mentions) == 1
        mention = mentions[0]
        assert mention.source == Source.REDDIT
        assert mention.content == "Anyone tried Acme?"
        assert mention.url == "https://reddit.com/r/gadgets/comments/1/anyone_tried_acme/"
        assert mention.author == "roadrunner"
        assert mention.published_at == datetime(2024, 1, 1, 10, tzinfo=pytz.UTC)

    def test_oauth_search_with_credentials(self):
        adapter = RedditAdapter(client_id="id", client_secret="secret", **adapter_kwargs())

        with patch.object(adapter.session, "post", return_value=json_response({"access_token": "tok"})), \
                patch.object(adapter.session, "get", return_value=json_response(self.PAYLOAD)) as mock_get:
            mentions = adapter.collect("Acme")

        assert mock_get.call_args.args[0] == adapter.config["oauth_search_url"]
        assert mock_get.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"
        assert len(mentions) == 1

    def test_falls_back_to_public_when_auth_fails(self):
        adapter = RedditAdapter(client_id="id", client_secret="secret", **adapter_kwargs())

        with patch.object(adapter.session, "post", side_effect=requests.ConnectionError("down")), \
                patch.object(adapter.session, "get", return_value=json_response(self.PAYLOAD)) as mock_get:
            mentions = adapter.collect("Acme")

        assert mock_get.call_args.args[0] == adapter.config["public_search_url"]
        assert len(mentions) == 1

    def test_malformed_post_skipped_without_losing_batch(self):
        adapter = RedditAdapter(client_id="", client_secret="", **adapter_kwargs())
        good = self.PAYLOAD["data"]["children"][0]
        payload = {"data": {"children": [{"data": {"title": "No permalink"}}, good]}}

        with patch.object(adapter.session, "get", return_value=json_response(payload)):
            mentions = adapter.collect("Acme")

        assert [m.title for m in mentions] == ["Anyone tried Acme?"]


class TestHackerNewsAdapter:
    """Test cases for the Hacker News adapter."""

    ITEMS = {
        1: {
            "id": 1,
            "title": "Acme raises Series B",
            "url": "https://acme.example/funding",
            "by": "pg",
            "time": EPOCH_2024,
        },
        2: {"id": 2, "title": "Unrelated story", "by": "someone", "time": EPOCH_2024},
        3: {
            "id": 3,
            "title": "Ask HN: Tooling recommendations?",
            "text": "<p>We use <i>Acme</i> daily</p>",
            "by": "asker",
            "time": EPOCH_2024,
        },
    }

    def fake_get(self, url, **kwargs):
        if url.endswith("topstories.json"):
            return json_response([1, 2, 3])
        item_id = int(url.rsplit("/", 1)[1].split(".")[0])
        return json_response(self.ITEMS[item_id])

    def test_filters_to_brand(self):
        adapter = HackerNewsAdapter(**adapter_kwargs())

        with patch.object(adapter.session, "get", side_effect=self.fake_get):
            mentions = adapter.collect("acme")

        assert sorted(m.title for m in mentions) == [
            "Acme raises Series B",
            "Ask HN: Tooling recommendations?",
        ]

    def test_story_without_url_links_discussion(self):
        adapter = HackerNewsAdapter(**adapter_kwargs())

        with patch.object(adapter.session, "get", side_effect=self.fake_get):
            mentions = {m.title: m for m in adapter.collect("Acme")}

        ask = mentions["Ask HN: Tooling recommendations?"]
        assert ask.url == "https://news.ycombinator.com/item?id=3"
        assert ask.content == "We use Acme daily"
        assert ask.author == "asker"
        assert mentions["Acme raises Series B"].url == "https://acme.example/funding"

    def test_failed_item_is_skipped(self):
        adapter = HackerNewsAdapter(**adapter_kwargs())

        def flaky_get(url, **kwargs):
            if "item/2" in url:
                raise requests.HTTPError("gone")
            return self.fake_get(url, **kwargs)

        with patch.object(adapter.session, "get", side_effect=flaky_get):
            assert len(adapter.collect("acme")) == 2

    def test_items_fetched_in_order_on_calling_thread(self):
        adapter = HackerNewsAdapter(**adapter_kwargs())
        calls = []

        def recording_get(url, **kwargs):
            calls.append((url, threading.get_ident()))
            return self.fake_get(url, **kwargs)

        with patch.object(adapter.session, "get", side_effect=recording_get):
            adapter.collect("acme")

        item_ids = [url.rsplit("/", 1)[1].split(".")[0] for url, _ in calls[1:]]
        assert item_ids == ["1", "2", "3"]
        assert {ident for _, ident in calls} == {threading.get_ident()}


class TestNewsAPIAdapter:
    """Test cases for the NewsAPI adapter."""

    PAYLOAD = {
        "articles": [
            {
                "title": "Acme posts record quarter",
                "description": "Revenue beat expectations.",
                "url": "https://news.example/acme-q2",
                "author": None,
                "source": {"name": "Daily Planet"},
                "publishedAt": "2024-01-01T10:00:00Z",
            }
        ]
    }

    def test_missing_key_makes_no_request(self):
        adapter = NewsAPIAdapter(api_key="", **adapter_kwargs())

        with patch.object(adapter.session, "get") as mock_get:
            assert adapter.collect("Acme") == []

        mock_get.assert_not_called()

    def test_maps_articles(self):
        adapter = NewsAPIAdapter(api_key="key", **adapter_kwargs())

        with patch.object(adapter.session, "get", return_value=json_response(self.PAYLOAD)) as mock_get:
            mentions = adapter.collect("Acme")

        params = mock_get.call_args.kwargs["params"]
        assert params["q"] == "Acme"
        assert params["apiKey"] == "key"

        assert len(mentions) == 1
        assert mentions[0].source == Source.NEWSAPI
        assert mentions[0].author == "Daily Planet"
        assert mentions[0].content == "Revenue beat expectations."
        assert mentions[0].published_at == datetime(2024, 1, 1, 10, tzinfo=pytz.UTC)

    def test_timeout_is_retried_once_then_empty(self):
        adapter = NewsAPIAdapter(api_key="key", **adapter_kwargs())

        with patch.object(adapter.session, "get", side_effect=requests.Timeout("slow")) as mock_get:
            assert adapter.collect("Acme") == []

        assert mock_get.call_count == 2


class TestYouTubeAdapter:
    """Test cases for the YouTube adapter."""

    PAYLOAD = {
        "items": [
            {
                "id": {"videoId": "vid123"},
                "snippet": {
                    "title": "Acme unboxing",
                    "description": "",
                    "channelTitle": "Unbox Channel",
                    "publishedAt": "2024-01-01T10:00:00Z",
                },
            }
        ]
    }

    def test_missing_key_makes_no_request(self):
        adapter = YouTubeAdapter(api_key="", **adapter_kwargs())

        with patch.object(adapter.session, "get") as mock_get:
            assert adapter.collect("Acme") == []

        mock_get.assert_not_called()

    def test_maps_videos(self):
        adapter = YouTubeAdapter(api_key="key", **adapter_kwargs())

        with patch.object(adapter.session, "get", return_value=json_response(self.PAYLOAD)):
            mentions = adapter.collect("Acme")

        assert len(mentions) == 1
        assert mentions[0].source == Source.YOUTUBE
        assert mentions[0].url == "https://youtube.com/watch?v=vid123"
        assert mentions[0].author == "Unbox Channel"
        assert mentions[0].content == "Acme unboxing"

    def test_malformed_payload_yields_empty(self):
        adapter = YouTubeAdapter(api_key="key", **adapter_kwargs())

        with patch.object(adapter.session, "get", return_value=json_response({"items": [{"id": {}}]})):
            assert adapter.collect("Acme") == []

    def test_malformed_item_skipped_without_losing_batch(self):
        adapter = YouTubeAdapter(api_key="key", **adapter_kwargs())
        payload = {"items": [{"id": {"kind": "youtube#channel"}}] + self.PAYLOAD["items"]}

        with patch.object(adapter.session, "get", return_value=json_response(payload)):
            mentions = adapter.collect("Acme")

        assert [m.url for m in mentions] == ["https://youtube.com/watch?v=vid123"]
