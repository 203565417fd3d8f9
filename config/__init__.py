"""
Configuration Management Module

This module handles environment variables, configuration files,
and settings for the Brand Tracker system.
"""

__version__ = "0.1.0"
__author__ = "Brand Tracker Team"

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

load_dotenv()

# Values shipped in the sample .env file; treated the same as a missing key
PLACEHOLDER_VALUES = {
    "",
    "your_newsapi_key_here",
    "your_youtube_api_key",
    "your_reddit_client_id",
    "your_reddit_client_secret",
}


def _get_secret(name: str) -> Optional[str]:
    """Read a credential from the environment, ignoring placeholder values."""
    value = os.getenv(name, "").strip()
    if value in PLACEHOLDER_VALUES:
        return None
    return value


@lru_cache(maxsize=1)
def load_sources_config() -> Dict[str, Any]:
    """
    Load provider configuration from sources.yml.

    Returns:
        Dictionary containing provider order, endpoints and limits
    """
    config_path = Path(__file__).parent / "sources.yml"

    if not config_path.exists():
        raise FileNotFoundError(f"Sources configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def get_provider_config(source: str) -> Dict[str, Any]:
    """Get the configuration block for a single provider."""
    return load_sources_config().get("providers", {}).get(source, {})


def get_database_url() -> str:
    """Get database URL from environment variables."""
    return os.getenv("DATABASE_URL", "sqlite:///brand_tracker.db")


def get_news_api_key() -> Optional[str]:
    """Get NewsAPI key from environment."""
    return _get_secret("NEWS_API_KEY")


def get_youtube_api_key() -> Optional[str]:
    """Get YouTube Data API key from environment."""
    return _get_secret("YOUTUBE_API_KEY")


def get_reddit_credentials() -> Tuple[Optional[str], Optional[str]]:
    """Get Reddit OAuth client id and secret from environment."""
    return _get_secret("REDDIT_CLIENT_ID"), _get_secret("REDDIT_CLIENT_SECRET")


def get_request_timeout() -> float:
    """Per-source timeout in seconds for a single provider call."""
    default = load_sources_config().get("timeout_seconds", 8)
    return float(os.getenv("SOURCE_TIMEOUT_SECONDS", default))


def get_user_agent() -> str:
    """User agent sent to providers that require one."""
    return load_sources_config().get("user_agent", "BrandTracker/1.0")


def is_production() -> bool:
    """Check if running in production environment."""
    return os.getenv("ENVIRONMENT", "development").lower() == "production"
