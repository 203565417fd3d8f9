"""
CLI Entry Point for Brand Mention Collection

Provides 'python -m scraper' commands to fetch mentions, start tracking a
brand and run one-off or periodic-style scrapes.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict

from db.init_db import create_tables
from db.repository import BrandExistsError, BrandNotFoundError

from .aggregator import fetch_all_mentions
from .persistence import MentionIngestor


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging for the scraper application.

    Args:
        verbose: Enable verbose logging if True
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def print_result(result: Dict[str, Any]) -> None:
    print(json.dumps(result, indent=2, default=str))


def run_fetch(args) -> int:
    """Fetch and enrich mentions without storing them."""
    mentions = fetch_all_mentions(args.brand)
    for mention in mentions[: args.limit]:
        print(
            f"[{mention.source.value}] {mention.published_at:%Y-%m-%d %H:%M} "
            f"{mention.sentiment.value:<8} {mention.category.value:<9} {mention.title}"
        )
    print(f"{len(mentions)} mentions")
    return 0


def run_add_brand(args) -> int:
    try:
        print_result(MentionIngestor().create_brand(args.name))
    except (ValueError, BrandExistsError) as e:
        print(f"❌ {e}")
        return 1
    return 0


def run_scrape(args) -> int:
    try:
        print_result(MentionIngestor().scrape_brand(args.brand_id))
    except BrandNotFoundError as e:
        print(f"❌ {e}")
        return 1
    return 0


def run_scrape_all(args) -> int:
    result = MentionIngestor().scrape_active_brands()
    print_result(result)
    return 0 if result["success"] else 1


def run_init_db(args) -> int:
    create_tables()
    return 0


def main() -> int:
    """Main entry point for the scraper CLI."""
    parser = argparse.ArgumentParser(
        description="Brand Tracker - mention collection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scraper init-db
  python -m scraper fetch "Acme"
  python -m scraper add-brand "Acme"
  python -m scraper scrape 1
  python -m scraper scrape-all
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    fetch_parser = subparsers.add_parser("fetch", help="Fetch mentions without storing them")
    fetch_parser.add_argument("brand", help="Brand name to search for")
    fetch_parser.add_argument("--limit", type=int, default=20, help="Mentions to print")

    add_parser = subparsers.add_parser("add-brand", help="Start tracking a brand")
    add_parser.add_argument("name", help="Brand name")

    scrape_parser = subparsers.add_parser("scrape", help="Re-scrape one brand")
    scrape_parser.add_argument("brand_id", type=int, help="Brand id")

    subparsers.add_parser("scrape-all", help="Scrape every active brand once")
    subparsers.add_parser("init-db", help="Create the database tables")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    commands = {
        "fetch": run_fetch,
        "add-brand": run_add_brand,
        "scrape": run_scrape,
        "scrape-all": run_scrape_all,
        "init-db": run_init_db,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
