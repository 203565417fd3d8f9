"""
CLI Interface for Brand Tracker Analytics

Provides command-line access to brand dashboards and spike detection.
"""

import argparse
import json
import logging
import sys

from db.repository import BrandNotFoundError

from .aggregator import DashboardAggregator
from .spike import detect_spike


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def show_dashboard(args):
    """Print a brand's dashboard."""
    aggregator = DashboardAggregator()

    try:
        data = aggregator.get_dashboard_data(args.brand_id)
    except BrandNotFoundError as e:
        print(f"❌ {e}")
        return 1

    if args.json:
        print(json.dumps(data.to_dict(), indent=2, default=str))
        return 0

    summary = data.summary
    print(f"📊 Dashboard for {data.brand.display_name}")
    print(f"   Mentions: {summary.total_mentions}")
    print(f"   Positive: {summary.positive_percentage}%")
    print(f"   Breakdown: {summary.sentiment_breakdown}")
    print(f"   Trend: {summary.trend_direction}")
    print(f"   Top keywords: {', '.join(summary.top_keywords) or '-'}")
    if summary.has_spike:
        print(f"   🚨 Mention spike: +{data.spikes['mentions'].percentage}%")
    if summary.has_negative_spike:
        print(f"   🚨 Negative spike: +{data.spikes['negative'].percentage}%")

    for bucket in data.trend:
        print(f"   {bucket.date}: {bucket.mentions} (+{bucket.positive} / -{bucket.negative})")

    return 0


def check_spike(args):
    """Compare two counts with the spike rule."""
    result = detect_spike(args.current, args.previous)
    print(json.dumps(result.to_dict()))
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Brand Tracker Analytics - Dashboards and Spike Detection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m analytics dashboard 1
  python -m analytics dashboard 1 --json
  python -m analytics spike 130 100
        """
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    dashboard_parser = subparsers.add_parser('dashboard', help='Show a brand dashboard')
    dashboard_parser.add_argument('brand_id', type=int, help='Brand id')
    dashboard_parser.add_argument('--json', action='store_true', help='Print the raw dashboard as JSON')

    spike_parser = subparsers.add_parser('spike', help='Check two counts for a spike')
    spike_parser.add_argument('current', type=int, help='Count in the current window')
    spike_parser.add_argument('previous', type=int, help='Count in the previous window')

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    commands = {
        'dashboard': show_dashboard,
        'spike': check_spike,
    }
    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
