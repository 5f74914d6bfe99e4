#!/usr/bin/env python3
"""
CLI script to print the AI traffic dashboard of one website.

Usage:
    # Full dashboard for the last 7 days
    python scripts/run_dashboard_queries.py --site-id <id>

    # Specific views for the last 30 days
    python scripts/run_dashboard_queries.py --site-id <id> --range 30d --view by_source --view trend
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ai_traffic_analytics.config.constants import DEFAULT_TIME_WINDOW, TIME_WINDOWS
from ai_traffic_analytics.logging_config import setup_logging
from ai_traffic_analytics.registry import SiteRegistry
from ai_traffic_analytics.reporting import TrafficDashboard
from ai_traffic_analytics.storage import get_backend

AVAILABLE_VIEWS = [
    "summary",
    "by_source",
    "top_pages",
    "trend",
    "recent_visits",
]


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Print AI traffic dashboard views for a website",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # All views, last 7 days
  python scripts/run_dashboard_queries.py --site-id 3f2a...

  # Trend only, last 24 hours, as JSON
  python scripts/run_dashboard_queries.py --site-id 3f2a... --range 24h --view trend --json
        """,
    )

    parser.add_argument(
        "--db-path",
        type=Path,
        help="Path to SQLite database (default: data/ai-traffic.db)",
    )
    parser.add_argument(
        "--site-id",
        required=True,
        help="Website id",
    )
    parser.add_argument(
        "--range",
        dest="window",
        choices=list(TIME_WINDOWS),
        default=DEFAULT_TIME_WINDOW,
        help=f"Time window (default: {DEFAULT_TIME_WINDOW})",
    )
    parser.add_argument(
        "--view",
        action="append",
        choices=AVAILABLE_VIEWS,
        help="View to print (can specify multiple; default: all)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    kwargs = {}
    if args.db_path:
        kwargs["db_path"] = args.db_path
    backend = get_backend("sqlite", **kwargs)
    backend.initialize()

    views = args.view or AVAILABLE_VIEWS

    try:
        site = SiteRegistry(backend).get_site(args.site_id)
        report = TrafficDashboard(backend=backend).get_dashboard(site.id, args.window)
        data = report.to_dict()
        results = {view: data[view] for view in views}

        if args.json:
            print(json.dumps(results, indent=2, default=str))
            return 0

        print()
        print("📊 AI Traffic Dashboard")
        print("=" * 50)
        print(f"  Website: {site.name or site.domain} ({site.id})")
        print(f"  Range: {args.window}")
        print()

        for view, result in results.items():
            print(f"\n📈 {view}")
            print("-" * 40)
            if view == "trend":
                for point in result["data"]:
                    print(f"  {point['bucket']}: {point['count']}")
                growth = result["growth_rate"]
                print(f"  Growth: {'N/A' if growth is None else f'{growth:+.1f}%'}")
                print(f"  Average per bucket: {result['average']}")
            elif isinstance(result, list):
                for row in result[:10]:
                    print(f"  {row}")
            else:
                for key, value in result.items():
                    print(f"  {key}: {value}")

        return 0

    finally:
        backend.close()


if __name__ == "__main__":
    sys.exit(main())
