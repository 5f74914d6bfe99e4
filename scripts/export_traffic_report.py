#!/usr/bin/env python3
"""
Export AI traffic of a website to CSV or Excel.

Usage:
    # Raw events of the last 30 days as CSV
    python scripts/export_traffic_report.py --site-id <id> --range 30d --format csv

    # Dashboard workbook with all views (default)
    python scripts/export_traffic_report.py --site-id <id> --output reports/traffic.xlsx
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ai_traffic_analytics.config.constants import DEFAULT_TIME_WINDOW, TIME_WINDOWS
from ai_traffic_analytics.ingestion import NotFoundError
from ai_traffic_analytics.logging_config import setup_logging
from ai_traffic_analytics.registry import SiteRegistry
from ai_traffic_analytics.reporting import (
    TrafficDashboard,
    export_events_to_csv,
    export_report_to_excel,
)
from ai_traffic_analytics.storage import get_backend

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Export AI traffic reports to CSV or Excel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Excel workbook (Summary, By Source, Top Pages, Trend, Recent Visits, Events)
  python scripts/export_traffic_report.py --site-id 3f2a...

  # CSV of raw events
  python scripts/export_traffic_report.py --site-id 3f2a... --format csv --range all
        """,
    )

    parser.add_argument(
        "--db-path",
        type=Path,
        help="Path to SQLite database (default: data/ai-traffic.db)",
    )
    parser.add_argument("--site-id", required=True, help="Website id")
    parser.add_argument(
        "--range",
        dest="window",
        choices=list(TIME_WINDOWS),
        default=DEFAULT_TIME_WINDOW,
        help=f"Time window (default: {DEFAULT_TIME_WINDOW})",
    )
    parser.add_argument(
        "--format",
        choices=["csv", "excel"],
        default="excel",
        help="Output format (default: excel)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output file path (default: reports/ai_traffic_<site>_<range>_<timestamp>.<ext>)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    extension = "csv" if args.format == "csv" else "xlsx"
    output_path = args.output or Path("reports") / (
        f"ai_traffic_{args.site_id[:8]}_{args.window}_"
        f"{datetime.now().strftime('%Y%m%d_%H%M%S')}.{extension}"
    )

    kwargs = {}
    if args.db_path:
        kwargs["db_path"] = args.db_path
    backend = get_backend("sqlite", **kwargs)
    backend.initialize()

    try:
        SiteRegistry(backend).get_site(args.site_id)
        dashboard = TrafficDashboard(backend=backend)

        if args.format == "csv":
            events = dashboard.fetch_events(args.site_id, args.window)
            count = export_events_to_csv(events, output_path)
        else:
            events = dashboard.fetch_events(args.site_id, args.window)
            report = dashboard.get_dashboard(args.site_id, args.window)
            count = export_report_to_excel(report, output_path, events=events)

        if count == 0:
            print("⚠️  No events found for the selected range")
            return 0

        print(f"✅ Exported {count} events to {output_path}")
        return 0

    except NotFoundError as e:
        logger.error(str(e))
        return 1

    finally:
        backend.close()


if __name__ == "__main__":
    sys.exit(main())
