#!/usr/bin/env python3
"""
Generate realistic sample AI traffic for a website.

Synthesizes page loads from AI assistants, AI crawlers, search engines and
direct visits, classifies each one with the real classifier and writes the
resulting events.

Usage:
    # Print statistics for 7 days of sample traffic (default)
    python scripts/generate_sample_data.py

    # Register a demo website and insert 30 days of traffic into SQLite
    python scripts/generate_sample_data.py --output sqlite --days 30

    # Add traffic to an existing website
    python scripts/generate_sample_data.py --output sqlite --site-id <id>

    # Output as JSON for inspection
    python scripts/generate_sample_data.py --output json --limit 20
"""

import argparse
import json
import logging
import random
import sys
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ai_traffic_analytics.classifier import classify_visit
from ai_traffic_analytics.logging_config import setup_logging
from ai_traffic_analytics.registry import SiteRegistry
from ai_traffic_analytics.schemas import VisitEvent
from ai_traffic_analytics.storage import get_backend

logger = logging.getLogger(__name__)

BROWSER_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


# =============================================================================
# VISITOR PROFILES
# =============================================================================


@dataclass
class VisitorProfile:
    """How one kind of visitor arrives at the site."""

    name: str
    referrers: list[str]
    user_agent: str
    # Relative share of all visits
    weight: float
    query: Optional[dict[str, str]] = None


VISITOR_PROFILES = [
    VisitorProfile("chatgpt", ["https://chatgpt.com/", "https://chat.openai.com/c/abc"], BROWSER_UA, 30),
    VisitorProfile("perplexity", ["https://www.perplexity.ai/search?q=pricing"], BROWSER_UA, 15),
    VisitorProfile("claude", ["https://claude.ai/chat/123"], BROWSER_UA, 8),
    VisitorProfile("copilot", ["https://copilot.microsoft.com/"], BROWSER_UA, 6),
    VisitorProfile("gemini", ["https://gemini.google.com/app"], BROWSER_UA, 5),
    VisitorProfile("ai-overview", ["https://www.google.com/search?q=x&udm=50"], BROWSER_UA, 4),
    VisitorProfile("utm", [""], BROWSER_UA, 4, query={"utm_source": "chatgpt.com"}),
    VisitorProfile("gptbot", [""], "Mozilla/5.0 AppleWebKit/537.36 (compatible; GPTBot/1.2; +https://openai.com/gptbot)", 12),
    VisitorProfile("claudebot", [""], "Mozilla/5.0 (compatible; ClaudeBot/1.0; +claudebot@anthropic.com)", 6),
    VisitorProfile("perplexitybot", [""], "Mozilla/5.0 (compatible; PerplexityBot/1.0)", 4),
    VisitorProfile("search", ["https://www.google.com/", "https://duckduckgo.com/"], BROWSER_UA, 10),
    VisitorProfile("direct", [""], BROWSER_UA, 8),
]

PAGE_PATHS = [
    "/",
    "/pricing",
    "/blog/ai-search-visibility",
    "/blog/llm-crawlers-explained",
    "/docs/getting-started",
    "/docs/api",
    "/about",
    "/contact",
]

LANGUAGES = ["en-US", "en-GB", "de-DE", "fr-FR", "es-ES"]
SCREENS = [(1920, 1080), (1440, 900), (390, 844), (1280, 720)]


def generate_events(
    site_id: str,
    days: int,
    daily_visits: int,
    end: Optional[datetime] = None,
) -> list[VisitEvent]:
    """Generate classified visit events spread over `days` days."""
    end = end or datetime.now(timezone.utc)
    start = end - timedelta(days=days)
    weights = [profile.weight for profile in VISITOR_PROFILES]

    events = []
    for day in range(days):
        day_start = start + timedelta(days=day)
        # Slow growth over the period plus noise
        volume = max(1, int(daily_visits * (0.8 + 0.4 * day / max(days, 1)) * random.uniform(0.85, 1.15)))

        for _ in range(volume):
            profile = random.choices(VISITOR_PROFILES, weights=weights)[0]
            referrer = random.choice(profile.referrers)
            classification = classify_visit(referrer, profile.user_agent, profile.query)
            is_crawler = classification.visit_type == "crawler"
            width, height = random.choice(SCREENS)

            events.append(
                VisitEvent(
                    site_id=site_id,
                    source=classification.source,
                    visit_type=classification.visit_type,
                    page_path=random.choice(PAGE_PATHS),
                    observed_at=day_start + timedelta(seconds=random.randint(0, 86399)),
                    referrer=referrer,
                    user_agent=profile.user_agent,
                    language="" if is_crawler else random.choice(LANGUAGES),
                    screen_width=None if is_crawler else width,
                    screen_height=None if is_crawler else height,
                )
            )

    events.sort(key=lambda event: event.observed_at)
    return events


def print_stats(events: list[VisitEvent]) -> None:
    print()
    print("📊 Sample Traffic")
    print("=" * 50)
    print(f"  Events: {len(events)}")
    if events:
        print(f"  From: {events[0].observed_at.isoformat()}")
        print(f"  To:   {events[-1].observed_at.isoformat()}")
    print()
    print("  By source:")
    for source, count in Counter(e.source for e in events).most_common():
        print(f"    {source:<20} {count:>6}")
    print()
    print("  By visit type:")
    for visit_type, count in Counter(e.visit_type for e in events).most_common():
        print(f"    {visit_type:<20} {count:>6}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Generate realistic sample AI traffic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print statistics only
  python scripts/generate_sample_data.py

  # Insert into SQLite under a new demo website
  python scripts/generate_sample_data.py --output sqlite --domain demo.example.com

  # Reproducible generation with seed
  python scripts/generate_sample_data.py --seed 42
        """,
    )
    parser.add_argument("--days", type=int, default=7, help="Number of days (default: 7)")
    parser.add_argument(
        "--daily-visits",
        type=int,
        default=200,
        help="Average visits per day (default: 200)",
    )
    parser.add_argument(
        "--output",
        choices=["stats", "json", "sqlite"],
        default="stats",
        help="Output format (default: stats)",
    )
    parser.add_argument("--limit", type=int, help="Limit events printed with --output json")
    parser.add_argument("--db-path", type=Path, help="Path to SQLite database")
    parser.add_argument("--site-id", help="Existing website id (sqlite output)")
    parser.add_argument("--user-id", default="demo-user", help="Owner of the demo website")
    parser.add_argument("--domain", default="demo.example.com", help="Domain of the demo website")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.seed is not None:
        random.seed(args.seed)

    if args.output != "sqlite":
        events = generate_events(args.site_id or "sample-site", args.days, args.daily_visits)
        if args.output == "json":
            rows = [event.to_dict() for event in events[: args.limit or len(events)]]
            print(json.dumps(rows, indent=2))
        else:
            print_stats(events)
        return 0

    kwargs = {}
    if args.db_path:
        kwargs["db_path"] = args.db_path
    backend = get_backend("sqlite", **kwargs)
    backend.initialize()

    try:
        registry = SiteRegistry(backend)
        if args.site_id:
            site = registry.get_site(args.site_id)
        else:
            site = registry.create_site(args.user_id, args.domain, name="Demo site")

        events = generate_events(site.id, args.days, args.daily_visits)
        inserted = backend.insert_visit_events([event.to_record() for event in events])

        logger.info(f"Inserted {inserted} events for {site.domain}")
        print(f"✅ Inserted {inserted} events for website {site.id} ({site.domain})")
        return 0

    finally:
        backend.close()


if __name__ == "__main__":
    sys.exit(main())
