#!/usr/bin/env python3
"""
Classify a single visit from the command line.

Usage:
    python scripts/classify_visit.py --referrer https://chatgpt.com/ --user-agent "Mozilla/5.0"
    python scripts/classify_visit.py --user-agent "Mozilla/5.0 (compatible; GPTBot/1.0)"
    python scripts/classify_visit.py --page-url "https://example.com/?utm_source=perplexity"
"""

import argparse
import json
import sys
from pathlib import Path
from urllib.parse import urlsplit

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ai_traffic_analytics.classifier import classify_crawler, classify_visit, load_rule_set
from ai_traffic_analytics.utils import parse_query_string


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Classify a visit by AI traffic source")
    parser.add_argument("--referrer", default="", help="Document referrer")
    parser.add_argument("--user-agent", default="", help="User-Agent header")
    parser.add_argument("--page-url", help="Landing page URL (query parameters are used)")
    parser.add_argument("--rules", help="YAML rule table replacing the built-in rules")
    parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args()

    rules = load_rule_set(args.rules)
    query_params = parse_query_string(urlsplit(args.page_url).query) if args.page_url else {}

    result = classify_visit(args.referrer, args.user_agent, query_params, rules=rules)
    output = result.to_dict()
    output["rules_version"] = rules.version

    crawler = classify_crawler(args.user_agent, rules)
    if crawler is not None:
        output["crawler"] = crawler.to_dict()

    if args.json:
        print(json.dumps(output, indent=2))
    else:
        for key, value in output.items():
            print(f"{key}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
