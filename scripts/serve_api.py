#!/usr/bin/env python3
"""
Run the AI traffic analytics API with uvicorn.

Usage:
    python scripts/serve_api.py --port 8000
    python scripts/serve_api.py --db-path data/ai-traffic.db --json-logs
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import uvicorn

from ai_traffic_analytics.config.settings import (
    DEFAULT_CONFIG_PATH,
    clear_settings_cache,
    get_settings,
)
from ai_traffic_analytics.config.sops_loader import check_sops_installed
from ai_traffic_analytics.logging_config import setup_logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Serve the AI traffic analytics API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument(
        "--db-path",
        type=Path,
        help="Path to SQLite database (overrides SQLITE_DB_PATH)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Log as JSON lines")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.db_path:
        os.environ["SQLITE_DB_PATH"] = str(args.db_path)
        clear_settings_cache()

    if DEFAULT_CONFIG_PATH.exists() and not check_sops_installed():
        print(
            f"⚠️  {DEFAULT_CONFIG_PATH} found but sops is not installed; "
            "using environment variables",
            file=sys.stderr,
        )

    settings = get_settings()
    errors = settings.validate()
    if errors:
        for error in errors:
            print(f"❌ {error}", file=sys.stderr)
        return 1

    level = logging.DEBUG if args.verbose else settings.log_level
    setup_logging(level=level, json_format=args.json_logs)

    uvicorn.run(
        "ai_traffic_analytics.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
