"""
Visit event schema.

One append-only row per tracked pageview or crawler hit. Column names match
the hosted table the dashboard was first built on (snake_case, `timestamp`).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from ..config.constants import TABLE_AI_TRAFFIC

AI_TRAFFIC_COLUMNS = {
    "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
    "website_id": "TEXT NOT NULL REFERENCES websites(id)",
    "source": "TEXT NOT NULL",
    "visit_type": "TEXT NOT NULL",
    "page_path": "TEXT NOT NULL",
    "referrer": "TEXT NOT NULL DEFAULT ''",
    "user_agent": "TEXT NOT NULL DEFAULT ''",
    "language": "TEXT NOT NULL DEFAULT ''",
    "screen_width": "INTEGER",
    "screen_height": "INTEGER",
    # UTC ISO-8601 with microseconds, so text order equals time order
    "timestamp": "TEXT NOT NULL",
    "_ingested_at": "TEXT NOT NULL",
}

AI_TRAFFIC_INDEXES = [
    f"CREATE INDEX IF NOT EXISTS idx_traffic_site_time "
    f"ON {TABLE_AI_TRAFFIC}(website_id, timestamp)",
    f"CREATE INDEX IF NOT EXISTS idx_traffic_source ON {TABLE_AI_TRAFFIC}(source)",
]


def get_create_ai_traffic_sql() -> str:
    """Get SQL to create the ai_traffic table."""
    columns = ",\n    ".join(
        f"{name} {dtype}" for name, dtype in AI_TRAFFIC_COLUMNS.items()
    )
    return f"CREATE TABLE IF NOT EXISTS {TABLE_AI_TRAFFIC} (\n    {columns}\n)"


def to_utc_timestamp(value: datetime) -> str:
    """Format a datetime as the stored timestamp string (naive means UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_utc_timestamp(value: str) -> datetime:
    """Parse a stored timestamp string back into an aware datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class VisitEvent:
    """A recorded pageview or crawl hit attributed (or not) to an AI platform."""

    site_id: str
    source: str
    visit_type: str
    page_path: str
    observed_at: datetime
    referrer: str = ""
    user_agent: str = ""
    language: str = ""
    screen_width: Optional[int] = None
    screen_height: Optional[int] = None
    id: Optional[int] = None

    def to_record(self) -> dict[str, Any]:
        """Row dictionary for insertion into the ai_traffic table."""
        return {
            "website_id": self.site_id,
            "source": self.source,
            "visit_type": self.visit_type,
            "page_path": self.page_path,
            "referrer": self.referrer,
            "user_agent": self.user_agent,
            "language": self.language,
            "screen_width": self.screen_width,
            "screen_height": self.screen_height,
            "timestamp": to_utc_timestamp(self.observed_at),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        record = self.to_record()
        record["id"] = self.id
        return record

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "VisitEvent":
        """Create from an ai_traffic row."""
        return cls(
            id=row.get("id"),
            site_id=row["website_id"],
            source=row["source"],
            visit_type=row["visit_type"],
            page_path=row["page_path"],
            observed_at=from_utc_timestamp(row["timestamp"]),
            referrer=row.get("referrer") or "",
            user_agent=row.get("user_agent") or "",
            language=row.get("language") or "",
            screen_width=row.get("screen_width"),
            screen_height=row.get("screen_height"),
        )
