"""Schemas for AI traffic data storage."""

from .events import (
    AI_TRAFFIC_COLUMNS,
    AI_TRAFFIC_INDEXES,
    VisitEvent,
    from_utc_timestamp,
    get_create_ai_traffic_sql,
    to_utc_timestamp,
)
from .sites import (
    USERS_COLUMNS,
    WEBSITES_COLUMNS,
    WEBSITES_INDEXES,
    Site,
    User,
    get_create_users_sql,
    get_create_websites_sql,
)

__all__ = [
    # Visit events
    "AI_TRAFFIC_COLUMNS",
    "AI_TRAFFIC_INDEXES",
    "VisitEvent",
    "get_create_ai_traffic_sql",
    "to_utc_timestamp",
    "from_utc_timestamp",
    # Users and websites
    "USERS_COLUMNS",
    "WEBSITES_COLUMNS",
    "WEBSITES_INDEXES",
    "Site",
    "User",
    "get_create_users_sql",
    "get_create_websites_sql",
]
