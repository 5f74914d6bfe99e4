"""
Pytest configuration and shared fixtures for unit tests.
"""

from datetime import datetime, timezone

import pytest

from ai_traffic_analytics.schemas import VisitEvent

BASE_TIME = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def build_event(
    source: str = "chatgpt",
    visit_type: str = "referral",
    page_path: str = "/",
    observed_at: datetime = BASE_TIME,
    site_id: str = "site-1",
    event_id: int | None = None,
) -> VisitEvent:
    """Create a VisitEvent with sensible defaults."""
    return VisitEvent(
        id=event_id,
        site_id=site_id,
        source=source,
        visit_type=visit_type,
        page_path=page_path,
        observed_at=observed_at,
    )


@pytest.fixture
def make_event():
    """Factory fixture for VisitEvent instances."""
    return build_event


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME
