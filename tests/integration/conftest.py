"""
Shared fixtures for integration tests.

Provides:
- Temporary SQLite database for isolated testing
- A registered website owned by a test user
- Sample visit event generator fixtures
"""

import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from ai_traffic_analytics.config import Settings
from ai_traffic_analytics.ingestion import TrackingIngestionService
from ai_traffic_analytics.registry import SiteRegistry
from ai_traffic_analytics.schemas import VisitEvent
from ai_traffic_analytics.storage import get_backend

# Fixed "now" so window boundaries are deterministic
NOW = datetime(2025, 6, 8, 12, 0, tzinfo=timezone.utc)

# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


def generate_sample_events(
    site_id: str,
    num_events: int = 100,
    days: int = 5,
    end: datetime = NOW,
    seed: int = 42,
) -> list[VisitEvent]:
    """
    Generate sample AI traffic events for testing.

    Args:
        site_id: Website the events belong to
        num_events: Number of events to generate
        days: Events are spread over the `days` days before `end`
        end: Latest possible event time (exclusive)
        seed: Random seed for reproducibility (default: 42)
    """
    rng = random.Random(seed)

    # (source, visit_type) profiles
    profiles = [
        ("chatgpt", "referral"),
        ("chatgpt", "referral"),
        ("perplexity", "referral"),
        ("claude", "referral"),
        ("gptbot", "crawler"),
        ("direct", "direct"),
    ]
    pages = ["/", "/pricing", "/blog/ai-search", "/docs/api"]

    events = []
    for _ in range(num_events):
        source, visit_type = rng.choice(profiles)
        offset = timedelta(seconds=rng.randint(1, days * 86400 - 1))
        events.append(
            VisitEvent(
                site_id=site_id,
                source=source,
                visit_type=visit_type,
                page_path=rng.choice(pages),
                observed_at=end - offset,
            )
        )
    return events


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test_ai_traffic.db"


@pytest.fixture
def sqlite_backend(temp_db_path: Path):
    """
    Create an initialized SQLite backend with temporary database.

    Automatically cleans up after test.
    """
    backend = get_backend("sqlite", db_path=temp_db_path)
    backend.initialize()
    yield backend
    backend.close()


@pytest.fixture
def test_settings(temp_db_path: Path) -> Settings:
    """Settings pointing at the temporary database."""
    return Settings(sqlite_db_path=str(temp_db_path))


# =============================================================================
# REGISTRY AND INGESTION FIXTURES
# =============================================================================


@pytest.fixture
def registry(sqlite_backend) -> SiteRegistry:
    return SiteRegistry(sqlite_backend)


@pytest.fixture
def site(registry):
    """A registered website owned by user-1."""
    return registry.create_site("user-1", "https://www.Example.com/", name="Example")


@pytest.fixture
def ingestion_service(sqlite_backend, test_settings) -> TrackingIngestionService:
    return TrackingIngestionService(sqlite_backend, settings=test_settings)


@pytest.fixture
def sample_events(site) -> list[VisitEvent]:
    """100 sample events over the 5 days before NOW."""
    return generate_sample_events(site.id)


@pytest.fixture
def backend_with_events(sqlite_backend, sample_events):
    """
    SQLite backend pre-populated with sample events.

    Returns tuple of (backend, events_inserted).
    """
    rows = sqlite_backend.insert_visit_events([e.to_record() for e in sample_events])
    return sqlite_backend, rows


@pytest.fixture
def now() -> datetime:
    return NOW
