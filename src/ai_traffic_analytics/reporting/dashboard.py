"""
Traffic dashboard queries.

Fetches one site's events for a window in a single bulk read and computes
every view from that snapshot. Storage errors propagate; a partial
dashboard is never returned.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..config.constants import DEFAULT_TIME_WINDOW, RECENT_VISITS_LIMIT, TOP_PAGES_LIMIT
from ..schemas.events import VisitEvent
from ..storage import StorageBackend, get_backend
from .aggregations import (
    PageCount,
    SourceCount,
    TrafficSummary,
    TrendPoint,
    average_per_bucket,
    count_by_source,
    growth_rate,
    peak_bucket,
    recent_visits,
    summarize,
    top_pages,
    trend,
)
from .time_windows import granularity_for, resolve_window_start

logger = logging.getLogger(__name__)


@dataclass
class TrendReport:
    """Trend series of a window with its derived metrics."""

    window: str
    granularity: str
    points: list[TrendPoint]
    growth_rate: Optional[float]
    peak: Optional[TrendPoint]
    average: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "window": self.window,
            "granularity": self.granularity,
            "data": [point.to_dict() for point in self.points],
            "growth_rate": self.growth_rate,
            "peak": self.peak.to_dict() if self.peak else None,
            "average": self.average,
        }


@dataclass
class DashboardReport:
    """All dashboard views of one site and window."""

    site_id: str
    window: str
    generated_at: datetime
    summary: TrafficSummary
    by_source: list[SourceCount]
    top_pages: list[PageCount]
    trend: TrendReport
    recent_visits: list[VisitEvent]

    def to_dict(self) -> dict[str, Any]:
        return {
            "site_id": self.site_id,
            "window": self.window,
            "generated_at": self.generated_at.isoformat(),
            "summary": self.summary.to_dict(),
            "by_source": [row.to_dict() for row in self.by_source],
            "top_pages": [row.to_dict() for row in self.top_pages],
            "trend": self.trend.to_dict(),
            "recent_visits": [event.to_dict() for event in self.recent_visits],
        }


class TrafficDashboard:
    """
    Dashboard queries over the ai_traffic table.

    Works with any StorageBackend; aggregation happens in Python on the
    fetched rows.
    """

    def __init__(
        self,
        backend: Optional[StorageBackend] = None,
        db_path: Optional[Path] = None,
    ):
        """
        Initialize dashboard queries.

        Args:
            backend: Pre-initialized StorageBackend (optional)
            db_path: Path to SQLite database when creating a backend
        """
        if backend:
            self._backend = backend
            self._owns_backend = False
        else:
            kwargs = {"db_path": db_path} if db_path else {}
            self._backend = get_backend("sqlite", **kwargs)
            self._owns_backend = True

        self._initialized = False

    def initialize(self) -> None:
        """Initialize the backend."""
        if not self._initialized:
            self._backend.initialize()
            self._initialized = True

    def close(self) -> None:
        """Close the backend connection if this instance created it."""
        if self._owns_backend:
            self._backend.close()

    def __enter__(self) -> "TrafficDashboard":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def fetch_events(
        self,
        site_id: str,
        window: str = DEFAULT_TIME_WINDOW,
        now: Optional[datetime] = None,
    ) -> list[VisitEvent]:
        """
        Events of a site observed within a window, oldest first.

        Raises:
            ValueError: Unknown window
            StorageError: The fetch failed
        """
        start = resolve_window_start(window, now)
        rows = self._backend.fetch_visit_events(site_id, start)
        logger.debug(f"Fetched {len(rows)} events for site {site_id} ({window})")
        return [VisitEvent.from_row(row) for row in rows]

    def get_by_source(
        self,
        site_id: str,
        window: str = DEFAULT_TIME_WINDOW,
        now: Optional[datetime] = None,
    ) -> list[SourceCount]:
        return count_by_source(self.fetch_events(site_id, window, now))

    def get_top_pages(
        self,
        site_id: str,
        window: str = DEFAULT_TIME_WINDOW,
        limit: int = TOP_PAGES_LIMIT,
        now: Optional[datetime] = None,
    ) -> list[PageCount]:
        return top_pages(self.fetch_events(site_id, window, now), limit=limit)

    def get_summary(
        self,
        site_id: str,
        window: str = DEFAULT_TIME_WINDOW,
        now: Optional[datetime] = None,
    ) -> TrafficSummary:
        return summarize(self.fetch_events(site_id, window, now))

    def get_trend(
        self,
        site_id: str,
        window: str = DEFAULT_TIME_WINDOW,
        source: Optional[str] = None,
        page_path: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TrendReport:
        """
        Trend series of a window, optionally filtered to one source or page.

        The bucket size follows the window: hourly for 24h, daily for 7d/30d,
        monthly for 90d/all.
        """
        events = self.fetch_events(site_id, window, now)
        return _build_trend_report(window, events, source, page_path)

    def get_dashboard(
        self,
        site_id: str,
        window: str = DEFAULT_TIME_WINDOW,
        now: Optional[datetime] = None,
        top_pages_limit: int = TOP_PAGES_LIMIT,
        recent_limit: int = RECENT_VISITS_LIMIT,
    ) -> DashboardReport:
        """
        All views computed from a single fetch.

        Raises:
            ValueError: Unknown window
            StorageError: The fetch failed
        """
        now = now or datetime.now(timezone.utc)
        events = self.fetch_events(site_id, window, now)

        report = DashboardReport(
            site_id=site_id,
            window=window,
            generated_at=now,
            summary=summarize(events),
            by_source=count_by_source(events),
            top_pages=top_pages(events, limit=top_pages_limit),
            trend=_build_trend_report(window, events),
            recent_visits=recent_visits(events, limit=recent_limit),
        )
        logger.info(
            f"Built dashboard for site {site_id} ({window}): "
            f"{report.summary.total} events",
            extra={"site_id": site_id},
        )
        return report


def _build_trend_report(
    window: str,
    events: list[VisitEvent],
    source: Optional[str] = None,
    page_path: Optional[str] = None,
) -> TrendReport:
    granularity = granularity_for(window)
    points = trend(events, granularity, source=source, page_path=page_path)
    return TrendReport(
        window=window,
        granularity=granularity,
        points=points,
        growth_rate=growth_rate(points),
        peak=peak_bucket(points),
        average=average_per_bucket(points),
    )
