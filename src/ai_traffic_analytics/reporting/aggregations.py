"""
Pure aggregations over visit events.

Every function takes the already-fetched events of one site and window and
returns derived views; nothing here touches storage.
"""

from collections import Counter
from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from ..config.constants import (
    RECENT_VISITS_LIMIT,
    TOP_PAGES_LIMIT,
    VISIT_TYPE_CRAWLER,
    VISIT_TYPE_DIRECT,
    VISIT_TYPE_REFERRAL,
    VISIT_TYPE_STANDARD,
)
from ..schemas.events import VisitEvent
from .time_windows import bucket_label


@dataclass(frozen=True)
class SourceCount:
    """Visits from one source and its share of the total."""

    source: str
    count: int
    percentage: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PageCount:
    """Visits to one page path and the source that sent most of them."""

    page_path: str
    count: int
    main_source: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TrendPoint:
    """Visit count of one time bucket."""

    bucket: str
    count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TrafficSummary:
    """Headline numbers for a site and window."""

    total: int
    referrals: int
    crawlers: int
    direct: int
    standard: int
    unique_pages: int
    unique_sources: int
    first_seen: Optional[datetime]
    last_seen: Optional[datetime]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["first_seen"] = self.first_seen.isoformat() if self.first_seen else None
        data["last_seen"] = self.last_seen.isoformat() if self.last_seen else None
        return data


def percentage(count: int, total: int) -> int:
    """
    Whole-number share of `count` in `total`, rounding halves up.

    Examples:
        >>> percentage(1, 3)
        33
        >>> percentage(1, 8)
        13
        >>> percentage(5, 0)
        0
    """
    if total <= 0:
        return 0
    share = Decimal(count * 100) / Decimal(total)
    return int(share.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def count_by_source(events: Iterable[VisitEvent]) -> list[SourceCount]:
    """
    Group events by source, most frequent first.

    Ties keep the order in which the sources were first seen.
    """
    counts = Counter(event.source for event in events)
    total = sum(counts.values())

    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        SourceCount(source=source, count=count, percentage=percentage(count, total))
        for source, count in ranked
    ]


def top_pages(
    events: Iterable[VisitEvent],
    limit: int = TOP_PAGES_LIMIT,
) -> list[PageCount]:
    """
    Most visited page paths.

    Args:
        events: Events to group
        limit: Maximum number of pages returned

    Returns:
        PageCount rows by count descending; each carries the page's most
        frequent source (ties go to the source seen first on that page)
    """
    per_page: dict[str, Counter] = {}
    for event in events:
        per_page.setdefault(event.page_path, Counter())[event.source] += 1

    pages = []
    for page_path, sources in per_page.items():
        main_source = max(sources.items(), key=lambda item: item[1])[0]
        pages.append(
            PageCount(
                page_path=page_path,
                count=sum(sources.values()),
                main_source=main_source,
            )
        )

    pages.sort(key=lambda page: page.count, reverse=True)
    return pages[:limit]


def trend(
    events: Iterable[VisitEvent],
    granularity: str,
    source: Optional[str] = None,
    page_path: Optional[str] = None,
) -> list[TrendPoint]:
    """
    Time-bucketed visit counts in ascending bucket order.

    Only non-empty buckets are returned. `source` and `page_path` restrict
    the events counted to an exact match.
    """
    buckets: Counter = Counter()
    for event in filter_events(events, source=source, page_path=page_path):
        buckets[bucket_label(event.observed_at, granularity)] += 1

    return [TrendPoint(bucket=label, count=count) for label, count in sorted(buckets.items())]


def filter_events(
    events: Iterable[VisitEvent],
    source: Optional[str] = None,
    page_path: Optional[str] = None,
) -> list[VisitEvent]:
    """Keep events matching the given source and/or page path."""
    return [
        event
        for event in events
        if (source is None or event.source == source)
        and (page_path is None or event.page_path == page_path)
    ]


def summarize(events: Sequence[VisitEvent]) -> TrafficSummary:
    """Totals by visit type, distinct pages and sources, first and last seen."""
    by_type = Counter(event.visit_type for event in events)
    timestamps = [event.observed_at for event in events]

    return TrafficSummary(
        total=len(events),
        referrals=by_type[VISIT_TYPE_REFERRAL],
        crawlers=by_type[VISIT_TYPE_CRAWLER],
        direct=by_type[VISIT_TYPE_DIRECT],
        standard=by_type[VISIT_TYPE_STANDARD],
        unique_pages=len({event.page_path for event in events}),
        unique_sources=len({event.source for event in events}),
        first_seen=min(timestamps) if timestamps else None,
        last_seen=max(timestamps) if timestamps else None,
    )


def growth_rate(points: Sequence[TrendPoint]) -> Optional[float]:
    """
    Percent change from the first to the last bucket, to one decimal.

    Returns None (not applicable) for fewer than two buckets or a zero
    first bucket.

    Examples:
        >>> growth_rate([TrendPoint("2025-06-01", 4), TrendPoint("2025-06-02", 6)])
        50.0
        >>> growth_rate([TrendPoint("2025-06-01", 4)]) is None
        True
    """
    if len(points) < 2 or points[0].count == 0:
        return None
    first, last = points[0].count, points[-1].count
    return round((last - first) / first * 100, 1)


def peak_bucket(points: Sequence[TrendPoint]) -> Optional[TrendPoint]:
    """Busiest bucket; on a tie the later bucket wins."""
    peak = None
    for point in points:
        if peak is None or point.count >= peak.count:
            peak = point
    return peak


def average_per_bucket(points: Sequence[TrendPoint]) -> int:
    """Mean visits per non-empty bucket, rounded half up."""
    if not points:
        return 0
    mean = Decimal(sum(point.count for point in points)) / Decimal(len(points))
    return int(mean.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def recent_visits(
    events: Iterable[VisitEvent],
    limit: int = RECENT_VISITS_LIMIT,
) -> list[VisitEvent]:
    """Latest events first."""
    ordered = sorted(
        events,
        key=lambda event: (event.observed_at, event.id or 0),
        reverse=True,
    )
    return ordered[:limit]
