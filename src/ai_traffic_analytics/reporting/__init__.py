"""
Reporting module for AI traffic dashboards.

Provides:
- Pure aggregations (by source, top pages, trend, summary)
- Time window resolution and trend bucketing
- TrafficDashboard for backend-backed dashboard queries
- CSV and Excel export
"""

from .aggregations import (
    PageCount,
    SourceCount,
    TrafficSummary,
    TrendPoint,
    average_per_bucket,
    count_by_source,
    filter_events,
    growth_rate,
    peak_bucket,
    percentage,
    recent_visits,
    summarize,
    top_pages,
    trend,
)
from .dashboard import DashboardReport, TrafficDashboard, TrendReport
from .export import (
    EVENT_COLUMNS,
    events_to_dataframe,
    export_events_to_csv,
    export_report_to_excel,
    report_to_dataframes,
)
from .time_windows import (
    bucket_label,
    granularity_for,
    resolve_window_start,
    validate_window,
)

__all__ = [
    # Aggregations
    "SourceCount",
    "PageCount",
    "TrendPoint",
    "TrafficSummary",
    "count_by_source",
    "top_pages",
    "trend",
    "filter_events",
    "summarize",
    "percentage",
    "growth_rate",
    "peak_bucket",
    "average_per_bucket",
    "recent_visits",
    # Time windows
    "resolve_window_start",
    "validate_window",
    "granularity_for",
    "bucket_label",
    # Dashboard
    "TrafficDashboard",
    "DashboardReport",
    "TrendReport",
    # Export
    "EVENT_COLUMNS",
    "events_to_dataframe",
    "report_to_dataframes",
    "export_events_to_csv",
    "export_report_to_excel",
]
