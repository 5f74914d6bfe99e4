"""
Traffic report export.

Turns dashboard views into pandas DataFrames and writes them as CSV (raw
events) or a multi-sheet Excel workbook.
"""

import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from ..schemas.events import VisitEvent
from .dashboard import DashboardReport

logger = logging.getLogger(__name__)

EVENT_COLUMNS = [
    "id",
    "website_id",
    "timestamp",
    "source",
    "visit_type",
    "page_path",
    "referrer",
    "user_agent",
    "language",
    "screen_width",
    "screen_height",
]

# Excel column widths by header
_COLUMN_WIDTHS = {
    "user_agent": 60,
    "referrer": 50,
    "page_path": 40,
    "timestamp": 34,
}


def events_to_dataframe(events: Sequence[VisitEvent]) -> pd.DataFrame:
    """One row per event with the stored column names."""
    if not events:
        return pd.DataFrame(columns=EVENT_COLUMNS)
    return pd.DataFrame([event.to_dict() for event in events], columns=EVENT_COLUMNS)


def report_to_dataframes(report: DashboardReport) -> dict[str, pd.DataFrame]:
    """
    Sheet name to DataFrame for each dashboard view.

    Sheets:
        - Summary: headline numbers and trend metrics as metric/value pairs
        - By Source: visits per source with percentage share
        - Top Pages: most visited pages with their main source
        - Trend: visits per time bucket
        - Recent Visits: latest events
    """
    summary = report.summary.to_dict()
    summary.update(
        {
            "window": report.window,
            "growth_rate": report.trend.growth_rate,
            "peak_bucket": report.trend.peak.bucket if report.trend.peak else None,
            "peak_count": report.trend.peak.count if report.trend.peak else 0,
            "average_per_bucket": report.trend.average,
        }
    )

    return {
        "Summary": pd.DataFrame(
            {"metric": list(summary.keys()), "value": list(summary.values())}
        ),
        "By Source": pd.DataFrame(
            [row.to_dict() for row in report.by_source],
            columns=["source", "count", "percentage"],
        ),
        "Top Pages": pd.DataFrame(
            [row.to_dict() for row in report.top_pages],
            columns=["page_path", "count", "main_source"],
        ),
        "Trend": pd.DataFrame(
            [point.to_dict() for point in report.trend.points],
            columns=["bucket", "count"],
        ),
        "Recent Visits": events_to_dataframe(report.recent_visits),
    }


def export_events_to_csv(events: Sequence[VisitEvent], output_path: Path) -> int:
    """
    Export raw events to a CSV file.

    Returns:
        Number of events exported
    """
    if not events:
        logger.warning("No events found for the selected window")
        return 0

    df = events_to_dataframe(events)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    logger.info(f"Exported {len(df)} events to {output_path}")
    return len(df)


def export_report_to_excel(
    report: DashboardReport,
    output_path: Path,
    events: Sequence[VisitEvent] = (),
) -> int:
    """
    Export a dashboard report to an Excel workbook.

    Args:
        report: Dashboard views to write
        output_path: Destination .xlsx path
        events: Optional raw events written to an extra "Events" sheet

    Returns:
        Number of events covered by the report
    """
    sheets = report_to_dataframes(report)
    if events:
        sheets["Events"] = events_to_dataframe(events)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        for sheet_name, df in sheets.items():
            df.to_excel(writer, sheet_name=sheet_name, index=False)

        for worksheet in writer.sheets.values():
            for column_cells in worksheet.columns:
                header = column_cells[0].value
                col_letter = column_cells[0].column_letter
                worksheet.column_dimensions[col_letter].width = _COLUMN_WIDTHS.get(
                    header, max(12, len(str(header)) + 2)
                )

    logger.info(
        f"Exported dashboard for site {report.site_id} ({report.window}) "
        f"to {output_path}"
    )
    return report.summary.total
