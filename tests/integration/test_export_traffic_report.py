"""
Integration tests for traffic report export.

Tests CSV export of raw events and the multi-sheet Excel workbook.
"""

import pandas as pd
import pytest

from ai_traffic_analytics.reporting import (
    EVENT_COLUMNS,
    TrafficDashboard,
    export_events_to_csv,
    export_report_to_excel,
    report_to_dataframes,
)


@pytest.fixture
def dashboard(backend_with_events):
    backend, _ = backend_with_events
    with TrafficDashboard(backend=backend) as dash:
        yield dash


class TestCsvExport:
    """Tests for export_events_to_csv."""

    def test_writes_all_events(self, dashboard, site, now, tmp_path):
        events = dashboard.fetch_events(site.id, "7d", now)
        output = tmp_path / "out" / "events.csv"

        count = export_events_to_csv(events, output)

        df = pd.read_csv(output)
        assert count == len(events)
        assert len(df) == len(events)
        assert list(df.columns) == EVENT_COLUMNS

    def test_empty_events(self, tmp_path):
        output = tmp_path / "events.csv"

        assert export_events_to_csv([], output) == 0
        assert not output.exists()


class TestExcelExport:
    """Tests for export_report_to_excel."""

    def test_sheets(self, dashboard, site, now, tmp_path):
        report = dashboard.get_dashboard(site.id, "7d", now=now)
        output = tmp_path / "report.xlsx"

        total = export_report_to_excel(report, output)

        sheets = pd.read_excel(output, sheet_name=None)
        assert total == report.summary.total
        assert set(sheets) == {"Summary", "By Source", "Top Pages", "Trend", "Recent Visits"}
        assert len(sheets["By Source"]) == len(report.by_source)

    def test_events_sheet(self, dashboard, site, now, tmp_path):
        report = dashboard.get_dashboard(site.id, "7d", now=now)
        events = dashboard.fetch_events(site.id, "7d", now)
        output = tmp_path / "report.xlsx"

        export_report_to_excel(report, output, events=events)

        sheets = pd.read_excel(output, sheet_name=None)
        assert len(sheets["Events"]) == len(events)


class TestReportDataFrames:
    """Tests for report_to_dataframes."""

    def test_summary_metrics(self, dashboard, site, now):
        report = dashboard.get_dashboard(site.id, "7d", now=now)

        summary = report_to_dataframes(report)["Summary"].set_index("metric")["value"]

        assert summary["total"] == report.summary.total
        assert summary["window"] == "7d"
