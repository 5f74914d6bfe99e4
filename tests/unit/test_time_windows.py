"""
Unit tests for dashboard time windows and trend buckets.
"""

from datetime import datetime, timedelta, timezone

import pytest

from ai_traffic_analytics.config.constants import EPOCH_FLOOR
from ai_traffic_analytics.reporting.time_windows import (
    bucket_label,
    granularity_for,
    resolve_window_start,
    validate_window,
)

NOW = datetime(2025, 6, 8, 15, 30, tzinfo=timezone.utc)


class TestValidateWindow:
    """Tests for validate_window function."""

    @pytest.mark.parametrize("window", ["24h", "7d", "30d", "90d", "all"])
    def test_valid_windows(self, window):
        assert validate_window(window) == window

    @pytest.mark.parametrize("window", ["1y", "", "7D", "week"])
    def test_invalid_windows(self, window):
        with pytest.raises(ValueError, match="Unknown time window"):
            validate_window(window)


class TestResolveWindowStart:
    """Tests for resolve_window_start function."""

    def test_24h(self):
        assert resolve_window_start("24h", NOW) == NOW - timedelta(hours=24)

    def test_7d(self):
        assert resolve_window_start("7d", NOW) == datetime(2025, 6, 1, 15, 30, tzinfo=timezone.utc)

    def test_90d(self):
        assert resolve_window_start("90d", NOW) == NOW - timedelta(days=90)

    def test_all_is_epoch_floor(self):
        """'all' ignores now and starts at the epoch floor."""
        assert resolve_window_start("all", NOW) == EPOCH_FLOOR

    def test_naive_now_is_utc(self):
        naive = datetime(2025, 6, 8, 15, 30)
        start = resolve_window_start("7d", naive)

        assert start.tzinfo == timezone.utc
        assert start == resolve_window_start("7d", NOW)

    def test_defaults_to_current_time(self):
        before = datetime.now(timezone.utc) - timedelta(days=30)
        start = resolve_window_start("30d")
        after = datetime.now(timezone.utc) - timedelta(days=30)

        assert before <= start <= after

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            resolve_window_start("1y", NOW)


class TestGranularity:
    """Tests for granularity_for function."""

    @pytest.mark.parametrize(
        "window,expected",
        [
            ("24h", "hour"),
            ("7d", "day"),
            ("30d", "day"),
            ("90d", "month"),
            ("all", "month"),
        ],
    )
    def test_granularity(self, window, expected):
        assert granularity_for(window) == expected


class TestBucketLabel:
    """Tests for bucket_label function."""

    def test_hour(self):
        assert bucket_label(NOW, "hour") == "2025-06-08T15:00"

    def test_day(self):
        assert bucket_label(NOW, "day") == "2025-06-08"

    def test_month(self):
        assert bucket_label(NOW, "month") == "2025-06"

    def test_converts_to_utc(self):
        """Buckets are always UTC."""
        tz = timezone(timedelta(hours=-5))
        local = datetime(2025, 6, 8, 22, 0, tzinfo=tz)

        assert bucket_label(local, "day") == "2025-06-09"

    def test_unknown_granularity(self):
        with pytest.raises(ValueError, match="Unknown granularity"):
            bucket_label(NOW, "week")
