"""
Unit tests for traffic aggregations.

Tests source breakdowns, top pages, trends and trend statistics over
in-memory events.
"""

from datetime import timedelta

from ai_traffic_analytics.reporting.aggregations import (
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


class TestPercentage:
    """Tests for percentage function."""

    def test_rounds_half_up(self):
        assert percentage(1, 8) == 13
        assert percentage(1, 200) == 1

    def test_rounds_down_below_half(self):
        assert percentage(1, 3) == 33

    def test_whole(self):
        assert percentage(4, 4) == 100

    def test_zero_total(self):
        assert percentage(0, 0) == 0


class TestCountBySource:
    """Tests for count_by_source function."""

    def test_counts_and_percentages(self, make_event):
        """3 chatgpt + 1 perplexity gives 75% / 25%."""
        events = [make_event("chatgpt")] * 3 + [make_event("perplexity")]

        result = count_by_source(events)

        assert [(r.source, r.count, r.percentage) for r in result] == [
            ("chatgpt", 3, 75),
            ("perplexity", 1, 25),
        ]

    def test_ties_keep_first_seen_order(self, make_event):
        events = [make_event("claude"), make_event("gemini"), make_event("chatgpt")]

        assert [r.source for r in count_by_source(events)] == ["claude", "gemini", "chatgpt"]

    def test_empty(self):
        assert count_by_source([]) == []

    def test_to_dict(self, make_event):
        row = count_by_source([make_event("claude")])[0]
        assert row.to_dict() == {"source": "claude", "count": 1, "percentage": 100}


class TestTopPages:
    """Tests for top_pages function."""

    def test_main_source(self, make_event):
        """A page's main source is its most frequent source."""
        events = [
            make_event("chatgpt", page_path="/pricing"),
            make_event("perplexity", page_path="/pricing"),
            make_event("perplexity", page_path="/pricing"),
            make_event("claude", page_path="/blog"),
        ]

        result = top_pages(events)

        assert result[0].page_path == "/pricing"
        assert result[0].count == 3
        assert result[0].main_source == "perplexity"
        assert result[1].page_path == "/blog"

    def test_main_source_tie_goes_to_first_seen(self, make_event):
        events = [
            make_event("gemini", page_path="/a"),
            make_event("claude", page_path="/a"),
        ]

        assert top_pages(events)[0].main_source == "gemini"

    def test_counts_sum_to_total_within_limit(self, make_event):
        events = [
            make_event(source, page_path=page)
            for source, page in [
                ("chatgpt", "/"),
                ("claude", "/"),
                ("perplexity", "/docs"),
                ("gptbot", "/blog"),
                ("chatgpt", "/blog"),
            ]
        ]

        assert sum(p.count for p in top_pages(events)) == len(events)

    def test_limit(self, make_event):
        events = [make_event(page_path=f"/p{i}") for i in range(15)]

        assert len(top_pages(events)) == 10
        assert len(top_pages(events, limit=3)) == 3


class TestTrend:
    """Tests for trend and its statistics."""

    def test_daily_buckets(self, make_event, base_time):
        events = [
            make_event(observed_at=base_time),
            make_event(observed_at=base_time + timedelta(hours=1)),
            make_event(observed_at=base_time + timedelta(days=2)),
        ]

        points = trend(events, "day")

        assert points == [TrendPoint("2025-06-01", 2), TrendPoint("2025-06-03", 1)]

    def test_ascending_order(self, make_event, base_time):
        events = [
            make_event(observed_at=base_time + timedelta(days=1)),
            make_event(observed_at=base_time),
        ]

        assert [p.bucket for p in trend(events, "day")] == ["2025-06-01", "2025-06-02"]

    def test_filters(self, make_event, base_time):
        events = [
            make_event("chatgpt", page_path="/a"),
            make_event("chatgpt", page_path="/b"),
            make_event("claude", page_path="/a"),
        ]

        assert trend(events, "day", source="chatgpt")[0].count == 2
        assert trend(events, "day", page_path="/a")[0].count == 2
        assert trend(events, "day", source="claude", page_path="/b") == []

    def test_filter_events(self, make_event):
        events = [make_event("chatgpt"), make_event("claude")]
        assert filter_events(events, source="claude") == [events[1]]
        assert filter_events(events) == events

    def test_growth_rate(self):
        points = [TrendPoint("d1", 10), TrendPoint("d2", 3), TrendPoint("d3", 15)]
        assert growth_rate(points) == 50.0

    def test_growth_rate_one_decimal(self):
        points = [TrendPoint("d1", 3), TrendPoint("d2", 4)]
        assert growth_rate(points) == 33.3

    def test_growth_rate_negative(self):
        points = [TrendPoint("d1", 4), TrendPoint("d2", 1)]
        assert growth_rate(points) == -75.0

    def test_growth_rate_not_applicable(self):
        assert growth_rate([]) is None
        assert growth_rate([TrendPoint("d1", 5)]) is None
        assert growth_rate([TrendPoint("d1", 0), TrendPoint("d2", 5)]) is None

    def test_peak_tie_goes_to_later_bucket(self):
        points = [TrendPoint("d1", 5), TrendPoint("d2", 2), TrendPoint("d3", 5)]
        assert peak_bucket(points) == TrendPoint("d3", 5)

    def test_peak_empty(self):
        assert peak_bucket([]) is None

    def test_average(self):
        assert average_per_bucket([TrendPoint("d1", 1), TrendPoint("d2", 2)]) == 2
        assert average_per_bucket([TrendPoint("d1", 1), TrendPoint("d2", 1), TrendPoint("d3", 2)]) == 1
        assert average_per_bucket([]) == 0


class TestSummarize:
    """Tests for summarize function."""

    def test_totals(self, make_event, base_time):
        events = [
            make_event("chatgpt", "referral", "/a", base_time),
            make_event("gptbot", "crawler", "/b", base_time + timedelta(hours=2)),
            make_event("direct", "direct", "/a", base_time + timedelta(hours=1)),
        ]

        summary = summarize(events)

        assert summary.total == 3
        assert summary.referrals == 1
        assert summary.crawlers == 1
        assert summary.direct == 1
        assert summary.standard == 0
        assert summary.unique_pages == 2
        assert summary.unique_sources == 3
        assert summary.first_seen == base_time
        assert summary.last_seen == base_time + timedelta(hours=2)

    def test_empty(self):
        summary = summarize([])

        assert summary.total == 0
        assert summary.to_dict()["first_seen"] is None


class TestRecentVisits:
    """Tests for recent_visits function."""

    def test_latest_first(self, make_event, base_time):
        events = [make_event(observed_at=base_time + timedelta(minutes=i), event_id=i) for i in range(15)]

        result = recent_visits(events)

        assert len(result) == 10
        assert result[0].id == 14
        assert result[-1].id == 5

    def test_same_time_orders_by_id(self, make_event, base_time):
        events = [make_event(event_id=1), make_event(event_id=2)]
        assert [e.id for e in recent_visits(events)] == [2, 1]
