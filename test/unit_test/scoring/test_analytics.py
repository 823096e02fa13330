"""
Unit tests for the campaign analytics export.
"""

from datetime import datetime, timedelta

import pytest

from productlobby.scoring.analytics import (
    ALL_TIME_COMPARISON_DAYS,
    EventRecord,
    build_report,
    daily_activity,
    device_breakdown,
    normalize_period,
    period_window,
    report_to_csv,
    split_by_window,
)

NOW = datetime(2024, 3, 10, 12, 0)


def event(day: int, user_id=None, **metadata) -> EventRecord:
    return EventRecord(user_id=user_id, created_at=datetime(2024, 3, day, 9, 0), metadata=metadata)


@pytest.mark.parametrize("period, expected", [("7d", "7d"), ("all", "all"), ("bogus", "30d"), (None, "30d")])
def test_normalize_period(period, expected):
    assert normalize_period(period) == expected


class TestPeriodWindow:
    def test_fixed_period(self):
        window = period_window("7d", now=NOW)

        assert window.start == NOW - timedelta(days=7)
        assert window.end == NOW
        assert window.previous_start == NOW - timedelta(days=14)
        assert window.previous_end == window.start

    def test_all_starts_at_first_event_day(self):
        window = period_window("all", now=NOW, first_event=datetime(2024, 1, 15, 10, 30))

        assert window.start == datetime(2024, 1, 15)
        assert window.previous_start == datetime(2024, 1, 15) - timedelta(days=ALL_TIME_COMPARISON_DAYS)


def test_split_by_window_boundaries():
    window = period_window("7d", now=NOW)
    at_start = EventRecord(created_at=window.start)
    before = EventRecord(created_at=window.start - timedelta(seconds=1))
    too_old = EventRecord(created_at=window.previous_start - timedelta(seconds=1))

    current, previous = split_by_window([at_start, before, too_old], window)

    assert current == [at_start]
    assert previous == [before]


def test_daily_activity_zero_fills():
    rows = daily_activity([event(2), event(2)], datetime(2024, 3, 1, 12), datetime(2024, 3, 3, 8))

    assert [(r.date, r.views) for r in rows] == [("2024-03-01", 0), ("2024-03-02", 2), ("2024-03-03", 0)]


def test_unknown_device_counts_as_desktop():
    breakdown = device_breakdown([event(1, deviceType="smartwatch"), event(1, deviceType="tablet"), event(1)])

    assert breakdown == {"desktop": 2, "mobile": 0, "tablet": 1}


class TestBuildReport:
    @pytest.fixture
    def report(self):
        window = period_window("7d", now=NOW)
        current = [
            event(9, "u1", referrer="twitter", deviceType="mobile", timeOnPage=30),
            event(10, "u1", timeOnPage=90),
            event(8, "u2", deviceType="smartwatch", timeOnPage="long"),
            event(9),
        ]
        previous = [event(1, "u1"), event(2, "u1")]
        return build_report(window, current, previous, now=NOW)

    def test_totals(self, report):
        assert report.period == "7d"
        assert report.total_views == 4
        assert report.unique_visitors == 3
        assert report.conversion_rate == pytest.approx(4 / 3 * 100)
        assert report.avg_time_on_page == 60
        assert report.last_updated == NOW

    def test_breakdowns(self, report):
        assert len(report.daily_activity) == 8
        assert report.daily_activity[-2].views == 2
        assert [(r.source, r.count) for r in report.top_referrals] == [("Direct", 3), ("twitter", 1)]
        assert report.device_breakdown == {"desktop": 3, "mobile": 1, "tablet": 0}

    def test_comparison(self, report):
        assert report.comparison.views_change == 100
        assert report.comparison.visitors_change == 200
        assert report.comparison.time_change == 100

    def test_csv(self, report):
        lines = report_to_csv(report).splitlines()

        assert lines[0] == "Metric,Value"
        assert "Total Views,4" in lines
        assert "Conversion Rate,133.33" in lines
        assert "mobile,1" in lines
        assert "2024-03-09,2" in lines
