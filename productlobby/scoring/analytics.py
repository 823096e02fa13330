"""Campaign analytics export.

Summarises a campaign's contribution events over a reporting period and
compares them with the period before it.
"""

from __future__ import annotations

import csv
import io
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import Field

from .base import BaseSchema
from .utils import percentage_change, utc_now

PERIOD_DAYS: Dict[str, int] = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_PERIOD = "30d"
# "all" compares against the year before the first event
ALL_TIME_COMPARISON_DAYS = 365
TOP_REFERRALS = 10
DEVICE_TYPES = ("desktop", "mobile", "tablet")


class EventRecord(BaseSchema):
    user_id: Optional[str] = None
    created_at: datetime
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PeriodWindow(BaseSchema):
    period: str
    start: datetime
    end: datetime
    previous_start: datetime
    previous_end: datetime


class DailyActivity(BaseSchema):
    date: str
    views: int


class Referral(BaseSchema):
    source: str
    count: int
    percentage: float


class PeriodComparison(BaseSchema):
    views_change: int
    visitors_change: int
    conversion_change: int
    time_change: int


class AnalyticsReport(BaseSchema):
    period: str
    total_views: int
    unique_visitors: int
    conversion_rate: float
    avg_time_on_page: float
    last_updated: datetime
    daily_activity: List[DailyActivity]
    top_referrals: List[Referral]
    device_breakdown: Dict[str, int]
    comparison: PeriodComparison


def normalize_period(period: Optional[str]) -> str:
    if period in PERIOD_DAYS or period == "all":
        return period  # type: ignore[return-value]
    return DEFAULT_PERIOD


def period_window(
    period: Optional[str], now: Optional[datetime] = None, first_event: Optional[datetime] = None
) -> PeriodWindow:
    """Current and previous reporting windows.

    Args:
        period: ``7d``, ``30d``, ``90d`` or ``all``; anything else means ``30d``
        now: End of the current window
        first_event: Earliest event, used as the start of an ``all`` window

    Returns:
        Window boundaries; the previous window ends where the current one starts
    """
    period = normalize_period(period)
    now = now or utc_now()
    if period == "all":
        anchor = first_event or now
        start = datetime.combine(anchor.date(), datetime.min.time(), tzinfo=anchor.tzinfo)
        comparison_days = ALL_TIME_COMPARISON_DAYS
    else:
        comparison_days = PERIOD_DAYS[period]
        start = now - timedelta(days=comparison_days)
    return PeriodWindow(
        period=period,
        start=start,
        end=now,
        previous_start=start - timedelta(days=comparison_days),
        previous_end=start,
    )


def unique_visitors(events: Sequence[EventRecord]) -> int:
    return len({e.user_id for e in events})


def conversion_rate(events: Sequence[EventRecord]) -> float:
    visitors = unique_visitors(events)
    return len(events) / visitors * 100 if visitors else 0.0


def avg_time_on_page(events: Sequence[EventRecord]) -> float:
    """Mean of positive numeric ``timeOnPage`` metadata values; 0 when there are none."""
    times = [
        value
        for value in (e.metadata.get("timeOnPage") for e in events)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0
    ]
    return sum(times) / len(times) if times else 0.0


def daily_activity(events: Sequence[EventRecord], start: datetime, end: datetime) -> List[DailyActivity]:
    """Event counts for every calendar day from ``start`` to ``end``, zero-filled."""
    buckets: Dict[date, int] = {}
    day = start.date()
    while day <= end.date():
        buckets[day] = 0
        day += timedelta(days=1)
    for event in events:
        event_day = event.created_at.date()
        buckets[event_day] = buckets.get(event_day, 0) + 1
    return [DailyActivity(date=d.isoformat(), views=count) for d, count in sorted(buckets.items())]


def top_referrals(events: Sequence[EventRecord], limit: int = TOP_REFERRALS) -> List[Referral]:
    counts = Counter(e.metadata.get("referrer") or "Direct" for e in events)
    total = len(events)
    return [
        Referral(source=source, count=count, percentage=count / total * 100 if total else 0)
        for source, count in counts.most_common(limit)
    ]


def device_breakdown(events: Sequence[EventRecord]) -> Dict[str, int]:
    """Count events per device; anything unrecognised counts as desktop."""
    breakdown = {device: 0 for device in DEVICE_TYPES}
    for event in events:
        device = event.metadata.get("deviceType") or "desktop"
        breakdown[device if device in breakdown else "desktop"] += 1
    return breakdown


def build_report(
    window: PeriodWindow,
    current: Sequence[EventRecord],
    previous: Sequence[EventRecord],
    now: Optional[datetime] = None,
) -> AnalyticsReport:
    """Assemble the export for events already split into the two windows."""
    comparison = PeriodComparison(
        views_change=percentage_change(len(previous), len(current)),
        visitors_change=percentage_change(unique_visitors(previous), unique_visitors(current)),
        conversion_change=percentage_change(conversion_rate(previous), conversion_rate(current)),
        time_change=percentage_change(avg_time_on_page(previous), avg_time_on_page(current)),
    )
    return AnalyticsReport(
        period=window.period,
        total_views=len(current),
        unique_visitors=unique_visitors(current),
        conversion_rate=conversion_rate(current),
        avg_time_on_page=avg_time_on_page(current),
        last_updated=now or utc_now(),
        daily_activity=daily_activity(current, window.start, window.end),
        top_referrals=top_referrals(current),
        device_breakdown=device_breakdown(current),
        comparison=comparison,
    )


def split_by_window(events: Sequence[EventRecord], window: PeriodWindow) -> Tuple[List[EventRecord], List[EventRecord]]:
    """Split events into ``(current, previous)``: ``[start, end]`` and ``[previous_start, previous_end)``."""
    current = [e for e in events if window.start <= e.created_at <= window.end]
    previous = [e for e in events if window.previous_start <= e.created_at < window.previous_end]
    return current, previous


def report_to_csv(report: AnalyticsReport) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Metric", "Value"])
    writer.writerow(["Period", report.period])
    writer.writerow(["Total Views", report.total_views])
    writer.writerow(["Unique Visitors", report.unique_visitors])
    writer.writerow(["Conversion Rate", f"{report.conversion_rate:.2f}"])
    writer.writerow(["Avg Time On Page", f"{report.avg_time_on_page:.2f}"])
    writer.writerow(["Views Change %", report.comparison.views_change])
    writer.writerow(["Visitors Change %", report.comparison.visitors_change])
    writer.writerow([])
    writer.writerow(["Date", "Views"])
    for row in report.daily_activity:
        writer.writerow([row.date, row.views])
    writer.writerow([])
    writer.writerow(["Referrer", "Count", "Percentage"])
    for referral in report.top_referrals:
        writer.writerow([referral.source, referral.count, f"{referral.percentage:.1f}"])
    writer.writerow([])
    writer.writerow(["Device", "Count"])
    for device, count in report.device_breakdown.items():
        writer.writerow([device, count])
    return buffer.getvalue()
