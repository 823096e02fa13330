"""Supporter retention calculator.

A supporter is retained over a period when they did anything on the campaign
at least that many days after they joined. Only supporters who joined long
enough ago for the period to have elapsed are counted.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from pydantic import Field

from .base import BaseSchema
from .utils import round_int, utc_now

RETENTION_PERIODS: Tuple[Tuple[str, int], ...] = (
    ("Week 1", 7),
    ("Week 2", 14),
    ("Month 1", 30),
    ("Month 3", 90),
)
ACTIVE_WINDOW_DAYS = 30
PLATFORM_AVERAGE_RETENTION = 42


class SupporterActivity(BaseSchema):
    """When a supporter joined and every later activity timestamp."""

    user_id: str
    joined_at: datetime
    activity: List[datetime] = Field(default_factory=list)


class RetentionPeriod(BaseSchema):
    period: str
    days: int
    supporters_at_start: int
    retained: int
    retention_rate: int


class RetentionReport(BaseSchema):
    total_supporters: int
    overall_retention: int
    platform_average: int = PLATFORM_AVERAGE_RETENTION
    periods: List[RetentionPeriod]
    message: Optional[str] = None


def period_retention(supporters: Sequence[SupporterActivity], label: str, days: int, now: datetime) -> RetentionPeriod:
    eligible = [s for s in supporters if s.joined_at <= now - timedelta(days=days)]
    retained = sum(1 for s in eligible if any(a >= s.joined_at + timedelta(days=days) for a in s.activity))
    rate = round_int(retained / len(eligible) * 100) if eligible else 0
    return RetentionPeriod(
        period=label,
        days=days,
        supporters_at_start=len(eligible),
        retained=retained,
        retention_rate=rate,
    )


def _recently_active(supporter: SupporterActivity, since: datetime) -> bool:
    joined_day = supporter.joined_at.date()
    return any(a >= since and a.date() > joined_day for a in supporter.activity)


def calculate_retention(supporters: Sequence[SupporterActivity], now: Optional[datetime] = None) -> RetentionReport:
    """Retention over each standard period plus an overall figure.

    Args:
        supporters: One entry per supporter
        now: Reference time, defaults to the current UTC time

    Returns:
        Report whose rates all lie in ``[0, 100]``
    """
    now = now or utc_now()
    periods = [period_retention(supporters, label, days, now) for label, days in RETENTION_PERIODS]

    if not supporters:
        return RetentionReport(
            total_supporters=0,
            overall_retention=0,
            periods=periods,
            message="No supporters yet. Retention appears once people lobby for this campaign.",
        )

    since = now - timedelta(days=ACTIVE_WINDOW_DAYS)
    active = sum(1 for s in supporters if _recently_active(s, since))
    return RetentionReport(
        total_supporters=len(supporters),
        overall_retention=round_int(active / len(supporters) * 100),
        periods=periods,
    )
