"""Per-supporter engagement scoring.

A supporter's score (0-10) rewards both how often they act (60%, saturating
at ten actions) and how many different kinds of action they take (40%).
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from pydantic import Field

from .base import BaseSchema
from .utils import round_half_up, round_int

ACTIVITY_LABELS: Dict[str, str] = {
    "lobbies": "Lobby",
    "pledges": "Pledge",
    "poll_votes": "Poll Vote",
    "comments": "Comment",
    "shares": "Share",
    "bookmarks": "Bookmark",
    "reactions": "Reaction",
    "follows": "Follow",
}
FREQUENCY_SATURATION = 10
FREQUENCY_WEIGHT = 60
VARIETY_WEIGHT = 40
HIGH_ENGAGEMENT = 6.0
MODERATE_ENGAGEMENT = 3.0
TOP_SUPPORTERS = 5


class SupporterActivityCounts(BaseSchema):
    """How many times a supporter did each kind of thing on one campaign."""

    user_id: str
    display_name: str = ""
    handle: Optional[str] = None
    avatar: Optional[str] = None
    lobbies: int = Field(default=0, ge=0)
    pledges: int = Field(default=0, ge=0)
    poll_votes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    bookmarks: int = Field(default=0, ge=0)
    reactions: int = Field(default=0, ge=0)
    follows: int = Field(default=0, ge=0)
    last_active: Optional[datetime] = None

    def record(self, kind: str, at: datetime) -> None:
        setattr(self, kind, getattr(self, kind) + 1)
        if self.last_active is None or at > self.last_active:
            self.last_active = at

    @property
    def total(self) -> int:
        return sum(getattr(self, kind) for kind in ACTIVITY_LABELS)

    @property
    def activity_types(self) -> List[str]:
        return [label for kind, label in ACTIVITY_LABELS.items() if getattr(self, kind) > 0]


class SupporterEngagement(BaseSchema):
    user_id: str
    name: str
    handle: str
    avatar: Optional[str] = None
    engagement_score: float
    last_active: Optional[datetime] = None
    activity_types: List[str]


class EngagementBucket(BaseSchema):
    count: int
    percentage: int


class EngagementSummary(BaseSchema):
    high_engagement: EngagementBucket
    moderate_engagement: EngagementBucket
    low_engagement: EngagementBucket
    top_supporters: List[SupporterEngagement]
    average_engagement_score: float
    platform_average_score: float
    total_supporters: int


def engagement_score(counts: SupporterActivityCounts) -> float:
    """Score in ``[0, 10]`` rounded to one decimal."""
    frequency = min(counts.total / FREQUENCY_SATURATION, 1.0) * FREQUENCY_WEIGHT
    variety = len(counts.activity_types) / len(ACTIVITY_LABELS) * VARIETY_WEIGHT
    return round_half_up((frequency + variety) / 10, 1)


def platform_average_score(total_activities: int, total_users: int) -> float:
    """Platform-wide activity per user, on the same 0-10 scale shown to creators."""
    if total_users <= 0:
        return 0.0
    return round_half_up(total_activities / total_users / 10, 1)


def summarize_engagement(
    supporters: Sequence[SupporterActivityCounts], platform_average: float = 0.0, top_n: int = TOP_SUPPORTERS
) -> EngagementSummary:
    """Score every supporter and bucket them into high, moderate and low engagement.

    Args:
        supporters: Activity counts, one entry per supporter
        platform_average: Platform-wide average to report alongside
        top_n: How many top supporters to return

    Returns:
        Distribution, top supporters (best first) and the rounded average
    """
    scored = [
        SupporterEngagement(
            user_id=s.user_id,
            name=s.display_name,
            handle=s.handle or "anonymous",
            avatar=s.avatar,
            engagement_score=engagement_score(s),
            last_active=s.last_active,
            activity_types=s.activity_types,
        )
        for s in supporters
    ]
    scored.sort(key=lambda s: s.engagement_score, reverse=True)
    total = len(scored)

    def bucket(matching: int) -> EngagementBucket:
        return EngagementBucket(count=matching, percentage=round_int(matching / total * 100) if total else 0)

    high = sum(1 for s in scored if s.engagement_score >= HIGH_ENGAGEMENT)
    moderate = sum(1 for s in scored if MODERATE_ENGAGEMENT <= s.engagement_score < HIGH_ENGAGEMENT)
    low = total - high - moderate
    average = round_half_up(sum(s.engagement_score for s in scored) / total, 1) if total else 0.0

    return EngagementSummary(
        high_engagement=bucket(high),
        moderate_engagement=bucket(moderate),
        low_engagement=bucket(low),
        top_supporters=scored[:top_n],
        average_engagement_score=average,
        platform_average_score=platform_average,
        total_supporters=total,
    )
