"""Campaign milestone progress."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Mapping, Optional, Tuple

from .base import BaseSchema
from .utils import round_int

MILESTONE_THRESHOLDS: Dict[str, Tuple[int, ...]] = {
    "supporters": (10, 50, 100, 500, 1000),
    "votes": (10, 50, 100, 500, 1000),
    "shares": (5, 25, 50, 250, 500),
    "days_active": (7, 30, 90, 180, 365),
}


class Milestone(BaseSchema):
    id: str
    type: str
    threshold: int
    achieved: bool
    achieved_at: Optional[datetime] = None
    progress: int
    progress_percent: int


class MilestoneReport(BaseSchema):
    total_supporters: int
    total_votes: int
    total_shares: int
    days_active: int
    total_milestones_achieved: int
    milestones: List[Milestone]


def build_milestones(
    progress: Mapping[str, int],
    achieved_events: Optional[Mapping[Tuple[str, int], datetime]] = None,
) -> List[Milestone]:
    """Build every milestone from current progress.

    Args:
        progress: Current value per milestone type; missing types count as 0
        achieved_events: When a milestone was recorded, keyed by ``(type, threshold)``

    Returns:
        Milestones, achieved first, then by type name and threshold
    """
    achieved_events = achieved_events or {}
    milestones = []
    for milestone_type, thresholds in MILESTONE_THRESHOLDS.items():
        value = progress.get(milestone_type, 0)
        for threshold in thresholds:
            achieved = value >= threshold
            milestones.append(
                Milestone(
                    id=f"{milestone_type}-{threshold}",
                    type=milestone_type,
                    threshold=threshold,
                    achieved=achieved,
                    achieved_at=achieved_events.get((milestone_type, threshold)) if achieved else None,
                    progress=value,
                    progress_percent=min(100, round_int(value / threshold * 100)),
                )
            )
    milestones.sort(key=lambda m: (not m.achieved, m.type, m.threshold))
    return milestones


def milestone_report(
    total_supporters: int,
    total_votes: int,
    total_shares: int,
    days_active: int,
    achieved_events: Optional[Mapping[Tuple[str, int], datetime]] = None,
) -> MilestoneReport:
    milestones = build_milestones(
        {
            "supporters": total_supporters,
            "votes": total_votes,
            "shares": total_shares,
            "days_active": days_active,
        },
        achieved_events,
    )
    return MilestoneReport(
        total_supporters=total_supporters,
        total_votes=total_votes,
        total_shares=total_shares,
        days_active=days_active,
        total_milestones_achieved=sum(1 for m in milestones if m.achieved),
        milestones=milestones,
    )
