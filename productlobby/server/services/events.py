"""
Contribution Event Service.

Records campaign activity (shares, page views, reactions...) with the points
each kind of activity earns.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from productlobby.core.database.entities import Campaign, ContributionEvent, ContributionEventType, User
from productlobby.core.database.repositories import RepoBundle
from productlobby.core.logging_config import get_logger

logger = get_logger(__name__)

EVENT_POINTS: Dict[ContributionEventType, int] = {
    ContributionEventType.SOCIAL_SHARE: 5,
    ContributionEventType.COMMENT_ENGAGEMENT: 2,
    ContributionEventType.PAGE_VIEW: 0,
    ContributionEventType.POLL_VOTE: 1,
    ContributionEventType.BOOKMARK: 1,
    ContributionEventType.FOLLOW: 1,
    ContributionEventType.REACTION: 1,
    ContributionEventType.PREFERENCE_SUBMITTED: 3,
}


async def record_event(
    repos: RepoBundle,
    campaign: Campaign,
    event_type: ContributionEventType,
    user: Optional[User] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> ContributionEvent:
    """Store one contribution event. Anonymous events (page views) have no user."""
    event = ContributionEvent(
        campaign_id=campaign.id,
        user_id=user.id if user is not None else None,
        event_type=event_type,
        points=EVENT_POINTS.get(event_type, 0),
        event_metadata=dict(metadata or {}),
    )
    event = await repos.events.create(event)
    logger.debug(f"Recorded {event_type.value} on campaign {campaign.id}")
    return event
