"""
Comment and contribution event entity models.

Comments are threaded through ``parent_id``. Contribution events are the
generic activity log (shares, page views, poll votes, milestone shares) whose
free-form details live in a JSON column.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlmodel import JSON, Column, Field, Text

from ..base import Base, UTCDateTime, new_id, utc_now


class Comment(Base, table=True):
    """Campaign comment.

    Table: comments
    """

    __tablename__ = "comments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="campaigns.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    parent_id: Optional[str] = Field(default=None, foreign_key="comments.id", max_length=36, index=True)
    content: str = Field(sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Comment(id={self.id}, campaign_id={self.campaign_id})"


class ContributionEventType(str, Enum):
    """Kinds of recorded campaign activity."""

    SOCIAL_SHARE = "SOCIAL_SHARE"
    COMMENT_ENGAGEMENT = "COMMENT_ENGAGEMENT"
    PAGE_VIEW = "PAGE_VIEW"
    POLL_VOTE = "POLL_VOTE"
    BOOKMARK = "BOOKMARK"
    FOLLOW = "FOLLOW"
    REACTION = "REACTION"
    PREFERENCE_SUBMITTED = "PREFERENCE_SUBMITTED"


class ContributionEvent(Base, table=True):
    """Recorded user activity on a campaign.

    Table: contribution_events
    """

    __tablename__ = "contribution_events"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="campaigns.id", max_length=36, index=True)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36, index=True)
    event_type: ContributionEventType = Field(index=True)
    points: int = Field(default=0)
    event_metadata: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"ContributionEvent(id={self.id}, type={self.event_type})"
