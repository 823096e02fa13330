"""
Creator poll entity models.

Campaign creators ask their supporters questions through polls. A poll owns
ordered options; votes reference both the poll and the chosen option so
per-user counts need no join.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, UTCDateTime, new_id, utc_now


class PollType(str, Enum):
    SINGLE_SELECT = "SINGLE_SELECT"
    MULTI_SELECT = "MULTI_SELECT"
    RANKED = "RANKED"


class PollStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class CreatorPoll(Base, table=True):
    """Poll attached to a campaign.

    Table: creator_polls
    """

    __tablename__ = "creator_polls"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="campaigns.id", max_length=36, index=True)
    creator_id: str = Field(foreign_key="users.id", max_length=36)
    question: str = Field(max_length=500)
    description: Optional[str] = Field(default=None, sa_type=Text)
    poll_type: PollType = Field(default=PollType.SINGLE_SELECT)
    max_selections: int = Field(default=1)
    status: PollStatus = Field(default=PollStatus.ACTIVE, index=True)
    closes_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"CreatorPoll(id={self.id}, type={self.poll_type}, status={self.status})"


class CreatorPollOption(Base, table=True):
    """Table: creator_poll_options"""

    __tablename__ = "creator_poll_options"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    poll_id: str = Field(foreign_key="creator_polls.id", max_length=36, index=True)
    text: str = Field(max_length=200)
    order: int = Field(default=0)


class CreatorPollVote(Base, table=True):
    """Table: creator_poll_votes"""

    __tablename__ = "creator_poll_votes"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    poll_id: str = Field(foreign_key="creator_polls.id", max_length=36, index=True)
    option_id: str = Field(foreign_key="creator_poll_options.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    rank: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
