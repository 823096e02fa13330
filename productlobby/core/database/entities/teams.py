"""
Campaign team and watchlist entity models.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class TeamRole(str, Enum):
    ADMIN = "Admin"
    EDITOR = "Editor"
    MODERATOR = "Moderator"
    VIEWER = "Viewer"


class TeamMemberStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"


class TeamMember(Base, table=True):
    """Campaign collaborator, invited by e-mail.

    ``user_id`` stays empty until the invite is accepted.

    Table: team_members
    """

    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("campaign_id", "email", name="uq_team_campaign_email"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="campaigns.id", max_length=36, index=True)
    email: str = Field(max_length=320, index=True)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36)
    role: TeamRole = Field(default=TeamRole.VIEWER)
    status: TeamMemberStatus = Field(default=TeamMemberStatus.PENDING, index=True)
    invited_by: str = Field(foreign_key="users.id", max_length=36)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    joined_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"TeamMember(id={self.id}, email={self.email}, status={self.status})"


class WatchlistItem(Base, table=True):
    """Campaign a user is watching.

    Table: watchlist_items
    """

    __tablename__ = "watchlist_items"
    __table_args__ = (UniqueConstraint("user_id", "campaign_id", name="uq_watchlist_user_campaign"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    campaign_id: str = Field(foreign_key="campaigns.id", max_length=36, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
