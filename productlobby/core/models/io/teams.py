"""
Team and watchlist I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from productlobby.core.database.entities.teams import TeamMemberStatus, TeamRole


class TeamInvite(BaseModel):
    """Schema for inviting someone to a campaign team by e-mail."""

    email: str = Field(description="Address the invitation is sent to")
    role: str = Field(default=TeamRole.VIEWER.value, description="Admin, Editor, Moderator or Viewer")


class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    email: str
    user_id: Optional[str] = None
    role: TeamRole
    status: TeamMemberStatus
    invited_by: str
    created_at: datetime
    joined_at: Optional[datetime] = None


class TeamRoster(BaseModel):
    members: List[TeamMemberRead]
    pending: List[TeamMemberRead]


class WatchlistAdd(BaseModel):
    campaign_id: str = Field(min_length=1, description="Campaign id or slug")


class WatchlistItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    campaign_id: str
    created_at: datetime
