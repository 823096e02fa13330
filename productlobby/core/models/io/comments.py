"""
Comment and contribution event I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from productlobby.core.database.entities.comments import ContributionEventType


class CommentCreate(BaseModel):
    """Schema for posting a comment. ``parent_id`` makes it a reply."""

    content: str = Field(min_length=1, max_length=2000)
    parent_id: Optional[str] = None

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment cannot be empty")
        return value


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment cannot be empty")
        return value


class CommentRead(BaseModel):
    """Schema for reading a comment, with its replies nested under it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    user_id: str
    parent_id: Optional[str] = None
    content: str
    created_at: datetime
    updated_at: datetime
    replies: List["CommentRead"] = Field(default_factory=list)


class ContributionEventCreate(BaseModel):
    """Schema for recording campaign activity such as a share or page view."""

    event_type: ContributionEventType
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ContributionEventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    user_id: Optional[str] = None
    event_type: ContributionEventType
    points: int
    event_metadata: Dict[str, Any]
    created_at: datetime


class MilestoneShareCreate(BaseModel):
    """Schema for recording that a milestone was shared."""

    action: str = Field(description="Must be 'share_milestone'")
    milestone_id: Optional[str] = None
    milestone_type: Optional[str] = None
    milestone_threshold: Optional[int] = None
    share_text: Optional[str] = Field(default=None, max_length=500)
    share_url: Optional[str] = Field(default=None, max_length=2048)
