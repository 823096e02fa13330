"""
Campaign entity models.

A campaign is a request for a product or feature, created by a user and
optionally aimed at a brand. The cached signal score lives on the row so
listings can sort by it without recomputation.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, UTCDateTime, new_id, utc_now


class CampaignStatus(str, Enum):
    """Campaign lifecycle state."""

    DRAFT = "DRAFT"
    LIVE = "LIVE"
    PAUSED = "PAUSED"
    CLOSED = "CLOSED"


class CampaignTemplate(str, Enum):
    """Kind of request a campaign makes."""

    VARIANT = "VARIANT"
    FEATURE = "FEATURE"


CAMPAIGN_CATEGORIES = (
    "apparel",
    "tech",
    "audio",
    "wearables",
    "home",
    "sports",
    "automotive",
    "other",
)


class Campaign(Base, table=True):
    """Campaign requesting a product or feature.

    Table: campaigns
    """

    __tablename__ = "campaigns"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    slug: str = Field(max_length=220, unique=True, index=True)
    title: str = Field(max_length=200)
    description: str = Field(sa_type=Text)
    category: str = Field(max_length=32, index=True)
    template: CampaignTemplate = Field(default=CampaignTemplate.FEATURE)
    status: CampaignStatus = Field(default=CampaignStatus.LIVE, index=True)
    currency: str = Field(default="GBP", max_length=3)
    open_to_alternatives: bool = Field(default=False)

    creator_user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    targeted_brand_id: Optional[str] = Field(default=None, foreign_key="brands.id", max_length=36)

    completeness_score: int = Field(default=0)
    signal_score: Optional[float] = Field(default=None, index=True)
    signal_score_updated_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Campaign(id={self.id}, slug={self.slug}, status={self.status})"
