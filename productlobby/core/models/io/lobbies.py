"""
Lobby and pledge I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from productlobby.core.database.entities.lobbies import (
    PLEDGE_TIMEFRAMES,
    LobbyIntensity,
    LobbyStatus,
    PledgeType,
)


class LobbyCreate(BaseModel):
    """Schema for lobbying for a campaign, or changing an existing lobby's intensity."""

    intensity: LobbyIntensity = Field(default=LobbyIntensity.NEAT_IDEA)


class LobbyRead(BaseModel):
    """Schema for reading a lobby from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    user_id: str
    intensity: LobbyIntensity
    status: LobbyStatus
    created_at: datetime


class LobbyStats(BaseModel):
    """Verified lobby counts for a campaign."""

    campaign_id: str
    total: int
    by_intensity: Dict[LobbyIntensity, int]


class PledgeCreate(BaseModel):
    """Schema for pledging on a campaign.

    INTENT pledges state what the backer would pay and when, so both the price
    ceiling and the timeframe are required for them.
    """

    pledge_type: PledgeType
    price_ceiling: Optional[float] = Field(default=None, gt=0, le=1_000_000)
    timeframe_days: Optional[int] = Field(default=None, description="One of 30, 90 or 180")
    region: Optional[str] = Field(default=None, max_length=50)
    is_private: bool = Field(default=False)

    @model_validator(mode="after")
    def _intent_details(self) -> "PledgeCreate":
        if self.timeframe_days is not None and self.timeframe_days not in PLEDGE_TIMEFRAMES:
            raise ValueError("timeframe_days must be one of 30, 90 or 180")
        if self.pledge_type == PledgeType.INTENT and (self.price_ceiling is None or self.timeframe_days is None):
            raise ValueError("INTENT pledges require price_ceiling and timeframe_days")
        return self


class PledgeRead(BaseModel):
    """Schema for reading a pledge from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    user_id: str
    pledge_type: PledgeType
    price_ceiling: Optional[float] = None
    timeframe_days: Optional[int] = None
    region: Optional[str] = None
    is_private: bool
    created_at: datetime
