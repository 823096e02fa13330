"""
Lobby and pledge entity models.

Lobbies record how strongly a user wants a campaign's product. Pledges record
support or purchase intent, with an optional price ceiling. Both feed the
signal score.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class LobbyIntensity(str, Enum):
    """How strongly a supporter wants the product."""

    NEAT_IDEA = "NEAT_IDEA"
    PROBABLY_BUY = "PROBABLY_BUY"
    TAKE_MY_MONEY = "TAKE_MY_MONEY"


class LobbyStatus(str, Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"


class PledgeType(str, Enum):
    """Moral support or stated purchase intent."""

    SUPPORT = "SUPPORT"
    INTENT = "INTENT"


PLEDGE_TIMEFRAMES = (30, 90, 180)


class Lobby(Base, table=True):
    """A user's lobby for a campaign. One per user and campaign.

    Table: lobbies
    """

    __tablename__ = "lobbies"
    __table_args__ = (UniqueConstraint("campaign_id", "user_id", name="uq_lobby_campaign_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="campaigns.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    intensity: LobbyIntensity = Field(default=LobbyIntensity.NEAT_IDEA)
    status: LobbyStatus = Field(default=LobbyStatus.VERIFIED, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Lobby(id={self.id}, campaign_id={self.campaign_id}, intensity={self.intensity})"


class Pledge(Base, table=True):
    """Support or intent pledge on a campaign.

    Table: pledges
    """

    __tablename__ = "pledges"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="campaigns.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    pledge_type: PledgeType = Field(index=True)
    price_ceiling: Optional[float] = Field(default=None)
    timeframe_days: Optional[int] = Field(default=None)
    region: Optional[str] = Field(default=None, max_length=50)
    is_private: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Pledge(id={self.id}, campaign_id={self.campaign_id}, type={self.pledge_type})"
