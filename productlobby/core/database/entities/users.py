"""
User and brand entity models.

Users create campaigns, lobby for them and pledge support. Brands are the
companies campaigns are aimed at.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class User(Base, table=True):
    """Platform user.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    email: str = Field(max_length=320, unique=True, index=True)
    display_name: str = Field(max_length=100)
    handle: Optional[str] = Field(default=None, max_length=30, unique=True, index=True)
    avatar: Optional[str] = Field(default=None, max_length=512)
    phone_verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"


class Brand(Base, table=True):
    """Brand a campaign can target.

    Table: brands
    """

    __tablename__ = "brands"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    name: str = Field(max_length=200)
    slug: str = Field(max_length=220, unique=True, index=True)
    website: Optional[str] = Field(default=None, max_length=512)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Brand(id={self.id}, slug={self.slug})"
