"""
User and brand I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from productlobby.core.text import is_valid_email, slugify


class UserCreate(BaseModel):
    """Schema for creating a user via API."""

    email: str = Field(description="Unique e-mail address")
    display_name: str = Field(min_length=1, max_length=100, description="Name shown next to activity")
    handle: Optional[str] = Field(default=None, min_length=2, max_length=30, pattern=r"^[A-Za-z0-9_]+$")
    avatar: Optional[str] = Field(default=None, max_length=512)
    phone_verified: bool = Field(default=False, description="Whether the user verified a phone number")

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not is_valid_email(value):
            raise ValueError("Invalid email address")
        return value


class UserRead(BaseModel):
    """Schema for reading a user from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    display_name: str
    handle: Optional[str] = None
    avatar: Optional[str] = None
    phone_verified: bool
    created_at: datetime


class BrandCreate(BaseModel):
    """Schema for creating a brand via API. The slug defaults to one derived from the name."""

    name: str = Field(min_length=1, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=220)
    website: Optional[str] = Field(default=None, max_length=512)

    def resolved_slug(self) -> str:
        return slugify(self.slug or self.name)


class BrandRead(BaseModel):
    """Schema for reading a brand from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    website: Optional[str] = None
    created_at: datetime
