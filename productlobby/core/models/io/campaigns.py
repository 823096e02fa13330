"""
Campaign I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for the campaign endpoints,
including the paginated listing envelope.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from productlobby.core.database.entities.campaigns import CAMPAIGN_CATEGORIES, CampaignStatus, CampaignTemplate


def _check_category(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip().lower()
    if value not in CAMPAIGN_CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(CAMPAIGN_CATEGORIES)}")
    return value


class CampaignCreate(BaseModel):
    """Schema for creating a campaign via API."""

    title: str = Field(min_length=5, max_length=200, description="Short name of the requested product")
    description: str = Field(min_length=10, max_length=10000, description="What is being asked for and why")
    category: str = Field(description="Campaign category")
    template: CampaignTemplate = Field(default=CampaignTemplate.FEATURE)
    status: CampaignStatus = Field(default=CampaignStatus.LIVE, description="DRAFT or LIVE")
    currency: str = Field(default="GBP", min_length=3, max_length=3)
    open_to_alternatives: bool = Field(default=False)
    targeted_brand_id: Optional[str] = Field(default=None, description="Brand the campaign is aimed at")
    completeness_score: int = Field(default=0, ge=0, le=100)

    @field_validator("category")
    @classmethod
    def _valid_category(cls, value: Optional[str]) -> Optional[str]:
        return _check_category(value)

    @field_validator("status")
    @classmethod
    def _initial_status(cls, value: CampaignStatus) -> CampaignStatus:
        if value not in (CampaignStatus.DRAFT, CampaignStatus.LIVE):
            raise ValueError("New campaigns start as DRAFT or LIVE")
        return value

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()


class CampaignUpdate(BaseModel):
    """Schema for updating a campaign via API."""

    title: Optional[str] = Field(default=None, min_length=5, max_length=200)
    description: Optional[str] = Field(default=None, min_length=10, max_length=10000)
    category: Optional[str] = None
    status: Optional[CampaignStatus] = None
    open_to_alternatives: Optional[bool] = None
    targeted_brand_id: Optional[str] = None
    completeness_score: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("category")
    @classmethod
    def _valid_category(cls, value: Optional[str]) -> Optional[str]:
        return _check_category(value)


class CampaignRead(BaseModel):
    """Schema for reading a campaign from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    description: str
    category: str
    template: CampaignTemplate
    status: CampaignStatus
    currency: str
    open_to_alternatives: bool
    creator_user_id: str
    targeted_brand_id: Optional[str] = None
    completeness_score: int
    signal_score: Optional[float] = None
    signal_score_updated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CampaignPage(BaseModel):
    """One page of a campaign listing."""

    items: List[CampaignRead]
    total: int
    page: int
    limit: int
    has_more: bool
