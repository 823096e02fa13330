"""
Campaign metric I/O models.

Each response wraps a calculator result with the campaign it was computed
for. The calculator models already describe their own fields, so these only
add the campaign id.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from productlobby.scoring.business_case import BusinessCase
from productlobby.scoring.engagement import EngagementSummary
from productlobby.scoring.milestones import MilestoneReport
from productlobby.scoring.retention import RetentionReport
from productlobby.scoring.sentiment import DailySentiment, SentimentBreakdown
from productlobby.scoring.signal_score import SignalScoreResult, SignalTier
from productlobby.scoring.weather import WeatherReport

from .campaigns import CampaignRead


class CampaignSignalScore(SignalScoreResult):
    campaign_id: str


class CampaignBusinessCase(BusinessCase):
    campaign_id: str
    campaign_title: str


class CampaignSentiment(SentimentBreakdown):
    campaign_id: str
    trend: List[DailySentiment] = Field(default_factory=list)


class CampaignRetention(RetentionReport):
    campaign_id: str


class CampaignWeather(WeatherReport):
    campaign_id: str


class CampaignEngagement(EngagementSummary):
    campaign_id: str


class CampaignMilestones(MilestoneReport):
    campaign_id: str


class MilestoneShareRead(BaseModel):
    event_id: str
    message: str


class SignalTierListing(BaseModel):
    """LIVE campaigns whose cached score falls in one tier."""

    tier: SignalTier
    min_score: float
    max_score: float
    campaigns: List[CampaignRead]
