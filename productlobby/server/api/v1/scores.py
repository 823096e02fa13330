"""
Campaign Score Endpoints.

Signal score, business case, sentiment, retention, weather and engagement
for a campaign. Results are cached per campaign until the campaign's data
changes or the cache entry expires.
"""

from typing import Awaitable, Callable

from fastapi import APIRouter, Query
from pydantic import BaseModel

from productlobby.core.cache import KeyValueCache, campaign_key
from productlobby.core.models.io import (
    CampaignBusinessCase,
    CampaignEngagement,
    CampaignRead,
    CampaignRetention,
    CampaignSentiment,
    CampaignSignalScore,
    CampaignWeather,
    SignalTierListing,
)
from productlobby.scoring.signal_score import TIER_RANGES, SignalTier
from productlobby.server.services.deps import CacheDep, CampaignDep, CurrentUser, ReposDep, ensure_campaign_creator
from productlobby.server.services.metrics import (
    campaign_engagement,
    campaign_retention,
    campaign_sentiment,
    campaign_weather_report,
)
from productlobby.server.services.signal_scores import campaign_business_case, campaigns_in_tier, refresh_signal_score

router = APIRouter()


async def _cached(
    cache: KeyValueCache, campaign_id: str, name: str, compute: Callable[[], Awaitable[BaseModel]]
) -> dict:
    async def factory() -> dict:
        return (await compute()).model_dump(mode="json")

    return await cache.get_or_set(campaign_key(campaign_id, name), factory)


@router.get(
    "/campaigns/{campaign_id}/signal-score",
    response_model=CampaignSignalScore,
    summary="Signal Score",
    description="Demand signal from pledges, price ceilings, momentum and lobby conviction, 0-100.",
)
async def read_signal_score(campaign: CampaignDep, repos: ReposDep, cache: CacheDep) -> CampaignSignalScore:
    async def compute() -> CampaignSignalScore:
        result = await refresh_signal_score(repos, campaign)
        return CampaignSignalScore(campaign_id=campaign.id, **result.model_dump())

    return CampaignSignalScore.model_validate(await _cached(cache, campaign.id, "signal-score", compute))


@router.get(
    "/campaigns/{campaign_id}/business-case",
    response_model=CampaignBusinessCase,
    summary="Business Case",
    description="Conservative, moderate and optimistic revenue scenarios with a confidence grade.",
)
async def read_business_case(campaign: CampaignDep, repos: ReposDep, cache: CacheDep) -> CampaignBusinessCase:
    async def compute() -> CampaignBusinessCase:
        case = await campaign_business_case(repos, campaign)
        return CampaignBusinessCase(campaign_id=campaign.id, campaign_title=campaign.title, **case.model_dump())

    return CampaignBusinessCase.model_validate(await _cached(cache, campaign.id, "business-case", compute))


@router.get(
    "/campaigns/{campaign_id}/sentiment",
    response_model=CampaignSentiment,
    summary="Comment Sentiment",
    description="Lexicon sentiment over the campaign's comments with a seven-day daily trend.",
)
async def read_sentiment(campaign: CampaignDep, repos: ReposDep, cache: CacheDep) -> CampaignSentiment:
    async def compute() -> CampaignSentiment:
        breakdown, trend = await campaign_sentiment(repos, campaign)
        return CampaignSentiment(campaign_id=campaign.id, trend=trend, **breakdown.model_dump())

    return CampaignSentiment.model_validate(await _cached(cache, campaign.id, "sentiment", compute))


@router.get(
    "/campaigns/{campaign_id}/retention",
    response_model=CampaignRetention,
    summary="Supporter Retention",
    description="Share of lobbying supporters still active after 7, 14, 30 and 90 days.",
)
async def read_retention(campaign: CampaignDep, repos: ReposDep, cache: CacheDep) -> CampaignRetention:
    async def compute() -> CampaignRetention:
        report = await campaign_retention(repos, campaign)
        return CampaignRetention(campaign_id=campaign.id, **report.model_dump())

    return CampaignRetention.model_validate(await _cached(cache, campaign.id, "retention", compute))


@router.get(
    "/campaigns/{campaign_id}/weather",
    response_model=CampaignWeather,
    summary="Campaign Weather",
    description="Momentum summarized as a weather report.",
)
async def read_weather(campaign: CampaignDep, repos: ReposDep, cache: CacheDep) -> CampaignWeather:
    async def compute() -> CampaignWeather:
        report = await campaign_weather_report(repos, campaign)
        return CampaignWeather(campaign_id=campaign.id, **report.model_dump())

    return CampaignWeather.model_validate(await _cached(cache, campaign.id, "weather", compute))


@router.get(
    "/campaigns/{campaign_id}/engagement-score",
    response_model=CampaignEngagement,
    summary="Supporter Engagement",
    responses={403: {"description": "Caller is not the creator"}},
)
async def read_engagement(
    campaign: CampaignDep, user: CurrentUser, repos: ReposDep, cache: CacheDep
) -> CampaignEngagement:
    ensure_campaign_creator(campaign, user, "view engagement scores")

    async def compute() -> CampaignEngagement:
        summary = await campaign_engagement(repos, campaign)
        return CampaignEngagement(campaign_id=campaign.id, **summary.model_dump())

    return CampaignEngagement.model_validate(await _cached(cache, campaign.id, "engagement", compute))


@router.get(
    "/signal/tiers/{tier}",
    response_model=SignalTierListing,
    summary="Campaigns by Signal Tier",
    description="LIVE campaigns whose stored signal score falls in the tier, strongest first.",
)
async def read_signal_tier(
    tier: SignalTier, repos: ReposDep, limit: int = Query(default=20, ge=1, le=100)
) -> SignalTierListing:
    minimum, maximum = TIER_RANGES[tier]
    campaigns = await campaigns_in_tier(repos, tier, limit=limit)
    return SignalTierListing(
        tier=tier,
        min_score=minimum,
        max_score=maximum,
        campaigns=[CampaignRead.model_validate(c) for c in campaigns],
    )
