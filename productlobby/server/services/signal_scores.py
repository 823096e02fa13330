"""
Signal Score Service.

Gathers a campaign's aggregate counts from the database, runs the pure
signal score calculator over them and keeps the cached score on the campaign
row current.

Recomputes triggered by lobby and pledge mutations run as FastAPI background
tasks: they open their own session, are never awaited by the request and are
not retried. Failures are logged.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

from productlobby.core.cache import KeyValueCache, campaign_prefix, get_cache
from productlobby.core.database import async_session_maker
from productlobby.core.database.entities import Campaign, LobbyIntensity, PledgeType
from productlobby.core.database.repositories import RepoBundle, build_repos_from_session
from productlobby.core.logging_config import get_logger
from productlobby.core.monitoring import log_signal_score_update
from productlobby.scoring import SignalScoreInputs, SignalScoreResult, compute_signal_score
from productlobby.scoring.business_case import BusinessCase, BusinessCaseInputs, calculate_business_case
from productlobby.scoring.signal_score import TIER_RANGES, SignalTier
from productlobby.scoring.utils import calculate_percentile, utc_now
from productlobby.server.core.config import settings

logger = get_logger(__name__)

MOMENTUM_WINDOW_DAYS = 7


async def gather_signal_inputs(repos: RepoBundle, campaign: Campaign) -> SignalScoreInputs:
    """Collect the aggregate counts the signal score is computed from.

    Args:
        repos: Repository bundle
        campaign: Campaign to score

    Returns:
        Calculator inputs; fraud risk is reported as zero
    """
    now = utc_now()
    week_ago = now - timedelta(days=MOMENTUM_WINDOW_DAYS)
    two_weeks_ago = week_ago - timedelta(days=MOMENTUM_WINDOW_DAYS)

    pledge_counts = await repos.pledges.count_by_type(campaign.id)
    lobby_counts = await repos.lobbies.count_by_intensity(campaign.id)
    price_ceilings = await repos.pledges.intent_price_ceilings(campaign.id)

    return SignalScoreInputs(
        support_count=pledge_counts[PledgeType.SUPPORT],
        intent_count=pledge_counts[PledgeType.INTENT],
        intent_phone_verified_count=await repos.pledges.count_phone_verified_intent(campaign.id),
        median_price_ceiling=calculate_percentile(price_ceilings, 50),
        p90_price_ceiling=calculate_percentile(price_ceilings, 90),
        intent_last_7_days=await repos.pledges.count_intent_between(campaign.id, week_ago),
        intent_prev_7_days=await repos.pledges.count_intent_between(campaign.id, two_weeks_ago, week_ago),
        fraud_risk_score=0.0,
        neat_idea_count=lobby_counts[LobbyIntensity.NEAT_IDEA],
        probably_buy_count=lobby_counts[LobbyIntensity.PROBABLY_BUY],
        take_my_money_count=lobby_counts[LobbyIntensity.TAKE_MY_MONEY],
        completeness_score=campaign.completeness_score,
    )


async def calculate_signal_score(repos: RepoBundle, campaign: Campaign) -> SignalScoreResult:
    """Compute a campaign's signal score without storing it."""
    return compute_signal_score(await gather_signal_inputs(repos, campaign))


async def campaign_business_case(repos: RepoBundle, campaign: Campaign) -> BusinessCase:
    """Project a brand's customers and revenue from the same counts the signal score uses."""
    inputs = await gather_signal_inputs(repos, campaign)
    price_ceilings = await repos.pledges.intent_price_ceilings(campaign.id)
    signal = compute_signal_score(inputs)
    return calculate_business_case(BusinessCaseInputs.from_signal_inputs(inputs, price_ceilings, signal.score))


async def refresh_signal_score(repos: RepoBundle, campaign: Campaign) -> SignalScoreResult:
    """Compute a campaign's signal score and store it on the campaign row."""
    result = await calculate_signal_score(repos, campaign)
    await repos.campaigns.set_signal_score(campaign.id, result.score)
    log_signal_score_update(campaign.id, result.score, result.tier.value)
    return result


async def recompute_signal_score_in_background(campaign_id: str, cache: Optional[KeyValueCache] = None) -> None:
    """Background task body: recompute one campaign's score in a fresh session.

    Args:
        campaign_id: Campaign to recompute
        cache: Cache whose campaign entries are dropped afterwards
    """
    try:
        async with async_session_maker() as session:
            repos = build_repos_from_session(session=session)
            campaign = await repos.campaigns.get_by_id(campaign_id)
            if campaign is None:
                logger.warning(f"Signal score recompute skipped, campaign {campaign_id} no longer exists")
                return
            result = await refresh_signal_score(repos, campaign)
        await (cache or get_cache()).delete_prefix(campaign_prefix(campaign_id))
        logger.debug(f"Recomputed signal score for campaign {campaign_id}: {result.score}")
    except Exception as e:
        logger.error(f"Signal score recompute failed for campaign {campaign_id}: {e}", exc_info=True)


async def refresh_stale_signal_scores(
    repos: RepoBundle,
    stale_minutes: Optional[int] = None,
    batch_size: Optional[int] = None,
) -> int:
    """Recompute LIVE campaigns whose cached score is missing or stale.

    Args:
        repos: Repository bundle
        stale_minutes: Age after which a score is stale; defaults to settings
        batch_size: Maximum campaigns refreshed; defaults to settings

    Returns:
        Number of campaigns refreshed
    """
    config = settings.signal_score
    stale_minutes = config.stale_minutes if stale_minutes is None else stale_minutes
    batch_size = config.refresh_batch_size if batch_size is None else batch_size
    stale_before = utc_now() - timedelta(minutes=stale_minutes)

    refreshed = 0
    for campaign_id in await repos.campaigns.list_stale_signal_scores(stale_before, limit=batch_size):
        campaign = await repos.campaigns.get_by_id(campaign_id)
        if campaign is None:
            continue
        await refresh_signal_score(repos, campaign)
        refreshed += 1

    logger.info(f"Refreshed {refreshed} stale signal score(s)")
    return refreshed


async def campaigns_in_tier(repos: RepoBundle, tier: SignalTier, limit: int = 20) -> List[Campaign]:
    """LIVE campaigns whose cached score falls in ``tier``'s half-open range."""
    minimum, maximum = TIER_RANGES[tier]
    return await repos.campaigns.list_by_signal_range(minimum, maximum, limit=limit)
