"""
Campaign Metrics Service.

Fetches the rows each calculator in ``productlobby.scoring`` needs, reshapes
them into the calculator's inputs and returns the calculator's result. No
formula lives here.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from productlobby.core.database.entities import Campaign, ContributionEventType
from productlobby.core.database.repositories import RepoBundle
from productlobby.scoring.analytics import (
    AnalyticsReport,
    EventRecord,
    build_report,
    period_window,
    split_by_window,
)
from productlobby.scoring.engagement import (
    EngagementSummary,
    SupporterActivityCounts,
    platform_average_score,
    summarize_engagement,
)
from productlobby.scoring.milestones import MilestoneReport, milestone_report
from productlobby.scoring.retention import RetentionReport, SupporterActivity, calculate_retention
from productlobby.scoring.sentiment import DailySentiment, SentimentBreakdown, analyze_texts, daily_trend
from productlobby.scoring.utils import percentage_change, utc_now
from productlobby.scoring.weather import WeatherInputs, WeatherReport, campaign_weather

from .signal_scores import calculate_signal_score

WEEK = timedelta(days=7)

# Event types counted by the engagement score; lobbies, pledges, comments and
# poll votes come from their own tables
EVENT_ACTIVITY_KINDS: Dict[ContributionEventType, str] = {
    ContributionEventType.SOCIAL_SHARE: "shares",
    ContributionEventType.BOOKMARK: "bookmarks",
    ContributionEventType.REACTION: "reactions",
    ContributionEventType.FOLLOW: "follows",
}

SHARE_CAMPAIGN_ACTION = "share_campaign"
SHARE_MILESTONE_ACTION = "share_milestone"


async def campaign_sentiment(repos: RepoBundle, campaign: Campaign) -> Tuple[SentimentBreakdown, List[DailySentiment]]:
    """Sentiment over every comment plus the seven-day daily trend."""
    samples = await repos.comments.contents_since(campaign.id)
    breakdown = analyze_texts(content for content, _ in samples)
    return breakdown, daily_trend(samples)


async def campaign_retention(repos: RepoBundle, campaign: Campaign, now: Optional[datetime] = None) -> RetentionReport:
    """Retention of the campaign's lobbying supporters.

    A supporter joins when they lobby. Their later pledges, comments, poll
    votes and recorded events all count as activity.
    """
    lobbies = await repos.lobbies.list_for_campaign(campaign.id)
    activity: Dict[str, List[datetime]] = defaultdict(list)
    for pledge in await repos.pledges.list_for_campaign(campaign.id, include_private=True):
        activity[pledge.user_id].append(pledge.created_at)
    for comment in await repos.comments.list_for_campaign(campaign.id):
        activity[comment.user_id].append(comment.created_at)
    for vote in await repos.polls.list_votes_for_campaign(campaign.id):
        activity[vote.user_id].append(vote.created_at)
    for event in await repos.events.list_for_campaign(campaign.id):
        if event.user_id is not None:
            activity[event.user_id].append(event.created_at)

    supporters = [
        SupporterActivity(user_id=lobby.user_id, joined_at=lobby.created_at, activity=activity.get(lobby.user_id, []))
        for lobby in lobbies
    ]
    return calculate_retention(supporters, now=now)


async def campaign_weather_report(repos: RepoBundle, campaign: Campaign) -> WeatherReport:
    """Weather from lobby growth, recent comments, comment sentiment and the signal score."""
    now = utc_now()
    week_ago = now - WEEK
    lobbies_this_week = await repos.lobbies.count_created_between(campaign.id, week_ago)
    lobbies_last_week = await repos.lobbies.count_created_between(campaign.id, week_ago - WEEK, week_ago)
    comments_this_week = await repos.comments.count_created_between(campaign.id, week_ago)

    breakdown, _ = await campaign_sentiment(repos, campaign)
    signal = campaign.signal_score
    if signal is None:
        signal = (await calculate_signal_score(repos, campaign)).score

    return campaign_weather(
        WeatherInputs(
            lobbies_growth=percentage_change(lobbies_last_week, lobbies_this_week),
            comments_velocity=comments_this_week,
            sentiment_score=breakdown.score,
            signal_score=signal,
        )
    )


async def campaign_engagement(repos: RepoBundle, campaign: Campaign) -> EngagementSummary:
    """Engagement scores for everyone who did anything on the campaign."""
    counts: Dict[str, SupporterActivityCounts] = {}

    def supporter(user_id: str) -> SupporterActivityCounts:
        if user_id not in counts:
            counts[user_id] = SupporterActivityCounts(user_id=user_id)
        return counts[user_id]

    for lobby in await repos.lobbies.list_for_campaign(campaign.id):
        supporter(lobby.user_id).record("lobbies", lobby.created_at)
    for pledge in await repos.pledges.list_for_campaign(campaign.id, include_private=True):
        supporter(pledge.user_id).record("pledges", pledge.created_at)
    for comment in await repos.comments.list_for_campaign(campaign.id):
        supporter(comment.user_id).record("comments", comment.created_at)
    for vote in await repos.polls.list_votes_for_campaign(campaign.id):
        supporter(vote.user_id).record("poll_votes", vote.created_at)
    for event in await repos.events.list_for_campaign(campaign.id, event_types=list(EVENT_ACTIVITY_KINDS)):
        if event.user_id is not None:
            supporter(event.user_id).record(EVENT_ACTIVITY_KINDS[event.event_type], event.created_at)

    for user_id, entry in counts.items():
        user = await repos.users.get_by_id(user_id)
        if user is not None:
            entry.display_name = user.display_name
            entry.handle = user.handle
            entry.avatar = user.avatar

    platform_activities = (
        await repos.lobbies.count()
        + await repos.pledges.count()
        + await repos.comments.count()
        + await repos.events.count()
    )
    platform_average = platform_average_score(platform_activities, await repos.users.count())
    return summarize_engagement(list(counts.values()), platform_average=platform_average)


def _milestone_key(metadata: dict) -> Optional[Tuple[str, int]]:
    milestone_type = metadata.get("milestoneType")
    threshold = metadata.get("milestoneThreshold")
    if isinstance(milestone_type, str) and isinstance(threshold, int) and not isinstance(threshold, bool):
        return milestone_type, threshold
    return None


async def campaign_milestones(repos: RepoBundle, campaign: Campaign) -> MilestoneReport:
    """Milestone progress.

    Supporters are pledges, votes are creator poll votes, shares are recorded
    ``share_campaign`` social shares and a milestone's achievement time is the
    first time it was shared.
    """
    shares = await repos.events.list_for_campaign(campaign.id, event_types=[ContributionEventType.SOCIAL_SHARE])
    total_shares = sum(1 for e in shares if (e.event_metadata or {}).get("action") == SHARE_CAMPAIGN_ACTION)

    achieved_events: Dict[Tuple[str, int], datetime] = {}
    for event in shares:
        key = _milestone_key(event.event_metadata or {})
        if key is not None and key not in achieved_events:
            achieved_events[key] = event.created_at

    return milestone_report(
        total_supporters=await repos.pledges.count({"campaign_id": campaign.id}),
        total_votes=len(await repos.polls.list_votes_for_campaign(campaign.id)),
        total_shares=total_shares,
        days_active=max(0, (utc_now() - campaign.created_at).days),
        achieved_events=achieved_events,
    )


async def campaign_analytics(
    repos: RepoBundle, campaign: Campaign, period: Optional[str], now: Optional[datetime] = None
) -> AnalyticsReport:
    """Analytics over the campaign's contribution events for one period."""
    now = now or utc_now()
    events = [
        EventRecord(user_id=e.user_id, created_at=e.created_at, metadata=e.event_metadata or {})
        for e in await repos.events.list_for_campaign(campaign.id, end=now)
    ]
    first_event = events[0].created_at if events else None
    window = period_window(period, now=now, first_event=first_event)
    current, previous = split_by_window(events, window)
    return build_report(window, current, previous, now=now)
