"""
Activity Feed Service.

Merges a campaign's lobbies, public pledges, comments, polls and published
surveys into one timeline, newest first. A user's feed is the merged timeline
of every campaign on their watchlist.
"""

from __future__ import annotations

from typing import List

from productlobby.core.database.entities import Campaign, SurveyStatus, User
from productlobby.core.database.repositories import RepoBundle
from productlobby.core.models.io import Feed, FeedItem

DEFAULT_FEED_LIMIT = 50


def _intensity_label(value: str) -> str:
    return value.replace("_", " ").lower()


async def campaign_items(repos: RepoBundle, campaign: Campaign) -> List[FeedItem]:
    items: List[FeedItem] = []
    for lobby in await repos.lobbies.list_for_campaign(campaign.id):
        items.append(
            FeedItem(
                type="lobby",
                id=lobby.id,
                campaign_id=campaign.id,
                user_id=lobby.user_id,
                summary=f"Lobbied for {campaign.title}: {_intensity_label(lobby.intensity.value)}",
                created_at=lobby.created_at,
                data={"intensity": lobby.intensity.value},
            )
        )
    for pledge in await repos.pledges.list_for_campaign(campaign.id):
        items.append(
            FeedItem(
                type="pledge",
                id=pledge.id,
                campaign_id=campaign.id,
                user_id=pledge.user_id,
                summary=f"Pledged {pledge.pledge_type.value.lower()} for {campaign.title}",
                created_at=pledge.created_at,
                data={"pledge_type": pledge.pledge_type.value},
            )
        )
    for comment in await repos.comments.list_for_campaign(campaign.id):
        items.append(
            FeedItem(
                type="comment",
                id=comment.id,
                campaign_id=campaign.id,
                user_id=comment.user_id,
                summary=comment.content[:140],
                created_at=comment.created_at,
                data={"parent_id": comment.parent_id},
            )
        )
    for poll in await repos.polls.list_for_campaign(campaign.id):
        items.append(
            FeedItem(
                type="poll",
                id=poll.id,
                campaign_id=campaign.id,
                user_id=poll.creator_id,
                summary=f"New poll: {poll.question}",
                created_at=poll.created_at,
                data={"poll_type": poll.poll_type.value, "status": poll.status.value},
            )
        )
    for survey in await repos.surveys.list_for_campaign(campaign.id):
        if survey.status == SurveyStatus.DRAFT:
            continue
        items.append(
            FeedItem(
                type="survey",
                id=survey.id,
                campaign_id=campaign.id,
                user_id=survey.creator_id,
                summary=f"New survey: {survey.title}",
                created_at=survey.published_at or survey.created_at,
                data={"survey_type": survey.survey_type.value, "status": survey.status.value},
            )
        )
    return items


def _page(items: List[FeedItem], limit: int) -> Feed:
    items.sort(key=lambda item: item.created_at, reverse=True)
    return Feed(items=items[:limit], total=len(items))


async def campaign_feed(repos: RepoBundle, campaign: Campaign, limit: int = DEFAULT_FEED_LIMIT) -> Feed:
    return _page(await campaign_items(repos, campaign), limit)


async def user_feed(repos: RepoBundle, user: User, limit: int = DEFAULT_FEED_LIMIT) -> Feed:
    """Timeline across every campaign on ``user``'s watchlist."""
    items: List[FeedItem] = []
    for entry in await repos.watchlist.list_for_user(user.id):
        campaign = await repos.campaigns.get_by_id(entry.campaign_id)
        if campaign is not None:
            items.extend(await campaign_items(repos, campaign))
    return _page(items, limit)
