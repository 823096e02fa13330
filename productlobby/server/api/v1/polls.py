"""
Creator Poll Endpoints.

Campaign creators manage polls under ``/campaigns/{campaign_id}/polls``;
supporters vote through ``/polls/{poll_id}/vote``.
"""

from typing import List

from fastapi import APIRouter, Query, status

from productlobby.core.database.base import utc_now
from productlobby.core.database.entities import CreatorPoll
from productlobby.core.models.io import PollCreate, PollRead, PollUpdate, PollVoteCreate
from productlobby.server.services.deps import (
    CampaignDep,
    CurrentUser,
    CurrentUserOptional,
    ReposDep,
    ensure_campaign_creator,
)
from productlobby.server.services.polls import build_poll_read, cast_vote, load_poll, retract_vote

router = APIRouter()


@router.get(
    "/campaigns/{campaign_id}/polls",
    response_model=List[PollRead],
    summary="List Polls",
    description="Polls of a campaign, newest first, with results and the caller's own votes.",
)
async def list_polls(campaign: CampaignDep, repos: ReposDep, user: CurrentUserOptional) -> List[PollRead]:
    return [await build_poll_read(repos, poll, user) for poll in await repos.polls.list_for_campaign(campaign.id)]


@router.post(
    "/campaigns/{campaign_id}/polls",
    response_model=PollRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Poll",
    responses={403: {"description": "Caller is not the creator"}},
)
async def create_poll(poll_in: PollCreate, campaign: CampaignDep, user: CurrentUser, repos: ReposDep) -> PollRead:
    ensure_campaign_creator(campaign, user, "create polls")
    poll = CreatorPoll(
        campaign_id=campaign.id,
        creator_id=user.id,
        question=poll_in.question,
        description=poll_in.description,
        poll_type=poll_in.poll_type,
        max_selections=poll_in.max_selections,
        closes_at=poll_in.closes_at,
    )
    poll = await repos.polls.create_with_options(poll, poll_in.options)
    return await build_poll_read(repos, poll, user)


@router.get(
    "/campaigns/{campaign_id}/polls/{poll_id}",
    response_model=PollRead,
    summary="Get Poll",
    responses={404: {"description": "Poll not found"}},
)
async def read_poll(poll_id: str, campaign: CampaignDep, repos: ReposDep, user: CurrentUserOptional) -> PollRead:
    poll = await load_poll(repos, poll_id, campaign.id)
    return await build_poll_read(repos, poll, user)


@router.patch(
    "/campaigns/{campaign_id}/polls/{poll_id}",
    response_model=PollRead,
    summary="Update Poll",
    description="Edit the question, close or reopen the poll, or move its closing time.",
    responses={403: {"description": "Caller is not the creator"}},
)
async def update_poll(
    poll_id: str, poll_in: PollUpdate, campaign: CampaignDep, user: CurrentUser, repos: ReposDep
) -> PollRead:
    ensure_campaign_creator(campaign, user, "update polls")
    poll = await load_poll(repos, poll_id, campaign.id)
    for field, value in poll_in.model_dump(exclude_unset=True).items():
        setattr(poll, field, value)
    poll.updated_at = utc_now()
    poll = await repos.polls.update(poll)
    return await build_poll_read(repos, poll, user)


@router.delete(
    "/campaigns/{campaign_id}/polls/{poll_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Poll",
    responses={403: {"description": "Caller is not the creator"}},
)
async def delete_poll(poll_id: str, campaign: CampaignDep, user: CurrentUser, repos: ReposDep) -> None:
    ensure_campaign_creator(campaign, user, "delete polls")
    poll = await load_poll(repos, poll_id, campaign.id)
    await repos.polls.delete(poll.id)


@router.post(
    "/polls/{poll_id}/vote",
    response_model=PollRead,
    summary="Vote",
    description="Vote for one option. Returns the poll with updated results.",
    responses={
        400: {"description": "Poll closed, invalid option, repeat vote, too many selections or bad rank"},
        409: {"description": "Rank already taken"},
    },
)
async def vote(poll_id: str, vote_in: PollVoteCreate, user: CurrentUser, repos: ReposDep) -> PollRead:
    poll = await load_poll(repos, poll_id)
    await cast_vote(repos, poll, user, vote_in)
    return await build_poll_read(repos, poll, user)


@router.delete(
    "/polls/{poll_id}/vote",
    response_model=PollRead,
    summary="Retract Vote",
    responses={404: {"description": "No vote for this option"}},
)
async def unvote(
    poll_id: str, user: CurrentUser, repos: ReposDep, option_id: str = Query(min_length=1)
) -> PollRead:
    poll = await load_poll(repos, poll_id)
    await retract_vote(repos, poll, user, option_id)
    return await build_poll_read(repos, poll, user)
