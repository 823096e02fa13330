"""
Lobby and Pledge Endpoints.

Lobbies and pledges are the demand a campaign's signal score is built from.
Every mutation here drops the campaign's cached metrics and schedules a
background recompute of its signal score.
"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Response, status

from productlobby.core.cache import KeyValueCache, campaign_prefix
from productlobby.core.database.entities import Campaign, CampaignStatus, Lobby, Pledge
from productlobby.core.errors import ConflictError, InvalidRequestError, NotFoundError, PermissionDeniedError
from productlobby.core.logging_config import get_logger
from productlobby.core.models.io import LobbyCreate, LobbyRead, LobbyStats, PledgeCreate, PledgeRead
from productlobby.server.services.deps import CacheDep, CampaignDep, CurrentUser, CurrentUserOptional, ReposDep
from productlobby.server.services.signal_scores import recompute_signal_score_in_background

logger = get_logger(__name__)

router = APIRouter()


def _ensure_live(campaign: Campaign) -> None:
    if campaign.status != CampaignStatus.LIVE:
        raise InvalidRequestError("Campaign is not accepting support right now")


async def _after_demand_change(campaign: Campaign, cache: KeyValueCache, background_tasks: BackgroundTasks) -> None:
    await cache.delete_prefix(campaign_prefix(campaign.id))
    background_tasks.add_task(recompute_signal_score_in_background, campaign.id, cache)


@router.post(
    "/{campaign_id}/lobbies",
    response_model=LobbyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Lobby for Campaign",
    description="Lobby for a campaign, or change the intensity of an existing lobby (200).",
    responses={200: {"description": "Existing lobby updated"}, 400: {"description": "Campaign is not live"}},
)
async def lobby_for_campaign(
    lobby_in: LobbyCreate,
    campaign: CampaignDep,
    user: CurrentUser,
    repos: ReposDep,
    cache: CacheDep,
    background_tasks: BackgroundTasks,
    response: Response,
) -> LobbyRead:
    _ensure_live(campaign)
    lobby = await repos.lobbies.get_for_user(campaign.id, user.id)
    if lobby is None:
        lobby = Lobby(campaign_id=campaign.id, user_id=user.id, intensity=lobby_in.intensity)
        lobby = await repos.lobbies.create(lobby)
    else:
        lobby.intensity = lobby_in.intensity
        lobby = await repos.lobbies.update(lobby)
        response.status_code = status.HTTP_200_OK

    await _after_demand_change(campaign, cache, background_tasks)
    return LobbyRead.model_validate(lobby)


@router.get(
    "/{campaign_id}/lobbies",
    response_model=LobbyStats,
    summary="Lobby Counts",
    description="Verified lobby counts per intensity.",
)
async def lobby_stats(campaign: CampaignDep, repos: ReposDep) -> LobbyStats:
    counts = await repos.lobbies.count_by_intensity(campaign.id)
    return LobbyStats(campaign_id=campaign.id, total=sum(counts.values()), by_intensity=counts)


@router.post(
    "/{campaign_id}/pledges",
    response_model=PledgeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Pledge to Campaign",
    description="Pledge SUPPORT, or INTENT to buy with a price ceiling and a 30, 90 or 180 day timeframe.",
    responses={409: {"description": "A pledge of this type already exists"}},
)
async def create_pledge(
    pledge_in: PledgeCreate,
    campaign: CampaignDep,
    user: CurrentUser,
    repos: ReposDep,
    cache: CacheDep,
    background_tasks: BackgroundTasks,
) -> PledgeRead:
    _ensure_live(campaign)
    existing = await repos.pledges.list(
        limit=1, filters={"campaign_id": campaign.id, "user_id": user.id, "pledge_type": pledge_in.pledge_type}
    )
    if existing:
        raise ConflictError(f"You already have a {pledge_in.pledge_type.value} pledge on this campaign")

    pledge = await repos.pledges.create(Pledge(campaign_id=campaign.id, user_id=user.id, **pledge_in.model_dump()))
    await _after_demand_change(campaign, cache, background_tasks)
    logger.info(f"{pledge.pledge_type.value} pledge {pledge.id} on campaign {campaign.id}")
    return PledgeRead.model_validate(pledge)


@router.get(
    "/{campaign_id}/pledges",
    response_model=List[PledgeRead],
    summary="List Pledges",
    description="Public pledges, newest first. Backers also see their own private pledges, the creator sees all.",
)
async def list_pledges(campaign: CampaignDep, repos: ReposDep, user: CurrentUserOptional) -> List[PledgeRead]:
    include_private = user is not None and user.id == campaign.creator_user_id
    pledges = await repos.pledges.list_for_campaign(
        campaign.id, include_private=include_private, viewer_id=user.id if user is not None else None
    )
    return [PledgeRead.model_validate(p) for p in pledges]


@router.delete(
    "/{campaign_id}/pledges/{pledge_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Withdraw Pledge",
    responses={403: {"description": "Pledge belongs to someone else"}, 404: {"description": "Pledge not found"}},
)
async def delete_pledge(
    pledge_id: str,
    campaign: CampaignDep,
    user: CurrentUser,
    repos: ReposDep,
    cache: CacheDep,
    background_tasks: BackgroundTasks,
) -> None:
    pledge = await repos.pledges.get_by_id(pledge_id)
    if pledge is None or pledge.campaign_id != campaign.id:
        raise NotFoundError("Pledge", pledge_id)
    if pledge.user_id != user.id:
        raise PermissionDeniedError("You can only withdraw your own pledges")

    await repos.pledges.delete(pledge.id)
    await _after_demand_change(campaign, cache, background_tasks)
