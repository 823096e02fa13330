"""
Campaign Endpoints.

Create, list, read, update and delete campaigns. Campaigns are addressed by
id or slug. Only a campaign's creator may change or delete it.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Query, status

from productlobby.core.cache import campaign_prefix
from productlobby.core.database.entities import Campaign, CampaignStatus
from productlobby.core.database.repositories import RepoBundle
from productlobby.core.database.repositories.campaigns import CAMPAIGN_SORTS
from productlobby.core.errors import InvalidRequestError, NotFoundError
from productlobby.core.logging_config import get_logger
from productlobby.core.models.io import CampaignCreate, CampaignPage, CampaignRead, CampaignUpdate
from productlobby.core.text import slugify
from productlobby.server.services.deps import (
    CacheDep,
    CampaignDep,
    CurrentUser,
    ReposDep,
    ensure_campaign_creator,
)
from productlobby.server.services.signal_scores import recompute_signal_score_in_background

logger = get_logger(__name__)

router = APIRouter()

MAX_SLUG_LENGTH = 200


async def unique_slug(repos: RepoBundle, title: str) -> str:
    """Slug derived from ``title``, suffixed with -2, -3... until unused."""
    base = slugify(title)[:MAX_SLUG_LENGTH].strip("-") or "campaign"
    slug = base
    suffix = 2
    while await repos.campaigns.slug_exists(slug):
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug


async def _check_brand(repos: RepoBundle, brand_id: Optional[str]) -> None:
    if brand_id is not None and await repos.brands.get_by_id(brand_id) is None:
        raise NotFoundError("Brand", brand_id)


@router.post(
    "",
    response_model=CampaignRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Campaign",
    description="Create a campaign requesting a product or feature. The slug is derived from the title.",
    responses={401: {"description": "Authentication required"}, 404: {"description": "Targeted brand not found"}},
)
async def create_campaign(campaign_in: CampaignCreate, user: CurrentUser, repos: ReposDep) -> CampaignRead:
    await _check_brand(repos, campaign_in.targeted_brand_id)
    campaign = Campaign(
        **campaign_in.model_dump(),
        slug=await unique_slug(repos, campaign_in.title),
        creator_user_id=user.id,
    )
    campaign = await repos.campaigns.create(campaign)
    logger.info(f"Campaign {campaign.id} created by {user.id}")
    return CampaignRead.model_validate(campaign)


@router.get(
    "",
    response_model=CampaignPage,
    summary="List Campaigns",
    description="Search, filter, sort (newest, trending, signal) and paginate campaigns.",
)
async def list_campaigns(
    repos: ReposDep,
    query: Optional[str] = Query(default=None, max_length=200, description="Matches title or description"),
    category: Optional[str] = Query(default=None),
    status_filter: Optional[CampaignStatus] = Query(default=None, alias="status"),
    brand_id: Optional[str] = Query(default=None),
    sort: str = Query(default="trending"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> CampaignPage:
    if sort not in CAMPAIGN_SORTS:
        raise InvalidRequestError(f"sort must be one of: {', '.join(CAMPAIGN_SORTS)}")

    items, total = await repos.campaigns.search(
        query=query,
        category=category.lower() if category else None,
        status=status_filter,
        brand_id=brand_id,
        sort=sort,
        page=page,
        limit=limit,
    )
    return CampaignPage(
        items=[CampaignRead.model_validate(c) for c in items],
        total=total,
        page=page,
        limit=limit,
        has_more=page * limit < total,
    )


@router.get(
    "/{campaign_id}",
    response_model=CampaignRead,
    summary="Get Campaign",
    responses={404: {"description": "Campaign not found"}},
)
async def read_campaign(campaign: CampaignDep) -> CampaignRead:
    return CampaignRead.model_validate(campaign)


@router.patch(
    "/{campaign_id}",
    response_model=CampaignRead,
    summary="Update Campaign",
    responses={403: {"description": "Caller is not the creator"}, 404: {"description": "Campaign not found"}},
)
async def update_campaign(
    campaign_in: CampaignUpdate,
    campaign: CampaignDep,
    user: CurrentUser,
    repos: ReposDep,
    cache: CacheDep,
    background_tasks: BackgroundTasks,
) -> CampaignRead:
    ensure_campaign_creator(campaign, user, "edit this campaign")
    changes = campaign_in.model_dump(exclude_unset=True)
    if "targeted_brand_id" in changes:
        await _check_brand(repos, changes["targeted_brand_id"])

    for field, value in changes.items():
        setattr(campaign, field, value)
    campaign = await repos.campaigns.update(campaign)
    await cache.delete_prefix(campaign_prefix(campaign.id))

    if "completeness_score" in changes:
        background_tasks.add_task(recompute_signal_score_in_background, campaign.id, cache)
    return CampaignRead.model_validate(campaign)


@router.delete(
    "/{campaign_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Campaign",
    description="Delete a campaign together with everything attached to it.",
    responses={403: {"description": "Caller is not the creator"}, 404: {"description": "Campaign not found"}},
)
async def delete_campaign(campaign: CampaignDep, user: CurrentUser, repos: ReposDep, cache: CacheDep) -> None:
    ensure_campaign_creator(campaign, user, "delete this campaign")
    await repos.campaigns.delete(campaign.id)
    await cache.delete_prefix(campaign_prefix(campaign.id))
    logger.info(f"Campaign {campaign.id} deleted by {user.id}")
