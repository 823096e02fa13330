"""
User Endpoints.

Minimal user management for seeding and tests, plus the calling user's
watchlist and the activity feed built from it.
"""

from typing import List

from fastapi import APIRouter, Query, status

from productlobby.core.database.entities import User, WatchlistItem
from productlobby.core.errors import ConflictError, NotFoundError
from productlobby.core.logging_config import get_logger
from productlobby.core.models.io import Feed, UserCreate, UserRead, WatchlistAdd, WatchlistItemRead
from productlobby.server.services.deps import CurrentUser, ReposDep, load_campaign
from productlobby.server.services.feeds import DEFAULT_FEED_LIMIT, user_feed

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Register a user. E-mail addresses and handles must be unique.",
    responses={409: {"description": "E-mail or handle already in use"}},
)
async def create_user(user_in: UserCreate, repos: ReposDep) -> UserRead:
    if await repos.users.get_by_email(user_in.email) is not None:
        raise ConflictError("Email already registered")
    if user_in.handle and await repos.users.get_by_handle(user_in.handle) is not None:
        raise ConflictError("Handle already taken")

    user = await repos.users.create(User.model_validate(user_in))
    logger.info(f"Created user {user.id}")
    return UserRead.model_validate(user)


@router.get("", response_model=List[UserRead], summary="List Users")
async def list_users(
    repos: ReposDep,
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> List[UserRead]:
    return [UserRead.model_validate(u) for u in await repos.users.list(limit=limit, offset=offset)]


@router.get("/me", response_model=UserRead, summary="Current User")
async def read_current_user(user: CurrentUser) -> UserRead:
    return UserRead.model_validate(user)


@router.get(
    "/me/feed",
    response_model=Feed,
    summary="Watchlist Feed",
    description="Activity from every campaign on the caller's watchlist, newest first.",
)
async def read_user_feed(
    user: CurrentUser,
    repos: ReposDep,
    limit: int = Query(default=DEFAULT_FEED_LIMIT, ge=1, le=200),
) -> Feed:
    return await user_feed(repos, user, limit=limit)


@router.get("/me/watchlist", response_model=List[WatchlistItemRead], summary="List Watchlist")
async def list_watchlist(user: CurrentUser, repos: ReposDep) -> List[WatchlistItemRead]:
    return [WatchlistItemRead.model_validate(item) for item in await repos.watchlist.list_for_user(user.id)]


@router.post(
    "/me/watchlist",
    response_model=WatchlistItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Watch Campaign",
    responses={404: {"description": "Campaign not found"}, 409: {"description": "Already watching"}},
)
async def add_to_watchlist(body: WatchlistAdd, user: CurrentUser, repos: ReposDep) -> WatchlistItemRead:
    campaign = await load_campaign(repos, body.campaign_id)
    if await repos.watchlist.find(user.id, campaign.id) is not None:
        raise ConflictError("Campaign is already on your watchlist")
    item = await repos.watchlist.create(WatchlistItem(user_id=user.id, campaign_id=campaign.id))
    return WatchlistItemRead.model_validate(item)


@router.delete(
    "/me/watchlist/{campaign_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unwatch Campaign",
    responses={404: {"description": "Campaign is not on the watchlist"}},
)
async def remove_from_watchlist(campaign_id: str, user: CurrentUser, repos: ReposDep) -> None:
    campaign = await load_campaign(repos, campaign_id)
    item = await repos.watchlist.find(user.id, campaign.id)
    if item is None:
        raise NotFoundError("Watchlist entry", campaign_id)
    await repos.watchlist.delete(item.id)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
async def read_user(user_id: str, repos: ReposDep) -> UserRead:
    user = await repos.users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return UserRead.model_validate(user)
