"""
Request Dependencies.

Provides the database session, the repository bundle, the cache, the calling
user and the campaign named in the path to API endpoints.

The caller is identified by the ``X-User-Id`` header (configurable through
``PRODUCTLOBBY_USER_HEADER``); establishing that identity is the job of
whatever sits in front of this service.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from productlobby.core.cache import KeyValueCache, get_cache
from productlobby.core.database import get_session
from productlobby.core.database.entities import Campaign, User
from productlobby.core.database.repositories import RepoBundle, build_repos_from_session
from productlobby.core.errors import AuthenticationRequiredError, NotFoundError, PermissionDeniedError
from productlobby.server.core.config import settings

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_repos(session: SessionDep) -> RepoBundle:
    return build_repos_from_session(session=session)


ReposDep = Annotated[RepoBundle, Depends(get_repos)]
CacheDep = Annotated[KeyValueCache, Depends(get_cache)]


async def get_current_user_optional(request: Request, repos: ReposDep) -> Optional[User]:
    """The calling user, or None for anonymous requests and unknown ids."""
    user_id = request.headers.get(settings.user_header, "").strip()
    if not user_id:
        return None
    return await repos.users.get_by_id(user_id)


async def get_current_user(user: Annotated[Optional[User], Depends(get_current_user_optional)]) -> User:
    if user is None:
        raise AuthenticationRequiredError()
    return user


CurrentUserOptional = Annotated[Optional[User], Depends(get_current_user_optional)]
CurrentUser = Annotated[User, Depends(get_current_user)]


async def load_campaign(repos: RepoBundle, identifier: str) -> Campaign:
    """Fetch a campaign by id or slug.

    Raises:
        NotFoundError: If no campaign matches
    """
    campaign = await repos.campaigns.get_by_id_or_slug(identifier)
    if campaign is None:
        raise NotFoundError("Campaign", identifier)
    return campaign


async def get_path_campaign(campaign_id: str, repos: ReposDep) -> Campaign:
    return await load_campaign(repos, campaign_id)


CampaignDep = Annotated[Campaign, Depends(get_path_campaign)]


def ensure_campaign_creator(campaign: Campaign, user: User, action: str = "manage this campaign") -> None:
    """Raise PermissionDeniedError unless ``user`` created ``campaign``."""
    if campaign.creator_user_id != user.id:
        raise PermissionDeniedError(f"Only the campaign creator can {action}")
