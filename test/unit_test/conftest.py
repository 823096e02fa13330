from __future__ import annotations

from itertools import count
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from productlobby.core import cache as cache_module
from productlobby.core.cache import KeyValueCache, MemoryBackend
from productlobby.core.database import async_session_maker, create_all, engine
from productlobby.core.database.entities import (
    Campaign,
    CampaignStatus,
    Comment,
    Lobby,
    LobbyIntensity,
    Pledge,
    PledgeType,
    User,
)
from productlobby.core.database.repositories import RepoBundle, build_repos_from_session


@pytest_asyncio.fixture
async def db_engine():
    """The application engine over a fresh in-memory database.

    The engine uses a single shared connection, so request handlers, background
    tasks and the test itself all see the same data. Disposing it afterwards
    drops the database.
    """
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(db_engine) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession) -> RepoBundle:
    return build_repos_from_session(session=session)


@pytest.fixture
def cache(monkeypatch: pytest.MonkeyPatch) -> KeyValueCache:
    """A fresh in-process cache installed as the process-wide cache."""
    fresh = KeyValueCache(MemoryBackend(), default_ttl=300)
    monkeypatch.setattr(cache_module, "_cache", fresh)
    return fresh


class Factory:
    """Persists domain rows with sensible defaults for tests."""

    def __init__(self, repos: RepoBundle) -> None:
        self.repos = repos
        self._seq = count(1)

    async def user(self, name: Optional[str] = None, phone_verified: bool = False) -> User:
        n = next(self._seq)
        name = name or f"user{n}"
        return await self.repos.users.create(
            User(email=f"{name}@example.com", display_name=name.title(), handle=name, phone_verified=phone_verified)
        )

    async def campaign(
        self,
        creator: User,
        title: str = "Waterproof Trail Runners",
        status: CampaignStatus = CampaignStatus.LIVE,
        category: str = "apparel",
        **fields,
    ) -> Campaign:
        n = next(self._seq)
        return await self.repos.campaigns.create(
            Campaign(
                slug=f"campaign-{n}",
                title=title,
                description="Built to survive a wet autumn.",
                category=category,
                status=status,
                creator_user_id=creator.id,
                **fields,
            )
        )

    async def lobby(
        self, campaign: Campaign, user: User, intensity: LobbyIntensity = LobbyIntensity.NEAT_IDEA, **fields
    ) -> Lobby:
        return await self.repos.lobbies.create(
            Lobby(campaign_id=campaign.id, user_id=user.id, intensity=intensity, **fields)
        )

    async def pledge(
        self,
        campaign: Campaign,
        user: User,
        pledge_type: PledgeType = PledgeType.SUPPORT,
        price_ceiling: Optional[float] = None,
        **fields,
    ) -> Pledge:
        if pledge_type == PledgeType.INTENT:
            fields.setdefault("timeframe_days", 90)
        return await self.repos.pledges.create(
            Pledge(
                campaign_id=campaign.id,
                user_id=user.id,
                pledge_type=pledge_type,
                price_ceiling=price_ceiling,
                **fields,
            )
        )

    async def comment(self, campaign: Campaign, user: User, content: str, **fields) -> Comment:
        return await self.repos.comments.create(
            Comment(campaign_id=campaign.id, user_id=user.id, content=content, **fields)
        )


@pytest.fixture
def factory(repos: RepoBundle) -> Factory:
    return Factory(repos)
