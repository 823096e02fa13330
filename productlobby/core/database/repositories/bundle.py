"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
sharing one session, so route handlers receive a single dependency.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .campaigns import CampaignRepository
from .comments import CommentRepository, ContributionEventRepository
from .lobbies import LobbyRepository, PledgeRepository
from .polls import PollRepository
from .surveys import SurveyRepository
from .teams import TeamMemberRepository, WatchlistRepository
from .users import BrandRepository, UserRepository


@dataclass(frozen=True)
class RepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    session: AsyncSession
    users: UserRepository
    brands: BrandRepository
    campaigns: CampaignRepository
    lobbies: LobbyRepository
    pledges: PledgeRepository
    comments: CommentRepository
    events: ContributionEventRepository
    polls: PollRepository
    surveys: SurveyRepository
    team: TeamMemberRepository
    watchlist: WatchlistRepository


def build_repos_from_session(*, session: AsyncSession) -> RepoBundle:
    """Build a RepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return RepoBundle(
        session=session,
        users=UserRepository(session),
        brands=BrandRepository(session),
        campaigns=CampaignRepository(session),
        lobbies=LobbyRepository(session),
        pledges=PledgeRepository(session),
        comments=CommentRepository(session),
        events=ContributionEventRepository(session),
        polls=PollRepository(session),
        surveys=SurveyRepository(session),
        team=TeamMemberRepository(session),
        watchlist=WatchlistRepository(session),
    )
