"""
Team member and watchlist repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.teams import TeamMember, TeamMemberStatus, WatchlistItem
from .base import BaseRepository


class TeamMemberRepository(BaseRepository[TeamMember]):
    """Repository for campaign team data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TeamMember)

    async def list_for_campaign(self, campaign_id: str, status: Optional[TeamMemberStatus] = None) -> List[TeamMember]:
        stmt = select(TeamMember).where(TeamMember.campaign_id == campaign_id)
        if status is not None:
            stmt = stmt.where(TeamMember.status == status)
        stmt = stmt.order_by(TeamMember.created_at.asc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_email(self, campaign_id: str, email: str) -> Optional[TeamMember]:
        stmt = select(TeamMember).where(TeamMember.campaign_id == campaign_id).where(TeamMember.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def accept(self, member: TeamMember, user_id: str) -> TeamMember:
        """Turn a pending invite into an active membership for ``user_id``."""
        member.user_id = user_id
        member.status = TeamMemberStatus.ACTIVE
        member.joined_at = utc_now()
        return await self.update(member)


class WatchlistRepository(BaseRepository[WatchlistItem]):
    """Repository for watchlist data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WatchlistItem)

    async def list_for_user(self, user_id: str) -> List[WatchlistItem]:
        stmt = (
            select(WatchlistItem)
            .where(WatchlistItem.user_id == user_id)
            .order_by(WatchlistItem.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find(self, user_id: str, campaign_id: str) -> Optional[WatchlistItem]:
        stmt = (
            select(WatchlistItem)
            .where(WatchlistItem.user_id == user_id)
            .where(WatchlistItem.campaign_id == campaign_id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()
