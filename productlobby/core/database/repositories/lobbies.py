"""
Lobby and pledge repositories.

Besides plain CRUD these expose the aggregate queries the signal score and
the other campaign calculators are built from.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.lobbies import Lobby, LobbyIntensity, LobbyStatus, Pledge, PledgeType
from ..entities.users import User
from .base import BaseRepository


class LobbyRepository(BaseRepository[Lobby]):
    """Repository for lobby data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Lobby)

    async def get_for_user(self, campaign_id: str, user_id: str) -> Optional[Lobby]:
        stmt = select(Lobby).where(Lobby.campaign_id == campaign_id).where(Lobby.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_campaign(self, campaign_id: str, limit: Optional[int] = None) -> List[Lobby]:
        stmt = (
            select(Lobby)
            .where(Lobby.campaign_id == campaign_id)
            .order_by(Lobby.created_at.desc())  # type: ignore[attr-defined]
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_intensity(self, campaign_id: str) -> Dict[LobbyIntensity, int]:
        """Count VERIFIED lobbies per intensity. Every intensity is present in the result."""
        stmt = (
            select(Lobby.intensity, func.count(Lobby.id))
            .where(Lobby.campaign_id == campaign_id)
            .where(Lobby.status == LobbyStatus.VERIFIED)
            .group_by(Lobby.intensity)
        )
        result = await self.session.execute(stmt)
        counts = {intensity: 0 for intensity in LobbyIntensity}
        for intensity, count in result.all():
            counts[LobbyIntensity(intensity)] = int(count)
        return counts

    async def count_created_between(self, campaign_id: str, start: datetime, end: Optional[datetime] = None) -> int:
        """Count lobbies created in ``[start, end)``; open-ended when ``end`` is None."""
        stmt = select(func.count(Lobby.id)).where(Lobby.campaign_id == campaign_id).where(Lobby.created_at >= start)
        if end is not None:
            stmt = stmt.where(Lobby.created_at < end)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class PledgeRepository(BaseRepository[Pledge]):
    """Repository for pledge data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Pledge)

    async def list_for_campaign(
        self, campaign_id: str, include_private: bool = False, viewer_id: Optional[str] = None
    ) -> List[Pledge]:
        """List pledges on a campaign, newest first.

        Args:
            campaign_id: Campaign id
            include_private: Whether pledges marked private are returned
            viewer_id: User whose own private pledges are returned regardless

        Returns:
            List of pledges
        """
        stmt = select(Pledge).where(Pledge.campaign_id == campaign_id)
        if not include_private:
            public = Pledge.is_private == False  # noqa: E712
            stmt = stmt.where(or_(public, Pledge.user_id == viewer_id) if viewer_id else public)
        stmt = stmt.order_by(Pledge.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_type(self, campaign_id: str) -> Dict[PledgeType, int]:
        stmt = (
            select(Pledge.pledge_type, func.count(Pledge.id))
            .where(Pledge.campaign_id == campaign_id)
            .group_by(Pledge.pledge_type)
        )
        result = await self.session.execute(stmt)
        counts = {pledge_type: 0 for pledge_type in PledgeType}
        for pledge_type, count in result.all():
            counts[PledgeType(pledge_type)] = int(count)
        return counts

    async def count_phone_verified_intent(self, campaign_id: str) -> int:
        """Count INTENT pledges whose author has a verified phone number."""
        stmt = (
            select(func.count(Pledge.id))
            .join(User, User.id == Pledge.user_id)
            .where(Pledge.campaign_id == campaign_id)
            .where(Pledge.pledge_type == PledgeType.INTENT)
            .where(User.phone_verified == True)  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def intent_price_ceilings(self, campaign_id: str) -> List[float]:
        stmt = (
            select(Pledge.price_ceiling)
            .where(Pledge.campaign_id == campaign_id)
            .where(Pledge.pledge_type == PledgeType.INTENT)
            .where(Pledge.price_ceiling.is_not(None))  # type: ignore[union-attr]
        )
        result = await self.session.execute(stmt)
        return [float(value) for value in result.scalars().all()]

    async def count_intent_between(self, campaign_id: str, start: datetime, end: Optional[datetime] = None) -> int:
        """Count INTENT pledges created in ``[start, end)``."""
        stmt = (
            select(func.count(Pledge.id))
            .where(Pledge.campaign_id == campaign_id)
            .where(Pledge.pledge_type == PledgeType.INTENT)
            .where(Pledge.created_at >= start)
        )
        if end is not None:
            stmt = stmt.where(Pledge.created_at < end)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
