"""
Comment and contribution event repositories.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.comments import Comment, ContributionEvent, ContributionEventType
from .base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """Repository for comment data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Comment)

    async def list_for_campaign(self, campaign_id: str, limit: Optional[int] = None) -> List[Comment]:
        """List a campaign's comments in posting order."""
        stmt = (
            select(Comment)
            .where(Comment.campaign_id == campaign_id)
            .order_by(Comment.created_at.asc())  # type: ignore[attr-defined]
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_created_between(self, campaign_id: str, start: datetime, end: Optional[datetime] = None) -> int:
        stmt = (
            select(func.count(Comment.id))
            .where(Comment.campaign_id == campaign_id)
            .where(Comment.created_at >= start)
        )
        if end is not None:
            stmt = stmt.where(Comment.created_at < end)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def contents_since(self, campaign_id: str, since: Optional[datetime] = None) -> List[Tuple[str, datetime]]:
        """Return ``(content, created_at)`` pairs for sentiment analysis."""
        stmt = select(Comment.content, Comment.created_at).where(Comment.campaign_id == campaign_id)
        if since is not None:
            stmt = stmt.where(Comment.created_at >= since)
        result = await self.session.execute(stmt)
        return [(content, created_at) for content, created_at in result.all()]

    async def delete_thread(self, comment_id: str) -> bool:
        """Delete a comment together with its direct replies."""
        comment = await self.get_by_id(comment_id)
        if comment is None:
            return False
        await self.session.execute(sa_delete(Comment).where(Comment.parent_id == comment_id))
        await self.session.delete(comment)
        await self.session.commit()
        return True


class ContributionEventRepository(BaseRepository[ContributionEvent]):
    """Repository for contribution event data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ContributionEvent)

    async def list_for_campaign(
        self,
        campaign_id: str,
        event_types: Optional[Iterable[ContributionEventType]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_end: bool = True,
    ) -> List[ContributionEvent]:
        """List a campaign's events, oldest first.

        Args:
            campaign_id: Campaign id
            event_types: Restrict to these event types
            start: Inclusive lower bound on ``created_at``
            end: Upper bound on ``created_at``
            include_end: Whether ``end`` itself is inside the window

        Returns:
            List of events
        """
        stmt = select(ContributionEvent).where(ContributionEvent.campaign_id == campaign_id)
        if event_types is not None:
            stmt = stmt.where(ContributionEvent.event_type.in_(list(event_types)))  # type: ignore[attr-defined]
        if start is not None:
            stmt = stmt.where(ContributionEvent.created_at >= start)
        if end is not None:
            upper = ContributionEvent.created_at <= end if include_end else ContributionEvent.created_at < end
            stmt = stmt.where(upper)
        stmt = stmt.order_by(ContributionEvent.created_at.asc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, campaign_id: str, user_id: str) -> List[ContributionEvent]:
        stmt = (
            select(ContributionEvent)
            .where(ContributionEvent.campaign_id == campaign_id)
            .where(ContributionEvent.user_id == user_id)
            .order_by(ContributionEvent.created_at.asc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
