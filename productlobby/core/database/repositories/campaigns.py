"""
Campaign repository interface and implementation.

This module provides data access operations for campaigns: lookup by id or
slug, filtered and sorted listings, cached signal score maintenance and
cascading deletes of everything a campaign owns.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.campaigns import Campaign, CampaignStatus
from ..entities.comments import Comment, ContributionEvent
from ..entities.lobbies import Lobby, Pledge
from ..entities.polls import CreatorPoll, CreatorPollOption, CreatorPollVote
from ..entities.surveys import Survey, SurveyAnswer, SurveyQuestion, SurveyResponse
from ..entities.teams import TeamMember, WatchlistItem
from .base import BaseRepository, QueryBuilder

CAMPAIGN_SORTS = ("newest", "trending", "signal")
TRENDING_WINDOW_DAYS = 7


class CampaignRepository(BaseRepository[Campaign]):
    """Repository for campaign data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session for database operations
        """
        super().__init__(session, Campaign)

    async def get_by_id_or_slug(self, identifier: str) -> Optional[Campaign]:
        """Get a campaign by UUID or slug.

        Args:
            identifier: Campaign id or slug

        Returns:
            Campaign instance or None
        """
        stmt = select(Campaign).where(or_(Campaign.id == identifier, Campaign.slug == identifier))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def slug_exists(self, slug: str) -> bool:
        stmt = select(func.count()).select_from(Campaign).where(Campaign.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def update(self, entity: Campaign) -> Campaign:
        """Update a campaign, stamping ``updated_at``."""
        entity.updated_at = utc_now()
        return await super().update(entity)

    async def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[CampaignStatus] = None,
        brand_id: Optional[str] = None,
        sort: str = "trending",
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Campaign], int]:
        """List campaigns with filtering, sorting and pagination.

        Args:
            query: Case-insensitive substring matched against title and description
            category: Category filter
            status: Status filter
            brand_id: Targeted brand filter
            sort: ``newest``, ``trending`` (lobbies in the last week) or ``signal``
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (campaigns on the page, total matching campaigns)
        """
        stmt = select(Campaign)
        stmt = QueryBuilder.apply_filters(
            stmt, Campaign, {"category": category, "status": status, "targeted_brand_id": brand_id}
        )
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(
                or_(func.lower(Campaign.title).like(pattern), func.lower(Campaign.description).like(pattern))
            )

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = int((await self.session.execute(count_stmt)).scalar_one())

        if sort == "newest":
            stmt = stmt.order_by(Campaign.created_at.desc())  # type: ignore[attr-defined]
        elif sort == "signal":
            stmt = stmt.order_by(
                func.coalesce(Campaign.signal_score, -1).desc(),
                Campaign.created_at.desc(),  # type: ignore[attr-defined]
            )
        else:
            since = utc_now() - timedelta(days=TRENDING_WINDOW_DAYS)
            recent = (
                select(Lobby.campaign_id, func.count(Lobby.id).label("recent_lobbies"))
                .where(Lobby.created_at >= since)
                .group_by(Lobby.campaign_id)
                .subquery()
            )
            stmt = stmt.outerjoin(recent, recent.c.campaign_id == Campaign.id).order_by(
                func.coalesce(recent.c.recent_lobbies, 0).desc(),
                Campaign.created_at.desc(),  # type: ignore[attr-defined]
            )

        stmt = QueryBuilder.apply_pagination(stmt, limit, (page - 1) * limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def set_signal_score(self, campaign_id: str, score: float) -> Optional[Campaign]:
        """Store a freshly computed signal score on the campaign row."""
        campaign = await self.get_by_id(campaign_id)
        if campaign is None:
            return None
        campaign.signal_score = score
        campaign.signal_score_updated_at = utc_now()
        self.session.add(campaign)
        await self.session.commit()
        await self.session.refresh(campaign)
        return campaign

    async def list_stale_signal_scores(self, stale_before: datetime, limit: int = 100) -> List[str]:
        """Ids of LIVE campaigns whose cached score is missing or older than ``stale_before``."""
        stmt = (
            select(Campaign.id)
            .where(Campaign.status == CampaignStatus.LIVE)
            .where(
                or_(
                    Campaign.signal_score_updated_at.is_(None),  # type: ignore[union-attr]
                    Campaign.signal_score_updated_at < stale_before,  # type: ignore[operator]
                )
            )
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_signal_range(self, minimum: float, maximum: float, limit: int = 20) -> List[Campaign]:
        """LIVE campaigns with ``minimum <= signal_score < maximum``, highest first."""
        stmt = (
            select(Campaign)
            .where(Campaign.status == CampaignStatus.LIVE)
            .where(Campaign.signal_score >= minimum)  # type: ignore[operator]
            .where(Campaign.signal_score < maximum)  # type: ignore[operator]
            .order_by(Campaign.signal_score.desc())  # type: ignore[union-attr]
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, entity_id: str) -> bool:
        """Delete a campaign and every row that belongs to it.

        Args:
            entity_id: Campaign id

        Returns:
            True if deleted, False if not found
        """
        campaign = await self.get_by_id(entity_id)
        if campaign is None:
            return False

        poll_ids = select(CreatorPoll.id).where(CreatorPoll.campaign_id == entity_id)
        survey_ids = select(Survey.id).where(Survey.campaign_id == entity_id)
        in_surveys = SurveyResponse.survey_id.in_(survey_ids)  # type: ignore[attr-defined]
        response_ids = select(SurveyResponse.id).where(in_surveys)

        statements = [
            sa_delete(CreatorPollVote).where(CreatorPollVote.poll_id.in_(poll_ids)),  # type: ignore[attr-defined]
            sa_delete(CreatorPollOption).where(CreatorPollOption.poll_id.in_(poll_ids)),  # type: ignore[attr-defined]
            sa_delete(CreatorPoll).where(CreatorPoll.campaign_id == entity_id),
            sa_delete(SurveyAnswer).where(SurveyAnswer.response_id.in_(response_ids)),  # type: ignore[attr-defined]
            sa_delete(SurveyResponse).where(SurveyResponse.survey_id.in_(survey_ids)),  # type: ignore[attr-defined]
            sa_delete(SurveyQuestion).where(SurveyQuestion.survey_id.in_(survey_ids)),  # type: ignore[attr-defined]
            sa_delete(Survey).where(Survey.campaign_id == entity_id),
            sa_delete(Comment).where(Comment.campaign_id == entity_id),
            sa_delete(ContributionEvent).where(ContributionEvent.campaign_id == entity_id),
            sa_delete(Lobby).where(Lobby.campaign_id == entity_id),
            sa_delete(Pledge).where(Pledge.campaign_id == entity_id),
            sa_delete(TeamMember).where(TeamMember.campaign_id == entity_id),
            sa_delete(WatchlistItem).where(WatchlistItem.campaign_id == entity_id),
        ]
        for stmt in statements:
            await self.session.execute(stmt)

        await self.session.delete(campaign)
        await self.session.commit()
        return True
