"""
Creator poll repository.

One repository serves polls, their options and votes, since options and
votes are never read without their poll.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.polls import CreatorPoll, CreatorPollOption, CreatorPollVote
from .base import BaseRepository


class PollRepository(BaseRepository[CreatorPoll]):
    """Repository for creator poll data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CreatorPoll)

    async def create_with_options(self, poll: CreatorPoll, option_texts: Sequence[str]) -> CreatorPoll:
        """Persist a poll and its options in one transaction.

        Args:
            poll: Poll to create
            option_texts: Option labels, stored in the given order

        Returns:
            Persisted poll
        """
        self.session.add(poll)
        await self.session.flush()
        for index, text in enumerate(option_texts):
            self.session.add(CreatorPollOption(poll_id=poll.id, text=text.strip(), order=index))
        await self.session.commit()
        await self.session.refresh(poll)
        return poll

    async def list_for_campaign(self, campaign_id: str) -> List[CreatorPoll]:
        stmt = (
            select(CreatorPoll)
            .where(CreatorPoll.campaign_id == campaign_id)
            .order_by(CreatorPoll.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_options(self, poll_id: str) -> List[CreatorPollOption]:
        stmt = (
            select(CreatorPollOption)
            .where(CreatorPollOption.poll_id == poll_id)
            .order_by(CreatorPollOption.order.asc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_votes(self, poll_id: str) -> List[CreatorPollVote]:
        stmt = select(CreatorPollVote).where(CreatorPollVote.poll_id == poll_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_votes_for_campaign(self, campaign_id: str) -> List[CreatorPollVote]:
        stmt = (
            select(CreatorPollVote)
            .join(CreatorPoll, CreatorPoll.id == CreatorPollVote.poll_id)
            .where(CreatorPoll.campaign_id == campaign_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_user_vote(
        self, poll_id: str, user_id: str, option_id: Optional[str] = None
    ) -> Optional[CreatorPollVote]:
        """Find a user's vote on a poll, optionally for one option."""
        stmt = (
            select(CreatorPollVote)
            .where(CreatorPollVote.poll_id == poll_id)
            .where(CreatorPollVote.user_id == user_id)
        )
        if option_id is not None:
            stmt = stmt.where(CreatorPollVote.option_id == option_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_user_votes(self, poll_id: str, user_id: str) -> int:
        stmt = (
            select(func.count(CreatorPollVote.id))
            .where(CreatorPollVote.poll_id == poll_id)
            .where(CreatorPollVote.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def add_vote(self, vote: CreatorPollVote, replaces: Optional[CreatorPollVote] = None) -> CreatorPollVote:
        """Store a vote, deleting ``replaces`` in the same transaction."""
        if replaces is not None:
            await self.session.delete(replaces)
        self.session.add(vote)
        await self.session.commit()
        await self.session.refresh(vote)
        return vote

    async def remove_vote(self, vote: CreatorPollVote) -> None:
        await self.session.delete(vote)
        await self.session.commit()

    async def delete(self, entity_id: str) -> bool:
        """Delete a poll along with its options and votes."""
        poll = await self.get_by_id(entity_id)
        if poll is None:
            return False
        await self.session.execute(sa_delete(CreatorPollVote).where(CreatorPollVote.poll_id == entity_id))
        await self.session.execute(sa_delete(CreatorPollOption).where(CreatorPollOption.poll_id == entity_id))
        await self.session.delete(poll)
        await self.session.commit()
        return True
