"""
Creator Poll Service.

Vote rules per poll type and the aggregated view returned to clients.

- SINGLE_SELECT: one vote per user; voting again moves the vote, voting for
  the same option twice is rejected
- MULTI_SELECT: one vote per option, at most ``max_selections`` options
- RANKED: one vote per option carrying a distinct rank, defaulting to the
  lowest rank the voter has free

Percentages are computed over unique voters, so MULTI_SELECT and RANKED
options can add up to more than 100.
"""

from __future__ import annotations

from collections import Counter
from typing import List, Optional, Set

from productlobby.core.database import as_utc
from productlobby.core.database.entities import CreatorPoll, CreatorPollVote, PollStatus, PollType, User
from productlobby.core.database.repositories import RepoBundle
from productlobby.core.errors import ConflictError, InvalidRequestError, NotFoundError
from productlobby.core.models.io import PollOptionResult, PollRead, PollVoteCreate, UserPollVote
from productlobby.scoring.utils import round_int, utc_now


async def build_poll_read(repos: RepoBundle, poll: CreatorPoll, user: Optional[User] = None) -> PollRead:
    """Aggregate a poll's votes for display to ``user`` (or an anonymous caller)."""
    options = await repos.polls.list_options(poll.id)
    votes = await repos.polls.list_votes(poll.id)
    voters = {vote.user_id for vote in votes}
    per_option = Counter(vote.option_id for vote in votes)

    results = [
        PollOptionResult(
            id=option.id,
            text=option.text,
            order=option.order,
            vote_count=per_option[option.id],
            percentage=round_int(per_option[option.id] / len(voters) * 100) if voters else 0,
        )
        for option in options
    ]
    user_votes: List[UserPollVote] = []
    if user is not None:
        user_votes = [UserPollVote(option_id=v.option_id, rank=v.rank) for v in votes if v.user_id == user.id]

    return PollRead(
        id=poll.id,
        campaign_id=poll.campaign_id,
        creator_id=poll.creator_id,
        question=poll.question,
        description=poll.description,
        poll_type=poll.poll_type,
        max_selections=poll.max_selections,
        status=poll.status,
        closes_at=poll.closes_at,
        total_votes=len(voters),
        created_at=poll.created_at,
        updated_at=poll.updated_at,
        options=results,
        user_votes=user_votes,
        user_has_voted=bool(user_votes),
        is_creator=user is not None and user.id == poll.creator_id,
    )


async def load_poll(repos: RepoBundle, poll_id: str, campaign_id: Optional[str] = None) -> CreatorPoll:
    """Fetch a poll, optionally checking it belongs to ``campaign_id``.

    Raises:
        NotFoundError: If the poll does not exist or belongs to another campaign
    """
    poll = await repos.polls.get_by_id(poll_id)
    if poll is None or (campaign_id is not None and poll.campaign_id != campaign_id):
        raise NotFoundError("Poll", poll_id)
    return poll


def next_free_rank(taken: Set[Optional[int]], option_count: int) -> int:
    """Lowest rank in ``1..option_count`` not yet used; past the end when all are taken."""
    return next((rank for rank in range(1, option_count + 1) if rank not in taken), option_count + 1)


def _ensure_open(poll: CreatorPoll) -> None:
    if poll.status != PollStatus.ACTIVE:
        raise InvalidRequestError("Poll is closed")
    if poll.closes_at is not None and as_utc(poll.closes_at) <= utc_now():
        raise InvalidRequestError("Poll has ended")


async def cast_vote(repos: RepoBundle, poll: CreatorPoll, user: User, vote_in: PollVoteCreate) -> CreatorPollVote:
    """Record ``user``'s vote on ``poll`` following the poll type's rules.

    Raises:
        InvalidRequestError: Poll closed, unknown option, repeat vote, too many selections or bad rank
        ConflictError: The rank is already used by another of the user's votes
    """
    _ensure_open(poll)
    options = await repos.polls.list_options(poll.id)
    if vote_in.option_id not in {option.id for option in options}:
        raise InvalidRequestError("Invalid option for this poll")

    if poll.poll_type == PollType.SINGLE_SELECT:
        previous = await repos.polls.find_user_vote(poll.id, user.id)
        if previous is not None and previous.option_id == vote_in.option_id:
            raise InvalidRequestError("You have already voted for this option")
        vote = CreatorPollVote(poll_id=poll.id, option_id=vote_in.option_id, user_id=user.id)
        return await repos.polls.add_vote(vote, replaces=previous)

    if await repos.polls.find_user_vote(poll.id, user.id, vote_in.option_id) is not None:
        raise InvalidRequestError("You have already voted for this option")

    if poll.poll_type == PollType.MULTI_SELECT:
        if await repos.polls.count_user_votes(poll.id, user.id) >= poll.max_selections:
            raise InvalidRequestError(f"You can select at most {poll.max_selections} option(s)")
        vote = CreatorPollVote(poll_id=poll.id, option_id=vote_in.option_id, user_id=user.id)
        return await repos.polls.add_vote(vote)

    own_votes = [v for v in await repos.polls.list_votes(poll.id) if v.user_id == user.id]
    taken = {v.rank for v in own_votes}
    rank = vote_in.rank if vote_in.rank is not None else next_free_rank(taken, len(options))
    if rank > len(options):
        raise InvalidRequestError(f"Rank must be between 1 and {len(options)}")
    if rank in taken:
        raise ConflictError(f"Rank {rank} is already assigned")
    vote = CreatorPollVote(poll_id=poll.id, option_id=vote_in.option_id, user_id=user.id, rank=rank)
    return await repos.polls.add_vote(vote)


async def retract_vote(repos: RepoBundle, poll: CreatorPoll, user: User, option_id: str) -> None:
    """Remove ``user``'s vote for one option of an open poll.

    Raises:
        NotFoundError: If the user has no vote for that option
    """
    _ensure_open(poll)
    vote = await repos.polls.find_user_vote(poll.id, user.id, option_id)
    if vote is None:
        raise NotFoundError("Vote")
    await repos.polls.remove_vote(vote)
