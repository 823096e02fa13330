"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- users: user and brand I/O models
- campaigns: campaign I/O models and the listing page envelope
- lobbies: lobby and pledge I/O models
- comments: comment, contribution event and milestone share I/O models
- polls: creator poll I/O models
- surveys: survey I/O models
- teams: team and watchlist I/O models
- feeds: activity feed I/O models
- scores: campaign metric responses
"""

from .campaigns import CampaignCreate, CampaignPage, CampaignRead, CampaignUpdate
from .comments import (
    CommentCreate,
    CommentRead,
    CommentUpdate,
    ContributionEventCreate,
    ContributionEventRead,
    MilestoneShareCreate,
)
from .feeds import Feed, FeedItem
from .lobbies import LobbyCreate, LobbyRead, LobbyStats, PledgeCreate, PledgeRead
from .polls import PollCreate, PollOptionResult, PollRead, PollUpdate, PollVoteCreate, UserPollVote
from .scores import (
    CampaignBusinessCase,
    CampaignEngagement,
    CampaignMilestones,
    CampaignRetention,
    CampaignSentiment,
    CampaignSignalScore,
    CampaignWeather,
    MilestoneShareRead,
    SignalTierListing,
)
from .surveys import (
    SurveyCreate,
    SurveyQuestionCreate,
    SurveyQuestionRead,
    SurveyRead,
    SurveyResponseCreate,
    SurveyResponseRead,
)
from .teams import TeamInvite, TeamMemberRead, TeamRoster, WatchlistAdd, WatchlistItemRead
from .users import BrandCreate, BrandRead, UserCreate, UserRead

__all__ = [
    "BrandCreate",
    "BrandRead",
    "CampaignBusinessCase",
    "CampaignCreate",
    "CampaignEngagement",
    "CampaignMilestones",
    "CampaignPage",
    "CampaignRead",
    "CampaignRetention",
    "CampaignSentiment",
    "CampaignSignalScore",
    "CampaignUpdate",
    "CampaignWeather",
    "CommentCreate",
    "CommentRead",
    "CommentUpdate",
    "ContributionEventCreate",
    "ContributionEventRead",
    "Feed",
    "FeedItem",
    "LobbyCreate",
    "LobbyRead",
    "LobbyStats",
    "MilestoneShareCreate",
    "MilestoneShareRead",
    "PledgeCreate",
    "PledgeRead",
    "PollCreate",
    "PollOptionResult",
    "PollRead",
    "PollUpdate",
    "PollVoteCreate",
    "SignalTierListing",
    "SurveyCreate",
    "SurveyQuestionCreate",
    "SurveyQuestionRead",
    "SurveyRead",
    "SurveyResponseCreate",
    "SurveyResponseRead",
    "TeamInvite",
    "TeamMemberRead",
    "TeamRoster",
    "UserCreate",
    "UserPollVote",
    "UserRead",
    "WatchlistAdd",
    "WatchlistItemRead",
]
