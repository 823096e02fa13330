"""
Database entity models.

Each module represents a business domain and the tables it owns:

- users: users and brands
- campaigns: campaigns and their cached signal score
- lobbies: lobbies and pledges
- comments: comments and contribution events
- polls: creator polls, options and votes
- surveys: surveys, questions, responses and answers
- teams: campaign team members and watchlists
"""

from .campaigns import Campaign, CampaignStatus, CampaignTemplate
from .comments import Comment, ContributionEvent, ContributionEventType
from .lobbies import Lobby, LobbyIntensity, LobbyStatus, Pledge, PledgeType
from .polls import CreatorPoll, CreatorPollOption, CreatorPollVote, PollStatus, PollType
from .surveys import (
    QuestionType,
    Survey,
    SurveyAnswer,
    SurveyQuestion,
    SurveyResponse,
    SurveyStatus,
    SurveyType,
)
from .teams import TeamMember, TeamMemberStatus, TeamRole, WatchlistItem
from .users import Brand, User

__all__ = [
    "Brand",
    "Campaign",
    "CampaignStatus",
    "CampaignTemplate",
    "Comment",
    "ContributionEvent",
    "ContributionEventType",
    "CreatorPoll",
    "CreatorPollOption",
    "CreatorPollVote",
    "Lobby",
    "LobbyIntensity",
    "LobbyStatus",
    "Pledge",
    "PledgeType",
    "PollStatus",
    "PollType",
    "QuestionType",
    "Survey",
    "SurveyAnswer",
    "SurveyQuestion",
    "SurveyResponse",
    "SurveyStatus",
    "SurveyType",
    "TeamMember",
    "TeamMemberStatus",
    "TeamRole",
    "User",
    "WatchlistItem",
]
