"""
Creator poll I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from productlobby.core.database.base import as_utc
from productlobby.core.database.entities.polls import PollStatus, PollType


class PollCreate(BaseModel):
    """Schema for creating a poll with 2-10 options."""

    question: str = Field(max_length=500, description="Question put to supporters")
    description: Optional[str] = Field(default=None, max_length=2000)
    poll_type: PollType = Field(default=PollType.SINGLE_SELECT)
    max_selections: int = Field(default=1, ge=1, le=10, description="Only used by MULTI_SELECT polls")
    options: List[str] = Field(min_length=2, max_length=10)
    closes_at: Optional[datetime] = None

    _closes_at_utc = field_validator("closes_at")(as_utc)

    @field_validator("question")
    @classmethod
    def _question_length(cls, value: str) -> str:
        if len(value.strip()) < 5:
            raise ValueError("Question must be between 5 and 500 characters")
        return value.strip()

    @field_validator("options")
    @classmethod
    def _options_present(cls, value: List[str]) -> List[str]:
        cleaned = [option.strip() for option in value]
        if any(not option for option in cleaned):
            raise ValueError("All options must be non-empty")
        if any(len(option) > 200 for option in cleaned):
            raise ValueError("Options must be at most 200 characters")
        return cleaned

    @model_validator(mode="after")
    def _selections_fit(self) -> "PollCreate":
        if self.poll_type == PollType.MULTI_SELECT and self.max_selections > len(self.options):
            raise ValueError("max_selections cannot exceed the number of options")
        if self.poll_type != PollType.MULTI_SELECT:
            self.max_selections = 1
        return self


class PollUpdate(BaseModel):
    question: Optional[str] = Field(default=None, min_length=5, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    status: Optional[PollStatus] = None
    closes_at: Optional[datetime] = None

    _closes_at_utc = field_validator("closes_at")(as_utc)


class PollVoteCreate(BaseModel):
    """A vote for one option. RANKED polls also carry the rank given to it."""

    option_id: str = Field(min_length=1)
    rank: Optional[int] = Field(default=None, ge=1)


class PollOptionResult(BaseModel):
    id: str
    text: str
    order: int
    vote_count: int
    percentage: int


class UserPollVote(BaseModel):
    option_id: str
    rank: Optional[int] = None


class PollRead(BaseModel):
    """A poll with its aggregated results and the caller's own votes."""

    id: str
    campaign_id: str
    creator_id: str
    question: str
    description: Optional[str] = None
    poll_type: PollType
    max_selections: int
    status: PollStatus
    closes_at: Optional[datetime] = None
    total_votes: int = Field(description="Unique voters")
    created_at: datetime
    updated_at: datetime
    options: List[PollOptionResult]
    user_votes: List[UserPollVote] = Field(default_factory=list)
    user_has_voted: bool = False
    is_creator: bool = False
