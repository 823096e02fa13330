"""
Survey I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from productlobby.core.database.entities.surveys import QuestionType, SurveyStatus, SurveyType

_OPTION_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.RANKING)


class SurveyQuestionCreate(BaseModel):
    """Schema for one survey question.

    MULTIPLE_CHOICE and RANKING questions need at least two options. MATRIX
    questions take ``[rows, columns]``. RATING_SCALE defaults to a 1-5 scale.
    """

    question: str = Field(min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    question_type: QuestionType
    options: Optional[List[Any]] = None
    min_scale: Optional[int] = None
    max_scale: Optional[int] = None
    min_label: Optional[str] = Field(default=None, max_length=100)
    max_label: Optional[str] = Field(default=None, max_length=100)
    required: bool = False
    order: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _shape_matches_type(self) -> "SurveyQuestionCreate":
        if self.question_type in _OPTION_TYPES:
            if not self.options or len(self.options) < 2 or not all(isinstance(o, str) and o for o in self.options):
                raise ValueError(f"{self.question_type.value} questions need at least two text options")
        elif self.question_type == QuestionType.MATRIX:
            if (
                not self.options
                or len(self.options) != 2
                or not all(isinstance(axis, list) and axis for axis in self.options)
            ):
                raise ValueError("MATRIX questions need options as [rows, columns]")
        elif self.question_type == QuestionType.RATING_SCALE:
            self.min_scale = 1 if self.min_scale is None else self.min_scale
            self.max_scale = 5 if self.max_scale is None else self.max_scale
            if self.min_scale >= self.max_scale:
                raise ValueError("min_scale must be lower than max_scale")
        return self


class SurveyCreate(BaseModel):
    """Schema for creating a draft survey."""

    title: str = Field(min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    survey_type: SurveyType = Field(default=SurveyType.DETAILED_SURVEY)
    questions: List[SurveyQuestionCreate] = Field(min_length=1, max_length=50)


class SurveyQuestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question: str
    description: Optional[str] = None
    question_type: QuestionType
    options: Optional[Any] = None
    min_scale: Optional[int] = None
    max_scale: Optional[int] = None
    min_label: Optional[str] = None
    max_label: Optional[str] = None
    required: bool
    order: int


class SurveyRead(BaseModel):
    """Schema for reading a survey, questions included when requested."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    creator_id: str
    title: str
    description: Optional[str] = None
    survey_type: SurveyType
    status: SurveyStatus
    response_count: int
    published_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_at: datetime
    questions: List[SurveyQuestionRead] = Field(default_factory=list)


class SurveyResponseCreate(BaseModel):
    """Answers keyed by question id."""

    answers: Dict[str, Any] = Field(default_factory=dict)
    complete: bool = Field(default=True, description="False saves a partial response")


class SurveyResponseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    survey_id: str
    user_id: str
    started_at: datetime
    completed_at: Optional[datetime] = None
