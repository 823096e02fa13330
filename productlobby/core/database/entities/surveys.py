"""
Survey entity models.

Surveys are longer-form questionnaires than polls. Question options and
answers are stored as JSON so every question type shares one table.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlmodel import JSON, Column, Field, Text

from ..base import Base, UTCDateTime, new_id, utc_now


class SurveyType(str, Enum):
    QUICK_POLL = "QUICK_POLL"
    DETAILED_SURVEY = "DETAILED_SURVEY"
    NPS_SURVEY = "NPS_SURVEY"
    FEATURE_PRIORITY = "FEATURE_PRIORITY"


class SurveyStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CLOSED = "CLOSED"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    RATING_SCALE = "RATING_SCALE"
    OPEN_TEXT = "OPEN_TEXT"
    RANKING = "RANKING"
    MATRIX = "MATRIX"


class Survey(Base, table=True):
    """Table: surveys"""

    __tablename__ = "surveys"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="campaigns.id", max_length=36, index=True)
    creator_id: str = Field(foreign_key="users.id", max_length=36)
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, sa_type=Text)
    survey_type: SurveyType = Field(default=SurveyType.DETAILED_SURVEY)
    status: SurveyStatus = Field(default=SurveyStatus.DRAFT, index=True)
    response_count: int = Field(default=0)
    published_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    closed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Survey(id={self.id}, status={self.status})"


class SurveyQuestion(Base, table=True):
    """Table: survey_questions"""

    __tablename__ = "survey_questions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    survey_id: str = Field(foreign_key="surveys.id", max_length=36, index=True)
    question: str = Field(max_length=500)
    description: Optional[str] = Field(default=None, sa_type=Text)
    question_type: QuestionType
    # MATRIX questions store [rows, columns]
    options: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    min_scale: Optional[int] = Field(default=None)
    max_scale: Optional[int] = Field(default=None)
    min_label: Optional[str] = Field(default=None, max_length=100)
    max_label: Optional[str] = Field(default=None, max_length=100)
    required: bool = Field(default=False)
    order: int = Field(default=0)


class SurveyResponse(Base, table=True):
    """Table: survey_responses"""

    __tablename__ = "survey_responses"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    survey_id: str = Field(foreign_key="surveys.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    started_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    completed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)


class SurveyAnswer(Base, table=True):
    """Table: survey_answers"""

    __tablename__ = "survey_answers"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    response_id: str = Field(foreign_key="survey_responses.id", max_length=36, index=True)
    question_id: str = Field(foreign_key="survey_questions.id", max_length=36, index=True)
    answer: Any = Field(default=None, sa_column=Column(JSON))
