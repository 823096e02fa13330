"""
Survey repository.

Covers surveys, their questions, responses and answers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.surveys import Survey, SurveyAnswer, SurveyQuestion, SurveyResponse
from .base import BaseRepository


class SurveyRepository(BaseRepository[Survey]):
    """Repository for survey data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Survey)

    async def create_with_questions(self, survey: Survey, questions: Sequence[SurveyQuestion]) -> Survey:
        """Persist a survey and its questions in one transaction.

        Questions without an explicit ``order`` keep their position in
        ``questions``.
        """
        self.session.add(survey)
        await self.session.flush()
        for index, question in enumerate(questions):
            question.survey_id = survey.id
            if not question.order:
                question.order = index
            self.session.add(question)
        await self.session.commit()
        await self.session.refresh(survey)
        return survey

    async def list_for_campaign(self, campaign_id: str) -> List[Survey]:
        stmt = (
            select(Survey)
            .where(Survey.campaign_id == campaign_id)
            .order_by(Survey.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_questions(self, survey_id: str) -> List[SurveyQuestion]:
        stmt = (
            select(SurveyQuestion)
            .where(SurveyQuestion.survey_id == survey_id)
            .order_by(SurveyQuestion.order.asc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_responses(self, survey_id: str) -> List[SurveyResponse]:
        stmt = select(SurveyResponse).where(SurveyResponse.survey_id == survey_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_answers(self, survey_id: str) -> List[SurveyAnswer]:
        stmt = (
            select(SurveyAnswer)
            .join(SurveyResponse, SurveyResponse.id == SurveyAnswer.response_id)
            .where(SurveyResponse.survey_id == survey_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_response(self, survey_id: str, user_id: str) -> Optional[SurveyResponse]:
        stmt = (
            select(SurveyResponse)
            .where(SurveyResponse.survey_id == survey_id)
            .where(SurveyResponse.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def record_response(
        self, survey: Survey, user_id: str, answers: Dict[str, Any], complete: bool = True
    ) -> SurveyResponse:
        """Store a response with its answers and bump the survey's response counter.

        Args:
            survey: Survey being answered
            user_id: Respondent
            answers: Mapping of question id to raw answer value
            complete: Whether the response is finished

        Returns:
            Persisted response
        """
        response = SurveyResponse(survey_id=survey.id, user_id=user_id, completed_at=utc_now() if complete else None)
        self.session.add(response)
        await self.session.flush()
        for question_id, value in answers.items():
            self.session.add(SurveyAnswer(response_id=response.id, question_id=question_id, answer=value))
        survey.response_count += 1
        self.session.add(survey)
        await self.session.commit()
        await self.session.refresh(response)
        return response

    async def delete(self, entity_id: str) -> bool:
        """Delete a survey with its questions, responses and answers."""
        survey = await self.get_by_id(entity_id)
        if survey is None:
            return False
        response_ids = select(SurveyResponse.id).where(SurveyResponse.survey_id == entity_id)
        answers = SurveyAnswer.response_id.in_(response_ids)  # type: ignore[attr-defined]
        await self.session.execute(sa_delete(SurveyAnswer).where(answers))
        await self.session.execute(sa_delete(SurveyResponse).where(SurveyResponse.survey_id == entity_id))
        await self.session.execute(sa_delete(SurveyQuestion).where(SurveyQuestion.survey_id == entity_id))
        await self.session.delete(survey)
        await self.session.commit()
        return True
