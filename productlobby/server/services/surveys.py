"""
Survey Service.

Loads surveys with their questions, validates submitted answers against the
question definitions and feeds stored answers to the survey calculators.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, List

from productlobby.core.database.entities import QuestionType, Survey, SurveyQuestion, SurveyResponse, SurveyStatus, User
from productlobby.core.database.repositories import RepoBundle
from productlobby.core.errors import ConflictError, InvalidRequestError, NotFoundError
from productlobby.core.models.io import SurveyQuestionCreate, SurveyQuestionRead, SurveyRead, SurveyResponseCreate
from productlobby.scoring.surveys import QuestionSpec, SurveyResults, calculate_survey_results


async def load_survey(repos: RepoBundle, survey_id: str) -> Survey:
    survey = await repos.surveys.get_by_id(survey_id)
    if survey is None:
        raise NotFoundError("Survey", survey_id)
    return survey


async def build_survey_read(repos: RepoBundle, survey: Survey, include_questions: bool = True) -> SurveyRead:
    read = SurveyRead.model_validate(survey)
    if include_questions:
        read.questions = [SurveyQuestionRead.model_validate(q) for q in await repos.surveys.list_questions(survey.id)]
    return read


def question_from_input(question_in: SurveyQuestionCreate) -> SurveyQuestion:
    return SurveyQuestion(
        question=question_in.question,
        description=question_in.description,
        question_type=question_in.question_type,
        options=question_in.options,
        min_scale=question_in.min_scale,
        max_scale=question_in.max_scale,
        min_label=question_in.min_label,
        max_label=question_in.max_label,
        required=question_in.required,
        order=question_in.order or 0,
    )


def _check_answer(question: SurveyQuestion, answer: Any) -> None:
    """Reject an answer whose shape does not fit its question type."""
    options = question.options or []
    if question.question_type == QuestionType.MULTIPLE_CHOICE:
        choices = answer if isinstance(answer, list) else [answer]
        if not choices or any(choice not in options for choice in choices):
            raise InvalidRequestError(f"Answer to '{question.question}' must be one of the options")
    elif question.question_type == QuestionType.RATING_SCALE:
        low = 1 if question.min_scale is None else question.min_scale
        high = 5 if question.max_scale is None else question.max_scale
        if isinstance(answer, bool) or not isinstance(answer, (int, float, str)):
            raise InvalidRequestError(f"Answer to '{question.question}' must be a number")
        try:
            value = float(answer)
        except ValueError:
            raise InvalidRequestError(f"Answer to '{question.question}' must be a number") from None
        if not value.is_integer():
            raise InvalidRequestError(f"Answer to '{question.question}' must be a whole number")
        if not low <= value <= high:
            raise InvalidRequestError(f"Answer to '{question.question}' must be between {low} and {high}")
    elif question.question_type == QuestionType.RANKING:
        if (
            not isinstance(answer, list)
            or not all(isinstance(a, str) and a in options for a in answer)
            or len(set(answer)) != len(answer)
        ):
            raise InvalidRequestError(f"Answer to '{question.question}' must rank distinct options")
    elif question.question_type == QuestionType.MATRIX:
        if not isinstance(answer, dict):
            raise InvalidRequestError(f"Answer to '{question.question}' must map rows to column scores")
    elif question.question_type == QuestionType.OPEN_TEXT:
        if not isinstance(answer, str):
            raise InvalidRequestError(f"Answer to '{question.question}' must be text")


async def submit_response(
    repos: RepoBundle, survey: Survey, user: User, response_in: SurveyResponseCreate
) -> SurveyResponse:
    """Validate and store one user's response to a published survey.

    Raises:
        InvalidRequestError: Survey not published, unknown question, bad answer
            or a required question left out of a complete response
        ConflictError: If the user already responded
    """
    if survey.status != SurveyStatus.PUBLISHED:
        raise InvalidRequestError("Survey is not accepting responses")
    if await repos.surveys.find_response(survey.id, user.id) is not None:
        raise ConflictError("You have already responded to this survey")

    questions = {q.id: q for q in await repos.surveys.list_questions(survey.id)}
    unknown = [qid for qid in response_in.answers if qid not in questions]
    if unknown:
        raise InvalidRequestError("Unknown question in answers", details=unknown)

    answers: Dict[str, Any] = {}
    for question_id, answer in response_in.answers.items():
        if answer is None or answer == "" or answer == []:
            continue
        _check_answer(questions[question_id], answer)
        answers[question_id] = answer

    if response_in.complete:
        for question in questions.values():
            if question.required and question.id not in answers:
                raise InvalidRequestError(f"Question '{question.question}' is required")

    return await repos.surveys.record_response(survey, user.id, answers, complete=response_in.complete)


async def survey_results(repos: RepoBundle, survey: Survey) -> SurveyResults:
    """Aggregate every stored answer per question."""
    questions = await repos.surveys.list_questions(survey.id)
    responses = await repos.surveys.list_responses(survey.id)
    answers_by_question: Dict[str, List[Any]] = defaultdict(list)
    for answer in await repos.surveys.list_answers(survey.id):
        answers_by_question[answer.question_id].append(answer.answer)

    specs = [
        QuestionSpec(
            id=q.id,
            question=q.question,
            question_type=q.question_type.value,
            options=q.options,
            min_scale=q.min_scale,
            max_scale=q.max_scale,
        )
        for q in questions
    ]
    return calculate_survey_results(
        survey_id=survey.id,
        title=survey.title,
        questions=specs,
        answers_by_question=answers_by_question,
        started=len(responses),
        completed=sum(1 for r in responses if r.completed_at is not None),
    )
