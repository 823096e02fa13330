"""
Survey Endpoints.

Creators draft surveys under a campaign, publish them, close them and read
the aggregated results. Supporters answer published surveys once.
"""

from typing import List

from fastapi import APIRouter, Query, Response, status

from productlobby.core.database.base import utc_now
from productlobby.core.database.entities import Campaign, Survey, SurveyStatus, User
from productlobby.core.database.repositories import RepoBundle
from productlobby.core.errors import InvalidRequestError, NotFoundError
from productlobby.core.models.io import SurveyCreate, SurveyRead, SurveyResponseCreate, SurveyResponseRead
from productlobby.scoring.surveys import SurveyInsight, SurveyResults, export_results, generate_insights
from productlobby.server.services.deps import (
    CampaignDep,
    CurrentUser,
    CurrentUserOptional,
    ReposDep,
    ensure_campaign_creator,
    load_campaign,
)
from productlobby.server.services.surveys import (
    build_survey_read,
    load_survey,
    question_from_input,
    submit_response,
    survey_results,
)

router = APIRouter()

EXPORT_MEDIA_TYPES = {"json": "application/json", "csv": "text/csv"}


async def _creator_survey(repos: RepoBundle, survey_id: str, user: User, action: str) -> Survey:
    survey = await load_survey(repos, survey_id)
    campaign: Campaign = await load_campaign(repos, survey.campaign_id)
    ensure_campaign_creator(campaign, user, action)
    return survey


@router.post(
    "/campaigns/{campaign_id}/surveys",
    response_model=SurveyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Survey",
    description="Create a draft survey with its questions. Drafts are only visible to the creator.",
    responses={403: {"description": "Caller is not the creator"}},
)
async def create_survey(
    survey_in: SurveyCreate, campaign: CampaignDep, user: CurrentUser, repos: ReposDep
) -> SurveyRead:
    ensure_campaign_creator(campaign, user, "create surveys")
    questions = []
    for position, question_in in enumerate(survey_in.questions):
        question = question_from_input(question_in)
        if question_in.order is None:
            question.order = position
        questions.append(question)

    survey = Survey(
        campaign_id=campaign.id,
        creator_id=user.id,
        title=survey_in.title,
        description=survey_in.description,
        survey_type=survey_in.survey_type,
    )
    survey = await repos.surveys.create_with_questions(survey, questions)
    return await build_survey_read(repos, survey)


@router.get(
    "/campaigns/{campaign_id}/surveys",
    response_model=List[SurveyRead],
    summary="List Surveys",
)
async def list_surveys(campaign: CampaignDep, repos: ReposDep, user: CurrentUserOptional) -> List[SurveyRead]:
    is_creator = user is not None and user.id == campaign.creator_user_id
    surveys = await repos.surveys.list_for_campaign(campaign.id)
    return [
        await build_survey_read(repos, survey, include_questions=False)
        for survey in surveys
        if is_creator or survey.status != SurveyStatus.DRAFT
    ]


@router.get(
    "/surveys/{survey_id}",
    response_model=SurveyRead,
    summary="Get Survey",
    responses={404: {"description": "Survey not found"}},
)
async def read_survey(survey_id: str, repos: ReposDep, user: CurrentUserOptional) -> SurveyRead:
    survey = await load_survey(repos, survey_id)
    if survey.status == SurveyStatus.DRAFT and (user is None or user.id != survey.creator_id):
        raise NotFoundError("Survey", survey_id)
    return await build_survey_read(repos, survey)


@router.post("/surveys/{survey_id}/publish", response_model=SurveyRead, summary="Publish Survey")
async def publish_survey(survey_id: str, user: CurrentUser, repos: ReposDep) -> SurveyRead:
    survey = await _creator_survey(repos, survey_id, user, "publish surveys")
    if survey.status != SurveyStatus.DRAFT:
        raise InvalidRequestError("Only draft surveys can be published")
    survey.status = SurveyStatus.PUBLISHED
    survey.published_at = utc_now()
    survey = await repos.surveys.update(survey)
    return await build_survey_read(repos, survey)


@router.post("/surveys/{survey_id}/close", response_model=SurveyRead, summary="Close Survey")
async def close_survey(survey_id: str, user: CurrentUser, repos: ReposDep) -> SurveyRead:
    survey = await _creator_survey(repos, survey_id, user, "close surveys")
    if survey.status != SurveyStatus.PUBLISHED:
        raise InvalidRequestError("Only published surveys can be closed")
    survey.status = SurveyStatus.CLOSED
    survey.closed_at = utc_now()
    survey = await repos.surveys.update(survey)
    return await build_survey_read(repos, survey)


@router.post(
    "/surveys/{survey_id}/responses",
    response_model=SurveyResponseRead,
    status_code=status.HTTP_201_CREATED,
    summary="Respond to Survey",
    description="Answer a published survey. Set complete=false to save a partial response.",
    responses={409: {"description": "Already responded"}},
)
async def respond(
    survey_id: str, response_in: SurveyResponseCreate, user: CurrentUser, repos: ReposDep
) -> SurveyResponseRead:
    survey = await load_survey(repos, survey_id)
    response = await submit_response(repos, survey, user, response_in)
    return SurveyResponseRead.model_validate(response)


@router.get("/surveys/{survey_id}/results", response_model=SurveyResults, summary="Survey Results")
async def read_results(survey_id: str, user: CurrentUser, repos: ReposDep) -> SurveyResults:
    survey = await _creator_survey(repos, survey_id, user, "view survey results")
    return await survey_results(repos, survey)


@router.get("/surveys/{survey_id}/insights", response_model=SurveyInsight, summary="Survey Insights")
async def read_insights(survey_id: str, user: CurrentUser, repos: ReposDep) -> SurveyInsight:
    survey = await _creator_survey(repos, survey_id, user, "view survey insights")
    results = await survey_results(repos, survey)
    return generate_insights(results, survey.survey_type.value)


@router.get(
    "/surveys/{survey_id}/export",
    summary="Export Survey Results",
    description="Download aggregated results as JSON or CSV.",
    responses={400: {"description": "Unsupported format"}},
)
async def export_survey(
    survey_id: str,
    user: CurrentUser,
    repos: ReposDep,
    export_format: str = Query(default="json", alias="format"),
) -> Response:
    survey = await _creator_survey(repos, survey_id, user, "export survey results")
    results = await survey_results(repos, survey)
    try:
        body = export_results(
            results, export_format, description=survey.description, survey_type=survey.survey_type.value
        )
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from exc

    fmt = export_format.lower()
    return Response(
        content=body,
        media_type=EXPORT_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="survey-{survey.id}.{fmt}"'},
    )
