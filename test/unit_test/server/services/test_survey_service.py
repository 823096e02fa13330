"""Tests for survey response validation and result aggregation."""

from __future__ import annotations

import pytest

from productlobby.core.database.entities import QuestionType, Survey, SurveyQuestion, SurveyStatus
from productlobby.core.errors import ConflictError, InvalidRequestError, NotFoundError
from productlobby.core.models.io import SurveyResponseCreate
from productlobby.server.services.surveys import build_survey_read, load_survey, submit_response, survey_results


@pytest.fixture
async def survey(repos, factory):
    creator = await factory.user("creator")
    campaign = await factory.campaign(creator)
    return await repos.surveys.create_with_questions(
        Survey(campaign_id=campaign.id, creator_id=creator.id, title="Fit and feel", status=SurveyStatus.PUBLISHED),
        [
            SurveyQuestion(
                question="Colour?", question_type=QuestionType.MULTIPLE_CHOICE, options=["Red", "Blue"], required=True
            ),
            SurveyQuestion(question="Comfort?", question_type=QuestionType.RATING_SCALE, min_scale=1, max_scale=5),
            SurveyQuestion(question="Order these", question_type=QuestionType.RANKING, options=["Grip", "Weight"]),
            SurveyQuestion(question="Anything else?", question_type=QuestionType.OPEN_TEXT),
        ],
    )


@pytest.fixture
async def questions(repos, survey):
    return await repos.surveys.list_questions(survey.id)


class TestSubmitResponse:
    async def test_valid_response_is_stored(self, repos, factory, survey, questions):
        colour, comfort, ranking, text = questions

        response = await submit_response(
            repos,
            survey,
            await factory.user(),
            SurveyResponseCreate(
                answers={colour.id: "Red", comfort.id: "4", ranking.id: ["Weight", "Grip"], text.id: ""}
            ),
        )

        assert response.completed_at is not None
        stored = {a.question_id: a.answer for a in await repos.surveys.list_answers(survey.id)}
        assert stored == {colour.id: "Red", comfort.id: "4", ranking.id: ["Weight", "Grip"]}

    async def test_only_published_surveys_accept_responses(self, repos, factory, survey, questions):
        survey.status = SurveyStatus.CLOSED

        with pytest.raises(InvalidRequestError, match="not accepting"):
            await submit_response(
                repos, survey, await factory.user(), SurveyResponseCreate(answers={questions[0].id: "Red"})
            )

    async def test_second_response_conflicts(self, repos, factory, survey, questions):
        respondent = await factory.user()
        answers = SurveyResponseCreate(answers={questions[0].id: "Red"})
        await submit_response(repos, survey, respondent, answers)

        with pytest.raises(ConflictError):
            await submit_response(repos, survey, respondent, answers)

    async def test_unknown_question(self, repos, factory, survey):
        with pytest.raises(InvalidRequestError) as exc_info:
            await submit_response(repos, survey, await factory.user(), SurveyResponseCreate(answers={"bogus": 1}))

        assert exc_info.value.details == ["bogus"]

    @pytest.mark.parametrize(
        ("index", "answer", "message"),
        [
            (0, "Green", "must be one of the options"),
            (1, 9, "between 1 and 5"),
            (1, "lots", "must be a number"),
            (1, True, "must be a number"),
            (1, 5.9, "whole number"),
            (1, "4.5", "whole number"),
            (1, 0.0, "between 1 and 5"),
            (2, ["Grip", "Grip"], "distinct options"),
            (3, 42, "must be text"),
        ],
    )
    async def test_bad_answers(self, repos, factory, survey, questions, index, answer, message):
        answers = {questions[0].id: "Red", questions[index].id: answer}

        with pytest.raises(InvalidRequestError, match=message):
            await submit_response(repos, survey, await factory.user(), SurveyResponseCreate(answers=answers))

    async def test_required_question(self, repos, factory, survey, questions):
        with pytest.raises(InvalidRequestError, match="required"):
            await submit_response(
                repos, survey, await factory.user(), SurveyResponseCreate(answers={questions[1].id: 3})
            )

    async def test_partial_response_skips_required_check(self, repos, factory, survey, questions):
        response = await submit_response(
            repos, survey, await factory.user(), SurveyResponseCreate(answers={questions[1].id: 3}, complete=False)
        )

        assert response.completed_at is None


class TestResults:
    async def test_aggregates_stored_answers(self, repos, factory, survey, questions):
        colour, comfort, _, _ = questions
        for choice, rating in (("Red", 5), ("Red", 3), ("Blue", 4)):
            await submit_response(
                repos,
                survey,
                await factory.user(),
                SurveyResponseCreate(answers={colour.id: choice, comfort.id: rating}),
            )
        await submit_response(repos, survey, await factory.user(), SurveyResponseCreate(complete=False))

        results = await survey_results(repos, survey)

        assert results.total_responses == 3
        assert results.completion_rate == 75.0
        colour_result = results.question_results[0].results
        assert [(o.option, o.count) for o in colour_result.options] == [("Red", 2), ("Blue", 1)]
        assert results.question_results[1].results.average == 4.0

    async def test_load_and_read(self, repos, survey):
        loaded = await load_survey(repos, survey.id)
        read = await build_survey_read(repos, loaded)

        assert [q.question for q in read.questions] == ["Colour?", "Comfort?", "Order these", "Anything else?"]
        assert (await build_survey_read(repos, loaded, include_questions=False)).questions == []
        with pytest.raises(NotFoundError):
            await load_survey(repos, "missing")
