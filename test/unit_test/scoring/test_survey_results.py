"""
Unit tests for survey aggregation, insights and export.
"""

import json

import pytest

from productlobby.scoring.surveys import (
    MatrixResults,
    MultipleChoiceResults,
    OpenTextResults,
    QuestionSpec,
    RankingResults,
    RatingScaleResults,
    calculate_survey_results,
    export_results,
    generate_insights,
    question_results,
)


def question(qid: str, question_type: str, **fields) -> QuestionSpec:
    return QuestionSpec(id=qid, question=f"Question {qid}", question_type=question_type, **fields)


class TestQuestionResults:
    def test_multiple_choice(self):
        q = question("colour", "MULTIPLE_CHOICE", options=["Red", "Blue", "Green"])

        result = question_results(q, ["Blue", "Blue", ["Red"], "Purple"])

        assert result.response_count == 4
        assert isinstance(result.results, MultipleChoiceResults)
        rows = [(o.option, o.count, o.percentage) for o in result.results.options]
        assert rows == [("Blue", 2, 50.0), ("Red", 1, 25.0), ("Green", 0, 0.0)]

    def test_rating_scale_ignores_non_numbers(self):
        q = question("rating", "RATING_SCALE", min_scale=1, max_scale=5)

        result = question_results(q, [5, "4", 2, True, None, "soon"])

        aggregate = result.results
        assert isinstance(aggregate, RatingScaleResults)
        assert aggregate.average == pytest.approx(3.67)
        assert aggregate.median == 4
        assert (aggregate.min, aggregate.max) == (2, 5)
        assert [d.scale for d in aggregate.distribution] == [1, 2, 3, 4, 5]
        assert aggregate.distribution[3].count == 1

    def test_rating_scale_even_median(self):
        q = question("rating", "RATING_SCALE", min_scale=1, max_scale=5)

        assert question_results(q, [1, 2, 3, 4]).results.median == 2.5

    def test_rating_scale_without_answers(self):
        q = question("rating", "RATING_SCALE", min_scale=1, max_scale=10)

        aggregate = question_results(q, []).results

        assert aggregate.average == 0
        assert aggregate.max == 10
        assert aggregate.distribution == []

    def test_open_text_groups_normalised_answers(self):
        q = question("feedback", "OPEN_TEXT")

        result = question_results(q, ["Lighter please", "lighter please ", "", None, "More colours"])

        aggregate = result.results
        assert isinstance(aggregate, OpenTextResults)
        assert [(r.response, r.count) for r in aggregate.responses] == [("lighter please", 2), ("more colours", 1)]
        assert aggregate.total_responses == 5

    def test_ranking(self):
        q = question("priorities", "RANKING", options=["Price", "Quality", "Design"])

        result = question_results(q, [["Quality", "Price", "Design"], ["Quality", "Design", "Price"]])

        aggregate = result.results
        assert isinstance(aggregate, RankingResults)
        assert aggregate.item_rankings[0].item == "Quality"
        assert aggregate.item_rankings[0].average_rank == 1
        assert {r.item: r.average_rank for r in aggregate.item_rankings[1:]} == {"Price": 2.5, "Design": 2.5}

    def test_matrix(self):
        q = question("fit", "MATRIX", options=[["Fit", "Comfort"], ["Road", "Trail"]])

        result = question_results(
            q,
            [{"Fit": {"Road": 4, "Trail": 5}}, {"Fit": {"Road": 2}, "Comfort": {"Trail": "3"}}, "junk"],
        )

        aggregate = result.results
        assert isinstance(aggregate, MatrixResults)
        rows = {r.row: r.column_averages for r in aggregate.rows}
        assert rows == {"Fit": {"Road": 3.0, "Trail": 5.0}, "Comfort": {"Road": 0, "Trail": 3.0}}

    def test_unknown_type_has_no_aggregate(self):
        assert question_results(question("x", "SLIDER"), [1]).results is None


class TestCalculateSurveyResults:
    def test_totals_and_order(self):
        questions = [question("a", "OPEN_TEXT"), question("b", "MULTIPLE_CHOICE", options=["Yes", "No"])]

        results = calculate_survey_results(
            "survey-1", "Trail shoes", questions, {"b": ["Yes", "Yes", "No"]}, started=4, completed=3
        )

        assert results.total_responses == 3
        assert results.completion_rate == 75
        assert [qr.question_id for qr in results.question_results] == ["a", "b"]
        assert results.question_results[0].response_count == 0

    def test_nothing_started(self):
        results = calculate_survey_results("s", "Empty", [], {}, started=0, completed=0)

        assert results.completion_rate == 0


class TestGenerateInsights:
    def test_low_rating_and_low_completion(self):
        results = calculate_survey_results(
            "s",
            "Comfort",
            [question("r", "RATING_SCALE", min_scale=1, max_scale=5)],
            {"r": [2, 3]},
            started=10,
            completed=4,
        )

        insight = generate_insights(results, "PRODUCT_FEEDBACK")

        assert insight.key_findings[0].startswith("Low satisfaction")
        assert insight.recommendations == ["Consider shortening the survey to improve completion rates"]
        assert insight.summary.startswith('Survey "Comfort" received 4 responses (40.0% completion).')

    def test_dominant_choice_and_feedback(self):
        results = calculate_survey_results(
            "s",
            "Colours",
            [
                question("c", "MULTIPLE_CHOICE", options=["Red", "Blue"]),
                question("t", "OPEN_TEXT"),
            ],
            {"c": ["Red", "Red", "Blue"], "t": ["brighter"]},
            started=3,
            completed=3,
        )

        insight = generate_insights(results, "FEATURE_PRIORITY")

        assert insight.key_findings == [
            "Dominant preference: Red (66.7% choose this)",
            'Most common feedback: "brighter"',
        ]
        assert insight.recommendations == []

    def test_nps(self):
        results = calculate_survey_results(
            "s",
            "Recommend",
            [question("n", "RATING_SCALE", min_scale=0, max_scale=10)],
            {"n": [10, 9, 8, 3]},
            started=4,
            completed=4,
        )

        insight = generate_insights(results, "NPS_SURVEY")

        assert "NPS Score: 25.0" in insight.key_findings


class TestExportResults:
    @pytest.fixture
    def results(self):
        return calculate_survey_results(
            "survey-9",
            "Trail shoes",
            [question("c", "MULTIPLE_CHOICE", options=["Red", "Blue"])],
            {"c": ["Red"]},
            started=1,
            completed=1,
        )

    def test_json(self, results):
        payload = json.loads(export_results(results, "json", description="Colours", survey_type="PRICING"))

        assert payload["survey"]["id"] == "survey-9"
        assert payload["survey"]["description"] == "Colours"
        assert payload["results"][0]["question_type"] == "MULTIPLE_CHOICE"

    def test_csv(self, results):
        lines = export_results(results, "CSV").splitlines()

        assert lines[0] == "Question,Type,Response Count,Details"
        assert lines[1] == "Question c,MULTIPLE_CHOICE,1,Red: 1 (100.0%); Blue: 0 (0.0%)"

    def test_unsupported_format(self, results):
        with pytest.raises(ValueError):
            export_results(results, "xml")
