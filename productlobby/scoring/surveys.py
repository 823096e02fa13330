"""Survey result aggregation, insights and export.

Answers are the raw JSON values respondents submitted:

* MULTIPLE_CHOICE: the chosen option, or a list whose first item is used
* RATING_SCALE: an integer (numeric strings are accepted)
* OPEN_TEXT: free text
* RANKING: the options in ranked order, best first
* MATRIX: ``{row: {column: score}}``
"""

from __future__ import annotations

import csv
import io
import json
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ConfigDict, Field

from .base import BaseSchema
from .utils import round_half_up

LOW_RATING = 3
STRONG_RATING = 4
DOMINANT_SHARE = 50
LOW_COMPLETION = 50
NPS_PROMOTER = 9
NPS_DETRACTOR = 6


class QuestionSpec(BaseSchema):
    """The parts of a survey question aggregation needs."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    question: str
    question_type: str
    options: Optional[Any] = None
    min_scale: Optional[int] = None
    max_scale: Optional[int] = None


class OptionCount(BaseSchema):
    option: str
    count: int
    percentage: float


class ScaleCount(BaseSchema):
    scale: int
    count: int
    percentage: float


class TextCount(BaseSchema):
    response: str
    count: int


class ItemRanking(BaseSchema):
    item: str
    average_rank: float
    total_ranks: int


class MatrixRow(BaseSchema):
    row: str
    column_averages: Dict[str, float]


class MultipleChoiceResults(BaseSchema):
    type: str = "MULTIPLE_CHOICE"
    options: List[OptionCount]


class RatingScaleResults(BaseSchema):
    type: str = "RATING_SCALE"
    average: float
    median: float
    min: int
    max: int
    distribution: List[ScaleCount]


class OpenTextResults(BaseSchema):
    type: str = "OPEN_TEXT"
    responses: List[TextCount]
    total_responses: int


class RankingResults(BaseSchema):
    type: str = "RANKING"
    item_rankings: List[ItemRanking]


class MatrixResults(BaseSchema):
    type: str = "MATRIX"
    rows: List[MatrixRow]


QuestionAggregate = Union[MultipleChoiceResults, RatingScaleResults, OpenTextResults, RankingResults, MatrixResults]


class QuestionResult(BaseSchema):
    question_id: str
    question: str
    question_type: str
    response_count: int
    results: Optional[QuestionAggregate] = None


class SurveyResults(BaseSchema):
    survey_id: str
    title: str
    total_responses: int
    completion_rate: float
    question_results: List[QuestionResult] = Field(default_factory=list)


class SurveyInsight(BaseSchema):
    summary: str
    key_findings: List[str]
    recommendations: List[str]


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _multiple_choice(question: QuestionSpec, answers: Sequence[Any]) -> MultipleChoiceResults:
    options = list(question.options or [])
    counts: Counter = Counter()
    for answer in answers:
        choice = answer[0] if isinstance(answer, list) and answer else answer
        if choice in options:
            counts[choice] += 1
    total = len(answers) or 1
    rows = [OptionCount(option=opt, count=counts[opt], percentage=counts[opt] / total * 100) for opt in options]
    rows.sort(key=lambda row: row.count, reverse=True)
    return MultipleChoiceResults(options=rows)


def _rating_scale(question: QuestionSpec, answers: Sequence[Any]) -> RatingScaleResults:
    ratings = sorted(r for r in (_as_int(a) for a in answers) if r is not None)
    if not ratings:
        return RatingScaleResults(
            average=0,
            median=0,
            min=question.min_scale or 0,
            max=question.max_scale or 5,
            distribution=[],
        )
    n = len(ratings)
    middle = n // 2
    median = (ratings[middle - 1] + ratings[middle]) / 2 if n % 2 == 0 else ratings[middle]
    distribution = [
        ScaleCount(scale=scale, count=ratings.count(scale), percentage=ratings.count(scale) / n * 100)
        for scale in range(question.min_scale or 1, (question.max_scale or 5) + 1)
    ]
    return RatingScaleResults(
        average=round_half_up(sum(ratings) / n, 2),
        median=median,
        min=ratings[0],
        max=ratings[-1],
        distribution=distribution,
    )


def _open_text(answers: Sequence[Any]) -> OpenTextResults:
    counts: Counter = Counter()
    for answer in answers:
        text = str(answer).lower().strip() if answer is not None else ""
        if text:
            counts[text] += 1
    # Counter.most_common keeps first-seen order among ties
    responses = [TextCount(response=text, count=count) for text, count in counts.most_common()]
    return OpenTextResults(responses=responses, total_responses=len(answers))


def _ranking(question: QuestionSpec, answers: Sequence[Any]) -> RankingResults:
    items = list(question.options or [])
    ranks: Dict[str, List[int]] = {item: [] for item in items}
    for answer in answers:
        ordering = answer if isinstance(answer, list) else [answer]
        for position, item in enumerate(ordering, start=1):
            if item in ranks:
                ranks[item].append(position)
    rankings = [
        ItemRanking(item=item, average_rank=sum(r) / len(r) if r else 0, total_ranks=len(r))
        for item, r in ranks.items()
    ]
    rankings.sort(key=lambda ranking: ranking.average_rank)
    return RankingResults(item_rankings=rankings)


def _matrix(question: QuestionSpec, answers: Sequence[Any]) -> MatrixResults:
    options = question.options or [[], []]
    rows: List[str] = list(options[0]) if len(options) > 0 else []
    columns: List[str] = list(options[1]) if len(options) > 1 else []
    scores: Dict[str, Dict[str, List[int]]] = {row: {col: [] for col in columns} for row in rows}
    for answer in answers:
        if not isinstance(answer, dict):
            continue
        for row, column_scores in answer.items():
            if row not in scores or not isinstance(column_scores, dict):
                continue
            for col, score in column_scores.items():
                number = _as_int(score)
                if col in scores[row] and number is not None:
                    scores[row][col].append(number)
    return MatrixResults(
        rows=[
            MatrixRow(
                row=row,
                column_averages={
                    col: round_half_up(sum(values) / len(values), 2) if values else 0 for col, values in cols.items()
                },
            )
            for row, cols in scores.items()
        ]
    )


def question_results(question: QuestionSpec, answers: Sequence[Any]) -> QuestionResult:
    """Aggregate the answers given to one question."""
    aggregate: Optional[QuestionAggregate]
    if question.question_type == "MULTIPLE_CHOICE":
        aggregate = _multiple_choice(question, answers)
    elif question.question_type == "RATING_SCALE":
        aggregate = _rating_scale(question, answers)
    elif question.question_type == "OPEN_TEXT":
        aggregate = _open_text(answers)
    elif question.question_type == "RANKING":
        aggregate = _ranking(question, answers)
    elif question.question_type == "MATRIX":
        aggregate = _matrix(question, answers)
    else:
        aggregate = None
    return QuestionResult(
        question_id=question.id,
        question=question.question,
        question_type=question.question_type,
        response_count=len(answers),
        results=aggregate,
    )


def completion_rate(started: int, completed: int) -> float:
    return completed / started * 100 if started > 0 else 0.0


def calculate_survey_results(
    survey_id: str,
    title: str,
    questions: Sequence[QuestionSpec],
    answers_by_question: Mapping[str, Sequence[Any]],
    started: int,
    completed: int,
) -> SurveyResults:
    """Aggregate a whole survey.

    Args:
        survey_id: Survey id
        title: Survey title
        questions: Questions in display order
        answers_by_question: Raw answers keyed by question id
        started: Responses ever started
        completed: Responses completed

    Returns:
        Per-question results plus totals
    """
    return SurveyResults(
        survey_id=survey_id,
        title=title,
        total_responses=completed,
        completion_rate=completion_rate(started, completed),
        question_results=[question_results(q, list(answers_by_question.get(q.id, []))) for q in questions],
    )


def _nps(rating: RatingScaleResults, total_responses: int) -> Optional[float]:
    if total_responses <= 0:
        return None
    promoters = sum(d.count for d in rating.distribution if d.scale >= NPS_PROMOTER)
    detractors = sum(d.count for d in rating.distribution if d.scale <= NPS_DETRACTOR)
    return (promoters - detractors) / total_responses * 100


def generate_insights(results: SurveyResults, survey_type: str) -> SurveyInsight:
    """Plain-language findings and recommendations from aggregated results."""
    findings: List[str] = []
    recommendations: List[str] = []

    for qr in results.question_results:
        aggregate = qr.results
        if isinstance(aggregate, RatingScaleResults) and aggregate.distribution:
            if aggregate.average <= LOW_RATING:
                findings.append(f'Low satisfaction on "{qr.question}" (average: {aggregate.average:.1f}/5)')
            elif aggregate.average >= STRONG_RATING:
                findings.append(f'Strong satisfaction on "{qr.question}" (average: {aggregate.average:.1f}/5)')
        elif isinstance(aggregate, MultipleChoiceResults) and aggregate.options:
            top = aggregate.options[0]
            if top.percentage > DOMINANT_SHARE:
                findings.append(f"Dominant preference: {top.option} ({top.percentage:.1f}% choose this)")
        elif isinstance(aggregate, OpenTextResults) and aggregate.responses:
            findings.append(f'Most common feedback: "{aggregate.responses[0].response}"')

    if results.completion_rate < LOW_COMPLETION:
        recommendations.append("Consider shortening the survey to improve completion rates")

    if survey_type == "NPS_SURVEY":
        rating = next(
            (qr.results for qr in results.question_results if isinstance(qr.results, RatingScaleResults)), None
        )
        if rating is not None:
            nps = _nps(rating, results.total_responses)
            if nps is not None:
                findings.append(f"NPS Score: {nps:.1f}")

    summary = (
        f'Survey "{results.title}" received {results.total_responses} responses '
        f"({results.completion_rate:.1f}% completion)."
    )
    if findings:
        summary = f"{summary} {findings[0]}"
    return SurveyInsight(summary=summary, key_findings=findings, recommendations=recommendations)


def _csv_details(aggregate: Optional[QuestionAggregate]) -> str:
    if isinstance(aggregate, MultipleChoiceResults):
        return "; ".join(f"{o.option}: {o.count} ({o.percentage:.1f}%)" for o in aggregate.options)
    if isinstance(aggregate, RatingScaleResults):
        return f"Average: {aggregate.average}, Median: {aggregate.median}, Range: {aggregate.min}-{aggregate.max}"
    if isinstance(aggregate, OpenTextResults):
        return "; ".join(f"{r.response} ({r.count})" for r in aggregate.responses)
    if isinstance(aggregate, RankingResults):
        return "; ".join(f"{r.item}: {r.average_rank:.2f}" for r in aggregate.item_rankings)
    if isinstance(aggregate, MatrixResults):
        return "; ".join(f"{r.row}: {json.dumps(r.column_averages)}" for r in aggregate.rows)
    return ""


def export_results(
    results: SurveyResults, fmt: str, description: Optional[str] = None, survey_type: Optional[str] = None
) -> str:
    """Serialise results as ``json`` or ``csv`` text.

    Raises:
        ValueError: If ``fmt`` is neither json nor csv
    """
    fmt = fmt.lower()
    if fmt == "json":
        payload = {
            "survey": {
                "id": results.survey_id,
                "title": results.title,
                "description": description,
                "survey_type": survey_type,
                "total_responses": results.total_responses,
                "completion_rate": results.completion_rate,
            },
            "results": [qr.model_dump(mode="json") for qr in results.question_results],
        }
        return json.dumps(payload)
    if fmt == "csv":
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["Question", "Type", "Response Count", "Details"])
        for qr in results.question_results:
            writer.writerow([qr.question, qr.question_type, qr.response_count, _csv_details(qr.results)])
        return buffer.getvalue()
    raise ValueError(f"Unsupported export format: {fmt}")
