"""Keyword-based sentiment analysis of campaign comments.

Text is lower-cased and split into word tokens. Each token found in the
positive or negative keyword set counts as a hit for that polarity, unless the
token right before it is a negator, in which case the hit counts for the
opposite polarity ("not great" is negative, "never disappointed" positive).
"""

from __future__ import annotations

import re
from collections import Counter
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .base import BaseSchema
from .utils import clamp, round_half_up, round_int, utc_now

POSITIVE_WORDS: FrozenSet[str] = frozenset(
    {
        "amazing",
        "awesome",
        "beautiful",
        "best",
        "brilliant",
        "excellent",
        "excited",
        "fantastic",
        "great",
        "happy",
        "helpful",
        "incredible",
        "like",
        "love",
        "loved",
        "need",
        "nice",
        "perfect",
        "recommend",
        "support",
        "useful",
        "want",
        "wonderful",
        "yes",
    }
)

NEGATIVE_WORDS: FrozenSet[str] = frozenset(
    {
        "angry",
        "annoying",
        "awful",
        "bad",
        "broken",
        "disappointed",
        "disappointing",
        "expensive",
        "hate",
        "horrible",
        "overpriced",
        "pointless",
        "poor",
        "scam",
        "terrible",
        "ugly",
        "useless",
        "waste",
        "worse",
        "worst",
    }
)

NEGATORS: FrozenSet[str] = frozenset(
    {"not", "no", "never", "dont", "don't", "isnt", "isn't", "wont", "won't", "cant", "can't"}
)

NEUTRAL_SCORE = 50
POSITIVE_CUTOFF = 60
NEGATIVE_CUTOFF = 40

_TOKEN_RE = re.compile(r"[a-z']+")


class SentimentLabel(str, Enum):
    positive = "positive"
    negative = "negative"
    neutral = "neutral"


class SentimentBreakdown(BaseSchema):
    total: int
    positive: int
    negative: int
    neutral: int
    positive_percent: int
    negative_percent: int
    neutral_percent: int
    score: float
    overall: SentimentLabel


class DailySentiment(BaseSchema):
    day: date
    score: float
    count: int


def tokenize(text: str) -> List[str]:
    return _TOKEN_RE.findall(text.lower())


def polarity_hits(text: str) -> Tuple[int, int]:
    """Count ``(positive, negative)`` keyword hits in ``text`` after negation."""
    positive = negative = 0
    previous: Optional[str] = None
    for token in tokenize(text):
        negated = previous in NEGATORS
        if token in POSITIVE_WORDS:
            if negated:
                negative += 1
            else:
                positive += 1
        elif token in NEGATIVE_WORDS:
            if negated:
                positive += 1
            else:
                negative += 1
        previous = token
    return positive, negative


def classify_text(text: str) -> SentimentLabel:
    positive, negative = polarity_hits(text)
    if positive > negative:
        return SentimentLabel.positive
    if negative > positive:
        return SentimentLabel.negative
    return SentimentLabel.neutral


def overall_label(score: float) -> SentimentLabel:
    if score >= POSITIVE_CUTOFF:
        return SentimentLabel.positive
    if score <= NEGATIVE_CUTOFF:
        return SentimentLabel.negative
    return SentimentLabel.neutral


def _score(positive: int, negative: int, total: int) -> float:
    if total == 0:
        return float(NEUTRAL_SCORE)
    return clamp(round_half_up(NEUTRAL_SCORE + (positive - negative) / total * 50, 1), 0, 100)


def analyze_texts(texts: Iterable[str]) -> SentimentBreakdown:
    """Classify every text and summarise the mix.

    Args:
        texts: Comment bodies

    Returns:
        Counts, whole-number percentages, a 0-100 score (50 when empty) and the
        overall label
    """
    labels = Counter(classify_text(text) for text in texts)
    total = sum(labels.values())
    positive = labels[SentimentLabel.positive]
    negative = labels[SentimentLabel.negative]
    neutral = labels[SentimentLabel.neutral]

    def percent(count: int) -> int:
        return round_int(count / total * 100) if total else 0

    score = _score(positive, negative, total)
    return SentimentBreakdown(
        total=total,
        positive=positive,
        negative=negative,
        neutral=neutral,
        positive_percent=percent(positive),
        negative_percent=percent(negative),
        neutral_percent=percent(neutral),
        score=score,
        overall=overall_label(score),
    )


def daily_trend(
    samples: Iterable[Tuple[str, datetime]], days: int = 7, now: Optional[datetime] = None
) -> List[DailySentiment]:
    """Per-day sentiment score over the last ``days`` days, oldest first.

    Args:
        samples: ``(text, created_at)`` pairs; samples outside the window are ignored
        days: Window length, today included
        now: Reference time, defaults to the current UTC time

    Returns:
        One entry per day; a day without samples scores 50
    """
    today = (now or utc_now()).date()
    first_day = today - timedelta(days=days - 1)
    buckets: Dict[date, List[SentimentLabel]] = {first_day + timedelta(days=offset): [] for offset in range(days)}
    for text, created_at in samples:
        day = created_at.date()
        if day in buckets:
            buckets[day].append(classify_text(text))

    trend = []
    for day, labels in buckets.items():
        counts = Counter(labels)
        trend.append(
            DailySentiment(
                day=day,
                score=_score(counts[SentimentLabel.positive], counts[SentimentLabel.negative], len(labels)),
                count=len(labels),
            )
        )
    return trend
