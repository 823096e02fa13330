"""Signal Score: weighted-factor credibility score of a campaign's demand.

The score blends revenue potential, intent volume, community support, lobby
reach and conviction, and recent momentum, then scales the sum by how complete
the campaign description is. It is a pure function of aggregate counts so the
same code serves live requests, background refreshes and simulations.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Tuple

from pydantic import Field

from .base import BaseSchema
from .utils import clamp, round_half_up, round_int

# "Take my money" is five times the signal of "neat idea"
INTENSITY_WEIGHTS: Dict[str, int] = {
    "NEAT_IDEA": 1,
    "PROBABLY_BUY": 3,
    "TAKE_MY_MONEY": 5,
}

# Assumed share of each lobby intensity that turns into a paying customer
CONVERSION_RATES: Dict[str, float] = {
    "NEAT_IDEA": 0.05,
    "PROBABLY_BUY": 0.25,
    "TAKE_MY_MONEY": 0.65,
}
INTENT_CONVERSION_RATE = 0.4
PHONE_VERIFIED_BONUS = 0.2
MAX_MOMENTUM = 2.0
COMPLETENESS_WEIGHT = 0.3


class SignalTier(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    very_high = "very_high"


SIGNAL_THRESHOLDS: Dict[str, int] = {
    "TRENDING": 35,
    "NOTIFY_BRAND": 55,
    "HIGH_SIGNAL": 70,
    "SUGGEST_OFFER": 80,
}

# Half-open [min, max) score ranges used when listing campaigns by tier
TIER_RANGES: Dict[SignalTier, Tuple[float, float]] = {
    SignalTier.low: (0, SIGNAL_THRESHOLDS["TRENDING"]),
    SignalTier.medium: (SIGNAL_THRESHOLDS["TRENDING"], SIGNAL_THRESHOLDS["NOTIFY_BRAND"]),
    SignalTier.high: (SIGNAL_THRESHOLDS["NOTIFY_BRAND"], SIGNAL_THRESHOLDS["HIGH_SIGNAL"]),
    SignalTier.very_high: (SIGNAL_THRESHOLDS["HIGH_SIGNAL"], 101),
}


class SignalScoreInputs(BaseSchema):
    """Aggregate counts a signal score is computed from."""

    support_count: int = Field(default=0, ge=0)
    intent_count: int = Field(default=0, ge=0)
    intent_phone_verified_count: int = Field(default=0, ge=0)
    median_price_ceiling: float = Field(default=0.0, ge=0)
    p90_price_ceiling: float = Field(default=0.0, ge=0)
    intent_last_7_days: int = Field(default=0, ge=0)
    intent_prev_7_days: int = Field(default=0, ge=0)
    fraud_risk_score: float = Field(default=0.0, ge=0, description="0 means no detected fraud risk.")
    neat_idea_count: int = Field(default=0, ge=0)
    probably_buy_count: int = Field(default=0, ge=0)
    take_my_money_count: int = Field(default=0, ge=0)
    completeness_score: float = Field(default=0.0, ge=0, le=100)

    @property
    def total_lobbies(self) -> int:
        return self.neat_idea_count + self.probably_buy_count + self.take_my_money_count


class SignalScoreResult(BaseSchema):
    score: float
    tier: SignalTier
    inputs: SignalScoreInputs
    demand_value: float
    momentum: float
    lobby_conviction: float
    projected_customers: int
    projected_revenue: int


def tier_for_score(score: float) -> SignalTier:
    """Bucket a score: 80+ very high, 55+ high, 35+ medium, otherwise low."""
    if score >= SIGNAL_THRESHOLDS["SUGGEST_OFFER"]:
        return SignalTier.very_high
    if score >= SIGNAL_THRESHOLDS["NOTIFY_BRAND"]:
        return SignalTier.high
    if score >= SIGNAL_THRESHOLDS["TRENDING"]:
        return SignalTier.medium
    return SignalTier.low


def lobby_conviction(neat_idea: int, probably_buy: int, take_my_money: int) -> float:
    """Intensity-weighted mean over all lobbies, in ``[0, 5]``; 0 when there are none."""
    total = neat_idea + probably_buy + take_my_money
    if total == 0:
        return 0.0
    weighted = (
        neat_idea * INTENSITY_WEIGHTS["NEAT_IDEA"]
        + probably_buy * INTENSITY_WEIGHTS["PROBABLY_BUY"]
        + take_my_money * INTENSITY_WEIGHTS["TAKE_MY_MONEY"]
    )
    return weighted / total


def compute_signal_score(inputs: SignalScoreInputs) -> SignalScoreResult:
    """Compute the signal score and brand revenue projection.

    Args:
        inputs: Aggregate counts for one campaign

    Returns:
        Score in ``[0, 100]`` (one decimal), its tier and the intermediate factors
    """
    weighted_intent = inputs.intent_count + PHONE_VERIFIED_BONUS * inputs.intent_phone_verified_count
    conviction = lobby_conviction(inputs.neat_idea_count, inputs.probably_buy_count, inputs.take_my_money_count)
    demand_value = weighted_intent * inputs.median_price_ceiling
    momentum = clamp(inputs.intent_last_7_days / max(1, inputs.intent_prev_7_days), 0, MAX_MOMENTUM)
    completeness_multiplier = 1 + inputs.completeness_score / 100 * COMPLETENESS_WEIGHT

    raw = (
        18 * math.log10(1 + demand_value)
        + 8 * math.log10(1 + weighted_intent)
        + 3 * math.log10(1 + inputs.support_count)
        + 5 * math.log10(1 + inputs.total_lobbies)
        + 4 * conviction
        + 6 * momentum
        - 20 * inputs.fraud_risk_score
    ) * completeness_multiplier
    score = clamp(round_half_up(raw, 1), 0, 100)

    projected_customers = round_int(
        inputs.neat_idea_count * CONVERSION_RATES["NEAT_IDEA"]
        + inputs.probably_buy_count * CONVERSION_RATES["PROBABLY_BUY"]
        + inputs.take_my_money_count * CONVERSION_RATES["TAKE_MY_MONEY"]
        + inputs.intent_count * INTENT_CONVERSION_RATE
    )
    projected_revenue = round_int(projected_customers * inputs.median_price_ceiling)

    return SignalScoreResult(
        score=score,
        tier=tier_for_score(score),
        inputs=inputs,
        demand_value=demand_value,
        momentum=momentum,
        lobby_conviction=conviction,
        projected_customers=projected_customers,
        projected_revenue=projected_revenue,
    )
