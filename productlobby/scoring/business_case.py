"""Business case: what a brand could earn by answering a campaign.

Lobby and pledge counts are turned into customers under conservative,
moderate and optimistic conversion assumptions, priced at the median intent
price ceiling. A confidence score grades how much the projection can be
trusted given the volume and quality of the data behind it.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, List, Optional, Sequence

from pydantic import Field

from .base import BaseSchema
from .signal_score import INTENSITY_WEIGHTS, INTENT_CONVERSION_RATE, SignalScoreInputs
from .utils import round_half_up, round_int

SCENARIO_CONVERSION_RATES: Dict[str, Dict[str, float]] = {
    "conservative": {"NEAT_IDEA": 0.02, "PROBABLY_BUY": 0.15, "TAKE_MY_MONEY": 0.45},
    "moderate": {"NEAT_IDEA": 0.05, "PROBABLY_BUY": 0.25, "TAKE_MY_MONEY": 0.65},
    "optimistic": {"NEAT_IDEA": 0.10, "PROBABLY_BUY": 0.40, "TAKE_MY_MONEY": 0.80},
}
DEFAULT_MARGIN = 40
SUGGESTED_PRICE_RATIO = 0.85
PRODUCTION_COST_RATIO = 0.35
FIXED_COSTS = 5000
MARKETING_COSTS = 2000
SUFFICIENT_PRICE_POINTS = 20
PROCEED_CONFIDENCE = 70


class ConfidenceLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    very_high = "very_high"


class BusinessCaseInputs(BaseSchema):
    neat_idea_count: int = Field(default=0, ge=0)
    probably_buy_count: int = Field(default=0, ge=0)
    take_my_money_count: int = Field(default=0, ge=0)
    support_count: int = Field(default=0, ge=0)
    intent_count: int = Field(default=0, ge=0)
    intent_verified_count: int = Field(default=0, ge=0)
    price_ceilings: List[float] = Field(default_factory=list)
    signal_score: float = Field(default=0.0, ge=0, le=100)
    completeness_score: float = Field(default=0.0, ge=0, le=100)

    @classmethod
    def from_signal_inputs(
        cls, inputs: SignalScoreInputs, price_ceilings: Sequence[float], signal_score: float
    ) -> "BusinessCaseInputs":
        return cls(
            neat_idea_count=inputs.neat_idea_count,
            probably_buy_count=inputs.probably_buy_count,
            take_my_money_count=inputs.take_my_money_count,
            support_count=inputs.support_count,
            intent_count=inputs.intent_count,
            intent_verified_count=inputs.intent_phone_verified_count,
            price_ceilings=list(price_ceilings),
            signal_score=signal_score,
            completeness_score=inputs.completeness_score,
        )

    @property
    def total_lobbies(self) -> int:
        return self.neat_idea_count + self.probably_buy_count + self.take_my_money_count


class PriceRange(BaseSchema):
    min: float
    max: float


class PriceInsights(BaseSchema):
    avg_price_ceiling: float
    median_price_ceiling: float
    price_range: PriceRange
    suggested_price_point: float


class ScenarioProjection(BaseSchema):
    customers: int
    revenue: int
    margin: int = Field(description="Assumed gross margin, percent.")


class BreakEvenAnalysis(BaseSchema):
    units_sold: Optional[int] = Field(default=None, description="None while there is no price data.")
    revenue_needed: Optional[int] = None
    time_to_break_even: str


class BusinessCase(BaseSchema):
    total_demand_signals: int
    weighted_demand: int
    conservative: ScenarioProjection
    moderate: ScenarioProjection
    optimistic: ScenarioProjection
    pricing: PriceInsights
    conversion_rates: Dict[str, float]
    estimated_customers: int
    confidence_level: ConfidenceLevel
    confidence_score: int
    data_sufficiency: str
    break_even: BreakEvenAnalysis
    recommended_action: str


def price_insights(price_ceilings: Sequence[float]) -> PriceInsights:
    """Average, upper median, range and an 85%-of-median suggested price."""
    if not price_ceilings:
        return PriceInsights(
            avg_price_ceiling=0,
            median_price_ceiling=0,
            price_range=PriceRange(min=0, max=0),
            suggested_price_point=0,
        )
    ordered = sorted(price_ceilings)
    median = ordered[len(ordered) // 2]
    return PriceInsights(
        avg_price_ceiling=round_half_up(sum(ordered) / len(ordered), 2),
        median_price_ceiling=median,
        price_range=PriceRange(min=ordered[0], max=ordered[-1]),
        suggested_price_point=round_half_up(median * SUGGESTED_PRICE_RATIO, 2),
    )


def project_scenario(inputs: BusinessCaseInputs, rates: Dict[str, float], price: float) -> ScenarioProjection:
    customers = round_int(
        inputs.neat_idea_count * rates["NEAT_IDEA"]
        + inputs.probably_buy_count * rates["PROBABLY_BUY"]
        + inputs.take_my_money_count * rates["TAKE_MY_MONEY"]
        + inputs.intent_count * INTENT_CONVERSION_RATE
    )
    return ScenarioProjection(customers=customers, revenue=round_int(customers * price), margin=DEFAULT_MARGIN)


def confidence(inputs: BusinessCaseInputs, total_signals: int) -> int:
    """Score data quality out of 100 from volume, price data, signal, completeness and conviction."""
    if total_signals > 200:
        score = 30
    elif total_signals > 100:
        score = 20
    elif total_signals > 50:
        score = 10
    else:
        score = 5

    price_points = len(inputs.price_ceilings)
    if price_points > 50:
        score += 25
    elif price_points > 20:
        score += 20
    elif price_points > 10:
        score += 15
    elif price_points > 0:
        score += 10

    if inputs.signal_score > 75:
        score += 25
    elif inputs.signal_score > 55:
        score += 20
    elif inputs.signal_score > 35:
        score += 10
    else:
        score += 5

    if inputs.completeness_score > 80:
        score += 10
    elif inputs.completeness_score > 60:
        score += 5
    else:
        score += 2

    # at least a fifth of lobbies are "take my money"
    if inputs.total_lobbies and inputs.take_my_money_count / inputs.total_lobbies > 0.2:
        score += 5
    return min(score, 100)


def confidence_level(score: int) -> ConfidenceLevel:
    if score >= 80:
        return ConfidenceLevel.very_high
    if score >= 60:
        return ConfidenceLevel.high
    if score >= 40:
        return ConfidenceLevel.medium
    return ConfidenceLevel.low


def break_even(scenario: ScenarioProjection, price: float) -> BreakEvenAnalysis:
    if scenario.customers > 500:
        timeframe = "~1-2 months"
    elif scenario.customers < 50:
        timeframe = "~6+ months"
    else:
        timeframe = "~3-4 months"
    if price <= 0:
        return BreakEvenAnalysis(time_to_break_even=timeframe)
    unit_profit = price - price * PRODUCTION_COST_RATIO
    units = math.ceil((FIXED_COSTS + MARKETING_COSTS) / unit_profit)
    return BreakEvenAnalysis(units_sold=units, revenue_needed=round_int(price * units), time_to_break_even=timeframe)


def calculate_business_case(inputs: BusinessCaseInputs) -> BusinessCase:
    """Project customers, revenue and break-even for a brand answering the campaign.

    Args:
        inputs: Lobby and pledge counts, intent price ceilings and campaign quality

    Returns:
        Three revenue scenarios priced at the median ceiling, with the
        moderate scenario used for the headline estimate and break-even
    """
    total_signals = inputs.total_lobbies + inputs.support_count + inputs.intent_count
    weighted_demand = (
        inputs.neat_idea_count * INTENSITY_WEIGHTS["NEAT_IDEA"]
        + inputs.probably_buy_count * INTENSITY_WEIGHTS["PROBABLY_BUY"]
        + inputs.take_my_money_count * INTENSITY_WEIGHTS["TAKE_MY_MONEY"]
    )
    pricing = price_insights(inputs.price_ceilings)
    scenarios = {
        name: project_scenario(inputs, rates, pricing.median_price_ceiling)
        for name, rates in SCENARIO_CONVERSION_RATES.items()
    }
    score = confidence(inputs, total_signals)
    return BusinessCase(
        total_demand_signals=total_signals,
        weighted_demand=weighted_demand,
        conservative=scenarios["conservative"],
        moderate=scenarios["moderate"],
        optimistic=scenarios["optimistic"],
        pricing=pricing,
        conversion_rates=dict(SCENARIO_CONVERSION_RATES["moderate"]),
        estimated_customers=scenarios["moderate"].customers,
        confidence_level=confidence_level(score),
        confidence_score=score,
        data_sufficiency=(
            "Sufficient data for reliable projections"
            if len(inputs.price_ceilings) > SUFFICIENT_PRICE_POINTS
            else "Need more price ceiling data for confidence"
        ),
        break_even=break_even(scenarios["moderate"], pricing.median_price_ceiling),
        recommended_action=(
            "High confidence. Proceed with offer creation."
            if score > PROCEED_CONFIDENCE
            else "Gather more data through surveys or polls before committing."
        ),
    )


def calculate_margin(
    gross_revenue: float,
    production_cost_per_unit: float,
    units_sold: int,
    fixed_costs: float = 0,
    variable_costs: float = 0,
) -> int:
    """Whole-number profit margin percent; 0 when there is no revenue."""
    if gross_revenue == 0:
        return 0
    total_costs = (production_cost_per_unit + variable_costs) * units_sold + fixed_costs
    return round_int((gross_revenue - total_costs) / gross_revenue * 100)
