"""
Unit tests for the business case calculator.
"""

import pytest

from productlobby.scoring.business_case import (
    BusinessCaseInputs,
    ConfidenceLevel,
    calculate_business_case,
    calculate_margin,
    price_insights,
)
from productlobby.scoring.signal_score import SignalScoreInputs


class TestCalculateBusinessCase:
    def test_scenarios_grow_with_optimism(self):
        result = calculate_business_case(
            BusinessCaseInputs(
                neat_idea_count=50,
                probably_buy_count=30,
                take_my_money_count=20,
                support_count=10,
                intent_count=15,
                intent_verified_count=8,
                price_ceilings=[25, 30, 35, 40, 45, 50, 50, 55, 60, 60, 65, 70, 75, 80, 90],
                signal_score=65,
                completeness_score=75,
            )
        )

        assert result.optimistic.customers > result.moderate.customers > result.conservative.customers
        assert result.pricing.median_price_ceiling == 55
        # 2.5 + 7.5 + 13 + 6 customers at 55 each
        assert (result.moderate.customers, result.moderate.revenue) == (29, 1595)
        assert result.estimated_customers == result.moderate.customers
        # 7000 / (55 * 0.65)
        assert result.break_even.units_sold == 196
        assert result.break_even.time_to_break_even == "~6+ months"

    def test_minimal_data_is_low_confidence(self):
        result = calculate_business_case(
            BusinessCaseInputs(
                neat_idea_count=5,
                probably_buy_count=2,
                take_my_money_count=1,
                intent_count=2,
                signal_score=20,
                completeness_score=30,
            )
        )

        assert result.confidence_level == ConfidenceLevel.low
        assert result.confidence_score < 40
        assert result.recommended_action.startswith("Gather more data")

    def test_abundant_data_is_very_high_confidence(self):
        result = calculate_business_case(
            BusinessCaseInputs(
                neat_idea_count=200,
                probably_buy_count=150,
                take_my_money_count=100,
                support_count=50,
                intent_count=200,
                intent_verified_count=100,
                price_ceilings=[30 + i % 50 for i in range(100)],
                signal_score=85,
                completeness_score=95,
            )
        )

        assert result.confidence_score == 95
        assert result.confidence_level == ConfidenceLevel.very_high
        assert result.data_sufficiency == "Sufficient data for reliable projections"
        assert result.recommended_action.startswith("High confidence")

    def test_market_sizing(self):
        result = calculate_business_case(
            BusinessCaseInputs(
                neat_idea_count=40,
                probably_buy_count=30,
                take_my_money_count=20,
                support_count=10,
                intent_count=10,
                price_ceilings=[50, 50, 50],
                signal_score=50,
                completeness_score=50,
            )
        )

        assert result.total_demand_signals == 110
        assert result.weighted_demand == 40 * 1 + 30 * 3 + 20 * 5

    def test_moderate_conversion_rates(self):
        inputs = BusinessCaseInputs(
            neat_idea_count=100, probably_buy_count=100, take_my_money_count=100, price_ceilings=[50, 50, 50]
        )

        result = calculate_business_case(inputs)

        assert (result.conservative.customers, result.moderate.customers, result.optimistic.customers) == (62, 95, 130)
        assert result.conversion_rates == {"NEAT_IDEA": 0.05, "PROBABLY_BUY": 0.25, "TAKE_MY_MONEY": 0.65}

    def test_no_price_data(self):
        result = calculate_business_case(
            BusinessCaseInputs(neat_idea_count=10, probably_buy_count=10, take_my_money_count=10, intent_count=5)
        )

        assert result.pricing.avg_price_ceiling == 0
        assert result.pricing.median_price_ceiling == 0
        assert result.pricing.suggested_price_point == 0
        assert result.moderate.revenue == 0
        assert result.break_even.units_sold is None
        assert result.break_even.revenue_needed is None
        assert result.data_sufficiency == "Need more price ceiling data for confidence"


class TestPriceInsights:
    def test_suggested_price_is_below_median(self):
        insights = price_insights([100])

        assert insights.suggested_price_point == pytest.approx(85)

    def test_upper_median_and_range(self):
        insights = price_insights([40, 10, 30, 20])

        assert insights.median_price_ceiling == 30
        assert insights.avg_price_ceiling == 25
        assert (insights.price_range.min, insights.price_range.max) == (10, 40)


class TestInputs:
    def test_from_signal_inputs(self):
        signal_inputs = SignalScoreInputs(
            intent_count=4, intent_phone_verified_count=3, take_my_money_count=2, completeness_score=60
        )

        inputs = BusinessCaseInputs.from_signal_inputs(signal_inputs, (90.0, 110.0), 42.5)

        assert inputs.intent_verified_count == 3
        assert inputs.total_lobbies == 2
        assert inputs.price_ceilings == [90.0, 110.0]
        assert (inputs.signal_score, inputs.completeness_score) == (42.5, 60)


class TestCalculateMargin:
    def test_positive_margin(self):
        # 1000 revenue against 20 units at 35
        assert calculate_margin(1000, 35, 20) == 30

    def test_zero_revenue(self):
        assert calculate_margin(0, 35, 20) == 0

    def test_fixed_costs_reduce_margin(self):
        assert calculate_margin(1000, 35, 20, fixed_costs=100) < calculate_margin(1000, 35, 20)
