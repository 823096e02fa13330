"""
Unit tests for the campaign weather report.
"""

import pytest

from productlobby.scoring.weather import (
    FORECASTS,
    WeatherCondition,
    WeatherInputs,
    campaign_weather,
    classify_condition,
    engagement_label,
    growth_label,
)


class TestClassifyCondition:
    @pytest.mark.parametrize(
        "temperature, wind, sunshine, condition",
        [
            (90, 25, 20, WeatherCondition.STORMY),
            (85, 0, 70, WeatherCondition.HEATWAVE),
            (65, 0, 70, WeatherCondition.SUNNY),
            (50, 0, 45, WeatherCondition.PARTLY_CLOUDY),
            (30, 0, 20, WeatherCondition.FREEZING),
            (50, 0, 20, WeatherCondition.OVERCAST),
        ],
    )
    def test_rules(self, temperature, wind, sunshine, condition):
        assert classify_condition(temperature, wind, sunshine) == condition


class TestCampaignWeather:
    def test_defaults_are_flat_and_calm(self):
        report = campaign_weather(WeatherInputs())

        assert report.temperature == 50
        assert report.wind_speed == 0
        assert report.condition == WeatherCondition.PARTLY_CLOUDY
        assert report.emoji == "⛅"
        assert report.forecast == FORECASTS["falling"]
        assert report.growth_label == "Stable"
        assert report.engagement_label == "Calm"

    def test_booming_campaign(self):
        report = campaign_weather(
            WeatherInputs(lobbies_growth=100, comments_velocity=12, sentiment_score=80, signal_score=72)
        )

        assert report.temperature == 100
        assert report.condition == WeatherCondition.HEATWAVE
        assert report.emoji == "🔥"
        assert report.forecast == FORECASTS["rising"]
        assert report.growth_label == "Booming"
        assert report.engagement_label == "Breezy"

    @pytest.mark.parametrize("growth", [-1000, -100, 0, 37, 100, 5000])
    def test_temperature_within_bounds(self, growth):
        report = campaign_weather(WeatherInputs(lobbies_growth=growth))

        assert 0 <= report.temperature <= 100


@pytest.mark.parametrize(
    "growth, label", [(50, "Booming"), (20, "Growing"), (0, "Stable"), (-20, "Slowing"), (-21, "Declining")]
)
def test_growth_label(growth, label):
    assert growth_label(growth) == label


@pytest.mark.parametrize("wind, label", [(20, "Storming"), (10, "Breezy"), (5, "Mild"), (4, "Calm")])
def test_engagement_label(wind, label):
    assert engagement_label(wind) == label
