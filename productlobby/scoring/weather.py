"""Campaign "weather": a metaphor mapping of growth, chatter, mood and signal.

* temperature: lobby growth, 50 means flat
* wind speed: comments in the last seven days
* sunshine: comment sentiment score
* pressure: signal score, which drives the forecast
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from pydantic import Field

from .base import BaseSchema
from .utils import clamp, round_int


class WeatherCondition(str, Enum):
    STORMY = "Stormy"
    HEATWAVE = "Heatwave"
    SUNNY = "Sunny"
    PARTLY_CLOUDY = "Partly Cloudy"
    FREEZING = "Freezing"
    OVERCAST = "Overcast"


CONDITION_DETAILS: Dict[WeatherCondition, Tuple[str, str]] = {
    WeatherCondition.STORMY: ("⛈️", "Lots of discussion with a critical tone. Worth addressing concerns directly."),
    WeatherCondition.HEATWAVE: ("🔥", "Supporters are pouring in and loving it."),
    WeatherCondition.SUNNY: ("☀️", "Steady growth and a happy community."),
    WeatherCondition.PARTLY_CLOUDY: ("⛅", "Generally positive, with room to build momentum."),
    WeatherCondition.FREEZING: ("❄️", "Growth has stalled. Share the campaign to warm things up."),
    WeatherCondition.OVERCAST: ("☁️", "Quiet and a little gloomy. Fresh updates could help."),
}

FORECASTS = {
    "rising": "Pressure is rising: demand looks strong enough to catch a brand's eye.",
    "steady": "Pressure is steady: keep the conversation going.",
    "falling": "Pressure is falling: more committed supporters are needed.",
}


class WeatherInputs(BaseSchema):
    lobbies_growth: float = Field(default=0.0, description="Percent change in lobbies, last 7 vs previous 7 days.")
    comments_velocity: int = Field(default=0, ge=0, description="Comments posted in the last 7 days.")
    sentiment_score: float = Field(default=50.0, ge=0, le=100)
    signal_score: float = Field(default=0.0, ge=0, le=100)


class WeatherReport(BaseSchema):
    condition: WeatherCondition
    emoji: str
    description: str
    forecast: str
    temperature: int
    wind_speed: int
    sunshine_level: float
    pressure: float
    growth_label: str
    engagement_label: str
    inputs: WeatherInputs


def classify_condition(temperature: float, wind_speed: float, sunshine: float) -> WeatherCondition:
    """First matching rule wins."""
    if wind_speed >= 20 and sunshine < 40:
        return WeatherCondition.STORMY
    if temperature >= 80 and sunshine >= 60:
        return WeatherCondition.HEATWAVE
    if sunshine >= 60 and temperature >= 60:
        return WeatherCondition.SUNNY
    if sunshine >= 40:
        return WeatherCondition.PARTLY_CLOUDY
    if temperature < 40:
        return WeatherCondition.FREEZING
    return WeatherCondition.OVERCAST


def forecast_for_pressure(pressure: float) -> str:
    if pressure >= 55:
        return FORECASTS["rising"]
    if pressure >= 35:
        return FORECASTS["steady"]
    return FORECASTS["falling"]


def growth_label(growth: float) -> str:
    if growth >= 50:
        return "Booming"
    if growth >= 20:
        return "Growing"
    if growth >= 0:
        return "Stable"
    if growth >= -20:
        return "Slowing"
    return "Declining"


def engagement_label(wind_speed: float) -> str:
    if wind_speed >= 20:
        return "Storming"
    if wind_speed >= 10:
        return "Breezy"
    if wind_speed >= 5:
        return "Mild"
    return "Calm"


def campaign_weather(inputs: WeatherInputs) -> WeatherReport:
    temperature = int(clamp(round_int(50 + inputs.lobbies_growth / 2), 0, 100))
    wind_speed = inputs.comments_velocity
    condition = classify_condition(temperature, wind_speed, inputs.sentiment_score)
    emoji, description = CONDITION_DETAILS[condition]
    return WeatherReport(
        condition=condition,
        emoji=emoji,
        description=description,
        forecast=forecast_for_pressure(inputs.signal_score),
        temperature=temperature,
        wind_speed=wind_speed,
        sunshine_level=inputs.sentiment_score,
        pressure=inputs.signal_score,
        growth_label=growth_label(inputs.lobbies_growth),
        engagement_label=engagement_label(wind_speed),
        inputs=inputs,
    )
