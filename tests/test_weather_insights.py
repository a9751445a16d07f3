from datetime import date

import pytest

from app.services import weather_insights
from app.services.weather_insights import (
    DROUGHT,
    FLOODING,
    HEAT_STRESS,
    KHARIF,
    RABI,
    ZAID,
)


@pytest.mark.parametrize(
    "month, season",
    [(6, KHARIF), (10, KHARIF), (11, RABI), (2, RABI), (3, RABI), (4, ZAID), (5, ZAID)],
)
def test_season_for_month(month, season):
    assert weather_insights.season_for_month(month) == season


def test_climate_zone_label():
    assert weather_insights.climate_zone_label(10.0, 76.0) == "Tropical Coastal (Kerala)"
    assert weather_insights.climate_zone_label(23.3, 85.3) == "Subtropical Humid (Jharkhand)"
    assert weather_insights.climate_zone_label(40.0, 10.0) == "Mixed Climate Zone"


def test_stability_index():
    assert weather_insights.stability_index([], []) == "Stable"
    assert weather_insights.stability_index([25, 27], [0, 5]) == "Stable"
    assert weather_insights.stability_index([20, 32], [0, 0]) == "Highly Variable"
    assert weather_insights.stability_index([20, 27], [0, 0]) == "Moderately Variable"


def test_trends(forecast_day_factory):
    days = [forecast_day_factory(1, temp=25, rainfall=6), forecast_day_factory(2, temp=29, rainfall=6)]
    trends = weather_insights.weather_trends(days)
    assert trends.temperature_trend == "Rising"
    assert trends.rainfall_trend == "Wet period"


def test_seasonal_insights(forecast_day_factory):
    insights = weather_insights.seasonal_insights(
        23.3, 85.3, [forecast_day_factory(1)], month=7
    )
    assert insights.current_season == KHARIF
    assert insights.season_details.period == "June - October"
    assert insights.climate_zone == "Subtropical Humid (Jharkhand)"


def test_dry_forecast_flags_drought(weather_snapshot):
    risks = weather_insights.risk_factors(
        weather_snapshot.current, weather_snapshot.forecast, KHARIF
    )
    assert DROUGHT in risks.immediate
    assert "Implement water conservation, drought-tolerant varieties" in risks.mitigation
    assert risks.seasonal == ["Delayed monsoon", "Excess rainfall", "Pest outbreaks"]


def test_empty_forecast_has_no_drought_flag(weather_snapshot):
    risks = weather_insights.risk_factors(weather_snapshot.current, [], RABI)
    assert risks.immediate == []
    assert risks.mitigation == ["Monitor conditions regularly"]


def test_heat_and_flood_risks(snapshot_factory, forecast_day_factory):
    snapshot = snapshot_factory(temp=42.0)
    forecast = [forecast_day_factory(1, rainfall=60.0)]
    risks = weather_insights.risk_factors(snapshot.current, forecast, ZAID)
    assert risks.immediate == [HEAT_STRESS, FLOODING]


def test_agricultural_recommendations(weather_snapshot):
    recommendations = weather_insights.agricultural_recommendations(
        weather_snapshot.current, weather_snapshot.forecast, KHARIF
    )
    assert recommendations.planting.planting_window == "June-July (with monsoon onset)"
    assert recommendations.planting.soil_moisture == "Adequate moisture"
    assert recommendations.crop_care.fertilization == (
        "Apply nitrogen in split doses, phosphorus at planting"
    )
    assert recommendations.harvesting.conditions == "Good harvesting conditions in forecast period"
    assert recommendations.harvesting.post_harvest == "Ensure proper drying, risk of spoilage"


def test_extended_outlook_wraps_the_year():
    outlook = weather_insights.extended_outlook(date(2025, 11, 20))
    assert [(month.month, month.year) for month in outlook.outlook] == [
        ("November", 2025),
        ("December", 2025),
        ("January", 2026),
        ("February", 2026),
    ]
    assert outlook.outlook[0].expected_conditions == "Cool, clear weather"
    assert len(outlook.long_term_recommendations) == 6
