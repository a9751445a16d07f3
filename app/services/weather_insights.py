"""Agricultural insights derived from a current reading plus a short daily forecast."""

import calendar
from datetime import date
from typing import List, Optional, Sequence

from app.models.weather import (
    AgriculturalRecommendations,
    CropCareGuidance,
    CurrentConditions,
    DailyForecast,
    ExtendedOutlook,
    HarvestingGuidance,
    MonthlyOutlook,
    PlantingGuidance,
    RiskFactors,
    SeasonalInsights,
    SeasonDetails,
    WeatherTrends,
)

KHARIF = "Kharif"
RABI = "Rabi"
ZAID = "Zaid"

SEASON_DETAILS = {
    KHARIF: SeasonDetails(
        name="Kharif (Monsoon Season)",
        period="June - October",
        characteristics="Monsoon-dependent crops, high rainfall, warm temperatures",
        ideal_crops=["Rice", "Maize", "Cotton", "Sugarcane", "Pulses", "Oilseeds"],
        key_factors=["Monsoon timing", "Rainfall distribution", "Humidity levels", "Temperature range"],
    ),
    RABI: SeasonDetails(
        name="Rabi (Winter Season)",
        period="November - March",
        characteristics="Cool, dry weather, irrigation-dependent",
        ideal_crops=["Wheat", "Barley", "Peas", "Gram", "Mustard", "Chickpea"],
        key_factors=["Temperature control", "Irrigation scheduling", "Frost protection", "Soil moisture"],
    ),
    ZAID: SeasonDetails(
        name="Zaid (Summer Season)",
        period="April - June",
        characteristics="Hot, dry weather, short duration crops",
        ideal_crops=["Watermelon", "Muskmelon", "Cucumber", "Fodder crops", "Maize"],
        key_factors=["Heat tolerance", "Water availability", "Quick maturation", "Market timing"],
    ),
}

PLANTING_WINDOWS = {
    KHARIF: "June-July (with monsoon onset)",
    RABI: "October-November (post-monsoon)",
    ZAID: "March-April (pre-summer)",
}

HARVEST_TIMING = {
    KHARIF: "September-October, avoid rainy periods",
    RABI: "March-April, ideal dry conditions",
    ZAID: "May-June, harvest before peak summer",
}

SEASONAL_RISKS = {
    KHARIF: ["Delayed monsoon", "Excess rainfall", "Pest outbreaks"],
    RABI: ["Frost damage", "Water scarcity", "Hailstorms"],
    ZAID: ["Heat waves", "Water stress", "Market volatility"],
}

HEAT_STRESS = "Heat stress on crops"
HUMIDITY_DISEASE = "High humidity disease risk"
FLOODING = "Heavy rainfall/flooding risk"
DROUGHT = "Drought conditions"

RISK_MITIGATION = {
    HEAT_STRESS: "Provide shade, increase irrigation frequency",
    HUMIDITY_DISEASE: "Improve air circulation, apply preventive fungicides",
    FLOODING: "Ensure proper drainage, avoid low-lying areas",
    DROUGHT: "Implement water conservation, drought-tolerant varieties",
}

MONTHLY_EXPECTATIONS = {
    1: "Cool, dry conditions",
    2: "Warming trend begins",
    3: "Pre-monsoon heat",
    4: "Hot, dry weather",
    5: "Peak summer heat",
    6: "Monsoon onset",
    7: "Heavy monsoon rains",
    8: "Continued monsoon",
    9: "Monsoon withdrawal",
    10: "Post-monsoon transition",
    11: "Cool, clear weather",
    12: "Winter conditions",
}

MONTHLY_FOCUS = {
    1: ["Rabi crop management", "Irrigation scheduling"],
    2: ["Pest monitoring", "Fertilizer application"],
    3: ["Harvest preparation", "Zaid crop planning"],
    4: ["Zaid sowing", "Summer crop care"],
    5: ["Heat stress management", "Water conservation"],
    6: ["Kharif preparation", "Monsoon readiness"],
    7: ["Kharif sowing", "Drainage management"],
    8: ["Crop monitoring", "Pest control"],
    9: ["Disease management", "Harvest planning"],
    10: ["Kharif harvest", "Rabi preparation"],
    11: ["Rabi sowing", "Storage management"],
    12: ["Winter crop care", "Planning next year"],
}

CRITICAL_ACTIVITIES = {
    1: ["Wheat irrigation", "Vegetable harvesting"],
    2: ["Mustard flowering care", "Summer crop planning"],
    3: ["Rabi harvest", "Field preparation"],
    4: ["Zaid sowing", "Irrigation system check"],
    5: ["Heat protection", "Water management"],
    6: ["Field preparation", "Seed treatment"],
    7: ["Timely sowing", "Weed management"],
    8: ["Nutrient management", "Pest scouting"],
    9: ["Disease control", "Drainage maintenance"],
    10: ["Harvest timing", "Storage preparation"],
    11: ["Timely sowing", "Seed bed preparation"],
    12: ["Cold protection", "Irrigation scheduling"],
}

SEASONAL_TRANSITIONS = {
    "Rabi to Zaid": "March-April: Prepare for heat, ensure water availability",
    "Zaid to Kharif": "May-June: Monsoon preparation, drainage systems",
    "Kharif to Rabi": "October-November: Field preparation, residue management",
}

LONG_TERM_RECOMMENDATIONS = [
    "Invest in climate-resilient crop varieties",
    "Implement water-efficient irrigation systems",
    "Develop integrated pest management strategies",
    "Build soil health through organic matter",
    "Diversify crops to reduce weather risks",
    "Adopt precision agriculture technologies",
]

# (min_lat, max_lat, min_lon, max_lon, label); looser than the resolver's boxes.
CLIMATE_ZONE_LABELS = [
    (8, 12, 74, 78, "Tropical Coastal (Kerala)"),
    (11, 18, 74, 78, "Tropical Dry (Karnataka)"),
    (21, 25, 83, 88, "Subtropical Humid (Jharkhand)"),
    (23, 31, 77, 85, "Subtropical Continental (UP)"),
]


def season_for_month(month: int) -> str:
    if 6 <= month <= 10:
        return KHARIF
    if month >= 11 or month <= 3:
        return RABI
    return ZAID


def climate_zone_label(lat: float, lon: float) -> str:
    for min_lat, max_lat, min_lon, max_lon, label in CLIMATE_ZONE_LABELS:
        if min_lat <= lat <= max_lat and min_lon <= lon <= max_lon:
            return label
    return "Mixed Climate Zone"


def stability_index(temps: Sequence[float], rainfall: Sequence[float]) -> str:
    if not temps:
        return "Stable"
    temp_variation = max(temps) - min(temps)
    rain_variation = (max(rainfall) - min(rainfall)) if rainfall else 0.0
    if temp_variation < 5 and rain_variation < 10:
        return "Stable"
    if temp_variation > 10 or rain_variation > 20:
        return "Highly Variable"
    return "Moderately Variable"


def weather_trends(forecast: Sequence[DailyForecast]) -> WeatherTrends:
    temps = [day.temp_avg for day in forecast]
    rainfall = [day.rainfall for day in forecast]
    rising = len(temps) > 1 and temps[-1] > temps[0]
    return WeatherTrends(
        temperature_trend="Rising" if rising else "Falling",
        rainfall_trend="Wet period" if sum(rainfall) > 10 else "Dry period",
        stability_index=stability_index(temps, rainfall),
    )


def seasonal_insights(
    lat: float, lon: float, forecast: Sequence[DailyForecast], month: int
) -> SeasonalInsights:
    season = season_for_month(month)
    return SeasonalInsights(
        current_season=season,
        season_details=SEASON_DETAILS[season].model_copy(deep=True),
        climate_zone=climate_zone_label(lat, lon),
        weather_trends=weather_trends(forecast),
    )


def planting_actions(temp: float, humidity: float, rainfall: float) -> List[str]:
    actions = []
    if temp > 25:
        actions.append("Consider heat-tolerant varieties")
    if humidity < 50:
        actions.append("Ensure adequate irrigation setup")
    if rainfall < 5:
        actions.append("Plan for supplemental watering")
    if temp < 15:
        actions.append("Wait for warmer conditions or use protected cultivation")
    return actions or ["Conditions suitable for planting"]


def irrigation_advice(rainfall: float, humidity: float, temp: float) -> str:
    if rainfall > 10:
        return "Reduce irrigation, monitor for waterlogging"
    if rainfall < 2 and temp > 30:
        return "Increase irrigation frequency, consider drip systems"
    if humidity < 40:
        return "Monitor soil moisture closely, may need daily watering"
    return "Maintain regular irrigation schedule based on crop needs"


def fertilization_advice(season: str, rainfall: float) -> str:
    if rainfall > 15:
        return "Delay fertilizer application, risk of nutrient leaching"
    if season == KHARIF:
        return "Apply nitrogen in split doses, phosphorus at planting"
    if season == RABI:
        return "Focus on phosphorus and potassium, moderate nitrogen"
    return "Apply balanced fertilizers based on soil test results"


def pest_management_advice(temp: float, humidity: float) -> str:
    if temp > 28 and humidity > 70:
        return "High pest activity expected, monitor closely"
    if temp < 20:
        return "Low pest pressure, routine monitoring sufficient"
    return "Moderate pest risk, implement IPM practices"


def disease_risk(temp: float, humidity: float, rainfall: float) -> str:
    if humidity > 80 and rainfall > 10:
        return "High fungal disease risk"
    if temp > 35 and humidity < 40:
        return "Low disease pressure"
    return "Moderate disease risk, maintain good field hygiene"


def harvesting_conditions(forecast: Sequence[DailyForecast]) -> str:
    rainy_days = sum(1 for day in forecast if day.rainfall > 2)
    if rainy_days > 2:
        return "Delay harvest, wet conditions expected"
    return "Good harvesting conditions in forecast period"


def post_harvest_advice(temp: float, humidity: float) -> str:
    if humidity > 70:
        return "Ensure proper drying, risk of spoilage"
    if temp > 35:
        return "Store in cool, ventilated areas"
    return "Standard post-harvest handling recommended"


def risk_factors(
    current: CurrentConditions, forecast: Sequence[DailyForecast], season: str
) -> RiskFactors:
    risks = []
    if current.temp > 40:
        risks.append(HEAT_STRESS)
    if current.humidity > 90:
        risks.append(HUMIDITY_DISEASE)
    if any(day.rainfall > 50 for day in forecast):
        risks.append(FLOODING)
    if forecast and all(day.rainfall < 1 for day in forecast):
        risks.append(DROUGHT)

    mitigation = [RISK_MITIGATION[risk] for risk in risks]
    return RiskFactors(
        immediate=risks,
        seasonal=list(SEASONAL_RISKS.get(season, ["General weather risks"])),
        mitigation=mitigation or ["Monitor conditions regularly"],
    )


def agricultural_recommendations(
    current: CurrentConditions, forecast: Sequence[DailyForecast], season: str
) -> AgriculturalRecommendations:
    temp, humidity = current.temp, current.humidity
    avg_rainfall = sum(day.rainfall for day in forecast) / len(forecast) if forecast else 0.0

    return AgriculturalRecommendations(
        planting=PlantingGuidance(
            soil_temperature="Optimal for most crops" if temp > 15 else "Too cold for warm-season crops",
            soil_moisture="Adequate moisture" if humidity > 60 else "May need irrigation",
            planting_window=PLANTING_WINDOWS.get(season, "Consult local agricultural calendar"),
            recommended_actions=planting_actions(temp, humidity, avg_rainfall),
        ),
        crop_care=CropCareGuidance(
            irrigation=irrigation_advice(avg_rainfall, humidity, temp),
            fertilization=fertilization_advice(season, avg_rainfall),
            pest_management=pest_management_advice(temp, humidity),
            disease_risk=disease_risk(temp, humidity, avg_rainfall),
        ),
        harvesting=HarvestingGuidance(
            timing=HARVEST_TIMING.get(season, "Follow crop-specific maturity indicators"),
            conditions=harvesting_conditions(forecast),
            post_harvest=post_harvest_advice(temp, humidity),
        ),
        risk_factors=risk_factors(current, forecast, season),
    )


def extended_outlook(start: Optional[date] = None, months: int = 4) -> ExtendedOutlook:
    start = start or date.today()
    outlook = []
    for offset in range(months):
        index = start.month - 1 + offset
        year, month = start.year + index // 12, index % 12 + 1
        outlook.append(
            MonthlyOutlook(
                month=calendar.month_name[month],
                year=year,
                expected_conditions=MONTHLY_EXPECTATIONS[month],
                agricultural_focus=list(MONTHLY_FOCUS[month]),
                critical_activities=list(CRITICAL_ACTIVITIES[month]),
            )
        )
    return ExtendedOutlook(
        outlook=outlook,
        seasonal_transitions=dict(SEASONAL_TRANSITIONS),
        long_term_recommendations=list(LONG_TERM_RECOMMENDATIONS),
    )
