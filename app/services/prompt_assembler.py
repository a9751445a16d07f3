"""
Renders an AdvisoryContext into the text handed to the chat model.

Each section is optional: a context without weather or local facts simply
renders without those sections.
"""

import re
from datetime import datetime
from typing import List, Optional, Sequence

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from app.models.advisory import AdvisoryContext
from app.models.knowledge import EconomicFact
from app.models.soil import SoilProfile, SoilType
from app.models.weather import WeatherSnapshot
from app.services.crop_names import language_for, regional_names
from app.services.knowledge_base import format_inr
from app.services.season import (
    agricultural_phase,
    market_timing,
    price_trends,
    seasonal_activity,
)
from app.services.specialty_crops import specialty_summary

CROP_KEYWORDS = [
    "wheat",
    "rice",
    "paddy",
    "mustard",
    "gram",
    "pea",
    "barley",
    "lentil",
    "chickpea",
    "tomato",
    "onion",
    "potato",
    "cotton",
    "sugarcane",
    "maize",
    "coconut",
    "rubber",
    "vanilla",
    "moringa",
]
MAX_DETECTED_CROPS = 3

# Whole words only, plurals allowed: "price" is not rice, "tomatoes" is tomato.
_CROP_PATTERNS = [
    (crop, re.compile(rf"\b{re.escape(crop)}(?:e?s)?\b")) for crop in CROP_KEYWORDS
]

FERTILIZER_PANE_KEYWORDS = [
    "plant",
    "crop",
    "recommend",
    "grow",
    "cultivate",
    "farming",
    "agriculture",
    "seed",
    "sow",
    "harvest",
    "fertilizer",
]

MAX_RECOMMENDATIONS = 5
MAX_ECONOMIC_CROPS = 8
EXPORT_STATES = {"kerala", "karnataka"}

SOURCES = [
    "Weather Forecast API",
    "Soil Analysis Database",
    "Market Price Intelligence",
    "Agricultural Research Database",
]

_LIST_ITEM = re.compile(r"^(\d+\.\s*|[-•]\s+)")

SOIL_TYPE_SUITABILITY = {
    SoilType.LATERITE: "Laterite soil: Best for coconut, cashew, spices, tea, coffee",
    SoilType.ALLUVIAL: "Alluvial soil: Excellent for cereals, sugarcane, cotton, wheat, rice",
    SoilType.RED_SOIL: "Red soil: Good for cotton, wheat, pulses, millets, groundnut",
    SoilType.BLACK_SOIL: "Black soil: Excellent for cotton, wheat, jowar, linseed, sunflower",
}


def extract_recommendations(response: str) -> List[str]:
    """Top numbered or bulleted lines of a model answer."""
    recommendations = []
    for line in response.splitlines():
        stripped = line.strip()
        match = _LIST_ITEM.match(stripped)
        if match:
            recommendations.append(stripped[match.end():])
    return recommendations[:MAX_RECOMMENDATIONS]


def detect_crops(text: str) -> List[str]:
    lowered = text.lower()
    found = [crop for crop, pattern in _CROP_PATTERNS if pattern.search(lowered)]
    return found[:MAX_DETECTED_CROPS]


def should_trigger_fertilizer_pane(query: str) -> bool:
    lowered = query.lower()
    return any(keyword in lowered for keyword in FERTILIZER_PANE_KEYWORDS)


def time_of_day(hour: int) -> str:
    if 5 <= hour < 10:
        return "Early Morning (optimal for farm planning and field visits)"
    if 10 <= hour < 16:
        return "Daytime (active farming hours, avoid heat stress activities)"
    if 16 <= hour < 19:
        return "Late Afternoon (good for irrigation and light field work)"
    if 19 <= hour < 22:
        return "Evening (planning and preparation time)"
    return "Night (rest period, avoid field activities)"


def moisture_status(moisture: float) -> str:
    if moisture < 25:
        return "(Low - needs irrigation)"
    if moisture > 75:
        return "(High - ensure drainage)"
    return "(Optimal)"


def organic_status(organic: float) -> str:
    if organic < 2:
        return "(Low - needs organic amendment)"
    if organic > 4:
        return "(Excellent)"
    return "(Good)"


def crop_suitability(soil: SoilProfile) -> List[str]:
    lines = []
    if soil.ph < 6.0:
        lines.append(f"- Acidic soil ({soil.ph}): Excellent for tea, coffee, potatoes, blueberries")
        lines.append("- Moderate for: rice (paddy), ragi, pulses")
        lines.append("- Avoid: wheat, barley, brassicas (without lime treatment)")
    elif soil.ph > 8.0:
        lines.append(f"- Alkaline soil ({soil.ph}): Good for wheat, barley, cotton, mustard")
        lines.append("- Moderate for: sorghum, pearl millet")
        lines.append("- Avoid: potato, tomato, acid-loving crops")
    else:
        lines.append(
            f"- Neutral pH ({soil.ph}): Excellent for most crops including rice, wheat, vegetables"
        )
        lines.append("- Optimal for: maize, sugarcane, cotton, most vegetables")

    if soil.moisture_percent < 30:
        lines.append(
            f"- Low moisture ({soil.moisture_percent:g}%): Favor drought-tolerant crops like millet, sorghum"
        )
    elif soil.moisture_percent > 70:
        lines.append(
            f"- High moisture ({soil.moisture_percent:g}%): Excellent for rice, sugarcane, water-intensive crops"
        )

    note = SOIL_TYPE_SUITABILITY.get(soil.soil_type)
    if note:
        lines.append(f"- {note}")
    return lines


def economic_score(fact: EconomicFact) -> int:
    score = {"high": 30, "medium": 20}.get(fact.economic_importance.lower(), 0)
    score += {"cash crops": 25, "pulses": 20, "cereals": 15}.get(fact.category.lower(), 0)
    return score


def market_potential(fact: EconomicFact) -> str:
    crop = fact.crop.lower()
    if any(name in crop for name in ("cotton", "sugarcane", "spices", "fruits", "vegetables")):
        return "High market demand, good export potential"
    if fact.economic_importance.lower() == "high":
        return "Steady local demand, good regional market"
    return "Moderate market potential, focus on local consumption"


def cultivation_ease(fact: EconomicFact) -> str:
    crop = fact.crop.lower()
    if any(name in crop for name in ("rice", "wheat", "maize", "pulses")):
        return "Easy to cultivate, well-established practices"
    if fact.category.lower() == "cereals":
        return "Moderate cultivation complexity, good farmer knowledge"
    return "Requires specialized knowledge and care"


def risk_level(fact: EconomicFact) -> str:
    crop = fact.crop.lower()
    if any(name in crop for name in ("rice", "wheat", "pulses")):
        return "Low risk, climate resilient"
    if any(name in crop for name in ("cotton", "sugarcane")):
        return "Moderate risk, weather dependent"
    return "Variable risk based on market conditions"


class PromptAssembler:
    def __init__(self, system_prompt: str) -> None:
        self.system_prompt = system_prompt
        self._template = ChatPromptTemplate.from_messages(
            [("system", "{system_prompt}"), ("human", "{user_prompt}")]
        )

    def build_messages(
        self, context: AdvisoryContext, now: Optional[datetime] = None
    ) -> List[BaseMessage]:
        return self._template.format_messages(
            system_prompt=self.system_prompt,
            user_prompt=self.render(context, now),
        )

    def render(self, context: AdvisoryContext, now: Optional[datetime] = None) -> str:
        now = now or datetime.now()
        state_name = context.region.state_name
        sections = [
            f"FARMER'S QUESTION: \"{context.query}\"",
            f"LOCATION: {context.region.district}, {state_name}, India "
            f"({context.season_info.season})",
            "",
            self._temporal_section(context, now),
            self._soil_section(context),
        ]
        if context.external_weather is not None:
            sections.append(self._weather_section(context.external_weather))
        if context.crop_facts:
            sections.append(
                self._economic_section(
                    context.crop_facts, state_name, language_for(context.region.state)
                )
            )
        if context.specialty_crops:
            sections.append(specialty_summary(context.specialty_crops))
        local = self._local_data_section(context)
        if local:
            sections.append(local)
        sections.append(self._fertilizer_section(context))
        sections.append(self._market_section(context))
        sections.append(self._seasonal_requirement_section(context))
        sections.append(f"CONTEXT CONFIDENCE: {round(context.confidence_score * 100)}%")
        return "\n".join(section for section in sections if section is not None).strip()

    def _temporal_section(self, context: AdvisoryContext, now: datetime) -> str:
        month = context.season_info.current_month
        return "\n".join(
            [
                "TEMPORAL AGRICULTURAL CONTEXT:",
                f"- Current Time: {now.strftime('%A, %d %B %Y %H:%M')}",
                f"- Time of Day: {time_of_day(now.hour)}",
                f"- Agricultural Phase: {agricultural_phase(month)}",
                f"- Seasonal Activity: {seasonal_activity(month)}",
                f"- Market Timing: {market_timing(month)}",
                "",
            ]
        )

    def _soil_section(self, context: AdvisoryContext) -> str:
        soil = context.soil_profile
        region = context.region
        lines = [
            "SOIL INTELLIGENCE (estimated from location):",
            f"- District: {region.district}, {region.state_name.upper()}",
            f"- Climate Zone: {region.climate_zone.value}",
            f"- Location Confidence: {region.confidence * 100:.0f}%",
            f"- Soil Data Confidence: {soil.confidence * 100:.0f}%",
            f"- pH Level: {soil.ph:.2f} ({soil.ph_category.value})",
            f"- Soil Type: {soil.soil_type.value}",
            f"- Moisture Level: {soil.moisture_percent:.1f}% {moisture_status(soil.moisture_percent)}",
            f"- Organic Matter: {soil.organic_matter_percent:.1f}% "
            f"{organic_status(soil.organic_matter_percent)}",
            "",
            "SOIL-SPECIFIC RECOMMENDATIONS:",
        ]
        lines.extend(f"{index}. {rec}" for index, rec in enumerate(soil.recommendations, 1))
        lines.append("")
        lines.append("SOIL SUITABILITY ANALYSIS:")
        lines.extend(crop_suitability(soil))
        lines.append("")
        return "\n".join(lines)

    def _weather_section(self, weather: WeatherSnapshot) -> str:
        current = weather.current
        lines = [
            f"WEATHER IN {weather.location.name.upper()}:",
            f"- Temperature: {current.temp}°C (feels like {current.feels_like}°C)",
            f"- Humidity: {current.humidity}%",
            f"- Weather: {current.description}",
            f"- Wind Speed: {current.wind_speed} m/s",
            f"- Pressure: {current.pressure} hPa",
            "",
        ]

        insights = weather.seasonal_insights
        if insights is not None:
            details = insights.season_details
            trends = insights.weather_trends
            lines.extend(
                [
                    "Agricultural Season Analysis:",
                    f"- Current Season: {insights.current_season} ({details.name})",
                    f"- Period: {details.period}",
                    f"- Climate Zone: {insights.climate_zone}",
                    f"- Weather Trends: {trends.temperature_trend} temperatures, "
                    f"{trends.rainfall_trend}",
                    f"- Stability Index: {trends.stability_index}",
                    f"- Season-Optimal Crops: {', '.join(details.ideal_crops)}",
                    f"- Key Success Factors: {', '.join(details.key_factors)}",
                    "",
                ]
            )

        recs = weather.agricultural_recommendations
        if recs is not None:
            lines.extend(
                [
                    "PLANTING GUIDANCE:",
                    f"- Soil Temperature: {recs.planting.soil_temperature}",
                    f"- Soil Moisture: {recs.planting.soil_moisture}",
                    f"- Planting Window: {recs.planting.planting_window}",
                    f"- Recommended Actions: {', '.join(recs.planting.recommended_actions)}",
                    "",
                    "CROP CARE INSTRUCTIONS:",
                    f"- Irrigation: {recs.crop_care.irrigation}",
                    f"- Fertilization: {recs.crop_care.fertilization}",
                    f"- Pest Management: {recs.crop_care.pest_management}",
                    f"- Disease Risk: {recs.crop_care.disease_risk}",
                    "",
                    "HARVESTING ADVICE:",
                    f"- Timing: {recs.harvesting.timing}",
                    f"- Conditions: {recs.harvesting.conditions}",
                    f"- Post-Harvest: {recs.harvesting.post_harvest}",
                    "",
                    "RISK ASSESSMENT:",
                    f"- Immediate Risks: {', '.join(recs.risk_factors.immediate) or 'None identified'}",
                    f"- Seasonal Risks: {', '.join(recs.risk_factors.seasonal)}",
                    f"- Mitigation: {', '.join(recs.risk_factors.mitigation)}",
                    "",
                ]
            )

        outlook = weather.extended_outlook
        if outlook is not None and outlook.outlook:
            lines.append("3-MONTH AGRICULTURAL CALENDAR:")
            for month in outlook.outlook[:3]:
                lines.append(f"{month.month} {month.year}: {month.expected_conditions}")
                lines.append(f"  Focus: {', '.join(month.agricultural_focus)}")
                lines.append(f"  Critical: {', '.join(month.critical_activities)}")
            lines.append("")
        return "\n".join(lines)

    def _economic_section(
        self, crops: Sequence[EconomicFact], state_name: str, language: Optional[str] = None
    ) -> str:
        ranked = sorted(crops, key=economic_score, reverse=True)[:MAX_ECONOMIC_CROPS]
        lines = [f"ECONOMIC CROP ANALYSIS FOR {state_name.upper()}:"]
        for index, fact in enumerate(ranked, 1):
            lines.extend(
                [
                    f"{index}. {fact.crop} ({fact.category}):",
                    f"   Known As: {', '.join(regional_names(fact.crop, language))}",
                    f"   Economic Importance: {fact.economic_importance}",
                    f"   Primary Areas: {fact.primary_districts}",
                    f"   Market Potential: {market_potential(fact)}",
                    f"   Cultivation Ease: {cultivation_ease(fact)}",
                    f"   Risk Level: {risk_level(fact)}",
                ]
            )
        lines.append("")
        return "\n".join(lines)

    def _local_data_section(self, context: AdvisoryContext) -> Optional[str]:
        if not (context.fertilizer_facts or context.pest_facts):
            return None
        lines = ["LOCAL AGRICULTURAL DATASET INSIGHTS:"]
        for fact in context.fertilizer_facts:
            lines.extend(
                [
                    f"- {fact.crop.upper()} ({fact.soil_type}, {fact.region}):",
                    f"  PROVEN YIELD: {fact.yield_quintals_per_ha:g} quintals per hectare",
                    f"  FERTILIZER: {fact.fertilizer_recommendation}",
                    f"  GROSS INCOME: {format_inr(fact.gross_income)} per hectare",
                    f"  FIELD NOTES: {fact.notes}",
                ]
            )
        if context.pest_facts:
            controls = "; ".join(
                f"{pest.pest}: {pest.natural_pesticides}" for pest in context.pest_facts
            )
            lines.append(f"- NATURAL PEST CONTROL: {controls}")
        lines.append("")
        return "\n".join(lines)

    def _fertilizer_section(self, context: AdvisoryContext) -> str:
        lines = ["FERTILIZER SCHEDULE:"]
        for action in context.fertilizer_actions:
            lines.append(
                f"- {action.step}: {action.amount_per_ha}; {action.amount_per_quintal}; {action.timing}"
            )
        lines.append("")
        return "\n".join(lines)

    def _market_section(self, context: AdvisoryContext) -> str:
        month = context.season_info.current_month
        if context.region.state.value in EXPORT_STATES:
            exports = "Good export infrastructure available, consider value-added crops"
        else:
            exports = "Focus on domestic market, consider processing opportunities"
        return "\n".join(
            [
                "MARKET INTELLIGENCE:",
                f"- Current Market Phase: {market_timing(month)}",
                f"- Price Trends: {price_trends(month)}",
                "- Demand Forecast: Increasing demand for organic produce, focus on sustainable practices",
                f"- Export Opportunities: {exports}",
                "",
            ]
        )

    def _seasonal_requirement_section(self, context: AdvisoryContext) -> str:
        season = context.season_info
        return "\n".join(
            [
                "CRITICAL SEASONAL REQUIREMENT:",
                f"- Current Season: {season.season}",
                f"- Sowing Status: {season.sowing_suitability}",
                f"- ONLY recommend crops suitable for sowing NOW: {', '.join(season.recommended_crops)}",
                f"- STRICTLY AVOID suggesting: {', '.join(season.avoid_crops)} (wrong season)",
                f"- Timing Context: {season.timing}",
                f"- Weather Context: {season.weather_context}",
                "",
            ]
        )
