"""Indian agricultural calendar tables keyed by month (1-12)."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from app.models.advisory import SeasonInfo


@dataclass(frozen=True)
class SeasonRow:
    months: Tuple[int, ...]
    season: str
    sowing_suitability: str
    crop_type: str
    recommended_crops: Tuple[str, ...]
    avoid_crops: Tuple[str, ...]


SEASON_TABLE: List[SeasonRow] = [
    SeasonRow(
        months=(9,),
        season="Post-Monsoon (Transition to Rabi)",
        sowing_suitability="Ideal for Rabi crop preparation and early sowing",
        crop_type="Rabi crops (winter season)",
        recommended_crops=("Wheat", "Mustard", "Gram", "Pea", "Barley", "Lentil", "Chickpea"),
        avoid_crops=("Rice", "Cotton", "Sugarcane", "Maize"),
    ),
    SeasonRow(
        months=(10, 11, 12),
        season="Rabi Season (Winter crops)",
        sowing_suitability="Prime time for Rabi crop sowing",
        crop_type="Rabi crops (winter season)",
        recommended_crops=("Wheat", "Mustard", "Gram", "Pea", "Barley", "Potato", "Onion"),
        avoid_crops=("Rice", "Cotton", "Bajra"),
    ),
    SeasonRow(
        months=(1, 2, 3),
        season="Late Rabi (Harvest preparation)",
        sowing_suitability="Too late for most crops, focus on harvest and Zaid prep",
        crop_type="Zaid crop preparation",
        recommended_crops=("Fodder crops", "Green vegetables", "Summer pulses"),
        avoid_crops=("Most annual crops",),
    ),
    SeasonRow(
        months=(4, 5),
        season="Zaid Season (Summer crops)",
        sowing_suitability="Summer crop sowing with irrigation",
        crop_type="Zaid crops (summer season)",
        recommended_crops=("Watermelon", "Muskmelon", "Cucumber", "Fodder crops"),
        avoid_crops=("Water-intensive crops without irrigation",),
    ),
    SeasonRow(
        months=(6, 7, 8),
        season="Kharif Season (Monsoon crops)",
        sowing_suitability="Monsoon crop sowing time",
        crop_type="Kharif crops (monsoon season)",
        recommended_crops=("Rice", "Cotton", "Sugarcane", "Maize", "Bajra", "Jowar"),
        avoid_crops=("Wheat", "Mustard", "Gram"),
    ),
]

TIMING_ADVICE = {
    9: (
        "SEPTEMBER TIMING: Post-monsoon field preparation. Start Rabi crop planning. "
        "Ideal for land preparation and early variety sowing by month-end."
    ),
    10: "OCTOBER TIMING: Prime Rabi sowing month. Complete sowing by mid-October for best yields.",
    11: (
        "NOVEMBER TIMING: Last chance for Rabi crops. Late varieties only. "
        "Focus on quick-growing crops."
    ),
}
DEFAULT_TIMING_ADVICE = "Seasonal timing advice based on agricultural calendar."

SEASONAL_ACTIVITY = {
    1: "Rabi crop care, irrigation management, harvest preparation",
    2: "Late Rabi management, summer crop planning, soil preparation",
    3: "Rabi harvesting, field preparation for summer crops",
    4: "Zaid sowing, summer crop establishment, irrigation setup",
    5: "Summer crop care, heat management, water conservation",
    6: "Monsoon preparation, Kharif field preparation, seed procurement",
    7: "Kharif sowing, monsoon crop establishment, drainage management",
    8: "Kharif crop care, pest monitoring, nutrient management",
    9: "Late Kharif care, disease management, harvest planning",
    10: "Kharif harvesting, storage preparation, Rabi planning",
    11: "Post-harvest activities, Rabi sowing, field preparation",
    12: "Rabi establishment, winter crop care, irrigation scheduling",
}

# Crop lists used when a caller names a season instead of a month.
SEASON_CROPS = {
    "kharif": SEASON_TABLE[4].recommended_crops,
    "rabi": SEASON_TABLE[1].recommended_crops + ("Lentil", "Chickpea"),
    "zaid": SEASON_TABLE[3].recommended_crops,
}


def _month_or_now(month: Optional[int]) -> int:
    if month is None:
        return datetime.now().month
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return month


def season_row(month: int) -> SeasonRow:
    for row in SEASON_TABLE:
        if month in row.months:
            return row
    raise ValueError(f"month must be in 1..12, got {month}")


def timing_advice(month: int) -> str:
    return TIMING_ADVICE.get(month, DEFAULT_TIMING_ADVICE)


def seasonal_weather_context(month: int) -> str:
    if month == 9:
        return (
            "Post-monsoon: Reducing rainfall, good soil moisture, moderate temperatures "
            "ideal for land prep and sowing"
        )
    if 10 <= month <= 12:
        return "Rabi season: Cool, dry weather with minimal rainfall. Requires irrigation planning."
    return "Weather patterns suitable for recommended seasonal crops"


def get_season_info(month: Optional[int] = None) -> SeasonInfo:
    month = _month_or_now(month)
    row = season_row(month)
    return SeasonInfo(
        current_month=month,
        season=row.season,
        sowing_suitability=row.sowing_suitability,
        crop_type=row.crop_type,
        recommended_crops=list(row.recommended_crops),
        avoid_crops=list(row.avoid_crops),
        timing=timing_advice(month),
        weather_context=seasonal_weather_context(month),
    )


def agricultural_phase(month: int) -> str:
    if month in (6, 7):
        return "Kharif Sowing Phase - Critical planting window"
    if month in (8, 9):
        return "Kharif Growth Phase - Focus on crop care"
    if month in (10, 11):
        return "Kharif Harvest & Rabi Preparation"
    if month == 12 or month <= 2:
        return "Rabi Growth Phase - Winter crop management"
    if month in (3, 4):
        return "Rabi Harvest & Zaid Preparation"
    if month == 5:
        return "Zaid Season - Summer crop cultivation"
    return "Transitional Phase"


def seasonal_activity(month: int) -> str:
    return SEASONAL_ACTIVITY.get(month, "General farming activities")


def market_timing(month: int) -> str:
    if 10 <= month <= 12:
        return "Post-harvest season - High market activity for Kharif crops"
    if 3 <= month <= 5:
        return "Rabi harvest season - Good prices for winter crops"
    if 6 <= month <= 9:
        return "Growing season - Plan for harvest marketing"
    return "Regular market conditions"


def price_trends(month: int) -> str:
    if 10 <= month <= 12:
        return "Harvest season prices, plan storage for better rates"
    if 3 <= month <= 5:
        return "Peak demand period, good selling opportunity"
    return "Stable prices, focus on quality production"


def crops_for_season(season: Optional[str]) -> List[str]:
    """Crops for a named season ("kharif", "Rabi Season", ...). Unknown names give []."""
    if not season:
        return []
    key = season.strip().lower()
    for name, crops in SEASON_CROPS.items():
        if name in key:
            return list(crops)
    return []
