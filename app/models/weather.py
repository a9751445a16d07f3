from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

# --- OpenWeatherMap payload models ---


class WeatherCondition(BaseModel):
    """Describes the weather condition (e.g., 'Clouds', 'Rain')."""

    id: Optional[int] = None
    main: str
    description: str
    icon: Optional[str] = None


class MainWeatherData(BaseModel):
    """Core weather metrics like temperature and humidity."""

    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: int
    humidity: int
    sea_level: Optional[int] = None
    grnd_level: Optional[int] = None


class Wind(BaseModel):
    """Wind speed and direction."""

    speed: float
    deg: int = 0
    gust: Optional[float] = None


class Rain(BaseModel):
    """Rain volume."""

    one_hour: Optional[float] = Field(None, alias="1h")
    three_hours: Optional[float] = Field(None, alias="3h")


class Sys(BaseModel):
    country: Optional[str] = None
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None


class Coordinates(BaseModel):
    """Latitude and Longitude."""

    lat: float
    lon: float


class CurrentWeatherResponse(BaseModel):
    """Model for the OpenWeatherMap current weather payload."""

    coord: Coordinates
    weather: List[WeatherCondition]
    main: MainWeatherData
    visibility: int = 0
    wind: Wind
    rain: Optional[Rain] = None
    dt: datetime
    sys: Sys
    name: str


class ForecastListItem(BaseModel):
    """A single forecast entry for a specific timestamp."""

    dt: datetime
    main: MainWeatherData
    weather: List[WeatherCondition]
    wind: Wind
    pop: float = Field(0.0, description="Probability of precipitation")
    rain: Optional[Rain] = None
    dt_txt: Optional[str] = None


class ForecastResponse(BaseModel):
    """Model for the 5-day/3-hour forecast payload."""

    list: List[ForecastListItem]


# --- Snapshot handed to the advisory pipeline ---


class WeatherLocation(BaseModel):
    name: str
    country: Optional[str] = None
    lat: float
    lon: float


class CurrentConditions(BaseModel):
    temp: float
    feels_like: float
    humidity: int
    pressure: int
    visibility: float = Field(..., description="Visibility in km.")
    wind_speed: float
    wind_deg: int
    weather: List[WeatherCondition]

    @property
    def description(self) -> str:
        return self.weather[0].description if self.weather else "unknown"


class DailyForecast(BaseModel):
    date: str
    temp_min: float
    temp_max: float
    temp_avg: float
    humidity: int
    rainfall: float = 0.0
    wind_speed: float = 0.0
    pressure: Optional[int] = None
    weather: str
    icon: Optional[str] = None


class SeasonDetails(BaseModel):
    name: str
    period: str
    characteristics: str
    ideal_crops: List[str]
    key_factors: List[str]


class WeatherTrends(BaseModel):
    temperature_trend: str
    rainfall_trend: str
    stability_index: str


class SeasonalInsights(BaseModel):
    current_season: str
    season_details: SeasonDetails
    climate_zone: str
    weather_trends: WeatherTrends


class PlantingGuidance(BaseModel):
    soil_temperature: str
    soil_moisture: str
    planting_window: str
    recommended_actions: List[str]


class CropCareGuidance(BaseModel):
    irrigation: str
    fertilization: str
    pest_management: str
    disease_risk: str


class HarvestingGuidance(BaseModel):
    timing: str
    conditions: str
    post_harvest: str


class RiskFactors(BaseModel):
    immediate: List[str]
    seasonal: List[str]
    mitigation: List[str]


class AgriculturalRecommendations(BaseModel):
    planting: PlantingGuidance
    crop_care: CropCareGuidance
    harvesting: HarvestingGuidance
    risk_factors: RiskFactors


class MonthlyOutlook(BaseModel):
    month: str
    year: int
    expected_conditions: str
    agricultural_focus: List[str]
    critical_activities: List[str]


class ExtendedOutlook(BaseModel):
    outlook: List[MonthlyOutlook]
    seasonal_transitions: Dict[str, str]
    long_term_recommendations: List[str]


class WeatherSnapshot(BaseModel):
    """Typed weather context; optional sections are only set by the extended forecast."""

    location: WeatherLocation
    current: CurrentConditions
    forecast: Optional[List[DailyForecast]] = None
    seasonal_insights: Optional[SeasonalInsights] = None
    agricultural_recommendations: Optional[AgriculturalRecommendations] = None
    extended_outlook: Optional[ExtendedOutlook] = None
