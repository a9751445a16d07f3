from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.fertilizer import FertilizerAction
from app.models.knowledge import EconomicFact, FertilizerFact, PestFact, SpecialtyCrop
from app.models.region import Coordinate, Region
from app.models.soil import SoilProfile
from app.models.weather import WeatherSnapshot


class SeasonInfo(BaseModel):
    current_month: int = Field(..., ge=1, le=12)
    season: str
    sowing_suitability: str
    crop_type: str
    recommended_crops: List[str]
    avoid_crops: List[str]
    timing: str
    weather_context: str


class AdvisoryContext(BaseModel):
    """Everything the prompt assembler needs for one request. Built fresh, never persisted."""

    query: str
    region: Region
    soil_profile: SoilProfile
    crop_facts: List[EconomicFact] = Field(default_factory=list)
    fertilizer_facts: List[FertilizerFact] = Field(default_factory=list)
    pest_facts: List[PestFact] = Field(default_factory=list)
    specialty_crops: List[SpecialtyCrop] = Field(default_factory=list)
    fertilizer_actions: List[FertilizerAction] = Field(default_factory=list)
    external_weather: Optional[WeatherSnapshot] = None
    season_info: SeasonInfo
    detected_crops: List[str] = Field(default_factory=list)
    confidence_score: float = Field(..., ge=0.0, le=1.0)


class AskRequest(BaseModel):
    query: Optional[str] = None
    state: Optional[str] = None
    location: Optional[Coordinate] = None


class QuickAdviceRequest(BaseModel):
    type: Optional[str] = None
    state: Optional[str] = None


class FertilizerContext(BaseModel):
    location: str
    detected_crops: List[str] = Field(serialization_alias="detectedCrops")
    soil_type: str = Field(serialization_alias="soilType")
    expected_yield: str = Field(serialization_alias="expectedYield")


class AskResult(BaseModel):
    response: str
    confidence: float
    sources: List[str]
    recommendations: List[str]
    should_trigger_fertilizer_pane: bool = Field(
        False, serialization_alias="shouldTriggerFertilizerPane"
    )
    fertilizer_context: Optional[FertilizerContext] = Field(
        None, serialization_alias="fertilizerContext"
    )
