from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class FertilizerFact(BaseModel):
    """One row of the local fertilizer dataset."""

    region: str = ""
    soil_type: str = ""
    crop: str = ""
    yield_value: float = 0.0
    yield_unit: str = "kg/ha"
    price_per_kg: float = 0.0
    gross_income: float = 0.0
    fertilizer_recommendation: str = ""
    notes: str = ""
    source: str = ""

    @property
    def yield_quintals_per_ha(self) -> float:
        if self.yield_unit == "kg/ha":
            return round(self.yield_value / 100)
        return self.yield_value


class EconomicFact(BaseModel):
    """Economic importance of a crop within one state."""

    state: str = ""
    crop: str = ""
    category: str = ""
    economic_importance: str = ""
    primary_districts: str = ""
    notes: str = ""
    source: str = ""


class PestFact(BaseModel):
    pest: str = ""
    crop_affected: str = ""
    economic_impact: str = ""
    natural_pesticides: str = ""
    notes: str = ""


class DatasetStats(BaseModel):
    fertilizer_records: int = Field(0, serialization_alias="fertilizerRecords")
    economic_records: int = Field(0, serialization_alias="economicRecords")
    pest_records: int = Field(0, serialization_alias="pestRecords")
    data_loaded: bool = Field(False, serialization_alias="dataLoaded")
    available_crops: List[str] = Field(
        default_factory=list, serialization_alias="availableCrops"
    )
    available_soil_types: List[str] = Field(
        default_factory=list, serialization_alias="availableSoilTypes"
    )
    available_pests: List[str] = Field(
        default_factory=list, serialization_alias="availablePests"
    )


class StateDataset(BaseModel):
    """Raw per-state rows as read from disk, served by /api/data/{state}."""

    crops: List[Dict[str, str]] = Field(default_factory=list)
    pests: List[Dict[str, str]] = Field(default_factory=list)
    soil_moisture: List[Dict[str, str]] = Field(
        default_factory=list, serialization_alias="soilMoisture"
    )


class Rarity(str, Enum):
    RARE = "rare"
    UNCOMMON = "uncommon"
    NICHE = "niche"
    EXOTIC = "exotic"


class InvestmentLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SpecialtyCrop(BaseModel):
    """A high-value crop that few farmers grow but the climate supports."""

    name: str
    common_name: str
    local_names: List[str] = Field(default_factory=list)
    economic_potential: str
    market_price: str
    expected_yield: str
    return_per_quintal: str
    rarity: Rarity
    # ClimateZone values, plus "temperate" for hill crops no supported state resolves to.
    climate_zones: List[str]
    soil_requirements: List[str] = Field(default_factory=list)
    investment_level: InvestmentLevel
    profit_margin: str
    market_demand: str
    export_potential: str
    growth_period: str
    special_benefits: List[str] = Field(default_factory=list)
    challenges: List[str] = Field(default_factory=list)
    success_stories: List[str] = Field(default_factory=list)


class FarmerFriendlyName(BaseModel):
    """The names farmers and markets actually use for a crop."""

    common: str
    hindi: Optional[str] = None
    regional: Dict[str, str] = Field(default_factory=dict)
    market_name: Optional[str] = None
    local_names: List[str] = Field(default_factory=list)
