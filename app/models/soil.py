from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class PhCategory(str, Enum):
    STRONGLY_ACIDIC = "strongly_acidic"
    MODERATELY_ACIDIC = "moderately_acidic"
    SLIGHTLY_ACIDIC = "slightly_acidic"
    NEUTRAL = "neutral"
    SLIGHTLY_ALKALINE = "slightly_alkaline"
    ALKALINE = "alkaline"

    @classmethod
    def from_ph(cls, ph: float) -> "PhCategory":
        if ph < 5.5:
            return cls.STRONGLY_ACIDIC
        if ph < 6.0:
            return cls.MODERATELY_ACIDIC
        if ph < 6.5:
            return cls.SLIGHTLY_ACIDIC
        if ph < 7.5:
            return cls.NEUTRAL
        if ph < 8.5:
            return cls.SLIGHTLY_ALKALINE
        return cls.ALKALINE


class SoilType(str, Enum):
    LATERITE = "Laterite"
    ALLUVIAL = "Alluvial"
    RED_SOIL = "Red Soil"
    BLACK_SOIL = "Black Soil"
    MIXED = "Mixed"


class SoilProfile(BaseModel):
    """Heuristic soil estimate layered from static tables, not a sensor reading."""

    ph: float = Field(..., ge=3.0, le=10.0)
    ph_category: PhCategory
    soil_type: SoilType
    moisture_percent: float = Field(..., ge=10.0, le=90.0)
    organic_matter_percent: float = Field(..., ge=1.0, le=6.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    recommendations: List[str] = Field(default_factory=list)
