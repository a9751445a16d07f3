from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class StateCode(str, Enum):
    KERALA = "kerala"
    KARNATAKA = "karnataka"
    JHARKHAND = "jharkhand"
    UTTAR_PRADESH = "uttarpradesh"

    @property
    def display_name(self) -> str:
        return STATE_DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["StateCode"]:
        """Normalize user input ("UP", "Uttar Pradesh", "kerala") to a StateCode."""
        if not value:
            return None
        key = value.strip().lower().replace(" ", "").replace("_", "")
        if key == "up":
            key = cls.UTTAR_PRADESH.value
        for state in cls:
            if state.value == key:
                return state
        return None


STATE_DISPLAY_NAMES = {
    StateCode.KERALA: "Kerala",
    StateCode.KARNATAKA: "Karnataka",
    StateCode.JHARKHAND: "Jharkhand",
    StateCode.UTTAR_PRADESH: "Uttar Pradesh",
}

SUPPORTED_STATE_CODES = ["kerala", "karnataka", "jharkhand", "uttarpradesh", "up"]


class ClimateZone(str, Enum):
    TROPICAL_COASTAL = "tropical_coastal"
    TROPICAL_DRY = "tropical_dry"
    SUBTROPICAL_HUMID = "subtropical_humid"
    SUBTROPICAL_CONTINENTAL = "subtropical_continental"


class RegionMatch(str, Enum):
    BOUNDING_BOX = "bounding_box"
    NEAREST_CENTER = "nearest_center"
    STATE_DEFAULT = "state_default"
    FALLBACK = "fallback"


class Coordinate(BaseModel):
    lat: float = Field(..., description="Latitude in decimal degrees.")
    lon: float = Field(..., description="Longitude in decimal degrees.")


class Region(BaseModel):
    """Best-effort administrative region for a coordinate. Not authoritative geocoding."""

    state: StateCode
    district: str
    climate_zone: ClimateZone
    confidence: float = Field(..., ge=0.0, le=1.0)
    matched_by: RegionMatch = RegionMatch.BOUNDING_BOX

    @property
    def state_name(self) -> str:
        return self.state.display_name
