"""
Heuristic soil estimation.

Every output is an approximation layered from static tables (district pH
estimates, climate-zone and month adjustments, per-state soil types). There is
no ground truth to validate against beyond internal consistency.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from app.models.region import ClimateZone, Region, StateCode
from app.models.soil import PhCategory, SoilProfile, SoilType
from app.services.dataset_layout import ph_files
from app.services.dataset_loader import first_existing, pick, read_rows, to_float

logger = logging.getLogger(__name__)

DEFAULT_PH = 6.5
MATCHED_PH_CONFIDENCE = 0.9
FALLBACK_PH_CONFIDENCE = 0.6
PH_BOUNDS = (3.0, 10.0)
MOISTURE_BOUNDS = (10.0, 90.0)
ORGANIC_MATTER_BOUNDS = (1.0, 6.0)
BASE_ORGANIC_MATTER = 2.5

BASE_MOISTURE = {
    ClimateZone.TROPICAL_COASTAL: 60.0,
    ClimateZone.SUBTROPICAL_HUMID: 40.0,
    ClimateZone.TROPICAL_DRY: 35.0,
    ClimateZone.SUBTROPICAL_CONTINENTAL: 30.0,
}

# Monsoon (Jun-Sep) adds, pre-monsoon (Mar-May) subtracts, Oct-Feb keeps residual moisture.
SEASONAL_MOISTURE_DELTA = {
    1: 5.0,
    2: 5.0,
    3: -15.0,
    4: -15.0,
    5: -15.0,
    6: 20.0,
    7: 20.0,
    8: 20.0,
    9: 20.0,
    10: 5.0,
    11: 5.0,
    12: 5.0,
}

ORGANIC_ZONE_DELTA = {
    ClimateZone.TROPICAL_COASTAL: 0.8,
    ClimateZone.SUBTROPICAL_CONTINENTAL: -0.5,
}

ORGANIC_SOIL_DELTA = {
    SoilType.ALLUVIAL: 1.0,
    SoilType.LATERITE: -0.5,
}

STATE_SOIL_TYPES = {
    StateCode.KERALA: SoilType.LATERITE,
    StateCode.KARNATAKA: SoilType.RED_SOIL,
    StateCode.JHARKHAND: SoilType.RED_SOIL,
    StateCode.UTTAR_PRADESH: SoilType.ALLUVIAL,
}

# Districts whose dominant soil differs from the state default.
DISTRICT_SOIL_TYPES = {
    (StateCode.KARNATAKA, "bidar"): SoilType.BLACK_SOIL,
    (StateCode.KARNATAKA, "kalaburagi"): SoilType.BLACK_SOIL,
    (StateCode.KARNATAKA, "raichur"): SoilType.BLACK_SOIL,
    (StateCode.KARNATAKA, "belagavi"): SoilType.BLACK_SOIL,
    (StateCode.KARNATAKA, "yadgir"): SoilType.BLACK_SOIL,
    (StateCode.KARNATAKA, "dharwad"): SoilType.BLACK_SOIL,
    (StateCode.KARNATAKA, "koppal"): SoilType.BLACK_SOIL,
}

SOIL_TYPE_ADVICE = {
    SoilType.LATERITE: "Laterite soil: Focus on water retention and organic matter addition",
    SoilType.ALLUVIAL: "Alluvial soil: Excellent for most crops, maintain fertility with balanced nutrition",
    SoilType.RED_SOIL: "Red soil: Good drainage but may need phosphorus supplementation",
    SoilType.BLACK_SOIL: "Black soil: Excellent water retention, suitable for cotton and cereals",
}


@dataclass(frozen=True)
class DistrictPh:
    district: str
    ph: float
    category: str


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


def _category_for(raw: str, ph: float) -> PhCategory:
    try:
        return PhCategory(raw.strip().lower())
    except ValueError:
        return PhCategory.from_ph(ph)


def soil_recommendations(
    ph: float, moisture: float, soil_type: SoilType, organic_matter: float
) -> List[str]:
    recommendations = []

    if ph < 6.0:
        recommendations.append("Apply lime to increase soil pH for better nutrient availability")
        recommendations.append("Consider acid-tolerant crop varieties")
    elif ph > 8.0:
        recommendations.append("Add organic matter or sulfur to lower soil pH")
        recommendations.append("Use gypsum for alkaline soil improvement")
    else:
        recommendations.append("Soil pH is optimal for most crops")

    if moisture < 25:
        recommendations.append("Implement drip irrigation or mulching to conserve moisture")
        recommendations.append("Consider drought-resistant crop varieties")
    elif moisture > 75:
        recommendations.append("Ensure proper drainage to prevent waterlogging")
        recommendations.append("Monitor for fungal diseases in high moisture conditions")
    else:
        recommendations.append("Soil moisture levels are good for most crops")

    if organic_matter < 2.0:
        recommendations.append("Increase organic matter with compost or farmyard manure")
        recommendations.append("Practice crop rotation with legumes to improve soil fertility")
    elif organic_matter > 4.0:
        recommendations.append("Excellent organic matter content - maintain with regular additions")

    advice = SOIL_TYPE_ADVICE.get(soil_type)
    if advice:
        recommendations.append(advice)

    return recommendations


class SoilEstimator:
    def __init__(
        self,
        data_root: Optional[Path] = None,
        ph_tables: Optional[Dict[StateCode, List[DistrictPh]]] = None,
    ) -> None:
        self.data_root = Path(data_root) if data_root else None
        self._ph_tables: Dict[StateCode, List[DistrictPh]] = dict(ph_tables or {})
        self._loaded = ph_tables is not None
        self._lock = threading.Lock()

    def load(self) -> None:
        """Load the per-state district pH tables once."""
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            for state in StateCode:
                self._ph_tables[state] = self._load_state_ph(state)
            self._loaded = True

    def _load_state_ph(self, state: StateCode) -> List[DistrictPh]:
        if self.data_root is None:
            return []
        path = first_existing(self.data_root, ph_files(state))
        if path is None:
            logger.warning("Soil pH data not found for %s", state.value)
            return []

        table = []
        for row in read_rows(path, label=f"{state.value} soil pH"):
            district = pick(row, "district", "District")
            if not district:
                continue
            ph = to_float(pick(row, "mean_pH_estimate", "pH_estimate", "pH"), DEFAULT_PH)
            category = _category_for(pick(row, "pH_category", "category"), ph)
            table.append(DistrictPh(district=district, ph=ph, category=category.value))
        return table

    def lookup_ph(self, state: StateCode, district: str) -> Tuple[float, PhCategory, float]:
        """Returns (pH, category, confidence) for a district."""
        self.load()
        table = self._ph_tables.get(state, [])
        wanted = district.lower()

        match = next((row for row in table if row.district.lower() == wanted), None)
        if match is None:
            match = next(
                (
                    row
                    for row in table
                    if row.district.lower() in wanted or wanted in row.district.lower()
                ),
                None,
            )
        if match is not None:
            ph = _clamp(match.ph, PH_BOUNDS)
            return ph, _category_for(match.category, ph), MATCHED_PH_CONFIDENCE

        if table:
            average = _clamp(sum(row.ph for row in table) / len(table), PH_BOUNDS)
            return average, PhCategory.from_ph(average), FALLBACK_PH_CONFIDENCE

        return DEFAULT_PH, PhCategory.NEUTRAL, FALLBACK_PH_CONFIDENCE

    @staticmethod
    def soil_type_for(region: Region) -> SoilType:
        override = DISTRICT_SOIL_TYPES.get((region.state, region.district.lower()))
        if override is not None:
            return override
        return STATE_SOIL_TYPES.get(region.state, SoilType.MIXED)

    @staticmethod
    def estimate_moisture(climate_zone: ClimateZone, month: int) -> float:
        base = BASE_MOISTURE.get(climate_zone, 40.0)
        return _clamp(base + SEASONAL_MOISTURE_DELTA.get(month, 0.0), MOISTURE_BOUNDS)

    @staticmethod
    def estimate_organic_matter(climate_zone: ClimateZone, soil_type: SoilType, ph: float) -> float:
        organic = BASE_ORGANIC_MATTER
        organic += ORGANIC_ZONE_DELTA.get(climate_zone, 0.0)
        organic += ORGANIC_SOIL_DELTA.get(soil_type, 0.0)
        if ph < 6.0:
            organic -= 0.3
        elif ph > 7.5:
            organic -= 0.2
        return round(_clamp(organic, ORGANIC_MATTER_BOUNDS), 2)

    def estimate(self, region: Region, month: int) -> SoilProfile:
        ph, category, confidence = self.lookup_ph(region.state, region.district)
        soil_type = self.soil_type_for(region)
        moisture = self.estimate_moisture(region.climate_zone, month)
        organic = self.estimate_organic_matter(region.climate_zone, soil_type, ph)

        return SoilProfile(
            ph=round(ph, 2),
            ph_category=category,
            soil_type=soil_type,
            moisture_percent=moisture,
            organic_matter_percent=organic,
            confidence=confidence,
            recommendations=soil_recommendations(ph, moisture, soil_type, organic),
        )
