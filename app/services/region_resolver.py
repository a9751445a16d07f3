"""
Coordinate -> Region resolution.

Districts come from coarse latitude/longitude band tables. They are a
best-effort approximation for prompt context and are not authoritative
geocoding; results near state borders can be implausible.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from app.models.region import ClimateZone, Region, RegionMatch, StateCode

logger = logging.getLogger(__name__)

MIN_FALLBACK_CONFIDENCE = 0.6
FALLBACK_DISTANCE_SCALE = 10.0


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float, lon: float) -> bool:
        return (
            self.min_lat <= lat <= self.max_lat
            and self.min_lon <= lon <= self.max_lon
        )


@dataclass(frozen=True)
class StateBoundary:
    state: StateCode
    box: BoundingBox
    climate_zone: ClimateZone
    center: Tuple[float, float]
    default_district: str
    excludes: Tuple[StateCode, ...] = field(default_factory=tuple)


# (min_lat, district) or (min_lat, [(max_lon, district), ..., (None, district)])
DistrictBand = Tuple[float, object]

# Priority order matters: overlapping boxes resolve to the earlier state.
STATE_BOUNDARIES: List[StateBoundary] = [
    StateBoundary(
        state=StateCode.KERALA,
        box=BoundingBox(8.2, 12.8, 74.9, 77.4),
        climate_zone=ClimateZone.TROPICAL_COASTAL,
        center=(10.8505, 76.2711),
        default_district="Thiruvananthapuram",
    ),
    StateBoundary(
        state=StateCode.KARNATAKA,
        box=BoundingBox(11.5, 18.4, 74.0, 78.6),
        climate_zone=ClimateZone.TROPICAL_DRY,
        center=(15.3173, 75.7139),
        default_district="Bengaluru Urban",
        excludes=(StateCode.KERALA,),
    ),
    # Jharkhand before Uttar Pradesh: the shared band (lat 23.8-25.0, lon 83.3-84.6)
    # is Palamu and Garhwa, which belong to Jharkhand.
    StateBoundary(
        state=StateCode.JHARKHAND,
        box=BoundingBox(21.9, 25.0, 83.3, 87.9),
        climate_zone=ClimateZone.SUBTROPICAL_HUMID,
        center=(23.6102, 85.2799),
        default_district="Ranchi",
    ),
    StateBoundary(
        state=StateCode.UTTAR_PRADESH,
        box=BoundingBox(23.8, 30.4, 77.0, 84.6),
        climate_zone=ClimateZone.SUBTROPICAL_CONTINENTAL,
        center=(26.8467, 80.9462),
        default_district="Lucknow",
    ),
]

KERALA_DISTRICTS: List[DistrictBand] = [
    (12.0, "Kasaragod"),
    (11.5, "Kannur"),
    (11.0, "Wayanad"),
    (10.5, "Kozhikode"),
    (10.2, "Malappuram"),
    (10.0, "Palakkad"),
    (9.7, "Thrissur"),
    (9.4, "Ernakulam"),
    (9.2, "Idukki"),
    (9.0, "Kottayam"),
    (8.7, "Alappuzha"),
    (8.4, "Pathanamthitta"),
    (8.2, "Kollam"),
    (-math.inf, "Thiruvananthapuram"),
]

KARNATAKA_DISTRICTS: List[DistrictBand] = [
    (17.5, "Bidar"),
    (16.8, "Kalaburagi"),
    (16.0, "Raichur"),
    (15.8, [(75.5, "Belagavi"), (None, "Yadgir")]),
    (15.0, [(75.0, "Dharwad"), (None, "Koppal")]),
    (14.5, [(75.5, "Haveri"), (None, "Vijayanagara")]),
    (14.0, [(76.0, "Shivamogga"), (None, "Ballari")]),
    (13.5, [(75.5, "Udupi"), (None, "Chitradurga")]),
    (13.0, [(75.0, "Dakshina Kannada"), (None, "Tumakuru")]),
    (12.5, [(75.5, "Kodagu"), (None, "Bengaluru Urban")]),
    (12.0, "Hassan"),
    (-math.inf, "Mysuru"),
]

JHARKHAND_DISTRICTS: List[DistrictBand] = [
    (24.3, [(84.5, "Garhwa"), (85.8, "Koderma"), (86.9, "Deoghar"), (None, "Sahibganj")]),
    (23.6, [(84.5, "Palamu"), (85.6, "Hazaribagh"), (86.6, "Dhanbad"), (None, "Dumka")]),
    (23.0, [(84.5, "Gumla"), (85.8, "Ranchi"), (None, "Seraikela Kharsawan")]),
    (-math.inf, [(85.0, "Simdega"), (85.8, "West Singhbhum"), (None, "East Singhbhum")]),
]

# Uttar Pradesh is banded by longitude first (east to west), then latitude.
UTTAR_PRADESH_DISTRICTS: List[Tuple[float, List[Tuple[float, str]]]] = [
    (83.0, [(26.5, "Gorakhpur"), (25.5, "Varanasi"), (-math.inf, "Mirzapur")]),
    (81.0, [(27.0, "Faizabad"), (26.0, "Lucknow"), (-math.inf, "Allahabad")]),
    (79.0, [(27.5, "Bareilly"), (26.5, "Kanpur"), (-math.inf, "Jhansi")]),
    (77.5, [(28.5, "Meerut"), (27.0, "Aligarh"), (-math.inf, "Agra")]),
    (-math.inf, [(29.0, "Saharanpur"), (-math.inf, "Mathura")]),
]

DISTRICT_BANDS: Dict[StateCode, List[DistrictBand]] = {
    StateCode.KERALA: KERALA_DISTRICTS,
    StateCode.KARNATAKA: KARNATAKA_DISTRICTS,
    StateCode.JHARKHAND: JHARKHAND_DISTRICTS,
}

FALLBACK_REGION = Region(
    state=StateCode.KERALA,
    district="Ernakulam",
    climate_zone=ClimateZone.TROPICAL_COASTAL,
    confidence=0.5,
    matched_by=RegionMatch.FALLBACK,
)


def _pick_by_longitude(splits: Sequence[Tuple[Optional[float], str]], lon: float) -> str:
    for max_lon, district in splits:
        if max_lon is None or lon <= max_lon:
            return district
    return splits[-1][1]


def _district_from_bands(bands: Sequence[DistrictBand], lat: float, lon: float) -> str:
    for min_lat, value in bands:
        if lat >= min_lat:
            if isinstance(value, str):
                return value
            return _pick_by_longitude(value, lon)
    last = bands[-1][1]
    return last if isinstance(last, str) else last[-1][1]


def _uttar_pradesh_district(lat: float, lon: float) -> str:
    for min_lon, lat_bands in UTTAR_PRADESH_DISTRICTS:
        if lon >= min_lon:
            for min_lat, district in lat_bands:
                if lat >= min_lat:
                    return district
    return "Mathura"


class RegionResolver:
    def __init__(self, boundaries: Optional[List[StateBoundary]] = None) -> None:
        self.boundaries = boundaries if boundaries is not None else STATE_BOUNDARIES
        self._by_state = {boundary.state: boundary for boundary in self.boundaries}

    def district_for(self, state: StateCode, lat: float, lon: float) -> str:
        if state == StateCode.UTTAR_PRADESH:
            return _uttar_pradesh_district(lat, lon)
        bands = DISTRICT_BANDS.get(state)
        if not bands:
            return self._by_state[state].default_district
        return _district_from_bands(bands, lat, lon)

    def _box_match(self, lat: float, lon: float) -> Optional[StateBoundary]:
        for boundary in self.boundaries:
            if not boundary.box.contains(lat, lon):
                continue
            excluded = any(
                self._by_state[other].box.contains(lat, lon)
                for other in boundary.excludes
                if other in self._by_state
            )
            if not excluded:
                return boundary
        return None

    def _nearest_center(self, lat: float, lon: float) -> Tuple[Optional[StateBoundary], float]:
        nearest: Optional[StateBoundary] = None
        min_distance = math.inf
        for boundary in self.boundaries:
            center_lat, center_lon = boundary.center
            distance = math.hypot(lat - center_lat, lon - center_lon)
            if distance < min_distance:
                min_distance = distance
                nearest = boundary
        return nearest, min_distance

    def resolve(self, lat: float, lon: float) -> Region:
        """Map a coordinate to a best-effort Region. Never raises."""
        if not (math.isfinite(lat) and math.isfinite(lon)):
            logger.warning("Non-finite coordinate (%s, %s); using fallback region", lat, lon)
            return FALLBACK_REGION.model_copy()

        boundary = self._box_match(lat, lon)
        if boundary is not None:
            district = self.district_for(boundary.state, lat, lon)
            logger.debug("Detected %s, %s for (%s, %s)", district, boundary.state.value, lat, lon)
            return Region(
                state=boundary.state,
                district=district,
                climate_zone=boundary.climate_zone,
                confidence=1.0,
                matched_by=RegionMatch.BOUNDING_BOX,
            )

        nearest, distance = self._nearest_center(lat, lon)
        if nearest is None:
            return FALLBACK_REGION.model_copy()

        confidence = max(MIN_FALLBACK_CONFIDENCE, 1 - distance / FALLBACK_DISTANCE_SCALE)
        confidence = min(1.0, max(MIN_FALLBACK_CONFIDENCE, confidence))
        logger.info(
            "No bounding box for (%s, %s); nearest state %s at %.2f deg",
            lat,
            lon,
            nearest.state.value,
            distance,
        )
        return Region(
            state=nearest.state,
            district=self.district_for(nearest.state, lat, lon),
            climate_zone=nearest.climate_zone,
            confidence=confidence,
            matched_by=RegionMatch.NEAREST_CENTER,
        )

    def region_for_state(self, state: StateCode) -> Region:
        """Default region for requests that name a state but send no coordinates."""
        boundary = self._by_state.get(state)
        if boundary is None:
            return FALLBACK_REGION.model_copy()
        return Region(
            state=state,
            district=boundary.default_district,
            climate_zone=boundary.climate_zone,
            confidence=0.5,
            matched_by=RegionMatch.STATE_DEFAULT,
        )
