import math

import pytest

from app.models.region import ClimateZone, RegionMatch, StateCode
from app.services.region_resolver import RegionResolver


@pytest.fixture
def resolver():
    return RegionResolver()


@pytest.mark.parametrize(
    "lat, lon, state, district",
    [
        (10.0, 76.3, StateCode.KERALA, "Palakkad"),
        (12.9716, 77.5946, StateCode.KARNATAKA, "Bengaluru Urban"),
        (23.34, 85.31, StateCode.JHARKHAND, "Ranchi"),
        (26.85, 81.2, StateCode.UTTAR_PRADESH, "Lucknow"),
    ],
)
def test_bounding_box_match(resolver, lat, lon, state, district):
    region = resolver.resolve(lat, lon)
    assert region.state == state
    assert region.district == district
    assert region.confidence == 1.0
    assert region.matched_by == RegionMatch.BOUNDING_BOX


def test_kerala_wins_where_boxes_overlap(resolver):
    region = resolver.resolve(12.5, 75.0)
    assert region.state == StateCode.KERALA
    assert region.climate_zone == ClimateZone.TROPICAL_COASTAL


def test_jharkhand_wins_the_band_shared_with_uttar_pradesh(resolver):
    region = resolver.resolve(24.0, 84.0)
    assert region.state == StateCode.JHARKHAND
    assert region.district == "Palamu"
    assert resolver.resolve(26.0, 84.0).state == StateCode.UTTAR_PRADESH


def test_nearest_center_confidence_scales_with_distance(resolver):
    region = resolver.resolve(21.5, 84.5)
    assert region.state == StateCode.JHARKHAND
    assert region.matched_by == RegionMatch.NEAREST_CENTER
    assert region.confidence == pytest.approx(0.775, abs=1e-3)
    assert region.district == "Simdega"


def test_far_away_point_is_floored_at_minimum_confidence(resolver):
    region = resolver.resolve(0.0, 0.0)
    assert region.state == StateCode.KERALA
    assert region.confidence <= 0.6
    assert region.confidence == pytest.approx(0.6)


@pytest.mark.parametrize(
    "lat, lon",
    [(math.nan, 76.0), (10.0, math.nan), (math.inf, 80.0), (-math.inf, -math.inf)],
)
def test_non_finite_coordinates_fall_back(resolver, lat, lon):
    region = resolver.resolve(lat, lon)
    assert region.state == StateCode.KERALA
    assert region.district == "Ernakulam"
    assert region.confidence == 0.5
    assert region.matched_by == RegionMatch.FALLBACK


def test_state_default_region(resolver):
    region = resolver.region_for_state(StateCode.JHARKHAND)
    assert region.district == "Ranchi"
    assert region.confidence == 0.5
    assert region.matched_by == RegionMatch.STATE_DEFAULT
    assert region.state_name == "Jharkhand"


@pytest.mark.parametrize("lat", [-90.0, -10.0, 45.0, 90.0])
@pytest.mark.parametrize("lon", [-180.0, 0.0, 100.0, 180.0])
def test_resolve_never_raises(resolver, lat, lon):
    region = resolver.resolve(lat, lon)
    assert 0.0 <= region.confidence <= 1.0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("kerala", StateCode.KERALA),
        ("UP", StateCode.UTTAR_PRADESH),
        ("Uttar Pradesh", StateCode.UTTAR_PRADESH),
        (" Karnataka ", StateCode.KARNATAKA),
        ("goa", None),
        ("", None),
        (None, None),
    ],
)
def test_state_code_parse(raw, expected):
    assert StateCode.parse(raw) == expected
