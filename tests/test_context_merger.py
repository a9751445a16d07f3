import pytest

from app.models.knowledge import EconomicFact, FertilizerFact, PestFact
from app.services.context_merger import (
    HEURISTIC_ACTIONS,
    ContextMerger,
    merge_actions,
    score_local_facts,
)
from app.services.soil_estimator import SoilEstimator

FERTILIZER = FertilizerFact(
    region="Ranchi",
    soil_type="Red Soil",
    crop="Paddy (Rice)",
    yield_value=3200,
    fertilizer_recommendation="NPK 80:40:40 kg/ha",
)
ECONOMIC = EconomicFact(state="jharkhand", crop="Rice", economic_importance="High")
PEST = PestFact(pest="Yellow Stem Borer", crop_affected="Rice")


@pytest.fixture
def soil(kerala_region):
    return SoilEstimator().estimate(kerala_region, 9)


def test_fact_score_bonuses():
    assert score_local_facts(False, False, False) == pytest.approx(0.85)
    assert score_local_facts(True, False, False) == pytest.approx(0.95)
    assert score_local_facts(True, True, False) == pytest.approx(0.98)
    assert score_local_facts(True, True, True) == pytest.approx(1.0)
    assert score_local_facts(False, True, True) == pytest.approx(0.90)


def test_heuristics_fill_in_when_local_actions_are_scarce():
    assert merge_actions([]) == HEURISTIC_ACTIONS
    local = [HEURISTIC_ACTIONS[0].model_copy(update={"step": "local"})] * 3
    assert merge_actions(local) == local


def test_september_context(kerala_region, soil):
    context = ContextMerger().build_context("What should I sow?", kerala_region, soil, month=9)
    assert context.season_info.season == "Post-Monsoon (Transition to Rabi)"
    assert "Wheat" in context.season_info.recommended_crops
    assert "Rice" in context.season_info.avoid_crops
    assert context.season_info.timing.startswith("SEPTEMBER TIMING")
    assert context.fertilizer_actions == HEURISTIC_ACTIONS
    assert context.external_weather is None


def test_confidence_without_weather(kerala_region, soil):
    context = ContextMerger().build_context("q", kerala_region, soil, month=9)
    expected = (0.85 - 0.05) * (kerala_region.confidence + soil.confidence) / 2
    assert context.confidence_score == pytest.approx(expected, abs=1e-4)


def test_confidence_is_monotone_in_facts(kerala_region, soil, weather_snapshot):
    merger = ContextMerger()
    variants = [
        {},
        {"crops": [ECONOMIC]},
        {"crops": [ECONOMIC], "pest_facts": [PEST]},
        {"crops": [ECONOMIC], "pest_facts": [PEST], "fertilizer_facts": [FERTILIZER]},
        {
            "crops": [ECONOMIC],
            "pest_facts": [PEST],
            "fertilizer_facts": [FERTILIZER],
            "weather": weather_snapshot,
        },
    ]
    scores = [
        merger.build_context("q", kerala_region, soil, month=6, **kwargs).confidence_score
        for kwargs in variants
    ]
    assert scores == sorted(scores)
    assert all(0.0 <= score <= 1.0 for score in scores)


def test_local_actions_come_first(kerala_region, soil):
    context = ContextMerger().build_context(
        "rice", kerala_region, soil, fertilizer_facts=[FERTILIZER], month=7
    )
    assert context.fertilizer_actions[0].step == "Local Dataset Recommendation (Red Soil)"
    assert context.fertilizer_actions[1:] == HEURISTIC_ACTIONS


def test_invalid_month_is_rejected(kerala_region, soil):
    with pytest.raises(ValueError):
        ContextMerger().build_context("q", kerala_region, soil, month=13)


def test_specialty_crops_follow_the_region(kerala_region, jharkhand_region, soil):
    merger = ContextMerger()
    kerala = merger.build_context("What should I sow?", kerala_region, soil, month=9)
    jharkhand = merger.build_context("What should I sow?", jharkhand_region, soil, month=9)

    assert [crop.name for crop in kerala.specialty_crops][:2] == ["Wasabi", "Moringa"]
    assert jharkhand.specialty_crops == []
    assert kerala.confidence_score == jharkhand.confidence_score
