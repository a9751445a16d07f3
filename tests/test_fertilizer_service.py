import asyncio
from datetime import date

import pytest

from app.core.errors import UpstreamServiceError
from app.models.fertilizer import FertilizerAction, FertilizerRequest
from app.services.context_merger import HEURISTIC_ACTIONS
from app.services.fertilizer_service import BASE_PEST_ADVICE, FertilizerService, scale_actions
from app.services.knowledge_base import LocalKnowledgeBase

SEPTEMBER = date(2025, 9, 10)
GUIDANCE = "Apply 120 kg N, 60 kg P2O5 and 40 kg K2O per hectare in split doses. " * 5


class FakeGenerator:
    def __init__(self, answer=GUIDANCE, error=None):
        self.answer = answer
        self.error = error
        self.queries = []

    async def __call__(self, query):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def knowledge_base(data_root):
    return LocalKnowledgeBase(data_root)


def test_recommend_merges_local_facts(knowledge_base):
    generator = FakeGenerator()
    service = FertilizerService(knowledge_base, generator)
    request = FertilizerRequest(location="Jharkhand", crop="Wheat", soil="Alluvial")

    response = asyncio.run(service.recommend(request, today=SEPTEMBER))

    assert "current month September" in generator.queries[0]
    assert response.title == "Fertilizer Guidance for Wheat in Jharkhand"
    assert response.summary == (
        "Local dataset + AI recommendations for Wheat cultivation in Jharkhand with Alluvial "
        "soil conditions during September. Based on 1 local records."
    )
    assert len(response.actions) == 3
    assert response.actions[0].step == "Local Dataset Recommendation (Alluvial)"
    assert response.actions[1:] == HEURISTIC_ACTIONS
    assert response.confidence_score == pytest.approx(0.98)
    assert response.suppliers[-1].name == "Local Agricultural Centers (Palamu, Garhwa)"
    assert [citation.title for citation in response.citations] == [
        "Jharkhand Agricultural Dataset (Local)",
        "AI-Enhanced Fertilizer Guidance",
    ]
    assert response.citations[1].snippet == GUIDANCE[:150] + "..."
    assert response.raw_search_hits[0]["content"] == GUIDANCE
    assert response.pest_interactions == BASE_PEST_ADVICE


def test_local_pest_controls_are_appended(knowledge_base):
    service = FertilizerService(knowledge_base, FakeGenerator())
    request = FertilizerRequest(location="Jharkhand", crop="Rice", soil="Red Soil")

    response = asyncio.run(service.recommend(request, today=SEPTEMBER))

    assert response.pest_interactions.endswith("Local pest control: Neem seed kernel extract 5%")
    assert response.confidence_score == pytest.approx(1.0)


def test_without_local_data(tmp_path):
    service = FertilizerService(LocalKnowledgeBase(tmp_path), FakeGenerator())
    request = FertilizerRequest(location="Goa", crop="Cashew", soil="Laterite")

    response = asyncio.run(service.recommend(request, today=SEPTEMBER))

    assert response.summary.startswith("AI-generated fertilizer recommendations for Cashew")
    assert response.actions == HEURISTIC_ACTIONS
    assert response.confidence_score == pytest.approx(0.85)
    assert len(response.suppliers) == 2
    assert [citation.title for citation in response.citations] == ["AI-Enhanced Fertilizer Guidance"]


def test_detailed_request_scales_per_quintal_amounts(knowledge_base):
    generator = FakeGenerator()
    service = FertilizerService(knowledge_base, generator)
    request = FertilizerRequest(
        location="Jharkhand", crop="Wheat", soil="Alluvial", expectedYield=40
    )

    response = asyncio.run(service.recommend(request, detailed=True, today=SEPTEMBER))

    assert "expected yield 40 quintals per acre, September season" in generator.queries[0]
    assert response.actions[0].amount_per_quintal == "Calculated for 30 quintals/ha expected yield"
    assert response.actions[1].amount_per_quintal == "16 kg per expected 40 quintals"
    assert response.actions[2].amount_per_quintal == "8 kg per expected 40 quintals"


def test_non_numeric_yield_leaves_amounts_unchanged():
    actions = [action.model_copy() for action in HEURISTIC_ACTIONS]
    assert scale_actions(actions, "high") == HEURISTIC_ACTIONS


def test_scaling_rounds_half_up():
    action = FertilizerAction(
        step="s", amount_per_ha="", amount_per_quintal="5 kg per quintal", timing=""
    )
    assert scale_actions([action], "10")[0].amount_per_quintal == "3 kg per expected 10 quintals"


def test_generator_failure_raises_upstream_error(knowledge_base):
    service = FertilizerService(knowledge_base, FakeGenerator(error=TimeoutError()))
    request = FertilizerRequest(location="Jharkhand", crop="Wheat", soil="Alluvial")

    with pytest.raises(UpstreamServiceError) as excinfo:
        asyncio.run(service.recommend(request, today=SEPTEMBER))

    assert excinfo.value.message == "Failed to fetch fertilizer recommendations"
    assert excinfo.value.service == "llm"
