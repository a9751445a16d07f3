import asyncio
from datetime import date

import pytest

from app.core.errors import UpstreamServiceError, WeatherServiceError
from app.models.region import Coordinate, StateCode
from app.services.advisory_service import AdvisoryService, InvalidAdviceType, ModelAttempt
from app.services.context_merger import ContextMerger
from app.services.knowledge_base import LocalKnowledgeBase
from app.services.region_resolver import RegionResolver
from app.services.soil_estimator import SoilEstimator

SEPTEMBER = date(2025, 9, 10)
APRIL = date(2025, 4, 10)
RANCHI = Coordinate(lat=23.34, lon=85.31)
ANSWER = "For your paddy field:\n1. Apply NPK 80:40:40 kg/ha\n2. Spray neem extract for stem borer"


class FakeModel:
    def __init__(self, answer=ANSWER, error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    async def __call__(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.answer


class FakeWeather:
    def __init__(self, snapshot=None, error=None):
        self.snapshot = snapshot
        self.error = error
        self.calls = 0

    async def __call__(self, lat, lon):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.snapshot


def build_service(data_root, attempts, weather_providers=()):
    knowledge_base = LocalKnowledgeBase(data_root)
    return AdvisoryService(
        resolver=RegionResolver(),
        estimator=SoilEstimator(data_root=data_root),
        knowledge_base=knowledge_base,
        merger=ContextMerger(home_region=knowledge_base.home_region),
        weather_providers=list(weather_providers),
        attempts=attempts,
    )


def test_ask_with_location_and_weather(data_root, weather_snapshot):
    model = FakeModel()
    broken = FakeWeather(error=WeatherServiceError("timeout"))
    working = FakeWeather(snapshot=weather_snapshot)
    service = build_service(
        data_root,
        [ModelAttempt("primary", "system", model)],
        [("extended", broken), ("current", working)],
    )

    result = asyncio.run(
        service.ask("Which fertilizer for rice?", location=RANCHI, today=SEPTEMBER)
    )

    assert broken.calls == 1 and working.calls == 1
    assert result.response == ANSWER
    assert result.recommendations == [
        "Apply NPK 80:40:40 kg/ha",
        "Spray neem extract for stem borer",
    ]
    assert result.sources[-1] == "Local Agricultural Dataset"
    assert result.confidence == pytest.approx(0.95)
    assert result.should_trigger_fertilizer_pane
    assert result.fertilizer_context.location == "Jharkhand"
    assert result.fertilizer_context.detected_crops == ["paddy"]
    assert result.fertilizer_context.soil_type == "red soil"
    assert result.fertilizer_context.expected_yield == "standard"

    prompt = model.calls[0][1].content
    assert "Ranchi, Jharkhand" in prompt
    assert "WEATHER IN KOCHI:" in prompt
    assert "PADDY (RICE) (Red Soil, Ranchi):" in prompt


def test_weather_failure_degrades_context(data_root):
    model = FakeModel()
    service = build_service(
        data_root,
        [ModelAttempt("primary", "system", model)],
        [("extended", FakeWeather(error=WeatherServiceError("down")))],
    )

    context = asyncio.run(service.build_context("rice?", location=RANCHI, today=SEPTEMBER))

    assert context.external_weather is None
    assert context.region.district == "Ranchi"


def test_state_default_without_location(data_root):
    weather = FakeWeather()
    service = build_service(data_root, [ModelAttempt("primary", "system", FakeModel())], [("w", weather)])

    context = asyncio.run(service.build_context("What should I sow?", state=StateCode.KERALA, today=SEPTEMBER))

    assert weather.calls == 0
    assert context.region.state == StateCode.KERALA
    assert context.region.confidence == 0.5
    assert context.detected_crops == []
    assert context.crop_facts == []


def test_seasonal_crops_are_looked_up_when_none_detected(data_root):
    service = build_service(data_root, [ModelAttempt("primary", "system", FakeModel())])

    context = asyncio.run(
        service.build_context("What should I sow?", state=StateCode.UTTAR_PRADESH, today=SEPTEMBER)
    )

    assert [fact.crop for fact in context.crop_facts] == ["Wheat", "Mustard"]


def test_fallback_model_used_after_failure_and_empty_answer(data_root):
    failing = FakeModel(error=TimeoutError())
    empty = FakeModel(answer="   ")
    fallback = FakeModel(answer="Plant wheat.")
    service = build_service(
        data_root,
        [
            ModelAttempt("primary", "system", failing),
            ModelAttempt("secondary", "system", empty),
            ModelAttempt("fallback", "fallback system", fallback),
        ],
    )

    result = asyncio.run(service.ask("What to plant?", state=StateCode.KARNATAKA, today=APRIL))

    assert result.response == "Plant wheat."
    assert fallback.calls[0][0].content == "fallback system"
    assert result.sources == [
        "Weather Forecast API",
        "Soil Analysis Database",
        "Market Price Intelligence",
        "Agricultural Research Database",
    ]


def test_all_models_failing_raises(data_root):
    service = build_service(
        data_root,
        [
            ModelAttempt("primary", "system", FakeModel(error=RuntimeError("quota"))),
            ModelAttempt("fallback", "system", FakeModel(error=RuntimeError("quota"))),
        ],
    )

    with pytest.raises(UpstreamServiceError) as excinfo:
        asyncio.run(service.ask("Hello", today=SEPTEMBER))

    assert excinfo.value.message.startswith("Failed to generate AI response")


def test_quick_advice_builds_the_canned_question(data_root):
    model = FakeModel()
    service = build_service(data_root, [ModelAttempt("primary", "system", model)])

    asyncio.run(service.quick_advice("soil-health", StateCode.KERALA, today=SEPTEMBER))

    assert 'FARMER\'S QUESTION: "How can I improve my soil health in Kerala?"' in model.calls[0][1].content


def test_quick_advice_rejects_unknown_type(data_root):
    service = build_service(data_root, [ModelAttempt("primary", "system", FakeModel())])

    with pytest.raises(InvalidAdviceType):
        asyncio.run(service.quick_advice("astrology", StateCode.KERALA, today=SEPTEMBER))


def test_price_question_does_not_pull_in_rice_facts(data_root):
    service = build_service(data_root, [ModelAttempt("primary", "system", FakeModel())])

    context = asyncio.run(
        service.build_context("What price will my tomato get?", StateCode.JHARKHAND, today=SEPTEMBER)
    )

    assert context.detected_crops == ["tomato"]
    assert context.fertilizer_facts == []
    assert context.crop_facts == []
    assert context.pest_facts == []
