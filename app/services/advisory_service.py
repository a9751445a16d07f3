"""
Advisory pipeline behind /api/ai/ask.

region -> soil -> crop detection -> knowledge base -> weather -> merge -> prompt -> model.
Weather and model calls go through ordered provider lists: the first weather
provider that answers wins and a total weather failure only drops that context
section, while a total model failure raises UpstreamServiceError.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from app.core.errors import UpstreamServiceError
from app.models.advisory import AdvisoryContext, AskResult, FertilizerContext
from app.models.knowledge import EconomicFact, FertilizerFact, PestFact
from app.models.region import Coordinate, Region, StateCode
from app.models.weather import WeatherSnapshot
from app.services.context_merger import ContextMerger
from app.services.knowledge_base import LocalKnowledgeBase
from app.services.llm_providers import TextGenerator
from app.services.prompt_assembler import (
    SOURCES,
    PromptAssembler,
    detect_crops,
    extract_recommendations,
    should_trigger_fertilizer_pane,
)
from app.services.region_resolver import RegionResolver
from app.services.season import season_row
from app.services.soil_estimator import SoilEstimator

logger = logging.getLogger(__name__)

WeatherProvider = Callable[[float, float], Awaitable[WeatherSnapshot]]

DEFAULT_STATE = StateCode.KERALA
LOOKUP_SOIL = "mixed"
MAX_SEASONAL_LOOKUPS = 3

QUICK_ADVICE_QUERIES = {
    "crop-recommendation": "What crops should I plant in {state} during the current season?",
    "pest-control": "What are common pests in {state} and how can I control them naturally?",
    "weather-advice": "How should I adjust my farming practices based on current weather conditions?",
    "soil-health": "How can I improve my soil health in {state}?",
}


class InvalidAdviceType(ValueError):
    pass


@dataclass(frozen=True)
class ModelAttempt:
    name: str
    system_prompt: str
    generate: TextGenerator


def _unique(items):
    seen, result = set(), []
    for item in items:
        key = item.model_dump_json()
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result


class AdvisoryService:
    def __init__(
        self,
        resolver: RegionResolver,
        estimator: SoilEstimator,
        knowledge_base: LocalKnowledgeBase,
        merger: ContextMerger,
        weather_providers: Sequence[Tuple[str, WeatherProvider]],
        attempts: Sequence[ModelAttempt],
    ) -> None:
        self.resolver = resolver
        self.estimator = estimator
        self.knowledge_base = knowledge_base
        self.merger = merger
        self.weather_providers = list(weather_providers)
        self.attempts = list(attempts)

    def resolve_region(self, state: Optional[StateCode], location: Optional[Coordinate]) -> Region:
        if location is not None:
            return self.resolver.resolve(location.lat, location.lon)
        return self.resolver.region_for_state(state or DEFAULT_STATE)

    def lookup_facts(
        self, crops: Sequence[str], region: Region
    ) -> Tuple[List[EconomicFact], List[FertilizerFact], List[PestFact]]:
        kb = self.knowledge_base
        economic, fertilizer, pests = [], [], []
        for crop in crops:
            fertilizer.extend(kb.fertilizer_lookup(crop, LOOKUP_SOIL, region.state_name))
            economic.extend(kb.economic_lookup(crop, region.state))
            pests.extend(kb.pest_lookup(crop))
        return _unique(economic), _unique(fertilizer), _unique(pests)

    async def fetch_weather(self, location: Optional[Coordinate]) -> Optional[WeatherSnapshot]:
        if location is None:
            return None
        for name, provider in self.weather_providers:
            try:
                return await provider(location.lat, location.lon)
            except UpstreamServiceError as exc:
                logger.warning("Weather provider %s failed: %s", name, exc.message)
        logger.warning("No weather data for (%s, %s); continuing without it", location.lat, location.lon)
        return None

    async def build_context(
        self,
        query: str,
        state: Optional[StateCode] = None,
        location: Optional[Coordinate] = None,
        today: Optional[date] = None,
    ) -> AdvisoryContext:
        today = today or date.today()
        region = self.resolve_region(state, location)
        soil = self.estimator.estimate(region, today.month)

        detected = detect_crops(query)
        lookup_crops = detected or [
            crop.lower() for crop in season_row(today.month).recommended_crops[:MAX_SEASONAL_LOOKUPS]
        ]
        economic, fertilizer, pests = self.lookup_facts(lookup_crops, region)
        weather = await self.fetch_weather(location)

        return self.merger.build_context(
            query=query,
            region=region,
            soil_profile=soil,
            crops=economic,
            fertilizer_facts=fertilizer,
            pest_facts=pests,
            weather=weather,
            month=today.month,
            detected_crops=detected,
        )

    async def generate(self, context: AdvisoryContext) -> str:
        last_error: Optional[Exception] = None
        for attempt in self.attempts:
            messages = PromptAssembler(attempt.system_prompt).build_messages(context)
            try:
                text = await attempt.generate(messages)
            except Exception as exc:
                logger.warning("Model attempt %s failed: %r", attempt.name, exc)
                last_error = exc
                continue
            if text and text.strip():
                logger.info("Advisory answered by %s", attempt.name)
                return text
            logger.warning("Model attempt %s returned an empty answer", attempt.name)

        detail = f": {last_error}" if last_error else ""
        raise UpstreamServiceError(f"Failed to generate AI response{detail}", service="llm")

    async def ask(
        self,
        query: str,
        state: Optional[StateCode] = None,
        location: Optional[Coordinate] = None,
        today: Optional[date] = None,
    ) -> AskResult:
        context = await self.build_context(query, state, location, today)
        answer = await self.generate(context)

        sources = list(SOURCES)
        if context.fertilizer_facts or context.crop_facts or context.pest_facts:
            sources.append("Local Agricultural Dataset")

        return AskResult(
            response=answer,
            confidence=context.confidence_score,
            sources=sources,
            recommendations=extract_recommendations(answer),
            should_trigger_fertilizer_pane=should_trigger_fertilizer_pane(query),
            fertilizer_context=FertilizerContext(
                location=context.region.state_name,
                detected_crops=detect_crops(answer),
                soil_type=context.soil_profile.soil_type.value.lower(),
                expected_yield="standard",
            ),
        )

    async def quick_advice(
        self, advice_type: str, state: StateCode, today: Optional[date] = None
    ) -> AskResult:
        template = QUICK_ADVICE_QUERIES.get(advice_type)
        if template is None:
            raise InvalidAdviceType(advice_type)
        return await self.ask(template.format(state=state.display_name), state=state, today=today)
