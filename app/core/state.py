import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from fastapi import Request

from app.core.config import Settings, settings
from app.prompts.advisory_system_prompt import (
    ADVISORY_FALLBACK_SYSTEM_PROMPT,
    ADVISORY_SYSTEM_PROMPT,
)
from app.prompts.fertilizer_system_prompt import FERTILIZER_SYSTEM_PROMPT
from app.services.advisory_service import AdvisoryService, ModelAttempt, WeatherProvider
from app.services.context_merger import ContextMerger
from app.services.fertilizer_cache import FertilizerCache, RateLimiter
from app.services.fertilizer_service import FertilizerService
from app.services.knowledge_base import LocalKnowledgeBase
from app.services.llm_providers import ChatModelProvider, QueryGenerator, query_generator
from app.services.region_resolver import RegionResolver
from app.services.soil_estimator import SoilEstimator
from app.services.state_dataset_service import StateDatasetService
from app.services.weather_service import WeatherService

logger = logging.getLogger(__name__)


@dataclass
class AdvisoryState:
    """Process-wide services and caches, built once at startup and shared by all requests."""

    config: Settings
    resolver: RegionResolver
    estimator: SoilEstimator
    knowledge_base: LocalKnowledgeBase
    datasets: StateDatasetService
    merger: ContextMerger
    cache: FertilizerCache
    limiter: RateLimiter
    weather: WeatherService
    fertilizer: FertilizerService
    advisory: AdvisoryService

    def load(self) -> None:
        self.knowledge_base.load()
        self.estimator.load()


def default_attempts(config: Settings) -> Tuple[ModelAttempt, ...]:
    return (
        ModelAttempt(
            name=config.LLM_PRIMARY_MODEL,
            system_prompt=ADVISORY_SYSTEM_PROMPT,
            generate=ChatModelProvider(
                config.LLM_PRIMARY_MODEL, config.LLM_PRIMARY_TIMEOUT, temperature=0.2
            ),
        ),
        ModelAttempt(
            name=config.LLM_FALLBACK_MODEL,
            system_prompt=ADVISORY_FALLBACK_SYSTEM_PROMPT,
            generate=ChatModelProvider(
                config.LLM_FALLBACK_MODEL, config.LLM_FALLBACK_TIMEOUT, temperature=0.2
            ),
        ),
    )


def build_advisory_state(
    config: Settings = settings,
    *,
    data_root: Optional[Path] = None,
    weather: Optional[WeatherService] = None,
    weather_providers: Optional[Sequence[Tuple[str, WeatherProvider]]] = None,
    attempts: Optional[Sequence[ModelAttempt]] = None,
    fertilizer_generator: Optional[QueryGenerator] = None,
    cache: Optional[FertilizerCache] = None,
    limiter: Optional[RateLimiter] = None,
) -> AdvisoryState:
    root = Path(data_root or config.DATA_ROOT)
    resolver = RegionResolver()
    estimator = SoilEstimator(data_root=root)
    knowledge_base = LocalKnowledgeBase(root)
    merger = ContextMerger(home_region=knowledge_base.home_region)
    weather = weather or WeatherService(
        api_key=config.OPENWEATHERMAP_API_KEY, timeout=config.WEATHER_TIMEOUT
    )
    if weather_providers is None:
        weather_providers = [
            ("extended_forecast", weather.extended_forecast),
            ("current_weather", weather.current_by_coords),
        ]
    if cache is None:
        cache = FertilizerCache(
            ttl_seconds=config.FERTILIZER_CACHE_TTL_SECONDS,
            max_entries=config.FERTILIZER_CACHE_MAX_ENTRIES,
        )
    if limiter is None:
        limiter = RateLimiter(
            limit=config.RATE_LIMIT_REQUESTS,
            window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
            max_keys=config.RATE_LIMIT_MAX_KEYS,
        )
    if fertilizer_generator is None:
        fertilizer_generator = query_generator(
            ChatModelProvider(config.FERTILIZER_MODEL, config.FERTILIZER_TIMEOUT, temperature=0.3),
            FERTILIZER_SYSTEM_PROMPT,
        )

    return AdvisoryState(
        config=config,
        resolver=resolver,
        estimator=estimator,
        knowledge_base=knowledge_base,
        datasets=StateDatasetService(root),
        merger=merger,
        cache=cache,
        limiter=limiter,
        weather=weather,
        fertilizer=FertilizerService(knowledge_base, fertilizer_generator),
        advisory=AdvisoryService(
            resolver=resolver,
            estimator=estimator,
            knowledge_base=knowledge_base,
            merger=merger,
            weather_providers=weather_providers,
            attempts=attempts if attempts is not None else default_attempts(config),
        ),
    )


def get_advisory_state(request: Request) -> AdvisoryState:
    return request.app.state.advisory
