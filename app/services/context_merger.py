import logging
from typing import List, Optional, Sequence

from app.models.advisory import AdvisoryContext
from app.models.fertilizer import FertilizerAction
from app.models.knowledge import EconomicFact, FertilizerFact, PestFact
from app.models.region import Region
from app.models.soil import SoilProfile
from app.models.weather import WeatherSnapshot
from app.services.dataset_layout import FERTILIZER_HOME_STATE
from app.services.knowledge_base import to_fertilizer_actions
from app.services.season import get_season_info
from app.services.specialty_crops import specialty_crops_for

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.85
FERTILIZER_BONUS = 0.10
ECONOMIC_BONUS = 0.03
PEST_BONUS = 0.02
MISSING_WEATHER_PENALTY = 0.05
MIN_LOCAL_ACTIONS = 3

HEURISTIC_ACTIONS: List[FertilizerAction] = [
    FertilizerAction(
        step="Basal Application (AI Recommendation)",
        amount_per_ha="200-250 kg NPK 10:26:26 per hectare",
        amount_per_quintal="8-10 kg NPK per expected quintal yield",
        timing="At sowing/planting time",
    ),
    FertilizerAction(
        step="Top Dressing (AI Recommendation)",
        amount_per_ha="100-150 kg Urea per hectare",
        amount_per_quintal="4-6 kg Urea per expected quintal yield",
        timing="30-45 days after sowing",
    ),
]


def score_local_facts(has_fertilizer: bool, has_economic: bool, has_pests: bool) -> float:
    """Confidence from which local fact sources matched. Shared with the fertilizer endpoint."""
    score = BASE_CONFIDENCE
    if has_fertilizer:
        score += FERTILIZER_BONUS
    if has_economic:
        score += ECONOMIC_BONUS
    if has_pests:
        score += PEST_BONUS
    return min(1.0, round(score, 4))


def merge_actions(local_actions: Sequence[FertilizerAction]) -> List[FertilizerAction]:
    """Local actions first; generic heuristics appended only when local ones are scarce."""
    actions = list(local_actions)
    if len(actions) < MIN_LOCAL_ACTIONS:
        actions.extend(action.model_copy() for action in HEURISTIC_ACTIONS)
    return actions


class ContextMerger:
    def __init__(self, home_region: str = FERTILIZER_HOME_STATE.display_name) -> None:
        self.home_region = home_region

    def confidence_for(
        self,
        region: Region,
        soil_profile: SoilProfile,
        fertilizer_facts: Sequence[FertilizerFact],
        crops: Sequence[EconomicFact],
        pest_facts: Sequence[PestFact],
        weather: Optional[WeatherSnapshot],
    ) -> float:
        score = score_local_facts(bool(fertilizer_facts), bool(crops), bool(pest_facts))
        if weather is None:
            score -= MISSING_WEATHER_PENALTY
        score *= (region.confidence + soil_profile.confidence) / 2
        return round(max(0.0, min(1.0, score)), 4)

    def build_context(
        self,
        query: str,
        region: Region,
        soil_profile: SoilProfile,
        crops: Optional[Sequence[EconomicFact]] = None,
        fertilizer_facts: Optional[Sequence[FertilizerFact]] = None,
        pest_facts: Optional[Sequence[PestFact]] = None,
        weather: Optional[WeatherSnapshot] = None,
        month: Optional[int] = None,
        detected_crops: Optional[Sequence[str]] = None,
    ) -> AdvisoryContext:
        crops = list(crops or [])
        fertilizer_facts = list(fertilizer_facts or [])
        pest_facts = list(pest_facts or [])

        if weather is None:
            logger.info("Building advisory context without weather data")

        actions = merge_actions(to_fertilizer_actions(fertilizer_facts, self.home_region))

        return AdvisoryContext(
            query=query,
            region=region,
            soil_profile=soil_profile,
            crop_facts=crops,
            fertilizer_facts=fertilizer_facts,
            pest_facts=pest_facts,
            specialty_crops=specialty_crops_for(region),
            fertilizer_actions=actions,
            external_weather=weather,
            season_info=get_season_info(month),
            detected_crops=list(detected_crops or []),
            confidence_score=self.confidence_for(
                region, soil_profile, fertilizer_facts, crops, pest_facts, weather
            ),
        )
