import calendar
import logging
import math
import re
from datetime import date
from typing import List, Optional

from app.core.errors import UpstreamServiceError
from app.models.fertilizer import (
    Citation,
    FertilizerAction,
    FertilizerRequest,
    FertilizerResponse,
    Supplier,
)
from app.services.context_merger import merge_actions, score_local_facts
from app.services.knowledge_base import LocalKnowledgeBase, to_fertilizer_actions
from app.services.llm_providers import QueryGenerator

logger = logging.getLogger(__name__)

AI_GUIDANCE_TITLE = "AI-Generated Fertilizer Guidance"
AI_GUIDANCE_URL = "https://ai.google.dev/gemini-api"
LOCAL_DATASET_URL = "local://jharkhand-dataset"
LOCAL_AGRICULTURE_URL = "https://jharkhand.gov.in/agriculture"
BASE_PEST_ADVICE = "Avoid over-fertilization with nitrogen as it can increase pest susceptibility."
YIELD_SCALE_QUINTALS = 20

DEFAULT_SUPPLIERS = [
    Supplier(name="IFFCO (Indian Farmers Fertiliser Cooperative)", url="https://www.iffco.coop"),
    Supplier(name="Coromandel International", url="https://www.coromandel.biz"),
]

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def _snippet(text: str, length: int) -> str:
    return text[:length] + "..."


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def build_query(request: FertilizerRequest, month_name: str, detailed: bool) -> str:
    if not detailed:
        return (
            f"For {request.crop} cultivation in {request.location} with {request.soil} soil type, "
            f"current month {month_name}, provide detailed fertilizer recommendations including "
            "NPK ratios, application rates per hectare and per quintal expected yield, timing "
            "schedules, and safety guidelines. Include specific product names and suppliers."
        )
    return (
        f"Comprehensive fertilizer guide for {request.crop} in {request.location}, "
        f"{request.soil} soil, expected yield {request.expected_yield or 'standard'} quintals "
        f"per acre, {request.current_season or month_name} season. Include NPK recommendations, "
        "application rates per hectare and per quintal, timing, micronutrient requirements, "
        "organic alternatives, and cost-effective supplier options in India."
    )


def scale_actions(actions: List[FertilizerAction], expected_yield: str) -> List[FertilizerAction]:
    """
    Rewrite per-quintal amounts for a stated yield: leading number x (yield / 20).

    Actions without a leading number, or a yield that is not numeric, are left unchanged.
    """
    try:
        quintals = float(expected_yield)
    except (TypeError, ValueError):
        logger.info("Expected yield %r is not numeric; per-quintal amounts not scaled", expected_yield)
        return actions
    if not math.isfinite(quintals):
        return actions

    scaled = []
    for action in actions:
        match = _LEADING_NUMBER.match(action.amount_per_quintal)
        if match is None:
            scaled.append(action)
            continue
        amount = _round_half_up(float(match.group(1)) * (quintals / YIELD_SCALE_QUINTALS))
        scaled.append(
            action.model_copy(
                update={"amount_per_quintal": f"{amount} kg per expected {expected_yield} quintals"}
            )
        )
    return scaled


class FertilizerService:
    """Fertilizer guidance from the external model merged with local dataset facts."""

    def __init__(self, knowledge_base: LocalKnowledgeBase, generate: QueryGenerator) -> None:
        self.knowledge_base = knowledge_base
        self.generate = generate

    async def recommend(
        self,
        request: FertilizerRequest,
        *,
        detailed: bool = False,
        today: Optional[date] = None,
    ) -> FertilizerResponse:
        today = today or date.today()
        month_name = calendar.month_name[today.month]
        query = build_query(request, month_name, detailed)

        logger.info("Fetching fertilizer guidance for %s in %s", request.crop, request.location)
        try:
            guidance = await self.generate(query)
        except Exception as exc:
            logger.exception(
                "Fertilizer guidance generation failed for crop=%s location=%s",
                request.crop,
                request.location,
            )
            raise UpstreamServiceError(
                "Failed to fetch fertilizer recommendations", service="llm"
            ) from exc

        response = self.merge(guidance, request, month_name)
        if detailed and request.expected_yield:
            response.actions = scale_actions(response.actions, request.expected_yield)
        return response

    def merge(self, guidance: str, request: FertilizerRequest, month_name: str) -> FertilizerResponse:
        crop, location, soil = request.crop or "", request.location or "", request.soil or ""
        kb = self.knowledge_base
        fertilizer = kb.fertilizer_lookup(crop, soil, location)
        economic = kb.economic_lookup(crop)
        pests = kb.pest_lookup(crop)

        actions = merge_actions(to_fertilizer_actions(fertilizer, kb.home_region))

        pest_interactions = BASE_PEST_ADVICE
        if pests:
            pest_interactions += " Local pest control: " + "; ".join(
                pest.natural_pesticides for pest in pests
            )

        suppliers = [supplier.model_copy() for supplier in DEFAULT_SUPPLIERS]
        if economic and economic[0].primary_districts:
            suppliers.append(
                Supplier(
                    name=f"Local Agricultural Centers ({economic[0].primary_districts})",
                    url=LOCAL_AGRICULTURE_URL,
                )
            )

        citations = []
        if kb.is_data_available():
            citations.append(
                Citation(
                    title=f"{kb.home_region} Agricultural Dataset (Local)",
                    url=LOCAL_DATASET_URL,
                    snippet=(
                        f"Local fertilizer data for {crop} cultivation with "
                        f"{len(fertilizer)} matching records."
                    ),
                )
            )
        citations.append(
            Citation(
                title="AI-Enhanced Fertilizer Guidance",
                url=AI_GUIDANCE_URL,
                snippet=_snippet(guidance, 150),
            )
        )

        if fertilizer:
            summary = (
                f"Local dataset + AI recommendations for {crop} cultivation in {location} with "
                f"{soil} soil conditions during {month_name}. Based on {len(fertilizer)} local records."
            )
        else:
            summary = (
                f"AI-generated fertilizer recommendations for {crop} cultivation in {location} "
                f"with {soil} soil conditions during {month_name}."
            )

        return FertilizerResponse(
            title=f"Fertilizer Guidance for {crop} in {location}",
            summary=summary,
            actions=actions,
            pest_interactions=pest_interactions,
            suppliers=suppliers,
            confidence_score=score_local_facts(bool(fertilizer), bool(economic), bool(pests)),
            citations=citations,
            raw_search_hits=[
                {
                    "title": AI_GUIDANCE_TITLE,
                    "url": AI_GUIDANCE_URL,
                    "snippet": _snippet(guidance, 200),
                    "content": guidance,
                }
            ],
        )
