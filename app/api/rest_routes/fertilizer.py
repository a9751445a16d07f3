import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.core.errors import RateLimitExceeded
from app.core.state import AdvisoryState, get_advisory_state
from app.models.api import ApiResponse, CachedApiResponse
from app.models.fertilizer import FertilizerRequest, FertilizerResponse
from app.services.fertilizer_cache import make_cache_key

logger = logging.getLogger(__name__)

MISSING_PARAMETERS = "Missing required parameters: location, crop, soil"


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(
    request: Request, advisory: AdvisoryState = Depends(get_advisory_state)
) -> None:
    decision = advisory.limiter.allow(client_key(request))
    if not decision.allowed:
        logger.warning("Rate limit hit for %s", client_key(request))
        raise RateLimitExceeded(decision.retry_after)


router = APIRouter(prefix="/api/agent", tags=["Fertilizer"])


def _require_fields(payload: FertilizerRequest) -> None:
    if not payload.location or not payload.crop or not payload.soil:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_PARAMETERS)


async def _cached_or_fetch(
    advisory: AdvisoryState, key: str, payload: FertilizerRequest, detailed: bool
):
    cached = advisory.cache.get(key)
    if cached is not None:
        logger.info("Serving cached fertilizer data for %s", key)
        return CachedApiResponse[FertilizerResponse](data=cached, cached=True).render()

    guidance = await advisory.fertilizer.recommend(payload, detailed=detailed)
    advisory.cache.put(key, guidance)
    logger.info("Fertilizer guidance generated for %s in %s", payload.crop, payload.location)
    return CachedApiResponse[FertilizerResponse](data=guidance, cached=False).render()


@router.get("/browser-fertilizer", dependencies=[Depends(enforce_rate_limit)])
async def get_fertilizer_guidance(
    location: Optional[str] = Query(None),
    crop: Optional[str] = Query(None),
    soil: Optional[str] = Query(None),
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    Fertilizer guidance for a crop, location and soil. Cached for 24 hours.
    """
    payload = FertilizerRequest(location=location, crop=crop, soil=soil)
    _require_fields(payload)
    key = make_cache_key(payload.location, payload.crop, payload.soil)
    return await _cached_or_fetch(advisory, key, payload, detailed=False)


@router.post("/browser-fertilizer", dependencies=[Depends(enforce_rate_limit)])
async def post_fertilizer_guidance(
    payload: Optional[FertilizerRequest] = None,
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    Fertilizer guidance with expected yield and season context. Per-quintal
    amounts are scaled to the expected yield when one is given.
    """
    payload = payload or FertilizerRequest()
    _require_fields(payload)
    key = make_cache_key(
        payload.location,
        payload.crop,
        payload.soil,
        payload.expected_yield,
        include_yield=True,
    )
    return await _cached_or_fetch(advisory, key, payload, detailed=True)


@router.get("/dataset-stats")
async def get_dataset_stats(advisory: AdvisoryState = Depends(get_advisory_state)):
    knowledge_base = advisory.knowledge_base
    stats = knowledge_base.stats()
    return ApiResponse(
        data={
            "datasetStatistics": stats.model_dump(by_alias=True),
            "isDataLoaded": knowledge_base.is_data_available(),
        }
    ).render()
