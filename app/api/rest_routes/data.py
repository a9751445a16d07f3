from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.state import AdvisoryState, get_advisory_state
from app.models.api import ApiResponse
from app.models.knowledge import StateDataset
from app.models.region import SUPPORTED_STATE_CODES, StateCode
from app.services.specialty_crops import specialty_crops_for
from app.services.state_dataset_service import UnsupportedStateError

router = APIRouter(prefix="/api/data", tags=["Datasets"])

UNSUPPORTED_STATE = f"Unsupported state. Supported states: {', '.join(SUPPORTED_STATE_CODES)}"

SUPPORTED_STATES = [
    {"code": state.value, "name": state.display_name} for state in StateCode
] + [{"code": "up", "name": "Uttar Pradesh (UP)"}]


def _dataset(advisory: AdvisoryState, state: str) -> StateDataset:
    try:
        return advisory.datasets.get_state_dataset(state)
    except UnsupportedStateError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=UNSUPPORTED_STATE)


@router.get("/states")
async def get_supported_states():
    return ApiResponse[List[Dict[str, str]]](
        data=SUPPORTED_STATES, message="Supported states retrieved successfully"
    ).render()


@router.get("/ph-recommendations")
async def get_ph_recommendations(advisory: AdvisoryState = Depends(get_advisory_state)):
    """
    pH-based crop recommendation rows.
    """
    rows = advisory.datasets.get_ph_recommendations()
    return ApiResponse(data=rows, message=f"Found {len(rows)} pH-based recommendations").render()


@router.post("/clear-cache")
async def clear_cache(advisory: AdvisoryState = Depends(get_advisory_state)):
    """
    Drops the per-state dataset cache so the next request re-reads the files.
    """
    advisory.datasets.clear_cache()
    return ApiResponse(message="Data cache cleared successfully").render()


@router.get("/{state}")
async def get_state_dataset(state: str, advisory: AdvisoryState = Depends(get_advisory_state)):
    """
    Complete raw dataset (crops, pests, soil moisture) for a state.
    """
    dataset = _dataset(advisory, state)
    return ApiResponse[StateDataset](
        data=dataset, message=f"Dataset for {state} retrieved successfully"
    ).render()


@router.get("/{state}/crops")
async def get_state_crops(
    state: str,
    search: Optional[str] = Query(None, description="Matches crop, category or notes"),
    importance: Optional[str] = Query(None, description="Economic importance level, e.g. High"),
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    crops = _dataset(advisory, state).crops
    if search:
        crops = advisory.datasets.search_crops(state, search)
    crops = advisory.datasets.filter_by_importance(crops, importance)
    return ApiResponse(data=crops, message=f"Found {len(crops)} crops for {state}").render()


@router.get("/{state}/recommendations")
async def get_state_recommendations(
    state: str,
    season: Optional[str] = Query(None, description="kharif, rabi or zaid"),
    soil_type: Optional[str] = Query(None, alias="soilType"),
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    High-importance crops for a state, seasonal crops first.
    """
    _dataset(advisory, state)
    recommendations = advisory.datasets.get_crop_recommendations(state, season, soil_type)
    return ApiResponse(
        data=recommendations,
        message=f"Found {len(recommendations)} crop recommendations for {state}",
    ).render()


@router.get("/{state}/specialty-crops")
async def get_specialty_crops(state: str, advisory: AdvisoryState = Depends(get_advisory_state)):
    """
    High-value specialty crops suited to the state's climate, best economic score first.
    """
    code = StateCode.parse(state)
    if code is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=UNSUPPORTED_STATE)
    crops = specialty_crops_for(advisory.resolver.region_for_state(code))
    return ApiResponse(
        data=[crop.model_dump(mode="json") for crop in crops],
        message=f"Found {len(crops)} specialty crops for {state}",
    ).render()
