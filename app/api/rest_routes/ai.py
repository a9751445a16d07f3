from fastapi import APIRouter, Depends, HTTPException, status

from app.core.state import AdvisoryState, get_advisory_state
from app.models.advisory import AskRequest, AskResult, QuickAdviceRequest
from app.models.api import ApiResponse
from app.models.region import SUPPORTED_STATE_CODES, StateCode
from app.services.advisory_service import DEFAULT_STATE, InvalidAdviceType

router = APIRouter(prefix="/api/ai", tags=["AI Advisory"])

UNSUPPORTED_STATE = f"Unsupported state. Supported states: {', '.join(SUPPORTED_STATE_CODES)}"


def require_state(value: str) -> StateCode:
    state = StateCode.parse(value)
    if state is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=UNSUPPORTED_STATE)
    return state


@router.post("/ask")
async def ask(
    payload: AskRequest,
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    Answers a farmer's question using region, soil, local dataset and weather context.
    """
    if not payload.query or not payload.query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query is required and must be a string",
        )
    state = require_state(payload.state) if payload.state else DEFAULT_STATE

    result = await advisory.advisory.ask(payload.query, state=state, location=payload.location)
    return ApiResponse[AskResult](data=result).render()


@router.post("/quick-advice")
async def quick_advice(
    payload: QuickAdviceRequest,
    advisory: AdvisoryState = Depends(get_advisory_state),
):
    """
    Canned questions for the common advice types.
    """
    if not payload.type or not payload.state:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Type and state are required",
        )
    state = require_state(payload.state)
    try:
        result = await advisory.advisory.quick_advice(payload.type, state)
    except InvalidAdviceType:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid advice type"
        )
    return ApiResponse[AskResult](data=result).render()
