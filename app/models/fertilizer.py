from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class FertilizerAction(BaseModel):
    step: str
    amount_per_ha: str
    amount_per_quintal: str
    timing: str


class Supplier(BaseModel):
    name: str
    url: str


class Citation(BaseModel):
    title: str
    url: str
    snippet: str


class FertilizerResponse(BaseModel):
    title: str
    summary: str
    actions: List[FertilizerAction]
    pest_interactions: str
    suppliers: List[Supplier]
    confidence_score: float = Field(..., ge=0.0, le=1.0)
    citations: List[Citation]
    raw_search_hits: List[Dict[str, Any]] = Field(default_factory=list)


class FertilizerRequest(BaseModel):
    location: Optional[str] = None
    crop: Optional[str] = None
    soil: Optional[str] = None
    expected_yield: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("expectedYield", "expected_yield"),
    )
    current_season: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("currentSeason", "current_season"),
    )

    @field_validator(
        "location", "crop", "soil", "expected_yield", "current_season", mode="before"
    )
    @classmethod
    def _stringify_numbers(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value
