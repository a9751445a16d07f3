import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional

from app.models.knowledge import StateDataset
from app.models.region import StateCode
from app.services.dataset_layout import (
    PH_RECOMMENDATION_FILE,
    crop_files,
    pest_files,
    soil_moisture_files,
)
from app.services.dataset_loader import Row, first_existing, read_rows
from app.services.season import crops_for_season

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 10


class UnsupportedStateError(ValueError):
    def __init__(self, state: str) -> None:
        super().__init__(f"Unsupported state: {state}")
        self.state = state


def _matches_term(row: Row, term: str) -> bool:
    return any(term in row.get(key, "").lower() for key in ("crop", "category", "notes"))


class StateDatasetService:
    """Per-state raw datasets, read lazily and kept until clear_cache()."""

    def __init__(self, data_root: Path) -> None:
        self.data_root = Path(data_root)
        self._cache: Dict[StateCode, StateDataset] = {}
        self._lock = threading.Lock()

    @staticmethod
    def resolve_state(state: str) -> StateCode:
        code = StateCode.parse(state)
        if code is None:
            raise UnsupportedStateError(state)
        return code

    def _read_first(self, candidates: List[str], label: str) -> List[Row]:
        path = first_existing(self.data_root, candidates)
        if path is None:
            logger.warning("No %s data found under %s", label, self.data_root)
            return []
        return read_rows(path, label=label)

    def get_state_dataset(self, state: str) -> StateDataset:
        code = self.resolve_state(state)
        cached = self._cache.get(code)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(code)
            if cached is not None:
                return cached
            dataset = StateDataset(
                crops=self._read_first(crop_files(code), f"{code.value} crop"),
                pests=self._read_first(pest_files(code), f"{code.value} pest"),
                soil_moisture=self._read_first(
                    soil_moisture_files(code), f"{code.value} soil moisture"
                ),
            )
            self._cache[code] = dataset
            return dataset

    def search_crops(self, state: str, term: str) -> List[Row]:
        term = (term or "").strip().lower()
        crops = self.get_state_dataset(state).crops
        if not term:
            return list(crops)
        return [row for row in crops if _matches_term(row, term)]

    @staticmethod
    def filter_by_importance(crops: List[Row], importance: Optional[str]) -> List[Row]:
        if not importance:
            return list(crops)
        wanted = importance.strip().lower()
        return [row for row in crops if row.get("economic_importance", "").lower() == wanted]

    def get_crop_recommendations(
        self,
        state: str,
        season: Optional[str] = None,
        soil_type: Optional[str] = None,
    ) -> List[Row]:
        """
        High-importance crops for a state, at most ten.

        When a season is named, crops from that season's list are ranked first.
        When a soil type is named, crops whose notes mention it come next.
        """
        crops = self.filter_by_importance(self.get_state_dataset(state).crops, "high")
        seasonal = [name.lower() for name in crops_for_season(season)]
        soil = (soil_type or "").strip().lower()

        def rank(row: Row) -> int:
            crop = row.get("crop", "").lower()
            score = 0
            if seasonal and any(name in crop or crop in name for name in seasonal if crop):
                score -= 2
            if soil and soil in row.get("notes", "").lower():
                score -= 1
            return score

        return sorted(crops, key=rank)[:MAX_RECOMMENDATIONS]

    def get_ph_recommendations(self) -> List[Row]:
        return read_rows(self.data_root / PH_RECOMMENDATION_FILE, label="pH recommendation")

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.info("State dataset cache cleared")
