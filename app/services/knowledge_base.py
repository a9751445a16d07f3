import logging
import threading
from pathlib import Path
from typing import List, Optional

from app.models.fertilizer import FertilizerAction
from app.models.knowledge import DatasetStats, EconomicFact, FertilizerFact, PestFact
from app.models.region import StateCode
from app.services.dataset_layout import (
    FERTILIZER_COLUMNS,
    FERTILIZER_FILES,
    FERTILIZER_HOME_STATE,
    PEST_FILES,
    crop_files,
)
from app.services.dataset_loader import Row, first_existing, read_rows, to_float

logger = logging.getLogger(__name__)


def crop_matches(stored: str, query: str) -> bool:
    """Case-insensitive substring match in either direction."""
    stored, query = stored.lower(), query.lower()
    if not stored or not query:
        return False
    return stored in query or query in stored


def _fertilizer_from_row(row: Row) -> Optional[FertilizerFact]:
    # Header rows show up as data because the file is read with fixed column names.
    if row.get("crop", "").lower() == "crop" and row.get("region", "").lower() == "region":
        return None
    return FertilizerFact(
        region=row.get("region", ""),
        soil_type=row.get("soilType", ""),
        crop=row.get("crop", ""),
        yield_value=to_float(row.get("yield")),
        yield_unit=row.get("yieldUnit") or "kg/ha",
        price_per_kg=to_float(row.get("pricePerKg")),
        gross_income=to_float(row.get("grossIncome")),
        fertilizer_recommendation=row.get("fertilizerRecommendation", ""),
        notes=row.get("notes", ""),
        source=row.get("source", ""),
    )


def _economic_from_row(row: Row, state: StateCode) -> EconomicFact:
    return EconomicFact(
        state=state.value,
        crop=row.get("crop", ""),
        category=row.get("category", ""),
        economic_importance=row.get("economic_importance", ""),
        primary_districts=row.get("primary_districts", ""),
        notes=row.get("notes", ""),
        source=row.get("source", ""),
    )


def _pest_from_row(row: Row) -> PestFact:
    return PestFact(
        pest=row.get("pest") or row.get("pest_name", ""),
        crop_affected=row.get("crop_affected", ""),
        economic_impact=row.get("economic_impact", ""),
        natural_pesticides=row.get("natural_pesticides") or row.get("natural_pesticide", ""),
        notes=row.get("notes", ""),
    )


class LocalKnowledgeBase:
    """
    Read-only crop, fertilizer and pest facts built once from flat files.

    Fertilizer and pest facts come from the home-region (Jharkhand) dataset;
    economic-importance facts are loaded per supported state. Tables are never
    mutated after load, so concurrent lookups need no locking.
    """

    def __init__(
        self,
        data_root: Path,
        home_region: str = FERTILIZER_HOME_STATE.display_name,
    ) -> None:
        self.data_root = Path(data_root)
        self.home_region = home_region
        self._fertilizer: List[FertilizerFact] = []
        self._economic: List[EconomicFact] = []
        self._pests: List[PestFact] = []
        self._loaded = False
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            logger.info("Loading local agricultural datasets from %s", self.data_root)
            self._fertilizer = self._load_fertilizer()
            self._economic = self._load_economic()
            self._pests = self._load_pests()
            self._loaded = True
            logger.info(
                "Local datasets loaded: %d fertilizer, %d economic, %d pest records",
                len(self._fertilizer),
                len(self._economic),
                len(self._pests),
            )

    def _load_fertilizer(self) -> List[FertilizerFact]:
        path = first_existing(self.data_root, FERTILIZER_FILES)
        if path is None:
            logger.warning("Fertilizer dataset not found under %s", self.data_root)
            return []
        rows = read_rows(path, sep="\t", names=FERTILIZER_COLUMNS, label="fertilizer")
        facts = [_fertilizer_from_row(row) for row in rows]
        return [fact for fact in facts if fact is not None]

    def _load_economic(self) -> List[EconomicFact]:
        facts: List[EconomicFact] = []
        for state in StateCode:
            path = first_existing(self.data_root, crop_files(state))
            if path is None:
                logger.warning("Economic dataset not found for %s", state.value)
                continue
            rows = read_rows(path, label=f"{state.value} economic")
            facts.extend(_economic_from_row(row, state) for row in rows if row.get("crop"))
        return facts

    def _load_pests(self) -> List[PestFact]:
        path = first_existing(self.data_root, PEST_FILES)
        if path is None:
            logger.warning("Pest dataset not found under %s", self.data_root)
            return []
        return [_pest_from_row(row) for row in read_rows(path, label="pest")]

    def _region_matches(self, record_region: str, location: str) -> bool:
        if not location:
            return True
        location, record_region = location.lower(), record_region.lower()
        if self.home_region.lower() in location:
            return True
        if not record_region:
            return False
        return location in record_region or record_region in location

    def fertilizer_lookup(self, crop: str, soil_type: str, location: str) -> List[FertilizerFact]:
        self.load()
        soil = (soil_type or "").strip().lower()
        location = (location or "").strip()

        results = []
        for fact in self._fertilizer:
            if not crop_matches(fact.crop, crop or ""):
                continue
            # A record without a soil type applies to every soil.
            record_soil = fact.soil_type.strip()
            if soil and soil != "mixed" and record_soil and not crop_matches(record_soil, soil):
                continue
            if not self._region_matches(fact.region, location):
                continue
            results.append(fact)
        return results

    def economic_lookup(self, crop: str, state: Optional[StateCode] = None) -> List[EconomicFact]:
        self.load()
        return [
            fact
            for fact in self._economic
            if crop_matches(fact.crop, crop or "")
            and (state is None or fact.state == state.value)
        ]

    def pest_lookup(self, crop: str) -> List[PestFact]:
        self.load()
        return [fact for fact in self._pests if crop_matches(fact.crop_affected, crop or "")]

    def known_crops(self) -> List[str]:
        self.load()
        names = {fact.crop for fact in self._fertilizer} | {fact.crop for fact in self._economic}
        return sorted(name for name in names if name)

    def is_data_available(self) -> bool:
        return self._loaded and bool(self._fertilizer or self._economic or self._pests)

    def stats(self) -> DatasetStats:
        self.load()
        return DatasetStats(
            fertilizer_records=len(self._fertilizer),
            economic_records=len(self._economic),
            pest_records=len(self._pests),
            data_loaded=self._loaded,
            available_crops=list(dict.fromkeys(fact.crop for fact in self._fertilizer)),
            available_soil_types=list(dict.fromkeys(fact.soil_type for fact in self._fertilizer)),
            available_pests=list(dict.fromkeys(fact.pest for fact in self._pests)),
        )

    def summary(self, crop: str, soil_type: str, location: str) -> str:
        """Plain-text digest of all local facts for a crop."""
        fertilizer = self.fertilizer_lookup(crop, soil_type, location)
        economic = self.economic_lookup(crop)
        pests = self.pest_lookup(crop)

        lines = [f"LOCAL DATASET RECOMMENDATIONS FOR {crop.upper()}:", ""]
        if fertilizer:
            lines.append("FERTILIZER DATA (Local Dataset):")
            for fact in fertilizer:
                lines.extend(
                    [
                        f"- Soil: {fact.soil_type}",
                        f"- Expected Yield: {fact.yield_quintals_per_ha:g} quintals/hectare",
                        f"- Gross Income: {format_inr(fact.gross_income)}/hectare",
                        f"- Fertilizer: {fact.fertilizer_recommendation}",
                        f"- Notes: {fact.notes}",
                        "",
                    ]
                )
        if economic:
            lines.append("ECONOMIC IMPORTANCE (Local Dataset):")
            for fact in economic:
                lines.extend(
                    [
                        f"- Category: {fact.category}",
                        f"- Importance: {fact.economic_importance}",
                        f"- Primary Districts: {fact.primary_districts}",
                        f"- Economic Notes: {fact.notes}",
                        "",
                    ]
                )
        if pests:
            lines.append("PEST MANAGEMENT (Local Dataset):")
            for fact in pests:
                lines.extend(
                    [
                        f"- Pest: {fact.pest}",
                        f"- Economic Impact: {fact.economic_impact}",
                        f"- Natural Control: {fact.natural_pesticides}",
                        f"- Management Notes: {fact.notes}",
                        "",
                    ]
                )
        if not (fertilizer or economic or pests):
            lines.append(
                f"No specific local dataset matches found for {crop}. Using AI-generated recommendations."
            )
        return "\n".join(lines).strip() + "\n"


def format_inr(amount: float) -> str:
    """Rupee amount with Indian digit grouping, e.g. 125000 -> ₹1,25,000."""
    whole = str(int(round(amount)))
    sign = ""
    if whole.startswith("-"):
        sign, whole = "-", whole[1:]
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}₹{whole}"


def to_fertilizer_actions(facts: List[FertilizerFact], home_region: str) -> List[FertilizerAction]:
    actions = []
    for fact in facts:
        recommendation = fact.fertilizer_recommendation
        if "NPK" in recommendation:
            amount_per_ha = f"{recommendation} (see local dataset)"
        else:
            amount_per_ha = f"Apply: {recommendation}"
        actions.append(
            FertilizerAction(
                step=f"Local Dataset Recommendation ({fact.soil_type})",
                amount_per_ha=amount_per_ha,
                amount_per_quintal=(
                    f"Calculated for {fact.yield_quintals_per_ha:g} quintals/ha expected yield"
                ),
                timing=f"As per local {home_region} agricultural practices",
            )
        )
    return actions
