import pytest

from app.models.region import StateCode
from app.services.knowledge_base import (
    LocalKnowledgeBase,
    crop_matches,
    format_inr,
    to_fertilizer_actions,
)

HEADER = "region\tsoilType\tcrop\tyield\tyieldUnit\tpricePerKg\tgrossIncome\tfertilizerRecommendation\tnotes\tsource"


@pytest.fixture
def knowledge_base(data_root):
    kb = LocalKnowledgeBase(data_root)
    kb.load()
    return kb


def test_crop_matching_is_bidirectional_and_case_insensitive():
    assert crop_matches("Paddy (Rice)", "rice")
    assert crop_matches("Rice", "basmati rice")
    assert not crop_matches("Wheat", "rice")
    assert not crop_matches("", "rice")
    assert not crop_matches("Rice", "")


def test_fertilizer_lookup_for_home_region(knowledge_base):
    facts = knowledge_base.fertilizer_lookup("Rice", "mixed", "Jharkhand")
    assert [fact.crop for fact in facts] == ["Paddy (Rice)"]
    assert facts[0].yield_quintals_per_ha == 32
    assert facts[0].gross_income == 64000


def test_fertilizer_lookup_filters_soil_and_region(knowledge_base):
    assert len(knowledge_base.fertilizer_lookup("wheat", "alluvial", "")) == 1
    assert knowledge_base.fertilizer_lookup("wheat", "black soil", "") == []
    assert knowledge_base.fertilizer_lookup("wheat", "", "Kerala") == []
    assert len(knowledge_base.fertilizer_lookup("maize", "", "Hazaribagh district")) == 1


def test_economic_lookup_by_state(knowledge_base):
    assert {fact.state for fact in knowledge_base.economic_lookup("rice")} == {
        "kerala",
        "jharkhand",
        "uttarpradesh",
    }
    kerala = knowledge_base.economic_lookup("rice", StateCode.KERALA)
    assert len(kerala) == 1
    assert kerala[0].primary_districts == "Palakkad, Alappuzha, Thrissur"


def test_pest_lookup(knowledge_base):
    pests = knowledge_base.pest_lookup("Paddy (Rice)")
    assert [pest.pest for pest in pests] == ["Yellow Stem Borer"]
    assert pests[0].natural_pesticides == "Neem seed kernel extract 5%"


def test_load_is_idempotent(knowledge_base):
    before = knowledge_base.stats()
    knowledge_base.load()
    after = knowledge_base.stats()
    assert before == after
    assert after.fertilizer_records == 5
    assert after.economic_records == 20
    assert after.pest_records == 4
    assert after.data_loaded


def test_missing_files_give_empty_datasets(tmp_path):
    kb = LocalKnowledgeBase(tmp_path / "missing")
    kb.load()
    assert kb.loaded
    assert not kb.is_data_available()
    assert kb.fertilizer_lookup("rice", "", "") == []
    assert kb.stats().fertilizer_records == 0


def test_header_row_and_malformed_values(tmp_path):
    directory = tmp_path / "Jharkhand_dataset"
    directory.mkdir()
    (directory / "fertilizers_jharkhand.tsv").write_text(
        "\n".join(
            [
                HEADER,
                "Ranchi\tRed Soil\tMaize\tnot-a-number\tkg/ha\t18\t\tNPK 120:60:40 kg/ha\t\t",
                "Ranchi\tRed Soil\tRagi",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    kb = LocalKnowledgeBase(tmp_path)
    kb.load()

    maize = kb.fertilizer_lookup("maize", "", "")
    assert len(maize) == 1
    assert maize[0].yield_value == 0.0
    assert maize[0].gross_income == 0.0
    assert maize[0].notes == ""
    ragi = kb.fertilizer_lookup("ragi", "", "")
    assert ragi[0].fertilizer_recommendation == ""
    assert kb.stats().fertilizer_records == 2


def test_summary_text(knowledge_base):
    text = knowledge_base.summary("rice", "mixed", "Jharkhand")
    assert text.startswith("LOCAL DATASET RECOMMENDATIONS FOR RICE:")
    assert "Gross Income: ₹64,000/hectare" in text
    assert "Natural Control: Neem seed kernel extract 5%" in text


def test_summary_without_matches(knowledge_base):
    text = knowledge_base.summary("vanilla", "", "")
    assert "No specific local dataset matches found for vanilla." in text


@pytest.mark.parametrize(
    "amount, expected",
    [(999, "₹999"), (64000, "₹64,000"), (125000, "₹1,25,000"), (12345678, "₹1,23,45,678")],
)
def test_format_inr(amount, expected):
    assert format_inr(amount) == expected


def test_to_fertilizer_actions(knowledge_base):
    facts = knowledge_base.fertilizer_lookup("rice", "", "") + knowledge_base.fertilizer_lookup(
        "mustard", "", ""
    )
    paddy, mustard = to_fertilizer_actions(facts, "Jharkhand")
    assert paddy.step == "Local Dataset Recommendation (Red Soil)"
    assert paddy.amount_per_ha == "NPK 80:40:40 kg/ha (see local dataset)"
    assert paddy.amount_per_quintal == "Calculated for 32 quintals/ha expected yield"
    assert paddy.timing == "As per local Jharkhand agricultural practices"
    assert mustard.amount_per_ha == "Apply: Vermicompost 2.5 t/ha + SSP 150 kg/ha"


def test_record_without_soil_type_matches_any_soil(tmp_path):
    directory = tmp_path / "Jharkhand_dataset"
    directory.mkdir()
    (directory / "fertilizers_jharkhand.tsv").write_text(
        "Gumla\t\tMillet\t900\tkg/ha\t30\t27000\tFYM 5 t/ha\t\tBAU Ranchi\n"
        "Ranchi\tRed Soil\tMillet\t1000\tkg/ha\t30\t30000\tNPK 40:20:20 kg/ha\t\tBAU Ranchi\n",
        encoding="utf-8",
    )
    kb = LocalKnowledgeBase(tmp_path)

    regions = [fact.region for fact in kb.fertilizer_lookup("millet", "Alluvial", "")]

    assert regions == ["Gumla"]
