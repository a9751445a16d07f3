import pytest

from app.models.region import StateCode
from app.services.crop_names import (
    farmer_friendly_name,
    format_crop_name,
    language_for,
    regional_names,
)


def test_known_crop_is_case_insensitive():
    names = farmer_friendly_name("  Maize ")
    assert names.common == "Corn"
    assert names.market_name == "Maize"


def test_unknown_crop_gets_title_case_entry():
    names = farmer_friendly_name("dragon fruit")
    assert names.common == "Dragon Fruit"
    assert names.hindi is None
    assert names.local_names == ["dragon fruit"]


@pytest.mark.parametrize(
    "crop, language, expected",
    [
        ("rice", "malayalam", "Rice (चावल (Chawal) / धान (Dhan)) - നെല്ല് (Nellu)"),
        ("Rice", None, "Rice (चावल (Chawal) / धान (Dhan))"),
        ("wheat", "kannada", "Wheat (गेहूं (Gehun))"),
        ("Ragi", "kannada", "Ragi"),
    ],
)
def test_format_crop_name(crop, language, expected):
    assert format_crop_name(crop, language) == expected


def test_regional_names_are_unique_and_ordered():
    assert regional_names("coconut", "Malayalam") == [
        "Coconut",
        "नारियल (Nariyal)",
        "Nariyal",
        "Thenga",
        "Khopra",
        "തേങ്ങ (Thenga)",
    ]
    assert regional_names("Ragi") == ["Ragi"]


def test_language_for_state():
    assert language_for(StateCode.KERALA) == "malayalam"
    assert language_for(StateCode.KARNATAKA) == "kannada"
    assert language_for(StateCode.JHARKHAND) is None
