from typing import Dict, List, Optional

from app.models.knowledge import FarmerFriendlyName
from app.models.region import StateCode

# Regional language used for crop names in each state; Hindi is always shown.
STATE_LANGUAGES: Dict[StateCode, str] = {
    StateCode.KERALA: "malayalam",
    StateCode.KARNATAKA: "kannada",
}

FARMER_FRIENDLY_NAMES: Dict[str, FarmerFriendlyName] = {
    "rice": FarmerFriendlyName(
        common="Rice",
        hindi="चावल (Chawal) / धान (Dhan)",
        regional={
            "malayalam": "നെല്ല് (Nellu)",
            "tamil": "அரிசி (Arisi)",
            "kannada": "ಅಕ್ಕಿ (Akki)",
            "telugu": "వరి (Vari)",
        },
        market_name="Paddy",
        local_names=["Dhan", "Nellu", "Akki"],
    ),
    "paddy": FarmerFriendlyName(
        common="Rice",
        hindi="धान (Dhan)",
        regional={
            "malayalam": "നെല്ല് (Nellu)",
            "tamil": "நெல் (Nel)",
            "kannada": "ಬತ್ತ (Bhatta)",
        },
        market_name="Paddy",
        local_names=["Dhan"],
    ),
    "wheat": FarmerFriendlyName(
        common="Wheat",
        hindi="गेहूं (Gehun)",
        regional={"punjabi": "ਕਣਕ (Kanak)", "marathi": "गहू (Gahu)"},
        market_name="Wheat",
        local_names=["Gehun", "Kanak"],
    ),
    "maize": FarmerFriendlyName(
        common="Corn",
        hindi="मक्का (Makka)",
        regional={"malayalam": "ചോളം (Cholam)", "kannada": "ಜೋಳ (Jola)"},
        market_name="Maize",
        local_names=["Makka", "Bhutta", "Cholam"],
    ),
    "black gram": FarmerFriendlyName(
        common="Black Gram",
        hindi="उड़द (Urad)",
        regional={"malayalam": "ഉഴുന്ന് (Uzunnu)", "kannada": "ಉದ್ದು (Uddu)"},
        market_name="Urad Dal",
        local_names=["Urad", "Uzunnu"],
    ),
    "pigeon pea": FarmerFriendlyName(
        common="Pigeon Pea",
        hindi="अरहर (Arhar) / तूर (Tur)",
        regional={"malayalam": "തുവര (Thuvara)", "kannada": "ತೊಗರಿ (Togari)"},
        market_name="Tur Dal",
        local_names=["Arhar", "Tur Dal", "Thuvara"],
    ),
    "tomato": FarmerFriendlyName(
        common="Tomato",
        hindi="टमाटर (Tamatar)",
        regional={"malayalam": "തക്കാളി (Thakkali)", "kannada": "ಟೊಮ್ಯಾಟೊ (Tomato)"},
        market_name="Tamatar",
        local_names=["Tamatar", "Thakkali"],
    ),
    "potato": FarmerFriendlyName(
        common="Potato",
        hindi="आलू (Aloo)",
        regional={"malayalam": "ഉരുളക്കിഴങ്ങ് (Urulakizhangu)", "kannada": "ಆಲೂಗೆಡ್ಡೆ (Alugadde)"},
        market_name="Aloo",
        local_names=["Aloo", "Batata"],
    ),
    "onion": FarmerFriendlyName(
        common="Onion",
        hindi="प्याज़ (Pyaz)",
        regional={"malayalam": "സവാള (Savala)", "kannada": "ಈರುಳ್ಳಿ (Eerulli)"},
        market_name="Pyaz",
        local_names=["Pyaz", "Savala", "Kanda"],
    ),
    "black pepper": FarmerFriendlyName(
        common="Black Pepper",
        hindi="काली मिर्च (Kali Mirch)",
        regional={"malayalam": "കുരുമുളക് (Kurumulaku)", "kannada": "ಮೆಣಸು (Menasu)"},
        market_name="Pepper",
        local_names=["Kurumulaku", "Golmirch"],
    ),
    "cardamom": FarmerFriendlyName(
        common="Cardamom",
        hindi="इलायची (Elaichi)",
        regional={"malayalam": "ഏലത്തരി (Elathri)", "kannada": "ಯಾಲಕ್ಕಿ (Yalakki)"},
        market_name="Elaichi",
        local_names=["Elaichi", "Chhoti Elaichi"],
    ),
    "coconut": FarmerFriendlyName(
        common="Coconut",
        hindi="नारियल (Nariyal)",
        regional={"malayalam": "തേങ്ങ (Thenga)", "kannada": "ತೆಂಗು (Tengu)"},
        market_name="Coconut",
        local_names=["Nariyal", "Thenga", "Khopra"],
    ),
    "coffee": FarmerFriendlyName(
        common="Coffee",
        hindi="कॉफी (Coffee)",
        regional={"malayalam": "കാപ്പി (Kappi)", "kannada": "ಕಾಫಿ (Kafi)"},
        market_name="Coffee",
        local_names=["Kappi", "Kafi Beans"],
    ),
    "tea": FarmerFriendlyName(
        common="Tea",
        hindi="चाय (Chai)",
        regional={"malayalam": "ചായ (Cha)", "kannada": "ಚಹಾ (Chaha)"},
        market_name="Tea",
        local_names=["Chai", "Tea Leaves"],
    ),
    "banana": FarmerFriendlyName(
        common="Banana",
        hindi="केला (Kela)",
        regional={"malayalam": "വാഴപ്പഴം (Vazhapazham)", "kannada": "ಬಾಳೆಹಣ್ಣು (Balehannu)"},
        market_name="Kela",
        local_names=["Kela", "Vazhapazham", "Bale"],
    ),
    "mango": FarmerFriendlyName(
        common="Mango",
        hindi="आम (Aam)",
        regional={"malayalam": "മാങ്ങ (Manga)", "kannada": "ಮಾವು (Mavu)"},
        market_name="Aam",
        local_names=["Aam", "Manga"],
    ),
    "cotton": FarmerFriendlyName(
        common="Cotton",
        hindi="कपास (Kapas)",
        regional={"malayalam": "പഞ്ഞി (Panji)", "kannada": "ಹತ್ತಿ (Hatti)"},
        market_name="Cotton",
        local_names=["Kapas", "Ruyi"],
    ),
    "sugarcane": FarmerFriendlyName(
        common="Sugarcane",
        hindi="गन्ना (Ganna)",
        regional={"malayalam": "കരിമ്പ് (Karimp)", "kannada": "ಕಬ್ಬು (Kabbu)"},
        market_name="Ganna",
        local_names=["Ganna", "Sherdi"],
    ),
}


def language_for(state: StateCode) -> Optional[str]:
    return STATE_LANGUAGES.get(state)


def farmer_friendly_name(crop: str) -> FarmerFriendlyName:
    """Known names for a crop; unknown crops get a title-cased entry with no translations."""
    known = FARMER_FRIENDLY_NAMES.get(crop.strip().lower())
    if known is not None:
        return known
    name = crop.strip()
    return FarmerFriendlyName(common=name.title(), market_name=name, local_names=[name] if name else [])


def format_crop_name(crop: str, language: Optional[str] = None) -> str:
    """
    One-line display name, e.g. "Rice (चावल (Chawal) / धान (Dhan)) - നെല്ല് (Nellu)".
    """
    names = farmer_friendly_name(crop)
    formatted = names.common
    if names.hindi:
        formatted += f" ({names.hindi})"
    regional = names.regional.get(language.lower()) if language else None
    if regional:
        formatted += f" - {regional}"
    return formatted


def regional_names(crop: str, language: Optional[str] = None) -> List[str]:
    """Every name a farmer might use for the crop, without duplicates."""
    names = farmer_friendly_name(crop)
    candidates = [names.common, names.hindi, names.market_name, *names.local_names]
    if language:
        candidates.append(names.regional.get(language.lower()))

    seen: List[str] = []
    for name in candidates:
        if name and name not in seen:
            seen.append(name)
    return seen
