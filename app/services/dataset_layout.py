# Fixed on-disk layout of the flat-file datasets under settings.DATA_ROOT.
from typing import List

from app.models.region import StateCode

STATE_DIRECTORIES = {
    StateCode.KERALA: "kerala_dataset",
    StateCode.KARNATAKA: "Karnataka_dataset",
    StateCode.JHARKHAND: "Jharkhand_dataset",
    StateCode.UTTAR_PRADESH: "utterpradesh_dataset",
}

STATE_FILE_SLUGS = {
    StateCode.KERALA: "kerala",
    StateCode.KARNATAKA: "karnataka",
    StateCode.JHARKHAND: "jharkhand",
    StateCode.UTTAR_PRADESH: "uttar_pradesh",
}

FERTILIZER_HOME_STATE = StateCode.JHARKHAND
FERTILIZER_FILES = [
    "Jharkhand_dataset/fertilizers_jharkhand.tsv",
    "Jharkhand_dataset/fertizlers_jharkhand.csv",
]
FERTILIZER_COLUMNS = [
    "region",
    "soilType",
    "crop",
    "yield",
    "yieldUnit",
    "pricePerKg",
    "grossIncome",
    "fertilizerRecommendation",
    "notes",
    "source",
]
PEST_FILES = ["Jharkhand_dataset/jharkhand_pests_natural_pesticides.csv"]
PH_RECOMMENDATION_FILE = "PH data/Crop_recommendation.csv"


def crop_files(state: StateCode) -> List[str]:
    directory, slug = STATE_DIRECTORIES[state], STATE_FILE_SLUGS[state]
    return [
        f"{directory}/{slug}_crops_economic_importance.csv",
        f"{directory}/{slug}_crops_economic_output.csv",
    ]


def pest_files(state: StateCode) -> List[str]:
    directory, slug = STATE_DIRECTORIES[state], STATE_FILE_SLUGS[state]
    return [
        f"{directory}/{slug}_pests_natural_pesticides.csv",
        f"{directory}/{slug}_pests___natural_pesticides__common_names_.csv",
    ]


def ph_files(state: StateCode) -> List[str]:
    directory, slug = STATE_DIRECTORIES[state], STATE_FILE_SLUGS[state]
    return [
        f"{directory}/{slug}_district_soil_pH_estimates.csv",
        f"{directory}/{directory.split('_')[0]}_district-wise_soil_pH__synthetic_estimates__sourced_.csv",
    ]


def soil_moisture_files(state: StateCode) -> List[str]:
    name = STATE_DIRECTORIES[state].split("_")[0]
    return [f"Soil moisture/sm_{name[:1].upper()}{name[1:]}_2020.csv"]
