"""
High-value specialty crops: uncommon crops with strong prices that suit a
region's climate. Ranked by a fixed economic score and rendered as a prompt
section next to the state's mainstream crops.
"""

import re
from typing import Dict, List, Sequence

from app.models.knowledge import InvestmentLevel, Rarity, SpecialtyCrop
from app.models.region import Region

MAX_SUMMARY_CROPS = 3
NO_SPECIALTY_CROPS = "No suitable specialty crops identified for this location."

SPECIALTY_CROPS: List[SpecialtyCrop] = [
    SpecialtyCrop(
        name="Dragon Fruit",
        common_name="Dragon Fruit (पिताया - Pitaya)",
        local_names=["Pitaya", "Kamalam"],
        economic_potential="₹8,00,000 - ₹12,00,000 per acre annually",
        market_price="₹20,000-40,000 per quintal (domestic), ₹80,000-120,000 per quintal (export)",
        expected_yield="20-30 quintals per acre",
        return_per_quintal="₹15,000-35,000 profit per quintal",
        rarity=Rarity.RARE,
        climate_zones=["tropical_coastal", "tropical_dry"],
        soil_requirements=["well_drained", "sandy_loam", "pH_6_to_7"],
        investment_level=InvestmentLevel.MEDIUM,
        profit_margin="300-500%",
        market_demand="Rapidly growing - health food trend, export demand",
        export_potential="Excellent - Middle East, Europe, USA markets",
        growth_period="18 months to first harvest, 20+ year lifespan",
        special_benefits=[
            "Extremely high market price per quintal",
            "Low water requirement after establishment",
            "Grows on marginal land",
            "Multiple harvests per year",
        ],
        challenges=["Initial setup cost", "Support structure needed", "Limited local knowledge"],
        success_stories=["Gujarat farmers earning ₹10L+ per acre", "Karnataka exports to Dubai"],
    ),
    SpecialtyCrop(
        name="Vanilla",
        common_name="Vanilla (वनीला)",
        local_names=["Vanilla", "वनीला", "വാനില"],
        economic_potential="₹15,00,000 - ₹25,00,000 per acre annually",
        market_price="₹4,00,000-6,00,000 per quintal (cured vanilla beans)",
        expected_yield="0.4-0.6 quintals per acre",
        return_per_quintal="₹2,50,000-4,50,000 profit per quintal",
        rarity=Rarity.RARE,
        climate_zones=["tropical_coastal"],
        soil_requirements=["well_drained", "rich_organic", "pH_6_to_7"],
        investment_level=InvestmentLevel.HIGH,
        profit_margin="400-600%",
        market_demand="Extremely high - global shortage, premium spice",
        export_potential="Outstanding - Europe, USA, Middle East",
        growth_period="3 years to production, 15+ year lifespan",
        special_benefits=[
            "World's second most expensive spice",
            "Can grow under coconut/areca shade",
            "Consistent global demand",
        ],
        challenges=["Hand pollination required", "Lengthy curing process", "High initial investment"],
        success_stories=["Kerala farmers earning ₹20L+ per acre"],
    ),
    SpecialtyCrop(
        name="Stevia",
        common_name="Stevia (स्टीविया - Natural Sugar)",
        local_names=["Stevia", "Sweet Leaf", "मधुपत्री"],
        economic_potential="₹3,00,000 - ₹5,00,000 per acre annually",
        market_price="₹20,000-30,000 per quintal (fresh leaves)",
        expected_yield="15-25 quintals per acre",
        return_per_quintal="₹8,000-12,000 profit per quintal",
        rarity=Rarity.UNCOMMON,
        climate_zones=["tropical_coastal", "tropical_dry", "subtropical_continental"],
        soil_requirements=["well_drained", "loamy", "pH_6_5_to_7_5"],
        investment_level=InvestmentLevel.LOW,
        profit_margin="200-400%",
        market_demand="Growing rapidly - diabetes awareness, health food industry",
        export_potential="Good - pharmaceutical and food industries",
        growth_period="4-5 months, multiple harvests per year",
        special_benefits=["Diabetic-friendly natural sweetener", "Multiple harvests per year"],
        challenges=["Processing knowledge needed", "Market linkage important"],
        success_stories=["Maharashtra farmers supplying to pharmaceutical companies"],
    ),
    SpecialtyCrop(
        name="Saffron",
        common_name="Saffron (केसर - Kesar)",
        local_names=["Kesar", "Zafran"],
        economic_potential="₹8,00,000 - ₹15,00,000 per acre annually",
        market_price="₹2,50,00,000 - ₹4,00,00,000 per quintal",
        expected_yield="0.03-0.05 quintals per acre",
        return_per_quintal="₹1,50,00,000-3,00,00,000 profit per quintal",
        rarity=Rarity.EXOTIC,
        climate_zones=["subtropical_continental", "temperate"],
        soil_requirements=["well_drained", "sandy_loam", "pH_6_to_8"],
        investment_level=InvestmentLevel.MEDIUM,
        profit_margin="500-800%",
        market_demand="Premium market - culinary, pharmaceutical, cosmetic",
        export_potential="Excellent - Middle East, Europe premium markets",
        growth_period="6 months to flower, perennial bulbs",
        special_benefits=["World's most expensive spice", "Low volume, high value"],
        challenges=["Specific climate needs", "Hand harvesting"],
        success_stories=["Kashmir farmers earning ₹12L+ per acre"],
    ),
    SpecialtyCrop(
        name="Wasabi",
        common_name="Wasabi (वसाबी - Japanese Horseradish)",
        local_names=["Wasabi", "Japanese Horseradish"],
        economic_potential="₹10,00,000 - ₹20,00,000 per acre annually",
        market_price="₹15,00,000-25,00,000 per quintal (fresh rhizome)",
        expected_yield="0.5-0.8 quintals per acre",
        return_per_quintal="₹10,00,000-18,00,000 profit per quintal",
        rarity=Rarity.EXOTIC,
        climate_zones=["tropical_coastal", "temperate"],
        soil_requirements=["constant_moisture", "rich_organic", "shade_grown"],
        investment_level=InvestmentLevel.HIGH,
        profit_margin="600-1000%",
        market_demand="Ultra-premium - Japanese restaurants, gourmet food",
        export_potential="Outstanding - Japan, high-end restaurants globally",
        growth_period="18-24 months, continuous harvest",
        special_benefits=["Extremely rare and valuable", "Grows in shade/protected cultivation"],
        challenges=["Very specific growing conditions", "Temperature sensitive"],
    ),
    SpecialtyCrop(
        name="Rambutan",
        common_name="Rambutan (रामबुतान)",
        local_names=["Rambutan", "Hairy Lychee"],
        economic_potential="₹4,00,000 - ₹8,00,000 per acre annually",
        market_price="₹30,000-50,000 per quintal (domestic)",
        expected_yield="80-120 quintals per acre",
        return_per_quintal="₹5,000-15,000 profit per quintal",
        rarity=Rarity.EXOTIC,
        climate_zones=["tropical_coastal"],
        soil_requirements=["well_drained", "rich_organic", "pH_5_5_to_6_5"],
        investment_level=InvestmentLevel.MEDIUM,
        profit_margin="300-500%",
        market_demand="Novelty fruit market, health-conscious consumers",
        export_potential="Good - Southeast Asian diaspora, gourmet markets",
        growth_period="4-6 years to fruit, long-term production",
        special_benefits=["Exotic tropical fruit", "Rich in Vitamin C"],
        challenges=["Limited market awareness", "Fruit fly management"],
        success_stories=["Kerala coastal farmers testing successfully"],
    ),
    SpecialtyCrop(
        name="Purple Cauliflower",
        common_name="Purple Cauliflower (बैंगनी फूलगोभी)",
        local_names=["Purple Gobi", "Colored Cauliflower"],
        economic_potential="₹2,00,000 - ₹4,00,000 per acre annually",
        market_price="₹8,000-12,000 per quintal (vs ₹2,000-3,000 for regular)",
        expected_yield="200-250 quintals per acre",
        return_per_quintal="₹1,000-2,000 profit per quintal",
        rarity=Rarity.NICHE,
        climate_zones=["subtropical_continental", "temperate"],
        soil_requirements=["well_drained", "fertile", "pH_6_to_7"],
        investment_level=InvestmentLevel.LOW,
        profit_margin="200-300%",
        market_demand="Premium vegetable market, health food stores",
        export_potential="Good - organic and specialty vegetable markets",
        growth_period="3-4 months",
        special_benefits=[
            "Premium pricing over regular cauliflower",
            "Same growing techniques as regular",
        ],
        challenges=["Seed availability", "Market education needed"],
        success_stories=["Punjab farmers getting 4x regular cauliflower prices"],
    ),
    SpecialtyCrop(
        name="Lemongrass",
        common_name="Lemongrass (नींबू घास)",
        local_names=["Lemon Grass", "Citronella"],
        economic_potential="₹1,50,000 - ₹3,00,000 per acre annually",
        market_price="₹4,000-6,000 per quintal (fresh), ₹80,000-1,20,000 per quintal (oil)",
        expected_yield="80-100 quintals per acre (fresh)",
        return_per_quintal="₹2,000-3,000 profit per quintal (fresh)",
        rarity=Rarity.UNCOMMON,
        climate_zones=["tropical_coastal", "tropical_dry"],
        soil_requirements=["well_drained", "any_soil_type"],
        investment_level=InvestmentLevel.LOW,
        profit_margin="300-600%",
        market_demand="Essential oil industry, tea industry, cosmetics",
        export_potential="Excellent - essential oil global demand",
        growth_period="4-6 months, perennial with multiple cuts",
        special_benefits=["Multiple income streams (fresh, dried, oil)", "Very hardy crop"],
        challenges=["Oil extraction setup", "Market linkage"],
        success_stories=["Odisha farmers earning ₹2L+ per acre from oil extraction"],
    ),
    SpecialtyCrop(
        name="Moringa",
        common_name="Moringa (सहजन - Drumstick)",
        local_names=["Sahjan", "Drumstick", "മുരിങ്ങ"],
        economic_potential="₹2,50,000 - ₹5,00,000 per acre annually",
        market_price="₹15,000-20,000 per quintal (pods), ₹50,000-80,000 per quintal (powder)",
        expected_yield="120-150 quintals per acre (pods)",
        return_per_quintal="₹8,000-12,000 profit per quintal (pods)",
        rarity=Rarity.UNCOMMON,
        climate_zones=["tropical_coastal", "tropical_dry"],
        soil_requirements=["well_drained", "sandy_loam"],
        investment_level=InvestmentLevel.LOW,
        profit_margin="400-600%",
        market_demand="Superfood market, export demand, pharmaceutical",
        export_potential="Outstanding - USA, Europe health food markets",
        growth_period="8 months to production, long-term harvest",
        special_benefits=["Superfood with global demand", "Drought tolerant"],
        challenges=["Processing for export quality", "Organic certification beneficial"],
        success_stories=["Tamil Nadu farmers exporting moringa powder to USA"],
    ),
]

# States where a crop grows outside its usual climate zones (shade, irrigation, altitude).
SPECIAL_CONDITIONS: Dict[str, Sequence[str]] = {
    "Saffron": ("himachal_pradesh", "uttarakhand", "jammu_kashmir"),
    "Wasabi": ("kerala", "karnataka"),
    "Vanilla": ("kerala", "karnataka", "tamil_nadu"),
    "Dragon Fruit": ("gujarat", "maharashtra", "rajasthan"),
}

EXPORT_SCORES = {"outstanding": 30, "excellent": 25, "good": 15}
INVESTMENT_SCORES = {InvestmentLevel.LOW: 20, InvestmentLevel.MEDIUM: 15, InvestmentLevel.HIGH: 10}
RARITY_SCORES = {Rarity.EXOTIC: 25, Rarity.RARE: 20, Rarity.UNCOMMON: 15, Rarity.NICHE: 0}

_PERCENTAGES = re.compile(r"\d+")


def is_climate_suitable(crop: SpecialtyCrop, climate_zone: str, state: str) -> bool:
    if climate_zone in crop.climate_zones:
        return True
    return state.lower() in SPECIAL_CONDITIONS.get(crop.name, ())


def has_market_potential(crop: SpecialtyCrop) -> bool:
    export = crop.export_potential.lower()
    demand = crop.market_demand.lower()
    return (
        export.startswith(("excellent", "outstanding"))
        or "high" in demand
        or "premium" in demand
    )


def profit_margin_score(profit_margin: str) -> int:
    numbers = [int(value) for value in _PERCENTAGES.findall(profit_margin)]
    top = max(numbers, default=0)
    if top >= 600:
        return 50
    if top >= 400:
        return 40
    if top >= 300:
        return 30
    return 0


def specialty_score(crop: SpecialtyCrop) -> int:
    export = crop.export_potential.split(" ", 1)[0].lower()
    return (
        profit_margin_score(crop.profit_margin)
        + EXPORT_SCORES.get(export, 0)
        + INVESTMENT_SCORES[crop.investment_level]
        + RARITY_SCORES[crop.rarity]
    )


def specialty_crops_for(
    region: Region, catalog: Sequence[SpecialtyCrop] = SPECIALTY_CROPS
) -> List[SpecialtyCrop]:
    """Crops suited to the region's climate with a real market, best score first."""
    suitable = [
        crop
        for crop in catalog
        if is_climate_suitable(crop, region.climate_zone.value, region.state.value)
        and has_market_potential(crop)
    ]
    return sorted(suitable, key=specialty_score, reverse=True)


def specialty_summary(crops: Sequence[SpecialtyCrop], limit: int = MAX_SUMMARY_CROPS) -> str:
    if not crops:
        return NO_SPECIALTY_CROPS

    lines = ["HIGH-VALUE SPECIALTY CROPS (uncommon but highly profitable):"]
    for index, crop in enumerate(crops[:limit], 1):
        lines.extend(
            [
                f"{index}. {crop.common_name}",
                f"   Economic Potential: {crop.economic_potential}",
                f"   Market Price: {crop.market_price}",
                f"   Export Potential: {crop.export_potential}",
                f"   Why Special: {', '.join(crop.special_benefits[:2])}",
                f"   Considerations: {''.join(crop.challenges[:1])}",
            ]
        )
        if crop.success_stories:
            lines.append(f"   Success Story: {crop.success_stories[0]}")
    lines.append("- Suggest these alongside traditional crops, not instead of them.")
    lines.append("")
    return "\n".join(lines)
