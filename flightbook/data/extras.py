"""
Ancillary products offered during the extras step
"""
from typing import Any, Dict, Optional

BAGGAGE_WEIGHTS = [5, 10, 15, 20, 25, 32]
BAGGAGE_PRICE_PER_KG = 10

MEAL_OPTIONS = [
    {"type": "standard", "label": "Standard Meal", "price": 15},
    {"type": "vegetarian", "label": "Vegetarian", "price": 15},
    {"type": "vegan", "label": "Vegan", "price": 15},
    {"type": "halal", "label": "Halal", "price": 15},
    {"type": "kosher", "label": "Kosher", "price": 18},
    {"type": "gluten-free", "label": "Gluten-Free", "price": 18},
    {"type": "diabetic", "label": "Diabetic", "price": 18},
]

INSURANCE_OPTIONS = [
    {"type": "basic", "coverage": 50000, "price": 25},
    {"type": "comprehensive", "coverage": 100000, "price": 50},
]

LOUNGE_ACCESS_PRICE = 45


def extras_catalog() -> Dict[str, Any]:
    return {
        "baggage": [{"weight": w, "price": w * BAGGAGE_PRICE_PER_KG} for w in BAGGAGE_WEIGHTS],
        "meals": MEAL_OPTIONS,
        "insurance": INSURANCE_OPTIONS,
        "loungeAccess": {"price": LOUNGE_ACCESS_PRICE},
    }


def baggage_price(weight: int) -> Optional[int]:
    if weight not in BAGGAGE_WEIGHTS:
        return None
    return weight * BAGGAGE_PRICE_PER_KG


def meal_price(meal_type: str) -> Optional[int]:
    for option in MEAL_OPTIONS:
        if option["type"] == meal_type:
            return option["price"]
    return None


def insurance_option(insurance_type: str) -> Optional[Dict[str, Any]]:
    for option in INSURANCE_OPTIONS:
        if option["type"] == insurance_type:
            return option
    return None
