# services/pricing.py
from utils.errors import BadRequestError

BASE_SHIPPING_COST = 10

CARGO_SURCHARGES = {
    "general": 0,
    "fragile": 5,
    "perishable": 8,
    "dangerous": 15,
}

# Monthly rate per travel class
BASE_MONTHLY_RATES = {
    "economy": 45,
    "business": 75,
    "first": 120,
}

# Longer plans embed a bulk discount (quarterly 10%, biannual 15%, annual 20%)
PASS_TYPE_MULTIPLIERS = {
    "monthly": 1,
    "quarterly": 2.7,
    "biannual": 5.1,
    "annual": 9.6,
}


def calculate_shipping_cost(weight, cargo_type, from_station=None, to_station=None):
    """Shipping cost: base 10 + 1 per kg + cargo type surcharge.

    The route is accepted but not priced yet.
    """
    if weight is None:
        weight = 1
    if cargo_type is None:
        cargo_type = "general"
    if weight < 0:
        raise BadRequestError("Weight cannot be negative")
    if cargo_type not in CARGO_SURCHARGES:
        raise BadRequestError(f"Invalid cargo type. Must be one of: {', '.join(CARGO_SURCHARGES)}")

    return round(BASE_SHIPPING_COST + weight + CARGO_SURCHARGES[cargo_type], 2)


def calculate_pass_cost(pass_type, travel_class, from_station=None, to_station=None):
    """Season pass cost: monthly class rate times the plan multiplier."""
    pass_type = pass_type or "monthly"
    travel_class = travel_class or "economy"
    if pass_type not in PASS_TYPE_MULTIPLIERS:
        raise BadRequestError(f"Invalid pass type. Must be one of: {', '.join(PASS_TYPE_MULTIPLIERS)}")
    if travel_class not in BASE_MONTHLY_RATES:
        raise BadRequestError(f"Invalid class. Must be one of: {', '.join(BASE_MONTHLY_RATES)}")

    return round(BASE_MONTHLY_RATES[travel_class] * PASS_TYPE_MULTIPLIERS[pass_type], 2)
