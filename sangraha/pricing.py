"""
Price resolution and cost calculation.

Pure functions, no database access. Nothing here raises: bad input is coerced
to a sane default so pricing can never block a booking. Rounding is left to
whoever displays the numbers.
"""
from typing import NamedTuple

GLOBAL_DEFAULT_PRICE = 1.0

# Wide range reported for categories we have no bounds for
UNKNOWN_CATEGORY_MIN = 0.1
UNKNOWN_CATEGORY_MAX = 10.0

# Per-kg-per-day price bands by produce storage category
STORAGE_CATEGORIES_CONFIG: dict[str, dict[str, float]] = {
    "Fruits & Vegetables": {"min": 0.8, "max": 1.2, "default": 1.0},
    "Dairy Products": {"min": 1.5, "max": 2.5, "default": 2.0},
    "Frozen Goods": {"min": 3.0, "max": 5.0, "default": 4.0},
    "Grains": {"min": 0.8, "max": 1.5, "default": 1.0},
    "Multi-purpose Storage": {"min": 0.8, "max": 1.5, "default": 1.0},
}


class PriceBounds(NamedTuple):
    in_bounds: bool
    min: float
    max: float


def _to_float(value) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def default_price_for_category(category) -> float:
    config = STORAGE_CATEGORIES_CONFIG.get(category) if isinstance(category, str) else None
    if config is None:
        return GLOBAL_DEFAULT_PRICE
    return config["default"]


def resolve_price(facility_price, category) -> float:
    """
    Facility override wins when it is a positive number, then the category
    default, then the global fallback.
    """
    price = _to_float(facility_price)
    if price is not None and price > 0:
        return price
    return default_price_for_category(category)


def compute_total_cost(quantity, price, duration_days) -> float:
    quantity = _to_float(quantity) or 0.0
    price = _to_float(price) or 0.0
    duration_days = _to_float(duration_days) or 0.0
    return quantity * price * duration_days


def is_price_in_bounds(category, price) -> PriceBounds:
    config = STORAGE_CATEGORIES_CONFIG.get(category) if isinstance(category, str) else None
    if config is None:
        return PriceBounds(True, UNKNOWN_CATEGORY_MIN, UNKNOWN_CATEGORY_MAX)
    value = _to_float(price)
    in_bounds = value is not None and config["min"] <= value <= config["max"]
    return PriceBounds(in_bounds, config["min"], config["max"])
