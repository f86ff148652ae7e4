from fastapi import APIRouter
from typing import List

from .. import pricing, schemas

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.get("/categories", response_model=List[schemas.CategoryRead])
def read_categories():
    return [
        schemas.CategoryRead(name=name, **config)
        for name, config in pricing.STORAGE_CATEGORIES_CONFIG.items()
    ]


@router.get("/check", response_model=schemas.PriceCheckRead)
def check_price(category: str, price: float):
    """
    Advisory only: tells a provider whether a price sits in the usual band
    for a storage category.
    """
    bounds = pricing.is_price_in_bounds(category, price)
    return schemas.PriceCheckRead(
        category=category,
        price=price,
        in_bounds=bounds.in_bounds,
        min=bounds.min,
        max=bounds.max,
    )
