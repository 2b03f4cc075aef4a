"""Tax computation package."""

from taxviet.engine.categories import DEFAULT_CATEGORIES, BusinessCategory, get_category
from taxviet.engine.tax_engine import TaxEngine

__all__ = [
    "BusinessCategory",
    "DEFAULT_CATEGORIES",
    "TaxEngine",
    "get_category",
]
