"""
Business Categories

Household businesses pay VAT and PIT as fixed percentages of revenue,
with the percentages depending on the line of business. The catalogue
below holds the default rates per category.

DESIGN DECISION: Rates are configurable constants. They are not checked
against current regulation; a profile may override them freely.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BusinessCategory(BaseModel):
    """A line of business and its default rates."""
    model_config = ConfigDict(frozen=True)
    
    id: str
    label: str
    label_en: str
    vat_rate: Decimal = Field(..., ge=0, le=1)
    pit_rate: Decimal = Field(..., ge=0, le=1)


DEFAULT_CATEGORIES: tuple[BusinessCategory, ...] = (
    BusinessCategory(
        id="1",
        label="Phân phối, cung cấp hàng hóa",
        label_en="Distribution and supply of goods",
        vat_rate=Decimal("0.01"),
        pit_rate=Decimal("0.005"),
    ),
    BusinessCategory(
        id="2",
        label="Dịch vụ, xây dựng không bao thầu nguyên vật liệu",
        label_en="Services and construction without supply of materials",
        vat_rate=Decimal("0.05"),
        pit_rate=Decimal("0.02"),
    ),
    BusinessCategory(
        id="3",
        label="Sản xuất, vận tải, dịch vụ có gắn với hàng hóa",
        label_en="Manufacturing, transport and services tied to goods",
        vat_rate=Decimal("0.03"),
        pit_rate=Decimal("0.015"),
    ),
    BusinessCategory(
        id="4",
        label="Hoạt động kinh doanh khác",
        label_en="Other business activities",
        vat_rate=Decimal("0.02"),
        pit_rate=Decimal("0.01"),
    ),
)


def get_category(
    category_id: str,
    categories: tuple[BusinessCategory, ...] = DEFAULT_CATEGORIES,
) -> Optional[BusinessCategory]:
    for category in categories:
        if category.id == category_id:
            return category
    return None
