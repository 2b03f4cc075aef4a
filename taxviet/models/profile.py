"""
Profile Model

One profile per account. A profile is synthesized from defaults the
first time it is read and only written to storage on an explicit update.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from taxviet.config import get_settings


DEFAULT_DISPLAY_NAME = "Người dùng mới"
FALLBACK_DISPLAY_NAME = "Người dùng"
DEFAULT_TAX_ID = "Chưa cập nhật"
DEFAULT_BUSINESS_TYPE = "Hộ kinh doanh cá thể"
DEFAULT_AVATAR_URL = "https://picsum.photos/seed/taxviet/100/100"


class Profile(BaseModel):
    """Business profile of a household business owner."""
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
    )
    
    display_name: str = Field(..., min_length=1, max_length=200, alias="name")
    tax_id_number: str = Field(
        default=DEFAULT_TAX_ID,
        max_length=50,
        alias="mst",
        description="Personal tax code (MST)"
    )
    business_type: str = Field(default=DEFAULT_BUSINESS_TYPE, alias="type")
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")
    business_category_id: str = Field(..., alias="businessCategoryId")
    vat_rate: Decimal = Field(..., ge=0, le=1, alias="vatRate")
    pit_rate: Decimal = Field(..., ge=0, le=1, alias="pitRate")
    
    def to_storage_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def default_profile(display_name: Optional[str] = None) -> Profile:
    """
    Build the default profile template.
    
    Args:
        display_name: Name to show. Defaults to the generic new-user name.
    """
    tax = get_settings().tax
    return Profile(
        display_name=display_name or DEFAULT_DISPLAY_NAME,
        tax_id_number=DEFAULT_TAX_ID,
        business_type=DEFAULT_BUSINESS_TYPE,
        avatar_url=DEFAULT_AVATAR_URL,
        business_category_id=tax.default_category_id,
        vat_rate=tax.default_vat_rate,
        pit_rate=tax.default_pit_rate,
    )
