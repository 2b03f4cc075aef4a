"""
Tax Record Models

A TaxRecord is a saved estimate in a user's transaction history.
It is only ever created from a computed result; afterwards the only
mutation is flipping its payment status.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecordStatus(str, Enum):
    """Payment status of a saved estimate."""
    PAID = "paid"
    PENDING = "pending"
    
    def toggled(self) -> "RecordStatus":
        if self is RecordStatus.PAID:
            return RecordStatus.PENDING
        return RecordStatus.PAID


class TaxRecord(BaseModel):
    """One entry of the per-user history, newest first."""
    model_config = ConfigDict(populate_by_name=True)
    
    id: str = Field(..., min_length=1)
    label: str = Field(
        ...,
        alias="month",
        description="Period and save date, e.g. 'Dự toán Năm 2026 (19/10/2026)'"
    )
    revenue: Decimal = Field(..., ge=0)
    tax_amount: Decimal = Field(..., ge=0, alias="taxAmount")
    status: RecordStatus = RecordStatus.PENDING
    
    def with_toggled_status(self) -> "TaxRecord":
        return self.model_copy(update={"status": self.status.toggled()})
    
    def to_storage_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class LedgerSummary(BaseModel):
    """Totals over a user's history, as shown on the dashboard."""
    
    record_count: int = Field(ge=0)
    total_revenue: Decimal = Field(default=Decimal("0"), ge=0)
    total_tax: Decimal = Field(default=Decimal("0"), ge=0)
    tax_paid: Decimal = Field(default=Decimal("0"), ge=0)
    tax_pending: Decimal = Field(default=Decimal("0"), ge=0)
