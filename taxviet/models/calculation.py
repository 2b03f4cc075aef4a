"""
Tax Engine Boundary Models

CalculationInput is what the calculator form submits.
CalculationResult is what the engine returns: the VAT and PIT
components at full precision plus the input it was computed from,
which is needed to label a saved record.

DESIGN DECISION: Sign and range checks on the input are done by the
engine, not by field constraints, so that a negative amount surfaces
as InvalidInputError rather than a generic validation error.
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TaxPeriod(str, Enum):
    """Period an estimate covers. Only affects the record label."""
    QUARTER = "quarter"
    YEAR = "year"


class PitMethod(str, Enum):
    """
    How the taxable base is derived.
    
    THRESHOLD: flat rates on gross revenue (presumptive tax).
    EXPENSE: rates on revenue net of deductible expenses, floored at zero.
    """
    THRESHOLD = "threshold"
    EXPENSE = "expense"


class CalculationInput(BaseModel):
    """Figures submitted from the calculator."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    
    revenue: Decimal
    expenses: Decimal = Decimal("0")
    category_label: str = Field(default="", alias="categoryLabel")
    vat_rate: Decimal = Field(..., alias="vatRate")
    pit_rate: Decimal = Field(..., alias="pitRate")
    period: TaxPeriod = TaxPeriod.YEAR
    pit_method: PitMethod = Field(default=PitMethod.THRESHOLD, alias="pitMethod")


def round_amount(amount: Decimal, places: int = 0) -> Decimal:
    """Round a monetary amount for presentation."""
    quantum = Decimal(1).scaleb(-places)
    return amount.quantize(quantum, rounding=ROUND_HALF_UP)


class CalculationResult(BaseModel):
    """
    Output of TaxEngine.compute().
    
    All amounts are unrounded. Use the rounded_* helpers at the
    presentation boundary.
    """
    model_config = ConfigDict(frozen=True)
    
    input: CalculationInput
    taxable_base: Decimal = Field(..., ge=0)
    vat_amount: Decimal = Field(..., ge=0)
    pit_amount: Decimal = Field(..., ge=0)
    
    @property
    def total(self) -> Decimal:
        return self.vat_amount + self.pit_amount
    
    @property
    def period(self) -> TaxPeriod:
        return self.input.period
    
    def rounded_total(self, places: int = 0) -> Decimal:
        return round_amount(self.total, places)
    
    def rounded_breakdown(self, places: int = 0) -> dict[str, Decimal]:
        """VAT, PIT and total rounded for display."""
        return {
            "vat": round_amount(self.vat_amount, places),
            "pit": round_amount(self.pit_amount, places),
            "total": self.rounded_total(places),
        }
