"""
Tax Engine

Pure computation: no storage, no session, no logging.

Both methods apply the same two rates to a taxable base:
- THRESHOLD: the base is gross revenue; expenses are ignored.
- EXPENSE: the base is revenue minus expenses, floored at zero.

The result is VAT = base * vat_rate and PIT = base * pit_rate,
kept at full Decimal precision. Rounding is the caller's job,
at presentation time.

Example (expense method):
    revenue 100,000,000 - expenses 20,000,000 = base 80,000,000
    VAT 1%   -> 800,000
    PIT 0.5% -> 400,000
    total    -> 1,200,000
"""

from decimal import Decimal
from typing import Optional

from taxviet.engine.categories import DEFAULT_CATEGORIES, BusinessCategory, get_category
from taxviet.errors import InvalidInputError
from taxviet.models.calculation import (
    CalculationInput,
    CalculationResult,
    PitMethod,
    TaxPeriod,
)
from taxviet.models.profile import Profile


ZERO = Decimal("0")
ONE = Decimal("1")


class TaxEngine:
    """Computes VAT + PIT estimates for a household business."""
    
    def __init__(self, categories: tuple[BusinessCategory, ...] = DEFAULT_CATEGORIES):
        self._categories = categories
    
    @property
    def categories(self) -> tuple[BusinessCategory, ...]:
        return self._categories
    
    def compute(self, calc_input: CalculationInput) -> CalculationResult:
        """
        Compute the tax for one period.
        
        Raises:
            InvalidInputError: Negative revenue or expenses, or a rate
                               outside [0, 1]
        """
        self._validate(calc_input)
        
        base = self.taxable_base(calc_input)
        return CalculationResult(
            input=calc_input,
            taxable_base=base,
            vat_amount=base * calc_input.vat_rate,
            pit_amount=base * calc_input.pit_rate,
        )
    
    @staticmethod
    def taxable_base(calc_input: CalculationInput) -> Decimal:
        if calc_input.pit_method == PitMethod.EXPENSE:
            return max(calc_input.revenue - calc_input.expenses, ZERO)
        return calc_input.revenue
    
    def estimate_for_profile(
        self,
        profile: Profile,
        revenue: Decimal,
        expenses: Decimal = ZERO,
        period: TaxPeriod = TaxPeriod.YEAR,
        pit_method: PitMethod = PitMethod.THRESHOLD,
    ) -> CalculationResult:
        """Compute using the rates and category stored in a profile."""
        category = get_category(profile.business_category_id, self._categories)
        return self.compute(CalculationInput(
            revenue=revenue,
            expenses=expenses,
            category_label=category.label if category else "",
            vat_rate=profile.vat_rate,
            pit_rate=profile.pit_rate,
            period=period,
            pit_method=pit_method,
        ))
    
    def category_for(self, category_id: str) -> Optional[BusinessCategory]:
        return get_category(category_id, self._categories)
    
    @staticmethod
    def _validate(calc_input: CalculationInput) -> None:
        for name in ("revenue", "expenses"):
            amount = getattr(calc_input, name)
            if not amount.is_finite():
                raise InvalidInputError(name, "must be a finite number")
            if amount < ZERO:
                raise InvalidInputError(name, "must not be negative")
        
        for name in ("vat_rate", "pit_rate"):
            rate = getattr(calc_input, name)
            if not rate.is_finite() or not ZERO <= rate <= ONE:
                raise InvalidInputError(name, "must be between 0 and 1")
