"""
TaxViet - Source Package

A personal tax-estimation assistant for household businesses:
register, enter revenue and expenses, get a VAT + PIT estimate,
and keep a per-user history of saved estimates.

DESIGN PRINCIPLES:
1. The tax engine is pure - no storage, no side effects
2. Every user's data lives in its own namespace
3. Failures are reported to the user, never fatal
4. Every boundary action is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "TaxViet Team"
