"""
Data Models Package

All Pydantic models used in TaxViet. Everything persisted or passed
across the UI boundary conforms to one of these schemas.
"""

from taxviet.models.account import Account, normalize_identifier
from taxviet.models.action import ActionResult, NotificationKind
from taxviet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from taxviet.models.calculation import (
    CalculationInput,
    CalculationResult,
    PitMethod,
    TaxPeriod,
    round_amount,
)
from taxviet.models.preferences import Language, Preferences, ThemeMode
from taxviet.models.profile import Profile, default_profile
from taxviet.models.record import LedgerSummary, RecordStatus, TaxRecord

__all__ = [
    # Accounts and profiles
    "Account",
    "Profile",
    "default_profile",
    "normalize_identifier",
    # Calculation
    "CalculationInput",
    "CalculationResult",
    "PitMethod",
    "TaxPeriod",
    "round_amount",
    # Records
    "LedgerSummary",
    "RecordStatus",
    "TaxRecord",
    # Preferences
    "Language",
    "Preferences",
    "ThemeMode",
    # Boundary
    "ActionResult",
    "NotificationKind",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
