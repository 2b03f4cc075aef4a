"""
Audit Models for TaxViet

Every boundary action (registration, login, saving an estimate,
toggling a payment status...) produces an AuditEvent.
This provides:
1. Traceability of who changed what in which scope
2. Debugging information when a user reports a wrong total
3. A record of rejected attempts (duplicate registration, bad secret)

DESIGN DECISION: Audit events never carry secrets, and never carry
amounts beyond what the record itself stores.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Accounts and sessions
    ACCOUNT_REGISTERED = "account_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGGED_OUT = "logged_out"
    SESSION_RESTORED = "session_restored"
    
    # Profile and preferences
    PROFILE_UPDATED = "profile_updated"
    PREFERENCES_UPDATED = "preferences_updated"
    
    # Calculation
    TAX_COMPUTED = "tax_computed"
    CALCULATION_REJECTED = "calculation_rejected"
    
    # Records
    RECORD_SAVED = "record_saved"
    RECORD_DELETED = "record_deleted"
    RECORD_STATUS_TOGGLED = "record_status_toggled"
    
    # System events
    ACTION_REJECTED = "action_rejected"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.
    
    This is the core unit of our audit trail.
    """
    
    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO
    
    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'record')"
    )
    entity_id: Optional[str] = None
    
    # Which account scope the action happened in
    scope: Optional[str] = Field(
        default=None,
        description="Normalized identifier of the active account"
    )
    
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    
    is_user_action: bool = False
    
    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "scope": self.scope,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.
    
    Usage:
        event = AuditEventBuilder.account_registered(identifier)
        event = AuditEventBuilder.record_saved(scope, record_id, tax_amount)
    """
    
    @staticmethod
    def account_registered(identifier: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_REGISTERED,
            entity_type="account",
            entity_id=identifier,
            scope=identifier,
            description="New account registered",
            is_user_action=True,
        )
    
    @staticmethod
    def registration_rejected(identifier: str, error_code: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=identifier,
            description="Registration rejected",
            error_code=error_code,
            is_user_action=True,
        )
    
    @staticmethod
    def login_succeeded(identifier: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            entity_type="session",
            entity_id=identifier,
            scope=identifier,
            description="User logged in",
            is_user_action=True,
        )
    
    @staticmethod
    def login_failed(identifier: str, error_code: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            entity_id=identifier,
            description="Login attempt failed",
            error_code=error_code,
            is_user_action=True,
        )
    
    @staticmethod
    def logged_out(identifier: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGGED_OUT,
            entity_type="session",
            entity_id=identifier,
            description="User logged out",
            is_user_action=True,
        )
    
    @staticmethod
    def session_restored(identifier: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_RESTORED,
            entity_type="session",
            entity_id=identifier,
            scope=identifier,
            description="Previous session resumed at startup",
        )
    
    @staticmethod
    def profile_updated(scope: str, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            entity_type="profile",
            entity_id=scope,
            scope=scope,
            description=f"Profile updated ({len(fields)} fields)",
            details={"fields": fields},
            is_user_action=True,
        )
    
    @staticmethod
    def preferences_updated(changes: dict[str, Any]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_UPDATED,
            entity_type="preferences",
            description="Preferences updated",
            details=changes,
            is_user_action=True,
        )
    
    @staticmethod
    def tax_computed(
        scope: Optional[str],
        pit_method: str,
        period: str,
        total: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TAX_COMPUTED,
            entity_type="calculation",
            scope=scope,
            description=f"Tax computed with {pit_method} method",
            details={
                "pit_method": pit_method,
                "period": period,
                "total": total,
            },
        )
    
    @staticmethod
    def calculation_rejected(
        scope: Optional[str],
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CALCULATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="calculation",
            scope=scope,
            description="Calculation input rejected",
            error_code="invalid_input",
            error_message=error_message,
        )
    
    @staticmethod
    def record_saved(scope: str, record_id: str, tax_amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SAVED,
            entity_type="record",
            entity_id=record_id,
            scope=scope,
            description=f"Estimate saved: {tax_amount}",
            details={"tax_amount": tax_amount},
            is_user_action=True,
        )
    
    @staticmethod
    def record_deleted(scope: str, record_id: str, existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type="record",
            entity_id=record_id,
            scope=scope,
            description="Record deleted" if existed else "Delete of unknown record ignored",
            details={"existed": existed},
            is_user_action=True,
        )
    
    @staticmethod
    def record_status_toggled(
        scope: str,
        record_id: str,
        new_status: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_STATUS_TOGGLED,
            entity_type="record",
            entity_id=record_id,
            scope=scope,
            description=(
                f"Record marked {new_status}" if new_status
                else "Toggle of unknown record ignored"
            ),
            details={"new_status": new_status},
            is_user_action=True,
        )
    
    @staticmethod
    def action_rejected(
        action: str,
        error_code: str,
        error_message: str,
        scope: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            scope=scope,
            description=f"Action rejected: {action}",
            error_code=error_code,
            error_message=error_message,
            details={"action": action},
        )
    
    @staticmethod
    def storage_error(
        action: str,
        error_message: str,
        scope: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            scope=scope,
            description=f"Storage failure during {action}",
            error_code="storage_error",
            error_message=error_message,
            details={"action": action},
        )
