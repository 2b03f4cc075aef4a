"""
Audit Logger

DESIGN DECISION: Every boundary action is logged as a structured event.
This provides:
1. Traceability of every mutation per account scope
2. Debugging capability when a saved total looks wrong
3. A trail of rejected logins and registrations

The audit logger:
- Never raises (a logging failure must not fail the user's action)
- Maps event severity onto the log level
"""

import logging
from typing import Any, Optional

import structlog

from taxviet.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))
    logging.getLogger("taxviet").setLevel(level)


class AuditLogger:
    """Central audit logging service."""
    
    def __init__(self, logger_name: str = "taxviet.audit"):
        self._logger = structlog.get_logger(logger_name)
    
    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.
        
        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            return False
        return True
    
    def log_account_registered(self, identifier: str) -> None:
        self.log(AuditEventBuilder.account_registered(identifier))
    
    def log_registration_rejected(self, identifier: str, error_code: str) -> None:
        self.log(AuditEventBuilder.registration_rejected(identifier, error_code))
    
    def log_login_succeeded(self, identifier: str) -> None:
        self.log(AuditEventBuilder.login_succeeded(identifier))
    
    def log_login_failed(self, identifier: str, error_code: str) -> None:
        self.log(AuditEventBuilder.login_failed(identifier, error_code))
    
    def log_logged_out(self, identifier: Optional[str]) -> None:
        self.log(AuditEventBuilder.logged_out(identifier))
    
    def log_session_restored(self, identifier: str) -> None:
        self.log(AuditEventBuilder.session_restored(identifier))
    
    def log_profile_updated(self, scope: str, fields: list[str]) -> None:
        self.log(AuditEventBuilder.profile_updated(scope, fields))
    
    def log_preferences_updated(self, changes: dict[str, Any]) -> None:
        self.log(AuditEventBuilder.preferences_updated(changes))
    
    def log_tax_computed(
        self,
        scope: Optional[str],
        pit_method: str,
        period: str,
        total: str,
    ) -> None:
        self.log(AuditEventBuilder.tax_computed(scope, pit_method, period, total))
    
    def log_calculation_rejected(self, scope: Optional[str], error_message: str) -> None:
        self.log(AuditEventBuilder.calculation_rejected(scope, error_message))
    
    def log_record_saved(self, scope: str, record_id: str, tax_amount: str) -> None:
        self.log(AuditEventBuilder.record_saved(scope, record_id, tax_amount))
    
    def log_record_deleted(self, scope: str, record_id: str, existed: bool) -> None:
        self.log(AuditEventBuilder.record_deleted(scope, record_id, existed))
    
    def log_record_status_toggled(
        self,
        scope: str,
        record_id: str,
        new_status: Optional[str],
    ) -> None:
        self.log(AuditEventBuilder.record_status_toggled(scope, record_id, new_status))
    
    def log_action_rejected(
        self,
        action: str,
        error_code: str,
        error_message: str,
        scope: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.action_rejected(action, error_code, error_message, scope))
    
    def log_storage_error(
        self,
        action: str,
        error_message: str,
        scope: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.storage_error(action, error_message, scope))
