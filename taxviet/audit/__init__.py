"""Audit logging package."""

from taxviet.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
