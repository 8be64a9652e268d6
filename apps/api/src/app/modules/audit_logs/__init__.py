"""Audit logs module."""

from app.modules.audit_logs.models import AuditLog
from app.modules.audit_logs.router import router

__all__ = ["AuditLog", "router"]
