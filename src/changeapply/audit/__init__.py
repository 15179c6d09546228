"""Audit metadata for records."""

from changeapply.audit.models import AuditFields, new_audit_fields

__all__ = [
    "AuditFields",
    "new_audit_fields",
]
