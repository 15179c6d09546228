"""Audit metadata shared by records that track who changed them.

Usage:
    @dataclass
    class WeatherReport:
        audit: AuditFields = embedded(default_factory=AuditFields)
        city: str = tag("city", default="")

    report = WeatherReport(audit=new_audit_fields("Dylan"), city="Clearwater")
    apply_changes_with_modifier({"city": "Tampa"}, "Mr. Weatherdude", report)
    report.audit.modified_by  # "Mr. Weatherdude"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from changeapply.core.schema import tag


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class AuditFields:
    """Creation and modification stamps, meant to be embedded in a record.

    Creation fields are set once when the record is built. Modification
    fields stay None until the first attributed update.
    """

    id: UUID = tag("id", default_factory=uuid4)
    created_by: str = tag("createdBy", default="")
    created_dts: datetime = tag("createdDts", default_factory=_utcnow)
    modified_by: str | None = tag("modifiedBy", default=None)
    modified_dts: datetime | None = tag("modifiedDts", default=None)

    @property
    def last_modified_by(self) -> str:
        """Most recent author: the modifier if any, the creator otherwise."""
        return self.modified_by if self.modified_by is not None else self.created_by


def new_audit_fields(created_by: str) -> AuditFields:
    """Audit stamps for a record created now by ``created_by``."""
    return AuditFields(created_by=created_by)
