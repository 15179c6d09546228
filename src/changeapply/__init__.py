"""changeapply: apply sparse changesets onto typed records.

Usage:
    from dataclasses import dataclass
    from changeapply import apply_changes_with_modifier, tag

    @dataclass
    class WeatherReport:
        city: str = tag("city", default="")
        weather: str = tag("weather", default="")
        modified_by: str | None = tag("modifiedBy", default=None)

    report = WeatherReport(city="Clearwater", weather="Hot and sunny")
    apply_changes_with_modifier({"weather": "Thunderstorms"}, "Mr. Weatherdude", report)
    report.weather  # "Thunderstorms"
"""

__version__ = "0.1.0"

# Application
from changeapply.apply import (
    ChangeApplier,
    apply_changes,
    apply_changes_with_modifier,
    get_applier,
)

# Audit
from changeapply.audit import AuditFields, new_audit_fields

# Configuration
from changeapply.config import ChangesetSettings, get_settings

# Core primitives
from changeapply.core import (
    UNSET_SEQUENCE,
    ChangeValue,
    Changeset,
    ChangesetConfigurationError,
    ChangesetError,
    FieldDescriptor,
    RecordSchema,
    ScalarDecoder,
    SchemaRegistry,
    UnknownFieldError,
    ValueCoercionError,
    ValueKind,
    ZeroValue,
    embedded,
    format_timestamp,
    get_registry,
    parse_timestamp,
    register_scalar_decoder,
    sanitize_changes,
    tag,
)

# Logging
from changeapply.observability import get_logger, setup_logging

__all__ = [
    # Version
    "__version__",
    # Core
    "Changeset",
    "ChangeValue",
    "ValueKind",
    "UNSET_SEQUENCE",
    "sanitize_changes",
    "tag",
    "embedded",
    "ScalarDecoder",
    "ZeroValue",
    "register_scalar_decoder",
    "SchemaRegistry",
    "RecordSchema",
    "FieldDescriptor",
    "get_registry",
    "parse_timestamp",
    "format_timestamp",
    # Errors
    "ChangesetError",
    "UnknownFieldError",
    "ValueCoercionError",
    "ChangesetConfigurationError",
    # Application
    "ChangeApplier",
    "apply_changes",
    "apply_changes_with_modifier",
    "get_applier",
    # Audit
    "AuditFields",
    "new_audit_fields",
    # Configuration
    "ChangesetSettings",
    "get_settings",
    # Logging
    "setup_logging",
    "get_logger",
]
