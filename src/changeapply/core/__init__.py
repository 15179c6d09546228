"""Core functionalities: changeset values, schemas, and coercion rules.

Architecture Note:
    core/ contains the pure building blocks: classification of changeset
    values, normalization, tag-to-field resolution, and coercion. Writing to a
    target record happens in apply/.
"""

from changeapply.core.changeset import Changeset, as_changeset, normalize_value, sanitize_changes
from changeapply.core.coercion import coerce_field, coerce_to_type, plan_changes, write_changes
from changeapply.core.errors import (
    ChangesetConfigurationError,
    ChangesetError,
    UnknownFieldError,
    ValueCoercionError,
)
from changeapply.core.schema import (
    FieldDescriptor,
    RecordSchema,
    ScalarDecoder,
    SchemaRegistry,
    ZeroValue,
    embedded,
    find_scalar_decoder,
    get_registry,
    register_scalar_decoder,
    tag,
)
from changeapply.core.timestamps import ZERO_TIMESTAMP, format_timestamp, parse_timestamp
from changeapply.core.value import UNSET_SEQUENCE, ChangeValue, ValueKind

__all__ = [
    # Value
    "ChangeValue",
    "ValueKind",
    "UNSET_SEQUENCE",
    # Changeset
    "Changeset",
    "as_changeset",
    "normalize_value",
    "sanitize_changes",
    # Schema
    "FieldDescriptor",
    "RecordSchema",
    "ScalarDecoder",
    "ZeroValue",
    "SchemaRegistry",
    "get_registry",
    "tag",
    "embedded",
    "register_scalar_decoder",
    "find_scalar_decoder",
    # Coercion
    "coerce_field",
    "coerce_to_type",
    "plan_changes",
    "write_changes",
    # Timestamps
    "ZERO_TIMESTAMP",
    "parse_timestamp",
    "format_timestamp",
    # Errors
    "ChangesetError",
    "UnknownFieldError",
    "ValueCoercionError",
    "ChangesetConfigurationError",
]
