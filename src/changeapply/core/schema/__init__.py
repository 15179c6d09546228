"""Schema functionality: tag resolution, capability protocols, and registry."""

from changeapply.core.schema.core import (
    SchemaRegistry,
    embedded,
    find_scalar_decoder,
    get_registry,
    is_record_type,
    register_scalar_decoder,
    split_optional,
    tag,
    union_members,
    validates_assignment,
    zero_factory,
)
from changeapply.core.schema.models import (
    FieldDescriptor,
    RecordSchema,
    ScalarDecoder,
    ZeroValue,
)

__all__ = [
    # Models
    "FieldDescriptor",
    "RecordSchema",
    "ScalarDecoder",
    "ZeroValue",
    # Core
    "SchemaRegistry",
    "get_registry",
    "tag",
    "embedded",
    "register_scalar_decoder",
    "find_scalar_decoder",
    "is_record_type",
    "split_optional",
    "union_members",
    "validates_assignment",
    "zero_factory",
]
