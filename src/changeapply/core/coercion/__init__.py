"""Coercion functionality: ordered rules turning changeset values into field values."""

from changeapply.core.coercion.operations import (
    coerce_field,
    coerce_to_type,
    plan_changes,
    write_changes,
)

__all__ = [
    "coerce_field",
    "coerce_to_type",
    "plan_changes",
    "write_changes",
]
