"""Changeset application: applier and audit-stamping wrapper."""

from changeapply.apply.applier import (
    ChangeApplier,
    apply_changes,
    apply_changes_with_modifier,
    get_applier,
)

__all__ = [
    "ChangeApplier",
    "apply_changes",
    "apply_changes_with_modifier",
    "get_applier",
]
