"""Pure functions over changesets.

Normalization collapses ambiguous "empty" values into an explicit null so the
applier treats them as a request to clear the field.
"""

from __future__ import annotations

from changeapply.core.changeset.models import Changeset
from changeapply.core.value import ChangeValue, ValueKind


def normalize_value(value: ChangeValue) -> ChangeValue:
    """Normalize a single changeset value.

    Args:
        value: Classified value.

    Returns:
        NULL for empty strings and unset sequences, the value otherwise.
        Empty-but-present sequences are returned unchanged.
    """
    if value.kind is ValueKind.STRING and len(value.payload) == 0:
        return ChangeValue.null()
    if value.is_unset_sequence():
        return ChangeValue.null()
    return value


def sanitize_changes(changes: Changeset) -> list[str]:
    """Normalize every entry of a changeset in place.

    Args:
        changes: Changeset to rewrite.

    Returns:
        Keys whose values were rewritten to NULL, in iteration order.
    """
    rewritten: list[str] = []
    for key, value in list(changes.items()):
        normalized = normalize_value(value)
        if normalized is not value:
            changes[key] = normalized
            rewritten.append(key)
    return rewritten
