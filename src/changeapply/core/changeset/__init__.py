"""Changeset functionality: model and normalization."""

from changeapply.core.changeset.models import Changeset, as_changeset
from changeapply.core.changeset.operations import normalize_value, sanitize_changes

__all__ = [
    "Changeset",
    "as_changeset",
    "normalize_value",
    "sanitize_changes",
]
