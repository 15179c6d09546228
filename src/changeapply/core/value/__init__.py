"""Change value functionality: the tagged variant over changeset value kinds."""

from changeapply.core.value.models import UNSET_SEQUENCE, ChangeValue, ValueKind

__all__ = [
    "ChangeValue",
    "ValueKind",
    "UNSET_SEQUENCE",
]
