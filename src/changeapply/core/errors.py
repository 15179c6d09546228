"""Errors raised while applying a changeset to a record."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class ChangesetError(Exception):
    """Base class for changeset application failures."""

    pass


class UnknownFieldError(ChangesetError):
    """Raised when a changeset names tags the target record does not have.

    Attributes:
        keys: Offending tags, sorted.
    """

    def __init__(self, keys: Iterable[str], record_type: type | None = None) -> None:
        self.keys: tuple[str, ...] = tuple(sorted(keys))
        self.record_type = record_type
        target = f" on {record_type.__name__}" if record_type is not None else ""
        super().__init__(f"Unknown field(s){target}: {', '.join(self.keys)}")


class ValueCoercionError(ChangesetError):
    """Raised when a value cannot be converted to its field's declared type.

    Attributes:
        field: Tag of the field being written.
        value: Offending source value (plain Python data).
        reason: Human-readable cause.
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot set field '{field}' from {value!r}: {reason}")


class ChangesetConfigurationError(ChangesetError):
    """Raised when a target or record type cannot be used with the applier.

    This is a programming error (frozen record, duplicate tags, ...), not a
    problem with the changeset contents.
    """

    pass
