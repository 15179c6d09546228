"""Change value models: the tagged variant carried by every changeset entry.

Usage:
    value = ChangeValue.of("Thunderstorms")
    value.kind  # ValueKind.STRING

    ChangeValue.of(UNSET_SEQUENCE).is_unset_sequence()  # True
    ChangeValue.of([]).is_unset_sequence()  # False (present but empty)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class ValueKind(Enum):
    """Closed set of shapes a changeset value can take."""

    NULL = auto()  # Explicit "clear this field"
    STRING = auto()
    NUMBER = auto()  # int or float, never bool
    BOOLEAN = auto()
    SEQUENCE = auto()  # payload is a tuple, or None when unset
    MAPPING = auto()  # payload is dict[str, ChangeValue]
    NATIVE = auto()  # already-typed Python object (datetime, UUID, records, ...)


class _UnsetSequence:
    """Marker for a sequence reference that was never set."""

    _instance: _UnsetSequence | None = None

    def __new__(cls) -> _UnsetSequence:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET_SEQUENCE"

    def __bool__(self) -> bool:
        return False


UNSET_SEQUENCE = _UnsetSequence()
"""Raw value standing for an unset sequence, as opposed to an empty one."""


@dataclass(frozen=True, slots=True)
class ChangeValue:
    """A classified changeset value.

    Classification happens once, when the raw value enters a changeset. The
    rest of the pipeline dispatches on ``kind`` rather than inspecting types.

    Attributes:
        kind: Shape of the value.
        payload: Normalized payload. Sequences hold a tuple of ChangeValue
            (or None when unset), mappings a dict of ChangeValue.
    """

    kind: ValueKind
    payload: Any = None

    @classmethod
    def of(cls, raw: Any) -> ChangeValue:
        """Classify a raw Python value.

        Args:
            raw: Value as produced by a JSON-like decoder, or a native object.

        Returns:
            The classified value. ChangeValue inputs are returned unchanged.

        Raises:
            TypeError: If a mapping value has non-string keys.
        """
        if isinstance(raw, ChangeValue):
            return raw
        if raw is None:
            return cls.null()
        if raw is UNSET_SEQUENCE:
            return cls.unset_sequence()
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        # bool is a subclass of int, so it must be checked first
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, (int, float)):
            return cls(ValueKind.NUMBER, raw)
        if isinstance(raw, (list, tuple)):
            return cls(ValueKind.SEQUENCE, tuple(cls.of(item) for item in raw))
        if isinstance(raw, Mapping):
            items: dict[str, ChangeValue] = {}
            for key, item in raw.items():
                if not isinstance(key, str):
                    raise TypeError(f"Mapping keys must be str, got {type(key).__name__}")
                items[key] = cls.of(item)
            return cls(ValueKind.MAPPING, items)
        return cls(ValueKind.NATIVE, raw)

    @classmethod
    def null(cls) -> ChangeValue:
        """Explicit null marker."""
        return cls(ValueKind.NULL, None)

    @classmethod
    def unset_sequence(cls) -> ChangeValue:
        """Sequence whose reference was never set."""
        return cls(ValueKind.SEQUENCE, None)

    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def is_unset_sequence(self) -> bool:
        return self.kind is ValueKind.SEQUENCE and self.payload is None

    def to_python(self) -> Any:
        """Unwrap to plain Python data.

        Returns:
            None for nulls, lists for sequences (None when unset), dicts for
            mappings, the payload otherwise.
        """
        if self.kind is ValueKind.SEQUENCE:
            if self.payload is None:
                return None
            return [item.to_python() for item in self.payload]
        if self.kind is ValueKind.MAPPING:
            return {key: item.to_python() for key, item in self.payload.items()}
        return self.payload
